from typing import Optional
import logging

from ..backend.base import AuthClient, AuthSession
from ..core.errors import AuthClientError
from ..schemas.user import SessionView
from .registry import ManagerRegistry

logger = logging.getLogger(__name__)


class SessionGate:
    """Login view without a session, the task list with one."""

    def __init__(self, auth: AuthClient, registry: ManagerRegistry):
        self.auth = auth
        self.registry = registry

    async def resolve(self, access_token: Optional[str]) -> Optional[AuthSession]:
        if not access_token:
            return None
        return await self.auth.get_session(access_token)

    def view(self, session: Optional[AuthSession]) -> SessionView:
        if session is None:
            return SessionView(view="login")
        return SessionView(view="tasks", user_id=session.user_id)

    async def sign_out(self, session: AuthSession) -> None:
        await self.registry.unmount(session)
        try:
            await self.auth.sign_out(session)
        except AuthClientError as exc:
            logger.error("Error logging out: %s", exc.message)
