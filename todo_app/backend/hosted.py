"""
Hosted backend: Supabase auth (GoTrue) for identity, PostgREST for the todos table.

Every table client is authorized with the signed-in user's access token, so
the project's row-level security decides what each user may read and write.
"""
from typing import List, Optional
import logging
import uuid

import httpx
from postgrest import AsyncPostgrestClient
from postgrest.exceptions import APIError
from supabase import AuthError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from ..core.config import Settings
from ..core.errors import AuthClientError, ConfirmationRequired, StoreError
from .base import NOT_FOUND_CODE, AuthSession, Backend, Row

logger = logging.getLogger(__name__)

TABLE = "todos"
NOT_FOUND_MESSAGE = "JSON object requested, multiple (or no) rows returned"
CONFIRMATION_SENT = "Check your email for the confirmation link"


def _api_error(exc: APIError) -> StoreError:
    return StoreError(exc.message or str(exc), code=exc.code)


class HostedTodoTable:
    def __init__(self, client: AsyncPostgrestClient):
        self.client = client
        self.closed = False

    async def _run(self, query) -> List[Row]:
        if self.closed:
            raise StoreError("Table client is closed")
        try:
            response = await query.execute()
        except APIError as exc:
            raise _api_error(exc) from exc
        except httpx.HTTPError as exc:
            raise StoreError(f"Network error: {exc}") from exc
        except RuntimeError as exc:
            # httpx refuses to send once the client has been closed mid-request
            raise StoreError(str(exc)) from exc
        return list(response.data or [])

    @staticmethod
    def _single(rows: List[Row]) -> Row:
        if len(rows) != 1:
            raise StoreError(NOT_FOUND_MESSAGE, code=NOT_FOUND_CODE)
        return rows[0]

    async def select_all(self) -> List[Row]:
        return await self._run(self.client.from_(TABLE).select("*").order("id", desc=False))

    async def insert(self, values: Row) -> Row:
        payload = dict(values)
        if "user_id" in payload:
            payload["user_id"] = str(payload["user_id"])
        return self._single(await self._run(self.client.from_(TABLE).insert(payload)))

    async def update(self, task_id: int, values: Row) -> Row:
        return self._single(await self._run(self.client.from_(TABLE).update(values).eq("id", task_id)))

    async def delete(self, task_id: int) -> None:
        # Deleting nothing is not an error for PostgREST; report it like the single-row case
        self._single(await self._run(self.client.from_(TABLE).delete().eq("id", task_id)))

    async def aclose(self) -> None:
        self.closed = True
        await self.client.aclose()


def _options() -> AsyncClientOptions:
    # The server never keeps a user's session in the client itself
    return AsyncClientOptions(persist_session=False, auto_refresh_token=False)


class HostedAuthClient:
    def __init__(self, settings: Settings, client):
        self.settings = settings
        self.client = client

    async def _fresh_client(self):
        return await acreate_client(self.settings.SUPABASE_URL, self.settings.SUPABASE_ANON_KEY, options=_options())

    @staticmethod
    def _to_session(response) -> AuthSession:
        if response.session is None or response.user is None:
            raise AuthClientError("Email not confirmed", status=400)
        return AuthSession(
            user_id=uuid.UUID(str(response.user.id)),
            access_token=response.session.access_token,
            email=response.user.email,
        )

    async def sign_in(self, email: str, password: str) -> AuthSession:
        client = await self._fresh_client()
        try:
            response = await client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as exc:
            raise AuthClientError(exc.message, status=getattr(exc, "status", None)) from exc
        finally:
            await client.auth.close()
        return self._to_session(response)

    async def sign_up(self, email: str, password: str) -> AuthSession:
        client = await self._fresh_client()
        try:
            response = await client.auth.sign_up({"email": email, "password": password})
        except AuthError as exc:
            raise AuthClientError(exc.message, status=getattr(exc, "status", None)) from exc
        finally:
            await client.auth.close()
        if response.session is None and response.user is not None:
            raise ConfirmationRequired(CONFIRMATION_SENT, user_id=uuid.UUID(str(response.user.id)))
        return self._to_session(response)

    async def get_session(self, access_token: str) -> Optional[AuthSession]:
        try:
            response = await self.client.auth.get_user(access_token)
        except AuthError as exc:
            logger.debug("Rejected access token: %s", exc.message)
            return None
        if response is None or response.user is None:
            return None
        return AuthSession(
            user_id=uuid.UUID(str(response.user.id)),
            access_token=access_token,
            email=response.user.email,
        )

    async def sign_out(self, session: AuthSession) -> None:
        try:
            await self.client.auth.admin.sign_out(session.access_token)
        except AuthError as exc:
            raise AuthClientError(exc.message, status=getattr(exc, "status", None)) from exc

    async def aclose(self) -> None:
        await self.client.auth.close()


def _table_factory(settings: Settings):
    rest_url = f"{settings.SUPABASE_URL.rstrip('/')}/rest/v1"

    def build(session: AuthSession) -> HostedTodoTable:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "apikey": settings.SUPABASE_ANON_KEY,
            "Authorization": f"Bearer {session.access_token}",
        }
        return HostedTodoTable(AsyncPostgrestClient(rest_url, headers=headers))

    return build


async def build_hosted_backend(settings: Settings) -> Backend:
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set for the supabase backend")

    client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, options=_options())
    return Backend(
        name="supabase",
        auth=HostedAuthClient(settings, client),
        tables=_table_factory(settings),
    )
