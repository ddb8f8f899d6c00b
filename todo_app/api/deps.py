from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from ..backend.base import AuthSession, Backend
from ..core.config import Settings
from ..services.registry import ManagerRegistry
from ..services.session_gate import SessionGate
from ..services.task_list import TaskListManager


security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def get_registry(request: Request) -> ManagerRegistry:
    return request.app.state.registry


def get_gate(request: Request) -> SessionGate:
    return request.app.state.gate


async def get_optional_session(
    request: Request,
    token: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
    gate: SessionGate = Depends(get_gate),
) -> Optional[AuthSession]:
    # Bearer header first, then the cookie set at login
    access_token = token.credentials if token else request.cookies.get(settings.SESSION_COOKIE_NAME)
    return await gate.resolve(access_token)


async def get_current_session(session: Optional[AuthSession] = Depends(get_optional_session)) -> AuthSession:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_task_list(
    session: AuthSession = Depends(get_current_session),
    registry: ManagerRegistry = Depends(get_registry),
) -> TaskListManager:
    return await registry.mount(session)
