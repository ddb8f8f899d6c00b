from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from typing import Optional

from ...deps import get_backend, get_gate, get_optional_session, get_settings
from ....backend.base import AuthSession, Backend
from ....core.config import Settings
from ....core.errors import AuthClientError, ConfirmationRequired
from ....schemas.user import SessionView, Token, UserCreate, UserLogin
from ....services.session_gate import SessionGate

router = APIRouter()


def _set_session_cookie(response: Response, settings: Settings, auth_session: AuthSession) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=auth_session.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


@router.get("/session", response_model=SessionView)
async def read_session(
    session: Optional[AuthSession] = Depends(get_optional_session),
    gate: SessionGate = Depends(get_gate),
):
    return gate.view(session)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    user_create: UserCreate,
    response: Response,
    backend: Backend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
):
    try:
        auth_session = await backend.auth.sign_up(user_create.email, user_create.password)
    except ConfirmationRequired as exc:
        # Account created; no session until the email is confirmed
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content={"detail": exc.message, "user_id": str(exc.user_id) if exc.user_id else None},
        )
    except AuthClientError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)

    _set_session_cookie(response, settings, auth_session)
    return Token(access_token=auth_session.access_token, user_id=auth_session.user_id)


@router.post("/login", response_model=Token)
async def login(
    user_credentials: UserLogin,
    response: Response,
    backend: Backend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
):
    try:
        auth_session = await backend.auth.sign_in(user_credentials.email, user_credentials.password)
    except AuthClientError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    _set_session_cookie(response, settings, auth_session)
    return Token(access_token=auth_session.access_token, user_id=auth_session.user_id)


@router.post("/logout")
async def logout(
    response: Response,
    session: Optional[AuthSession] = Depends(get_optional_session),
    gate: SessionGate = Depends(get_gate),
    settings: Settings = Depends(get_settings),
) -> dict:
    # Sign-out failures are logged by the gate; the browser is logged out either way
    if session is not None:
        await gate.sign_out(session)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return {"ok": True}
