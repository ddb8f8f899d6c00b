"""
Self-hosted backend: the todos table and password accounts in our own database.

It answers the same way the hosted store does, so the task list cannot tell
the two apart: rows come back as plain dicts, the title check surfaces with
the Postgres message, and touching a row that is not there (or not yours)
is a not-found error.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging
import uuid

import jwt
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.config import Settings
from ..core.errors import AuthClientError, StoreError
from ..core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from ..db.session import build_engine, create_db_and_tables
from ..models.task import TITLE_CHECK_CONSTRAINT, Task
from ..models.user import User
from .base import NOT_FOUND_CODE, TITLE_CHECK_VIOLATION, AuthSession, Backend, Row

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "JSON object requested, multiple (or no) rows returned"
UPDATABLE_COLUMNS = {"title", "description", "is_complete"}


def _integrity_error(exc: IntegrityError) -> StoreError:
    detail = str(exc.orig)
    if TITLE_CHECK_CONSTRAINT in detail:
        return StoreError(TITLE_CHECK_VIOLATION, code="23514")
    return StoreError(detail, code="23000")


class LocalTodoTable:
    def __init__(self, engine: Engine, user_id: uuid.UUID):
        self.engine = engine
        self.user_id = user_id

    async def select_all(self) -> List[Row]:
        return await run_in_threadpool(self._select_all)

    async def insert(self, values: Row) -> Row:
        return await run_in_threadpool(self._insert, dict(values))

    async def update(self, task_id: int, values: Row) -> Row:
        return await run_in_threadpool(self._update, task_id, dict(values))

    async def delete(self, task_id: int) -> None:
        await run_in_threadpool(self._delete, task_id)

    async def aclose(self) -> None:
        return None

    def _select_all(self) -> List[Row]:
        with Session(self.engine) as session:
            statement = select(Task).where(Task.user_id == self.user_id).order_by(Task.id)
            return [t.model_dump() for t in session.exec(statement).all()]

    def _insert(self, values: Row) -> Row:
        owner = uuid.UUID(str(values.pop("user_id", self.user_id)))
        if owner != self.user_id:
            raise StoreError('new row violates row-level security policy for table "todos"', code="42501")

        with Session(self.engine) as session:
            task = Task(
                user_id=owner,
                title=values.get("title", ""),
                description=values.get("description"),
                is_complete=bool(values.get("is_complete", False)),
            )
            session.add(task)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise _integrity_error(exc) from exc
            session.refresh(task)
            return task.model_dump()

    def _owned(self, session: Session, task_id: int) -> Task:
        task = session.get(Task, task_id)
        if task is None or task.user_id != self.user_id:
            raise StoreError(NOT_FOUND_MESSAGE, code=NOT_FOUND_CODE)
        return task

    def _update(self, task_id: int, values: Row) -> Row:
        unknown = set(values) - UPDATABLE_COLUMNS
        if unknown:
            column = sorted(unknown)[0]
            raise StoreError(f"Could not find the '{column}' column of 'todos' in the schema cache", code="PGRST204")

        with Session(self.engine) as session:
            task = self._owned(session, task_id)
            for key, value in values.items():
                setattr(task, key, value)
            session.add(task)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise _integrity_error(exc) from exc
            session.refresh(task)
            return task.model_dump()

    def _delete(self, task_id: int) -> None:
        with Session(self.engine) as session:
            task = self._owned(session, task_id)
            session.delete(task)
            session.commit()


class LocalAuthClient:
    """Email/password accounts with signed bearer tokens; sign-out revokes the token id."""

    def __init__(self, engine: Engine, settings: Settings):
        self.engine = engine
        self.settings = settings
        # jti -> expiry, pruned as tokens run out
        self._revoked: Dict[str, datetime] = {}

    def _issue(self, user: User) -> AuthSession:
        token = create_access_token(self.settings, {"sub": str(user.id), "email": user.email})
        return AuthSession(user_id=user.id, access_token=token, email=user.email)

    def _find_user(self, email: str) -> Optional[User]:
        with Session(self.engine) as session:
            return session.exec(select(User).where(User.email == email)).first()

    def _authenticate(self, email: str, password: str) -> Optional[User]:
        user = self._find_user(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def _create_user(self, email: str, password: str) -> User:
        with Session(self.engine) as session:
            user = User(email=email, password_hash=get_password_hash(password))
            session.add(user)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise AuthClientError("User already registered", status=400) from exc
            session.refresh(user)
            return user

    def _user_exists(self, user_id: uuid.UUID) -> bool:
        with Session(self.engine) as session:
            return session.get(User, user_id) is not None

    async def sign_up(self, email: str, password: str) -> AuthSession:
        email = email.strip().lower()
        if not email or not password:
            raise AuthClientError("Email and password are required", status=400)
        user = await run_in_threadpool(self._create_user, email, password)
        logger.info("Registered local user %s", user.id)
        return self._issue(user)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        user = await run_in_threadpool(self._authenticate, email.strip().lower(), password)
        if user is None:
            raise AuthClientError("Invalid login credentials", status=400)
        return self._issue(user)

    async def get_session(self, access_token: str) -> Optional[AuthSession]:
        try:
            claims = decode_access_token(self.settings, access_token)
            user_id = uuid.UUID(str(claims["sub"]))
        except (jwt.PyJWTError, ValueError):
            return None
        if claims["jti"] in self._revoked:
            return None
        if not await run_in_threadpool(self._user_exists, user_id):
            return None
        return AuthSession(user_id=user_id, access_token=access_token, email=claims.get("email"))

    async def sign_out(self, session: AuthSession) -> None:
        try:
            claims = decode_access_token(self.settings, session.access_token)
        except jwt.PyJWTError as exc:
            raise AuthClientError("Invalid token: token is expired or malformed", status=401) from exc

        now = datetime.now(timezone.utc)
        self._revoked = {jti: exp for jti, exp in self._revoked.items() if exp > now}
        self._revoked[claims["jti"]] = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)

    async def aclose(self) -> None:
        return None


def build_local_backend(settings: Settings, engine: Optional[Engine] = None) -> Backend:
    engine = engine or build_engine(settings)
    create_db_and_tables(engine)
    return Backend(
        name="local",
        auth=LocalAuthClient(engine, settings),
        tables=lambda session: LocalTodoTable(engine, session.user_id),
        dispose=engine.dispose,
    )
