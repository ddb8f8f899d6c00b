from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable
import uuid

from ..models.task import TITLE_CHECK_CONSTRAINT


# Message the store reports when an insert breaks the title length check
TITLE_CHECK_VIOLATION = f'new row for relation "todos" violates check constraint "{TITLE_CHECK_CONSTRAINT}"'

# PostgREST code for "the request matched no rows"
NOT_FOUND_CODE = "PGRST116"


@dataclass(frozen=True)
class AuthSession:
    user_id: uuid.UUID
    access_token: str
    email: Optional[str] = None


Row = Dict[str, Any]


@runtime_checkable
class TodoTable(Protocol):
    """Row store for the todos table, scoped to one signed-in user."""

    async def select_all(self) -> List[Row]:
        ...

    async def insert(self, values: Row) -> Row:
        ...

    async def update(self, task_id: int, values: Row) -> Row:
        ...

    async def delete(self, task_id: int) -> None:
        ...

    async def aclose(self) -> None:
        ...


@runtime_checkable
class AuthClient(Protocol):
    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_up(self, email: str, password: str) -> AuthSession:
        ...

    async def get_session(self, access_token: str) -> Optional[AuthSession]:
        ...

    async def sign_out(self, session: AuthSession) -> None:
        ...

    async def aclose(self) -> None:
        ...


@dataclass
class Backend:
    """
    The collaborators the app talks to, built once at startup.

    `tables` builds a table client authorized as the given session.
    """

    name: str
    auth: AuthClient
    tables: Callable[[AuthSession], TodoTable]
    dispose: Optional[Callable[[], None]] = None

    def table_for(self, session: AuthSession) -> TodoTable:
        return self.tables(session)

    async def aclose(self) -> None:
        await self.auth.aclose()
        if self.dispose is not None:
            self.dispose()
