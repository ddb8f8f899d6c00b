from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
import uuid


TITLE_CHECK_CONSTRAINT = "todos_title_check"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(SQLModel, table=True):
    __tablename__ = "todos"
    __table_args__ = (
        # Same rule as the hosted table: titles need at least four characters
        CheckConstraint("length(title) > 3", name=TITLE_CHECK_CONSTRAINT),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    title: str = Field(nullable=False)
    description: Optional[str] = Field(default=None)
    is_complete: bool = Field(default=False, nullable=False)
    inserted_at: datetime = Field(default_factory=_utcnow, nullable=False)
