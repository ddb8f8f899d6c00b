from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
import uuid


class User(SQLModel, table=True):
    """Account record for the local identity provider."""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, nullable=False)
    password_hash: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
