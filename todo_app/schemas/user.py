from sqlmodel import SQLModel
from typing import Literal, Optional
import uuid


class UserLogin(SQLModel):
    email: str
    password: str


class UserCreate(UserLogin):
    pass


class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"
    user_id: uuid.UUID


class SessionView(SQLModel):
    view: Literal["login", "tasks"]
    user_id: Optional[uuid.UUID] = None
