# tests/conftest.py

from __future__ import annotations

import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from todo_app.backend.base import Backend
from todo_app.backend.local import build_local_backend
from todo_app.core.config import Settings
from todo_app.main import create_app

from .fakes import FakeAuthClient, FakeTodoTable


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Local backend on a throwaway SQLite file."""
    return Settings(
        BACKEND="local",
        DATABASE_URL=f"sqlite:///{tmp_path / 'todo.db'}",
        SECRET_KEY="test-secret-key-for-testing-purposes-only",
        ACCESS_TOKEN_EXPIRE_MINUTES=5,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture()
def local_backend(settings: Settings):
    backend = build_local_backend(settings)
    yield backend
    backend.dispose()


@pytest.fixture()
def client(settings: Settings, local_backend: Backend):
    with TestClient(create_app(settings, backend=local_backend)) as c:
        yield c


@pytest.fixture()
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def fake_table() -> FakeTodoTable:
    return FakeTodoTable()


@pytest.fixture()
def fake_auth() -> FakeAuthClient:
    return FakeAuthClient()
