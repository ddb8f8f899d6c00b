from __future__ import annotations

import pytest

from todo_app.backend.base import Backend
from todo_app.services.registry import ManagerRegistry

from .fakes import FakeAuthClient, FakeTodoTable


@pytest.mark.asyncio
async def test_mount_loads_once_per_session(fake_auth) -> None:
    tables: list[FakeTodoTable] = []

    def build_table(_session):
        table = FakeTodoTable()
        tables.append(table)
        return table

    registry = ManagerRegistry(Backend(name="fake", auth=fake_auth, tables=build_table))
    session = fake_auth.add_session()

    first = await registry.mount(session)
    second = await registry.mount(session)

    assert first is second
    assert len(tables) == 1
    assert tables[0].calls == [("select_all",)]


@pytest.mark.asyncio
async def test_oldest_manager_is_unmounted_past_the_limit() -> None:
    auth = FakeAuthClient()
    tables: list[FakeTodoTable] = []

    def build_table(_session):
        table = FakeTodoTable()
        tables.append(table)
        return table

    registry = ManagerRegistry(Backend(name="fake", auth=auth, tables=build_table), max_mounted=2)
    sessions = [auth.add_session(f"user{i}@example.com") for i in range(3)]

    for session in sessions:
        await registry.mount(session)

    assert len(registry) == 2
    assert registry.get(sessions[0]) is None
    assert tables[0].closed is True

    await registry.unmount_all()
    assert len(registry) == 0
    assert all(t.closed for t in tables)
