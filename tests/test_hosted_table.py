from __future__ import annotations

import uuid
from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError

from todo_app.backend.base import NOT_FOUND_CODE, TITLE_CHECK_VIOLATION
from todo_app.backend.hosted import HostedTodoTable
from todo_app.core.errors import StoreError


class FakeQuery:
    """Records the PostgREST builder chain and answers `execute()` with a canned result."""

    def __init__(self, log: list, result):
        self.log = log
        self.result = result

    def __getattr__(self, name):
        def step(*args, **kwargs):
            self.log.append((name, args, kwargs))
            return self

        return step

    async def execute(self):
        if isinstance(self.result, Exception):
            raise self.result
        return SimpleNamespace(data=self.result)


class FakePostgrest:
    def __init__(self, result) -> None:
        self.result = result
        self.log: list = []
        self.closed = False

    def from_(self, table: str) -> FakeQuery:
        self.log.append(("from_", (table,), {}))
        return FakeQuery(self.log, self.result)

    async def aclose(self) -> None:
        self.closed = True


@pytest.mark.asyncio
async def test_select_all_orders_by_id_ascending() -> None:
    client = FakePostgrest([{"id": 1}, {"id": 2}])
    table = HostedTodoTable(client)

    rows = await table.select_all()

    assert rows == [{"id": 1}, {"id": 2}]
    assert ("from_", ("todos",), {}) in client.log
    assert ("order", ("id",), {"desc": False}) in client.log


@pytest.mark.asyncio
async def test_insert_sends_user_id_as_text() -> None:
    client = FakePostgrest([{"id": 7, "title": "Buy milk"}])
    user_id = uuid.uuid4()

    row = await HostedTodoTable(client).insert({"title": "Buy milk", "description": "", "user_id": user_id})

    assert row == {"id": 7, "title": "Buy milk"}
    assert ("insert", ({"title": "Buy milk", "description": "", "user_id": str(user_id)},), {}) in client.log


@pytest.mark.asyncio
async def test_api_errors_keep_the_store_message() -> None:
    error = APIError({"message": TITLE_CHECK_VIOLATION, "code": "23514", "hint": None, "details": None})
    table = HostedTodoTable(FakePostgrest(error))

    with pytest.raises(StoreError) as excinfo:
        await table.insert({"title": "Hi", "user_id": uuid.uuid4()})

    assert excinfo.value.message == TITLE_CHECK_VIOLATION
    assert excinfo.value.code == "23514"


@pytest.mark.asyncio
async def test_update_and_delete_of_missing_row_report_not_found() -> None:
    table = HostedTodoTable(FakePostgrest([]))

    with pytest.raises(StoreError) as excinfo:
        await table.update(3, {"is_complete": True})
    assert excinfo.value.code == NOT_FOUND_CODE

    with pytest.raises(StoreError) as excinfo:
        await table.delete(3)
    assert excinfo.value.code == NOT_FOUND_CODE


@pytest.mark.asyncio
async def test_aclose_closes_the_client() -> None:
    client = FakePostgrest([])
    await HostedTodoTable(client).aclose()
    assert client.closed is True


@pytest.mark.asyncio
async def test_closed_table_reports_a_store_error() -> None:
    table = HostedTodoTable(FakePostgrest([{"id": 1}]))
    await table.aclose()

    with pytest.raises(StoreError):
        await table.select_all()


@pytest.mark.asyncio
async def test_client_closed_mid_request_becomes_store_error() -> None:
    error = RuntimeError("Cannot send a request, as the client has been closed.")
    table = HostedTodoTable(FakePostgrest(error))

    with pytest.raises(StoreError) as excinfo:
        await table.delete(1)

    assert "closed" in excinfo.value.message
