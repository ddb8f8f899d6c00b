"""
Task list state for one signed-in user, kept in step with the remote todos table.

Local state only ever changes in response to the store: the list is read
once on mount, and afterwards each create/delete/toggle applies the store's
answer when it arrives. There is no polling and no refetch.

Create and toggle reconcile differently. Create appends the returned row to
the end without re-sorting, relying on ids being handed out in increasing
order. Toggle sends the inverse of what is displayed but then shows whatever
the store returned, so a concurrent change made elsewhere wins.
"""
from enum import Enum
from typing import List, Optional
import logging
import uuid

from ..backend.base import TITLE_CHECK_VIOLATION, TodoTable
from ..core.errors import StoreError
from ..schemas.task import TaskListView, TaskRead
from .overlay import CreateOverlay, PointerDispatcher, PointerEvent

logger = logging.getLogger(__name__)

TITLE_TOO_SHORT = "Task title should be more than 3 characters"


class CreateOutcome(str, Enum):
    created = "created"
    rejected = "rejected"
    ignored = "ignored"


class TaskListManager:
    def __init__(self, table: TodoTable, user_id: uuid.UUID, dispatcher: Optional[PointerDispatcher] = None):
        self.table = table
        self.user_id = user_id
        self.dispatcher = dispatcher or PointerDispatcher()
        self.overlay = CreateOverlay(self.dispatcher)

        self.tasks: List[TaskRead] = []
        self.is_loading = True
        self.error_text = ""
        self.draft_title = ""
        self.draft_description = ""
        self.unmounted = False

    @property
    def is_creating(self) -> bool:
        return self.overlay.is_open

    def _find(self, task_id: int) -> Optional[TaskRead]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    # --- lifecycle ---

    async def mount(self) -> None:
        await self.load()

    async def unmount(self) -> None:
        self.unmounted = True
        self.overlay.close()
        await self.table.aclose()

    # --- remote operations ---

    async def load(self) -> None:
        self.is_loading = True
        try:
            rows = await self.table.select_all()
        except StoreError as exc:
            logger.error("Error fetching todos: %s (code=%s)", exc.message, exc.code)
            return
        finally:
            self.is_loading = False

        if self.unmounted:
            return
        self.tasks = [TaskRead.model_validate(row) for row in rows]

    async def create(self, title_text: str, description: Optional[str] = "") -> CreateOutcome:
        title = title_text.strip()
        if not title:
            return CreateOutcome.ignored

        try:
            row = await self.table.insert({"title": title, "description": description, "user_id": self.user_id})
        except StoreError as exc:
            if self.unmounted:
                return CreateOutcome.rejected
            if exc.message == TITLE_CHECK_VIOLATION:
                self.error_text = TITLE_TOO_SHORT
            else:
                self.error_text = exc.message
            return CreateOutcome.rejected

        if self.unmounted:
            return CreateOutcome.created
        self.tasks.append(TaskRead.model_validate(row))
        self.draft_title = ""
        self.draft_description = ""
        self.overlay.close()
        return CreateOutcome.created

    async def submit(self) -> CreateOutcome:
        """Create a task from the draft inputs, as the overlay form does."""
        return await self.create(self.draft_title, self.draft_description)

    async def delete(self, task_id: int) -> bool:
        try:
            await self.table.delete(task_id)
        except StoreError as exc:
            logger.error("Error deleting todo %s: %s (code=%s)", task_id, exc.message, exc.code)
            return False

        if self.unmounted:
            return True
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return True

    async def toggle_complete(self, task_id: int) -> bool:
        task = self._find(task_id)
        if task is None:
            return False

        try:
            row = await self.table.update(task_id, {"is_complete": not task.is_complete})
        except StoreError as exc:
            logger.error("Error toggling todo %s: %s (code=%s)", task_id, exc.message, exc.code)
            return False

        # The entry may have been deleted while the update was in flight
        current = self._find(task_id)
        if self.unmounted or current is None:
            return False
        current.is_complete = bool(row["is_complete"])
        return True

    # --- local interactions ---

    def open_overlay(self) -> None:
        self.overlay.open()

    def close_overlay(self) -> None:
        self.overlay.close()

    def edit_draft(self, title: Optional[str] = None, description: Optional[str] = None) -> None:
        if title is not None:
            self.draft_title = title
        if description is not None:
            self.draft_description = description
        self.error_text = ""

    def pointer_down(self, event: PointerEvent) -> None:
        self.dispatcher.dispatch(event)

    def snapshot(self) -> TaskListView:
        return TaskListView(
            tasks=[t.model_copy() for t in self.tasks],
            is_loading=self.is_loading,
            is_creating=self.is_creating,
            error_text=self.error_text,
            draft_title=self.draft_title,
            draft_description=self.draft_description,
        )
