from fastapi import APIRouter, Depends, Response, status
from typing import Optional

from ...deps import get_task_list
from ....schemas.task import PointerDown, TaskDraft, TaskListView
from ....services.overlay import PointerEvent
from ....services.task_list import CreateOutcome, TaskListManager

router = APIRouter()

CREATE_STATUS = {
    CreateOutcome.created: status.HTTP_201_CREATED,
    CreateOutcome.rejected: status.HTTP_400_BAD_REQUEST,
    CreateOutcome.ignored: status.HTTP_200_OK,
}


@router.get("/", response_model=TaskListView)
async def read_task_list(manager: TaskListManager = Depends(get_task_list)):
    return manager.snapshot()


@router.post("/", response_model=TaskListView)
async def create_task(
    response: Response,
    draft: Optional[TaskDraft] = None,
    manager: TaskListManager = Depends(get_task_list),
):
    # A body stands in for typing into the form before submitting it
    if draft is not None:
        manager.edit_draft(title=draft.title, description=draft.description)
    outcome = await manager.submit()
    response.status_code = CREATE_STATUS[outcome]
    return manager.snapshot()


# --- overlay and form state (declared before the /{task_id} routes) ---

@router.post("/overlay", response_model=TaskListView)
async def open_overlay(manager: TaskListManager = Depends(get_task_list)):
    manager.open_overlay()
    return manager.snapshot()


@router.delete("/overlay", response_model=TaskListView)
async def close_overlay(manager: TaskListManager = Depends(get_task_list)):
    manager.close_overlay()
    return manager.snapshot()


@router.patch("/draft", response_model=TaskListView)
async def edit_draft(draft: TaskDraft, manager: TaskListManager = Depends(get_task_list)):
    manager.edit_draft(title=draft.title, description=draft.description)
    return manager.snapshot()


@router.post("/pointer", response_model=TaskListView)
async def pointer_down(event: PointerDown, manager: TaskListManager = Depends(get_task_list)):
    manager.pointer_down(PointerEvent(target_path=tuple(event.target_path)))
    return manager.snapshot()


# --- per task ---

@router.delete("/{task_id}", response_model=TaskListView)
async def delete_task(task_id: int, manager: TaskListManager = Depends(get_task_list)):
    await manager.delete(task_id)
    return manager.snapshot()


@router.post("/{task_id}/toggle", response_model=TaskListView)
async def toggle_task(task_id: int, manager: TaskListManager = Depends(get_task_list)):
    await manager.toggle_complete(task_id)
    return manager.snapshot()
