from sqlmodel import SQLModel
from typing import List, Optional
from datetime import datetime
import uuid


class TaskBase(SQLModel):
    title: str
    description: Optional[str] = None


class TaskRead(TaskBase):
    id: int
    user_id: uuid.UUID
    is_complete: bool = False
    inserted_at: Optional[datetime] = None


class TaskDraft(SQLModel):
    title: Optional[str] = None
    description: Optional[str] = None


class PointerDown(SQLModel):
    # Element ids from the event target outwards, innermost first
    target_path: List[str] = []


class TaskListView(SQLModel):
    tasks: List[TaskRead]
    is_loading: bool
    is_creating: bool
    error_text: str
    draft_title: str
    draft_description: str
