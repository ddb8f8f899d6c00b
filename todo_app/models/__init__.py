# This file ensures both models are loaded together so the foreign key resolves
from .user import User
from .task import Task

__all__ = ["User", "Task"]
