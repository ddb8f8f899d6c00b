from collections import OrderedDict
from typing import Optional
import logging

from ..backend.base import AuthSession, Backend
from .task_list import TaskListManager

logger = logging.getLogger(__name__)


class ManagerRegistry:
    """
    One mounted task list per session.

    The first request of a session mounts its manager (which loads the list);
    sign-out unmounts it. The least recently used manager is unmounted once
    more than `max_mounted` sessions are live.
    """

    def __init__(self, backend: Backend, max_mounted: int = 1024):
        self.backend = backend
        self.max_mounted = max_mounted
        self._managers: "OrderedDict[str, TaskListManager]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._managers)

    def get(self, session: AuthSession) -> Optional[TaskListManager]:
        return self._managers.get(session.access_token)

    async def mount(self, session: AuthSession) -> TaskListManager:
        manager = self._managers.get(session.access_token)
        if manager is not None:
            self._managers.move_to_end(session.access_token)
            return manager

        manager = TaskListManager(self.backend.table_for(session), session.user_id)
        # Registered before loading so concurrent requests share the same manager
        self._managers[session.access_token] = manager
        logger.info("Mounted task list for user %s", session.user_id)

        while len(self._managers) > self.max_mounted:
            _, evicted = self._managers.popitem(last=False)
            await evicted.unmount()

        await manager.mount()
        return manager

    async def unmount(self, session: AuthSession) -> None:
        manager = self._managers.pop(session.access_token, None)
        if manager is not None:
            await manager.unmount()
            logger.info("Unmounted task list for user %s", session.user_id)

    async def unmount_all(self) -> None:
        while self._managers:
            _, manager = self._managers.popitem(last=False)
            await manager.unmount()
