from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence
import logging

logger = logging.getLogger(__name__)

OVERLAY_ELEMENT_ID = "create-task-overlay"


@dataclass(frozen=True)
class PointerEvent:
    # Element ids from the event target outwards, innermost first
    target_path: Sequence[str] = field(default_factory=tuple)


PointerListener = Callable[[PointerEvent], None]


class PointerDispatcher:
    """Page-wide pointer-down listeners."""

    def __init__(self) -> None:
        self._listeners: List[PointerListener] = []

    def add_listener(self, listener: PointerListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: PointerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, event: PointerEvent) -> None:
        # Listeners may unregister themselves while handling the event
        for listener in list(self._listeners):
            listener(event)


class CreateOverlay:
    """
    The task creation form shown on top of the list.

    While open it holds exactly one pointer listener; a pointer-down whose
    target is not inside the overlay closes it.
    """

    def __init__(
        self,
        dispatcher: PointerDispatcher,
        element_id: str = OVERLAY_ELEMENT_ID,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.element_id = element_id
        self.on_close = on_close
        self.is_open = False

    def contains(self, event: PointerEvent) -> bool:
        return self.element_id in event.target_path

    def _handle_pointer_down(self, event: PointerEvent) -> None:
        if not self.contains(event):
            logger.debug("Pointer down outside %s, closing", self.element_id)
            self.close()

    def open(self) -> None:
        if self.is_open:
            return
        self.is_open = True
        self.dispatcher.add_listener(self._handle_pointer_down)

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.dispatcher.remove_listener(self._handle_pointer_down)
        if self.on_close is not None:
            self.on_close()
