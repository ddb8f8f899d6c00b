from __future__ import annotations

from todo_app.services.overlay import OVERLAY_ELEMENT_ID, CreateOverlay, PointerDispatcher, PointerEvent


def test_open_registers_one_listener_and_close_removes_it() -> None:
    dispatcher = PointerDispatcher()
    overlay = CreateOverlay(dispatcher)

    overlay.open()
    overlay.open()
    assert overlay.is_open is True
    assert dispatcher.listener_count == 1

    overlay.close()
    assert overlay.is_open is False
    assert dispatcher.listener_count == 0


def test_repeated_open_close_cycles_do_not_leak_listeners() -> None:
    dispatcher = PointerDispatcher()
    overlay = CreateOverlay(dispatcher)

    for _ in range(50):
        overlay.open()
        overlay.close()

    assert dispatcher.listener_count == 0


def test_pointer_down_inside_keeps_overlay_open() -> None:
    dispatcher = PointerDispatcher()
    overlay = CreateOverlay(dispatcher)
    overlay.open()

    dispatcher.dispatch(PointerEvent(target_path=("submit-button", OVERLAY_ELEMENT_ID, "body")))

    assert overlay.is_open is True


def test_pointer_down_outside_closes_and_unregisters() -> None:
    closed = []
    dispatcher = PointerDispatcher()
    overlay = CreateOverlay(dispatcher, on_close=lambda: closed.append(True))
    overlay.open()

    dispatcher.dispatch(PointerEvent(target_path=("backdrop", "body")))

    assert overlay.is_open is False
    assert dispatcher.listener_count == 0
    assert closed == [True]


def test_closed_overlay_ignores_pointer_events() -> None:
    closed = []
    dispatcher = PointerDispatcher()
    CreateOverlay(dispatcher, on_close=lambda: closed.append(True))

    dispatcher.dispatch(PointerEvent(target_path=("backdrop",)))

    assert closed == []
