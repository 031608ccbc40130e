from __future__ import annotations

from callgrid.events import CallEvent, CallEventHub
from callgrid.grid.display import displayed_participants


def test_failing_callback_does_not_stop_dispatch() -> None:
    hub = CallEventHub()
    received: list[CallEvent] = []

    def broken(_event: CallEvent) -> None:
        raise RuntimeError("observer bug")

    hub.subscribe(broken)
    hub.subscribe(received.append)
    hub.emit(CallEvent.REMOTE_PARTICIPANTS_UPDATED)

    assert received == [CallEvent.REMOTE_PARTICIPANTS_UPDATED]


def test_unsubscribe_is_idempotent() -> None:
    hub = CallEventHub()
    unsubscribe = hub.subscribe(lambda _event: None)

    unsubscribe()
    unsubscribe()

    assert len(hub) == 0


def test_display_set_skips_blank_and_duplicate_ids(participant) -> None:
    roster = [participant("a"), participant(" "), participant("b"), participant("a", name="Again")]

    shown = displayed_participants(roster)

    assert [p.id for p in shown] == ["a", "b"]
    assert shown[0].display_name == "A"


def test_display_set_prefers_screen_sharer(participant) -> None:
    sharer = participant("c", sharing=True)

    assert displayed_participants([participant("a"), sharer], sharer) == [sharer]
