from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from callgrid.events import CallEventHub
from callgrid.grid.batch import apply_batch
from callgrid.grid.tiles import Tile
from callgrid.models.operations import GridOperations
from callgrid.models.participant import LocalMediaState, MediaStreamType, Participant, VideoStream


def make_participant(pid: str, *, name: str | None = None, sharing: bool = False, **kwargs: Any) -> Participant:
    streams: list[VideoStream] = [VideoStream(id=f"{pid}-cam", stream_type=MediaStreamType.CAMERA)]
    if sharing:
        streams.append(VideoStream(id=f"{pid}-screen", stream_type=MediaStreamType.SCREEN_SHARING))
    return Participant(id=pid, display_name=name or pid.upper(), video_streams=tuple(streams), **kwargs)


class FakeView:
    def __init__(self, label: str = "") -> None:
        self.label = label
        self.display_name: str | None = None
        self.is_muted: bool | None = None
        self.is_speaking: bool | None = None
        self.stream: VideoStream | None = None
        self.is_screen_sharing = False
        self.dispose_calls = 0

    def __repr__(self) -> str:
        return f"FakeView({self.label or self.display_name!r})"

    def update_display_name(self, display_name: str) -> None:
        self.display_name = display_name

    def update_mute_indicator(self, is_muted: bool) -> None:
        self.is_muted = is_muted

    def update_active_speaker(self, is_speaking: bool) -> None:
        self.is_speaking = is_speaking

    def update_video_stream(self, stream: VideoStream | None, *, is_screen_sharing: bool = False) -> None:
        self.stream = stream
        self.is_screen_sharing = is_screen_sharing

    def dispose(self) -> None:
        self.dispose_calls += 1


class FakeLocalView(FakeView):
    def __init__(self) -> None:
        super().__init__("local")
        self.video_displayed: bool | None = None
        self.name_visible: bool | None = None
        self.one_on_one: bool | None = None

    def update_video_displayed(self, is_displayed: bool) -> None:
        self.video_displayed = is_displayed

    def update_display_name_visible(self, is_visible: bool) -> None:
        self.name_visible = is_visible

    def update_camera_switch(self, *, is_one_on_one: bool) -> None:
        self.one_on_one = is_one_on_one


class FakeSink:
    """Applies batches with the reference semantics and records every call."""

    def __init__(self) -> None:
        self.items: list[Any] = []
        self.batches: list[GridOperations] = []
        self.side_view: Any = None
        self.side_hidden: bool | None = None
        self.participant_count: int | None = None
        self.gate: asyncio.Event | None = None
        self.participant_lists: list[list[Any]] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    @property
    def item_count(self) -> int:
        return len(self.items)

    async def apply_batch(self, operations: GridOperations, views: Sequence[Any]) -> None:
        self.batches.append(operations)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            inserted = {slot: views[slot] for slot in operations.inserts}
            self.items = apply_batch(self.items, operations, inserted)
            assert self.items == list(views)
        finally:
            self.in_flight -= 1

    def attach_side_container(self, view: Any) -> None:
        assert self.side_view is None, "side container already occupied"
        self.side_view = view

    def detach_side_container(self, view: Any) -> None:
        assert self.side_view is view
        self.side_view = None

    def set_side_container_hidden(self, hidden: bool) -> None:
        self.side_hidden = hidden

    def update_participant_count(self, count: int) -> None:
        self.participant_count = count

    def refresh_participant_list(self, participants: Sequence[Any]) -> None:
        self.participant_lists.append(list(participants))


class FakeSession:
    def __init__(self) -> None:
        self.events = CallEventHub()
        self.roster: list[Participant] = []
        self.sharer: Participant | None = None
        self.local = LocalMediaState(display_name="Alice", is_muted=False, is_camera_preferred_on=True)
        self.paused = 0
        self.resumed = 0

    @property
    def participant_count(self) -> int:
        return len(self.roster) + 1

    def remote_participants(self) -> list[Participant]:
        return list(self.roster)

    def screen_sharing_participant(self) -> Participant | None:
        return self.sharer

    def local_state(self) -> LocalMediaState:
        return self.local

    async def pause_local_video(self) -> None:
        self.paused += 1

    async def resume_local_video(self) -> None:
        self.resumed += 1


class FakeClock:
    """Deterministic monotonic clock whose sleep advances time."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def local_view() -> FakeLocalView:
    return FakeLocalView()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def participant():
    return make_participant


@pytest.fixture
def view_factory():
    return FakeView


@pytest.fixture
def tile_factory():
    def _factory(participant_id: str) -> Tile:
        return Tile(participant_id, FakeView(participant_id))

    return _factory
