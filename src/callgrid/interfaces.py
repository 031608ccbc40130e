"""Structural interfaces of the collaborators around the grid engine.

The engine never talks to a calling SDK or a UI toolkit directly.  Having
protocols here makes it easy to pass test doubles while keeping the real
adapters in the application.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from callgrid.events import CallEventHub
from callgrid.models.operations import GridOperations
from callgrid.models.participant import LocalMediaState, Participant, ParticipantInfo, VideoStream


class ParticipantView(Protocol):
    """Per-participant view adapter rendered inside a grid slot."""

    def update_display_name(self, display_name: str) -> None:
        ...

    def update_mute_indicator(self, is_muted: bool) -> None:
        ...

    def update_active_speaker(self, is_speaking: bool) -> None:
        ...

    def update_video_stream(self, stream: VideoStream | None, *, is_screen_sharing: bool = False) -> None:
        ...

    def dispose(self) -> None:
        """Release any attached media-stream resources."""
        ...


class LocalParticipantView(ParticipantView, Protocol):
    """View adapter for the local user's own tile."""

    def update_video_displayed(self, is_displayed: bool) -> None:
        ...

    def update_display_name_visible(self, is_visible: bool) -> None:
        ...

    def update_camera_switch(self, *, is_one_on_one: bool) -> None:
        ...


class PresentationSink(Protocol):
    """Surface that renders the participant grid and the side container."""

    @property
    def item_count(self) -> int:
        """Number of tiles currently occupying grid slots."""
        ...

    async def apply_batch(self, operations: GridOperations, views: Sequence[ParticipantView]) -> None:
        """Apply one batch atomically without animation.

        ``views`` is the complete ending arrangement in slot order; inserted
        slots are rendered from it.
        """
        ...

    def attach_side_container(self, view: LocalParticipantView) -> None:
        ...

    def detach_side_container(self, view: LocalParticipantView) -> None:
        ...

    def set_side_container_hidden(self, hidden: bool) -> None:
        ...

    def update_participant_count(self, count: int) -> None:
        ...

    def refresh_participant_list(self, participants: Sequence[ParticipantInfo]) -> None:
        """Replace the participant-list rows; the local user comes first."""
        ...


class CallSession(Protocol):
    """Calling-SDK session as seen by the grid engine."""

    @property
    def events(self) -> CallEventHub:
        ...

    @property
    def participant_count(self) -> int:
        """Total participants in the call, including the local user."""
        ...

    def remote_participants(self) -> Sequence[Participant]:
        """Ordered snapshot of the remote participants to display."""
        ...

    def screen_sharing_participant(self) -> Participant | None:
        ...

    def local_state(self) -> LocalMediaState:
        ...

    async def pause_local_video(self) -> None:
        ...

    async def resume_local_video(self) -> None:
        ...
