"""Tiles: the renderable units owned by the identity map."""

from __future__ import annotations

import itertools
import logging

from callgrid.interfaces import LocalParticipantView, ParticipantView
from callgrid.models.participant import LocalMediaState, Participant, VideoStream

_logger = logging.getLogger(__name__)

_handles = itertools.count(1)


class Tile:
    """One remote participant's view in the grid.

    A tile is reused across reconciliation passes for as long as its
    participant stays displayed, so any video surface attached to the view
    survives reordering.
    """

    def __init__(self, participant_id: str | None, view: ParticipantView) -> None:
        self.handle = next(_handles)
        self.participant_id = participant_id
        self.view = view
        self._disposed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(handle={self.handle}, participant_id={self.participant_id!r})"

    @property
    def disposed(self) -> bool:
        return self._disposed

    def refresh(self, participant: Participant) -> None:
        """Push the participant's current state to the view."""
        view = self.view
        view.update_display_name(participant.display_name)
        view.update_mute_indicator(participant.is_muted)
        view.update_active_speaker(participant.is_speaking)
        view.update_video_stream(
            participant.preferred_stream,
            is_screen_sharing=participant.is_screen_sharing,
        )

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        _logger.debug("Disposing %r", self)
        self.view.dispose()


class LocalTile(Tile):
    """The local user's own tile; it never carries a participant id."""

    view: LocalParticipantView

    def __init__(self, view: LocalParticipantView) -> None:
        super().__init__(None, view)

    def refresh_local(self, state: LocalMediaState, *, name_suffix: str) -> None:
        self.view.update_display_name(f"{state.display_name}{name_suffix}")
        if state.is_muted is not None:
            self.view.update_mute_indicator(state.is_muted)
        self.view.update_video_displayed(state.is_camera_preferred_on)
        if state.is_camera_preferred_on and state.video_stream is not None:
            self.view.update_video_stream(state.video_stream)

    def set_video(self, stream: VideoStream | None) -> None:
        """Show ``stream``, or hide the video and release its renderer when ``None``.

        Releasing keeps the tile usable: the next stream re-attaches a renderer.
        """
        self.view.update_video_displayed(stream is not None)
        if stream is None:
            self.view.dispose()
            return
        self.view.update_video_stream(stream)

    def set_one_on_one(self, is_one_on_one: bool) -> None:
        """Frame the tile for a one-on-one call (side container) or the grid."""
        self.view.update_display_name_visible(not is_one_on_one)
        self.view.update_camera_switch(is_one_on_one=is_one_on_one)
