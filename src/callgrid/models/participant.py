"""Participant snapshots read from the calling session."""

from __future__ import annotations

from pydantic import Field, field_validator

from callgrid.models._base import CallGridBaseModel, CallGridEnum


class MediaStreamType(CallGridEnum):
    CAMERA = "camera"
    SCREEN_SHARING = "screenSharing"
    UNKNOWN = "unknown"


class VideoStream(CallGridBaseModel):
    """A remote or local video stream descriptor."""

    id: str | int
    stream_type: MediaStreamType = MediaStreamType.CAMERA

    @property
    def is_screen_sharing(self) -> bool:
        return self.stream_type == MediaStreamType.SCREEN_SHARING


class Participant(CallGridBaseModel):
    """Read-only snapshot of one remote participant."""

    id: str = Field(..., description="Stable identifier, unique among connected participants")
    display_name: str = ""
    is_muted: bool = False
    is_speaking: bool = False
    video_streams: tuple[VideoStream, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: object) -> object:
        if value is None:
            return ""
        return str(value).strip()

    @property
    def screen_share_stream(self) -> VideoStream | None:
        return next((stream for stream in self.video_streams if stream.is_screen_sharing), None)

    @property
    def is_screen_sharing(self) -> bool:
        return self.screen_share_stream is not None

    @property
    def preferred_stream(self) -> VideoStream | None:
        """Screen-sharing stream when present, otherwise the first stream."""
        shared = self.screen_share_stream
        if shared is not None:
            return shared
        return self.video_streams[0] if self.video_streams else None


class LocalMediaState(CallGridBaseModel):
    """Local user's identity and media preferences."""

    display_name: str = ""
    is_muted: bool | None = None
    is_camera_preferred_on: bool = False
    video_stream: VideoStream | None = None


class ParticipantInfo(CallGridBaseModel):
    """One row of the participant list."""

    display_name: str
    is_muted: bool = False
