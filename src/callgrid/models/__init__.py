"""Data models for call snapshots and grid operations."""

from callgrid.models._base import CallGridBaseModel, CallGridEnum
from callgrid.models.operations import GridMove, GridOperations
from callgrid.models.participant import (
    LocalMediaState,
    MediaStreamType,
    Participant,
    ParticipantInfo,
    VideoStream,
)

__all__ = [
    "CallGridBaseModel",
    "CallGridEnum",
    "GridMove",
    "GridOperations",
    "LocalMediaState",
    "MediaStreamType",
    "Participant",
    "ParticipantInfo",
    "VideoStream",
]
