"""callgrid - Participant grid reconciliation for video calls."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("callgrid")
except PackageNotFoundError:
    __version__ = "0+local"
from callgrid.config import GridConfig
from callgrid.controller import CallGridController
from callgrid.events import CallEvent, CallEventHub
from callgrid.exceptions import (
    CallGridConfigError,
    CallGridError,
    CallGridStateError,
    SlotInvariantError,
)
from callgrid.grid.batch import apply_batch, validate_batch
from callgrid.grid.diff import DiffResult, reconcile
from callgrid.grid.display import displayed_participants
from callgrid.grid.identity import IdentityMap
from callgrid.grid.layout import GridShape, grid_shape
from callgrid.grid.placement import InGrid, LocalPlacement, PlacementChange, SideContainer, place_local_tile
from callgrid.grid.tiles import LocalTile, Tile
from callgrid.models import (
    GridMove,
    GridOperations,
    LocalMediaState,
    MediaStreamType,
    Participant,
    ParticipantInfo,
    VideoStream,
)
from callgrid.scheduler import SchedulerState, UpdateScheduler

__all__ = [
    "__version__",
    "CallEvent",
    "CallEventHub",
    "CallGridConfigError",
    "CallGridController",
    "CallGridError",
    "CallGridStateError",
    "DiffResult",
    "GridConfig",
    "GridMove",
    "GridOperations",
    "GridShape",
    "IdentityMap",
    "InGrid",
    "LocalMediaState",
    "LocalPlacement",
    "LocalTile",
    "MediaStreamType",
    "Participant",
    "ParticipantInfo",
    "PlacementChange",
    "SchedulerState",
    "SideContainer",
    "SlotInvariantError",
    "Tile",
    "UpdateScheduler",
    "VideoStream",
    "apply_batch",
    "displayed_participants",
    "grid_shape",
    "place_local_tile",
    "reconcile",
    "validate_batch",
]
