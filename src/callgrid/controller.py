"""High-level controller for a call's participant grid."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from callgrid.config import GridConfig
from callgrid.events import CallEvent
from callgrid.exceptions import CallGridStateError, SlotInvariantError
from callgrid.grid.batch import validate_batch
from callgrid.grid.diff import reconcile
from callgrid.grid.display import displayed_participants
from callgrid.grid.identity import IdentityMap
from callgrid.grid.placement import SIDE_CONTAINER, InGrid, LocalPlacement, SideContainer, place_local_tile
from callgrid.grid.tiles import LocalTile, Tile
from callgrid.interfaces import CallSession, LocalParticipantView, ParticipantView, PresentationSink
from callgrid.models.operations import GridOperations
from callgrid.models.participant import ParticipantInfo, VideoStream
from callgrid.scheduler import UpdateScheduler

_logger = logging.getLogger(__name__)


class CallGridController:
    """Keeps a presentation sink in sync with a call session's participants.

    Usage::

        async with CallGridController(session, sink, local_view, view_factory) as grid:
            ...  # session notifications now drive grid updates

    Every change notification funnels into one :class:`UpdateScheduler`;
    each scheduled pass re-reads the live roster, so bursts of
    notifications cost one pass.
    """

    def __init__(
        self,
        session: CallSession,
        sink: PresentationSink,
        local_view: LocalParticipantView,
        view_factory: Callable[[], ParticipantView],
        *,
        config: GridConfig | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._session = session
        self._sink = sink
        self._view_factory = view_factory
        self._config = config or GridConfig()
        self._local_tile = LocalTile(local_view)
        self._placement: LocalPlacement = SIDE_CONTAINER
        self._identity = IdentityMap.empty()
        self._unsubscribe: Callable[[], None] | None = None
        self._background: set[asyncio.Task[None]] = set()
        self._pass_lock = asyncio.Lock()
        self._started = False
        self._closed = False

        scheduler_kwargs: dict[str, Any] = {"min_interval": self._config.min_update_interval}
        if clock is not None:
            scheduler_kwargs["clock"] = clock
        if sleep is not None:
            scheduler_kwargs["sleep"] = sleep
        self._scheduler = UpdateScheduler(self._run_pass, **scheduler_kwargs)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CallGridController:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def start(self) -> None:
        """Render the initial grid and start listening to the session."""
        if self._closed:
            raise CallGridStateError("Controller has been closed")
        if self._started:
            return
        self._started = True

        local_state = self._session.local_state()
        self._local_tile.refresh_local(local_state, name_suffix=self._config.local_name_suffix)
        self._sink.attach_side_container(self._local_tile.view)

        await self._run_pass()
        self._sink.update_participant_count(self._session.participant_count)
        self._unsubscribe = self._session.events.subscribe(self._on_call_event)

    async def close(self) -> None:
        """Stop listening and dispose every tile, including the local one."""
        if self._closed:
            return
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self._scheduler.close()
        background = list(self._background)
        for task in background:
            task.cancel()
        await asyncio.gather(*background, return_exceptions=True)

        for tile in self._identity.tiles():
            tile.dispose()
        self._local_tile.dispose()
        self._identity = IdentityMap.empty()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def identity(self) -> IdentityMap:
        return self._identity

    @property
    def placement(self) -> LocalPlacement:
        return self._placement

    @property
    def local_tile(self) -> LocalTile:
        return self._local_tile

    @property
    def scheduler(self) -> UpdateScheduler:
        return self._scheduler

    def participant_info_list(self) -> list[ParticipantInfo]:
        """Participant list rows: the local user first, then remotes."""
        local_state = self._session.local_state()
        rows = [
            ParticipantInfo(
                display_name=f"{local_state.display_name}{self._config.local_name_suffix}",
                is_muted=bool(local_state.is_muted),
            )
        ]
        rows.extend(
            ParticipantInfo(display_name=participant.display_name, is_muted=participant.is_muted)
            for participant in self._session.remote_participants()
        )
        return rows

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def _require_started(self) -> None:
        if not self._started or self._closed:
            raise CallGridStateError("Controller not running. Use 'async with CallGridController(...):'")

    def request_update(self) -> None:
        """Schedule a coalesced grid update."""
        self._require_started()
        self._scheduler.request()

    async def wait_idle(self) -> None:
        await self._scheduler.wait_idle()

    def _new_tile(self, participant_id: str) -> Tile:
        return Tile(participant_id, self._view_factory())

    async def update_now(self) -> None:
        """Request a pass and wait until it, and any pass already queued, has run.

        Goes through the scheduler, so it never overlaps a pass in flight and
        still honours the minimum spacing between passes.
        """
        self._require_started()
        self._scheduler.request()
        await self._scheduler.wait_idle()

    async def _run_pass(self) -> None:
        async with self._pass_lock:
            await self._reconcile_once()

    async def _reconcile_once(self) -> None:
        previous = self._identity
        participants = displayed_participants(
            self._session.remote_participants(),
            self._session.screen_sharing_participant(),
        )

        diff = reconcile(previous, participants, tile_factory=self._new_tile)
        change = place_local_tile(self._placement, len(diff.identity))

        identity = diff.identity
        if isinstance(change.placement, InGrid):
            identity = identity.with_local_tile(self._local_tile)
        identity.check_invariants()

        operations = diff.operations.merge(change.operations)
        validate_batch(len(previous), len(identity), operations)

        self._apply_local_placement(change.placement, attach=change.attach_side, detach=change.detach_side)
        self._identity = identity

        _logger.debug(
            "Grid pass: %d tiles (%s), deletes=%s moves=%s inserts=%s",
            len(identity),
            "one-on-one" if change.is_one_on_one else "grid",
            list(operations.deletes),
            [(move.source, move.target) for move in operations.moves],
            list(operations.inserts),
        )
        if operations.is_empty:
            return
        await self._apply(operations, identity)

    async def _apply(self, operations: GridOperations, identity: IdentityMap) -> None:
        await self._sink.apply_batch(operations, [tile.view for tile in identity.tiles()])
        if self._sink.item_count != len(identity):
            raise SlotInvariantError(
                f"presentation shows {self._sink.item_count} tiles, identity map holds {len(identity)}"
            )

    def _apply_local_placement(self, placement: LocalPlacement, *, attach: bool, detach: bool) -> None:
        local_view = self._local_tile.view
        if detach:
            self._sink.detach_side_container(local_view)
        if attach:
            self._sink.attach_side_container(local_view)

        is_one_on_one = isinstance(placement, SideContainer)
        if is_one_on_one:
            self._sink.set_side_container_hidden(not self._session.local_state().is_camera_preferred_on)
        else:
            self._sink.set_side_container_hidden(True)
        self._local_tile.set_one_on_one(is_one_on_one)
        self._placement = placement

    def local_video_changed(self, stream: VideoStream | None) -> None:
        """Reflect the local camera being started (``stream``) or stopped (``None``)."""
        self._require_started()
        self._local_tile.set_video(stream)
        if isinstance(self._placement, SideContainer):
            self._sink.set_side_container_hidden(stream is None)

    # ------------------------------------------------------------------
    # Session notifications
    # ------------------------------------------------------------------

    def _on_call_event(self, event: CallEvent) -> None:
        if self._closed:
            return
        if event == CallEvent.REMOTE_PARTICIPANTS_UPDATED:
            self.request_update()
            self._refresh_participant_list()
            self._sink.update_participant_count(self._session.participant_count)
            return
        if event == CallEvent.REMOTE_PARTICIPANT_VIEW_CHANGED:
            self.request_update()
            self._refresh_participant_list()
            return
        if event == CallEvent.IS_MUTED_CHANGED:
            is_muted = self._session.local_state().is_muted
            if is_muted is not None:
                self._local_tile.view.update_mute_indicator(is_muted)
                self._refresh_participant_list()
            return
        if event == CallEvent.APP_RESIGN_ACTIVE:
            self._spawn(self._session.pause_local_video())
            return
        if event == CallEvent.APP_BECOME_ACTIVE:
            self._spawn(self._session.resume_local_video())
            self.request_update()
            return

    def _refresh_participant_list(self) -> None:
        self._sink.refresh_participant_list(self.participant_info_list())

    def _spawn(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task[None]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.debug("Local video pause/resume failed", exc_info=exc)
