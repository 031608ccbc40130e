#!/usr/bin/env python3
"""Drive a participant grid through a simulated call.

Participants join, leave, reorder and start/stop screen sharing at random
intervals.  Every notification goes through the real controller and
scheduler, and each grid batch is printed together with the resulting
arrangement, so bursts collapsing into single updates are easy to see.

Usage
-----
::

    python scripts/simulate_call.py --steps 40 --seed 7
    python scripts/simulate_call.py --interval 0.5 --burst 0.05 -v

Options::

    --steps N           Number of roster changes to simulate (default: 30)
    --seed N            Random seed (default: random)
    --interval SECONDS  Minimum spacing between grid updates (default: 1.0)
    --burst SECONDS     Mean delay between roster changes (default: 0.2)
    --verbose, -v       Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import itertools
import logging
import random
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from callgrid import (  # noqa: E402
    CallEvent,
    CallEventHub,
    CallGridController,
    GridConfig,
    GridOperations,
    LocalMediaState,
    MediaStreamType,
    Participant,
    VideoStream,
    apply_batch,
    grid_shape,
)

_NAMES = ["Ada", "Grace", "Linus", "Guido", "Barbara", "Ken", "Radia", "Dennis", "Frances", "Edsger"]


class ConsoleView:
    def __init__(self, label: str = "") -> None:
        self.label = label
        self.flags = ""

    def __repr__(self) -> str:
        return f"{self.label}{self.flags}"

    def update_display_name(self, display_name: str) -> None:
        self.label = display_name

    def update_mute_indicator(self, is_muted: bool) -> None:
        self.flags = "(m)" if is_muted else ""

    def update_active_speaker(self, is_speaking: bool) -> None:
        return None

    def update_video_stream(self, stream: VideoStream | None, *, is_screen_sharing: bool = False) -> None:
        if is_screen_sharing:
            self.flags = "[screen]"

    def dispose(self) -> None:
        return None

    def update_video_displayed(self, is_displayed: bool) -> None:
        return None

    def update_display_name_visible(self, is_visible: bool) -> None:
        return None

    def update_camera_switch(self, *, is_one_on_one: bool) -> None:
        return None


class ConsoleSink:
    def __init__(self) -> None:
        self.items: list[Any] = []
        self.side: Any = None
        self.batches = 0

    @property
    def item_count(self) -> int:
        return len(self.items)

    async def apply_batch(self, operations: GridOperations, views: Sequence[Any]) -> None:
        inserted = {slot: views[slot] for slot in operations.inserts}
        self.items = apply_batch(self.items, operations, inserted)
        self.batches += 1
        shape = grid_shape(len(self.items), landscape=False)
        moves = [(move.source, move.target) for move in operations.moves]
        print(
            f"  batch #{self.batches}: del={list(operations.deletes)} mov={moves} ins={list(operations.inserts)}"
            f"  -> {shape.columns}x{shape.rows} {self.items} side={self.side}"
        )

    def attach_side_container(self, view: Any) -> None:
        self.side = view

    def detach_side_container(self, view: Any) -> None:
        self.side = None

    def set_side_container_hidden(self, hidden: bool) -> None:
        return None

    def update_participant_count(self, count: int) -> None:
        return None

    def refresh_participant_list(self, participants: Sequence[Any]) -> None:
        return None


class SimulatedSession:
    def __init__(self, rng: random.Random) -> None:
        self.events = CallEventHub()
        self.roster: list[Participant] = []
        self.sharer: Participant | None = None
        self._rng = rng
        self._ids = itertools.count(1)

    @property
    def participant_count(self) -> int:
        return len(self.roster) + 1

    def remote_participants(self) -> list[Participant]:
        return list(self.roster)

    def screen_sharing_participant(self) -> Participant | None:
        return self.sharer

    def local_state(self) -> LocalMediaState:
        return LocalMediaState(display_name="Local", is_muted=False, is_camera_preferred_on=True)

    async def pause_local_video(self) -> None:
        return None

    async def resume_local_video(self) -> None:
        return None

    def churn(self) -> str:
        """Apply one random roster change and return its description."""
        action = self._rng.random()
        if action < 0.4 or not self.roster:
            pid = next(self._ids)
            name = f"{self._rng.choice(_NAMES)}{pid}"
            self.roster.append(
                Participant(
                    id=f"user-{pid}",
                    display_name=name,
                    is_muted=self._rng.random() < 0.3,
                    video_streams=(VideoStream(id=pid),),
                )
            )
            return f"{name} joined"
        if action < 0.7:
            gone = self.roster.pop(self._rng.randrange(len(self.roster)))
            if self.sharer is not None and self.sharer.id == gone.id:
                self.sharer = None
            return f"{gone.display_name} left"
        if action < 0.85:
            self._rng.shuffle(self.roster)
            return "roster reordered"
        if self.sharer is None:
            chosen = self._rng.choice(self.roster)
            screen = VideoStream(id=f"{chosen.id}-screen", stream_type=MediaStreamType.SCREEN_SHARING)
            streams = (*chosen.video_streams, screen)
            self.sharer = chosen.model_copy(update={"video_streams": streams})
            return f"{chosen.display_name} started screen sharing"
        name = self.sharer.display_name
        self.sharer = None
        return f"{name} stopped screen sharing"


async def run() -> None:
    parser = argparse.ArgumentParser(description="Simulate participant churn against the grid controller")
    parser.add_argument("--steps", type=int, default=30, help="Number of roster changes to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--interval", type=float, default=1.0, help="Minimum seconds between grid updates")
    parser.add_argument("--burst", type=float, default=0.2, help="Mean seconds between roster changes")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rng = random.Random(args.seed)
    session = SimulatedSession(rng)
    sink = ConsoleSink()
    config = GridConfig.from_env(min_update_interval=args.interval)

    async with CallGridController(session, sink, ConsoleView("Local"), ConsoleView, config=config) as controller:
        for step in range(1, args.steps + 1):
            await asyncio.sleep(rng.expovariate(1.0 / args.burst) if args.burst > 0 else 0)
            print(f"[{step:3d}] {session.churn()}")
            session.events.emit(CallEvent.REMOTE_PARTICIPANTS_UPDATED)
        await controller.wait_idle()

    print(f"\n{args.steps} roster changes rendered in {sink.batches} batches")


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\nDone.")


if __name__ == "__main__":
    main()
