"""Diff engine: maps a new display set onto grid slots.

Tiles are matched by participant id.  A participant already on the grid
keeps its tile instance (refreshed in place); only its slot may change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from callgrid.grid.identity import IdentityMap
from callgrid.grid.tiles import LocalTile, Tile
from callgrid.models.operations import GridMove, GridOperations
from callgrid.models.participant import Participant

_logger = logging.getLogger(__name__)

TileFactory = Callable[[str], Tile]


@dataclass(slots=True)
class DiffResult:
    """Remote-only identity map and the batch that produces it."""

    identity: IdentityMap
    operations: GridOperations
    released: list[Tile] = field(default_factory=list)


def reconcile(
    previous: IdentityMap,
    participants: Sequence[Participant],
    *,
    tile_factory: TileFactory,
) -> DiffResult:
    """Compute the remote tiles for *participants* and the grid operations.

    ``participants[i]`` occupies slot ``i``.  Deletes reference slots of
    *previous*; inserts and move targets reference the new slots.  Remote
    tiles that are no longer displayed are disposed.  The local tile is
    left alone: its slot belongs to the local placement policy.
    """
    unclaimed: dict[int, Tile] = {
        slot: tile for slot, tile in enumerate(previous.tiles()) if not isinstance(tile, LocalTile)
    }

    tiles: list[Tile] = []
    moves: list[GridMove] = []
    inserts: list[int] = []

    for slot, participant in enumerate(participants):
        prev_slot = previous.slot_of(participant.id)
        tile = unclaimed.pop(prev_slot, None) if prev_slot is not None else None
        if tile is None:
            tile = tile_factory(participant.id)
            inserts.append(slot)
        elif prev_slot != slot:
            moves.append(GridMove(source=prev_slot, target=slot))

        tile.refresh(participant)
        tiles.append(tile)

    released = [unclaimed[slot] for slot in sorted(unclaimed)]
    for tile in released:
        tile.dispose()

    operations = GridOperations(
        deletes=tuple(sorted(unclaimed)),
        moves=tuple(moves),
        inserts=tuple(inserts),
    )
    _logger.debug(
        "Diffed %d -> %d remote tiles: %d deletes, %d moves, %d inserts",
        len(previous) - (previous.local_slot is not None),
        len(tiles),
        len(operations.deletes),
        len(operations.moves),
        len(operations.inserts),
    )
    return DiffResult(identity=IdentityMap.from_tiles(tiles), operations=operations, released=released)
