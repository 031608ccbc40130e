"""Bidirectional participant-id / grid-slot index.

The map is rebuilt on every reconciliation pass and never mutated in
place.  Tiles live in an arena keyed by their stable handle; two plain
maps index that arena by participant id and by slot.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from callgrid.exceptions import SlotInvariantError
from callgrid.grid.tiles import LocalTile, Tile


class IdentityMap:
    """Immutable index of the tiles occupying grid slots."""

    __slots__ = ("_tiles", "_id_to_slot", "_slot_to_handle")

    def __init__(
        self,
        tiles: dict[int, Tile],
        id_to_slot: dict[str, int],
        slot_to_handle: dict[int, int],
    ) -> None:
        self._tiles = tiles
        self._id_to_slot = id_to_slot
        self._slot_to_handle = slot_to_handle

    @classmethod
    def empty(cls) -> IdentityMap:
        return cls({}, {}, {})

    @classmethod
    def from_tiles(cls, tiles: Sequence[Tile]) -> IdentityMap:
        """Build a map where ``tiles[i]`` occupies slot ``i``."""
        arena: dict[int, Tile] = {}
        id_to_slot: dict[str, int] = {}
        slot_to_handle: dict[int, int] = {}
        for slot, tile in enumerate(tiles):
            if tile.handle in arena:
                raise SlotInvariantError(f"{tile!r} assigned to more than one slot", slot=slot)
            arena[tile.handle] = tile
            slot_to_handle[slot] = tile.handle
            if tile.participant_id is not None:
                if tile.participant_id in id_to_slot:
                    raise SlotInvariantError(
                        f"participant {tile.participant_id!r} assigned to more than one slot",
                        slot=slot,
                    )
                id_to_slot[tile.participant_id] = slot
        return cls(arena, id_to_slot, slot_to_handle)

    def with_local_tile(self, tile: LocalTile) -> IdentityMap:
        """Return a new map with the local tile appended in the last slot."""
        return IdentityMap.from_tiles([*self.tiles(), tile])

    def __len__(self) -> int:
        return len(self._slot_to_handle)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._id_to_slot

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles())

    def __repr__(self) -> str:
        return f"IdentityMap({self.tiles()!r})"

    def slot_of(self, participant_id: str) -> int | None:
        return self._id_to_slot.get(participant_id)

    def tile_at(self, slot: int) -> Tile | None:
        handle = self._slot_to_handle.get(slot)
        if handle is None:
            return None
        return self._tiles[handle]

    def tile_for(self, participant_id: str) -> Tile | None:
        slot = self._id_to_slot.get(participant_id)
        if slot is None:
            return None
        return self.tile_at(slot)

    @property
    def local_slot(self) -> int | None:
        for slot, handle in self._slot_to_handle.items():
            if isinstance(self._tiles[handle], LocalTile):
                return slot
        return None

    def ids(self) -> list[str]:
        """Participant ids in slot order."""
        return [pid for pid, _slot in sorted(self._id_to_slot.items(), key=lambda item: item[1])]

    def tiles(self) -> list[Tile]:
        """Tiles in slot order."""
        return [self._tiles[self._slot_to_handle[slot]] for slot in sorted(self._slot_to_handle)]

    def check_invariants(self) -> None:
        """Raise :class:`SlotInvariantError` unless slots are dense and consistent."""
        count = len(self._slot_to_handle)
        if sorted(self._slot_to_handle) != list(range(count)):
            raise SlotInvariantError(f"slots are not a dense range [0, {count}): {sorted(self._slot_to_handle)}")
        if len(self._tiles) != count:
            raise SlotInvariantError(f"arena holds {len(self._tiles)} tiles for {count} slots")
        for participant_id, slot in self._id_to_slot.items():
            tile = self.tile_at(slot)
            if tile is None or tile.participant_id != participant_id:
                raise SlotInvariantError(f"slot {slot} does not hold participant {participant_id!r}", slot=slot)
        local_tiles = [tile for tile in self._tiles.values() if isinstance(tile, LocalTile)]
        if len(local_tiles) > 1:
            raise SlotInvariantError("local tile occupies more than one slot")
