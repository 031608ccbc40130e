"""Grid batch operations emitted by a reconciliation pass.

A batch follows indexed-collection batch update semantics: deletes and
move sources reference slots of the *starting* arrangement, inserts and
move targets reference slots of the *ending* arrangement.  Presentation
sinks apply deletes, then moves, then inserts as one transition.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GridMove(BaseModel):
    """A tile moving from ``source`` (old slot) to ``target`` (new slot)."""

    model_config = ConfigDict(frozen=True)

    source: int = Field(..., ge=0)
    target: int = Field(..., ge=0)


class GridOperations(BaseModel):
    """Batch of grid changes produced by one reconciliation pass."""

    model_config = ConfigDict(frozen=True)

    deletes: tuple[int, ...] = ()
    moves: tuple[GridMove, ...] = ()
    inserts: tuple[int, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.deletes or self.moves or self.inserts)

    def merge(self, other: GridOperations) -> GridOperations:
        """Combine two batches computed against the same arrangements."""
        return GridOperations(
            deletes=tuple(sorted(self.deletes + other.deletes)),
            moves=tuple(sorted(self.moves + other.moves, key=lambda move: move.target)),
            inserts=tuple(sorted(self.inserts + other.inserts)),
        )
