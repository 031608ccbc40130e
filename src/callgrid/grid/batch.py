"""Checking and reference application of grid batches.

Presentation sinks apply a batch against a single indexed collection:
deletes and move sources address the starting arrangement, inserts and
move targets address the ending arrangement.  Items that are neither
deleted nor moved keep their relative order and fill the remaining slots.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TypeVar

from callgrid.exceptions import SlotInvariantError
from callgrid.models.operations import GridOperations

T = TypeVar("T")

_EMPTY = object()


def _check_unique_in_range(label: str, slots: Sequence[int], count: int) -> None:
    seen: set[int] = set()
    for slot in slots:
        if not 0 <= slot < count:
            raise SlotInvariantError(f"{label} slot {slot} outside [0, {count})", slot=slot)
        if slot in seen:
            raise SlotInvariantError(f"{label} slot {slot} referenced twice", slot=slot)
        seen.add(slot)


def validate_batch(old_count: int, new_count: int, operations: GridOperations) -> None:
    """Raise :class:`SlotInvariantError` if *operations* cannot be applied."""
    sources = [move.source for move in operations.moves]
    targets = [move.target for move in operations.moves]

    _check_unique_in_range("delete/move source", [*operations.deletes, *sources], old_count)
    _check_unique_in_range("insert/move target", [*operations.inserts, *targets], new_count)

    expected = old_count - len(operations.deletes) + len(operations.inserts)
    if expected != new_count:
        raise SlotInvariantError(
            f"batch turns {old_count} items into {expected}, expected {new_count} "
            f"({len(operations.deletes)} deletes, {len(operations.inserts)} inserts)"
        )


def apply_batch(items: Sequence[T], operations: GridOperations, inserted: Mapping[int, T]) -> list[T]:
    """Apply *operations* to *items* and return the ending arrangement.

    ``inserted`` supplies the item for every inserted slot.
    """
    new_count = len(items) - len(operations.deletes) + len(operations.inserts)
    validate_batch(len(items), new_count, operations)

    result: list[object] = [_EMPTY] * new_count
    for move in operations.moves:
        result[move.target] = items[move.source]
    for slot in operations.inserts:
        try:
            result[slot] = inserted[slot]
        except KeyError:
            raise SlotInvariantError(f"no item supplied for inserted slot {slot}", slot=slot) from None

    removed = set(operations.deletes) | {move.source for move in operations.moves}
    survivors = iter([item for index, item in enumerate(items) if index not in removed])
    for slot, value in enumerate(result):
        if value is _EMPTY:
            result[slot] = next(survivors)
    return result  # type: ignore[return-value]
