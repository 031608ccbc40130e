"""Local tile placement policy.

With exactly one remote participant the local user is shown in a small
side container (one-on-one framing).  Otherwise the local tile takes the
last grid slot.  The two placements are exclusive and tracked by a single
tagged value.
"""

from __future__ import annotations

from dataclasses import dataclass

from callgrid.models.operations import GridMove, GridOperations


@dataclass(frozen=True, slots=True)
class SideContainer:
    """Local tile shown in the dedicated side container."""


@dataclass(frozen=True, slots=True)
class InGrid:
    """Local tile shown in grid slot ``slot``."""

    slot: int


LocalPlacement = SideContainer | InGrid

SIDE_CONTAINER = SideContainer()


@dataclass(frozen=True, slots=True)
class PlacementChange:
    placement: LocalPlacement
    operations: GridOperations
    attach_side: bool = False
    detach_side: bool = False

    @property
    def is_one_on_one(self) -> bool:
        return isinstance(self.placement, SideContainer)


def place_local_tile(previous: LocalPlacement, remote_count: int) -> PlacementChange:
    """Decide the local tile placement for *remote_count* displayed remotes.

    Grid operations follow the same batch semantics as the diff engine:
    the delete and the move source use the previous slot, the insert and
    the move target use the new one.
    """
    if remote_count == 1:
        if isinstance(previous, InGrid):
            return PlacementChange(
                placement=SIDE_CONTAINER,
                operations=GridOperations(deletes=(previous.slot,)),
                attach_side=True,
            )
        return PlacementChange(placement=SIDE_CONTAINER, operations=GridOperations())

    slot = remote_count
    if isinstance(previous, InGrid):
        if previous.slot == slot:
            return PlacementChange(placement=previous, operations=GridOperations())
        return PlacementChange(
            placement=InGrid(slot),
            operations=GridOperations(moves=(GridMove(source=previous.slot, target=slot),)),
        )
    return PlacementChange(
        placement=InGrid(slot),
        operations=GridOperations(inserts=(slot,)),
        detach_side=True,
    )
