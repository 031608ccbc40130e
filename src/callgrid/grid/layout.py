"""Grid shape for a given number of occupied slots."""

from __future__ import annotations

from dataclasses import dataclass

from callgrid._constants import FULL_BLEED_MAX_TILES, SQUARE_GRID_MAX_TILES


@dataclass(frozen=True, slots=True)
class GridShape:
    columns: int
    rows: int

    def cell_size(self, width: float, height: float) -> tuple[float, float]:
        return width / self.columns, height / self.rows


def grid_shape(count: int, *, landscape: bool) -> GridShape:
    """One full-bleed tile, then 2x2, then 3x2 (landscape) or 2x3 (portrait)."""
    if count <= FULL_BLEED_MAX_TILES:
        return GridShape(columns=1, rows=1)
    if count <= SQUARE_GRID_MAX_TILES:
        return GridShape(columns=2, rows=2)
    if landscape:
        return GridShape(columns=3, rows=2)
    return GridShape(columns=2, rows=3)
