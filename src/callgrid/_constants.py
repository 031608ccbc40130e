"""Internal constants shared across the library."""

# Minimum quiescence window (seconds) between two participant grid updates.
UPDATE_DELAY_INTERVAL: float = 2.5

LOCAL_NAME_SUFFIX = " (Me)"

# Grid sizing thresholds (occupied tile counts).
FULL_BLEED_MAX_TILES = 1
SQUARE_GRID_MAX_TILES = 4
