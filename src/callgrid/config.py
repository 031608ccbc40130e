"""Controller configuration for callgrid."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from callgrid._constants import LOCAL_NAME_SUFFIX, UPDATE_DELAY_INTERVAL
from callgrid.exceptions import CallGridConfigError


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise CallGridConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class GridConfig:
    """Participant grid configuration.

    Parameters
    ----------
    min_update_interval : float
        Minimum spacing in seconds between the completion of one grid
        update and the start of the next.  Bursts of participant
        notifications arriving inside this window are coalesced into a
        single update.  Defaults to 2.5 seconds.  Set to ``0`` to run
        updates as soon as the previous one completes.
    local_name_suffix : str
        Suffix appended to the local user's display name on their own
        tile and in the participant list.
    """

    min_update_interval: float = UPDATE_DELAY_INTERVAL
    local_name_suffix: str = LOCAL_NAME_SUFFIX

    def __post_init__(self) -> None:
        interval = self.min_update_interval
        if not isinstance(interval, (int, float)) or math.isnan(interval) or interval < 0:
            raise CallGridConfigError(f"min_update_interval must be a non-negative number, got {interval!r}")

    @classmethod
    def from_env(cls, **overrides: Any) -> GridConfig:
        """Create configuration from environment variables.

        Reads ``CALLGRID_MIN_UPDATE_INTERVAL`` and
        ``CALLGRID_LOCAL_NAME_SUFFIX``.  Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        GridConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        interval_env = env.get("CALLGRID_MIN_UPDATE_INTERVAL")
        if interval_env is not None and "min_update_interval" not in overrides:
            config_kwargs["min_update_interval"] = _env_float("CALLGRID_MIN_UPDATE_INTERVAL", interval_env)

        suffix_env = env.get("CALLGRID_LOCAL_NAME_SUFFIX")
        if suffix_env is not None:
            config_kwargs["local_name_suffix"] = suffix_env

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
