"""Base model and enum for call snapshots.

Every snapshot model inherits from :class:`CallGridBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase SDK keys (``displayName``,
  ``isMuted``) map automatically to snake_case fields.
* Frozen instances: a snapshot is read once per reconciliation pass and
  never mutated.

Enums inherit from :class:`CallGridEnum` which resolves any value without
a mapped member to ``UNKNOWN`` instead of raising ``ValueError``.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CallGridEnum(enum.StrEnum):
    """Base for string enums fed by the calling SDK.

    Every subclass **must** define ``UNKNOWN = "unknown"``.
    """

    @classmethod
    def _missing_(cls, value: object) -> CallGridEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: CallGridEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class CallGridBaseModel(BaseModel):
    """Base for call snapshot models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
