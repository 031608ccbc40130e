"""Custom exception hierarchy for callgrid."""

from __future__ import annotations


class CallGridError(Exception):
    """Base exception for all callgrid errors."""


class CallGridConfigError(CallGridError):
    """Invalid or missing configuration."""


class CallGridStateError(CallGridError):
    """Controller used outside of its started lifecycle."""


class SlotInvariantError(CallGridError):
    """Grid slots or a batch of grid operations are inconsistent.

    This is a programming error: the reconciliation engine keeps slots
    dense and emits batches in presentation-safe order, so it is never
    raised for valid collaborator input and is not caught internally.
    """

    def __init__(self, message: str, *, slot: int | None = None) -> None:
        self.slot = slot
        super().__init__(message)
