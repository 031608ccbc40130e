"""Call-session change notifications.

Notifications are payload-free: receivers always re-read the live session
state, so any number of them can be merged into one grid update.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

_logger = logging.getLogger(__name__)

CallEventCallback = Callable[["CallEvent"], None]


class CallEvent(StrEnum):
    REMOTE_PARTICIPANTS_UPDATED = "remote_participants_updated"
    REMOTE_PARTICIPANT_VIEW_CHANGED = "remote_participant_view_changed"
    IS_MUTED_CHANGED = "is_muted_changed"
    APP_RESIGN_ACTIVE = "app_resign_active"
    APP_BECOME_ACTIVE = "app_become_active"


class CallEventHub:
    """Explicit observer list owned by a call session."""

    def __init__(self) -> None:
        self._callbacks: list[CallEventCallback] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: CallEventCallback) -> Callable[[], None]:
        """Register *callback* and return a function that removes it."""
        self._callbacks.append(callback)

        def _unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unsubscribe

    def emit(self, event: CallEvent) -> None:
        # Copy so callbacks may unsubscribe while being dispatched.
        for callback in list(self._callbacks):
            try:
                callback(event)
            except Exception:
                _logger.debug("%s callback failed", event, exc_info=True)
