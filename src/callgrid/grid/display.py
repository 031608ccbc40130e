"""Selection of the participants shown in the grid."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from callgrid.models.participant import Participant

_logger = logging.getLogger(__name__)


def displayed_participants(
    roster: Iterable[Participant],
    screen_sharer: Participant | None = None,
) -> list[Participant]:
    """Return the ordered set of remote participants to display.

    An active screen sharer replaces the whole roster.  Participants
    without an identifier are skipped, and a repeated identifier keeps its
    first position.
    """
    candidates: Iterable[Participant] = roster
    if screen_sharer is not None and screen_sharer.id:
        candidates = (screen_sharer,)

    displayed: list[Participant] = []
    seen: set[str] = set()
    for participant in candidates:
        if not participant.id:
            _logger.debug("Skipping participant without identifier: %r", participant.display_name)
            continue
        if participant.id in seen:
            _logger.debug("Skipping duplicate participant %s", participant.id)
            continue
        seen.add(participant.id)
        displayed.append(participant)
    return displayed
