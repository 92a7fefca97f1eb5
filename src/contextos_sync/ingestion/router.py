"""Route a vault note to its destination record type by folder."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath


class DestinationKind(str, Enum):
    """Closed set of destinations a note can be synced to.

    Declaration order is the routing priority order.
    """

    DEEP_KNOWLEDGE = "deep_knowledge"
    ATOMIC_CONCEPT = "atomic_concept"
    MEETING_TRANSCRIPT = "meeting_transcript"
    SKIP = "skip"


# Checked in order; the first folder found in the path wins.
FOLDER_ROUTES: tuple[tuple[str, DestinationKind], ...] = (
    ("/10-Deep-Knowledge/", DestinationKind.DEEP_KNOWLEDGE),
    ("/20-Concepts/", DestinationKind.ATOMIC_CONCEPT),
    ("/30-Meetings/", DestinationKind.MEETING_TRANSCRIPT),
)


def normalize_path(path: str | PurePath) -> str:
    """Return *path* as a forward-slash string."""
    return str(path).replace("\\", "/")


def route(path: str | PurePath) -> DestinationKind:
    """Return the :class:`DestinationKind` for *path*, or ``SKIP``."""
    normalized = normalize_path(path)
    if not normalized.startswith("/"):
        normalized = "/" + normalized
    for folder, kind in FOLDER_ROUTES:
        if folder in normalized:
            return kind
    return DestinationKind.SKIP
