"""Per-note sync outcomes and the run summary.

Every note ends in exactly one of :class:`Synced`, :class:`Skipped` or
:class:`Failed`.  Outcomes are plain values so aggregation can be tested
without touching the filesystem or the store.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from contextos_sync.ingestion.router import DestinationKind


@dataclass(frozen=True)
class Synced:
    document: str
    kind: DestinationKind
    table: str
    key: str


@dataclass(frozen=True)
class Skipped:
    document: str
    reason: str = ""


@dataclass(frozen=True)
class Failed:
    document: str
    message: str


SyncOutcome = Synced | Skipped | Failed


@dataclass
class SyncSummary:
    """Aggregate counts for one sync run.

    :meth:`record` is safe to call from several worker threads.
    """

    synced: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[Failed] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, outcome: SyncOutcome) -> None:
        with self._lock:
            if isinstance(outcome, Synced):
                self.synced += 1
            elif isinstance(outcome, Skipped):
                self.skipped += 1
            elif isinstance(outcome, Failed):
                self.failed += 1
                self.failures.append(outcome)
            else:
                raise TypeError(f"Unknown sync outcome: {outcome!r}")

    @property
    def total(self) -> int:
        return self.synced + self.skipped + self.failed

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        """Process exit status: ``1`` iff at least one note failed."""
        return 0 if self.ok else 1

    def __str__(self) -> str:
        return f"Done: {self.synced} synced, {self.skipped} skipped, {self.failed} errors"
