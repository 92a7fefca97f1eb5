"""Abstract base class for record-store backends.

Adding a new backend only requires subclassing :class:`RecordStoreBase`
and implementing :meth:`~RecordStoreBase.upsert` and
:meth:`~RecordStoreBase.health_check`.  The sync pipeline is
backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StoreError(Exception):
    """Raised when the backing store rejects or fails an upsert."""


class RecordStoreBase(ABC):
    """Backend-agnostic keyed record store."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def upsert(self, table: str, record: dict[str, Any], conflict_key: str) -> None:
        """Insert *record* into *table*, or fully replace the existing row.

        Rows are matched on ``record[conflict_key]``.  The write must be
        atomic for the single record: readers never observe a partial row.

        Raises
        ------
        StoreError
            On any failure; callers treat it as a per-record failure.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def get(self, table: str, key_field: str, key: str) -> dict[str, Any] | None:
        """Fetch a single row by key.  Optional, raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support get")
