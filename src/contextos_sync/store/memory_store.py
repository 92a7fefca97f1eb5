"""In-process record store, used for dry runs and tests."""

from __future__ import annotations

import copy
import threading
from typing import Any

from contextos_sync.store.base import RecordStoreBase, StoreError


class InMemoryRecordStore(RecordStoreBase):
    """Dict-backed store with the same full-replace upsert semantics."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def upsert(self, table: str, record: dict[str, Any], conflict_key: str) -> None:
        key = record.get(conflict_key)
        if not key:
            raise StoreError(f"Record for {table!r} has no value for {conflict_key!r}")
        row = copy.deepcopy(record)
        with self._lock:
            self._tables.setdefault(table, {})[key] = row

    def health_check(self) -> bool:
        return True

    def get(self, table: str, key_field: str, key: str) -> dict[str, Any] | None:
        with self._lock:
            row = self._tables.get(table, {}).get(key)
        return copy.deepcopy(row) if row is not None else None

    def rows(self, table: str) -> dict[str, dict[str, Any]]:
        """Snapshot of every row in *table*, keyed by conflict key."""
        with self._lock:
            return copy.deepcopy(self._tables.get(table, {}))

    def snapshot(self) -> dict[str, dict[str, dict[str, Any]]]:
        with self._lock:
            return copy.deepcopy(self._tables)
