"""
Store: keyed, idempotent persistence of synced records.

Public surface
--------------
- :class:`RecordStoreBase`: abstract backend (subclass for other stores).
- :class:`SupabaseRecordStore`: default Supabase / PostgREST backend.
- :class:`InMemoryRecordStore`: dict-backed store for dry runs and tests.
- :class:`StoreError`: raised by backends on failed writes.
"""

from contextos_sync.store.base import RecordStoreBase, StoreError
from contextos_sync.store.memory_store import InMemoryRecordStore

__all__ = [
    "InMemoryRecordStore",
    "RecordStoreBase",
    "StoreError",
    "SupabaseRecordStore",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import SupabaseRecordStore to avoid pulling in requests at import time."""
    if name == "SupabaseRecordStore":
        from contextos_sync.store.supabase_store import SupabaseRecordStore

        return SupabaseRecordStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
