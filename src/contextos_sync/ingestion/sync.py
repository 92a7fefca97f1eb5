"""Vault → store sync orchestration.

Usage::

    from contextos_sync.ingestion.sync import VaultSync
    from contextos_sync.store import InMemoryRecordStore

    summary = VaultSync(InMemoryRecordStore(), vault_root="ContextOS").run()
    print(summary)

Each note moves through read → parse → route → build → upsert and ends
as a :class:`~contextos_sync.ingestion.outcomes.SyncOutcome`.  A failing
note never aborts the run; only an unreadable vault directory does.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from contextos_sync.config import settings
from contextos_sync.ingestion.frontmatter import parse_note
from contextos_sync.ingestion.outcomes import Failed, Skipped, Synced, SyncOutcome, SyncSummary
from contextos_sync.ingestion.records import NoteSource, RecordBuildError, build_record
from contextos_sync.ingestion.router import DestinationKind, normalize_path, route
from contextos_sync.ingestion.walker import VaultEntry, walk_vault
from contextos_sync.store.base import RecordStoreBase, StoreError

logger = logging.getLogger(__name__)


class _KeyLocks:
    """One lock per ``(table, key)`` so equal keys are never upserted concurrently."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], threading.Lock] = {}

    def __call__(self, table: str, key: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault((table, key), threading.Lock())


class VaultSync:
    """Sync every note under a vault root into a :class:`RecordStoreBase`.

    Parameters
    ----------
    store:
        Destination store backend.
    vault_root:
        Root directory of the vault.  Defaults to ``settings.vault_path``.
    workers:
        Size of the worker pool.  ``1`` processes notes strictly one at a
        time in walk order.
    extensions:
        Recognised note extensions.
    batch:
        Batch label stamped on deep-knowledge records.
    default_source_type:
        ``source_type`` used when a deep-knowledge note does not set one.
    """

    def __init__(
        self,
        store: RecordStoreBase,
        *,
        vault_root: str | Path | None = None,
        workers: int = settings.sync_workers,
        extensions: Iterable[str] | None = None,
        batch: str = settings.ingestion_batch,
        default_source_type: str = settings.default_source_type,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self._store = store
        self.vault_root = Path(vault_root if vault_root is not None else settings.vault_path)
        self.workers = workers
        self.extensions = tuple(extensions or settings.document_extensions)
        self.batch = batch
        self.default_source_type = default_source_type
        self._key_locks = _KeyLocks()

    # -- public API -----------------------------------------------------------

    def run(self) -> SyncSummary:
        """Walk the vault and sync every note.

        Raises
        ------
        VaultTraversalError
            If a vault directory cannot be listed.
        """
        logger.info("Scanning vault: %s", self.vault_root)
        summary = SyncSummary()
        entries = walk_vault(self.vault_root, self.extensions)

        if self.workers == 1:
            for entry in entries:
                self._report(self.process_entry(entry), summary)
        else:
            # Materialise first so a traversal error aborts before any upsert.
            pending = list(entries)
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                for outcome in pool.map(self.process_entry, pending):
                    self._report(outcome, summary)

        logger.info("%s", summary)
        return summary

    def process_entry(self, entry: VaultEntry) -> SyncOutcome:
        if entry.excluded:
            return Skipped(self._relpath(entry.path), "reserved filename")
        return self.sync_document(entry.path)

    def sync_document(self, path: str | Path) -> SyncOutcome:
        """Sync a single note and return its outcome.  Never raises."""
        path = Path(path)
        relpath = self._relpath(path)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return Failed(relpath, f"read error: {exc}")
        note = parse_note(text)

        kind = route(path)
        if kind is DestinationKind.SKIP:
            return Skipped(relpath, "outside synced folders")

        source = NoteSource(stem=path.stem, filename=path.name, relpath=relpath)
        try:
            record = build_record(
                kind,
                note,
                source,
                batch=self.batch,
                default_source_type=self.default_source_type,
            )
        except RecordBuildError as exc:
            return Failed(relpath, str(exc))

        try:
            with self._key_locks(record.table, record.key):
                self._store.upsert(record.table, record.to_row(), record.conflict_key)
        except StoreError as exc:
            return Failed(relpath, str(exc))
        except Exception as exc:
            logger.debug("Unexpected store failure for %s", relpath, exc_info=True)
            return Failed(relpath, f"store error: {exc}")

        return Synced(relpath, kind, record.table, record.key)

    # -- internals ------------------------------------------------------------

    def _relpath(self, path: Path) -> str:
        try:
            return normalize_path(path.relative_to(self.vault_root))
        except ValueError:
            return normalize_path(path)

    @staticmethod
    def _report(outcome: SyncOutcome, summary: SyncSummary) -> None:
        summary.record(outcome)
        if isinstance(outcome, Synced):
            logger.info("✓ %s:%s", outcome.table, outcome.key)
        elif isinstance(outcome, Failed):
            logger.error("✗ %s: %s", outcome.document, outcome.message)
        else:
            logger.debug("- skipped %s (%s)", outcome.document, outcome.reason)
