"""Command-line entry point: ``contextos-sync``."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from contextos_sync.config import settings
from contextos_sync.ingestion.sync import VaultSync
from contextos_sync.ingestion.walker import VaultTraversalError
from contextos_sync.store import InMemoryRecordStore, RecordStoreBase

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync an Obsidian vault into Supabase")
    parser.add_argument(
        "--vault",
        type=Path,
        default=settings.vault_path,
        help="Vault root directory (default: $VAULT_PATH)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.sync_workers,
        help="Number of notes synced concurrently (default: 1)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Shape every record but keep it in memory instead of writing to Supabase",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped notes too")
    return parser


def _make_store(dry_run: bool) -> RecordStoreBase | None:
    if dry_run:
        return InMemoryRecordStore()
    missing = settings.missing_store_settings()
    if missing:
        logger.error("Missing required env vars: %s", ", ".join(missing))
        return None

    from contextos_sync.store.supabase_store import SupabaseRecordStore

    store = SupabaseRecordStore(
        settings.supabase_url,
        settings.supabase_service_role_key,
        timeout=settings.store_timeout,
    )
    if not store.health_check():
        logger.error("Supabase is not reachable at %s", settings.supabase_url)
        return None
    return store


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    store = _make_store(args.dry_run)
    if store is None:
        return 1

    try:
        summary = VaultSync(store, vault_root=args.vault, workers=args.workers).run()
    except (VaultTraversalError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    return summary.exit_code
