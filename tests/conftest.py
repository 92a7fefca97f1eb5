"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from contextos_sync.store import InMemoryRecordStore


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring a live Supabase project")


@pytest.fixture()
def make_vault(tmp_path: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Return a factory that lays out ``{relpath: content}`` under a temp vault."""

    def _make(files: dict[str, str | bytes]) -> Path:
        for relpath, content in files.items():
            path = tmp_path / relpath
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture()
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()
