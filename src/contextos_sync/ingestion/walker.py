"""Recursive discovery of vault notes."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

RESERVED_PREFIX = "."
DRAFT_PREFIX = "_"
RESERVED_FILENAMES = frozenset({"README.md"})
DEFAULT_EXTENSIONS = (".md",)


class VaultTraversalError(OSError):
    """Raised when a directory inside the vault cannot be listed."""


class VaultEntry(NamedTuple):
    """A document file found in the vault.

    ``excluded`` is ``True`` for reserved files (drafts, READMEs) that
    must never be parsed.
    """

    path: Path
    excluded: bool = False


def walk_vault(
    root: str | Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> Iterator[VaultEntry]:
    """Lazily yield every document file under *root*.

    Dot-prefixed files and directories are pruned, as are files without a
    recognised extension and symlinked directories.  Drafts (``_*``) and reserved filenames are
    yielded with ``excluded=True`` so callers can account for them.

    The order is directory-traversal order and is not sorted.  Each call
    starts a fresh walk.

    Raises
    ------
    VaultTraversalError
        If *root* or any directory below it cannot be read.
    """
    exts = tuple(extensions)
    stack = [Path(root)]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            raise VaultTraversalError(f"Cannot read vault directory {directory}: {exc}") from exc

        subdirs: list[Path] = []
        for entry in entries:
            name = entry.name
            if name.startswith(RESERVED_PREFIX):
                continue
            # Symlinked directories are never followed.
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(Path(entry.path))
                continue
            if not name.endswith(exts):
                if entry.is_symlink():
                    logger.debug("Not following symlink %s", entry.path)
                continue
            excluded = name.startswith(DRAFT_PREFIX) or name in RESERVED_FILENAMES
            yield VaultEntry(Path(entry.path), excluded)
        # Reverse so subdirectories are visited in listing order.
        stack.extend(reversed(subdirs))

