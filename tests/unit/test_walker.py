"""Unit tests for vault walking."""

from __future__ import annotations

from pathlib import Path

import pytest

from contextos_sync.ingestion.walker import VaultTraversalError, walk_vault


def _rel(paths, root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in paths}


def iter_documents(root: Path, **kwargs):
    """Paths of the entries that are not excluded."""
    return (e.path for e in walk_vault(root, **kwargs) if not e.excluded)


def test_walk_recurses_and_filters(make_vault) -> None:
    root = make_vault(
        {
            "10-Deep-Knowledge/guide.md": "a",
            "10-Deep-Knowledge/nested/deeper/more.md": "b",
            "20-Concepts/image.png": "not a note",
            "20-Concepts/notes.txt": "not a note",
            "top.md": "c",
        }
    )
    assert _rel(iter_documents(root), root) == {
        "10-Deep-Knowledge/guide.md",
        "10-Deep-Knowledge/nested/deeper/more.md",
        "top.md",
    }


def test_reserved_files_never_become_documents(make_vault) -> None:
    root = make_vault(
        {
            "20-Concepts/.hidden.md": "x",
            "20-Concepts/_draft.md": "x",
            "20-Concepts/README.md": "x",
            "20-Concepts/real.md": "x",
        }
    )
    assert _rel(iter_documents(root), root) == {"20-Concepts/real.md"}


def test_excluded_entries_are_flagged_not_dropped(make_vault) -> None:
    root = make_vault(
        {
            "30-Meetings/_template.md": "x",
            "30-Meetings/README.md": "x",
            "30-Meetings/.obsidian.md": "x",
            "30-Meetings/call.md": "x",
        }
    )
    flagged = {e.path.name: e.excluded for e in walk_vault(root)}
    assert flagged == {"_template.md": True, "README.md": True, "call.md": False}


def test_dot_directories_are_pruned(make_vault) -> None:
    root = make_vault(
        {
            ".obsidian/workspace.md": "x",
            ".trash/20-Concepts/gone.md": "x",
            "20-Concepts/kept.md": "x",
        }
    )
    assert _rel(iter_documents(root), root) == {"20-Concepts/kept.md"}


def test_underscore_directories_are_walked(make_vault) -> None:
    root = make_vault({"_attachments/note.md": "x"})
    assert _rel(iter_documents(root), root) == {"_attachments/note.md"}


def test_custom_extensions(make_vault) -> None:
    root = make_vault({"a.md": "x", "b.markdown": "x", "c.txt": "x"})
    found = _rel(iter_documents(root, extensions=[".md", ".markdown"]), root)
    assert found == {"a.md", "b.markdown"}


def test_walk_is_restartable(make_vault) -> None:
    root = make_vault({"a.md": "x", "sub/b.md": "y"})
    assert _rel(iter_documents(root), root) == _rel(iter_documents(root), root)


def test_walk_is_lazy(tmp_path: Path) -> None:
    walker = walk_vault(tmp_path / "does-not-exist")
    with pytest.raises(VaultTraversalError, match="Cannot read vault directory"):
        next(walker)


def test_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(VaultTraversalError):
        list(iter_documents(tmp_path / "missing"))


def test_file_as_root_is_fatal(tmp_path: Path) -> None:
    root = tmp_path / "file.md"
    root.write_text("x")
    with pytest.raises(OSError):
        list(walk_vault(root))


def test_symlinked_directories_are_not_followed(make_vault) -> None:
    root = make_vault({"20-Concepts/real.md": "x", "30-Meetings/call.md": "y"})
    (root / "20-Concepts" / "loop").symlink_to(root / "20-Concepts", target_is_directory=True)
    (root / "20-Concepts" / "meetings").symlink_to(root / "30-Meetings", target_is_directory=True)

    found = [e.path.relative_to(root).as_posix() for e in walk_vault(root)]

    assert sorted(found) == ["20-Concepts/real.md", "30-Meetings/call.md"]


def test_symlinked_note_files_are_yielded(make_vault) -> None:
    root = make_vault({"shared/source.md": "x", "20-Concepts/.keep": ""})
    (root / "20-Concepts" / "linked.md").symlink_to(root / "shared" / "source.md")

    found = {e.path.relative_to(root).as_posix() for e in walk_vault(root)}

    assert found == {"shared/source.md", "20-Concepts/linked.md"}
