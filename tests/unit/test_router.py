"""Unit tests for folder routing."""

from __future__ import annotations

from pathlib import PurePosixPath, PureWindowsPath

import pytest

from contextos_sync.ingestion.router import DestinationKind, normalize_path, route


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/vault/10-Deep-Knowledge/guide.md", DestinationKind.DEEP_KNOWLEDGE),
        ("/vault/20-Concepts/sub/concept.md", DestinationKind.ATOMIC_CONCEPT),
        ("/vault/30-Meetings/2024/call.md", DestinationKind.MEETING_TRANSCRIPT),
        ("/vault/40-Archive/old.md", DestinationKind.SKIP),
        ("/vault/notes.md", DestinationKind.SKIP),
    ],
)
def test_route_by_folder(path: str, expected: DestinationKind) -> None:
    assert route(path) is expected


def test_concepts_folder_anywhere_in_path() -> None:
    assert route("/a/b/Projects/20-Concepts/x/y/z.md") is DestinationKind.ATOMIC_CONCEPT


def test_priority_order_resolves_ties() -> None:
    path = "/vault/30-Meetings/20-Concepts/10-Deep-Knowledge/x.md"
    assert route(path) is DestinationKind.DEEP_KNOWLEDGE


def test_folder_name_must_be_a_whole_segment() -> None:
    assert route("/vault/my-20-Concepts/x.md") is DestinationKind.SKIP
    assert route("/vault/20-Concepts.md") is DestinationKind.SKIP


def test_relative_paths_route() -> None:
    assert route("10-Deep-Knowledge/a.md") is DestinationKind.DEEP_KNOWLEDGE
    assert route(PurePosixPath("30-Meetings/a.md")) is DestinationKind.MEETING_TRANSCRIPT


def test_windows_paths_are_normalised() -> None:
    path = PureWindowsPath(r"C:\vault\20-Concepts\concept.md")
    assert normalize_path(path) == "C:/vault/20-Concepts/concept.md"
    assert route(path) is DestinationKind.ATOMIC_CONCEPT
