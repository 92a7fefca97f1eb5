"""Record shaping: turn a parsed note into the row stored for its destination.

Each destination has its own pydantic model whose field names are the
column names of the target table.  Natural keys are derived
deterministically from the front-matter and the filename so that
re-syncing an unchanged note always targets the same row.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any, ClassVar, NamedTuple

from pydantic import BaseModel, Field

from contextos_sync.config import settings
from contextos_sync.ingestion.frontmatter import ParsedNote
from contextos_sync.ingestion.router import DestinationKind

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")

SUMMARY_FALLBACK_CHARS = 300


class RecordBuildError(ValueError):
    """Raised when a note cannot be shaped into a record (e.g. no usable key)."""


def slugify(text: str) -> str:
    """Lower-case *text* and collapse every run of non ``[a-z0-9]`` chars to ``_``.

    >>> slugify("Claude Code: MCP Guide!")
    'claude_code_mcp_guide'
    """
    return _NON_SLUG_RE.sub("_", text.lower()).strip("_")


def first_key(candidates: Iterable[Callable[[], str | None]]) -> str | None:
    """Evaluate key *candidates* in order and return the first non-empty one."""
    for candidate in candidates:
        value = candidate()
        if value:
            return value
    return None


# ── Record models ─────────────────────────────────────────────────────


class StoredRecord(BaseModel):
    """Base class for every row written to the store."""

    table: ClassVar[str]
    conflict_key: ClassVar[str]

    @property
    def key(self) -> str:
        return getattr(self, self.conflict_key)

    def to_row(self) -> dict[str, Any]:
        """Return the full column mapping, ``None`` values included."""
        return self.model_dump(mode="json")


class KnowledgeMetadata(BaseModel):
    """Free-form metadata column of a deep-knowledge entry."""

    tags: list[str] = Field(default_factory=list)
    topic_primary: str | None = None
    difficulty_tier: str | None = None
    source_file: str
    batch: str


class DeepKnowledgeEntry(StoredRecord):
    """A long-form guide from ``10-Deep-Knowledge``."""

    table: ClassVar[str] = "deep_knowledge"
    conflict_key: ClassVar[str] = "id"

    id: str
    title: str
    subtitle: str | None = None
    author: str | None = None
    role_focus: str | None = None
    category: str | None = None
    source_type: str
    raw_content: str
    metadata: KnowledgeMetadata
    published_date: str | None = None


class AtomicConcept(StoredRecord):
    """A single implementation concept from ``20-Concepts``."""

    table: ClassVar[str] = "atomic_concepts"
    conflict_key: ClassVar[str] = "concept_name"

    concept_name: str
    summary: str
    tags: list[str] = Field(default_factory=list)


class MeetingTranscript(StoredRecord):
    """A raw meeting transcript from ``30-Meetings``."""

    table: ClassVar[str] = "raw_meeting_intelligence"
    conflict_key: ClassVar[str] = "meeting_id"

    meeting_id: str
    source_relpath: str
    payload: str


Record = DeepKnowledgeEntry | AtomicConcept | MeetingTranscript


class NoteSource(NamedTuple):
    """Where a note came from, for filename fallbacks and provenance."""

    stem: str
    """Filename without extension."""
    filename: str
    relpath: str
    """Forward-slash path relative to the vault root."""


# ── Builders ──────────────────────────────────────────────────────────


def _require_key(key: str | None, kind: DestinationKind, source: NoteSource) -> str:
    if not key:
        raise RecordBuildError(f"No usable {kind.value} key for {source.relpath}")
    return key


def _slug_or_none(value: str | None) -> str | None:
    return slugify(value) if value else None


def build_deep_knowledge(
    note: ParsedNote,
    source: NoteSource,
    *,
    batch: str | None = None,
    default_source_type: str | None = None,
) -> DeepKnowledgeEntry:
    title = note.get_str("title")
    key = first_key([
        lambda: note.get_str("id"),
        lambda: _slug_or_none(title),
        lambda: slugify(source.stem),
    ])
    return DeepKnowledgeEntry(
        id=_require_key(key, DestinationKind.DEEP_KNOWLEDGE, source),
        title=title or source.stem,
        subtitle=note.get_str("subtitle"),
        author=note.get_str("author"),
        role_focus=note.get_str("role_focus"),
        category=note.get_str("category"),
        source_type=note.get_str("source_type") or default_source_type or settings.default_source_type,
        raw_content=note.body,
        metadata=KnowledgeMetadata(
            tags=note.get_list("tags"),
            topic_primary=note.get_str("topic_primary"),
            difficulty_tier=note.get_str("difficulty_tier"),
            source_file=source.filename,
            batch=batch or settings.ingestion_batch,
        ),
        published_date=note.get_str("published_date"),
    )


def summarize(body: str) -> str:
    """First non-blank line of *body*, else its first few hundred chars."""
    for line in body.splitlines():
        if line.strip():
            return line.strip()
    return body[:SUMMARY_FALLBACK_CHARS]


def build_atomic_concept(note: ParsedNote, source: NoteSource) -> AtomicConcept:
    # Concept names are used verbatim, not slugified.
    key = first_key([
        lambda: note.get_str("concept_name"),
        lambda: note.get_str("title"),
        lambda: source.stem,
    ])
    return AtomicConcept(
        concept_name=_require_key(key, DestinationKind.ATOMIC_CONCEPT, source),
        summary=summarize(note.body),
        tags=note.get_list("tags"),
    )


def build_meeting_transcript(note: ParsedNote, source: NoteSource) -> MeetingTranscript:
    key = first_key([
        lambda: note.get_str("meeting_id"),
        lambda: _slug_or_none(note.get_str("title")),
        lambda: slugify(source.stem),
    ])
    return MeetingTranscript(
        meeting_id=_require_key(key, DestinationKind.MEETING_TRANSCRIPT, source),
        source_relpath=source.relpath,
        payload=note.body,
    )


def build_record(
    kind: DestinationKind,
    note: ParsedNote,
    source: NoteSource,
    *,
    batch: str | None = None,
    default_source_type: str | None = None,
) -> Record:
    """Shape *note* into the record type for *kind*.

    Raises
    ------
    RecordBuildError
        If *kind* is ``SKIP`` or no natural key can be derived.
    """
    if kind is DestinationKind.DEEP_KNOWLEDGE:
        return build_deep_knowledge(
            note, source, batch=batch, default_source_type=default_source_type
        )
    if kind is DestinationKind.ATOMIC_CONCEPT:
        return build_atomic_concept(note, source)
    if kind is DestinationKind.MEETING_TRANSCRIPT:
        return build_meeting_transcript(note, source)
    raise RecordBuildError(f"Notes routed to {kind.value!r} are not stored")
