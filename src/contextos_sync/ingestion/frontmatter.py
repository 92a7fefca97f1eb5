"""Front-matter parsing for vault notes.

Only the subset of YAML the vault actually uses is understood:

* ``key: value`` scalars, optionally wrapped in one pair of ``"`` or ``'``
* flat lists written inline as ``key: [a, "b", 'c']``

Nested mappings, multi-line values and escape sequences are not supported.
Lines that do not fit the grammar are dropped silently.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

HeaderValue = str | list[str]
"""A decoded header value: either a scalar string or a flat list of strings."""

Header = dict[str, HeaderValue]

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<header>.*?)^---[ \t]*\r?$(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)
_QUOTES = ("'", '"')


@dataclass(frozen=True)
class ParsedNote:
    """Header mapping plus the trimmed body text of a single note."""

    header: Header = field(default_factory=dict)
    body: str = ""

    def get_str(self, key: str) -> str | None:
        """Return header *key* if it decoded to a non-empty scalar string."""
        value = self.header.get(key)
        return value if isinstance(value, str) and value else None

    def get_list(self, key: str) -> list[str]:
        """Return header *key* if it decoded to a list, else an empty list."""
        value = self.header.get(key)
        return list(value) if isinstance(value, list) else []


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        return text[1:-1]
    return text


def parse_value(raw: str) -> HeaderValue:
    """Decode a single trimmed header value."""
    if len(raw) >= 2 and raw.startswith("[") and raw.endswith("]"):
        items: list[str] = []
        for part in raw[1:-1].split(","):
            item = _unquote(part.strip())
            if item:
                items.append(item)
        return items
    return _unquote(raw)


def parse_header_block(block: str) -> Header:
    """Parse the lines between the front-matter markers into a flat mapping."""
    header: Header = {}
    for line in block.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key, value = key.strip(), value.strip()
        if not key or not value:
            continue
        header[key] = parse_value(value)
    return header


def parse_note(text: str) -> ParsedNote:
    """Split raw note *text* into its front-matter header and body.

    A note without a front-matter block at the very start yields an
    empty header and the whole (trimmed) text as body.
    """
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        return ParsedNote(header={}, body=text.strip())
    return ParsedNote(
        header=parse_header_block(match.group("header")),
        body=match.group("body").strip(),
    )
