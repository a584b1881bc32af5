"""Plain-text helpers over rendered document HTML.

These helpers back the search index and the listing/outline views: they
strip markup (dropping ``script`` and ``style`` contents), build excerpts
that never cut a word in half, estimate reading time, and read heading
records back out of the final HTML.

Examples
--------
>>> from folio_pages.text import excerpt, strip_html
>>> strip_html("<p>Hello <b>world</b></p><script>x()</script>")
'Hello world'
>>> excerpt("one two three", max_length=8)
'one two...'
"""

from __future__ import annotations

import math
import re
import typing as typ

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ._constants import HEADER_ANCHOR_CLASS
from .models import HeadingRecord, TableOfContentsEntry
from .slugs import slugify

if typ.TYPE_CHECKING:
    import collections.abc as cabc

HEADING_PATTERN = re.compile(r"^h[2-6]$")
SKIPPED_TAGS = frozenset({"script", "style"})
BLOCK_TAGS = frozenset(
    {
        "blockquote",
        "br",
        "div",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "li",
        "ol",
        "p",
        "pre",
        "table",
        "td",
        "th",
        "tr",
        "ul",
    }
)
_WHITESPACE = re.compile(r"\s+")
ELLIPSIS = "..."


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML fragment with the stdlib-backed BeautifulSoup parser."""
    return BeautifulSoup(html, "html.parser")


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WHITESPACE.sub(" ", text).strip()


def is_visible_string(node: object) -> bool:
    """Return True for text nodes that a reader would see on the page."""
    if not isinstance(node, NavigableString) or isinstance(node, Comment):
        return False
    return not any(parent.name in SKIPPED_TAGS for parent in node.parents)


def is_header_anchor(node: NavigableString) -> bool:
    """Return True when ``node`` is the ``#`` glyph of a heading self-link."""
    parent = node.parent
    return (
        isinstance(parent, Tag)
        and parent.name == "a"
        and HEADER_ANCHOR_CLASS in (parent.get("class") or [])
    )


def visible_text(root: Tag, *, skip_anchors: bool = True) -> str:
    """Return the collapsed visible text beneath ``root``.

    Text runs are joined without separators so inline markup never splits a
    word; block-level elements contribute a space so adjacent blocks do not
    run together.
    """
    parts: list[str] = []
    for node in root.descendants:
        if isinstance(node, Tag):
            if node.name in BLOCK_TAGS:
                parts.append(" ")
        elif is_visible_string(node) and not (skip_anchors and is_header_anchor(node)):
            parts.append(str(node))
    return collapse_whitespace("".join(parts))


def strip_html(html: str) -> str:
    """Return the visible text of ``html`` with whitespace collapsed.

    ``script`` and ``style`` contents are dropped entirely, as are the ``#``
    glyphs of heading self-links.
    """
    return visible_text(parse_html(html))


def excerpt(text: str, max_length: int = 200) -> str:
    """Return ``text`` truncated at the last word boundary before ``max_length``.

    Text that already fits is returned unchanged. Truncated text ends with
    ``...``, so the result is at most ``max_length + 3`` characters long.
    """
    if len(text) <= max_length:
        return text
    cut = text[:max_length]
    last_space = cut.rfind(" ")
    if last_space > 0:
        cut = cut[:last_space]
    return f"{cut.rstrip()}{ELLIPSIS}"


def estimate_reading_time(html: str, words_per_minute: int = 200) -> int:
    """Return the estimated reading time of ``html`` in whole minutes (min 1)."""
    words = len(strip_html(html).split())
    return max(1, math.ceil(words / words_per_minute))


def iter_headings(soup: BeautifulSoup) -> cabc.Iterator[Tag]:
    """Yield ``h2``-``h6`` elements in document order."""
    yield from soup.find_all(HEADING_PATTERN)


def extract_heading_records(html: str) -> list[HeadingRecord]:
    """Return a :class:`HeadingRecord` for every non-empty h2-h6 heading."""
    records: list[HeadingRecord] = []
    for heading in iter_headings(parse_html(html)):
        title = visible_text(heading)
        if not title:
            continue
        anchor_id = heading.get("id") or slugify(title)
        records.append(
            HeadingRecord(level=int(heading.name[1]), title=title, anchor_id=anchor_id)
        )
    return records


def build_outline(html: str) -> list[TableOfContentsEntry]:
    """Return the floating outline entries for headings that carry an ``id``."""
    outline: list[TableOfContentsEntry] = []
    for heading in iter_headings(parse_html(html)):
        anchor_id = heading.get("id")
        if not anchor_id:
            continue
        outline.append(
            TableOfContentsEntry(
                level=int(heading.name[1]),
                id=anchor_id,
                title=visible_text(heading),
                href=f"#{anchor_id}",
            )
        )
    return outline


def preview_headings(html: str, limit: int = 4) -> list[str]:
    """Return up to ``limit`` heading titles for listing cards."""
    return [record.title for record in extract_heading_records(html)[:limit]]


__all__ = [
    "BLOCK_TAGS",
    "ELLIPSIS",
    "build_outline",
    "collapse_whitespace",
    "estimate_reading_time",
    "excerpt",
    "extract_heading_records",
    "is_header_anchor",
    "is_visible_string",
    "iter_headings",
    "parse_html",
    "preview_headings",
    "strip_html",
    "visible_text",
]
