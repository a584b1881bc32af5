"""Build and query the flat client-side search index.

Every :class:`~folio_pages.models.ContentDocument` contributes one
:class:`~folio_pages.models.PageEntry` followed by one
:class:`~folio_pages.models.SectionEntry` per ``h2``-``h6`` heading, in
document order. Each entry carries a precomputed lowercase ``search_text``;
querying is a plain case-insensitive substring test over that string, capped
to the first matches in index order. No tokenizing or ranking happens here.

Example
-------
>>> from folio_pages.models import ContentDocument
>>> from folio_pages.search_index import build_search_index, search
>>> doc = ContentDocument(
...     slug="fiat-shamir-pitfalls",
...     title="Fiat-Shamir Pitfalls",
...     body_html="<p>Beware nonce reuse.</p>",
... )
>>> index = build_search_index([doc])
>>> [result.entry.id for result in search(index, "NONCE")]
['fiat-shamir-pitfalls']
"""

from __future__ import annotations

import dataclasses as dc
import json
import re
import typing as typ
from html import escape

import structlog
from bs4 import Tag

from ._constants import (
    DEFAULT_CONTEXT_CHARS,
    DEFAULT_RESULT_LIMIT,
    SEARCH_HIGHLIGHT_CLASS,
)
from .models import PageEntry, SearchResult, SectionEntry
from .slugs import slugify
from .text import (
    BLOCK_TAGS,
    ELLIPSIS,
    HEADING_PATTERN,
    collapse_whitespace,
    excerpt,
    is_header_anchor,
    is_visible_string,
    parse_html,
    visible_text,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4 import BeautifulSoup

    from .models import ContentDocument, SearchIndexEntry

logger = structlog.get_logger(__name__)

DESCRIPTION_LENGTH = 200
SECTION_CONTENT_LIMIT = 500


@dc.dataclass(slots=True)
class _SectionSpan:
    """Mutable accumulator for one heading and the text that follows it."""

    heading: Tag
    ordinal: int
    parts: list[str] = dc.field(default_factory=list)


def build_search_index(
    documents: cabc.Iterable[ContentDocument],
    *,
    path_prefix: str = "/",
    page_suffix: str = "",
) -> list[SearchIndexEntry]:
    """Flatten ``documents`` into page and section search entries.

    Parameters
    ----------
    documents : Iterable[ContentDocument]
        Rendered documents, in the order the index should follow.
    path_prefix : str, optional
        String prepended to each slug when forming entry paths. Defaults to
        ``"/"`` so paths are site-rooted (``/plonk#setup``).
    page_suffix : str, optional
        String appended to each slug, before any fragment. The site generator
        passes ``".html"`` so paths match the page files it writes
        (``/plonk.html#setup``).

    Returns
    -------
    list[SearchIndexEntry]
        One page entry per document, each immediately followed by that
        document's section entries in heading order.
    """
    index: list[SearchIndexEntry] = []
    pages = 0
    for document in documents:
        soup = parse_html(document.body_html)
        text = visible_text(soup)
        page_path = f"{path_prefix}{document.slug}{page_suffix}"
        index.append(_page_entry(document, text, page_path))
        index.extend(_section_entries(soup, document, page_path))
        pages += 1
    logger.info("search_index_built", pages=pages, entries=len(index))
    return index


def _page_entry(document: ContentDocument, text: str, page_path: str) -> PageEntry:
    return PageEntry(
        id=document.slug,
        title=document.title,
        slug=document.slug,
        path=page_path,
        category=document.category,
        parent=document.parent,
        content=text,
        description=document.description or excerpt(text, DESCRIPTION_LENGTH),
        search_text=f"{document.title} {text}".lower(),
    )


def _section_entries(
    soup: BeautifulSoup, document: ContentDocument, page_path: str
) -> list[SectionEntry]:
    entries: list[SectionEntry] = []
    for span in _collect_sections(soup):
        heading_text = visible_text(span.heading)
        if not heading_text:
            continue
        section_text = collapse_whitespace("".join(span.parts))
        section_id = span.heading.get("id") or slugify(heading_text)
        entries.append(
            SectionEntry(
                id=f"{document.slug}-section-{span.ordinal}",
                title=heading_text,
                page_title=document.title,
                slug=document.slug,
                section_id=section_id,
                level=int(span.heading.name[1]),
                content=f"{heading_text} {section_text}"[:SECTION_CONTENT_LIMIT],
                path=f"{page_path}#{section_id}",
                search_text=(
                    f"{heading_text} {section_text} {document.title}".lower()
                ),
            )
        )
    return entries


def _collect_sections(soup: BeautifulSoup) -> list[_SectionSpan]:
    """Split the document into heading spans with a single ordered walk.

    Text belongs to the most recent ``h2``-``h6`` heading that precedes it;
    text inside the heading itself, before the first heading, or inside
    ``script``/``style`` is not collected.
    """
    spans: list[_SectionSpan] = []
    current: _SectionSpan | None = None
    for node in soup.descendants:
        if isinstance(node, Tag):
            if HEADING_PATTERN.match(node.name):
                current = _SectionSpan(heading=node, ordinal=len(spans))
                spans.append(current)
            elif current is not None and node.name in BLOCK_TAGS:
                current.parts.append(" ")
            continue
        if current is None or not is_visible_string(node) or is_header_anchor(node):
            continue
        if any(parent is current.heading for parent in node.parents):
            continue
        current.parts.append(str(node))
    return spans


def search(
    index: cabc.Sequence[SearchIndexEntry],
    query: str,
    *,
    limit: int = DEFAULT_RESULT_LIMIT,
    context: int = DEFAULT_CONTEXT_CHARS,
) -> list[SearchResult]:
    """Return the first ``limit`` entries whose search text contains ``query``.

    Matching is a case-insensitive substring test; a blank query matches
    nothing. Results keep index order and carry a highlighted snippet of
    the entry content.
    """
    term = query.strip()
    if not term:
        return []
    needle = term.lower()
    results: list[SearchResult] = []
    for entry in index:
        if needle not in entry.search_text:
            continue
        results.append(
            SearchResult(
                entry=entry,
                highlighted_content=highlight_snippet(entry.content, term, context),
            )
        )
        if len(results) >= limit:
            break
    return results


def highlight_snippet(text: str, term: str, context: int = DEFAULT_CONTEXT_CHARS) -> str:
    """Return an HTML snippet of ``text`` around the first match of ``term``.

    Parameters
    ----------
    text : str
        Plain text to excerpt.
    term : str
        Search term; matched case-insensitively.
    context : int, optional
        Characters kept on each side of the first match.

    Returns
    -------
    str
        HTML-escaped snippet with ``...`` marking truncated ends and every
        occurrence of ``term`` wrapped in ``<mark class="search-highlight">``.
        When ``term`` is empty or absent the escaped text is returned whole.
    """
    if not term:
        return escape(text)
    position = text.lower().find(term.lower())
    if position == -1:
        return escape(text)
    start = max(0, position - context)
    end = min(len(text), position + len(term) + context)
    snippet = text[start:end]

    pieces: list[str] = []
    cursor = 0
    for match in re.finditer(re.escape(term), snippet, re.IGNORECASE):
        pieces.append(escape(snippet[cursor : match.start()]))
        pieces.append(
            f'<mark class="{SEARCH_HIGHLIGHT_CLASS}">{escape(match.group(0))}</mark>'
        )
        cursor = match.end()
    pieces.append(escape(snippet[cursor:]))

    highlighted = "".join(pieces)
    if start > 0:
        highlighted = f"{ELLIPSIS}{highlighted}"
    if end < len(text):
        highlighted = f"{highlighted}{ELLIPSIS}"
    return highlighted


def index_to_json(index: cabc.Iterable[SearchIndexEntry]) -> str:
    """Serialize ``index`` into the JSON payload consumed by the browser."""
    return json.dumps([entry.to_dict() for entry in index], ensure_ascii=False)


__all__ = [
    "DEFAULT_CONTEXT_CHARS",
    "DEFAULT_RESULT_LIMIT",
    "DESCRIPTION_LENGTH",
    "SECTION_CONTENT_LIMIT",
    "build_search_index",
    "highlight_snippet",
    "index_to_json",
    "search",
]
