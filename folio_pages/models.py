"""Dataclasses shared by the content pipeline and the search index.

The content repository produces :class:`ContentDocument` values; the search
indexer derives :class:`PageEntry` and :class:`SectionEntry` values from them.
Everything here is immutable once constructed: a build creates fresh values
from the filesystem and discards them on the next build.
"""

from __future__ import annotations

import dataclasses as dc
import types
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

KNOWN_FRONT_MATTER_KEYS = frozenset(
    {"title", "nav_order", "parent", "description", "category"}
)


def _frozen_mapping(
    value: cabc.Mapping[str, typ.Any] | None,
) -> cabc.Mapping[str, typ.Any]:
    return types.MappingProxyType(dict(value or {}))


@dc.dataclass(frozen=True, slots=True)
class FrontMatter:
    """Typed view over a document's front matter block.

    Attributes
    ----------
    title : str or None
        Explicit document title.
    nav_order : int or float or None
        Explicit ordering key used by :meth:`ContentRepository.load_all`.
    parent : str or None
        Logical grouping reference (another document's title or slug).
    description : str or None
        Short summary used in listings and the search index.
    category : str or None
        Explicit category; inferred from the slug when absent.
    extra : Mapping[str, Any]
        Every key not listed above, passed through verbatim.
    """

    title: str | None = None
    nav_order: int | float | None = None
    parent: str | None = None
    description: str | None = None
    category: str | None = None
    extra: cabc.Mapping[str, typ.Any] = dc.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", _frozen_mapping(self.extra))


@dc.dataclass(frozen=True, slots=True)
class ContentDocument:
    """One rendered Markdown source file."""

    slug: str
    title: str
    body_html: str
    category: str | None = None
    nav_order: int | float | None = None
    parent: str | None = None
    description: str | None = None
    extra_front_matter: cabc.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    source_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "extra_front_matter", _frozen_mapping(self.extra_front_matter)
        )


@dc.dataclass(frozen=True, slots=True)
class HeadingRecord:
    """A level 2-6 heading found inside a document body."""

    level: int
    title: str
    anchor_id: str

    @property
    def href(self) -> str:
        """Return the in-page link target for the heading."""
        return f"#{self.anchor_id}"


@dc.dataclass(frozen=True, slots=True)
class TableOfContentsEntry:
    """A row of the floating on-page outline."""

    level: int
    id: str
    title: str
    href: str


@dc.dataclass(frozen=True, slots=True)
class PageEntry:
    """Search index entry covering a whole document."""

    id: str
    title: str
    slug: str
    path: str
    category: str | None
    content: str
    description: str
    search_text: str
    parent: str | None = None
    type: typ.Literal["page"] = "page"

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-ready mapping using the client payload's key names."""
        payload: dict[str, typ.Any] = {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "slug": self.slug,
            "path": self.path,
            "category": self.category,
            "content": self.content,
            "description": self.description,
            "searchText": self.search_text,
        }
        if self.parent is not None:
            payload["parent"] = self.parent
        return payload


@dc.dataclass(frozen=True, slots=True)
class SectionEntry:
    """Search index entry covering one heading and the text that follows it."""

    id: str
    title: str
    page_title: str
    slug: str
    section_id: str
    level: int
    content: str
    path: str
    search_text: str
    type: typ.Literal["section"] = "section"

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-ready mapping using the client payload's key names."""
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "pageTitle": self.page_title,
            "slug": self.slug,
            "sectionId": self.section_id,
            "level": self.level,
            "content": self.content,
            "path": self.path,
            "searchText": self.search_text,
        }


SearchIndexEntry: typ.TypeAlias = PageEntry | SectionEntry


@dc.dataclass(frozen=True, slots=True)
class SearchResult:
    """A query hit paired with its highlighted context snippet."""

    entry: SearchIndexEntry
    highlighted_content: str


__all__ = [
    "KNOWN_FRONT_MATTER_KEYS",
    "ContentDocument",
    "FrontMatter",
    "HeadingRecord",
    "PageEntry",
    "SearchIndexEntry",
    "SearchResult",
    "SectionEntry",
    "TableOfContentsEntry",
]
