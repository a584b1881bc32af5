"""View models passed from the site generator to the page templates."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from folio_pages.models import TableOfContentsEntry


@dc.dataclass(slots=True)
class PageView:
    """Structured data passed to the document page template.

    Attributes
    ----------
    slug : str
        Document slug; also the output filename stem.
    title : str
        Document title shown in the page header.
    html_title : str
        Value for the ``<title>`` element (``"Title | Site"``).
    description : str
        Explicit description or an excerpt of the body text.
    category : str
        Category label shown above the title.
    body_html : str
        Final enhanced document HTML, inserted unescaped.
    outline : list[TableOfContentsEntry]
        Floating outline entries for every heading that carries an id.
    reading_time : int
        Estimated reading time in minutes.
    """

    slug: str
    title: str
    html_title: str
    description: str
    category: str
    body_html: str
    outline: list[TableOfContentsEntry]
    reading_time: int


@dc.dataclass(slots=True)
class ListingCard:
    """One document summary on the index listing page.

    Attributes
    ----------
    title : str
        Document title.
    href : str
        Relative link to the rendered page.
    category : str
        Category label.
    excerpt : str
        Description or word-boundary excerpt of the document text.
    headings : list[str]
        Up to four heading titles previewing the document structure.
    reading_time : int
        Estimated reading time in minutes.
    """

    title: str
    href: str
    category: str
    excerpt: str
    headings: list[str]
    reading_time: int


__all__ = ["ListingCard", "PageView"]
