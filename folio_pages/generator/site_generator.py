"""Write the static site: document pages, listing, search payload, and CSS.

:class:`SiteGenerator` is the presentation glue at the end of a build. It
receives the ordered documents from
:class:`~folio_pages.content.ContentRepository` plus the flat search index.
It renders one ``<slug>.html`` page per document and an ``index.html``
listing with Jinja2, then writes the JSON search payload and the Pygments
stylesheet beside them.

Example
-------
>>> from pathlib import Path
>>> from folio_pages.config import load_site_config
>>> from folio_pages.content import ContentRepository
>>> from folio_pages.generator.site_generator import SiteGenerator
>>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> documents = ContentRepository.from_config(config).load_all()  # doctest: +SKIP
>>> SiteGenerator(config, documents).run()  # doctest: +SKIP
[PosixPath('public/home.html'), ...]
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from folio_pages._constants import (
    PAGE_FILENAME_TEMPLATE,
    PAGE_SUFFIX,
    PYGMENTS_STYLESHEET_FILENAME,
)
from folio_pages.content import fallback_documents
from folio_pages.generator.models import ListingCard, PageView
from folio_pages.generator.renderer import HtmlContentRenderer
from folio_pages.search_index import build_search_index, index_to_json
from folio_pages.text import (
    build_outline,
    estimate_reading_time,
    excerpt,
    preview_headings,
    strip_html,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from folio_pages.config import SiteConfig
    from folio_pages.models import ContentDocument, SearchIndexEntry

logger = structlog.get_logger(__name__)

LISTING_EXCERPT_LENGTH = 200


class SiteGenerator:
    """Render documents and their search index into the output directory."""

    def __init__(
        self,
        config: SiteConfig,
        documents: cabc.Sequence[ContentDocument],
        index: cabc.Sequence[SearchIndexEntry] | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the generator with documents and template context.

        Parameters
        ----------
        config : SiteConfig
            Loaded site configuration (output directory, site name, style).
        documents : Sequence[ContentDocument]
            Ordered documents to publish. When empty, the placeholder
            collection from :func:`~folio_pages.content.fallback_documents`
            is published instead.
        index : Sequence[SearchIndexEntry], optional
            Prebuilt search index; derived from ``documents`` when omitted,
            with entry paths pointing at the written ``<slug>.html`` pages.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.config = config
        self.documents = list(documents) or fallback_documents()
        self.index = (
            list(index)
            if index is not None and documents
            else build_search_index(self.documents, page_suffix=PAGE_SUFFIX)
        )
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.renderer = HtmlContentRenderer(config.pygments_style)
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.page_template = self.env.get_template("content_page.jinja")
        self.listing_template = self.env.get_template("listing.jinja")
        self._log = logger.bind(component="site_generator")

    def run(self) -> list[Path]:
        """Write every artifact of the site and return the written paths.

        Returns
        -------
        list[Path]
            Document pages in document order, then ``index.html``, the search
            payload, and the stylesheet.
        """
        out_dir = self.config.output_dir
        out_dir.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        navigation = [
            {"title": doc.title, "href": page_href(doc.slug)} for doc in self.documents
        ]
        for document in self.documents:
            view = self._build_page_view(document)
            html = self.page_template.render(
                page=view,
                navigation=navigation,
                site_name=self.config.site_name,
                search_index_href=self.config.search.index_filename,
                stylesheet_href=PYGMENTS_STYLESHEET_FILENAME,
            )
            output_path = out_dir / page_href(document.slug)
            output_path.write_text(html, encoding="utf-8")
            written.append(output_path)

        written.append(self.write_listing())
        written.append(self.write_search_index())
        written.append(self.write_stylesheet())
        self._log.info(
            "site_generated", output_dir=str(out_dir), pages=len(self.documents)
        )
        return written

    def write_listing(self) -> Path:
        """Render ``index.html`` with one card per document."""
        cards = [self._build_listing_card(document) for document in self.documents]
        html = self.listing_template.render(
            cards=cards,
            site_name=self.config.site_name,
            search_index_href=self.config.search.index_filename,
            stylesheet_href=PYGMENTS_STYLESHEET_FILENAME,
        )
        output_path = self.config.output_dir / "index.html"
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def write_search_index(self) -> Path:
        """Write the JSON search payload consumed by the browser."""
        output_path = self.config.output_dir / self.config.search.index_filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(index_to_json(self.index), encoding="utf-8")
        return output_path

    def write_stylesheet(self) -> Path:
        """Write the Pygments stylesheet for highlighted code blocks."""
        output_path = self.config.output_dir / PYGMENTS_STYLESHEET_FILENAME
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.renderer.stylesheet, encoding="utf-8")
        return output_path

    def _build_page_view(self, document: ContentDocument) -> PageView:
        text = strip_html(document.body_html)
        return PageView(
            slug=document.slug,
            title=document.title,
            html_title=f"{document.title} | {self.config.site_name}",
            description=document.description or excerpt(text, LISTING_EXCERPT_LENGTH),
            category=document.category or "",
            body_html=document.body_html,
            outline=build_outline(document.body_html),
            reading_time=estimate_reading_time(document.body_html),
        )

    @staticmethod
    def _build_listing_card(document: ContentDocument) -> ListingCard:
        text = strip_html(document.body_html)
        return ListingCard(
            title=document.title,
            href=page_href(document.slug),
            category=document.category or "",
            excerpt=document.description or excerpt(text, LISTING_EXCERPT_LENGTH),
            headings=preview_headings(document.body_html),
            reading_time=estimate_reading_time(document.body_html),
        )


def page_href(slug: str) -> str:
    """Return the output filename (and relative link) for ``slug``."""
    return PAGE_FILENAME_TEMPLATE.format(slug=slug)


__all__ = ["LISTING_EXCERPT_LENGTH", "SiteGenerator", "page_href"]
