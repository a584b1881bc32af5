"""Discover, load, and order the Markdown documents of a content directory.

The repository is the only component that touches the filesystem on the
read side. It enumerates ``*.md`` files, assigns slugs through an injected
:class:`~folio_pages.slugs.SlugMapper`, renders each file through an
:class:`~folio_pages.generator.renderer.HtmlContentRenderer`, and returns
immutable :class:`~folio_pages.models.ContentDocument` values.

Failures are contained per document: a missing content root yields an empty
collection, and a file that cannot be read or rendered is logged and left
out while the rest of the build proceeds.

Examples
--------
>>> from pathlib import Path
>>> from folio_pages.content import ContentRepository
>>> repo = ContentRepository(Path("content"))  # doctest: +SKIP
>>> [doc.slug for doc in repo.load_all()]  # doctest: +SKIP
['home', 'about', 'plonk']
"""

from __future__ import annotations

import typing as typ
from concurrent.futures import ThreadPoolExecutor

import structlog

from ._constants import MARKDOWN_SUFFIX
from .config.models import DEFAULT_CATEGORIES, DEFAULT_CATEGORY
from .errors import ContentNotFoundError, FolioPagesError
from .generator.renderer import HtmlContentRenderer
from .models import ContentDocument
from .slugs import SlugMapper, humanize_slug

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config.models import SiteConfig

logger = structlog.get_logger(__name__)


def infer_category(
    slug: str, rules: cabc.Mapping[str, str] = DEFAULT_CATEGORIES
) -> str:
    """Return the category for ``slug`` from ``rules``, else ``"general"``."""
    return rules.get(slug, DEFAULT_CATEGORY)


def document_sort_key(document: ContentDocument) -> tuple[typ.Any, ...]:
    """Return the ordering key used by :meth:`ContentRepository.load_all`.

    Documents with an explicit ``nav_order`` (``0`` included) come first,
    ascending, with ties broken by title. The remaining documents follow in
    case-insensitive title order; the raw title breaks case-only ties so the
    order never depends on filesystem enumeration.
    """
    if document.nav_order is not None:
        return (0, document.nav_order, document.title.casefold(), document.title)
    return (1, 0, document.title.casefold(), document.title)


class ContentRepository:
    """Load rendered documents from a directory of Markdown files.

    Parameters
    ----------
    content_dir : Path
        Root directory scanned (non-recursively) for ``*.md`` files.
    slug_mapper : SlugMapper, optional
        Filename/slug mapping; defaults to a mapper with no overrides.
    renderer : HtmlContentRenderer, optional
        Markdown renderer; defaults to the stock renderer.
    category_rules : Mapping[str, str], optional
        Slug -> category table used when front matter names no category.
    """

    def __init__(
        self,
        content_dir: Path,
        slug_mapper: SlugMapper | None = None,
        renderer: HtmlContentRenderer | None = None,
        category_rules: cabc.Mapping[str, str] = DEFAULT_CATEGORIES,
    ) -> None:
        self.content_dir = content_dir
        self.slug_mapper = slug_mapper or SlugMapper()
        self.renderer = renderer or HtmlContentRenderer()
        self.category_rules = category_rules
        self._sources: dict[str, str] | None = None
        self._log = logger.bind(component="content_repository")

    @classmethod
    def from_config(cls, config: SiteConfig) -> ContentRepository:
        """Build a repository wired from a loaded :class:`SiteConfig`."""
        renderer = HtmlContentRenderer(
            config.pygments_style,
            assets_dir=config.assets_dir,
            diagram_languages=config.diagram_languages,
        )
        return cls(
            config.content_dir,
            slug_mapper=SlugMapper(config.slug_overrides),
            renderer=renderer,
            category_rules=config.categories,
        )

    def list_slugs(self) -> list[str]:
        """Return the slug of every Markdown file, ordered by filename.

        Files whose slug comes out empty are skipped, and when two files map
        to the same slug only the first in filename order is kept. Both cases
        are logged as warnings. A missing content root yields ``[]``.
        """
        if not self.content_dir.is_dir():
            self._log.warning("content_root_missing", path=str(self.content_dir))
            self._sources = {}
            return []

        slugs: list[str] = []
        owners: dict[str, str] = {}
        filenames = sorted(
            path.name
            for path in self.content_dir.iterdir()
            if path.suffix == MARKDOWN_SUFFIX and path.is_file()
        )
        for filename in filenames:
            slug = self.slug_mapper.to_slug(filename)
            if not slug:
                self._log.warning("empty_slug_skipped", filename=filename)
                continue
            if slug in owners:
                self._log.warning(
                    "duplicate_slug_skipped",
                    slug=slug,
                    filename=filename,
                    kept=owners[slug],
                )
                continue
            owners[slug] = filename
            slugs.append(slug)
        self._sources = owners
        return slugs

    def source_filename(self, slug: str) -> str:
        """Return the filename ``slug`` was listed from.

        Slugs are derived from filenames lossily (``Proxy Basics.md`` lists as
        ``proxy-basics``), so the listing is consulted first; slugs it never
        produced fall back to :meth:`SlugMapper.to_filename`.
        """
        if self._sources is None:
            self.list_slugs()
        sources = typ.cast("dict[str, str]", self._sources)
        return sources.get(slug) or self.slug_mapper.to_filename(slug)

    def read(self, slug: str) -> ContentDocument:
        """Load and render the document for ``slug``.

        Raises
        ------
        ContentNotFoundError
            If no source file exists for ``slug`` inside the content root.
        ContentRenderError
            If the Markdown pipeline fails.
        OSError, UnicodeDecodeError
            If the source file cannot be read as UTF-8 text.
        """
        filename = self.source_filename(slug)
        path = self.content_dir / filename
        if path.parent != self.content_dir or not path.is_file():
            raise ContentNotFoundError(slug, filename)

        rendered = self.renderer.render(path.read_text(encoding="utf-8"))
        front_matter = rendered.front_matter
        return ContentDocument(
            slug=slug,
            title=front_matter.title or humanize_slug(slug),
            body_html=rendered.body_html,
            category=front_matter.category
            or infer_category(slug, self.category_rules),
            nav_order=front_matter.nav_order,
            parent=front_matter.parent,
            description=front_matter.description,
            extra_front_matter=front_matter.extra,
            source_name=filename,
        )

    def load(self, slug: str) -> ContentDocument | None:
        """Return the document for ``slug``, or ``None`` when it cannot load.

        Missing files and read or render failures are logged as errors and
        never propagate, so one broken document cannot abort a build.
        """
        try:
            return self.read(slug)
        except ContentNotFoundError as exc:
            self._log.error("content_not_found", slug=slug, filename=exc.filename)
        except (OSError, UnicodeDecodeError, FolioPagesError) as exc:
            self._log.error(
                "content_load_failed",
                slug=slug,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        return None

    def load_all(self, max_workers: int | None = None) -> list[ContentDocument]:
        """Load every document and return them in navigation order.

        Parameters
        ----------
        max_workers : int, optional
            When given, documents load concurrently on a thread pool of this
            size. Each load builds its own Markdown instance, so loads share
            no mutable state; the final order is the same either way.

        Returns
        -------
        list[ContentDocument]
            Successfully loaded documents sorted by :func:`document_sort_key`.
        """
        slugs = self.list_slugs()
        if max_workers and len(slugs) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                loaded = list(executor.map(self.load, slugs))
        else:
            loaded = [self.load(slug) for slug in slugs]

        documents = [document for document in loaded if document is not None]
        documents.sort(key=document_sort_key)
        self._log.info(
            "content_loaded",
            documents=len(documents),
            skipped=len(slugs) - len(documents),
        )
        return documents


FALLBACK_HOME_HTML = (
    '<h1 id="welcome-to-my-portfolio" class="markdown-heading markdown-h1">'
    "Welcome to My Portfolio</h1>\n"
    '<p class="markdown-paragraph">No content has been published yet.</p>\n'
    '<h2 id="getting-started" class="markdown-heading markdown-h2">'
    "Getting Started</h2>\n"
    '<p class="markdown-paragraph">Add Markdown files to the content directory '
    "and rebuild the site.</p>"
)


def fallback_documents() -> list[ContentDocument]:
    """Return the placeholder collection used when no documents load."""
    return [
        ContentDocument(
            slug="home",
            title="Welcome",
            body_html=FALLBACK_HOME_HTML,
            category=infer_category("home"),
            source_name=None,
        )
    ]


__all__ = [
    "ContentRepository",
    "document_sort_key",
    "fallback_documents",
    "infer_category",
]
