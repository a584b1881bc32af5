"""Typed dataclasses describing folio site configuration structures."""

from __future__ import annotations

import dataclasses as dc
import types
import typing as typ
from pathlib import Path

from folio_pages._constants import (
    DEFAULT_ASSETS_DIR,
    DEFAULT_CONTEXT_CHARS,
    DEFAULT_DIAGRAM_LANGUAGES,
    DEFAULT_RESULT_LIMIT,
    SEARCH_INDEX_FILENAME,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

DEFAULT_CATEGORIES: cabc.Mapping[str, str] = types.MappingProxyType(
    {
        "home": "overview",
        "about": "personal",
        "career": "professional",
        "learning": "education",
        "projects": "portfolio",
        "misc": "community",
        "blog": "blog",
        "contact": "contact",
    }
)
DEFAULT_CATEGORY = "general"


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class SearchConfig:
    """Settings for the search payload and query behaviour."""

    result_limit: int = DEFAULT_RESULT_LIMIT
    context_chars: int = DEFAULT_CONTEXT_CHARS
    index_filename: str = SEARCH_INDEX_FILENAME


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """A fully resolved site definition sourced from YAML config.

    Attributes
    ----------
    content_dir : Path
        Directory holding the Markdown sources.
    output_dir : Path
        Directory receiving rendered pages and the search payload.
    site_name : str
        Name shown in page titles and the listing header.
    pygments_style : str
        Pygments style used for highlighted code blocks.
    assets_dir : str
        Directory name that legacy relative image paths point into.
    diagram_languages : tuple[str, ...]
        Fence languages rendered as diagrams instead of highlighted code.
    slug_overrides : Mapping[str, str]
        Read-only filename -> slug table for renamed sources.
    categories : Mapping[str, str]
        Read-only slug -> category table used when front matter is silent.
    search : SearchConfig
        Search payload and query settings.
    max_workers : int or None
        Thread count for parallel document loads; ``None`` loads serially.
    """

    content_dir: Path = Path("content")
    output_dir: Path = Path("public")
    site_name: str = "Portfolio"
    pygments_style: str = "monokai"
    assets_dir: str = DEFAULT_ASSETS_DIR
    diagram_languages: tuple[str, ...] = DEFAULT_DIAGRAM_LANGUAGES
    slug_overrides: cabc.Mapping[str, str] = dc.field(
        default_factory=lambda: types.MappingProxyType({})
    )
    categories: cabc.Mapping[str, str] = dc.field(
        default_factory=lambda: DEFAULT_CATEGORIES
    )
    search: SearchConfig = dc.field(default_factory=SearchConfig)
    max_workers: int | None = None


__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "SearchConfig",
    "SiteConfig",
    "SiteConfigError",
]
