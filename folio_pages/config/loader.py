"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_search_config,
    _optional_positive_int,
    _string_mapping,
    _string_tuple,
)
from .models import DEFAULT_CATEGORIES, SiteConfig, SiteConfigError

KNOWN_KEYS = frozenset(
    {
        "content_dir",
        "output_dir",
        "site_name",
        "pygments_style",
        "assets_dir",
        "diagram_languages",
        "slug_overrides",
        "categories",
        "search",
        "max_workers",
    }
)


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the content site.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML site configuration file (for example,
        ``config/site.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied to every omitted key and
        the slug override and category tables frozen.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level YAML structure is not a mapping, contains unknown
        keys, or a value has the wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from folio_pages.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.slug_overrides["ProvingSystems.md"]  # doctest: +SKIP
    'proving-systems'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    unknown = sorted(str(key) for key in raw if key not in KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}."
        raise SiteConfigError(msg)

    return build_site_config(raw)


def build_site_config(raw: typ.Mapping[str, typ.Any]) -> SiteConfig:
    """Build a :class:`SiteConfig` from an already-parsed mapping."""
    base = SiteConfig()
    categories = dict(DEFAULT_CATEGORIES)
    categories.update(_string_mapping(raw.get("categories"), key="categories"))

    return SiteConfig(
        content_dir=Path(raw.get("content_dir", base.content_dir)),
        output_dir=Path(raw.get("output_dir", base.output_dir)),
        site_name=str(raw.get("site_name", base.site_name)),
        pygments_style=str(raw.get("pygments_style", base.pygments_style)),
        assets_dir=str(raw.get("assets_dir", base.assets_dir)).strip("/"),
        diagram_languages=_string_tuple(
            raw.get("diagram_languages", list(base.diagram_languages)),
            key="diagram_languages",
        ),
        slug_overrides=_string_mapping(
            raw.get("slug_overrides"), key="slug_overrides"
        ),
        categories=_string_mapping(categories, key="categories"),
        search=_build_search_config(raw.get("search")),
        max_workers=_optional_positive_int(
            raw.get("max_workers"), key="max_workers"
        ),
    )


__all__ = ["KNOWN_KEYS", "build_site_config", "load_site_config"]
