"""Load and validate the folio site configuration YAML.

This subpackage parses the project's ``site.yaml`` file, applies defaults to
every omitted key, freezes the slug override and category tables, and
produces the typed :class:`SiteConfig` that the content repository and site
generator consume. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from folio_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.content_dir  # doctest: +SKIP
PosixPath('content')
"""

from .loader import build_site_config, load_site_config
from .models import (
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY,
    SearchConfig,
    SiteConfig,
    SiteConfigError,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "SearchConfig",
    "SiteConfig",
    "SiteConfigError",
    "build_site_config",
    "load_site_config",
]
