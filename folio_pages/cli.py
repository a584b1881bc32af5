"""Cyclopts CLI entrypoint for building the folio site and its search index.

The ``folio`` console script defined here renders a directory of Markdown
documents into static HTML pages, writes the flat client-side search
payload, and runs ad-hoc queries against that index from the terminal. Every
option can also be supplied through a ``FOLIO_``-prefixed environment
variable, which is how CI jobs configure it.

Examples
--------
Build the whole site using ``config/site.yaml``:

>>> from folio_pages.cli import main
>>> main()  # doctest: +SKIP

Query the index without writing anything:

>>> from folio_pages.cli import app
>>> app(["search", "nonce reuse", "--limit", "5"])  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import cyclopts
import structlog
from cyclopts import App, Parameter

from ._constants import PAGE_SUFFIX
from .config import load_site_config
from .content import ContentRepository
from .generator.site_generator import SiteGenerator
from .log_config import configure_logging
from .search_index import build_search_index, search as query_index
from .text import strip_html

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .models import ContentDocument

DEFAULT_CONFIG = Path("config/site.yaml")
DEFAULT_LOG_LEVEL = "INFO"

app = App(name="folio", config=cyclopts.config.Env("FOLIO_", command=False))  # type: ignore[unknown-argument]

logger = structlog.get_logger(__name__)

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="FOLIO_CONFIG")
]
LogLevelOption = typ.Annotated[
    str, Parameter(help="Logging level name", env_var="FOLIO_LOG_LEVEL")
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _prepare(
    config: Path, log_level: str, output_dir: Path | None = None
) -> tuple[SiteConfig, list[ContentDocument]]:
    """Configure logging, load the site config, and load every document."""
    configure_logging(log_level)
    site_config = load_site_config(config)
    if output_dir is not None:
        site_config = dc.replace(site_config, output_dir=output_dir)
    logger.info(
        "build_started",
        config=str(config),
        content_dir=str(site_config.content_dir),
    )
    repository = ContentRepository.from_config(site_config)
    documents = repository.load_all(max_workers=site_config.max_workers)
    return site_config, documents


@app.command(help="Render every Markdown document into static HTML pages.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="FOLIO_OUTPUT_DIR"),
    ] = None,
    log_level: LogLevelOption = DEFAULT_LOG_LEVEL,
) -> None:
    """Build the site: document pages, listing, search payload, and CSS.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``FOLIO_CONFIG``).
    output_dir : Path or None, optional
        Override the configured output directory.
    log_level : str, optional
        Logging level for build diagnostics written to stderr.

    Returns
    -------
    None
        Writes rendered artifacts and prints the generated paths.
    """
    site_config, documents = _prepare(config, log_level, output_dir)
    written = SiteGenerator(site_config, documents).run()
    for path in written:
        print(f"wrote {_format_path(path)}")


@app.command(help="Write only the client-side search index JSON.")
def index(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="FOLIO_OUTPUT_DIR"),
    ] = None,
    log_level: LogLevelOption = DEFAULT_LOG_LEVEL,
) -> None:
    """Rebuild the search payload without rendering pages."""
    site_config, documents = _prepare(config, log_level, output_dir)
    generator = SiteGenerator(site_config, documents)
    print(f"wrote {_format_path(generator.write_search_index())}")


@app.command(help="Print documents and sections matching a search query.")
def search(
    query: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    limit: typ.Annotated[
        int | None, Parameter(help="Maximum number of results")
    ] = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Run ``query`` against a freshly built index and print the matches.

    Parameters
    ----------
    query : str
        Case-insensitive substring to look for.
    config : Path, optional
        Path to the ``site.yaml`` configuration file.
    limit : int or None, optional
        Maximum number of results; defaults to ``search.result_limit``.
    log_level : str, optional
        Logging level; quiet by default so output stays readable.
    """
    site_config, documents = _prepare(config, log_level)
    entries = build_search_index(documents, page_suffix=PAGE_SUFFIX)
    results = query_index(
        entries,
        query,
        limit=limit or site_config.search.result_limit,
        context=site_config.search.context_chars,
    )
    if not results:
        print(f"no matches for {query!r}")
        return
    for result in results:
        print(f"{result.entry.path}  {result.entry.title}")
        print(f"    {strip_html(result.highlighted_content)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``folio`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
