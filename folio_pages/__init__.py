"""Build-time content pipeline for a Markdown portfolio and blog site.

This package turns a directory of Markdown documents into enhanced HTML,
derives a flat client-side search index from them, and writes the static
site through the ``folio`` console script.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from folio_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
