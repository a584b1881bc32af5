"""Exception hierarchy for the folio_pages content pipeline."""

from __future__ import annotations


class FolioPagesError(Exception):
    """Base exception for all content pipeline errors."""


class ContentNotFoundError(FolioPagesError, FileNotFoundError):
    """Raised when a slug resolves to a file that does not exist."""

    def __init__(self, slug: str, filename: str) -> None:
        super().__init__(f"Content file '{filename}' not found for slug '{slug}'.")
        self.slug = slug
        self.filename = filename


class ContentRenderError(FolioPagesError):
    """Raised when Markdown or HTML processing fails for a document."""


__all__ = ["ContentNotFoundError", "ContentRenderError", "FolioPagesError"]
