"""Markdown rendering and static site generation for folio documents.

The renderer is re-exported here; the site generator lives in
:mod:`folio_pages.generator.site_generator` and is imported from there
because it depends on the content repository, which itself depends on the
renderer.
"""

from .code_blocks import CodeBlockFormatter
from .renderer import HtmlContentRenderer, RenderedMarkdown

__all__ = ["CodeBlockFormatter", "HtmlContentRenderer", "RenderedMarkdown"]
