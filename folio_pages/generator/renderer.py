"""Render Markdown sources into enhanced, syntax-highlighted HTML."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from markdown import Markdown

from folio_pages._constants import DEFAULT_ASSETS_DIR, DEFAULT_DIAGRAM_LANGUAGES
from folio_pages.errors import ContentRenderError
from folio_pages.generator.asset_rewriter import AssetPathExtension
from folio_pages.generator.code_blocks import CodeBlockExtension, CodeBlockFormatter
from folio_pages.generator.enhancer import ContentEnhancementExtension
from folio_pages.generator.syntax import GfmExtension, MathExtension
from folio_pages.markdown_parser import clean_markdown, split_front_matter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown.extensions import Extension

    from folio_pages.models import FrontMatter

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)


@dc.dataclass(frozen=True, slots=True)
class RenderedMarkdown:
    """Front matter and final body HTML for one Markdown source."""

    front_matter: FrontMatter
    body_html: str


class HtmlContentRenderer:
    """Render markdown and code snippets with consistent styling."""

    def __init__(
        self,
        pygments_style: str = "monokai",
        *,
        assets_dir: str = DEFAULT_ASSETS_DIR,
        diagram_languages: cabc.Iterable[str] = DEFAULT_DIAGRAM_LANGUAGES,
    ) -> None:
        """Initialize a renderer with highlighting and asset options.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        assets_dir : str, optional
            Directory name that legacy relative image paths point into; those
            references are rewritten to ``/<assets_dir>/...``.
        diagram_languages : Iterable[str], optional
            Fence languages rendered as client-side diagrams instead of being
            highlighted.
        """
        self.pygments_style = pygments_style
        self.assets_dir = assets_dir
        self.code_formatter = CodeBlockFormatter(pygments_style, diagram_languages)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self.code_formatter.stylesheet

    def render(self, source: str) -> RenderedMarkdown:
        """Split front matter from ``source`` and render the body.

        Parameters
        ----------
        source : str
            Full contents of a Markdown file, optionally starting with a YAML
            front matter block.

        Returns
        -------
        RenderedMarkdown
            Parsed front matter (empty when absent or malformed) and the
            enhanced body HTML.

        Raises
        ------
        ContentRenderError
            Raised when Markdown conversion fails.
        """
        front_matter, body = split_front_matter(source)
        return RenderedMarkdown(front_matter=front_matter, body_html=self.markdown(body))

    def markdown(self, text: str) -> str:
        """Render markdown into HTML using the configured extensions."""
        normalized = self._normalize_fenced_blocks(clean_markdown(text))
        if not normalized.strip():
            return ""
        md = Markdown(extensions=self._extensions(), output_format="html")
        try:
            return md.convert(normalized)
        except Exception as exc:
            msg = f"Markdown conversion failed: {exc}"
            raise ContentRenderError(msg) from exc

    def _extensions(self) -> list[Extension | str]:
        return [
            "tables",
            "sane_lists",
            CodeBlockExtension(self.code_formatter),
            GfmExtension(),
            MathExtension(),
            AssetPathExtension(self.assets_dir),
            ContentEnhancementExtension(),
        ]

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        return FENCED_INDENT_PATTERN.sub(r"\1", text)


__all__ = ["HtmlContentRenderer", "RenderedMarkdown"]
