"""Fenced code highlighting and inline code classification.

Fenced blocks are handled by a preprocessor, in the same way Python-Markdown's
own ``fenced_code`` extension works: the block is rendered to HTML up front
and parked in the HTML stash so no inline pattern can touch its contents.
Blocks tagged with a diagram language (``mermaid`` by default) are emitted
as ``<pre class="mermaid">`` for client-side rendering; everything else is
highlighted with Pygments and labelled with its language.

Inline and indented code never reach the stash; a treeprocessor gives them
language classes and trims stray backticks left by edge-case parsing.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from folio_pages._constants import DEFAULT_DIAGRAM_LANGUAGES

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from markdown import Markdown

DEFAULT_LANGUAGE = "text"
FENCED_BLOCK_PATTERN = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ \t]*\{?\.?(?P<lang>[\w#+.-]*)\}?[^\n]*\n"
    r"(?P<code>.*?)^(?P=fence)[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


class CodeBlockFormatter:
    """Render code snippets into highlighted or diagram HTML blocks."""

    def __init__(
        self,
        pygments_style: str = "monokai",
        diagram_languages: cabc.Iterable[str] = DEFAULT_DIAGRAM_LANGUAGES,
    ) -> None:
        self.pygments_style = pygments_style
        self.diagram_languages = frozenset(lang.lower() for lang in diagram_languages)
        self._formatter = HtmlFormatter(
            style=pygments_style, cssclass="codehilite", wrapcode=True
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def is_diagram(self, language: str | None) -> bool:
        """Return True when ``language`` should skip highlighting."""
        return bool(language) and language.lower() in self.diagram_languages

    def render(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into HTML tagged with its language.

        Parameters
        ----------
        code : str
            Source snippet, without the surrounding fences.
        language : str, optional
            Fence info string; defaults to ``"text"`` when empty. Unknown
            lexers fall back to plain text but keep the requested label.

        Returns
        -------
        str
            ``<pre class="mermaid">`` markup for diagram languages, otherwise
            a Pygments ``codehilite`` block with ``data-language`` metadata.
        """
        if self.is_diagram(language):
            lang = typ.cast("str", language).lower()
            return f'<pre class="{escape(lang, quote=True)}">{escape(code)}</pre>'
        lang = language or DEFAULT_LANGUAGE
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name(DEFAULT_LANGUAGE)
        html = highlight(code, lexer, self._formatter)
        return self._attach_language(html, lang)

    @staticmethod
    def _attach_language(html: str, language: str) -> str:
        """Add language class and data attribute to a highlighted block."""
        safe_lang = escape(language, quote=True)

        def _repl(match: re.Match[str]) -> str:
            return (
                f'<div class="codehilite code-block language-{safe_lang}" '
                f'data-language="{safe_lang}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)


class FencedCodePreprocessor(Preprocessor):
    """Replace fenced code blocks with stashed, pre-rendered HTML."""

    def __init__(self, md: Markdown, formatter: CodeBlockFormatter) -> None:
        super().__init__(md)
        self.formatter = formatter

    def run(self, lines: list[str]) -> list[str]:
        """Render every fenced block in ``lines`` and stash the output."""
        text = "\n".join(lines)

        def _repl(match: re.Match[str]) -> str:
            html = self.formatter.render(match.group("code"), match.group("lang"))
            placeholder = self.md.htmlStash.store(html)
            return f"\n\n{placeholder}\n\n"

        return FENCED_BLOCK_PATTERN.sub(_repl, text).split("\n")


class InlineCodeTreeprocessor(Treeprocessor):
    """Classify inline and indented code nodes and trim stray backticks."""

    def run(self, root: Element) -> Element:
        """Walk ``root`` once, tagging every ``code`` element."""
        for parent in root.iter():
            for child in parent:
                if child.tag != "code":
                    continue
                if parent.tag == "pre":
                    _add_class(parent, "code-block")
                    _add_class(child, f"code-content language-{DEFAULT_LANGUAGE}")
                else:
                    _trim_backticks(child)
                    _add_class(child, f"inline-code language-{DEFAULT_LANGUAGE}")
        return root


def _trim_backticks(element: Element) -> None:
    """Strip backtick artifacts from an inline code node's text."""
    text = element.text or ""
    trimmed = text.strip("`")
    if trimmed and trimmed != text:
        element.text = AtomicString(trimmed)


def _add_class(element: Element, classes: str) -> None:
    """Append ``classes`` to the element's class attribute, keeping order."""
    existing = (element.get("class") or "").split()
    for name in classes.split():
        if name not in existing:
            existing.append(name)
    element.set("class", " ".join(existing))


class CodeBlockExtension(Extension):
    """Register fenced-code rendering and inline code classification."""

    def __init__(self, formatter: CodeBlockFormatter) -> None:
        super().__init__()
        self.formatter = formatter

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Attach the fenced-code preprocessor and code treeprocessor to ``md``."""
        md.preprocessors.register(
            FencedCodePreprocessor(md, self.formatter), "folio_fenced_code", 25
        )
        md.treeprocessors.register(
            InlineCodeTreeprocessor(md), "folio_inline_code", 16
        )


__all__ = [
    "DEFAULT_DIAGRAM_LANGUAGES",
    "DEFAULT_LANGUAGE",
    "CodeBlockExtension",
    "CodeBlockFormatter",
    "FencedCodePreprocessor",
    "InlineCodeTreeprocessor",
]
