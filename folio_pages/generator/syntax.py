"""Python-Markdown extensions for GFM-style inline syntax and TeX math.

Python-Markdown ships tables but not GitHub's strikethrough or bare-URL
autolinks, and it has no notion of ``$...$`` math. This module registers
inline processors for all three:

* ``~~text~~`` becomes ``<del>text</del>``.
* Bare ``http(s)://`` and ``www.`` URLs become anchors.
* ``$$...$$`` and ``$...$`` become KaTeX-ready spans whose TeX source is kept
  as an atomic string, so emphasis and escapes never touch it.

Math patterns sit below the backtick pattern in priority, so dollar signs in
inline code stay literal.
"""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as ET

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor, SimpleTagInlineProcessor
from markdown.util import AtomicString

if typ.TYPE_CHECKING:
    import re

    from markdown import Markdown

STRIKETHROUGH_RE = r"(~{2})(?!~)(.+?)(?<!~)~{2}(?!~)"
AUTOLINK_RE = r"(?<![\w/\"'=<(\[])((?:https?://|www\.)[^\s<>\"'\]]*[^\s<>\"'.,;:!?)\]])"
DISPLAY_MATH_RE = r"(?<!\\)\$\$(.+?)(?<!\\)\$\$"
INLINE_MATH_RE = r"(?<![\\$\w])\$(?![\s$])(.+?)(?<![\s\\$])\$(?![\w$])"


class AutolinkInlineProcessor(InlineProcessor):
    """Turn bare URLs into anchors, mirroring GitHub's autolink literal rule."""

    ANCESTOR_EXCLUDES = ("a",)

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[ET.Element, int, int]:
        """Return an anchor element wrapping the matched URL."""
        url = m.group(1)
        href = url if "://" in url else f"http://{url}"
        element = ET.Element("a", {"href": href})
        element.text = AtomicString(url)
        return element, m.start(0), m.end(0)


class MathInlineProcessor(InlineProcessor):
    """Wrap TeX source in a span that client-side KaTeX renders."""

    def __init__(self, pattern: str, md: Markdown, *, display: bool) -> None:
        super().__init__(pattern, md)
        self.display = display

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[ET.Element, int, int]:
        """Return the math span for the matched TeX expression."""
        tex = m.group(1).strip()
        element = ET.Element("span")
        if self.display:
            element.set("class", "math math-display")
            element.text = AtomicString(f"\\[{tex}\\]")
        else:
            element.set("class", "math math-inline")
            element.text = AtomicString(f"\\({tex}\\)")
        return element, m.start(0), m.end(0)


class GfmExtension(Extension):
    """Register strikethrough and bare-URL autolink inline processors."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Attach the GFM inline processors to ``md``."""
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_RE, "del"), "folio_strike", 65
        )
        md.inlinePatterns.register(
            AutolinkInlineProcessor(AUTOLINK_RE, md), "folio_autolink", 115
        )


class MathExtension(Extension):
    """Register display and inline TeX math processors."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Attach the math inline processors to ``md``."""
        md.inlinePatterns.register(
            MathInlineProcessor(DISPLAY_MATH_RE, md, display=True),
            "folio_display_math",
            186,
        )
        md.inlinePatterns.register(
            MathInlineProcessor(INLINE_MATH_RE, md, display=False),
            "folio_inline_math",
            185,
        )


__all__ = [
    "AutolinkInlineProcessor",
    "GfmExtension",
    "MathExtension",
    "MathInlineProcessor",
]
