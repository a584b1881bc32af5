"""Tests for the Markdown transform pipeline and the HTML enhancer.

Each test renders a small Markdown snippet through
``folio_pages.generator.renderer.HtmlContentRenderer`` and inspects the
result with BeautifulSoup. Together they pin down code highlighting and the
code round-trip guarantee, diagram passthrough, GFM strikethrough and
autolinks, TeX math spans, asset path rewriting, legacy table-of-contents
synthesis, heading anchors, link classification, and render determinism.
"""

from __future__ import annotations

import typing as typ
import warnings

import pytest
from bs4 import BeautifulSoup

from folio_pages.errors import ContentRenderError
from folio_pages.generator import renderer as renderer_module
from folio_pages.generator.enhancer import RawHtmlEnhancer
from folio_pages.generator.renderer import HtmlContentRenderer

RenderSoup = typ.Callable[[str], "BeautifulSoup"]

PYTHON_SNIPPET = (
    "def compare(a, b):\n"
    "    # {% raw %} and {: .note} stay literal in code\n"
    '    return a < b and b > 0 and "x" != \'y\' & True\n'
)


def test_fenced_code_round_trips_exactly(render_soup: RenderSoup) -> None:
    """Highlighted code must read back as exactly the source snippet."""
    soup = render_soup(f"Intro.\n\n```python\n{PYTHON_SNIPPET}```\n\nOutro.\n")
    block = soup.select_one("div.codehilite")
    assert block is not None, "expected a highlighted code block"
    assert block.get("data-language") == "python"
    assert "language-python" in block.get("class", [])
    assert "code-block" in block.get("class", [])
    assert block.find("pre").get_text() == PYTHON_SNIPPET, (
        "code text should survive highlighting byte-for-byte"
    )
    assert block.find_parent("p") is None, "code blocks must not sit inside <p>"


def test_unlabelled_and_unknown_fences_fall_back_to_text(
    render_soup: RenderSoup,
) -> None:
    """Missing or unknown languages render as plain text with a label."""
    soup = render_soup("```\nplain\n```\n\n```nosuchlang\nodd\n```\n")
    languages = [div.get("data-language") for div in soup.select("div.codehilite")]
    assert languages == ["text", "nosuchlang"]


def test_indented_fences_are_highlighted(render_soup: RenderSoup) -> None:
    """Fences indented by up to three spaces still render as code blocks."""
    soup = render_soup("Steps:\n\n   ```rust\n   fn main() {}\n   ```\n")
    block = soup.select_one("div.codehilite")
    assert block is not None
    assert block.get("data-language") == "rust"
    assert "fn main" in block.get_text()


def test_mermaid_fences_pass_through_for_client_rendering(
    render_soup: RenderSoup,
) -> None:
    """Diagram fences are emitted unhighlighted in a classed ``pre``."""
    soup = render_soup("```mermaid\ngraph TD;\n  A-->B;\n```\n")
    diagram = soup.select_one("pre.mermaid")
    assert diagram is not None, "expected a mermaid pre block"
    assert diagram.get_text() == "graph TD;\n  A-->B;\n"
    assert soup.select_one("div.codehilite") is None


def test_inline_and_indented_code_are_classified(render_soup: RenderSoup) -> None:
    """Inline code and indented code blocks receive language classes."""
    soup = render_soup("Run `make test` now.\n\n    indented = True\n")
    inline = soup.select_one("p code")
    assert inline is not None
    assert inline.get("class") == ["inline-code", "language-text"]
    assert inline.get_text() == "make test"
    indented = soup.select_one("pre > code")
    assert "code-block" in indented.parent.get("class", [])
    assert "code-content" in indented.get("class", [])


def test_strikethrough_and_autolinks(render_soup: RenderSoup) -> None:
    """GFM strikethrough and bare URLs become ``del`` and anchors."""
    soup = render_soup(
        "This is ~~obsolete~~ now. See https://example.com/docs for more.\n\n"
        "[https://example.com](https://example.com)\n"
    )
    assert soup.select_one("del").get_text() == "obsolete"
    anchors = soup.find_all("a")
    assert [a["href"] for a in anchors] == [
        "https://example.com/docs",
        "https://example.com",
    ], "bare URL should link once and existing links must not nest"


def test_math_spans(render_soup: RenderSoup) -> None:
    """Dollar-delimited TeX becomes KaTeX-ready spans; code and prices do not."""
    soup = render_soup(
        "Euler: $e^{i\\pi} + 1 = 0$.\n\n"
        "$$\\int_0^1 x\\,dx$$\n\n"
        "It costs $5 and $10. Try `echo $HOME`.\n"
    )
    inline = soup.select_one("span.math-inline")
    display = soup.select_one("span.math-display")
    assert inline.get_text() == "\\(e^{i\\pi} + 1 = 0\\)"
    assert display.get_text() == "\\[\\int_0^1 x\\,dx\\]"
    assert len(soup.select("span.math")) == 2, "prices must not become math"
    assert soup.select_one("code").get_text() == "echo $HOME"


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("../assets/img/setup.png", "/assets/img/setup.png"),
        ("assets/img/setup.png", "/assets/img/setup.png"),
        ("/assets/img/abs.png", "/assets/img/abs.png"),
        ("https://cdn.example.com/x.png", "https://cdn.example.com/x.png"),
        ("images/local.png", "images/local.png"),
    ],
)
def test_image_paths_are_rewritten(
    render_soup: RenderSoup, src: str, expected: str
) -> None:
    """Only relative references into the assets directory are rewritten."""
    soup = render_soup(f"![diagram]({src})\n")
    assert soup.find("img")["src"] == expected


def test_headings_get_slug_ids_and_anchor_links(render_soup: RenderSoup) -> None:
    """Every heading receives a slug id, heading classes, and a ``#`` link."""
    soup = render_soup("## Using `gnark` *Fast*\n\nBody.\n\n### Setup Guide\n")
    h2 = soup.find("h2")
    assert h2["id"] == "using-gnark-fast"
    assert h2["class"] == ["markdown-heading", "markdown-h2"]
    anchor = h2.find("a")
    assert anchor["href"] == "#using-gnark-fast"
    assert "header-anchor" in anchor["class"]
    assert anchor.get_text() == "#"
    assert soup.find("h3")["id"] == "setup-guide"


def test_links_are_classified(render_soup: RenderSoup) -> None:
    """External links open in a new tab; internal links are only classed."""
    soup = render_soup("[out](https://example.com) and [in](/plonk#setup)\n")
    external, internal = soup.select("p a")
    assert "external-link" in external["class"]
    assert external["target"] == "_blank"
    assert set(external["rel"]) == {"noopener", "noreferrer"}
    assert "internal-link" in internal["class"]
    assert internal.get("target") is None


def test_block_elements_receive_classes(render_soup: RenderSoup) -> None:
    """Tables are wrapped; paragraphs, lists, and quotes are classed."""
    soup = render_soup(
        "| a | b |\n|---|---|\n| 1 | 2 |\n\n"
        "> quoted\n\n"
        "- one\n- two\n\n"
        "1. first\n2. second\n"
    )
    table = soup.find("table")
    assert table.parent.name == "div"
    assert table.parent["class"] == ["table-wrapper"]
    assert "markdown-table" in table["class"]
    assert soup.find("blockquote")["class"] == ["markdown-blockquote"]
    assert soup.find("ul")["class"] == ["markdown-list"]
    assert soup.find("ol")["class"] == ["markdown-list", "ordered"]
    assert "markdown-paragraph" in soup.find("p")["class"]


def test_toc_marker_is_replaced_with_nested_list(render_soup: RenderSoup) -> None:
    """The legacy marker expands to h2 entries with nested h3 sublists."""
    soup = render_soup(
        "* TOC\n{:toc}\n\n"
        "### Orphan Detail\n\n"
        "## First Part\n\nText.\n\n"
        "### Detail A\n\n"
        "## Second Part\n"
    )
    toc = soup.select_one("div.jekyll-toc")
    assert toc is not None, "expected a synthesized table of contents"
    items = toc.select("ol.toc-list > li.toc-item")
    assert [item.a.get_text() for item in items] == ["First Part", "Second Part"]
    sub_links = items[0].select("ol.toc-sublist a.toc-link")
    assert [link["href"] for link in sub_links] == ["#detail-a"]
    assert items[1].select_one("ol.toc-sublist") is None
    heading_ids = {h["id"] for h in soup.find_all(["h2", "h3"])}
    for link in toc.select("a.toc-link"):
        assert link["href"][1:] in heading_ids, f"dangling TOC link {link['href']}"
    assert "{:toc}" not in soup.get_text()
    assert "Orphan Detail" not in toc.get_text(), "h3 before any h2 is dropped"


def test_toc_marker_without_headings_is_removed(render_soup: RenderSoup) -> None:
    """With nothing to list the marker disappears instead of leaving noise."""
    soup = render_soup("{:toc}\n\nJust prose.\n")
    assert soup.select_one("div.jekyll-toc") is None
    assert "{:toc}" not in soup.get_text()
    assert "Just prose." in soup.get_text()


def test_render_splits_front_matter(renderer: HtmlContentRenderer) -> None:
    """``render`` returns typed front matter alongside the body HTML."""
    rendered = renderer.render("---\ntitle: Plonk\nnav_order: 2\n---\n## Setup\n")
    assert rendered.front_matter.title == "Plonk"
    assert rendered.front_matter.nav_order == 2
    assert 'id="setup"' in rendered.body_html


def test_rendering_is_deterministic(renderer: HtmlContentRenderer) -> None:
    """The same source always renders to byte-identical HTML."""
    source = f"* TOC\n{{:toc}}\n\n## A\n\n```python\n{PYTHON_SNIPPET}```\n\n## B\n"
    assert renderer.markdown(source) == renderer.markdown(source)


def test_empty_body_renders_empty(renderer: HtmlContentRenderer) -> None:
    """Whitespace-only bodies produce no HTML at all."""
    assert renderer.markdown("\n\n  \n") == ""


def test_conversion_failures_are_wrapped(
    renderer: HtmlContentRenderer, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Exceptions from Python-Markdown surface as ContentRenderError."""

    def _boom(self: object, source: str) -> str:
        msg = "boom"
        raise RuntimeError(msg)

    monkeypatch.setattr(renderer_module.Markdown, "convert", _boom)
    with pytest.raises(ContentRenderError, match="boom"):
        renderer.markdown("# Title\n")


def test_stylesheet_targets_codehilite(renderer: HtmlContentRenderer) -> None:
    """The Pygments stylesheet is scoped to ``.codehilite`` blocks."""
    assert ".codehilite" in renderer.stylesheet


def test_inline_code_toc_marker_stays_literal(render_soup: RenderSoup) -> None:
    """A marker inside a code span is sample text, not a TOC request."""
    soup = render_soup("`{:toc}`\n\n## Alpha\n")
    assert soup.select_one("div.jekyll-toc") is None
    code = soup.find("code")
    assert code is not None, "the code span must survive"
    assert code.get_text() == "{:toc}"


def test_raw_html_links_and_headings_are_enriched(render_soup: RenderSoup) -> None:
    """Anchors and headings written as raw HTML get the same treatment."""
    soup = render_soup(
        '<a href="https://example.com">x</a> and [in](/plonk)\n\n'
        "<h2>Raw Head</h2>\n\nText\n"
    )
    raw_link = soup.find("a", href="https://example.com")
    assert "external-link" in raw_link["class"]
    assert raw_link["target"] == "_blank"
    assert set(raw_link["rel"]) == {"noopener", "noreferrer"}
    assert soup.find("a", href="/plonk")["class"] == ["internal-link"]
    heading = soup.find("h2")
    assert heading["id"] == "raw-head"
    assert heading["class"] == ["markdown-heading", "markdown-h2"]
    anchor = heading.find("a")
    assert anchor["href"] == "#raw-head"
    assert anchor["class"] == ["header-anchor"], "self-links are not reclassified"


def test_markdown_only_output_is_not_reserialized(
    renderer: HtmlContentRenderer,
) -> None:
    """The raw HTML pass returns the text untouched when nothing changes."""
    html = renderer.markdown("## Title\n\n[a](/b) and [c](https://c.example)\n")
    assert RawHtmlEnhancer().run(html) == html


def test_heading_text_resolves_stash_without_deprecation_warnings(
    renderer: HtmlContentRenderer,
) -> None:
    """Entities, inline HTML, and escapes in headings resolve to plain text."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        html = renderer.markdown("* TOC\n{:toc}\n\n## Q&amp;A <em>now</em> \\*\n")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("h2")["id"] == "qa-now"
    assert soup.select_one("a.toc-link").get_text() == "Q&A now *"
