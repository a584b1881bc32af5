"""Unit tests for the plain-text helpers over rendered HTML."""

from __future__ import annotations

import pytest

from folio_pages.text import (
    build_outline,
    estimate_reading_time,
    excerpt,
    extract_heading_records,
    preview_headings,
    strip_html,
)

SAMPLE_HTML = (
    '<h1 id="intro">Intro</h1>'
    "<p>Lead paragraph.</p>"
    '<h2 id="setup"><a class="header-anchor" href="#setup">#</a>Setup</h2>'
    "<p>Install <code>folio</code>.</p>"
    "<h3>No Id <em>Here</em></h3>"
    '<h4 id="deep">Deep</h4>'
    "<script>window.alert('x')</script>"
    "<style>p { color: red; }</style>"
)


def test_strip_html_drops_script_style_and_anchor_glyphs() -> None:
    """Visible text excludes code in script/style and the ``#`` self-links."""
    text = strip_html(SAMPLE_HTML)
    assert "alert" not in text
    assert "color" not in text
    assert "#" not in text
    assert text.startswith("Intro Lead paragraph."), "blocks stay space-separated"
    assert "Install folio." in text


def test_strip_html_keeps_words_split_by_inline_tags() -> None:
    """Inline markup inside a word must not insert spaces."""
    assert strip_html("<p>un<b>believ</b>able</p>") == "unbelievable"


@pytest.mark.parametrize(
    "text",
    [
        "short text",
        "word " * 100,
        "x" * 500,
        "Zero-knowledge proofs let a prover convince a verifier " * 8,
    ],
)
def test_excerpt_bounds(text: str) -> None:
    """Excerpts never exceed the limit plus the three-character ellipsis."""
    result = excerpt(text, 200)
    assert len(result) <= 203, f"excerpt too long: {len(result)}"
    if len(text) <= 200:
        assert result == text, "fitting text is returned unchanged"
    else:
        assert result.endswith("...")


def test_excerpt_cuts_on_word_boundary() -> None:
    """Truncation happens at the last space before the limit."""
    text = "alpha beta gamma delta"
    assert excerpt(text, 13) == "alpha beta..."
    body = excerpt(text, 13)[:-3]
    assert text.startswith(body)
    assert text[len(body)] == " ", "cut should land on a word boundary"


def test_reading_time() -> None:
    """Reading time rounds up and never drops below one minute."""
    assert estimate_reading_time("") == 1
    assert estimate_reading_time("<p>" + "word " * 200 + "</p>") == 1
    assert estimate_reading_time("<p>" + "word " * 201 + "</p>") == 2
    assert estimate_reading_time("<p>" + "word " * 50 + "</p>", 25) == 2


def test_heading_records_skip_h1_and_derive_missing_ids() -> None:
    """Records cover h2-h6 in order and slugify headings without an id."""
    records = extract_heading_records(SAMPLE_HTML)
    assert [(r.level, r.title, r.anchor_id) for r in records] == [
        (2, "Setup", "setup"),
        (3, "No Id Here", "no-id-here"),
        (4, "Deep", "deep"),
    ]
    assert records[0].href == "#setup"


def test_outline_only_lists_headings_with_ids() -> None:
    """The floating outline links only headings that carry an ``id``."""
    outline = build_outline(SAMPLE_HTML)
    assert [(e.level, e.id, e.title, e.href) for e in outline] == [
        (2, "setup", "Setup", "#setup"),
        (4, "deep", "Deep", "#deep"),
    ]


def test_preview_headings_limit() -> None:
    """Listing previews keep at most the requested number of titles."""
    assert preview_headings(SAMPLE_HTML, limit=2) == ["Setup", "No Id Here"]
