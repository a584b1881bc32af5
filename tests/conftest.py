"""Shared fixtures for the folio_pages test suite."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from folio_pages.generator.renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def renderer() -> HtmlContentRenderer:
    """Return a renderer with the default style and diagram languages."""
    return HtmlContentRenderer()


@pytest.fixture
def render_soup(
    renderer: HtmlContentRenderer,
) -> typ.Callable[[str], BeautifulSoup]:
    """Return a helper that renders markdown and parses the resulting HTML."""

    def _render(markdown_text: str) -> BeautifulSoup:
        return BeautifulSoup(renderer.markdown(markdown_text), "html.parser")

    return _render


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Return an empty content directory under ``tmp_path``."""
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def write_content(content_dir: Path) -> typ.Callable[[str, str], Path]:
    """Return a helper writing ``name`` with ``text`` into the content dir."""

    def _write(name: str, text: str) -> Path:
        path = content_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
