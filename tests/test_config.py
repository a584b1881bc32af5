"""Tests for loading ``site.yaml`` into typed configuration dataclasses."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import pytest

from folio_pages.config import (
    DEFAULT_CATEGORIES,
    SiteConfig,
    SiteConfigError,
    load_site_config,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture
def write_config(tmp_path: Path) -> cabc.Callable[[str], Path]:
    """Return a helper writing YAML text to ``tmp_path / 'site.yaml'``."""

    def _write(text: str) -> Path:
        path = tmp_path / "site.yaml"
        path.write_text(text.strip() + "\n", encoding="utf-8")
        return path

    return _write


def test_full_config_round_trip(write_config: cabc.Callable[[str], Path]) -> None:
    """Every documented key is parsed into the typed config."""
    path = write_config(
        """
content_dir: posts
output_dir: dist
site_name: Nullity
pygments_style: friendly
assets_dir: /static/
diagram_languages: [mermaid, graphviz]
slug_overrides:
  fiat-shamir.md: fiat-shamir-pitfalls
categories:
  plonk: research
search:
  result_limit: 5
  context_chars: 80
  index_filename: search.json
max_workers: 4
        """
    )
    config = load_site_config(path)
    assert config.content_dir == Path("posts")
    assert config.output_dir == Path("dist")
    assert config.site_name == "Nullity"
    assert config.pygments_style == "friendly"
    assert config.assets_dir == "static"
    assert config.diagram_languages == ("mermaid", "graphviz")
    assert config.slug_overrides["fiat-shamir.md"] == "fiat-shamir-pitfalls"
    assert config.categories["plonk"] == "research"
    assert config.categories["home"] == "overview", "defaults are merged in"
    assert config.search.result_limit == 5
    assert config.search.context_chars == 80
    assert config.search.index_filename == "search.json"
    assert config.max_workers == 4


def test_empty_config_uses_defaults(write_config: cabc.Callable[[str], Path]) -> None:
    """An empty file yields the default configuration."""
    config = load_site_config(write_config(""))
    defaults = SiteConfig()
    assert config.content_dir == defaults.content_dir
    assert config.output_dir == defaults.output_dir
    assert config.diagram_languages == ("mermaid",)
    assert dict(config.categories) == dict(DEFAULT_CATEGORIES)
    assert config.search.result_limit == 10
    assert config.search.context_chars == 150
    assert config.search.index_filename == "search-index.json"
    assert config.max_workers is None


def test_override_table_is_frozen(write_config: cabc.Callable[[str], Path]) -> None:
    """The slug override table cannot be mutated after load."""
    config = load_site_config(write_config("slug_overrides:\n  a.md: alpha"))
    with pytest.raises(TypeError):
        config.slug_overrides["b.md"] = "beta"  # type: ignore[index]


def test_missing_file_raises(tmp_path: Path) -> None:
    """A missing configuration file is reported as FileNotFoundError."""
    with pytest.raises(FileNotFoundError, match="not found"):
        load_site_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("- just\n- a list", "must be a mapping"),
        ("unknown_key: 1", "Unknown configuration keys: unknown_key"),
        ("slug_overrides: [a, b]", "'slug_overrides' must be a mapping"),
        ("max_workers: 0", "'max_workers' must be a positive integer"),
        ("max_workers: true", "'max_workers' must be a positive integer"),
        ("search: 5", "'search' must be a mapping"),
        ("search:\n  result_limit: many", "'search.result_limit'"),
        ("diagram_languages: 3", "'diagram_languages'"),
    ],
)
def test_invalid_config_raises(
    write_config: cabc.Callable[[str], Path], text: str, message: str
) -> None:
    """Structural mistakes raise SiteConfigError with a helpful message."""
    with pytest.raises(SiteConfigError, match=message):
        load_site_config(write_config(text))


def test_default_categories_use_a_factory() -> None:
    """The read-only category table is supplied per instance, not as a default."""
    field = next(f for f in dc.fields(SiteConfig) if f.name == "categories")
    assert field.default is dc.MISSING
    assert dict(SiteConfig().categories) == dict(DEFAULT_CATEGORIES)
