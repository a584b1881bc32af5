"""Tests for the ``folio`` CLI commands.

The command functions are invoked directly with keyword arguments, the same
values Cyclopts would bind from flags or ``FOLIO_`` environment variables.
Each test builds a throwaway site config under ``tmp_path``.
"""

from __future__ import annotations

import json
import typing as typ

import pytest

from folio_pages import cli

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Write a small content tree and a config pointing at it."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "home.md").write_text(
        "---\ntitle: Home\nnav_order: 1\n---\nWelcome.\n\n## Nonce Reuse\n\n"
        "Never reuse a nonce.\n",
        encoding="utf-8",
    )
    (content / "kzg.md").write_text("## Setup\n\nPowers of tau.\n", encoding="utf-8")
    path = tmp_path / "site.yaml"
    path.write_text(
        f"content_dir: {content}\noutput_dir: {tmp_path / 'public'}\n",
        encoding="utf-8",
    )
    return path


def test_build_writes_site(
    config_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``build`` writes every artifact and reports each path."""
    cli.build(config=config_path, log_level="WARNING")
    out = capsys.readouterr().out
    public = tmp_path / "public"
    for name in ("home.html", "kzg.html", "index.html", "search-index.json"):
        assert (public / name).exists(), f"{name} was not written"
        assert f"{name}\n" in out, f"{name} missing from CLI output"
    assert out.startswith("wrote ")


def test_build_honours_output_override(config_path: Path, tmp_path: Path) -> None:
    """``--output-dir`` replaces the configured output directory."""
    override = tmp_path / "elsewhere"
    cli.build(config=config_path, output_dir=override, log_level="WARNING")
    assert (override / "index.html").exists()
    assert not (tmp_path / "public").exists()


def test_index_writes_only_search_payload(
    config_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``index`` skips page rendering and writes the JSON payload."""
    cli.index(config=config_path, log_level="WARNING")
    public = tmp_path / "public"
    payload = json.loads((public / "search-index.json").read_text(encoding="utf-8"))
    assert [entry["id"] for entry in payload] == [
        "home",
        "home-section-0",
        "kzg",
        "kzg-section-0",
    ]
    assert not (public / "home.html").exists()
    assert "search-index.json" in capsys.readouterr().out


def test_search_prints_matches(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``search`` prints the path and title of each hit with a snippet."""
    cli.search("NONCE", config=config_path)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "/home.html  Home"
    assert lines[2] == "/home.html#nonce-reuse  Nonce Reuse"
    assert "Never reuse a nonce." in lines[3]


def test_search_limit(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``--limit`` caps the number of printed results."""
    cli.search("nonce", config=config_path, limit=1)
    assert len(capsys.readouterr().out.splitlines()) == 2


def test_search_without_matches(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Queries with no hits say so instead of printing nothing."""
    cli.search("pairing", config=config_path)
    assert capsys.readouterr().out == "no matches for 'pairing'\n"


def test_missing_config_raises(tmp_path: Path) -> None:
    """A missing config file surfaces as FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        cli.build(config=tmp_path / "absent.yaml", log_level="WARNING")


def test_log_level_and_workers_are_forwarded(
    config_path: Path, mocker: MockerFixture
) -> None:
    """The CLI configures logging and passes ``max_workers`` to the loader."""
    config_path.write_text(
        config_path.read_text(encoding="utf-8") + "max_workers: 3\n",
        encoding="utf-8",
    )
    configure = mocker.patch("folio_pages.cli.configure_logging")
    load_all = mocker.spy(cli.ContentRepository, "load_all")
    cli.index(config=config_path, log_level="DEBUG")
    configure.assert_called_once_with("DEBUG")
    assert load_all.call_args.kwargs == {"max_workers": 3}
