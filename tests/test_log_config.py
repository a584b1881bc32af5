"""Tests for the structlog and stdlib logging set-up used by the CLI."""

from __future__ import annotations

import logging

import pytest
import structlog

from folio_pages.log_config import configure_logging


@pytest.mark.parametrize(
    ("name", "expected"),
    [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("LOUD", logging.INFO)],
)
def test_configure_logging_sets_root_level(name: str, expected: int) -> None:
    """Level names are case-insensitive; unknown names fall back to INFO."""
    configure_logging(name)
    assert logging.getLogger().level == expected


def test_json_output_uses_json_renderer() -> None:
    """``json_output`` swaps the console renderer for JSON lines."""
    configure_logging("INFO", json_output=True)
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    configure_logging("INFO")
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
