"""Coercion helpers shared by the folio configuration loader."""

from __future__ import annotations

import types
import typing as typ

from .models import SearchConfig, SiteConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def _string_mapping(value: object, *, key: str) -> cabc.Mapping[str, str]:
    """Return a read-only ``str -> str`` mapping built from a YAML section."""
    match value:
        case None:
            return types.MappingProxyType({})
        case dict():
            return types.MappingProxyType(
                {str(name).strip(): str(target).strip() for name, target in value.items()}
            )
        case _:
            msg = f"'{key}' must be a mapping of strings."
            raise SiteConfigError(msg)


def _string_tuple(value: object, *, key: str) -> tuple[str, ...]:
    """Normalize a string or list of strings into a tuple of non-empty values."""
    match value:
        case str() as text:
            return tuple(segment for segment in text.split() if segment)
        case list():
            return tuple(text for item in value if (text := str(item).strip()))
        case _:
            msg = f"'{key}' must be a string or a list of strings."
            raise SiteConfigError(msg)


def _positive_int(value: object, *, key: str) -> int:
    """Return ``value`` as a positive integer or raise :class:`SiteConfigError`."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"'{key}' must be a positive integer, got {value!r}."
        raise SiteConfigError(msg)
    return value


def _optional_positive_int(value: object, *, key: str) -> int | None:
    """Return ``None`` for a missing value, else a positive integer."""
    if value is None:
        return None
    return _positive_int(value, key=key)


def _build_search_config(payload: object) -> SearchConfig:
    """Build a :class:`SearchConfig` from the ``search`` section."""
    base = SearchConfig()
    if payload is None:
        return base
    if not isinstance(payload, dict):
        msg = "'search' must be a mapping."
        raise SiteConfigError(msg)
    return SearchConfig(
        result_limit=_positive_int(
            payload.get("result_limit", base.result_limit), key="search.result_limit"
        ),
        context_chars=_positive_int(
            payload.get("context_chars", base.context_chars),
            key="search.context_chars",
        ),
        index_filename=str(payload.get("index_filename", base.index_filename)),
    )


__all__ = [
    "_build_search_config",
    "_optional_positive_int",
    "_positive_int",
    "_string_mapping",
    "_string_tuple",
]
