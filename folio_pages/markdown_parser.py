r"""Split front matter from Markdown sources and clean legacy directives.

These are the text-level steps that run before Python-Markdown sees a
document: the YAML front matter block is separated and parsed into a
:class:`~folio_pages.models.FrontMatter`, and Jekyll/kramdown leftovers
(``{: .class}`` attribute lists, Liquid ``{% %}`` tags, unresolved
``{{ }}`` variables) are removed from the body. Code is masked during the
cleanup so that directive-like text inside fenced blocks or inline spans
survives untouched.

Example
-------
>>> from folio_pages.markdown_parser import clean_markdown, split_front_matter
>>> meta, body = split_front_matter("---\ntitle: Plonk\n---\nBody {% raw %}")
>>> meta.title
'Plonk'
>>> clean_markdown(body)
'Body '
"""

from __future__ import annotations

import numbers
import re
import typing as typ

import structlog
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .models import KNOWN_FRONT_MATTER_KEYS, FrontMatter

logger = structlog.get_logger(__name__)

FRONT_MATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
FENCED_BLOCK_PATTERN = re.compile(
    r"^[ ]{0,3}(?P<fence>`{3,}|~{3,})[^\n]*\n.*?^[ ]{0,3}(?P=fence)[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
INLINE_CODE_PATTERN = re.compile(r"(?<!`)(?P<ticks>`+)(?!`).+?(?<!`)(?P=ticks)(?!`)")
ATTRIBUTE_LIST_PATTERN = re.compile(r"\{:\s*\.[\w\s\-.]*\s*\}")
LIQUID_TAG_PATTERN = re.compile(r"\{%.*?%\}", re.DOTALL)
LIQUID_VARIABLE_PATTERN = re.compile(r"\{\{.*?\}\}", re.DOTALL)
EXCESS_BLANK_LINES = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
_PLACEHOLDER = "\u0091folio-code-{index}\u0092"
_PLACEHOLDER_PATTERN = re.compile("\u0091folio-code-(\\d+)\u0092")


def split_front_matter(text: str) -> tuple[FrontMatter, str]:
    """Separate the leading YAML front matter block from the Markdown body.

    Parameters
    ----------
    text : str
        Full file contents.

    Returns
    -------
    tuple[FrontMatter, str]
        Parsed front matter (empty when absent or malformed) and the body
        text that follows the closing ``---`` delimiter.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return FrontMatter(), text
    body = text[match.end() :]
    return parse_front_matter(match.group(1)), body


def parse_front_matter(block: str) -> FrontMatter:
    """Parse a YAML front matter block, degrading to empty metadata on errors."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except YAMLError as exc:
        logger.warning("front_matter_invalid", error=str(exc))
        return FrontMatter()
    if loaded is None:
        return FrontMatter()
    if not isinstance(loaded, dict):
        logger.warning("front_matter_not_mapping", kind=type(loaded).__name__)
        return FrontMatter()
    raw: dict[str, typ.Any] = {str(key): value for key, value in loaded.items()}
    return FrontMatter(
        title=_optional_str(raw.get("title")),
        nav_order=_coerce_nav_order(raw.get("nav_order")),
        parent=_optional_str(raw.get("parent")),
        description=_optional_str(raw.get("description")),
        category=_optional_str(raw.get("category")),
        extra={
            key: value
            for key, value in raw.items()
            if key not in KNOWN_FRONT_MATTER_KEYS
        },
    )


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_nav_order(value: object | None) -> int | float | None:
    """Return ``value`` as a number, or None when it is missing or not numeric."""
    match value:
        case None | bool():
            return None
        case numbers.Integral():
            return int(value)
        case numbers.Real():
            return float(value)
        case str() as text:
            for kind in (int, float):
                try:
                    return kind(text.strip())
                except ValueError:
                    continue
    logger.warning("nav_order_not_numeric", value=repr(value))
    return None


def mask_code(text: str) -> tuple[str, list[str]]:
    """Replace fenced blocks and inline code spans with opaque placeholders.

    Returns the masked text together with the original snippets, indexed by
    the number embedded in each placeholder.
    """
    stash: list[str] = []

    def _stash(match: re.Match[str]) -> str:
        stash.append(match.group(0))
        return _PLACEHOLDER.format(index=len(stash) - 1)

    masked = FENCED_BLOCK_PATTERN.sub(_stash, text)
    masked = INLINE_CODE_PATTERN.sub(_stash, masked)
    return masked, stash


def restore_code(text: str, stash: list[str]) -> str:
    """Put the snippets captured by :func:`mask_code` back in place."""
    return _PLACEHOLDER_PATTERN.sub(lambda match: stash[int(match.group(1))], text)


def strip_directives(text: str) -> str:
    """Remove legacy Jekyll/kramdown directives and collapse blank-line runs."""
    text = ATTRIBUTE_LIST_PATTERN.sub("", text)
    text = LIQUID_TAG_PATTERN.sub("", text)
    text = LIQUID_VARIABLE_PATTERN.sub("", text)
    return EXCESS_BLANK_LINES.sub("\n\n", text)


def clean_markdown(body: str) -> str:
    """Strip directives from ``body`` while leaving code byte-for-byte intact."""
    masked, stash = mask_code(body)
    return restore_code(strip_directives(masked), stash)


__all__ = [
    "clean_markdown",
    "mask_code",
    "parse_front_matter",
    "restore_code",
    "split_front_matter",
    "strip_directives",
]
