"""Map content filenames to stable URL slugs and headings to anchor ids.

Two related but distinct transforms live here:

* :class:`SlugMapper` turns an on-disk filename such as ``Proxy-Basics.md``
  into the document slug used in published URLs, honouring an explicit
  override table so files can be renamed without breaking links.
* :func:`slugify` turns heading text into an anchor id. It is the only
  implementation used by table-of-contents synthesis, heading-id injection,
  the search indexer, and the outline builder, so generated ``#anchor`` links
  always resolve.

Examples
--------
>>> from folio_pages.slugs import SlugMapper, slugify
>>> mapper = SlugMapper({"fiat-shamir.md": "fiat-shamir-pitfalls"})
>>> mapper.to_slug("fiat-shamir.md")
'fiat-shamir-pitfalls'
>>> mapper.to_slug("Proxy Basics.md")
'proxy-basics'
>>> mapper.to_filename("fiat-shamir-pitfalls")
'fiat-shamir.md'
>>> slugify("My Heading!")
'my-heading'
"""

from __future__ import annotations

import re
import types
import typing as typ

from ._constants import MARKDOWN_SUFFIX

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_MARKDOWN_SUFFIX_PATTERN = re.compile(r"\.md$")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_FILENAME_DISALLOWED = re.compile(r"[^a-z0-9-]")
_ANCHOR_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_HYPHEN_RUNS = re.compile(r"-+")


def slugify(text: str) -> str:
    """Return the anchor id for ``text``.

    Lowercases the text, drops every character outside ``[a-z0-9]``,
    whitespace and ``-``, turns whitespace runs into hyphens, collapses
    repeated hyphens and trims them from both ends. Applying it twice yields
    the same result as applying it once.
    """
    value = _ANCHOR_DISALLOWED.sub("", text.lower())
    value = _WHITESPACE_PATTERN.sub("-", value)
    value = _HYPHEN_RUNS.sub("-", value)
    return value.strip("-")


def filename_to_slug(filename: str) -> str:
    """Return the fallback slug for ``filename`` when no override applies."""
    stem = _MARKDOWN_SUFFIX_PATTERN.sub("", filename).lower()
    stem = _WHITESPACE_PATTERN.sub("-", stem)
    return _FILENAME_DISALLOWED.sub("", stem)


def humanize_slug(slug: str) -> str:
    """Return a display title derived from ``slug`` (``a-b`` -> ``A B``)."""
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), slug.replace("-", " "))


class SlugMapper:
    """Bidirectional filename/slug mapping with an explicit override table.

    The override table is copied into a read-only mapping at construction;
    callers load it once (usually from the site config) and inject it into
    :class:`~folio_pages.content.ContentRepository`.
    """

    def __init__(self, overrides: cabc.Mapping[str, str] | None = None) -> None:
        self._overrides = types.MappingProxyType(dict(overrides or {}))
        self._reverse = types.MappingProxyType(
            {slug: filename for filename, slug in self._overrides.items()}
        )

    @property
    def overrides(self) -> cabc.Mapping[str, str]:
        """Return the read-only filename -> slug override table."""
        return self._overrides

    def to_slug(self, filename: str) -> str:
        """Return the published slug for ``filename``.

        Parameters
        ----------
        filename : str
            Bare filename (no directories) of a Markdown source file.

        Returns
        -------
        str
            The override slug when one is configured, otherwise the result of
            :func:`filename_to_slug`. Punctuation-only filenames may produce an
            empty string; the repository rejects those.
        """
        override = self._overrides.get(filename)
        if override is not None:
            return override
        return filename_to_slug(filename)

    def to_filename(self, slug: str) -> str:
        """Return the source filename for ``slug``, reversing the override table."""
        return self._reverse.get(slug, f"{slug}{MARKDOWN_SUFFIX}")


__all__ = ["SlugMapper", "filename_to_slug", "humanize_slug", "slugify"]
