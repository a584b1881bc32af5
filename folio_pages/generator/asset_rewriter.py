"""Helpers for rewriting legacy relative image paths to site-rooted URLs."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from folio_pages._constants import DEFAULT_ASSETS_DIR

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown


class AssetPathExtension(Extension):
    """Rewrite relative image references into the assets directory.

    Posts migrated from the old Jekyll site reference images relative to the
    source file (``../assets/img/setup.png``, ``assets/img/setup.png``). The
    static site serves those files from ``/assets/``, so the references are
    rewritten to ``/assets/img/setup.png``. Absolute paths, external URLs,
    data URIs and relative paths outside the assets directory are left alone.
    """

    def __init__(self, assets_dir: str = DEFAULT_ASSETS_DIR) -> None:
        super().__init__()
        self.assets_dir = assets_dir.strip("/")

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the asset-path treeprocessor on the Markdown instance."""
        processor = AssetPathTreeprocessor(md, self.assets_dir)
        md.treeprocessors.register(processor, "folio_asset_paths", 15)


class AssetPathTreeprocessor(Treeprocessor):
    """Rewrite ``img`` sources that point into the legacy assets directory."""

    def __init__(self, md: Markdown, assets_dir: str) -> None:
        super().__init__(md)
        self.assets_dir = assets_dir

    def run(self, root: Element) -> Element:
        """Rewrite relative image sources in the parsed markdown tree."""
        for element in root.iter("img"):
            rewritten = self._rewrite(element.get("src"))
            if rewritten:
                element.set("src", rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the site-rooted path for ``target`` or None to keep it."""
        if not target or target.startswith(("/", "#")):
            return None
        parsed = urlsplit(target)
        if parsed.scheme or parsed.netloc:
            return None

        normalized = posixpath.normpath(parsed.path)
        while normalized.startswith("../"):
            normalized = normalized[3:]
        prefix = f"{self.assets_dir}/"
        if not normalized.startswith(prefix):
            return None

        url = f"/{normalized}"
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


__all__ = ["DEFAULT_ASSETS_DIR", "AssetPathExtension", "AssetPathTreeprocessor"]
