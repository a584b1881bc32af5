"""Tree-aware HTML enhancement pass for rendered Markdown.

This is the final step before serialization. It runs once over the
ElementTree that Python-Markdown builds, in two phases:

1. **Table-of-contents synthesis.** A paragraph or list consisting solely of
   the legacy Jekyll marker (``{:toc}`` or ``1. TOC`` followed by
   ``{:toc}``) is replaced with a nested ordered list of every ``h2`` after
   the marker, each followed by the ``h3`` headings that sit between it and
   the next ``h2``. The marker is dropped when there is nothing to list.
2. **Enrichment.** Tables are wrapped for horizontal scrolling, block
   elements receive styling classes, anchors are classified as internal or
   external, and every heading gets a slug ``id`` plus a ``#`` self-link.

Both phases derive anchor ids with :func:`folio_pages.slugs.slugify` from the
same heading text, so synthesized TOC links always resolve.

Raw HTML written straight into a document stays in Python-Markdown's stash
until serialization, so :class:`RawHtmlEnhancer` repeats the link and heading
enrichment on the final HTML for anything the tree pass could not reach.
"""

from __future__ import annotations

import re
import typing as typ
import xml.etree.ElementTree as ET

from bs4 import BeautifulSoup
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import ETX, HTML_PLACEHOLDER_RE, STX

from folio_pages._constants import HEADER_ANCHOR_CLASS
from folio_pages.generator.code_blocks import _add_class
from folio_pages.slugs import slugify

if typ.TYPE_CHECKING:
    from bs4 import Tag
    from markdown import Markdown

ESCAPED_CHAR_PATTERN = re.compile(f"{STX}([0-9]+){ETX}")
RAW_TARGET_PATTERN = re.compile(r"<(?:a|h[1-6])[\s>]", re.IGNORECASE)
LINK_CLASSES = frozenset({"external-link", "internal-link", HEADER_ANCHOR_CLASS})
TOC_MARKER_PATTERN = re.compile(
    r"^\s*(?:1\.\s*)?TOC\s*\{:toc\}\s*$|^\s*\{:toc\}\s*$", re.IGNORECASE
)
EXTERNAL_HREF_PATTERN = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)")
HEADING_TAGS = frozenset(f"h{level}" for level in range(1, 7))
TOC_LEVELS = frozenset({"h2", "h3"})
MARKER_CONTAINERS = frozenset({"p", "ol", "ul"})
BLOCK_CLASSES: dict[str, str] = {
    "blockquote": "markdown-blockquote",
    "ul": "markdown-list",
    "ol": "markdown-list ordered",
    "p": "markdown-paragraph",
}


class ContentEnhancer(Treeprocessor):
    """Synthesize legacy TOCs, then enrich headings, links, and blocks."""

    def run(self, root: ET.Element) -> ET.Element:
        """Apply TOC synthesis followed by the enrichment visitor."""
        self._synthesize_toc(root)
        self._enrich(root)
        return root

    def heading_text(self, element: ET.Element) -> str:
        """Return the plain text of a heading, resolving stashed HTML."""
        text = "".join(element.itertext())
        text = HTML_PLACEHOLDER_RE.sub(self._stashed_text, text)
        return ESCAPED_CHAR_PATTERN.sub(lambda m: chr(int(m.group(1))), text).strip()

    def _stashed_text(self, match: re.Match[str]) -> str:
        """Return the visible text of the stashed HTML block behind ``match``."""
        blocks = self.md.htmlStash.rawHtmlBlocks
        index = int(match.group(1))
        if index >= len(blocks):
            return ""
        block = blocks[index]
        if isinstance(block, str):
            return BeautifulSoup(block, "html.parser").get_text()
        return "".join(block.itertext())

    def _synthesize_toc(self, root: ET.Element) -> None:
        children = list(root)
        for index, child in enumerate(children):
            if child.tag not in MARKER_CONTAINERS:
                continue
            if any(node.tag == "code" for node in child.iter()):
                continue
            if not TOC_MARKER_PATTERN.match("".join(child.itertext())):
                continue
            toc = self._build_toc(children[index + 1 :])
            root.remove(child)
            if toc is not None:
                toc.tail = child.tail
                root.insert(index, toc)
            return

    def _build_toc(self, following: list[ET.Element]) -> ET.Element | None:
        """Return the TOC container for headings in ``following``, or None."""
        container = ET.Element("div", {"class": "jekyll-toc"})
        toc_list = ET.SubElement(container, "ol", {"class": "toc-list"})
        current_item: ET.Element | None = None
        sublist: ET.Element | None = None
        for block in following:
            for element in block.iter():
                if element.tag not in TOC_LEVELS:
                    continue
                title = self.heading_text(element)
                if element.tag == "h2":
                    current_item = _toc_item(toc_list, title)
                    sublist = None
                elif current_item is not None:
                    if sublist is None:
                        sublist = ET.SubElement(
                            current_item, "ol", {"class": "toc-sublist"}
                        )
                    _toc_item(sublist, title)
        if not len(toc_list):
            return None
        return container

    def _enrich(self, root: ET.Element) -> None:
        parents = {child: parent for parent in root.iter() for child in parent}
        for element in list(root.iter()):
            tag = element.tag
            if tag in HEADING_TAGS:
                self._anchor_heading(element)
            elif tag == "a":
                _classify_link(element)
            elif tag == "table":
                _add_class(element, "markdown-table")
                parent = parents.get(element)
                if parent is not None:
                    _wrap(parent, element, "table-wrapper")
            elif (
                tag in BLOCK_CLASSES
                and not element.get("class")
                and not _holds_stashed_html(element)
            ):
                _add_class(element, BLOCK_CLASSES[tag])

    def _anchor_heading(self, heading: ET.Element) -> None:
        """Give ``heading`` a slug id, heading classes, and a ``#`` self-link."""
        anchor_id = slugify(self.heading_text(heading))
        _add_class(heading, f"markdown-heading markdown-{heading.tag}")
        if not anchor_id:
            return
        heading.set("id", anchor_id)
        link = ET.Element(
            "a",
            {
                "href": f"#{anchor_id}",
                "class": HEADER_ANCHOR_CLASS,
                "aria-hidden": "true",
            },
        )
        link.text = "#"
        link.tail = heading.text
        heading.text = None
        heading.insert(0, link)


def _toc_item(parent: ET.Element, title: str) -> ET.Element:
    item = ET.SubElement(parent, "li", {"class": "toc-item"})
    link = ET.SubElement(
        item, "a", {"href": f"#{slugify(title)}", "class": "toc-link"}
    )
    link.text = title
    return item


def _holds_stashed_html(element: ET.Element) -> bool:
    """Return True for a paragraph that only wraps a raw-HTML placeholder.

    Python-Markdown swaps such paragraphs for the stashed block verbatim, but
    only while the ``<p>`` carries no attributes.
    """
    if len(element):
        return False
    return bool(HTML_PLACEHOLDER_RE.fullmatch((element.text or "").strip()))


def _classify_link(element: ET.Element) -> None:
    """Mark an anchor as external (new tab, safe rel) or internal."""
    href = element.get("href") or ""
    if EXTERNAL_HREF_PATTERN.match(href):
        _add_class(element, "external-link")
        element.set("target", "_blank")
        rel = (element.get("rel") or "").split()
        for value in ("noopener", "noreferrer"):
            if value not in rel:
                rel.append(value)
        element.set("rel", " ".join(rel))
    else:
        _add_class(element, "internal-link")


def _wrap(parent: ET.Element, element: ET.Element, css_class: str) -> None:
    """Replace ``element`` inside ``parent`` with a classed ``div`` wrapper."""
    index = list(parent).index(element)
    wrapper = ET.Element("div", {"class": css_class})
    wrapper.tail = element.tail
    element.tail = None
    parent.remove(element)
    wrapper.append(element)
    parent.insert(index, wrapper)


class RawHtmlEnhancer(Postprocessor):
    """Classify links and anchor headings that arrived as raw HTML.

    Raw HTML sits in the stash while the tree pass runs, so its anchors and
    headings are only visible once the stash has been restored. Elements the
    tree pass already handled carry its classes and are left alone; the
    output is re-serialized only when something changed.
    """

    def run(self, text: str) -> str:
        """Return ``text`` with raw anchors and headings enriched."""
        if not RAW_TARGET_PATTERN.search(text):
            return text
        soup = BeautifulSoup(text, "html.parser")
        changed = False
        for link in soup.find_all("a"):
            changed = _classify_raw_link(link) or changed
        for heading in soup.find_all(sorted(HEADING_TAGS)):
            changed = _anchor_raw_heading(soup, heading) or changed
        return str(soup) if changed else text


def _classify_raw_link(link: Tag) -> bool:
    classes = list(link.get("class") or [])
    if LINK_CLASSES.intersection(classes):
        return False
    if EXTERNAL_HREF_PATTERN.match(str(link.get("href") or "")):
        classes.append("external-link")
        link["target"] = "_blank"
        rel = list(link.get("rel") or [])
        rel.extend(value for value in ("noopener", "noreferrer") if value not in rel)
        link["rel"] = rel
    else:
        classes.append("internal-link")
    link["class"] = classes
    return True


def _anchor_raw_heading(soup: BeautifulSoup, heading: Tag) -> bool:
    classes = list(heading.get("class") or [])
    if "markdown-heading" in classes:
        return False
    classes.extend(["markdown-heading", f"markdown-{heading.name}"])
    heading["class"] = classes
    anchor_id = slugify(heading.get_text().strip())
    if anchor_id:
        heading["id"] = anchor_id
        link = soup.new_tag(
            "a",
            attrs={
                "href": f"#{anchor_id}",
                "class": HEADER_ANCHOR_CLASS,
                "aria-hidden": "true",
            },
        )
        link.string = "#"
        heading.insert(0, link)
    return True


class ContentEnhancementExtension(Extension):
    """Register the :class:`ContentEnhancer` tree pass and raw HTML pass."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Run the enhancer after inline processing, then again on raw HTML."""
        md.treeprocessors.register(ContentEnhancer(md), "folio_enhancer", 5)
        md.postprocessors.register(RawHtmlEnhancer(md), "folio_raw_html", 5)


__all__ = [
    "EXTERNAL_HREF_PATTERN",
    "TOC_MARKER_PATTERN",
    "ContentEnhancementExtension",
    "ContentEnhancer",
    "RawHtmlEnhancer",
]
