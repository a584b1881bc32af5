"""Common literal values used across folio_pages.

These constants keep filenames, markers, and CSS class names centralized so
the renderer, the search indexer, templates, and tests can import the same
values without drifting. Intended for internal use within the folio_pages
package.

Examples
--------
>>> from folio_pages import _constants
>>> _constants.SEARCH_INDEX_FILENAME
'search-index.json'
>>> _constants.PAGE_FILENAME_TEMPLATE.format(slug="plonk")
'plonk.html'
"""

MARKDOWN_SUFFIX = ".md"
PAGE_SUFFIX = ".html"
PAGE_FILENAME_TEMPLATE = "{slug}" + PAGE_SUFFIX
SEARCH_INDEX_FILENAME = "search-index.json"
PYGMENTS_STYLESHEET_FILENAME = "pygments.css"

HEADER_ANCHOR_CLASS = "header-anchor"
SEARCH_HIGHLIGHT_CLASS = "search-highlight"

DEFAULT_ASSETS_DIR = "assets"
DEFAULT_DIAGRAM_LANGUAGES: tuple[str, ...] = ("mermaid",)
DEFAULT_RESULT_LIMIT = 10
DEFAULT_CONTEXT_CHARS = 150
