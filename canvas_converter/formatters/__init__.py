"""Registry of page renderers keyed by the name used on the CLI and in URLs.

``--formats html_page`` and ``POST /render/html_page`` both resolve through
FORMATTERS. Entries are classes; each request builds a fresh instance, so
renderers never share state between canvases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

from canvas_converter.formatters.html_page import HtmlPageFormatter
from canvas_converter.formatters.json_blocks import JsonBlocksFormatter

if TYPE_CHECKING:
    from canvas_converter.formatters.base import BaseFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "html_page": HtmlPageFormatter,
    "json_blocks": JsonBlocksFormatter,
}
