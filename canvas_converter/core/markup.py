"""Markdown rendering for text nodes.

WHY: Text cards hold raw Markdown; blocks carry ready-to-embed HTML.
The resolver treats rendering as an injected collaborator so tests can
swap it out, and this module provides the default one.

HOW: Python-Markdown converts the source. Extensions are configured via
CANVAS_MARKDOWN_EXTENSIONS (see config.py).

RULES:
- Empty source → "" without invoking the renderer
- Renderer errors propagate to the caller; nothing is retried or caught
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import markdown

from canvas_converter.config import MARKDOWN_EXTENSIONS

MarkdownRenderer = Callable[[str], str]


def render_markdown(source: str, extensions: Optional[Sequence[str]] = None) -> str:
    """Render Markdown source to an HTML fragment."""
    if extensions is None:
        extensions = MARKDOWN_EXTENSIONS
    return markdown.markdown(source, extensions=list(extensions))


def render_text(source: str, renderer: MarkdownRenderer) -> str:
    """Render a text node's source, mapping empty source to ""."""
    if not source:
        return ""
    return renderer(source)
