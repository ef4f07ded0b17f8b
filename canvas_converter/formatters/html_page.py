"""Standalone HTML page formatter with alternating block layout.

WHY: The usual destination of a canvas is a single scrolling web page
where media and prose alternate sides, so a reader's eye zig-zags down
the page instead of running along one column.

HOW: Blocks are rendered in order as <section> elements. Even-indexed
blocks put the media first, odd-indexed blocks put the text first. A
block that carries both halves gets the paired (two-column) layout; a
block with one half gets the single (full-width) layout. Narrow screens
collapse everything to one column via a media query.

RULES:
- Block index 0, 2, 4, … → media first; 1, 3, 5, … → text first
- "block--paired" when media and text are both present, else "block--single"
- Images use <img loading="lazy">, videos use <video controls>
- Block text is embedded as-is (it is already HTML from the renderer)
- Media attributes are HTML-escaped
- Output suffix: "-page.html"
- Media type: "text/html"
"""

from __future__ import annotations

import html
from pathlib import PurePosixPath
from typing import List

from canvas_converter.core.ir import Block, CanvasResolution, Media
from canvas_converter.formatters.base import BaseFormatter, FormatterOutput

_STYLE = """\
body { margin: 0; font-family: system-ui, sans-serif; line-height: 1.5; }
.canvas-page { max-width: 72rem; margin: 0 auto; padding: 2rem 1rem; }
.block { display: grid; gap: 2rem; align-items: center; margin: 0 0 4rem; }
.block--paired { grid-template-columns: 1fr 1fr; }
.block--single { grid-template-columns: 1fr; }
.block__media { margin: 0; }
.block__media img, .block__media video { width: 100%; height: auto; display: block; }
@media (max-width: 700px) {
  .block--paired { grid-template-columns: 1fr; }
  .block--text-first .block__media { order: 2; }
}
"""


def _render_media(media: Media) -> str:
    src = html.escape(media.src, quote=True)
    alt = html.escape(media.alt, quote=True)
    if media.type == "video":
        inner = '<video src="{}" title="{}" controls playsinline></video>'.format(src, alt)
    else:
        inner = '<img src="{}" alt="{}" loading="lazy">'.format(src, alt)
    return '<figure class="block__media">{}</figure>'.format(inner)


def _render_block(block: Block, index: int) -> str:
    """Render one block as a <section>, alternating sides by index."""
    media_first = index % 2 == 0
    layout = "block--paired" if block.is_paired else "block--single"
    order = "block--media-first" if media_first else "block--text-first"

    parts = []  # type: List[str]
    if block.media is not None:
        parts.append(_render_media(block.media))
    if block.text:
        text = '<div class="block__text">\n{}\n</div>'.format(block.text)
        if media_first:
            parts.append(text)
        else:
            parts.insert(0, text)

    return '<section class="block {} {}">\n{}\n</section>'.format(
        layout, order, "\n".join(parts),
    )


class HtmlPageFormatter(BaseFormatter):
    """Formatter that renders blocks into a complete HTML document."""

    suffix = "-page.html"

    @property
    def name(self) -> str:
        return "HTML Page"

    def format(self, resolution: CanvasResolution) -> List[FormatterOutput]:
        title = PurePosixPath(resolution.source_filename).stem or "Canvas"
        sections = [_render_block(block, i) for i, block in enumerate(resolution.blocks)]

        content = "\n".join([
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="utf-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1">',
            "<title>{}</title>".format(html.escape(title)),
            "<style>\n{}</style>".format(_STYLE),
            "</head>",
            "<body>",
            '<main class="canvas-page">',
            "\n".join(sections),
            "</main>",
            "</body>",
            "</html>",
            "",
        ])

        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="text/html",
            )
        ]
