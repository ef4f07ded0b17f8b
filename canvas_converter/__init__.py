"""Canvas Converter — turns a canvas graph into an ordered page of blocks.

WHY: A canvas document is a free-form graph of media files and text cards.
Arrows between cards say "this comes before that", plain lines say "these
two belong together". A web page needs a single linear sequence of
content blocks, each pairing at most one media item with one text item.

HOW: Three-stage pipeline — load (parse and validate the canvas JSON),
resolve (order the graph and merge paired nodes into blocks), format
(pluggable formatters render the block sequence). Each stage is
independently testable.

RULES:
- All formatters consume the same CanvasResolution IR
- Resolution is a pure, synchronous function of the in-memory graph
- Problems are reported as structured diagnostics, not printed
"""

__version__ = "0.1.0"
