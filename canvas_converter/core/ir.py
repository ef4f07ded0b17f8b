"""Intermediate representation dataclasses for canvas graphs and blocks.

WHY: A canvas document is loosely typed JSON. The resolver needs typed
nodes and edges to reason about, and formatters (HTML page, JSON dump)
need a single, well-typed output form. The IR decouples loading from
resolution and resolution from formatting.

HOW: Dataclasses form two groups:
  Input side  — FileNode, TextNode (the closed Node union), Edge,
                CanvasDocument (nodes + edges + load diagnostics)
  Output side — Media, Block, Diagnostic, CanvasResolution

RULES:
- Input dataclasses are frozen — the resolver never mutates them
- Node is a closed union: every node is a FileNode or a TextNode
- Edge.to_end == "none" marks an undirected pairing edge
- A Block always carries media, text, or both
- Diagnostics are advisory; only "error" level ones mean the result is empty
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

UNDIRECTED_END = "none"
"""Edge end marker that turns an edge into a pairing edge."""


# ---------------------------------------------------------------------------
# Input side
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileNode:
    """A canvas card that points at a media file.

    RULES:
    - id: unique within the canvas
    - file: path as written in the canvas (e.g. "assets/cat.png")
    """

    id: str
    file: str

    @property
    def kind(self) -> str:
        return "file"


@dataclass(frozen=True)
class TextNode:
    """A canvas card holding raw Markdown text."""

    id: str
    text: str

    @property
    def kind(self) -> str:
        return "text"


Node = Union[FileNode, TextNode]


@dataclass(frozen=True)
class Edge:
    """A connection between two canvas cards.

    WHY: Canvas edges carry two meanings. An arrow orders content, a plain
    line pairs a media card with a text card into one block.

    RULES:
    - from_node must be ordered before to_node when the edge is directed
    - to_end == "none" → undirected pairing edge, no ordering constraint
    - any other to_end (including the canvas default "arrow") → directed
    """

    id: str
    from_node: str
    to_node: str
    to_end: str = "arrow"

    @property
    def is_pairing(self) -> bool:
        return self.to_end == UNDIRECTED_END


@dataclass
class Diagnostic:
    """One advisory message produced while loading or resolving a canvas.

    RULES:
    - level: "warning" (recoverable, processing continued) or "error"
      (the whole resolution was abandoned)
    - code: short machine-readable key, e.g. "cycle", "unknown-media"
    - node_id / edge_id: the offending element, when there is one
    """

    level: str
    code: str
    message: str
    node_id: Optional[str] = None
    edge_id: Optional[str] = None


@dataclass
class CanvasDocument:
    """A loaded canvas: typed nodes and edges in document order.

    RULES:
    - nodes / edges are None when the document omits them
    """

    nodes: Optional[List[Node]]
    edges: Optional[List[Edge]]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    source_filename: str = ""


# ---------------------------------------------------------------------------
# Output side
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Media:
    """Media half of a block.

    RULES:
    - type: "image" or "video" (unknown media is never represented)
    - src: path rewritten under the media root, e.g. "media/sub/pic.png"
    - alt: human-readable label derived from the filename stem
    """

    type: str
    src: str
    alt: str


@dataclass(frozen=True)
class Block:
    """One renderable unit of the output page.

    WHY: The page layout alternates media and text side by side. A block
    is the unit of that alternation — a media item, a text item, or both.

    RULES:
    - At least one of media / text is present (empty blocks are dropped)
    - text is ready-to-embed HTML produced by the Markdown renderer
    - node_ids lists the canvas ids folded into this block, in walk order
    """

    media: Optional[Media] = None
    text: Optional[str] = None
    node_ids: Tuple[str, ...] = ()

    @property
    def has_content(self) -> bool:
        return self.media is not None or bool(self.text)

    @property
    def is_paired(self) -> bool:
        return self.media is not None and bool(self.text)


@dataclass
class CanvasResolution:
    """The complete result of resolving a canvas into blocks.

    WHY: This is the top-level container that formatters receive. It holds
    the ordered blocks plus every diagnostic raised on the way, so callers
    can inspect problems instead of scraping log output.

    RULES:
    - blocks: topological order of each block's first-encountered node
    - diagnostics: loader diagnostics first, then resolver diagnostics
    - an "error" diagnostic implies blocks == []
    """

    blocks: List[Block] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    source_filename: str = ""

    @property
    def ok(self) -> bool:
        return not any(d.level == "error" for d in self.diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == "warning"]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == "error"]
