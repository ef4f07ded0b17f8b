"""Canvas graph resolution: ordering, pairing, and block emission.

WHY: A canvas mixes two kinds of edges. Arrows order content; plain lines
pair a media card with a text card. The page needs one linear sequence
of blocks that honours every arrow and folds every pair into a single
block, without emitting any card twice.

HOW: Three steps, each a public function so it can be tested alone:
  build_graph_index() — one pass over the edges: skip edges with unknown
                        endpoints, record file/text pairings, and build the
                        directed adjacency / in-degree maps
  topological_sort()  — order the directed participants (toposort.py)
  merge_blocks()      — walk the order, merge each node with its unconsumed
                        partner, emit standalone blocks otherwise
resolve_blocks() chains the three and wraps everything in a
CanvasResolution with the collected diagnostics.

RULES:
- Pairing edges only link one FileNode with one TextNode; other type
  combinations are ignored
- pairs[a] == b  ⇔  pairs[b] == a, always (superseded pairs are unlinked)
- Only endpoints of directed edges are passed to the sorter
- A cycle abandons the whole resolution: no blocks, one "error" diagnostic
- Missing nodes/edges input: no blocks, one "error" diagnostic
- Every node id lands in at most one block
- Blocks without media and text are dropped with a warning
- Each call owns all of its maps; nothing is shared between calls
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from canvas_converter.config import INCLUDE_UNORDERED, MEDIA_ROOT, PAIRING_POLICY
from canvas_converter.core.ir import (
    Block,
    CanvasResolution,
    Diagnostic,
    Edge,
    FileNode,
    Media,
    Node,
    TextNode,
)
from canvas_converter.core.markup import MarkdownRenderer, render_markdown, render_text
from canvas_converter.core.media import derive_media
from canvas_converter.core.toposort import CycleDetectedError, topological_sort

logger = logging.getLogger(__name__)


class PairingPolicy(str, Enum):
    """Which pairing edge wins when a node is paired more than once."""

    LAST = "last"
    FIRST = "first"


def _default_pairing_policy() -> PairingPolicy:
    try:
        return PairingPolicy(PAIRING_POLICY)
    except ValueError:
        logger.warning(
            "Unknown CANVAS_PAIRING_POLICY %r, falling back to 'last'", PAIRING_POLICY
        )
        return PairingPolicy.LAST


@dataclass
class ResolveOptions:
    """Per-call resolution settings.

    RULES:
    - media_root: first path segment of every media src
    - pairing_policy: LAST (later edge replaces earlier) or FIRST
      (later conflicting edge is rejected)
    - include_unordered: walk nodes the sorter never saw (no directed
      edges) after the sorted ones, in input order
    """

    media_root: str = MEDIA_ROOT
    pairing_policy: PairingPolicy = field(default_factory=_default_pairing_policy)
    include_unordered: bool = INCLUDE_UNORDERED


@dataclass
class GraphIndex:
    """Lookup maps built from the raw node and edge lists.

    RULES:
    - nodes_by_id: every input node by id
    - pairs: symmetric file/text pairing map
    - directed_ids: endpoints of directed edges, in input node order
    - adjacency / in_degree: built from directed edges only
    """

    nodes_by_id: Dict[str, Node]
    pairs: Dict[str, str]
    directed_ids: List[str]
    adjacency: Dict[str, List[str]]
    in_degree: Dict[str, int]


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def _report(
    diagnostics: List[Diagnostic],
    level: str,
    code: str,
    message: str,
    node_id: Optional[str] = None,
    edge_id: Optional[str] = None,
) -> None:
    """Record a diagnostic and mirror it to the module logger."""
    diagnostics.append(Diagnostic(
        level=level,
        code=code,
        message=message,
        node_id=node_id,
        edge_id=edge_id,
    ))
    if level == "error":
        logger.error(message)
    else:
        logger.warning(message)


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------


def _split_pair(first: Node, second: Node) -> Tuple[Optional[FileNode], Optional[TextNode]]:
    """Return (file, text) if the two nodes form a file+text pair, else (None, None)."""
    if isinstance(first, FileNode) and isinstance(second, TextNode):
        return first, second
    if isinstance(first, TextNode) and isinstance(second, FileNode):
        return second, first
    return None, None


def _link_pair(
    pairs: Dict[str, str],
    edge: Edge,
    policy: PairingPolicy,
    diagnostics: List[Diagnostic],
) -> None:
    a, b = edge.from_node, edge.to_node
    if pairs.get(a) == b:
        return

    taken = [node_id for node_id in (a, b) if node_id in pairs]
    if taken:
        if policy is PairingPolicy.FIRST:
            _report(
                diagnostics, "warning", "pairing-conflict",
                "Edge {} would re-pair {}; keeping the earlier pairing.".format(
                    edge.id, " and ".join(taken)),
                edge_id=edge.id,
            )
            return
        for node_id in taken:
            stale = pairs.pop(node_id, None)
            if stale is None:
                continue
            pairs.pop(stale, None)
            _report(
                diagnostics, "warning", "pairing-conflict",
                "Edge {} replaces pairing {} <-> {}.".format(edge.id, node_id, stale),
                node_id=node_id,
                edge_id=edge.id,
            )

    pairs[a] = b
    pairs[b] = a


def build_graph_index(
    nodes: Sequence[Node],
    edges: Iterable[Edge],
    pairing_policy: PairingPolicy = PairingPolicy.LAST,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> GraphIndex:
    """Build the pairing map and the directed graph from raw nodes and edges.

    Args:
        nodes: Canvas nodes in document order.
        edges: Canvas edges in document order.
        pairing_policy: How to settle a node that appears in several
            pairing edges.
        diagnostics: List that receives warnings (unknown endpoints,
            duplicate ids, pairing conflicts). A fresh list when omitted.

    Returns:
        A GraphIndex owned by the caller.
    """
    if diagnostics is None:
        diagnostics = []

    nodes_by_id = {}  # type: Dict[str, Node]
    for node in nodes:
        if node.id in nodes_by_id:
            _report(
                diagnostics, "warning", "duplicate-node",
                "Node id {} appears more than once; the later node wins.".format(node.id),
                node_id=node.id,
            )
        nodes_by_id[node.id] = node

    pairs = {}  # type: Dict[str, str]
    adjacency = {}  # type: Dict[str, List[str]]
    in_degree = {}  # type: Dict[str, int]
    participants = set()

    for edge in edges:
        if edge.from_node not in nodes_by_id or edge.to_node not in nodes_by_id:
            _report(
                diagnostics, "warning", "unknown-node",
                "Edge {} connects non-existent nodes. Skipping.".format(edge.id),
                edge_id=edge.id,
            )
            continue

        if edge.is_pairing:
            file_node, _ = _split_pair(nodes_by_id[edge.from_node], nodes_by_id[edge.to_node])
            if file_node is None:
                logger.debug("Ignoring pairing edge %s: not a file/text pair", edge.id)
                continue
            _link_pair(pairs, edge, pairing_policy, diagnostics)
        else:
            adjacency.setdefault(edge.from_node, []).append(edge.to_node)
            in_degree[edge.to_node] = in_degree.get(edge.to_node, 0) + 1
            participants.add(edge.from_node)
            participants.add(edge.to_node)

    directed_ids = list(dict.fromkeys(
        node.id for node in nodes if node.id in participants
    ))

    return GraphIndex(
        nodes_by_id=nodes_by_id,
        pairs=pairs,
        directed_ids=directed_ids,
        adjacency=adjacency,
        in_degree=in_degree,
    )


# ---------------------------------------------------------------------------
# Merge walk
# ---------------------------------------------------------------------------


def _media_for(
    node: FileNode,
    media_root: str,
    diagnostics: List[Diagnostic],
) -> Optional[Media]:
    media = derive_media(node.file, media_root)
    if media is None:
        _report(
            diagnostics, "warning", "unknown-media",
            "Node {} has unknown media type for file: {}. Skipping media.".format(
                node.id, node.file),
            node_id=node.id,
        )
    return media


def _standalone_block(
    node: Node,
    renderer: MarkdownRenderer,
    media_root: str,
    diagnostics: List[Diagnostic],
) -> Block:
    if isinstance(node, FileNode):
        return Block(media=_media_for(node, media_root, diagnostics), node_ids=(node.id,))
    return Block(text=render_text(node.text, renderer), node_ids=(node.id,))


def merge_blocks(
    order: Sequence[str],
    nodes_by_id: Mapping[str, Node],
    pairs: Mapping[str, str],
    renderer: MarkdownRenderer = render_markdown,
    media_root: str = MEDIA_ROOT,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> List[Block]:
    """Walk node ids in order and fold each node into exactly one block.

    WHY: A pair must become one block placed where its first member
    appears in the order, and its second member must not show up again
    when the walk reaches it.

    HOW: Keep a consumed set. For each unconsumed id, look up its partner;
    if the partner is unconsumed and the two form a file+text pair, emit
    a combined block and consume both. Otherwise emit a standalone block
    for the current node only.

    RULES:
    - Consumed ids are skipped
    - Ids missing from nodes_by_id → "unknown-node" warning, skipped
    - A partner that is not file+text with the node → "unexpected-pair"
      warning, node goes standalone, partner is visited on its own later
    - Standalone file → media-only block; standalone text → text-only block
    - Blocks with neither media nor text are dropped ("empty-block")

    Args:
        order: Node ids in walk order (normally topological order).
        nodes_by_id: Lookup for every id in order.
        pairs: Pairing map; normally symmetric, but not assumed to be.
        renderer: Markdown → HTML callable for text nodes.
        media_root: First path segment of media src values.
        diagnostics: List that receives warnings. A fresh list when omitted.

    Returns:
        Non-empty blocks in walk order.
    """
    if diagnostics is None:
        diagnostics = []

    consumed = set()
    blocks = []  # type: List[Block]

    for node_id in order:
        if node_id in consumed:
            continue
        node = nodes_by_id.get(node_id)
        if node is None:
            _report(
                diagnostics, "warning", "unknown-node",
                "Node {} is not part of the canvas. Skipping.".format(node_id),
                node_id=node_id,
            )
            continue

        partner = None  # type: Optional[Node]
        partner_id = pairs.get(node_id)
        if partner_id is not None and partner_id not in consumed:
            partner = nodes_by_id.get(partner_id)

        if partner is not None:
            file_node, text_node = _split_pair(node, partner)
            if file_node is not None and text_node is not None:
                block = Block(
                    media=_media_for(file_node, media_root, diagnostics),
                    text=render_text(text_node.text, renderer),
                    node_ids=(node.id, partner.id),
                )
                consumed.add(partner.id)
            else:
                _report(
                    diagnostics, "warning", "unexpected-pair",
                    "Node {} paired with unexpected node type {}. Treating {} as standalone.".format(
                        node_id, partner.kind, node_id),
                    node_id=node_id,
                )
                block = _standalone_block(node, renderer, media_root, diagnostics)
        else:
            block = _standalone_block(node, renderer, media_root, diagnostics)
        consumed.add(node_id)

        if block.has_content:
            blocks.append(block)
        else:
            _report(
                diagnostics, "warning", "empty-block",
                "Node {} resulted in an empty block. Skipping.".format(node_id),
                node_id=node_id,
            )

    return blocks


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def resolve_blocks(
    nodes: Optional[Sequence[Node]],
    edges: Optional[Iterable[Edge]],
    renderer: Optional[MarkdownRenderer] = None,
    options: Optional[ResolveOptions] = None,
    source_filename: str = "",
) -> CanvasResolution:
    """Resolve canvas nodes and edges into an ordered block sequence.

    Args:
        nodes: Canvas nodes in document order. None is a caller error.
        edges: Canvas edges in document order. None is a caller error.
        renderer: Markdown → HTML callable. Defaults to render_markdown.
        options: Resolution settings. Defaults to the configured values.
        source_filename: Carried through to the result for formatters.

    Returns:
        CanvasResolution with blocks and diagnostics. On missing input or a
        cycle the block list is empty and an "error" diagnostic explains why.
    """
    if renderer is None:
        renderer = render_markdown
    if options is None:
        options = ResolveOptions()

    diagnostics = []  # type: List[Diagnostic]
    result = CanvasResolution(diagnostics=diagnostics, source_filename=source_filename)

    if nodes is None or edges is None:
        _report(
            diagnostics, "error", "missing-input",
            "Invalid canvas data: missing nodes or edges.",
        )
        return result

    index = build_graph_index(nodes, edges, options.pairing_policy, diagnostics)

    try:
        order = topological_sort(index.directed_ids, index.adjacency, index.in_degree)
    except CycleDetectedError as exc:
        _report(
            diagnostics, "error", "cycle",
            "Cycle detected in directed graph; cannot generate content blocks. "
            "Nodes potentially in cycle: {}".format(", ".join(exc.remaining)),
        )
        return result

    ordered = set(order)
    if options.include_unordered:
        order = order + [node_id for node_id in index.nodes_by_id if node_id not in ordered]

    result.blocks = merge_blocks(
        order,
        index.nodes_by_id,
        index.pairs,
        renderer=renderer,
        media_root=options.media_root,
        diagnostics=diagnostics,
    )

    if not options.include_unordered:
        placed = ordered.union(node_id for block in result.blocks for node_id in block.node_ids)
        skipped = [node_id for node_id in index.nodes_by_id if node_id not in placed]
        if skipped:
            logger.info("%d node(s) outside the directed graph were not placed", len(skipped))

    return result
