"""Canvas document loading, validation, and end-to-end conversion.

WHY: Canvas files are JSON written by an editor, not by us. Before the
resolver can reason about them, the raw document must be checked for the
expected shape and turned into typed nodes and edges.

HOW: The document is validated against the bundled JSON schema
(schemas/canvas.schema.json) with jsonschema. Each node is then mapped to
a FileNode or TextNode; cards of other types (groups, links) are dropped
with a diagnostic, and so are file/text cards missing their payload.
Edges keep their document order and default to a directed "arrow" end.

RULES:
- Schema violations raise CanvasFormatError (the document is unusable)
- Absent or null "nodes"/"edges" are passed through as None so the
  resolver can report the missing input
- Unsupported node types → "unsupported-node" warning, node skipped
- File card without "file" / text card without "text" → "invalid-node"
- Edge without "id" gets a positional id ("edge-0", "edge-1", ...)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import jsonschema

from canvas_converter.core.ir import (
    CanvasDocument,
    CanvasResolution,
    Diagnostic,
    Edge,
    FileNode,
    Node,
    TextNode,
)
from canvas_converter.core.markup import MarkdownRenderer
from canvas_converter.core.resolver import ResolveOptions, resolve_blocks

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "canvas.schema.json"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


class CanvasFormatError(ValueError):
    """The canvas document is not valid JSON or does not match the schema."""


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _warn(diagnostics: List[Diagnostic], code: str, message: str, node_id: Optional[str] = None) -> None:
    diagnostics.append(Diagnostic(level="warning", code=code, message=message, node_id=node_id))
    logger.warning(message)


def _parse_node(raw: Dict[str, Any], diagnostics: List[Diagnostic]) -> Optional[Node]:
    node_id = raw["id"]
    node_type = raw["type"]

    if node_type == "file":
        if "file" not in raw:
            _warn(diagnostics, "invalid-node",
                  "File node {} has no file path. Skipping.".format(node_id), node_id)
            return None
        return FileNode(id=node_id, file=raw["file"])

    if node_type == "text":
        if "text" not in raw:
            _warn(diagnostics, "invalid-node",
                  "Text node {} has no text. Skipping.".format(node_id), node_id)
            return None
        return TextNode(id=node_id, text=raw["text"])

    _warn(diagnostics, "unsupported-node",
          "Node {} has unsupported type {!r}. Skipping.".format(node_id, node_type), node_id)
    return None


def parse_canvas(data: Dict[str, Any], source_filename: str = "") -> CanvasDocument:
    """Validate a decoded canvas document and build typed nodes and edges.

    Args:
        data: The decoded canvas JSON object.
        source_filename: Original file name, carried through for output naming.

    Returns:
        CanvasDocument with nodes/edges in document order and any load
        diagnostics. nodes or edges is None when the document omits them.

    Raises:
        CanvasFormatError: If the document does not match the canvas schema.
    """
    try:
        jsonschema.validate(instance=data, schema=_get_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise CanvasFormatError(
            "Invalid canvas document at {}: {}".format(location, exc.message)
        ) from exc

    diagnostics = []  # type: List[Diagnostic]

    nodes = None  # type: Optional[List[Node]]
    raw_nodes = data.get("nodes")
    if raw_nodes is not None:
        nodes = []
        for raw in raw_nodes:
            node = _parse_node(raw, diagnostics)
            if node is not None:
                nodes.append(node)

    edges = None  # type: Optional[List[Edge]]
    raw_edges = data.get("edges")
    if raw_edges is not None:
        edges = [
            Edge(
                id=raw.get("id") or "edge-{}".format(position),
                from_node=raw["fromNode"],
                to_node=raw["toNode"],
                to_end=raw.get("toEnd", "arrow"),
            )
            for position, raw in enumerate(raw_edges)
        ]

    return CanvasDocument(
        nodes=nodes,
        edges=edges,
        diagnostics=diagnostics,
        source_filename=source_filename,
    )


def load_canvas_file(path: Union[str, Path]) -> CanvasDocument:
    """Read and parse a .canvas (JSON) file.

    Raises:
        CanvasFormatError: If the file is not UTF-8, not valid JSON, or fails
            validation.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise CanvasFormatError("{} is not UTF-8 text: {}".format(path.name, exc)) from exc
    except json.JSONDecodeError as exc:
        raise CanvasFormatError("{} is not valid JSON: {}".format(path.name, exc)) from exc
    return parse_canvas(data, source_filename=path.name)


def resolve_document(
    document: CanvasDocument,
    renderer: Optional[MarkdownRenderer] = None,
    options: Optional[ResolveOptions] = None,
) -> CanvasResolution:
    """Resolve a loaded document, keeping its load diagnostics in front."""
    resolution = resolve_blocks(
        document.nodes,
        document.edges,
        renderer=renderer,
        options=options,
        source_filename=document.source_filename,
    )
    resolution.diagnostics[:0] = document.diagnostics
    return resolution


def convert_canvas(
    data: Dict[str, Any],
    renderer: Optional[MarkdownRenderer] = None,
    options: Optional[ResolveOptions] = None,
    source_filename: str = "",
) -> CanvasResolution:
    """Parse a decoded canvas document and resolve it into blocks.

    Raises:
        CanvasFormatError: If the document does not match the canvas schema.
    """
    document = parse_canvas(data, source_filename=source_filename)
    return resolve_document(document, renderer=renderer, options=options)
