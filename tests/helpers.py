"""Builders for typed canvas nodes and edges used across the tests."""

from __future__ import annotations

from typing import List

from canvas_converter.core.ir import Edge, FileNode, TextNode


class RecordingRenderer:
    """Markdown renderer stand-in that records every source it is given."""

    def __init__(self):
        self.calls = []  # type: List[str]

    def __call__(self, source: str) -> str:
        self.calls.append(source)
        return "<p>{}</p>".format(source)


def file_node(node_id: str, path: str) -> FileNode:
    return FileNode(id=node_id, file=path)


def text_node(node_id: str, text: str) -> TextNode:
    return TextNode(id=node_id, text=text)


def arrow(from_node: str, to_node: str, edge_id: str = "") -> Edge:
    return Edge(id=edge_id or "{}->{}".format(from_node, to_node),
                from_node=from_node, to_node=to_node, to_end="arrow")


def line(from_node: str, to_node: str, edge_id: str = "") -> Edge:
    return Edge(id=edge_id or "{}--{}".format(from_node, to_node),
                from_node=from_node, to_node=to_node, to_end="none")
