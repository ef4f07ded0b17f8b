"""Unit tests for canvas document loading and end-to-end conversion.

WHY: Canvas files come from an external editor. The loader must reject
documents it cannot understand, and quietly step around cards it does
not support, without ever letting malformed input reach the resolver.

HOW: Tests cover schema validation, node/edge mapping to the IR, load
diagnostics, file reading, and convert_canvas() on the shared fixtures.

RULES:
- All file I/O tests use tmp_path fixtures for isolation.
"""

import json

import pytest

from canvas_converter.core.ir import Edge, FileNode, TextNode
from canvas_converter.core.loader import (
    CanvasFormatError,
    convert_canvas,
    load_canvas_file,
    parse_canvas,
)
from canvas_converter.core.resolver import ResolveOptions


class TestParseCanvas:

    def test_maps_nodes_and_edges(self, paired_canvas):
        document = parse_canvas(paired_canvas)
        assert document.nodes == [
            FileNode(id="F1", file="img/cat.png"),
            TextNode(id="T1", text="# Hi"),
            TextNode(id="T2", text="Goodbye"),
        ]
        assert document.edges == [
            Edge(id="e1", from_node="F1", to_node="T1", to_end="none"),
            Edge(id="e2", from_node="F1", to_node="T2", to_end="arrow"),
        ]
        assert document.diagnostics == []

    def test_missing_to_end_is_directed(self):
        document = parse_canvas({
            "nodes": [{"id": "A", "type": "text", "text": "a"}],
            "edges": [{"id": "e", "fromNode": "A", "toNode": "A"}],
        })
        assert not document.edges[0].is_pairing

    def test_edge_without_id_gets_positional_id(self):
        document = parse_canvas({
            "nodes": [],
            "edges": [
                {"fromNode": "A", "toNode": "B"},
                {"fromNode": "B", "toNode": "C"},
            ],
        })
        assert [e.id for e in document.edges] == ["edge-0", "edge-1"]

    def test_unsupported_node_type_is_skipped(self):
        document = parse_canvas({
            "nodes": [
                {"id": "G", "type": "group", "label": "Section"},
                {"id": "T", "type": "text", "text": "t"},
            ],
            "edges": [],
        })
        assert [n.id for n in document.nodes] == ["T"]
        assert [d.code for d in document.diagnostics] == ["unsupported-node"]
        assert document.diagnostics[0].node_id == "G"

    @pytest.mark.parametrize("raw", [
        {"id": "F", "type": "file"},
        {"id": "T", "type": "text"},
    ])
    def test_node_without_payload_is_skipped(self, raw):
        document = parse_canvas({"nodes": [raw], "edges": []})
        assert document.nodes == []
        assert [d.code for d in document.diagnostics] == ["invalid-node"]

    def test_absent_lists_become_none(self):
        document = parse_canvas({"nodes": []})
        assert document.nodes == []
        assert document.edges is None

    @pytest.mark.parametrize("data", [
        [],
        {"nodes": "not a list", "edges": []},
        {"nodes": [{"type": "text", "text": "no id"}], "edges": []},
        {"nodes": [{"id": "A", "type": "text", "text": 5}], "edges": []},
        {"nodes": [], "edges": [{"id": "e", "toNode": "A"}]},
    ])
    def test_schema_violations_raise(self, data):
        with pytest.raises(CanvasFormatError):
            parse_canvas(data)


class TestLoadCanvasFile:

    def test_reads_file_and_records_name(self, canvas_file):
        document = load_canvas_file(canvas_file)
        assert document.source_filename == "portfolio.canvas"
        assert len(document.nodes) == 3

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.canvas"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CanvasFormatError, match="not valid JSON"):
            load_canvas_file(path)

    def test_non_utf8_bytes_raise_format_error(self, tmp_path):
        path = tmp_path / "latin.canvas"
        path.write_bytes(b'{"nodes": [{"id": "T", "type": "text", "text": "caf\xff\xfe"}], "edges": []}')
        with pytest.raises(CanvasFormatError, match="not UTF-8"):
            load_canvas_file(path)

    def test_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            load_canvas_file(tmp_path / "missing.canvas")


class TestConvertCanvas:

    def test_paired_canvas(self, paired_canvas):
        result = convert_canvas(paired_canvas, source_filename="portfolio.canvas")

        assert result.ok
        assert result.source_filename == "portfolio.canvas"
        assert [b.node_ids for b in result.blocks] == [("F1", "T1"), ("T2",)]
        assert result.blocks[0].text == "<h1>Hi</h1>"
        assert result.blocks[1].text == "<p>Goodbye</p>"

    def test_cycle(self, cyclic_canvas, renderer):
        result = convert_canvas(cyclic_canvas, renderer=renderer)
        assert result.blocks == []
        assert [d.code for d in result.errors] == ["cycle"]

    def test_missing_edges_is_soft_failure(self):
        result = convert_canvas({"nodes": [{"id": "A", "type": "text", "text": "a"}]})
        assert result.blocks == []
        assert [d.code for d in result.errors] == ["missing-input"]

    def test_load_diagnostics_come_first(self, renderer):
        data = {
            "nodes": [
                {"id": "G", "type": "group"},
                {"id": "A", "type": "text", "text": "a"},
            ],
            "edges": [{"id": "e", "fromNode": "G", "toNode": "A"}],
        }
        result = convert_canvas(data, renderer=renderer)
        assert [d.code for d in result.diagnostics] == ["unsupported-node", "unknown-node"]
        assert [b.node_ids for b in result.blocks] == [("A",)]

    def test_options_are_passed_through(self, paired_canvas, renderer):
        result = convert_canvas(paired_canvas, renderer=renderer,
                                options=ResolveOptions(media_root="static"))
        assert result.blocks[0].media.src == "static/cat.png"

    def test_round_trip_through_file(self, tmp_path, paired_canvas):
        path = tmp_path / "page.canvas"
        path.write_text(json.dumps(paired_canvas), encoding="utf-8")
        document = load_canvas_file(path)
        assert parse_canvas(paired_canvas).nodes == document.nodes
