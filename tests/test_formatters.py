"""Unit tests for all formatter modules.

WHY: Formatters are what users actually open. The HTML page must
alternate sides and pick the right layout per block; the JSON output
must match its published schema.

HOW: Tests build CanvasResolution objects directly so each layout rule
can be checked in isolation, then validate JSON output with jsonschema.
"""

import json
from pathlib import Path

import jsonschema
import pytest

from canvas_converter.core.ir import Block, CanvasResolution, Diagnostic, Media
from canvas_converter.formatters import FORMATTERS
from canvas_converter.formatters.base import BaseFormatter
from canvas_converter.formatters.html_page import HtmlPageFormatter
from canvas_converter.formatters.json_blocks import JsonBlocksFormatter

SCHEMA_PATH = (
    Path(__file__).resolve().parent.parent
    / "canvas_converter" / "schemas" / "blocks.schema.json"
)

CAT = Media(type="image", src="media/cat.png", alt="Cat")
CLIP = Media(type="video", src="media/clip.mp4", alt="Clip")


def _resolution(*blocks, **kwargs):
    return CanvasResolution(blocks=list(blocks), **kwargs)


def _sections(content):
    return [part for part in content.split("<section")[1:]]


class TestRegistry:

    def test_all_registered_formatters_are_formatters(self):
        for key, cls in FORMATTERS.items():
            formatter = cls()
            assert isinstance(formatter, BaseFormatter)
            assert formatter.name
            assert formatter.suffix.startswith("-")

    def test_keys(self):
        assert set(FORMATTERS) == {"html_page", "json_blocks"}


class TestHtmlPage:

    def test_single_output(self):
        outputs = HtmlPageFormatter().format(_resolution(source_filename="trip.canvas"))
        assert len(outputs) == 1
        assert outputs[0].suffix == "-page.html"
        assert outputs[0].media_type == "text/html"
        assert "<title>trip</title>" in outputs[0].content

    def test_untitled_page(self):
        content = HtmlPageFormatter().format(_resolution())[0].content
        assert "<title>Canvas</title>" in content

    def test_alternates_media_and_text_sides(self):
        blocks = [
            Block(media=CAT, text="<p>one</p>", node_ids=("F1", "T1")),
            Block(media=CLIP, text="<p>two</p>", node_ids=("F2", "T2")),
            Block(media=CAT, text="<p>three</p>", node_ids=("F3", "T3")),
        ]
        content = HtmlPageFormatter().format(_resolution(*blocks))[0].content
        sections = _sections(content)

        assert len(sections) == 3
        assert "block--media-first" in sections[0]
        assert sections[0].index("block__media") < sections[0].index("block__text")
        assert "block--text-first" in sections[1]
        assert sections[1].index("block__text") < sections[1].index("block__media")
        assert "block--media-first" in sections[2]

    def test_paired_and_single_layouts(self):
        blocks = [
            Block(media=CAT, text="<p>both</p>", node_ids=("F", "T")),
            Block(text="<p>only text</p>", node_ids=("A",)),
            Block(media=CLIP, node_ids=("V",)),
        ]
        sections = _sections(HtmlPageFormatter().format(_resolution(*blocks))[0].content)
        assert "block--paired" in sections[0]
        assert "block--single" in sections[1]
        assert "block__media" not in sections[1]
        assert "block--single" in sections[2]
        assert "block__text" not in sections[2]

    def test_image_and_video_elements(self):
        blocks = [Block(media=CAT, node_ids=("F",)), Block(media=CLIP, node_ids=("V",))]
        content = HtmlPageFormatter().format(_resolution(*blocks))[0].content
        assert '<img src="media/cat.png" alt="Cat" loading="lazy">' in content
        assert '<video src="media/clip.mp4" title="Clip" controls playsinline></video>' in content

    def test_media_attributes_are_escaped(self):
        media = Media(type="image", src='media/a"b.png', alt="<Tom & Jerry>")
        content = HtmlPageFormatter().format(_resolution(Block(media=media, node_ids=("F",))))[0].content
        assert 'src="media/a&quot;b.png"' in content
        assert 'alt="&lt;Tom &amp; Jerry&gt;"' in content

    def test_text_is_embedded_verbatim(self):
        block = Block(text="<h1>Hi</h1>", node_ids=("T",))
        content = HtmlPageFormatter().format(_resolution(block))[0].content
        assert "<h1>Hi</h1>" in content


class TestJsonBlocks:

    def _load(self, resolution):
        outputs = JsonBlocksFormatter().format(resolution)
        assert len(outputs) == 1
        assert outputs[0].suffix == "-blocks.json"
        assert outputs[0].media_type == "application/json"
        return json.loads(outputs[0].content)

    def test_serialises_blocks(self):
        data = self._load(_resolution(
            Block(media=CAT, text="<h1>Hi</h1>", node_ids=("F1", "T1")),
            Block(text="<p>bye</p>", node_ids=("T2",)),
            source_filename="page.canvas",
        ))
        assert data["source"] == "page.canvas"
        assert data["blocks"] == [
            {"media": {"type": "image", "src": "media/cat.png", "alt": "Cat"},
             "text": "<h1>Hi</h1>", "nodeIds": ["F1", "T1"]},
            {"text": "<p>bye</p>", "nodeIds": ["T2"]},
        ]

    def test_empty_text_is_omitted(self):
        data = self._load(_resolution(Block(media=CAT, text="", node_ids=("F", "T"))))
        assert "text" not in data["blocks"][0]

    def test_diagnostics_included(self):
        data = self._load(_resolution(diagnostics=[
            Diagnostic(level="error", code="cycle", message="Cycle detected"),
        ]))
        assert data["blocks"] == []
        assert data["diagnostics"] == [{
            "level": "error", "code": "cycle", "message": "Cycle detected",
            "nodeId": None, "edgeId": None,
        }]

    def test_output_matches_schema(self):
        with open(SCHEMA_PATH, encoding="utf-8") as f:
            schema = json.load(f)
        data = self._load(_resolution(Block(media=CLIP, node_ids=("V",))))
        jsonschema.validate(instance=data, schema=schema)

    def test_invalid_block_fails_validation(self):
        with pytest.raises(jsonschema.ValidationError):
            JsonBlocksFormatter().format(_resolution(Block(node_ids=("X",))))
