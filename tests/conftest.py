"""Shared test fixtures for the canvas_converter test suite.

WHY: Several test modules need the same small canvases — a file/text
pair, a directed chain, a cycle — and a renderer whose calls can be
inspected. Centralizing them here keeps the scenarios identical across
the resolver, loader, formatter, CLI, and HTTP tests.

HOW: Plain dict canvases mirror the on-disk JSON format. Typed node and
edge builders live in helpers.py for resolver-level tests.

RULES:
- Canvas dicts use the camelCase keys of the file format
- RecordingRenderer wraps text in <p> so output is predictable without
  depending on Markdown library details
"""

from __future__ import annotations

import json
from typing import Any, Dict

import pytest

from helpers import RecordingRenderer


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def paired_canvas() -> Dict[str, Any]:
    """A captioned image followed by a standalone paragraph."""
    return {
        "nodes": [
            {"id": "F1", "type": "file", "file": "img/cat.png", "x": 0, "y": 0},
            {"id": "T1", "type": "text", "text": "# Hi", "x": 400, "y": 0},
            {"id": "T2", "type": "text", "text": "Goodbye", "x": 0, "y": 400},
        ],
        "edges": [
            {"id": "e1", "fromNode": "F1", "toNode": "T1", "fromEnd": "none", "toEnd": "none"},
            {"id": "e2", "fromNode": "F1", "toNode": "T2"},
        ],
    }


@pytest.fixture
def cyclic_canvas() -> Dict[str, Any]:
    return {
        "nodes": [
            {"id": "A", "type": "text", "text": "a"},
            {"id": "B", "type": "text", "text": "b"},
            {"id": "C", "type": "text", "text": "c"},
        ],
        "edges": [
            {"id": "ab", "fromNode": "A", "toNode": "B", "toEnd": "arrow"},
            {"id": "bc", "fromNode": "B", "toNode": "C", "toEnd": "arrow"},
            {"id": "ca", "fromNode": "C", "toNode": "A", "toEnd": "arrow"},
        ],
    }


@pytest.fixture
def canvas_file(tmp_path, paired_canvas):
    path = tmp_path / "portfolio.canvas"
    path.write_text(json.dumps(paired_canvas), encoding="utf-8")
    return path
