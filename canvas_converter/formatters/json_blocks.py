"""Block sequence formatter producing schema-validated JSON.

WHY: Front-end templates and static-site builds want the resolved blocks
as data, not as finished HTML, so they can apply their own layout. The
diagnostics travel along so a build can fail on a broken canvas.

HOW: Each Block becomes a dict with optional "media" and "text" keys plus
the contributing "nodeIds". The document is validated against
schemas/blocks.schema.json before being serialised.

RULES:
- Keys are camelCase to match the canvas input format
- "media" / "text" keys are omitted when the block has none
- Schema validation is mandatory — raises on invalid output
- Output suffix is "-blocks.json"
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from canvas_converter.core.ir import Block, CanvasResolution, Diagnostic
from canvas_converter.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "blocks.schema.json"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def block_to_dict(block: Block) -> Dict[str, Any]:
    """Serialise one block, omitting absent halves."""
    out = {}  # type: Dict[str, Any]
    if block.media is not None:
        out["media"] = {
            "type": block.media.type,
            "src": block.media.src,
            "alt": block.media.alt,
        }
    if block.text:
        out["text"] = block.text
    out["nodeIds"] = list(block.node_ids)
    return out


def diagnostic_to_dict(diagnostic: Diagnostic) -> Dict[str, Any]:
    return {
        "level": diagnostic.level,
        "code": diagnostic.code,
        "message": diagnostic.message,
        "nodeId": diagnostic.node_id,
        "edgeId": diagnostic.edge_id,
    }


class JsonBlocksFormatter(BaseFormatter):
    """Formatter that dumps the block sequence and diagnostics as JSON."""

    suffix = "-blocks.json"

    @property
    def name(self) -> str:
        return "JSON Blocks"

    def format(self, resolution: CanvasResolution) -> List[FormatterOutput]:
        """Serialise the resolution to JSON.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to the blocks schema.
        """
        output = {
            "source": resolution.source_filename,
            "blocks": [block_to_dict(b) for b in resolution.blocks],
            "diagnostics": [diagnostic_to_dict(d) for d in resolution.diagnostics],
        }

        jsonschema.validate(instance=output, schema=_get_schema())

        return [
            FormatterOutput(
                suffix=self.suffix,
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
