"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: The request body mirrors the canvas file format (camelCase field
names via aliases). Responses mirror the JSON Blocks formatter output.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Extra canvas fields (x, y, width, color, …) are accepted and ignored
- nodes / edges may be omitted; the resolver reports the missing input
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from canvas_converter.core.ir import Block, Diagnostic


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CanvasRequest(BaseModel):
    """A canvas document submitted for conversion.

    WHY: Clients post the canvas JSON exactly as the editor saved it.
    Validation of individual nodes/edges is left to the loader, which
    reports problems as diagnostics instead of rejecting the document.
    """

    model_config = ConfigDict(extra="allow")

    nodes: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Canvas cards. Each has 'id', 'type' ('file' or 'text'), and 'file' or 'text'.",
    )
    edges: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Canvas connections with 'fromNode', 'toNode', and optional 'toEnd' "
                    "('none' marks a pairing edge).",
    )
    source_filename: str = Field(
        default="",
        description="Original canvas filename, used for the page title.",
    )

    def to_document(self) -> Dict[str, Any]:
        """Return the canvas as the plain dict the loader expects."""
        return {"nodes": self.nodes, "edges": self.edges}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MediaModel(BaseModel):
    type: str = Field(description="'image' or 'video'.")
    src: str = Field(description="Media path under the media root.")
    alt: str = Field(description="Alt text derived from the filename.")


class BlockModel(BaseModel):
    """One renderable block."""

    media: Optional[MediaModel] = Field(default=None, description="Media half, if any.")
    text: Optional[str] = Field(default=None, description="Rendered HTML text half, if any.")
    node_ids: List[str] = Field(description="Canvas node ids folded into this block.")

    @classmethod
    def from_block(cls, block: Block) -> "BlockModel":
        media = None
        if block.media is not None:
            media = MediaModel(type=block.media.type, src=block.media.src, alt=block.media.alt)
        return cls(media=media, text=block.text or None, node_ids=list(block.node_ids))


class DiagnosticModel(BaseModel):
    level: str = Field(description="'warning' or 'error'.")
    code: str = Field(description="Machine-readable diagnostic code.")
    message: str = Field(description="Human-readable message.")
    node_id: Optional[str] = Field(default=None, description="Offending node id, if any.")
    edge_id: Optional[str] = Field(default=None, description="Offending edge id, if any.")

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> "DiagnosticModel":
        return cls(
            level=diagnostic.level,
            code=diagnostic.code,
            message=diagnostic.message,
            node_id=diagnostic.node_id,
            edge_id=diagnostic.edge_id,
        )


class BlocksResponse(BaseModel):
    """Resolved block sequence for a canvas.

    RULES:
    - ok is False when an error diagnostic (cycle, missing input) emptied blocks
    """

    ok: bool = Field(description="False when the canvas could not be resolved.")
    blocks: List[BlockModel] = Field(description="Blocks in page order.")
    diagnostics: List[DiagnosticModel] = Field(description="Warnings and errors raised.")


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-page.html').")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
