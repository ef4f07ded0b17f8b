"""FastAPI application exposing canvas conversion over HTTP.

WHY: Site builders and editor plugins want to convert a canvas without
shelling out to the CLI. FastAPI provides request validation and
automatic OpenAPI documentation.

HOW: Conversion is a pure in-memory transformation, so every endpoint
answers in the request itself with no job store. The conversion
endpoints are plain functions; FastAPI runs them in its threadpool so
Markdown rendering and schema checks stay off the event loop.
POST /blocks returns the resolved blocks as JSON; POST /render/{format}
returns the output of a registered formatter.

RULES:
- Invalid canvas documents → 422 with the loader's message
- Unknown format keys → 404
- A cycle is not an HTTP error: the response carries ok=false and the
  diagnostic, mirroring the resolver's soft failure
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from canvas_converter import __version__
from canvas_converter.core.ir import CanvasResolution
from canvas_converter.core.loader import CanvasFormatError, convert_canvas
from canvas_converter.formatters import FORMATTERS
from canvas_converter.server.models import (
    BlockModel,
    BlocksResponse,
    CanvasRequest,
    DiagnosticModel,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Canvas Converter API",
    description=(
        "Convert canvas documents (media and text cards joined by arrows "
        "and pairing lines) into an ordered sequence of page blocks, or "
        "render them straight to HTML."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


def _resolve(request: CanvasRequest) -> CanvasResolution:
    """Run the loader and resolver, mapping format errors to HTTP 422."""
    try:
        return convert_canvas(request.to_document(), source_filename=request.source_filename)
    except CanvasFormatError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


# ---------------------------------------------------------------------------
# Endpoints: Conversion
# ---------------------------------------------------------------------------


@app.post(
    "/blocks",
    response_model=BlocksResponse,
    tags=["conversion"],
    summary="Resolve a canvas into blocks",
    description=(
        "Orders the canvas by its arrows, merges paired media/text cards, "
        "and returns the block sequence with any diagnostics."
    ),
    responses={
        422: {"model": ErrorResponse, "description": "Invalid canvas document"},
    },
)
def resolve_canvas(request: CanvasRequest) -> BlocksResponse:
    resolution = _resolve(request)
    return BlocksResponse(
        ok=resolution.ok,
        blocks=[BlockModel.from_block(b) for b in resolution.blocks],
        diagnostics=[DiagnosticModel.from_diagnostic(d) for d in resolution.diagnostics],
    )


@app.post(
    "/render/{format_key}",
    tags=["conversion"],
    summary="Render a canvas with a registered formatter",
    description="Returns the primary output file of the chosen formatter.",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown format"},
        422: {"model": ErrorResponse, "description": "Invalid canvas document"},
    },
)
def render_canvas(format_key: str, request: CanvasRequest) -> Response:
    if format_key not in FORMATTERS:
        raise HTTPException(
            status_code=404,
            detail="Unknown output format '{}'. Available: {}".format(
                format_key, ", ".join(sorted(FORMATTERS.keys()))),
        )

    resolution = _resolve(request)
    if not resolution.ok:
        logger.warning("Rendering unresolved canvas %r", request.source_filename)

    output = FORMATTERS[format_key]().format(resolution)[0]
    return Response(content=output.content, media_type=output.media_type)


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(key=key, name=formatter.name, suffix=formatter.suffix))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the canvas-api console script."""
    import uvicorn

    from canvas_converter.config import API_HOST, API_PORT

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host=API_HOST, port=API_PORT)
