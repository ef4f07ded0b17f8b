"""Configuration constants, media extension tables, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Extension tables and resolution defaults are plain
data structures — not buried in logic — so both humans and coding agents
can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level sets and strings. Environment variables override the
defaults where noted.

RULES:
- VIDEO_EXTENSIONS / IMAGE_EXTENSIONS are lowercase, without the dot
- Any extension outside both tables is "unknown" media
- MEDIA_ROOT is a single path segment, no leading or trailing slash
- PAIRING_POLICY is "last" or "first"
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment ("true"/"false")."""
    return os.getenv(name, "true" if default else "false").strip().lower() in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# Media classification tables
# ---------------------------------------------------------------------------

VIDEO_EXTENSIONS: frozenset[str] = frozenset({"mp4", "webm", "ogg"})
"""File extensions rendered as <video> media."""

IMAGE_EXTENSIONS: frozenset[str] = frozenset({"png", "jpg", "jpeg", "gif", "svg", "webp"})
"""File extensions rendered as <img> media."""

# ---------------------------------------------------------------------------
# Resolution defaults
# ---------------------------------------------------------------------------

MEDIA_ROOT = os.getenv("CANVAS_MEDIA_ROOT", "media").strip("/")
PAIRING_POLICY = os.getenv("CANVAS_PAIRING_POLICY", "last").strip().lower()
INCLUDE_UNORDERED = _env_flag("CANVAS_INCLUDE_UNORDERED", True)

# Comma-separated Python-Markdown extension names, e.g. "tables,fenced_code"
MARKDOWN_EXTENSIONS = [
    name.strip()
    for name in os.getenv("CANVAS_MARKDOWN_EXTENSIONS", "").split(",")
    if name.strip()
]

# ---------------------------------------------------------------------------
# Output and API defaults
# ---------------------------------------------------------------------------

DEFAULT_OUTPUT_FORMATS = [
    key.strip()
    for key in os.getenv("CANVAS_OUTPUT_FORMATS", "").split(",")
    if key.strip()
]
"""Formatter keys used when none are requested. Empty means all."""

API_HOST = os.getenv("CANVAS_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("CANVAS_API_PORT", "8000"))
