"""Media derivation for file nodes: type, display path, and alt text.

WHY: A file card only holds the path written in the canvas. The page
needs to know whether to embed an <img> or a <video>, where the file
is served from, and a readable alt text — all derived from that path.

HOW: Three small pure functions, combined by derive_media():
  media_type_for()   — extension → "image" / "video" / "unknown"
  rewrite_media_src() — swap the first path segment for the media root
  alt_text_for()     — filename stem → spaced, capitalised label

RULES:
- Extension match is case-insensitive; no extension → "unknown"
- Path rewrite replaces everything up to and including the first "/"
- A path without "/" is placed directly under the media root
- Alt text: camelCase boundaries and "-"/"_" become spaces, first char upper
- Unknown media → derive_media() returns None (the caller reports it)
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from canvas_converter.config import IMAGE_EXTENSIONS, MEDIA_ROOT, VIDEO_EXTENSIONS
from canvas_converter.core.ir import Media

logger = logging.getLogger(__name__)

UNKNOWN_MEDIA = "unknown"

_CAPITAL_RE = re.compile(r"([A-Z])")
_SEPARATOR_RE = re.compile(r"[-_]")
_SPACES_RE = re.compile(r" {2,}")


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def media_type_for(path: str) -> str:
    """Classify a file path as "image", "video", or "unknown" by extension."""
    name = _basename(path)
    if "." not in name:
        return UNKNOWN_MEDIA
    extension = name.rsplit(".", 1)[1].lower()
    if extension in VIDEO_EXTENSIONS:
        return "video"
    if extension in IMAGE_EXTENSIONS:
        return "image"
    return UNKNOWN_MEDIA


def rewrite_media_src(path: str, media_root: str = MEDIA_ROOT) -> str:
    """Re-root a canvas path under the served media directory.

    ``assets/sub/pic.png`` → ``media/sub/pic.png``; ``pic.png`` →
    ``media/pic.png``.
    """
    _, sep, rest = path.partition("/")
    if not sep:
        logger.debug(
            "Media path %r has no directory separator; placing it under %r",
            path, media_root,
        )
        rest = path
    return "{}/{}".format(media_root, rest)


def alt_text_for(path: str) -> str:
    """Build a readable alt text from a file path.

    WHY: Canvas file cards carry no caption of their own, but images
    still need alt text for accessibility.

    HOW: Strip directories and the final extension, insert a space before
    every capital letter, turn "-" and "_" into spaces, collapse runs of
    spaces, trim, and upper-case the first character.

    RULES:
    - "img/cat.png" → "Cat"
    - "shots/myFavourite_dog-photo.jpg" → "My Favourite dog photo"
    - A name without extension is used as-is
    """
    name = _basename(path)
    if "." in name:
        name = name.rsplit(".", 1)[0]
    label = _CAPITAL_RE.sub(r" \1", name)
    label = _SEPARATOR_RE.sub(" ", label)
    label = _SPACES_RE.sub(" ", label).strip()
    return label[:1].upper() + label[1:]


def derive_media(path: str, media_root: str = MEDIA_ROOT) -> Optional[Media]:
    """Build the Media for a file path, or None when the type is unknown."""
    media_type = media_type_for(path)
    if media_type == UNKNOWN_MEDIA:
        return None
    return Media(
        type=media_type,
        src=rewrite_media_src(path, media_root),
        alt=alt_text_for(path),
    )
