"""Contract between resolved blocks and the files rendered from them.

A renderer sees only the CanvasResolution: blocks in page order plus the
diagnostics gathered while resolving. It never touches the canvas graph,
so layout decisions (alternation, paired vs. single) live entirely here
and the resolver stays presentation-free.

RULES:
- ``suffix`` begins with "-"; the CLI prefixes the canvas stem
- ``format()`` may emit several files; the HTTP layer serves the first
- Blocks arrive non-empty; renderers need not filter them again
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union

from canvas_converter.core.ir import CanvasResolution


@dataclass
class FormatterOutput:
    """A rendered file: ``portfolio`` + ``suffix`` names it on disk,
    ``media_type`` labels it in HTTP responses."""

    suffix: str
    content: Union[str, bytes]
    media_type: str


class BaseFormatter(ABC):
    """Renders a CanvasResolution; register subclasses in FORMATTERS."""

    suffix = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Label shown by ``GET /formats`` and CLI status lines."""

    @abstractmethod
    def format(self, resolution: CanvasResolution) -> List[FormatterOutput]:
        """Render every block of ``resolution``, in order."""
