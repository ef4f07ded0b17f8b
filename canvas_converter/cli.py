"""Command-line interface for the Canvas Converter.

WHY: Authors need a simple way to turn a canvas file into a page from the
terminal or a build script. The CLI wires together the full pipeline —
file loading and validation, graph resolution into blocks, pluggable
formatter output, and file saving — behind a single command.

HOW: Uses argparse to accept an input canvas file, resolution options
(media root, pairing policy, unordered-node handling), output format
selection, and output directory. Status messages and diagnostics go to
stderr; output files are saved next to the source (or to --output-dir).

RULES:
- Positional argument: input .canvas file path
- --formats: comma-separated formatter keys (default: CANVAS_OUTPUT_FORMATS,
  then all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-page-2.html)
- Exit 1: unreadable or invalid input, unknown format
- Exit 2: --strict and the resolution has error diagnostics (e.g. a cycle)
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import itertools
import logging
import sys
from pathlib import Path, PurePath
from typing import List, Optional

from canvas_converter.config import (
    DEFAULT_OUTPUT_FORMATS,
    INCLUDE_UNORDERED,
    MEDIA_ROOT,
    PAIRING_POLICY,
)
from canvas_converter.core.loader import CanvasFormatError, load_canvas_file, resolve_document
from canvas_converter.core.resolver import PairingPolicy, ResolveOptions
from canvas_converter.formatters import FORMATTERS
from canvas_converter.formatters.base import FormatterOutput


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Pick a file name in output_dir that no earlier run has written.

    Re-running on portfolio.canvas yields portfolio-page.html, then
    portfolio-page-2.html, portfolio-page-3.html, and so on.
    """
    candidate = output_dir / (stem + suffix)
    extension = PurePath(suffix).suffix
    label = suffix[:len(suffix) - len(extension)]

    for counter in itertools.count(2):
        if not candidate.exists():
            return candidate
        candidate = output_dir / "{}{}-{}{}".format(stem, label, counter, extension)


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output to a conflict-free path and return it."""
    path = _resolve_output_path(stem, output.suffix, output_dir)

    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")

    return path


def _parse_formats(raw: Optional[str]) -> List[str]:
    """Turn the --formats value into a validated list of formatter keys.

    Raises:
        ValueError: If a key is not registered in FORMATTERS.
    """
    if raw:
        keys = [k.strip() for k in raw.split(",") if k.strip()]
    elif DEFAULT_OUTPUT_FORMATS:
        keys = list(DEFAULT_OUTPUT_FORMATS)
    else:
        keys = list(FORMATTERS.keys())

    for key in keys:
        if key not in FORMATTERS:
            raise ValueError("Unknown output format '{}'. Available: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))))
    return keys


def run(args: argparse.Namespace) -> int:
    """Run the load → resolve → format pipeline and return the exit code."""
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        print("Error: file not found: {}".format(input_path), file=sys.stderr)
        return 1

    try:
        format_keys = _parse_formats(args.formats)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    _status("Loading {}...".format(input_path.name))
    try:
        document = load_canvas_file(input_path)
    except (CanvasFormatError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1
    _status("  {} nodes, {} edges".format(
        len(document.nodes or []), len(document.edges or [])))

    options = ResolveOptions(
        media_root=args.media_root.strip("/"),
        pairing_policy=PairingPolicy(args.pairing),
        include_unordered=args.include_unordered,
    )

    _status("Resolving blocks...")
    resolution = resolve_document(document, options=options)
    _status("  {} blocks, {} warnings, {} errors".format(
        len(resolution.blocks), len(resolution.warnings), len(resolution.errors)))

    if args.strict and not resolution.ok:
        print("Error: canvas could not be resolved (see warnings above).", file=sys.stderr)
        return 2

    _status("Formatting output...")
    saved_files = []  # type: List[Path]
    for key in format_keys:
        formatter = FORMATTERS[key]()
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(resolution):
            saved_path = _save_output(output, input_path.stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="canvas_converter",
        description="Convert a canvas file into an ordered page of media/text "
                    "blocks (HTML page, JSON blocks).",
    )

    parser.add_argument(
        "input_file",
        help="Path to the .canvas (JSON) file to convert.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--media-root",
        default=MEDIA_ROOT,
        help="Path segment that replaces the first directory of media paths "
             "(default: %(default)s).",
    )

    parser.add_argument(
        "--pairing",
        choices=[p.value for p in PairingPolicy],
        default=PAIRING_POLICY if PAIRING_POLICY in ("last", "first") else "last",
        help="Which pairing edge wins when a card is paired twice (default: %(default)s).",
    )

    parser.add_argument(
        "--include-unordered",
        action=argparse.BooleanOptionalAction,
        default=INCLUDE_UNORDERED,
        help="Also place cards without arrows, after the ordered ones "
             "(default: %(default)s).",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 and write nothing if the canvas has a cycle.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log resolver details to stderr (-v info, -vv debug).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m canvas_converter`` and the console script.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
