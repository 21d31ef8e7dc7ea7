from __future__ import annotations

import argparse
import logging
import sys

from .converter import render_dxf_to_svg
from .linetypes import PATTERNS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stroke DXF polylines with line patterns into an SVG file.")
    parser.add_argument("input_dxf", nargs="?", help="Path to input DXF file")
    parser.add_argument("output_svg", nargs="?", help="Path to output SVG file")
    parser.add_argument(
        "--pattern",
        choices=tuple(PATTERNS),
        default=None,
        help="Line pattern for every polyline (default: the polyline's own linetype)",
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=1.0,
        help="Output units per drawing unit (default: 1.0)",
    )
    parser.add_argument(
        "--no-flip-y",
        action="store_true",
        help="Disable DXF Y-up to SVG Y-down conversion",
    )
    parser.add_argument(
        "--restart-pattern",
        action="store_true",
        help="Start every polyline at the beginning of its pattern",
    )
    parser.add_argument(
        "--stroke-width",
        type=float,
        default=0.5,
        help="SVG stroke width (default: 0.5)",
    )
    parser.add_argument("--list-patterns", action="store_true", help="Print the pattern table and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_patterns:
        for name, pattern in PATTERNS.items():
            print(f"{name}: {', '.join(f'{v:g}' for v in pattern.lengths)}")
        return 0

    if not args.input_dxf or not args.output_svg:
        parser.print_usage(sys.stderr)
        print("input_dxf and output_svg are required", file=sys.stderr)
        return 2

    try:
        render_dxf_to_svg(
            args.input_dxf,
            args.output_svg,
            pattern=args.pattern,
            scale=max(args.scale, 1e-9),
            flip_y=not args.no_flip_y,
            continuous=not args.restart_pattern,
            stroke_width=args.stroke_width,
        )
    except Exception as exc:
        print(f"Rendering failed: {exc}", file=sys.stderr)
        return 1
    return 0
