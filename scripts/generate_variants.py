#!/usr/bin/env python3
"""Generate budget-spread kitchen design variants and their artifacts."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from materials import DEFAULT_DOOR, DEFAULT_TOP, DOOR_OPTIONS, TOP_OPTIONS
from pricing import format_usd
from templates import LAYOUT_OPTIONS, LEGACY_LAYOUT_IDS
from variant_generation import GenerationConfig, generate_all
from variant_generation.contracts import DEFAULT_SVG_SCALE, MAX_VARIANTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate deterministic, budget-optimized kitchen design variants"
    )
    parser.add_argument(
        "--layout",
        action="append",
        default=[],
        help=(
            "Layout id, canonical or legacy; repeat for several "
            f"(default: all of {', '.join(LAYOUT_OPTIONS)}; legacy: "
            f"{', '.join(LEGACY_LAYOUT_IDS)})"
        ),
    )
    parser.add_argument(
        "--per-layout",
        type=int,
        default=MAX_VARIANTS,
        help=f"Variants per layout, clamped to 1-{MAX_VARIANTS}",
    )
    parser.add_argument(
        "--budget",
        type=float,
        default=None,
        help="Centre budget in USD; 0 or omitted uses each layout's baseline price",
    )
    parser.add_argument(
        "--door", default=DEFAULT_DOOR, help=f"Door finish ({', '.join(DOOR_OPTIONS)})"
    )
    parser.add_argument(
        "--top", default=DEFAULT_TOP, help=f"Countertop finish ({', '.join(TOP_OPTIONS)})"
    )
    parser.add_argument("--runs-dir", default="runs", help="Runs output root")
    parser.add_argument("--run-id", default=None, help="Override the generated run id")
    parser.add_argument(
        "--svg-scale",
        type=float,
        default=DEFAULT_SVG_SCALE,
        help="SVG plan pixels per millimetre",
    )
    parser.add_argument(
        "--dxf", action="store_true", help="Also write a plan.dxf per variant"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = GenerationConfig(
        layouts=tuple(args.layout),
        per_layout=args.per_layout,
        budget=args.budget,
        base_door=args.door.upper(),
        base_top=args.top.upper(),
        runs_dir=args.runs_dir,
        svg_scale=args.svg_scale,
        export_dxf=args.dxf,
        run_id=args.run_id,
    )
    try:
        output = generate_all(config)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(f"Run ID: {output.run_id}")
    print(f"Run dir: {output.run_dir}")
    for variant in output.variants():
        print(
            f"{variant.variant_id}: target {format_usd(variant.target_usd)}, "
            f"price {format_usd(variant.price_usd)}, {variant.ops_count} op(s) "
            f"-> {variant.files.root}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
