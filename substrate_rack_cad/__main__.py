"""Build the parts from a parameter file and export them.

Usage:
    python -m substrate_rack_cad --params params/default.json --part rack --show
"""

import argparse
from datetime import UTC, datetime
from pathlib import Path

from build123d_ease import show
from loguru import logger

from substrate_rack_cad.assembly import PART_MAKERS, make_all_parts
from substrate_rack_cad.export import export_parts, find_build_dir
from substrate_rack_cad.specs import default_design, load_design, save_design


def build_arg_parser() -> argparse.ArgumentParser:
    """Make the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="substrate_rack_cad",
        description="Generate the substrate rack, holder, and storage box.",
    )
    parser.add_argument(
        "--params",
        type=Path,
        help="Flat JSON parameter file. Defaults are used for missing keys.",
    )
    parser.add_argument(
        "--out",
        type=Path,
        help="Export folder. Defaults to <repo root>/build/substrate_rack_cad.",
    )
    parser.add_argument(
        "--part",
        action="append",
        choices=list(PART_MAKERS),
        help="Part to build. Repeat for several. Defaults to all parts.",
    )
    parser.add_argument(
        "--dump-params",
        type=Path,
        help="Write the full resolved parameter set to this file.",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the last built part in the CAD viewer.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface."""
    args = build_arg_parser().parse_args(argv)

    start_time = datetime.now(UTC)
    logger.info("Running substrate_rack_cad")

    design = load_design(args.params) if args.params else default_design()

    if args.dump_params:
        save_design(design, args.dump_params)

    parts = make_all_parts(design, args.part)

    if args.show:
        show(list(parts.values())[-1])

    export_folder = args.out or find_build_dir("substrate_rack_cad")
    export_parts(parts, export_folder)

    logger.info(f"Done running substrate_rack_cad in {datetime.now(UTC) - start_time}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
