"""Command-line front end: ``moldcad-cast``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from .casting import find_single_mold_translational_casting
from .config import CastingConfig, load_config
from .errors import CastingError
from .io import load_polygon, result_to_dict, write_casting_dxf

logger = logging.getLogger(__name__)

EXIT_CASTABLE = 0
EXIT_NOT_CASTABLE = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="moldcad-cast",
        description="Find the top edges and pull directions for casting a polygon "
                    "in a one-piece mold.",
    )
    parser.add_argument("polygon", help="polygon file (.yaml, .yml, .json or .dxf)")
    parser.add_argument("--config", help="YAML casting configuration")
    parser.add_argument("--layer", help="DXF layer holding the polygon")
    parser.add_argument("--no-early-exit", dest="early_exit", action="store_false", default=None,
                        help="insert every edge even once nothing is castable")
    parser.add_argument("--check-simple", dest="check_simple", action="store_true", default=None,
                        help="reject self-intersecting polygons")
    parser.add_argument("--radians", dest="angle_units", action="store_const", const="radians",
                        help="report angles in radians")
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("--dxf", metavar="OUT", help="write a DXF drawing of the result")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="count", default=0)
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return parser


def _log_level(args, config: CastingConfig) -> int:
    if args.quiet:
        return logging.ERROR
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    return getattr(logging, config.log_level)


def _format_text(summary: dict) -> str:
    if not summary["castable"]:
        return "not castable"
    unit = "deg" if summary["units"] == "degrees" else "rad"
    lines = []
    for top in summary["top_edges"]:
        if top["single_direction"]:
            pull = "{:.6g} {}".format(top["start"]["angle"], unit)
        else:
            pull = "{:.6g} {} clockwise to {:.6g} {}".format(
                top["start"]["angle"], unit, top["end"]["angle"], unit)
        lines.append("edge {} ({:g}, {:g})-({:g}, {:g}): {}".format(
            top["edge"], top["from"][0], top["from"][1], top["to"][0], top["to"][1], pull))
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else CastingConfig()
        config = config.updated(early_exit=args.early_exit,
                                check_simple=args.check_simple,
                                angle_units=args.angle_units)
    except (OSError, ValueError) as exc:
        print(f"moldcad-cast: {exc}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(level=_log_level(args, config),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        polygon = load_polygon(args.polygon, layer=args.layer)
        results = find_single_mold_translational_casting(polygon, config=config)
        summary = result_to_dict(polygon, results, config.angle_units)
        if args.dxf:
            write_casting_dxf(polygon, results, args.dxf)
            logger.info("wrote %s", args.dxf)
    except (CastingError, OSError) as exc:
        print(f"moldcad-cast: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(_format_text(summary))
    return EXIT_CASTABLE if results else EXIT_NOT_CASTABLE


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
