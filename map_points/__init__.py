import argparse
import sys
from typing import Any, Dict, List, Optional

from .build import ALL_TARGETS, PIPELINES, resolve_targets, run_build, run_pipeline
from .config import BuildConfig, resolve_config
from .layers import LayerDataError
from .points import Point, PointSet, format_point, point_key, round_coordinate


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="map-points",
        description="Build flat object/place coordinate listings from the map layer data"
    )
    parser.add_argument("targets", nargs="*", metavar="TARGET",
                        help="outputs to build: {} (default: {})".format(
                            ", ".join([ALL_TARGETS] + list(PIPELINES.keys())), ALL_TARGETS))
    parser.add_argument("--data-dir", metavar="DIR",
                        help="directory holding sky.json, surface.json, cave.json and depths.json")
    parser.add_argument("--out-dir", metavar="DIR", help="write output files into this directory")
    parser.add_argument("--telemetry-json", metavar="PATH",
                        help="also write a JSON summary of the build stages")
    parser.add_argument("--quiet", action="store_true", help="don't print progress")
    return parser


def run_standalone(args: List[str]) -> Dict[str, Dict[str, Any]]:
    parser = _build_parser()
    parsed = parser.parse_args(args)
    try:
        targets = resolve_targets(parsed.targets)
    except ValueError as e:
        parser.error(str(e))
    config = resolve_config(
        data_dir=parsed.data_dir,
        out_dir=parsed.out_dir,
        telemetry_json=parsed.telemetry_json,
        quiet=parsed.quiet
    )
    return run_build(config, targets)


def main(argv: Optional[List[str]] = None) -> int:
    run_standalone(sys.argv[1:] if argv is None else argv)
    return 0


__all__ = [
    "BuildConfig",
    "LayerDataError",
    "Point",
    "PointSet",
    "format_point",
    "main",
    "point_key",
    "resolve_config",
    "round_coordinate",
    "run_build",
    "run_pipeline",
    "run_standalone"
]
