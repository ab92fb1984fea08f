"""Command-line entry point for inverting Landsat surface temperature scenes."""

import argparse
import os
from pathlib import Path

from sstmaps.config import data_path, get_settings
from sstmaps.core.raster_utils import init_logger
from sstmaps.pipeline.sst import process_scenes


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the runner.

    Args:
        None

    Returns:
        argparse.ArgumentParser: Parser for the CLI options.
    """
    cfg = get_settings()
    parser = argparse.ArgumentParser(
        description="Landsat Collection 2 Level 2 surface temperature inversion"
    )
    parser.add_argument(
        "scenes",
        nargs="+",
        type=str,
        help="Folders holding extracted Level 2 scenes (MTL, ST and QA_PIXEL files)",
    )
    parser.add_argument(
        "--retrieve_land",
        action=argparse.BooleanOptionalAction,
        default=cfg.retrieve_land,
        help="Also retrieve land, small lake and river temperature.",
    )
    parser.add_argument(
        "--percentiles",
        type=float,
        nargs=2,
        metavar=("LOW", "HIGH"),
        default=list(cfg.percentile_bounds),
        help="Percentiles outside which temperatures are removed (default 2.5 99)",
    )
    parser.add_argument(
        "--out_dir",
        type=str,
        default=str(data_path("sst")),
        help="Directory receiving the temperature and quality GeoTIFFs",
    )
    parser.add_argument(
        "--n_workers",
        type=int,
        default=max(os.cpu_count() // 2, 1),
        help="Parallel worker processes",
    )
    parser.add_argument(
        "--log_file",
        type=str,
        default="process_log.txt",
        help="File where log messages are appended",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and invert every requested scene.

    Args:
        argv (list[str] | None): Arguments, ``None`` reads ``sys.argv``.

    Returns:
        int: ``0`` when every scene succeeded, ``1`` otherwise.
    """
    args = build_parser().parse_args(argv)
    init_logger(args.log_file)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    result = process_scenes(
        args.scenes,
        out_dir,
        retrieve_land=args.retrieve_land,
        percentile_bounds=tuple(args.percentiles),
        n_workers=args.n_workers,
    )
    for path in result["written"]:
        print(path)
    return 1 if result["errors"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
