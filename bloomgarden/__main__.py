"""Command line entry point: ``python -m bloomgarden`` / ``bloomgarden``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import SurfaceUnavailableError, run, setup_logging
from .config import LOG_LEVELS, PRESETS, GardenConfig

logger = logging.getLogger("bloomgarden")


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bloomgarden",
        description="Click or tap the garden to grow flowers.",
    )
    parser.add_argument("--config", help="JSON settings file (default: $BLOOMGARDEN_CONFIG)")
    parser.add_argument("--preset", choices=sorted(PRESETS), help="flower parameter set")
    parser.add_argument("--max-flowers", type=_positive_int, help="evict the oldest flower beyond this many")
    parser.add_argument("--seed", type=int, help="seed for reproducible gardens")
    parser.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper)
    return parser


def load_config(args: argparse.Namespace) -> GardenConfig:
    """Read the settings file, then let command line flags override it."""

    config = GardenConfig.load(args.config)
    if args.preset:
        config.preset = args.preset
    if args.max_flowers:
        config.max_flowers = args.max_flowers
    if args.seed is not None:
        config.seed = args.seed
    if args.log_level:
        config.log_level = args.log_level
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args)
    setup_logging(config.log_level)

    try:
        return run(config)
    except SurfaceUnavailableError as exc:
        logger.error("Cannot start BloomGarden: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
