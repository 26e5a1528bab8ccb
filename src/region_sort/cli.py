"""Command-line interface for the region sort and stats tools."""

import argparse
import logging
import sys

from .errors import RegionSortError, UsageError
from .runner import emit_stats, sort_file, summarize_file
from .sort_on_disk import block_size, max_range_width, max_temp, min_temp
from .utils import record_max, record_min

logger = logging.getLogger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports bad usage as UsageError instead of exiting 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        raise UsageError(message)


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def region_id_arg(text: str) -> int:
    if not text.isdigit():
        raise argparse.ArgumentTypeError(f"region must be a positive integer, got {text!r}")
    return int(text)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("data_file", help="Path to the sensor data file")
    parser.add_argument("region_id", type=region_id_arg, help="Region to process (1-based)")
    parser.add_argument(
        "--min-value",
        type=int,
        default=min_temp,
        help=f"Smallest valid reading (default: {min_temp})",
    )
    parser.add_argument(
        "--max-value",
        type=int,
        default=max_temp,
        help=f"Largest valid reading (default: {max_temp})",
    )
    parser.add_argument(
        "--block-size",
        type=int,
        default=block_size,
        help=f"Records per read/write block (default: {block_size})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )


def create_sort_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="region-sort",
        description="Sort one region of a sensor data file in place.",
    )
    add_common_arguments(parser)
    return parser


def create_stats_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="region-stats",
        description="Sort one region of a sensor data file and write its statistics.",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "destination",
        nargs="?",
        choices=["stdout"],
        help="Write the binary stats record to stdout instead of region-<id>-stats.bin",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory for region-<id>-stats.bin (default: current directory)",
    )
    return parser


def parse_args(parser: argparse.ArgumentParser, argv: list[str] | None) -> argparse.Namespace:
    args = parser.parse_args(argv)
    configure_logging(getattr(logging, args.log_level))
    if args.min_value > args.max_value:
        parser.error(f"--min-value {args.min_value} is greater than --max-value {args.max_value}")
    if args.min_value < record_min or args.max_value > record_max:
        parser.error(f"value range must lie within [{record_min}, {record_max}]")
    if args.max_value - args.min_value + 1 > max_range_width:
        parser.error(f"value range [{args.min_value}, {args.max_value}] is wider than {max_range_width} values")
    if args.block_size < 1:
        parser.error(f"--block-size must be positive, got {args.block_size}")
    return args


def sort_main(argv: list[str] | None = None) -> int:
    """Entry point for region-sort."""
    try:
        args = parse_args(create_sort_parser(), argv)
        sort_file(args.data_file, args.region_id, args.min_value, args.max_value, args.block_size)
    except RegionSortError as e:
        logger.error("%s", e)
        return 1
    return 0


def stats_main(argv: list[str] | None = None) -> int:
    """Entry point for region-stats."""
    try:
        args = parse_args(create_stats_parser(), argv)
        stats = summarize_file(
            args.data_file, args.region_id, args.min_value, args.max_value, args.block_size
        )
        emit_stats(
            stats,
            to_stdout=args.destination == "stdout",
            output_dir=args.output_dir,
            stdout=sys.stdout.buffer,
        )
    except RegionSortError as e:
        logger.error("%s", e)
        return 1
    return 0

