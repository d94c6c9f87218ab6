"""Parse a scooter telemetry packet log and print the records.

Usage:
    scooter-telemetry data/deviceInfoError.packet
    scooter-telemetry data/deviceInfoError.packet --format csv --stats
    scooter-telemetry data/deviceInfoError.packet --packet-type DeviceInfo
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import orjson

from scooter_telemetry.conf.settings import settings
from scooter_telemetry.parsing.errors import UnknownPacketTypeError
from scooter_telemetry.parsing.parser import PacketParser
from scooter_telemetry.schemas.registry import DEFAULT_REGISTRY
from scooter_telemetry.utils.frames import records_to_dataframe
from scooter_telemetry.utils.io_utils import dumps_records, load_registry, read_payload
from scooter_telemetry.utils.logging_utils import setup_logger


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scooter-telemetry",
        description="Parse a scooter telemetry packet log into JSON records",
    )
    parser.add_argument("path", type=Path, help="Packet log file")
    parser.add_argument(
        "--format",
        choices=["json", "csv"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--packet-type",
        action="append",
        dest="packet_types",
        metavar="NAME",
        help="Only accept this packet type (repeatable)",
    )
    parser.add_argument(
        "--schema",
        type=Path,
        default=settings.schema_file,
        help="JSON file with packet schemas replacing the built-in ones",
    )
    parser.add_argument("--stats", action="store_true", help="Print parse statistics to stderr")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logger = setup_logger("scooter_telemetry", log_level=args.log_level)

    if not args.path.exists():
        logger.error(f"Input file not found: {args.path}")
        return 1

    registry = DEFAULT_REGISTRY
    if args.schema:
        try:
            registry = load_registry(args.schema)
        except (OSError, ValueError) as e:
            logger.error(f"Cannot load schema file {args.schema}: {e}")
            return 3
    if args.packet_types:
        try:
            registry = registry.restrict(args.packet_types)
        except UnknownPacketTypeError as e:
            logger.error(str(e))
            return 2

    payload = read_payload(args.path)
    records, stats = PacketParser(registry).parse_with_stats(payload)

    if args.format == "csv":
        sys.stdout.write(records_to_dataframe(records).to_csv(index=False))
    else:
        sys.stdout.buffer.write(dumps_records(records))
        sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()

    if args.stats:
        sys.stderr.write(orjson.dumps(stats.to_dict(), option=orjson.OPT_INDENT_2).decode() + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
