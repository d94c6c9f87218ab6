"""Batch parsing of scooter telemetry packet logs.

A payload is a string of newline-separated packet lines. Each line goes
through framing, tokenization, schema lookup, flattening, validation and
record building. Any PacketError discards that line only; malformed telemetry
is routine noise, so nothing is raised to the caller for it.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from scooter_telemetry.parsing.builder import Record, build_record
from scooter_telemetry.parsing.errors import PacketError, RejectReason
from scooter_telemetry.parsing.flattener import flatten_field_definitions
from scooter_telemetry.parsing.tokenizer import iter_lines, tokenize_line
from scooter_telemetry.parsing.validator import validate_fields
from scooter_telemetry.schemas.registry import DEFAULT_REGISTRY, SchemaRegistry
from scooter_telemetry.utils.logging_utils import get_logger

logger = get_logger(__name__)

# Raw field holding the packet type used for schema lookup
PACKET_TYPE_INDEX = 1


@dataclass
class ParseStats:
    """Diagnostic counters from one parse call."""

    total_lines: int = 0
    blank_lines: int = 0
    accepted_lines: int = 0
    rejected_lines: int = 0
    rejected_by_reason: Dict[str, int] = field(default_factory=dict)
    accepted_by_packet_type: Dict[str, int] = field(default_factory=dict)
    processing_time_sec: float = 0.0
    timestamp: str = ""

    def record_accept(self, packet_type: str) -> None:
        self.accepted_lines += 1
        self.accepted_by_packet_type[packet_type] = (
            self.accepted_by_packet_type.get(packet_type, 0) + 1
        )

    def record_reject(self, reason: RejectReason) -> None:
        self.rejected_lines += 1
        self.rejected_by_reason[reason.value] = self.rejected_by_reason.get(reason.value, 0) + 1

    @property
    def acceptance_rate(self) -> float:
        """Accepted share of non-blank lines as a percentage."""
        candidates = self.total_lines - self.blank_lines
        if candidates == 0:
            return 0.0
        return (self.accepted_lines / candidates) * 100

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "total_lines": self.total_lines,
            "blank_lines": self.blank_lines,
            "accepted_lines": self.accepted_lines,
            "rejected_lines": self.rejected_lines,
            "acceptance_rate": self.acceptance_rate,
            "rejected_by_reason": dict(self.rejected_by_reason),
            "accepted_by_packet_type": dict(self.accepted_by_packet_type),
            "processing_time_sec": self.processing_time_sec,
            "timestamp": self.timestamp,
        }


class PacketParser:
    """Schema-driven parser for packet logs.

    The parser holds no state between calls; parse() on the same payload
    always returns equal record lists.
    """

    def __init__(self, registry: Optional[SchemaRegistry] = None):
        """Initialize parser.

        Args:
            registry: Packet schemas to accept (defaults to the built-in registry)
        """
        self.registry = registry if registry is not None else DEFAULT_REGISTRY

    def parse_line(self, line: str) -> Tuple[str, Record]:
        """Parse a single packet line.

        Args:
            line: One line without its newline

        Returns:
            (packet_type, record) tuple

        Raises:
            PacketError: If the line is invalid for any reason
        """
        fields = tokenize_line(line)

        # A framed line always has at least one field; index 1 may be missing
        packet_type = fields[PACKET_TYPE_INDEX] if len(fields) > PACKET_TYPE_INDEX else ""
        schema = self.registry.get(packet_type)

        definitions = flatten_field_definitions(schema.definitions, fields)
        validate_fields(definitions, fields)
        return packet_type, build_record(definitions, fields)

    def parse_with_stats(self, payload: str) -> Tuple[List[Record], ParseStats]:
        """Parse a payload and collect diagnostic counters.

        Args:
            payload: Newline-separated packet lines

        Returns:
            (records, stats) tuple; records are in input line order
        """
        start_time = time.time()
        stats = ParseStats(timestamp=datetime.now().isoformat())
        records: List[Record] = []

        for line_number, line in iter_lines(payload):
            stats.total_lines += 1
            if not line:
                stats.blank_lines += 1
                continue

            try:
                packet_type, record = self.parse_line(line)
            except PacketError as e:
                stats.record_reject(e.reason)
                logger.debug(f"Line {line_number} rejected ({e.reason.value}): {e}")
                continue

            records.append(record)
            stats.record_accept(packet_type)

        stats.processing_time_sec = time.time() - start_time

        if stats.rejected_lines:
            logger.info(
                f"Parsed {stats.accepted_lines} of {stats.total_lines - stats.blank_lines} packet lines "
                f"({stats.rejected_lines} rejected: {stats.rejected_by_reason})"
            )
        else:
            logger.info(f"Parsed {stats.accepted_lines} packet lines")

        return records, stats

    def parse(self, payload: str) -> List[Record]:
        """Parse a payload into records, silently skipping invalid lines."""
        records, _ = self.parse_with_stats(payload)
        return records


def get_device_information(
    payload: str,
    packet_types: Optional[Iterable[str]] = None,
    registry: Optional[SchemaRegistry] = None,
) -> List[Record]:
    """Parse a packet log into records.

    Args:
        payload: Newline-separated packet lines
        packet_types: Only accept these packet types (None = every registered type)
        registry: Schemas to parse with (defaults to the built-in registry)

    Returns:
        One record per valid line, in input order
    """
    registry = registry if registry is not None else DEFAULT_REGISTRY
    if packet_types is not None:
        registry = registry.restrict(packet_types)
    return PacketParser(registry).parse(payload)


def parse_device_info_only(payload: str) -> List[Record]:
    """Parse only DeviceInfo packets, ignoring every other packet type."""
    return get_device_information(payload, packet_types=("DeviceInfo",))
