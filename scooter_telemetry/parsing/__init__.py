"""Packet line parsing pipeline."""

from .errors import (
    PacketError,
    RejectReason,
    FramingError,
    UnknownPacketTypeError,
    InvalidRepeatCountError,
    FieldCountMismatchError,
    FieldLengthError,
    FieldConversionError,
    InvalidNumberError,
    InvalidTimestampError,
)
from .converters import (
    parse_strict_integer,
    parse_strict_large_integer,
    parse_strict_timestamp,
)
from .tokenizer import iter_lines, check_framing, tokenize_line
from .flattener import flatten_field_definitions
from .validator import check_field_count, check_field_lengths, validate_fields
from .builder import build_record
from .parser import (
    PacketParser,
    ParseStats,
    get_device_information,
    parse_device_info_only,
)

__all__ = [
    # Errors
    "PacketError",
    "RejectReason",
    "FramingError",
    "UnknownPacketTypeError",
    "InvalidRepeatCountError",
    "FieldCountMismatchError",
    "FieldLengthError",
    "FieldConversionError",
    "InvalidNumberError",
    "InvalidTimestampError",
    # Converters
    "parse_strict_integer",
    "parse_strict_large_integer",
    "parse_strict_timestamp",
    # Pipeline stages
    "iter_lines",
    "check_framing",
    "tokenize_line",
    "flatten_field_definitions",
    "check_field_count",
    "check_field_lengths",
    "validate_fields",
    "build_record",
    # Batch parsing
    "PacketParser",
    "ParseStats",
    "get_device_information",
    "parse_device_info_only",
]
