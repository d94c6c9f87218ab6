"""Strict raw-field converters.

Every converter takes the raw field string and either returns the typed value
or raises a FieldConversionError subclass. None of them trims whitespace or
tolerates signs, so a value only converts if it is already in canonical form.
"""

import re
from datetime import datetime
from typing import Callable, Dict
import pandas as pd

from scooter_telemetry.parsing.errors import InvalidNumberError, InvalidTimestampError
from scooter_telemetry.schemas.packets import ValueFormat

# Largest integer a double can hold exactly; wider values go through
# parse_strict_large_integer.
MAX_SAFE_INTEGER = 2**53 - 1

# No sign, no leading zeros ("0" itself is fine)
_CANONICAL_INTEGER = re.compile(r"0|[1-9][0-9]*")

# Accepted local timestamp layouts (fixed 19 characters)
TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S")
_TIMESTAMP_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}[T ][0-9]{2}:[0-9]{2}:[0-9]{2}")


def parse_strict_large_integer(raw: str) -> int:
    """Parse an arbitrarily large non-negative integer in canonical form.

    Args:
        raw: Raw field value, e.g. a 15-digit IMEI

    Returns:
        Parsed integer

    Raises:
        InvalidNumberError: If raw is not exactly the decimal rendering of an integer
    """
    if not _CANONICAL_INTEGER.fullmatch(raw):
        raise InvalidNumberError(f"Not a valid number: {raw}")
    return int(raw)


def parse_strict_integer(raw: str) -> int:
    """Parse a non-negative integer in canonical form within the safe integer range.

    Raises:
        InvalidNumberError: If raw is not canonical or exceeds MAX_SAFE_INTEGER
    """
    value = parse_strict_large_integer(raw)
    if value > MAX_SAFE_INTEGER:
        raise InvalidNumberError(f"Number out of range: {raw}")
    return value


def parse_strict_timestamp(raw: str) -> datetime:
    """Parse a timezone-less timestamp as local time.

    Args:
        raw: Timestamp such as "2021-01-14T15:05:10"

    Returns:
        Timezone-aware datetime carrying the local UTC offset for that instant

    Raises:
        InvalidTimestampError: If raw is not a valid calendar date and time
    """
    # Format parsing alone would accept unpadded fields like "2021-1-14"
    if not _TIMESTAMP_SHAPE.fullmatch(raw):
        raise InvalidTimestampError(f"Not a valid date: {raw}")

    fmt = TIMESTAMP_FORMATS[0] if raw[10] == "T" else TIMESTAMP_FORMATS[1]
    try:
        parsed = pd.to_datetime(raw, format=fmt, exact=True)
    except ValueError as e:  # Includes OutOfBoundsDatetime
        raise InvalidTimestampError(f"Not a valid date: {raw}") from e

    return parsed.to_pydatetime().astimezone()


def format_percent(raw: str) -> str:
    """Battery level as "<n> %"."""
    return f"{parse_strict_integer(raw)} %"


def format_kilometres(raw: str) -> str:
    """Odometer reading as "<n> km"."""
    return f"{parse_strict_integer(raw)} km"


def format_large_integer(raw: str) -> str:
    """Identifier such as an IMEI, validated as digits and kept as a string."""
    return str(parse_strict_large_integer(raw))


def format_integer(raw: str) -> str:
    """Identifier validated within the safe integer range and kept as a string."""
    return str(parse_strict_integer(raw))


def _raw(raw: str) -> str:
    return raw


# Dispatch table from schema value format to converter
CONVERTERS: Dict[ValueFormat, Callable[[str], object]] = {
    ValueFormat.RAW: _raw,
    ValueFormat.INTEGER: parse_strict_integer,
    ValueFormat.INTEGER_STRING: format_integer,
    ValueFormat.LARGE_INTEGER_STRING: format_large_integer,
    ValueFormat.PERCENT: format_percent,
    ValueFormat.KILOMETRES: format_kilometres,
    ValueFormat.TIMESTAMP: parse_strict_timestamp,
}


def convert(value_format: ValueFormat, raw: str) -> object:
    """Convert raw with the converter registered for value_format."""
    return CONVERTERS[value_format](raw)
