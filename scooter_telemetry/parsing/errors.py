"""Line-level rejection errors raised by the packet parsing pipeline."""

from enum import Enum
from typing import Optional


class RejectReason(str, Enum):
    """Why a packet line was discarded."""

    FRAMING_INVALID = "framing_invalid"
    UNKNOWN_PACKET_TYPE = "unknown_packet_type"
    INVALID_REPEAT_COUNT = "invalid_repeat_count"
    FIELD_COUNT_MISMATCH = "field_count_mismatch"
    FIELD_LENGTH_OUT_OF_RANGE = "field_length_out_of_range"
    FIELD_CONVERSION_FAILED = "field_conversion_failed"


class PacketError(Exception):
    """Base class for errors that invalidate a single packet line."""

    reason: RejectReason

    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message)
        self.field_name = field_name


class FramingError(PacketError):
    """Line does not start with the start marker or end with the end marker."""

    reason = RejectReason.FRAMING_INVALID


class UnknownPacketTypeError(PacketError, KeyError):
    """No schema is registered for the packet type."""

    reason = RejectReason.UNKNOWN_PACKET_TYPE

    def __init__(self, packet_type: str):
        super().__init__(f"Unknown packet type: {packet_type!r}")
        self.packet_type = packet_type

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidRepeatCountError(PacketError):
    """Repeat-count field of a repeatable group is missing, negative or not a number."""

    reason = RejectReason.INVALID_REPEAT_COUNT


class FieldCountMismatchError(PacketError):
    """Line has more or fewer fields than its flattened schema."""

    reason = RejectReason.FIELD_COUNT_MISMATCH

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected {expected} fields, got {actual}")
        self.expected = expected
        self.actual = actual


class FieldLengthError(PacketError):
    """A raw field is shorter or longer than its definition allows."""

    reason = RejectReason.FIELD_LENGTH_OUT_OF_RANGE


class FieldConversionError(PacketError):
    """A raw field could not be converted to its typed value."""

    reason = RejectReason.FIELD_CONVERSION_FAILED


class InvalidNumberError(FieldConversionError, ValueError):
    """Raw value is not the canonical decimal rendering of an integer."""


class InvalidTimestampError(FieldConversionError, ValueError):
    """Raw value is not a valid local timestamp."""
