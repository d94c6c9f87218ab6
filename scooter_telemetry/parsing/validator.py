"""Structural checks on a tokenized line against its flattened definitions."""

from typing import Sequence

from scooter_telemetry.parsing.errors import FieldCountMismatchError, FieldLengthError
from scooter_telemetry.schemas.packets import PacketFieldDefinition


def check_field_count(definitions: Sequence[PacketFieldDefinition], fields: Sequence[str]) -> None:
    """Raise FieldCountMismatchError unless there is exactly one field per definition."""
    if len(definitions) != len(fields):
        raise FieldCountMismatchError(expected=len(definitions), actual=len(fields))


def check_field_lengths(definitions: Sequence[PacketFieldDefinition], fields: Sequence[str]) -> None:
    """Raise FieldLengthError for the first field outside its [min, max] length."""
    for index, (definition, raw) in enumerate(zip(definitions, fields)):
        if not definition.min_length <= len(raw) <= definition.max_length:
            raise FieldLengthError(
                f"Field {index} ({definition.name!r}) has length {len(raw)}, "
                f"expected {definition.min_length}-{definition.max_length}",
                field_name=definition.name,
            )


def validate_fields(definitions: Sequence[PacketFieldDefinition], fields: Sequence[str]) -> None:
    """Run the field count check, then the length check."""
    check_field_count(definitions, fields)
    check_field_lengths(definitions, fields)
