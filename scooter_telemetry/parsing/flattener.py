"""Expand repeatable field groups into a per-line field definition list."""

import re
from typing import Iterable, List, Sequence

from scooter_telemetry.parsing.errors import InvalidRepeatCountError
from scooter_telemetry.schemas.packets import PacketFieldDefinition

# Plain decimal, optionally signed so negatives get their own message
_REPEAT_COUNT = re.compile(r"-?[0-9]+")


def _read_repeat_count(fields: Sequence[str], index: int, definition: PacketFieldDefinition) -> int:
    if index >= len(fields):
        raise InvalidRepeatCountError(
            f"Missing repeat count for {definition.name!r} at field {index}",
            field_name=definition.name,
        )

    raw = fields[index]
    if not _REPEAT_COUNT.fullmatch(raw):
        raise InvalidRepeatCountError(
            f"Invalid repeat count for {definition.name!r}: {raw!r}",
            field_name=definition.name,
        )

    count = int(raw)

    if count < 0:
        raise InvalidRepeatCountError(
            f"Negative repeat count for {definition.name!r}: {count}",
            field_name=definition.name,
        )
    return count


def _flatten_into(
    output: List[PacketFieldDefinition],
    definitions: Iterable[PacketFieldDefinition],
    fields: Sequence[str],
) -> None:
    for definition in definitions:
        output.append(definition)

        if definition.children:
            # Count sits at the slot just appended, which is offset by any
            # earlier expansion, so index by output length, not schema position.
            count = _read_repeat_count(fields, len(output) - 1, definition)
            for _ in range(count):
                if len(output) > len(fields):
                    # Already longer than the line; the field count check rejects it
                    return
                _flatten_into(output, definition.children, fields)


def flatten_field_definitions(
    definitions: Iterable[PacketFieldDefinition],
    fields: Sequence[str],
) -> List[PacketFieldDefinition]:
    """Resolve repeat groups against one line's raw fields.

    Args:
        definitions: Schema definitions in order
        fields: Raw fields of the line

    Returns:
        One definition per expected raw field

    Raises:
        InvalidRepeatCountError: If a repeat count is missing, negative or not a number
    """
    output: List[PacketFieldDefinition] = []
    _flatten_into(output, definitions, fields)
    return output
