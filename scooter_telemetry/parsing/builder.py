"""Turn validated raw fields into a parsed record."""

from typing import Any, Dict, Sequence, Tuple

from scooter_telemetry.parsing.converters import convert
from scooter_telemetry.parsing.errors import FieldConversionError
from scooter_telemetry.schemas.packets import FieldKind, PacketFieldDefinition

Record = Dict[str, Any]


def resolve_field(
    definitions: Sequence[PacketFieldDefinition],
    fields: Sequence[str],
    index: int,
) -> Tuple[str, Any]:
    """Record key and converted value for the field at index.

    FIXED fields are keyed by their definition name and convert their own raw
    value. PAIRED fields are keyed by their own raw value and convert the raw
    value of the field before them.
    """
    definition = definitions[index]

    if definition.kind == FieldKind.PAIRED:
        key, raw = fields[index], fields[index - 1]
    else:
        key, raw = definition.name, fields[index]

    try:
        return key, convert(definition.value_format, raw)
    except FieldConversionError as e:
        e.field_name = definition.name
        raise


def build_record(definitions: Sequence[PacketFieldDefinition], fields: Sequence[str]) -> Record:
    """Build the record for one validated line.

    Args:
        definitions: Flattened definitions, one per raw field
        fields: Raw fields of the line

    Returns:
        Mapping of record key to value for every definition marked include_in_record

    Raises:
        FieldConversionError: If any included field fails conversion; no partial record is returned
    """
    record: Record = {}
    for index, definition in enumerate(definitions):
        if definition.include_in_record:
            key, value = resolve_field(definitions, fields, index)
            record[key] = value
    return record
