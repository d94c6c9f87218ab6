"""Built-in packet schemas and the registry that looks them up by packet type."""

from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from scooter_telemetry.parsing.errors import UnknownPacketTypeError
from scooter_telemetry.schemas.packets import (
    FieldKind,
    PacketFieldDefinition,
    PacketSchema,
    ValueFormat,
)

# Layout shared by DeviceInfo and PositionUpdate
_DEVICE_FIELDS: Tuple[PacketFieldDefinition, ...] = (
    PacketFieldDefinition(name="type", min_length=2, max_length=3),
    PacketFieldDefinition(name="instruction", min_length=1, max_length=20),
    PacketFieldDefinition(
        name="imei",
        min_length=15,
        max_length=15,
        value_format=ValueFormat.LARGE_INTEGER_STRING,
        include_in_record=True,
    ),
    PacketFieldDefinition(
        name="batteryLevel",
        min_length=1,
        max_length=3,
        value_format=ValueFormat.PERCENT,
        include_in_record=True,
    ),
    PacketFieldDefinition(
        name="odometer",
        min_length=1,
        max_length=6,
        value_format=ValueFormat.KILOMETRES,
        include_in_record=True,
    ),
    PacketFieldDefinition(
        name="time",
        min_length=19,
        max_length=19,
        value_format=ValueFormat.TIMESTAMP,
        include_in_record=True,
    ),
    PacketFieldDefinition(name="countNumber", min_length=4, max_length=4),
)

_ERROR_FIELDS: Tuple[PacketFieldDefinition, ...] = (
    PacketFieldDefinition(name="type", min_length=2, max_length=3),
    PacketFieldDefinition(name="instruction", min_length=1, max_length=5),
    PacketFieldDefinition(
        name="imei",
        min_length=15,
        max_length=15,
        value_format=ValueFormat.INTEGER_STRING,
        include_in_record=True,
    ),
    PacketFieldDefinition(
        name="errorCount",
        min_length=1,
        max_length=1,
        value_format=ValueFormat.INTEGER,
        children=(
            PacketFieldDefinition(name="errorCode", min_length=1, max_length=2),
            # Record key is the error name, value is the preceding error code
            PacketFieldDefinition(
                name="errorNameOrValue",
                kind=FieldKind.PAIRED,
                min_length=1,
                max_length=20,
                value_format=ValueFormat.INTEGER,
                include_in_record=True,
            ),
        ),
    ),
    PacketFieldDefinition(
        name="time",
        min_length=19,
        max_length=19,
        value_format=ValueFormat.TIMESTAMP,
        include_in_record=True,
    ),
    PacketFieldDefinition(name="countNumber", min_length=4, max_length=4),
)


class SchemaRegistry:
    """Read-only mapping from packet type to PacketSchema."""

    def __init__(self, schemas: Iterable[PacketSchema]):
        by_type: Dict[str, PacketSchema] = {}
        for schema in schemas:
            if schema.packet_type in by_type:
                raise ValueError(f"Duplicate schema for packet type {schema.packet_type!r}")
            by_type[schema.packet_type] = schema
        self._schemas: Mapping[str, PacketSchema] = MappingProxyType(by_type)

    @classmethod
    def from_dict(cls, data: Mapping[str, List[Dict[str, Any]]]) -> "SchemaRegistry":
        """Build a registry from plain data, e.g. a loaded JSON document.

        Args:
            data: Packet type -> list of field definition dicts

        Returns:
            SchemaRegistry

        Raises:
            pydantic.ValidationError: If any definition is malformed
        """
        return cls(
            PacketSchema(packet_type=packet_type, definitions=definitions)
            for packet_type, definitions in data.items()
        )

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Plain-data form accepted by from_dict."""
        return {
            packet_type: [d.model_dump(mode="json") for d in schema.definitions]
            for packet_type, schema in self._schemas.items()
        }

    def get(self, packet_type: str) -> PacketSchema:
        """Schema for packet_type.

        Raises:
            UnknownPacketTypeError: If no schema is registered under that name
        """
        try:
            return self._schemas[packet_type]
        except KeyError:
            raise UnknownPacketTypeError(packet_type) from None

    def restrict(self, packet_types: Iterable[str]) -> "SchemaRegistry":
        """Registry holding only the named packet types."""
        return SchemaRegistry(self.get(packet_type) for packet_type in packet_types)

    @property
    def packet_types(self) -> Tuple[str, ...]:
        return tuple(self._schemas)

    def __contains__(self, packet_type: object) -> bool:
        return packet_type in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self) -> str:
        return f"SchemaRegistry({list(self._schemas)!r})"


DEFAULT_REGISTRY = SchemaRegistry(
    [
        PacketSchema(packet_type="DeviceInfo", definitions=_DEVICE_FIELDS),
        PacketSchema(packet_type="PositionUpdate", definitions=_DEVICE_FIELDS),
        PacketSchema(packet_type="Error", definitions=_ERROR_FIELDS),
    ]
)
