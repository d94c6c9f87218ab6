"""Packet field definitions and packet schemas."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldKind(str, Enum):
    """How a field contributes its key to the parsed record."""

    FIXED = "fixed"  # Key is the definition name
    PAIRED = "paired"  # Key is this field's raw value, value comes from the field before it


class ValueFormat(str, Enum):
    """Closed set of conversions applied to a raw field."""

    RAW = "raw"  # Raw string, unchanged
    INTEGER = "integer"  # int within the safe integer range
    INTEGER_STRING = "integer_string"  # Validated integer rendered back to str
    LARGE_INTEGER_STRING = "large_integer_string"  # Unbounded integer rendered back to str
    PERCENT = "percent"  # "<n> %"
    KILOMETRES = "kilometres"  # "<n> km"
    TIMESTAMP = "timestamp"  # Local-time datetime


class PacketFieldDefinition(BaseModel):
    """One column of a packet line.

    When ``children`` is non-empty, this field's raw value is read as a repeat
    count and the children are repeated that many times right after it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Record key (FIXED) or descriptive label (PAIRED)")
    kind: FieldKind = Field(FieldKind.FIXED, description="How the record key is resolved")
    min_length: int = Field(..., description="Minimum raw length (inclusive)", ge=0)
    max_length: int = Field(..., description="Maximum raw length (inclusive)", ge=0)
    value_format: ValueFormat = Field(ValueFormat.RAW, description="Conversion for the value")
    children: Tuple["PacketFieldDefinition", ...] = Field(
        default=(), description="Repeatable group driven by this field's value"
    )
    include_in_record: bool = Field(False, description="Emit this field in the parsed record")

    @model_validator(mode="after")
    def _check_bounds(self) -> "PacketFieldDefinition":
        if self.min_length > self.max_length:
            raise ValueError(
                f"Field {self.name!r}: min_length {self.min_length} > max_length {self.max_length}"
            )
        if self.kind == FieldKind.PAIRED and self.children:
            raise ValueError(f"Field {self.name!r}: paired fields cannot drive a repeat group")
        _check_group(self.children, self.name)
        return self

    @property
    def is_repeat_driver(self) -> bool:
        return bool(self.children)


def _check_group(definitions: Tuple[PacketFieldDefinition, ...], owner: str) -> None:
    """A PAIRED field needs a partner before it in the same group."""
    if definitions and definitions[0].kind == FieldKind.PAIRED:
        raise ValueError(f"{owner}: paired field {definitions[0].name!r} has no preceding field")


PacketFieldDefinition.model_rebuild()


class PacketSchema(BaseModel):
    """Ordered field definitions for one packet type."""

    model_config = ConfigDict(frozen=True)

    packet_type: str = Field(..., description="Packet-type name as it appears in field 1")
    definitions: Tuple[PacketFieldDefinition, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_fields(self) -> "PacketSchema":
        _check_group(self.definitions, self.packet_type)
        return self

    def get_field(self, name: str) -> Optional[PacketFieldDefinition]:
        """Top-level definition by name, or None."""
        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None
