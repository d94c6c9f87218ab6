"""Packet schemas for scooter telemetry."""

from .packets import FieldKind, ValueFormat, PacketFieldDefinition, PacketSchema
from .registry import SchemaRegistry, DEFAULT_REGISTRY

__all__ = [
    "FieldKind",
    "ValueFormat",
    "PacketFieldDefinition",
    "PacketSchema",
    "SchemaRegistry",
    "DEFAULT_REGISTRY",
]
