"""Scooter telemetry packet parsing."""

from .parsing import (
    PacketParser,
    ParseStats,
    get_device_information,
    parse_device_info_only,
)
from .schemas import DEFAULT_REGISTRY, PacketFieldDefinition, PacketSchema, SchemaRegistry

__version__ = "0.1.0"

__all__ = [
    "PacketParser",
    "ParseStats",
    "get_device_information",
    "parse_device_info_only",
    "DEFAULT_REGISTRY",
    "PacketFieldDefinition",
    "PacketSchema",
    "SchemaRegistry",
]
