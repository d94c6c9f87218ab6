"""Utility modules for scooter telemetry parsing."""

from .logging_utils import setup_logger, get_logger
from .io_utils import (
    read_payload,
    dumps_records,
    save_json,
    load_json,
    load_registry,
)
from .frames import records_to_dataframe

__all__ = [
    # Logging
    "setup_logger",
    "get_logger",
    # IO
    "read_payload",
    "dumps_records",
    "save_json",
    "load_json",
    "load_registry",
    # Frames
    "records_to_dataframe",
]
