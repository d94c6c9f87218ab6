"""IO utilities for reading packet logs and writing parsed records."""

import json
from pathlib import Path
from typing import Any, Dict, List
import orjson

from scooter_telemetry.conf.settings import settings
from scooter_telemetry.schemas.registry import SchemaRegistry


def read_payload(file_path: str | Path, encoding: str | None = None) -> str:
    """Read a whole packet log into memory.

    Args:
        file_path: Path to the packet log
        encoding: Text encoding (defaults to settings.input_encoding)

    Returns:
        File contents as a string; undecodable bytes become U+FFFD so only
        their line is rejected
    """
    with open(file_path, "r", encoding=encoding or settings.input_encoding,
              errors="replace", newline="") as f:
        return f.read()


def dumps_records(records: List[Dict[str, Any]], pretty: bool | None = None) -> bytes:
    """Serialize parsed records to JSON bytes.

    Aware datetimes keep their local UTC offset.
    """
    if pretty is None:
        pretty = settings.json_pretty
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(records, option=option)


def save_json(data: Any, file_path: str | Path, pretty: bool = True) -> None:
    """Save data as JSON file.

    Args:
        data: Data to save
        file_path: Output file path
        pretty: Whether to pretty-print (indent)
    """
    path_obj = Path(file_path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)

    if pretty:
        with open(path_obj, "w") as f:
            json.dump(data, f, indent=2, default=str)
    else:
        with open(path_obj, "wb") as f:
            f.write(orjson.dumps(data))


def load_json(file_path: str | Path) -> Any:
    """Load JSON file."""
    with open(file_path, "rb") as f:
        return orjson.loads(f.read())


def load_registry(file_path: str | Path) -> SchemaRegistry:
    """Load a schema registry from a JSON file.

    The file maps packet-type names to lists of field definitions, e.g.
    ``{"DeviceInfo": [{"name": "type", "min_length": 2, "max_length": 3}, ...]}``.

    Raises:
        ValueError: If the file is not valid JSON or does not describe valid schemas
    """
    data = load_json(file_path)
    if not isinstance(data, dict):
        raise ValueError(f"Schema file must hold a JSON object, got {type(data).__name__}")
    return SchemaRegistry.from_dict(data)
