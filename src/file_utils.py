"""
JSON documents on disk for the article orchestrator.

Declaration and state files are both JSON objects; anything else is
reported as a ValidationError naming the file.
"""
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.errors import ValidationError


def load_json_object(filepath: str, default: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """
    Read a JSON object from disk.

    Args:
        filepath: Path to the JSON file
        default: Returned when the file does not exist

    Returns:
        The decoded object, or `default` for a missing file

    Raises:
        ValidationError: If the file is not valid JSON or not an object
    """
    if not os.path.exists(filepath):
        return default

    with open(filepath, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"{filepath}: invalid JSON ({exc})") from exc

    if not isinstance(data, dict):
        raise ValidationError(f"{filepath}: expected a JSON object, got {type(data).__name__}")
    return data


def write_json_object(filepath: str, data: Dict[str, Any]) -> None:
    """Write a JSON object, creating the parent directory when needed."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def utc_timestamp() -> str:
    """Current UTC time, ISO formatted with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
