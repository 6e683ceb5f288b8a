"""Loading and validation of the YAML guide data files.

All literal guide text ships as YAML next to this module (``data/``). Each
file is parsed once, checked against a JSON Schema and converted into
immutable models; callers cache the result so the files are read at most
once per process.
"""

import logging
from pathlib import Path
from typing import Any, Union

import jsonschema
import yaml
from jsonschema import Draft7Validator

from fieldguide.core.exceptions import CatalogLoadError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"

# Steps may be authored as a YAML list or as one literal block (one step per line)
_STEPS_SCHEMA: dict[str, Any] = {
    "oneOf": [
        {"type": "string"},
        {"type": "array", "items": {"type": "string"}},
    ]
}

GUIDE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["title", "steps"],
    "properties": {
        "title": {"type": "string"},
        "steps": _STEPS_SCHEMA,
        "url": {"type": "string"},
        "example": {"type": "string"},
        "securityWarning": {"type": "boolean"},
    },
    "additionalProperties": False,
}

GUIDE_MAP_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": GUIDE_SCHEMA,
}

CURATED_CATALOG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": GUIDE_MAP_SCHEMA,
}

USAGE_GUIDE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "required": ["overview"],
        "properties": {
            "overview": {"type": "string"},
            "inputs": {"type": "array", "items": {"type": "string"}},
            "outputs": {"type": "array", "items": {"type": "string"}},
            "example": {"type": "string"},
            "tips": {"type": "array", "items": {"type": "string"}},
        },
        "additionalProperties": False,
    },
}


def format_error_path(path: list) -> str:
    """Format a jsonschema path as dotted keys with [index] for lists."""
    if not path:
        return "root"
    parts: list[str] = []
    for part in path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        elif parts:
            parts.append(f".{part}")
        else:
            parts.append(str(part))
    return "".join(parts)


def validate_document(data: Any, schema: dict[str, Any], source: str) -> None:
    """Validate a parsed data document against a schema.

    Args:
        data: Parsed YAML/JSON content
        schema: JSON Schema (Draft 7) to check against
        source: File name used in the error message

    Raises:
        CatalogLoadError: If the document does not match the schema
    """
    validator = Draft7Validator(schema)
    try:
        validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise RuntimeError(f"Schema definition error: {e}") from e

    errors = list(validator.iter_errors(data))
    if errors:
        error = errors[0]
        location = format_error_path(list(error.absolute_path))
        raise CatalogLoadError(f"Invalid guide data at {location}: {error.message}", path=source)


def read_yaml(path: Union[str, Path]) -> Any:
    """Read a YAML file, wrapping I/O and syntax problems in CatalogLoadError."""
    path = Path(path)
    logger.debug("Reading guide data", extra={"phase": "data_load", "path": str(path)})
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogLoadError("Cannot read guide data file", path=str(path), original_error=e) from e
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise CatalogLoadError("Guide data file is not valid YAML", path=str(path), original_error=e) from e
    # An empty file is an empty mapping
    return {} if data is None else data


def packaged_path(name: str) -> Path:
    """Path of a data file shipped inside the package."""
    return DATA_DIR / name


def load_data_file(path: Union[str, Path], schema: dict[str, Any]) -> Any:
    """Load and validate a data file.

    Args:
        path: Location of the YAML file
        schema: Schema the content must satisfy

    Returns:
        The parsed, validated document
    """
    path = Path(path)
    data = read_yaml(path)
    validate_document(data, schema, source=str(path))
    logger.debug(
        "Guide data validated",
        extra={"phase": "data_load", "path": str(path), "entries": len(data) if isinstance(data, dict) else 0},
    )
    return data
