"""Guide coverage audit for node schemas.

Resolves every field of every node in a node schema document and reports
which source answered it. Fields that only reach the catch-all generic guide
are listed as needing a curated entry or better help text.

Schema document shape::

    {"nodes": [{"type": "slack_message",
                "fields": [{"key": "webhookUrl", "label": "Webhook URL",
                            "type": "text", "placeholder": "...",
                            "helpText": "..."}]}]}
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Optional, Union

import jsonschema
import yaml
from jsonschema import Draft7Validator
from pydantic import BaseModel, Field

from fieldguide.core.exceptions import NodeSchemaError
from fieldguide.core.models import FieldDescriptor
from fieldguide.guides.data_loader import format_error_path
from fieldguide.guides.generator import GENERIC_CATEGORY
from fieldguide.guides.resolver import GuideResolver, get_default_resolver

logger = logging.getLogger(__name__)

NODE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["nodes"],
    "properties": {
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["type"],
                "properties": {
                    "type": {"type": "string", "minLength": 1},
                    "fields": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["key"],
                            "properties": {"key": {"type": "string"}},
                        },
                    },
                },
            },
        }
    },
}


class FieldAuditEntry(BaseModel):
    """How one field was resolved."""

    node_type: str
    field_key: str
    label: str = ""
    source: str
    category: Optional[str] = None
    title: str


class AuditReport(BaseModel):
    """Coverage summary of a node schema."""

    total_nodes: int = 0
    total_fields: int = 0
    by_source: dict[str, int] = Field(default_factory=dict)
    by_category: dict[str, int] = Field(default_factory=dict)
    entries: list[FieldAuditEntry] = Field(default_factory=list)
    needing_guides: list[FieldAuditEntry] = Field(default_factory=list)

    @property
    def coverage(self) -> float:
        """Share of fields that got more than the catch-all guide."""
        if not self.total_fields:
            return 1.0
        return 1 - len(self.needing_guides) / self.total_fields

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump()
        data["coverage"] = round(self.coverage, 4)
        return data


def validate_node_schema(data: Any) -> None:
    """Validate a node schema document.

    Raises:
        NodeSchemaError: If the structure is wrong or a node repeats a field key
    """
    validator = Draft7Validator(NODE_SCHEMA)
    try:
        validator.check_schema(NODE_SCHEMA)
    except jsonschema.SchemaError as e:
        raise RuntimeError(f"Schema definition error: {e}") from e

    errors = list(validator.iter_errors(data))
    if errors:
        error = errors[0]
        raise NodeSchemaError(error.message, path=format_error_path(list(error.absolute_path)))

    for node_index, node in enumerate(data["nodes"]):
        seen: set[str] = set()
        for field_index, field in enumerate(node.get("fields", [])):
            key = field["key"]
            if key in seen:
                raise NodeSchemaError(
                    f"Duplicate field key '{key}' in node '{node['type']}'",
                    path=f"nodes[{node_index}].fields[{field_index}].key",
                )
            seen.add(key)


def load_node_schema(path: Union[str, Path]) -> dict[str, Any]:
    """Read a node schema document from a JSON or YAML file.

    Raises:
        NodeSchemaError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise NodeSchemaError(f"Cannot read file {path}: {e}") from e

    try:
        data = json.loads(content) if path.suffix.lower() == ".json" else yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise NodeSchemaError(f"Cannot parse {path.name}: {e}") from e

    validate_node_schema(data)
    return data


def _needs_guide(entry: FieldAuditEntry) -> bool:
    return entry.source == "default" or (entry.source == "generator" and entry.category == GENERIC_CATEGORY)


def audit_node_schema(schema: Any, resolver: Optional[GuideResolver] = None) -> AuditReport:
    """Resolve every field in a node schema and summarize where guides came from.

    Args:
        schema: Node schema document (validated here)
        resolver: Resolver to use; defaults to the packaged data

    Returns:
        AuditReport with per-source and per-category counts
    """
    validate_node_schema(schema)
    resolver = resolver or get_default_resolver()

    entries: list[FieldAuditEntry] = []
    for node in schema["nodes"]:
        node_type = node["type"]
        for field in node.get("fields", []):
            descriptor = FieldDescriptor.coerce({**field, "nodeType": node_type})
            resolution = resolver.resolve(descriptor)
            entries.append(
                FieldAuditEntry(
                    node_type=node_type,
                    field_key=descriptor.key,
                    label=descriptor.label,
                    source=resolution.source,
                    category=resolution.category,
                    title=resolution.guide.title,
                )
            )

    by_source = Counter(entry.source for entry in entries)
    by_category = Counter(entry.category for entry in entries if entry.category)
    report = AuditReport(
        total_nodes=len(schema["nodes"]),
        total_fields=len(entries),
        by_source=dict(sorted(by_source.items())),
        by_category=dict(sorted(by_category.items())),
        entries=entries,
        needing_guides=[entry for entry in entries if _needs_guide(entry)],
    )
    logger.info(
        "Audited node schema",
        extra={"phase": "audit", "fields": report.total_fields, "needing_guides": len(report.needing_guides)},
    )
    return report
