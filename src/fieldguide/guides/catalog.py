"""Curated guide catalog and generic default entries.

The curated catalog maps ``node type -> field key -> Guide``. Keys are
matched exactly and case-sensitively: entries are authored against the field
keys a node schema defines, not against display labels. Node types may also
carry pseudo-entries such as ``_connection_info`` documenting an OAuth
connection flow; they are looked up like any other key.
"""

import logging
from collections.abc import Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, Union

from fieldguide.core.models import Guide
from fieldguide.guides.data_loader import (
    CURATED_CATALOG_SCHEMA,
    GUIDE_MAP_SCHEMA,
    load_data_file,
    packaged_path,
)

logger = logging.getLogger(__name__)

CURATED_GUIDES_FILE = "curated_guides.yaml"
DEFAULT_GUIDES_FILE = "default_guides.yaml"

# Guide type used when nothing more specific applies
DEFAULT_GUIDE_TYPE = "custom"


def _build_guide_map(raw: Mapping[str, Any]) -> Mapping[str, Guide]:
    return MappingProxyType({key: Guide.model_validate(value) for key, value in raw.items()})


class GuideCatalog:
    """Read-only lookup of author-written guides."""

    def __init__(self, entries: Mapping[str, Mapping[str, Guide]]):
        self._entries: Mapping[str, Mapping[str, Guide]] = MappingProxyType(
            {node_type: MappingProxyType(dict(fields)) for node_type, fields in entries.items()}
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "GuideCatalog":
        """Load a catalog from a YAML file shaped ``nodeType -> fieldKey -> guide``.

        Raises:
            CatalogLoadError: If the file is unreadable or malformed
        """
        raw = load_data_file(path, CURATED_CATALOG_SCHEMA)
        entries = {node_type: _build_guide_map(fields) for node_type, fields in raw.items()}
        logger.info(
            "Loaded curated guide catalog",
            extra={"phase": "catalog_load", "path": str(path), "node_types": len(entries)},
        )
        return cls(entries)

    def lookup(self, node_type: Any, field_key: Any) -> Optional[Guide]:
        """Return the curated guide for an exact (node type, field key) pair, or None."""
        if not isinstance(node_type, str) or not isinstance(field_key, str):
            return None
        fields = self._entries.get(node_type)
        if fields is None:
            return None
        return fields.get(field_key)

    def has_entry(self, node_type: Any, field_key: Any) -> bool:
        return self.lookup(node_type, field_key) is not None

    def node_types(self) -> list[str]:
        return sorted(self._entries)

    def field_keys(self, node_type: str) -> list[str]:
        return list(self._entries.get(node_type, {}))

    def __iter__(self) -> Iterator[tuple[str, str, Guide]]:
        for node_type, fields in self._entries.items():
            for field_key, guide in fields.items():
                yield node_type, field_key, guide

    def __len__(self) -> int:
        return sum(len(fields) for fields in self._entries.values())


@lru_cache(maxsize=1)
def load_default_catalog() -> GuideCatalog:
    """The catalog shipped with the package, loaded once per process."""
    return GuideCatalog.from_file(packaged_path(CURATED_GUIDES_FILE))


@lru_cache(maxsize=1)
def load_default_guides() -> Mapping[str, Guide]:
    """Generic per-type fallback guides (api_key, url, credential, token, endpoint, custom)."""
    raw = load_data_file(packaged_path(DEFAULT_GUIDES_FILE), GUIDE_MAP_SCHEMA)
    return _build_guide_map(raw)


def get_default_guide(guide_type: str) -> Guide:
    """Return the generic fallback guide for a coarse guide type.

    Unknown types get the ``custom`` entry.
    """
    guides = load_default_guides()
    return guides.get(guide_type) or guides[DEFAULT_GUIDE_TYPE]


def has_curated_entry(node_type: Any, field_key: Any) -> bool:
    """Check whether the packaged catalog has a guide for this exact field."""
    return load_default_catalog().has_entry(node_type, field_key)


def get_curated_guide(node_type: Any, field_key: Any) -> Optional[Guide]:
    """Look up a guide in the packaged catalog."""
    return load_default_catalog().lookup(node_type, field_key)
