"""Per-node usage guides (what a node does, reads and writes)."""

from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Optional

from fieldguide.core.models import NodeUsageGuide
from fieldguide.guides.data_loader import USAGE_GUIDE_SCHEMA, load_data_file, packaged_path

NODE_USAGE_GUIDES_FILE = "node_usage_guides.yaml"


@lru_cache(maxsize=1)
def load_usage_guides() -> Mapping[str, NodeUsageGuide]:
    raw = load_data_file(packaged_path(NODE_USAGE_GUIDES_FILE), USAGE_GUIDE_SCHEMA)
    return MappingProxyType({node_type: NodeUsageGuide.model_validate(doc) for node_type, doc in raw.items()})


def get_usage_guide(node_type: Any) -> Optional[NodeUsageGuide]:
    """Usage guide for an exact node type, or None."""
    if not isinstance(node_type, str):
        return None
    return load_usage_guides().get(node_type)


def list_usage_node_types() -> list[str]:
    return sorted(load_usage_guides())
