"""Guide sources and the resolution engine.

Resolution order: curated catalog, then parsed help text, then the
heuristic generator. See ``resolver`` for details.
"""

from .audit import AuditReport, audit_node_schema, load_node_schema
from .catalog import GuideCatalog, get_curated_guide, get_default_guide, has_curated_entry, load_default_catalog
from .generator import CLASSIFIER_RULES, HeuristicGuideGenerator, classify, generate_guide
from .help_text_parser import HelpTextParser, looks_step_like, parse_help_text
from .resolver import GuideResolver, detect_guide_type, get_default_resolver, guide_question, resolve
from .usage import get_usage_guide, list_usage_node_types

__all__ = [
    "CLASSIFIER_RULES",
    "AuditReport",
    "GuideCatalog",
    "GuideResolver",
    "HelpTextParser",
    "HeuristicGuideGenerator",
    "audit_node_schema",
    "classify",
    "detect_guide_type",
    "generate_guide",
    "get_curated_guide",
    "get_default_guide",
    "get_default_resolver",
    "get_usage_guide",
    "guide_question",
    "has_curated_entry",
    "list_usage_node_types",
    "load_default_catalog",
    "load_node_schema",
    "looks_step_like",
    "parse_help_text",
    "resolve",
]
