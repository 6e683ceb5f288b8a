"""Guide resolution: pick exactly one guide for a field descriptor.

Sources are consulted in strict priority order:

1. the curated catalog, by exact (node type, field key)
2. the field's free help text, if it passes the parser's detection gate
3. the heuristic generator, which always produces a guide

A source whose guide has no steps counts as absent. If even the generator
yields nothing (possible only with an injected generator) the generic
default entry for the field's coarse type is used.

The question label and the final security flag are derived separately from
the winning guide's steps, using their own cruder keyword checks.
"""

import logging
from functools import lru_cache
from typing import Any, Optional, Protocol

from fieldguide.core.models import FieldDescriptor, Guide, GuideResolution
from fieldguide.core.security_utils import merge_security_warning
from fieldguide.core.text_utils import contains_any, lower_text
from fieldguide.guides.catalog import GuideCatalog, get_default_guide, load_default_catalog
from fieldguide.guides.generator import HeuristicGuideGenerator
from fieldguide.guides.help_text_parser import HelpTextParser

logger = logging.getLogger(__name__)

GENERIC_QUESTION = "How to get this value?"


class GuideGenerator(Protocol):
    def generate(self, descriptor: Any) -> tuple[Guide, str]: ...


def detect_guide_type(descriptor: Any) -> str:
    """Coarse guide type used to pick a generic default entry.

    Returns one of ``api_key``, ``url``, ``token``, ``endpoint``,
    ``credential`` or ``custom``.
    """
    field = FieldDescriptor.coerce(descriptor)
    text = lower_text(f"{field.key} {field.label}")
    if "slack" in text and contains_any(text, ("bot token", "bot_token", "bottoken")):
        return "custom"
    if contains_any(text, ("api key", "apikey", "api_key")):
        return "api_key"
    if contains_any(text, ("url", "endpoint")):
        return "url"
    if contains_any(text, ("token", "bearer")):
        return "token"
    if "endpoint" in text:
        return "endpoint"
    if contains_any(text, ("credential", "password", "secret", "auth")):
        return "credential"
    return "custom"


def guide_question(descriptor: Any) -> str:
    """Question label from simple keyword sniffing of the field key and label.

    Examples:
        >>> guide_question({"key": "apiKey", "label": "API Key"})
        'How to get API key?'
        >>> guide_question({"label": "Anything"})
        'How to get this value?'
    """
    field = FieldDescriptor.coerce(descriptor)
    text = lower_text(f"{field.key} {field.label}")
    if contains_any(text, ("api key", "apikey")):
        return "How to get API key?"
    if contains_any(text, ("url", "endpoint")):
        return "How to get URL?"
    if contains_any(text, ("token", "bearer")):
        return "How to get Token?"
    if contains_any(text, ("credential", "password", "secret")):
        return "How to get Credentials?"
    return GENERIC_QUESTION


class GuideResolver:
    """Resolve field descriptors against a catalog, a parser and a generator.

    Args:
        catalog: Curated guides; defaults to the packaged catalog
        parser: Free-text help parser
        generator: Terminal fallback generator
    """

    def __init__(
        self,
        catalog: Optional[GuideCatalog] = None,
        parser: Optional[HelpTextParser] = None,
        generator: Optional[GuideGenerator] = None,
    ):
        self.catalog = catalog if catalog is not None else load_default_catalog()
        self.parser = parser or HelpTextParser()
        self.generator = generator or HeuristicGuideGenerator()

    def has_curated_entry(self, node_type: Any, field_key: Any) -> bool:
        return self.catalog.has_entry(node_type, field_key)

    def resolve(self, descriptor: Any) -> GuideResolution:
        """Resolve a descriptor to a guide and a question label.

        Never raises for malformed descriptors; every attribute that is not a
        string is read as empty.
        """
        field = FieldDescriptor.coerce(descriptor)
        guide, source, category = self._select_guide(field)

        security_warning = merge_security_warning(guide.security_warning, guide.title, category)
        question_label = guide.title.strip() or guide_question(field)

        logger.debug(
            "Resolved field guide",
            extra={
                "phase": "resolve",
                "node_type": field.node_type,
                "field_key": field.key,
                "source": source,
                "category": category,
            },
        )
        return GuideResolution(
            guide=guide.model_copy(update={"security_warning": security_warning}),
            question_label=question_label,
            source=source,
            category=category,
            security_warning=security_warning,
        )

    def _select_guide(self, field: FieldDescriptor) -> tuple[Guide, str, Optional[str]]:
        curated = self.catalog.lookup(field.node_type, field.key)
        if curated is not None and curated.has_steps():
            return curated, "catalog", None

        if field.help_text and self.parser.accepts(field.help_text):
            parsed = self.parser.parse(field.help_text, field.label)
            if parsed is not None and parsed.has_steps():
                return parsed, "help_text", None

        generated, category = self.generator.generate(field)
        if generated.has_steps():
            return generated, "generator", category

        guide_type = detect_guide_type(field)
        logger.warning(
            "No guide source produced steps; using generic default",
            extra={"phase": "resolve", "field_key": field.key, "guide_type": guide_type},
        )
        return get_default_guide(guide_type), "default", None


@lru_cache(maxsize=1)
def get_default_resolver() -> GuideResolver:
    """Resolver over the packaged data, built once per process."""
    return GuideResolver()


def resolve(descriptor: Any) -> GuideResolution:
    """Resolve a field descriptor with the packaged catalog and default rules."""
    return get_default_resolver().resolve(descriptor)
