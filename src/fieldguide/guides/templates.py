"""Category templates for generated guides.

Templates live in ``data/generated_guides.yaml``. Text may contain
``{{name}}`` placeholders that builders fill in from field metadata.
Placeholders with anything other than word characters inside the braces
(``{{input.name}}``, ``{{$json.items}}``) are literal text meant for the
user and are left untouched.
"""

import logging
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Optional

from fieldguide.core.exceptions import TemplateRenderError
from fieldguide.core.models import Guide
from fieldguide.guides.data_loader import GUIDE_MAP_SCHEMA, load_data_file, packaged_path

logger = logging.getLogger(__name__)

GENERATED_GUIDES_FILE = "generated_guides.yaml"

_VARIABLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")


@lru_cache(maxsize=1)
def load_templates() -> Mapping[str, Mapping[str, Any]]:
    """Raw template documents keyed by template name, loaded once."""
    return load_data_file(packaged_path(GENERATED_GUIDES_FILE), GUIDE_MAP_SCHEMA)


def template_names() -> list[str]:
    return sorted(load_templates())


def _template_texts(template: Mapping[str, Any]) -> list[str]:
    texts = [template["title"]]
    steps = template["steps"]
    texts.extend([steps] if isinstance(steps, str) else steps)
    for key in ("url", "example"):
        if key in template:
            texts.append(template[key])
    return texts


def required_variables(template: Mapping[str, Any]) -> set[str]:
    """Names of all ``{{name}}`` placeholders a template uses."""
    names: set[str] = set()
    for text in _template_texts(template):
        names.update(_VARIABLE_PATTERN.findall(text))
    return names


def fill_placeholders(text: str, variables: Mapping[str, str]) -> str:
    """Substitute ``{{name}}`` placeholders in one pass.

    Substituted values are not scanned again, so a label that itself
    contains ``{{...}}`` is shown as typed.
    """
    return _VARIABLE_PATTERN.sub(lambda m: variables.get(m.group(1), m.group(0)), text)


def _optional(text: Optional[str], variables: Mapping[str, str]) -> Optional[str]:
    if text is None:
        return None
    # A placeholder that renders to nothing means the value is absent
    return fill_placeholders(text, variables) or None


def render_template(name: str, **variables: str) -> Guide:
    """Render a named template into a Guide.

    Args:
        name: Template name from ``generated_guides.yaml``
        **variables: Placeholder values; extra values are ignored

    Returns:
        The rendered Guide

    Raises:
        KeyError: If no template has this name
        TemplateRenderError: If a placeholder has no value
    """
    template = load_templates()[name]
    missing = required_variables(template) - set(variables)
    if missing:
        raise TemplateRenderError(name, sorted(missing))

    steps = template["steps"]
    lines = steps.split("\n") if isinstance(steps, str) else list(steps)
    logger.debug("Rendering guide template", extra={"phase": "generate", "template": name})
    return Guide(
        title=fill_placeholders(template["title"], variables),
        steps=tuple(fill_placeholders(line, variables) for line in lines),
        url=_optional(template.get("url"), variables),
        example=_optional(template.get("example"), variables),
        security_warning=template.get("securityWarning"),
    )
