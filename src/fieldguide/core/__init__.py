"""Core fieldguide modules: data models, errors, settings and text helpers."""

from .exceptions import CatalogLoadError, FieldGuideError, NodeSchemaError, SettingsError, TemplateRenderError
from .models import FieldDescriptor, Guide, GuideResolution, GuideSource, NodeUsageGuide
from .security_utils import infer_security_warning, merge_security_warning
from .settings import FieldGuideSettings, SettingsManager

__all__ = [
    "CatalogLoadError",
    "FieldDescriptor",
    "FieldGuideError",
    "FieldGuideSettings",
    "Guide",
    "GuideResolution",
    "GuideSource",
    "NodeSchemaError",
    "NodeUsageGuide",
    "SettingsError",
    "SettingsManager",
    "TemplateRenderError",
    "infer_security_warning",
    "merge_security_warning",
]
