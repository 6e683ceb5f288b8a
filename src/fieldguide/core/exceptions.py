"""Custom exceptions for fieldguide."""

from typing import Optional


class FieldGuideError(Exception):
    """Base exception for all fieldguide errors."""

    pass


class CatalogLoadError(FieldGuideError):
    """Raised when a packaged or user-supplied guide data file is malformed."""

    def __init__(self, message: str, path: Optional[str] = None, original_error: Optional[Exception] = None):
        self.path = path
        self.original_error = original_error

        if path:
            message = f"{message}\nData file: {path}"
        if original_error:
            message = f"{message}\nOriginal error: {original_error!s}"

        super().__init__(message)


class TemplateRenderError(FieldGuideError):
    """Raised when a guide template references variables the builder did not supply."""

    def __init__(self, template_name: str, missing: list[str]):
        self.template_name = template_name
        self.missing = missing
        super().__init__(f"Template '{template_name}' is missing variables: {sorted(missing)}")


class NodeSchemaError(FieldGuideError):
    """Raised when a node schema document handed to the audit is invalid.

    Attributes:
        path: Dotted path to the invalid element (e.g., "nodes[0].fields")
    """

    def __init__(self, message: str, path: str = ""):
        self.path = path
        full_message = "Invalid node schema"
        if path:
            full_message += f" at {path}"
        full_message += f": {message}"
        super().__init__(full_message)


class SettingsError(FieldGuideError):
    """Raised when settings cannot be written."""

    pass
