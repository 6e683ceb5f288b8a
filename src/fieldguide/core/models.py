"""Pydantic models for field descriptors and resolved guides."""

from collections.abc import Mapping
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

GuideSource = Literal["catalog", "help_text", "generator", "default"]


class FieldDescriptor(BaseModel):
    """Metadata describing one input field of a workflow node.

    Every attribute is optional. Values that are not strings (``None``,
    numbers, lists...) are coerced to ``""`` so downstream comparisons never
    have to guard against them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    key: str = ""
    label: str = ""
    type: str = ""
    placeholder: str = ""
    node_type: str = Field(default="", alias="nodeType")
    help_text: str = Field(default="", alias="helpText")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> str:
        """Treat anything that is not a string as empty."""
        return v if isinstance(v, str) else ""

    @classmethod
    def coerce(cls, value: Any) -> "FieldDescriptor":
        """Build a descriptor from a model, a mapping, or anything else.

        Args:
            value: An existing descriptor, a dict using snake_case or camelCase
                keys, or any other object (which yields an empty descriptor)

        Returns:
            A FieldDescriptor; never raises for malformed input
        """
        if isinstance(value, FieldDescriptor):
            return value
        if isinstance(value, Mapping):
            # Non-string keys cannot name a field
            return cls.model_validate({k: v for k, v in value.items() if isinstance(k, str)})
        return cls()


class Guide(BaseModel):
    """Structured instructions explaining how to obtain a field's value."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    steps: tuple[str, ...] = ()
    url: Optional[str] = None
    example: Optional[str] = None
    # None means the source did not state sensitivity either way
    security_warning: Optional[bool] = Field(default=None, alias="securityWarning")

    @field_validator("steps", mode="before")
    @classmethod
    def split_step_block(cls, v: Any) -> Any:
        """Accept a literal text block as well as a list of lines."""
        if isinstance(v, str):
            return tuple(v.split("\n"))
        return v

    def has_steps(self) -> bool:
        return len(self.steps) > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dict shape consumed by the editor UI."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        data["steps"] = list(self.steps)
        return data


class GuideResolution(BaseModel):
    """Outcome of resolving a field descriptor to a guide."""

    model_config = ConfigDict(frozen=True)

    guide: Guide
    question_label: str
    source: GuideSource
    category: Optional[str] = None
    security_warning: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "guide": self.guide.to_dict(),
            "questionLabel": self.question_label,
            "source": self.source,
            "category": self.category,
            "securityWarning": self.security_warning,
        }


class NodeUsageGuide(BaseModel):
    """How a workflow node type is used: what it reads, writes and a worked example."""

    model_config = ConfigDict(frozen=True)

    overview: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    example: Optional[str] = None
    tips: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        for key in ("inputs", "outputs", "tips"):
            data[key] = list(data[key])
        return data
