"""Settings management for fieldguide with environment variable override support."""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fieldguide.core.exceptions import SettingsError

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


class CatalogSettings(BaseModel):
    """Where curated guides come from."""

    curated_path: Optional[str] = Field(
        default=None,
        description="YAML file replacing the packaged curated guide catalog",
    )


class OutputSettings(BaseModel):
    """CLI output preferences."""

    format: str = Field(default="text", description="Default CLI output format: text or json")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate format is known."""
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output format: {v}. Must be one of: {', '.join(OUTPUT_FORMATS)}")
        return v


class FieldGuideSettings(BaseModel):
    """Main settings configuration."""

    version: str = Field(default="1.0.0")
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


class SettingsManager:
    """Manages fieldguide settings with environment variable override support."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = settings_path or Path.home() / ".fieldguide" / "settings.json"
        self._settings: Optional[FieldGuideSettings] = None

    def load(self) -> FieldGuideSettings:
        """Load settings with environment variable overrides."""
        if self._settings is None:
            self._settings = self._load_from_file()
        settings = self._settings.model_copy(deep=True)
        self._apply_env_overrides(settings)
        return settings

    def reload(self) -> FieldGuideSettings:
        """Force reload settings from file."""
        self._settings = None
        return self.load()

    def _load_from_file(self) -> FieldGuideSettings:
        """Load settings from file or return defaults."""
        if not self.settings_path.exists():
            return FieldGuideSettings()
        try:
            with open(self.settings_path, encoding="utf-8") as f:
                data = json.load(f)
            return FieldGuideSettings(**data)
        except Exception as e:
            # If file is corrupted, use defaults
            logger.warning(f"Failed to load settings from {self.settings_path} ({e}); using defaults")
            return FieldGuideSettings()

    def _apply_env_overrides(self, settings: FieldGuideSettings) -> None:
        """Apply environment variable overrides."""
        env_catalog = os.getenv("FIELDGUIDE_CATALOG_PATH")
        if env_catalog:
            settings.catalog.curated_path = env_catalog

        env_format = os.getenv("FIELDGUIDE_OUTPUT_FORMAT")
        if env_format is not None:
            if env_format.lower() in OUTPUT_FORMATS:
                settings.output.format = env_format.lower()
            else:
                logger.warning(
                    f"Invalid FIELDGUIDE_OUTPUT_FORMAT: {env_format}. Using: {settings.output.format}"
                )

    def save(self, settings: Optional[FieldGuideSettings] = None) -> None:
        """Save settings to file with an atomic replace and owner-only permissions."""
        if settings is None:
            settings = self._settings or self._load_from_file()

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SettingsError(f"Cannot create settings directory {self.settings_path.parent}: {e}") from e

        temp_fd, temp_path = tempfile.mkstemp(dir=self.settings_path.parent, prefix=".settings.", suffix=".tmp")

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                json.dump(settings.model_dump(), f, indent=2)

            os.replace(temp_path, self.settings_path)
            os.chmod(self.settings_path, stat.S_IRUSR | stat.S_IWUSR)  # 0o600

            # Clear cache to force reload on next access
            self._settings = None

        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

    def set_output_format(self, output_format: str) -> None:
        """Persist the default CLI output format."""
        settings = self._load_from_file()
        settings.output = OutputSettings(format=output_format)
        self.save(settings)

    def set_curated_path(self, path: Optional[str]) -> None:
        """Persist (or clear, with None) the curated catalog override path."""
        settings = self._load_from_file()
        settings.catalog.curated_path = path
        self.save(settings)
