"""Settings management CLI commands."""

import json
import sys
from pathlib import Path

import click

from fieldguide.core.exceptions import FieldGuideError
from fieldguide.core.settings import OUTPUT_FORMATS, FieldGuideSettings, SettingsManager


@click.group()
def settings() -> None:
    """Manage fieldguide settings."""
    pass


@settings.command()
def init() -> None:
    """Initialize settings file with defaults.

    Creates ~/.fieldguide/settings.json with default configuration.
    """
    manager = SettingsManager()

    if manager.settings_path.exists():
        click.confirm(f"Settings file already exists at {manager.settings_path}. Overwrite?", abort=True)

    default_settings = FieldGuideSettings()
    try:
        manager.save(default_settings)
    except FieldGuideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Created settings file at: {manager.settings_path}")
    click.echo("\nDefault settings:")
    click.echo(json.dumps(default_settings.model_dump(), indent=2))


@settings.command()
def show() -> None:
    """Show current settings, including environment overrides."""
    manager = SettingsManager()
    current = manager.load()

    click.echo(f"Settings file: {manager.settings_path}")
    click.echo("\nCurrent settings:")
    click.echo(json.dumps(current.model_dump(), indent=2))


@settings.command(name="set-format")
@click.argument("output_format", type=click.Choice(OUTPUT_FORMATS))
def set_format(output_format: str) -> None:
    """Set the default output format (text or json).

    Example:
        fieldguide settings set-format json
    """
    manager = SettingsManager()
    try:
        manager.set_output_format(output_format)
    except FieldGuideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Default output format: {output_format}")


@settings.command(name="set-catalog")
@click.argument("path", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--clear", is_flag=True, help="Go back to the packaged catalog")
def set_catalog(path: Path | None, clear: bool) -> None:
    """Use a YAML file as the curated guide catalog.

    Example:
        fieldguide settings set-catalog ./my_guides.yaml
        fieldguide settings set-catalog --clear
    """
    if not clear and path is None:
        click.echo("Error: Provide a catalog path or --clear", err=True)
        sys.exit(1)

    manager = SettingsManager()
    try:
        manager.set_curated_path(None if clear else str(path.resolve()))
    except FieldGuideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if clear:
        click.echo("✓ Using the packaged curated catalog")
    else:
        click.echo(f"✓ Curated catalog: {path.resolve()}")
