"""fieldguide command line interface.

Resolve a single field to its guide, show the classifier category, print a
node's usage guide, or audit a whole node schema for guide coverage.
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import click

from fieldguide.cli.commands.settings import settings
from fieldguide.cli.logging_config import configure_logging
from fieldguide.core.exceptions import FieldGuideError
from fieldguide.core.models import FieldDescriptor, GuideResolution, NodeUsageGuide
from fieldguide.core.settings import FieldGuideSettings, SettingsManager
from fieldguide.guides.audit import AuditReport, audit_node_schema, load_node_schema
from fieldguide.guides.catalog import GuideCatalog
from fieldguide.guides.generator import classify as classify_field
from fieldguide.guides.resolver import GuideResolver, get_default_resolver
from fieldguide.guides.usage import get_usage_guide, list_usage_node_types

DEFAULT_AUDIT_LIMIT = 20


def field_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options describing one field, shared by resolve and classify."""
    options = [
        click.option("--key", default="", help="Field key as defined by the node schema"),
        click.option("--label", default="", help="Field label shown in the editor"),
        click.option("--type", "field_type", default="", help="Field type (text, textarea, number, json...)"),
        click.option("--placeholder", default="", help="Field placeholder text"),
        click.option("--node-type", default="", help="Type of the node owning the field"),
        click.option("--help-text", default="", help="Free-text help attached to the field"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _descriptor(
    key: str, label: str, field_type: str, placeholder: str, node_type: str, help_text: str
) -> FieldDescriptor:
    # Shells pass "\n" literally; help text steps are line based
    return FieldDescriptor(
        key=key,
        label=label,
        type=field_type,
        placeholder=placeholder,
        node_type=node_type,
        help_text=help_text.replace("\\n", "\n"),
    )


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_settings() -> FieldGuideSettings:
    return SettingsManager().load()


def _build_resolver(current: FieldGuideSettings) -> GuideResolver:
    """Resolver honoring a configured curated catalog override."""
    if current.catalog.curated_path:
        return GuideResolver(catalog=GuideCatalog.from_file(current.catalog.curated_path))
    return get_default_resolver()


def _wants_json(output_json: bool, current: FieldGuideSettings) -> bool:
    return output_json or current.output.format == "json"


def _display_resolution(resolution: GuideResolution) -> None:
    guide = resolution.guide
    source = resolution.source
    if resolution.category:
        source = f"{source} ({resolution.category})"

    click.echo(f"Question: {resolution.question_label}")
    click.echo(f"Source: {source}")
    click.echo("")
    click.echo(guide.title)
    for step in guide.steps:
        click.echo(f"  {step}" if step else "")
    if guide.url:
        click.echo(f"\nReference: {guide.url}")
    if guide.example:
        click.echo(f"Example: {guide.example}")
    if resolution.security_warning:
        click.echo("\n⚠️  Sensitive value: store it securely and never expose it on the frontend.")


def _display_usage(node_type: str, usage: NodeUsageGuide) -> None:
    click.echo(f"Node: {node_type}")
    click.echo(f"\n{usage.overview}")
    for heading, items in (("Inputs", usage.inputs), ("Outputs", usage.outputs)):
        if items:
            click.echo(f"\n{heading}:")
            for item in items:
                click.echo(f"  - {item}")
    if usage.example:
        click.echo("\nExample:")
        for line in usage.example.split("\n"):
            click.echo(f"  {line}" if line else "")
    if usage.tips:
        click.echo("\nTips:")
        for tip in usage.tips:
            click.echo(f"  • {tip}")


def _display_audit(report: AuditReport, limit: int) -> None:
    click.echo(f"Nodes: {report.total_nodes}")
    click.echo(f"Fields: {report.total_fields}")
    click.echo(f"Coverage: {report.coverage:.1%}")

    if report.by_source:
        click.echo("\nBy source:")
        for source, count in report.by_source.items():
            click.echo(f"  {source}: {count}")
    if report.by_category:
        click.echo("\nBy generator category:")
        for category, count in report.by_category.items():
            click.echo(f"  {category}: {count}")

    if not report.needing_guides:
        click.echo("\n✓ Every field has a specific guide")
        return

    click.echo(f"\nFields needing guides ({len(report.needing_guides)}):")
    for entry in report.needing_guides[:limit]:
        label = f" ({entry.label})" if entry.label else ""
        click.echo(f"  - {entry.node_type}.{entry.field_key}{label}")
    remaining = len(report.needing_guides) - limit
    if remaining > 0:
        click.echo(f"  ... and {remaining} more")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed log output")
@click.version_option(package_name="fieldguide")
def main(verbose: bool) -> None:
    """Resolve contextual help guides for workflow node fields."""
    configure_logging(verbose)


@main.command()
@field_options
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def resolve(
    key: str,
    label: str,
    field_type: str,
    placeholder: str,
    node_type: str,
    help_text: str,
    output_json: bool,
) -> None:
    """Resolve the help guide for one field.

    Example:
        fieldguide resolve --key apiKey --label "Gemini API Key" --node-type google_gemini
    """
    current = _load_settings()
    try:
        resolver = _build_resolver(current)
    except FieldGuideError as e:
        _fail(str(e))
        return

    resolution = resolver.resolve(_descriptor(key, label, field_type, placeholder, node_type, help_text))

    if _wants_json(output_json, current):
        click.echo(json.dumps(resolution.to_dict(), indent=2, ensure_ascii=False))
    else:
        _display_resolution(resolution)


@main.command()
@field_options
def classify(key: str, label: str, field_type: str, placeholder: str, node_type: str, help_text: str) -> None:
    """Print the generator category a field falls into.

    Example:
        fieldguide classify --label "SMTP Host"
    """
    click.echo(classify_field(_descriptor(key, label, field_type, placeholder, node_type, help_text)))


@main.command()
@click.argument("node_type", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def usage(node_type: Optional[str], output_json: bool) -> None:
    """Show how a node type is used. Without NODE_TYPE, list documented nodes."""
    current = _load_settings()
    as_json = _wants_json(output_json, current)

    if node_type is None:
        node_types = list_usage_node_types()
        if as_json:
            click.echo(json.dumps(node_types, indent=2))
        else:
            for name in node_types:
                click.echo(name)
        return

    guide = get_usage_guide(node_type)
    if guide is None:
        similar = [name for name in list_usage_node_types() if node_type.lower() in name][:5]
        hint = f" (did you mean: {', '.join(similar)}?)" if similar else ""
        _fail(f"No usage guide for node type '{node_type}'{hint}")
        return

    if as_json:
        click.echo(json.dumps({"node_type": node_type, **guide.to_dict()}, indent=2, ensure_ascii=False))
    else:
        _display_usage(node_type, guide)


@main.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=DEFAULT_AUDIT_LIMIT,
    show_default=True,
    help="Maximum fields needing guides to list",
)
def audit(schema_file: Path, output_json: bool, limit: int) -> None:
    """Report which guide source answers each field of a node schema.

    SCHEMA_FILE is JSON or YAML shaped {"nodes": [{"type", "fields": [...]}]}.
    """
    current = _load_settings()
    try:
        report = audit_node_schema(load_node_schema(schema_file), resolver=_build_resolver(current))
    except FieldGuideError as e:
        _fail(str(e))
        return

    if _wants_json(output_json, current):
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        _display_audit(report, limit)


main.add_command(settings)


def cli_main() -> None:
    """Console script entry point."""
    main()
