"""Heuristic guide generator.

When no curated guide and no usable help text exist, the field is classified
from its metadata alone. Classification is an ordered list of rules; each
rule pairs a predicate over the field's normalized text with a builder that
renders a category template. The first matching rule wins, so the list runs
from the most specific signatures (a Slack bot token, a known API hostname)
to structural categories (URL, token, credential, IDs) to type-driven ones
(json, cron, number, textarea, text) and ends with a catch-all.

The order of ``CLASSIFIER_RULES`` is behavior: categories overlap, and
moving a rule changes which guide a field receives.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple
from urllib.parse import urlparse

from fieldguide.core.models import FieldDescriptor, Guide
from fieldguide.core.text_utils import contains_any, lower_text, normalize_text
from fieldguide.guides.templates import render_template

logger = logging.getLogger(__name__)

DEFAULT_FIELD_TYPE = "text"
GENERIC_CATEGORY = "generic"

_URL_IN_TEXT = re.compile(r"https?://\S+")
_PORT_WORD = re.compile(r"\bport\b")

DATABASE_NODE_MARKERS = ("postgres", "mysql", "mongo", "sql", "timescale", "database")

# API-key templates for AI nodes whose labels carry no provider name
API_KEY_TEMPLATES_BY_NODE = {
    "google_gemini": "api_key_gemini",
    "openai_gpt": "api_key_openai",
    "anthropic_claude": "api_key_anthropic",
}


@dataclass(frozen=True)
class FieldContext:
    """Normalized view of a field descriptor used by every rule.

    Lower-cased attributes are for matching; ``raw_*`` attributes keep the
    original text for display. The placeholder falls back to the label for
    matching only, never for display.
    """

    key: str
    label: str
    placeholder: str
    node_type: str
    field_type: str
    raw_label: str
    raw_placeholder: str
    raw_type: str
    combined: str

    @classmethod
    def from_descriptor(cls, descriptor: Any) -> "FieldContext":
        field = FieldDescriptor.coerce(descriptor)
        raw_label = normalize_text(field.label)
        raw_placeholder = normalize_text(field.placeholder)
        key = lower_text(field.key)
        label = lower_text(raw_label)
        placeholder = lower_text(raw_placeholder or raw_label)
        raw_type = field.type or DEFAULT_FIELD_TYPE
        return cls(
            key=key,
            label=label,
            placeholder=placeholder,
            node_type=lower_text(field.node_type),
            field_type=lower_text(raw_type),
            raw_label=raw_label,
            raw_placeholder=raw_placeholder,
            raw_type=raw_type,
            combined=f"{key} {label} {placeholder}",
        )

    @property
    def display_label(self) -> str:
        """Label shown in generated titles."""
        if self.raw_label:
            return self.raw_label
        return self.key or "this value"

    def has(self, *needles: str) -> bool:
        """Any of ``needles`` in the combined key/label/placeholder text."""
        return contains_any(self.combined, needles)


class Rule(NamedTuple):
    """One classifier entry: category name, predicate and guide builder."""

    name: str
    matches: Callable[[FieldContext], bool]
    build: Callable[[FieldContext], Guide]


def _template(name: str) -> Callable[[FieldContext], Guide]:
    """Builder for templates that need no field data."""
    return lambda ctx: render_template(name)


def _labelled(name: str) -> Callable[[FieldContext], Guide]:
    """Builder for templates titled after the field label."""
    return lambda ctx: render_template(name, label=ctx.display_label)


# Predicates


def _is_slack_bot_token(ctx: FieldContext) -> bool:
    return (
        ("slack" in ctx.label and contains_any(ctx.label, ("bot token", "bot_token")))
        or ("slack" in ctx.key and contains_any(ctx.key, ("bot_token", "bottoken")))
        or (ctx.has("slack") and ctx.has("bot token", "bot_token"))
    )


def _is_page_token(ctx: FieldContext) -> bool:
    return ctx.has("page-token", "page token", "page access token") or contains_any(
        ctx.key, ("pagetoken", "page_token", "pageaccesstoken", "page_access_token")
    )


def _is_facebook_context(ctx: FieldContext) -> bool:
    return ctx.node_type == "facebook" or ctx.has("facebook")


def _is_text_field(ctx: FieldContext) -> bool:
    return ctx.field_type == "text"


def _is_person_or_thing_name(ctx: FieldContext) -> bool:
    return ctx.has("name") and not ctx.has("username", "hostname")


def _resource_id(resource: str) -> Callable[[FieldContext], bool]:
    key = resource.lower()

    def matches(ctx: FieldContext) -> bool:
        return ctx.has(f"{key} id", f"{key}_id", f"{key}id") and not ctx.has("api")

    return matches


# Builders


def _build_api_key(ctx: FieldContext) -> Guide:
    if "gemini" in ctx.label and contains_any(ctx.label, ("api key", "api_key")):
        return render_template("api_key_gemini")
    if contains_any(ctx.label, ("google sheets", "sheets api")):
        return render_template("api_key_google_sheets")
    if "slack" in ctx.label and "api" in ctx.label:
        return render_template("slack_api")
    template = API_KEY_TEMPLATES_BY_NODE.get(ctx.node_type)
    if template:
        return render_template(template)
    return render_template("api_key_generic", label=ctx.display_label)


def _service_name(url: str) -> str:
    """Best-effort service name from a documentation URL's host."""
    host = urlparse(url).hostname or ""
    parts = [p for p in host.split(".") if p not in ("www", "api", "docs", "developer", "developers")]
    if len(parts) >= 2:
        return parts[-2].capitalize()
    return "the service's"


def _build_url(ctx: FieldContext) -> Guide:
    if ctx.has("docs", "documentation"):
        match = _URL_IN_TEXT.search(ctx.raw_placeholder) or _URL_IN_TEXT.search(ctx.raw_label)
        doc_url = match.group(0) if match else ""
        return render_template(
            "documentation_url",
            label=ctx.display_label,
            doc_url=doc_url,
            doc_target=doc_url or "the documentation URL",
            service=_service_name(doc_url) if doc_url else "the service's",
        )
    if "webhook" in ctx.key:
        return render_template("url_webhook")
    return render_template("url_generic", label=ctx.display_label)


def _build_token(ctx: FieldContext) -> Guide:
    # Service-specific guides are keyed on the node type, not the field text
    if ctx.node_type == "facebook" and ctx.has("access token", "page"):
        return render_template("facebook_page_token")
    if ctx.node_type == "instagram" and ctx.has("access token"):
        return render_template("instagram_api")
    if ctx.node_type == "twitter" and ctx.has("access token"):
        return render_template("twitter_api")
    return render_template("token_generic", label=ctx.display_label)


def _build_google_oauth(ctx: FieldContext) -> Guide:
    if ctx.has("secret"):
        return render_template("google_oauth_secret")
    return render_template("google_oauth_client_id")


def _build_smtp(ctx: FieldContext) -> Guide:
    if ctx.has("host"):
        return render_template("smtp_host")
    if ctx.has("username", "user"):
        return render_template("smtp_username")
    if ctx.has("password", "pass"):
        return render_template("smtp_password")
    return render_template("smtp_generic")


def _build_credential(ctx: FieldContext) -> Guide:
    if "database" in ctx.label or contains_any(ctx.node_type, DATABASE_NODE_MARKERS):
        return render_template("credential_database")
    return render_template("credential_generic", label=ctx.display_label)


def _build_webhook_url(ctx: FieldContext) -> Guide:
    if ctx.node_type == "slack_message":
        return render_template("webhook_url_slack")
    if ctx.node_type == "discord_webhook":
        return render_template("webhook_url_discord")
    return render_template("webhook_url_generic", label=ctx.display_label)


def _build_page_id(ctx: FieldContext) -> Guide:
    if _is_facebook_context(ctx):
        return render_template("page_id_facebook")
    return render_template("page_id_generic")


def _build_account_id(ctx: FieldContext) -> Guide:
    if ctx.node_type == "instagram" or ctx.has("instagram"):
        return render_template("account_id_instagram")
    return render_template("account_id_generic")


def _resource_id_builder(resource: str, example: str) -> Callable[[FieldContext], Guide]:
    return lambda ctx: render_template(
        "resource_id",
        resource=resource,
        resource_lower=resource.lower(),
        resource_key=resource.lower(),
        example=example,
    )


def _build_json(ctx: FieldContext) -> Guide:
    example = ctx.raw_placeholder or '{"key": "value", "number": 123, "array": [1, 2, 3]}'
    return render_template("json", label=ctx.display_label, example=example)


def _build_number(ctx: FieldContext) -> Guide:
    return render_template("number", label=ctx.display_label, example=ctx.raw_placeholder or "100")


def _build_textarea(ctx: FieldContext) -> Guide:
    if ctx.has("message", "body", "content"):
        return render_template("message", label=ctx.display_label)
    return render_template("textarea", label=ctx.display_label)


def _build_generic(ctx: FieldContext) -> Guide:
    if contains_any(ctx.label, ("google sheets", "sheets")):
        return render_template("google_sheets_brief")
    if "slack" in ctx.label and "webhook" not in ctx.label:
        if "token" in ctx.label:
            return render_template("slack_bot_token")
        return render_template("slack_api_brief")
    return render_template("generic", label=ctx.display_label, field_type=ctx.raw_type)


CLASSIFIER_RULES: tuple[Rule, ...] = (
    # Known third-party signatures
    Rule("slack_bot_token", _is_slack_bot_token, _template("slack_bot_token")),
    Rule("twitter_api", lambda ctx: "api.twitter.com" in ctx.label, _template("twitter_api")),
    Rule("facebook_graph_api", lambda ctx: "graph.facebook.com" in ctx.label, _template("facebook_graph_api")),
    Rule("twitter_api", lambda ctx: ctx.has("api.twitter.com"), _template("twitter_api")),
    Rule(
        "facebook_graph_api",
        lambda ctx: ctx.has("developers.facebook.com", "facebook.com/docs", "graph-api", "facebook graph"),
        _template("facebook_graph_api"),
    ),
    Rule(
        "instagram_api_docs",
        lambda ctx: ctx.has("developers.instagram.com", "instagram.com/docs"),
        _template("instagram_api_docs"),
    ),
    Rule(
        "twitter_api_docs",
        lambda ctx: ctx.has("developer.twitter.com", "twitter.com/en/developer"),
        _template("twitter_api_docs"),
    ),
    Rule("facebook_api", lambda ctx: ctx.has("facebook api"), _template("facebook_api")),
    Rule("instagram_api", lambda ctx: ctx.has("instagram api"), _template("instagram_api")),
    Rule("twitter_api", lambda ctx: ctx.has("twitter api") or "x api" in ctx.label, _template("twitter_api")),
    Rule(
        "content_repository",
        lambda ctx: ctx.has("content repository") or contains_any(ctx.label, ("google drive", "dropbox")),
        _labelled("content_repository"),
    ),
    # Credential shapes
    # "api_key" is accepted alongside "api key" and "apikey"
    Rule("api_key", lambda ctx: ctx.has("api key", "apikey", "api_key"), _build_api_key),
    Rule(
        "url",
        lambda ctx: contains_any(ctx.label, ("http://", "https://"))
        or contains_any(ctx.placeholder, ("http://", "https://"))
        or ctx.has("url", "endpoint"),
        _build_url,
    ),
    Rule(
        "facebook_page_token",
        lambda ctx: _is_page_token(ctx) and _is_facebook_context(ctx),
        _template("facebook_page_token"),
    ),
    Rule("token", lambda ctx: ctx.has("token", "bearer", "access token"), _build_token),
    Rule("slack_webhook", lambda ctx: ctx.has("slack") and ctx.has("webhook"), _template("slack_webhook")),
    Rule("google_oauth", lambda ctx: ctx.has("google") and ctx.has("oauth", "client"), _build_google_oauth),
    Rule("smtp", lambda ctx: ctx.has("smtp"), _build_smtp),
    Rule("credential", lambda ctx: ctx.has("credential", "password", "secret", "auth"), _build_credential),
    # Identifiers
    Rule(
        "spreadsheet_id",
        lambda ctx: ctx.has("spreadsheet", "sheet id") or "spreadsheetid" in ctx.key,
        _template("spreadsheet_id"),
    ),
    Rule(
        "webhook_url",
        lambda ctx: ctx.has("webhook") and (ctx.has("url") or "webhook" in ctx.key),
        _build_webhook_url,
    ),
    Rule("page_id", lambda ctx: ctx.has("page id", "page_id", "pageid"), _build_page_id),
    Rule("account_id", lambda ctx: ctx.has("account id", "account_id", "accountid"), _build_account_id),
    Rule(
        "shop_domain",
        lambda ctx: ctx.has("shop domain", "shop_domain", "shopdomain") or (ctx.has("shopify") and ctx.has("domain")),
        _template("shop_domain"),
    ),
    Rule("product_id", _resource_id("Product"), _resource_id_builder("Product", "gid://shopify/Product/123456789")),
    Rule("order_id", _resource_id("Order"), _resource_id_builder("Order", "123456789")),
    Rule("customer_id", _resource_id("Customer"), _resource_id_builder("Customer", "123456789")),
    # Workflow data
    Rule(
        "expression",
        lambda ctx: ctx.has("expression", "template") or "{{" in ctx.raw_placeholder,
        _labelled("expression"),
    ),
    Rule("condition", lambda ctx: ctx.has("condition", "filter"), _labelled("condition")),
    # Also matches on an "array" field type, not just the field text
    Rule("array", lambda ctx: ctx.has("array") or ctx.field_type == "array", _labelled("array")),
    Rule("database_name", lambda ctx: ctx.has("database", "db name", "db_name"), _labelled("database_name")),
    Rule("host", lambda ctx: ctx.has("host", "server", "address"), _labelled("host")),
    # Whole word only: "report" and "support" are not ports
    Rule("port", lambda ctx: _PORT_WORD.search(ctx.combined) is not None, _labelled("port")),
    Rule("model", lambda ctx: ctx.has("model"), _labelled("model")),
    Rule("prompt", lambda ctx: ctx.has("prompt", "system prompt", "message"), _labelled("prompt")),
    # Field types
    Rule("json", lambda ctx: ctx.field_type == "json" or "json" in ctx.key, _build_json),
    Rule("cron", lambda ctx: ctx.field_type == "cron" or ctx.has("cron", "schedule"), _labelled("cron")),
    Rule("time", lambda ctx: ctx.field_type == "time" or ctx.has("time"), _labelled("time")),
    Rule("temperature", lambda ctx: ctx.has("temperature"), _template("temperature")),
    Rule("number", lambda ctx: ctx.field_type == "number", _build_number),
    Rule("textarea", lambda ctx: ctx.field_type == "textarea", _build_textarea),
    Rule("email", lambda ctx: _is_text_field(ctx) and ctx.has("email"), _labelled("email")),
    Rule("phone", lambda ctx: _is_text_field(ctx) and ctx.has("phone", "tel"), _labelled("phone")),
    Rule("name", lambda ctx: _is_text_field(ctx) and _is_person_or_thing_name(ctx), _labelled("name")),
    Rule("title", lambda ctx: _is_text_field(ctx) and ctx.has("title", "subject"), _labelled("title")),
    Rule("description", lambda ctx: _is_text_field(ctx) and ctx.has("description"), _labelled("description")),
    Rule("message", lambda ctx: _is_text_field(ctx) and ctx.has("message"), _labelled("message")),
    # Catch-all
    Rule(GENERIC_CATEGORY, lambda ctx: True, _build_generic),
)


class HeuristicGuideGenerator:
    """Classify a field from its metadata and render the matching template.

    Args:
        rules: Ordered classifier rules; the first match wins
    """

    def __init__(self, rules: tuple[Rule, ...] = CLASSIFIER_RULES):
        self.rules = rules

    def match_rule(self, descriptor: Any) -> tuple[Rule, FieldContext]:
        ctx = FieldContext.from_descriptor(descriptor)
        for rule in self.rules:
            if rule.matches(ctx):
                return rule, ctx
        # Custom rule lists may lack a catch-all
        return Rule(GENERIC_CATEGORY, lambda c: True, _build_generic), ctx

    def classify(self, descriptor: Any) -> str:
        """Return the category name of the first matching rule."""
        rule, _ = self.match_rule(descriptor)
        return rule.name

    def generate(self, descriptor: Any) -> tuple[Guide, str]:
        """Build a guide for the field.

        Returns:
            Tuple of (guide, category name). Never fails for any descriptor.
        """
        rule, ctx = self.match_rule(descriptor)
        guide = rule.build(ctx)
        logger.debug(
            "Generated guide from field metadata",
            extra={"phase": "generate", "category": rule.name, "steps": len(guide.steps)},
        )
        return guide, rule.name


_default_generator = HeuristicGuideGenerator()


def classify(descriptor: Any) -> str:
    """Category the default rules assign to a field descriptor."""
    return _default_generator.classify(descriptor)


def generate_guide(descriptor: Any) -> Guide:
    """Guide generated purely from field metadata."""
    guide, _ = _default_generator.generate(descriptor)
    return guide
