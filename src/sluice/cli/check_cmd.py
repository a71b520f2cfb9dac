"""Check command — validate a payload file against declared field rules."""

import asyncio
import importlib
import json
import logging
from pathlib import Path
from typing import Any

import click
import yaml

from sluice.config import SluiceSettings
from sluice.engine import FieldRule, ValidationEngine, to_field_rules

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def resolve_reference(reference: str) -> Any:
    """Import `package.module:attribute` and return the attribute.

    Raises:
        ValueError: If the reference is malformed or cannot be resolved
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:attribute', got '{reference}'")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_name}': {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise ValueError(f"Module '{module_name}' has no attribute '{attr_path}'") from e
    return target


def load_rules(reference: str) -> list[FieldRule]:
    """Load field declarations from a list attribute or a factory function."""
    target = resolve_reference(reference)
    if callable(target):
        target = target()
    try:
        return to_field_rules(target)
    except (TypeError, KeyError) as e:
        raise ValueError(f"'{reference}' is not a list of field declarations: {e}") from e


def load_engine(reference: str | None) -> ValidationEngine:
    if reference is None:
        return ValidationEngine()
    target = resolve_reference(reference)
    if callable(target) and not isinstance(target, ValidationEngine):
        target = target()
    if not isinstance(target, ValidationEngine):
        raise ValueError(f"'{reference}' is not a ValidationEngine")
    return target


def load_payload(path: Path, payload_format: str) -> Any:
    """Read a JSON or YAML payload; "auto" picks by file extension."""
    if payload_format == "auto":
        payload_format = "yaml" if path.suffix.lower() in (".yaml", ".yml") else "json"

    with open(path) as f:
        if payload_format == "yaml":
            return yaml.safe_load(f)
        return json.load(f)


@click.command()
@click.argument("rules_ref", metavar="RULES")
@click.argument(
    "payload_path",
    metavar="PAYLOAD",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--engine",
    "engine_ref",
    default=None,
    help="ValidationEngine (or factory) as module:attribute; defaults to a plain engine.",
)
@click.option(
    "--format",
    "payload_format",
    default=None,
    type=click.Choice(["auto", "json", "yaml"]),
    help="Payload format (default: SLUICE_PAYLOAD_FORMAT or auto).",
)
@click.option(
    "--show-payload",
    is_flag=True,
    default=False,
    help="Print the payload after transforms and defaults were applied.",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (default: SLUICE_LOG_LEVEL or WARNING).",
)
def check(
    rules_ref: str,
    payload_path: Path,
    engine_ref: str | None,
    payload_format: str | None,
    show_payload: bool,
    log_level: str | None,
):
    """Validate PAYLOAD against the field rules at RULES (module:attribute)."""
    settings = SluiceSettings.from_env()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        engine = load_engine(engine_ref)
        fields = load_rules(rules_ref)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(2)

    try:
        payload = load_payload(payload_path, payload_format or settings.payload_format)
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: cannot parse {payload_path}: {e}", err=True)
        raise SystemExit(2)

    try:
        result = asyncio.run(engine.validate(payload, fields))
    except Exception as e:
        click.echo(click.style(f"Error: validation raised {type(e).__name__}: {e}", fg="red"), err=True)
        raise SystemExit(2)

    if result is not True:
        click.echo(click.style(f"Invalid: {result}", fg="red"))
        raise SystemExit(1)

    click.echo(click.style("Valid", fg="green"))
    if show_payload:
        click.echo(json.dumps(payload, indent=2, default=str))
