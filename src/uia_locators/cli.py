"""CLI entry point: click-based commands."""

from __future__ import annotations

import functools
import json
import logging
import pathlib
import sys
from typing import Any

import click

from uia_locators import __version__
from uia_locators.core.errors import (
    EXIT_DOCTOR_FAILURE,
    EXIT_GENERAL_ERROR,
    EXIT_OK,
    LocatorRegistryError,
    NotFoundError,
)


def _dump(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _handle_errors(fn):
    """Turn registry errors into a stderr message and their exit code."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except LocatorRegistryError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(exc.exit_code)

    return wrapper


def _registry(ctx: click.Context):
    """Build and load the registry once per invocation."""
    obj = ctx.obj
    if obj.get("registry") is None:
        from uia_locators.core.registry import LocatorRegistry

        registry = LocatorRegistry.from_config(obj["config"])
        report = registry.initialize()
        for err in report.errors:
            click.echo(f"Skipped {err['path']}: {err['error']}", err=True)
        obj["registry"] = registry
    return obj["registry"]


def _parse_strategy(raw: str) -> dict[str, Any]:
    """Parse ``TYPE=VALUE[@PRIORITY]``."""
    kind, sep, rest = raw.partition("=")
    if not sep or not kind:
        raise click.BadParameter(f"expected TYPE=VALUE[@PRIORITY], got {raw!r}")
    value, at, priority = rest.rpartition("@")
    if at and priority.isdigit():
        return {"type": kind, "value": value, "priority": int(priority)}
    return {"type": kind, "value": rest, "priority": 0}


@click.group()
@click.version_option(__version__, prog_name="uia-locators")
@click.option("--config", "config_path", default=None, metavar="FILE",
              help="Path to uia-locators.yaml (default: project root).")
@click.option("--root", "storage_root", default=None, metavar="DIR",
              help="Locator directory (overrides the config file).")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr.")
@click.pass_context
@_handle_errors
def main(ctx, config_path, storage_root, verbose):
    """UI-Automation locator registry."""
    from uia_locators.config import RegistryConfig
    from uia_locators.constants import CONFIG_FILE

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    config_path = config_path or CONFIG_FILE
    config = RegistryConfig.load(config_path)
    if storage_root:
        config.storage_root = storage_root
    ctx.obj = {"config": config, "config_path": config_path, "registry": None}


# ── init / doctor ─────────────────────────────────────────────────

@main.command()
@click.pass_context
@_handle_errors
def init(ctx):
    """Write a default config file and create the locator directory."""
    config = ctx.obj["config"]
    path = pathlib.Path(ctx.obj["config_path"])
    if path.exists():
        click.echo(f"Config already exists: {path}")
    else:
        config.save(path)
        click.echo(f"Created {path}")
    pathlib.Path(config.storage_root).mkdir(parents=True, exist_ok=True)
    click.echo(f"Locator directory: {config.storage_root}/")


@main.command()
@click.pass_context
def doctor(ctx):
    """Check the config file and every page document.

    Exits with code 0 when all checks pass, or 10 otherwise.
    """
    from uia_locators.doctor import run_doctor

    config = ctx.obj["config"]
    report = run_doctor(
        config.storage_root,
        config_path=ctx.obj["config_path"],
        extension=config.extension,
    )
    click.echo(f"uia-locators doctor\n{'─' * 45}")
    for check in report.checks:
        icon = "✓" if check.passed else "✗"
        click.echo(f"  [{icon}] {check.name}: {check.message}")
        if check.hint:
            click.echo(f"       ↳ {check.hint}")

    if report.passed:
        click.echo("\nAll checks passed.")
        sys.exit(EXIT_OK)
    click.echo("\nOne or more checks failed.", err=True)
    sys.exit(EXIT_DOCTOR_FAILURE)


# ── queries ───────────────────────────────────────────────────────

@main.command()
@click.pass_context
@_handle_errors
def pages(ctx):
    """List page names."""
    for name in _registry(ctx).get_pages():
        click.echo(name)


@main.command("list")
@click.option("--page", default=None, help="Only locators of this page")
@click.pass_context
@_handle_errors
def list_cmd(ctx, page):
    """List locators as JSON."""
    registry = _registry(ctx)
    if page:
        descriptors = list(registry.get_page_locators(page).values())
    else:
        descriptors = registry.get_all_locators()
    _dump([d.to_summary() for d in descriptors])


@main.command()
@click.argument("full_name")
@click.pass_context
@_handle_errors
def show(ctx, full_name):
    """Show one locator (PAGE.LOCATOR)."""
    descriptor = _registry(ctx).get_locator(full_name)
    if descriptor is None:
        raise NotFoundError(f"Locator '{full_name}' not found")
    _dump(descriptor.to_summary())


@main.command()
@click.argument("full_name")
@click.pass_context
@_handle_errors
def resolve(ctx, full_name):
    """Print the priority-ordered selectors for a locator."""
    selectors = _registry(ctx).resolve_selectors(full_name)
    if selectors is None:
        raise NotFoundError(f"Locator '{full_name}' not found")
    _dump([s.model_dump() for s in selectors])


@main.command()
@click.argument("full_name")
@click.pass_context
@_handle_errors
def selector(ctx, full_name):
    """Print the best single selector string for a locator."""
    click.echo(_registry(ctx).get_test_selector(full_name))


@main.command()
@click.argument("query")
@click.pass_context
@_handle_errors
def search(ctx, query):
    """Search locators by name, description or identity attributes."""
    _dump([d.to_summary() for d in _registry(ctx).search_locators(query)])


@main.command()
@click.argument("full_name")
@click.pass_context
@_handle_errors
def validate(ctx, full_name):
    """Check a stored locator for completeness; exit 1 when it has problems."""
    registry = _registry(ctx)
    descriptor = registry.get_locator(full_name)
    if descriptor is None:
        raise NotFoundError(f"Locator '{full_name}' not found")
    result = registry.validate_locator(descriptor)
    _dump(result.to_dict())
    if not result.ok:
        sys.exit(EXIT_GENERAL_ERROR)


# ── mutations ─────────────────────────────────────────────────────

@main.command()
@click.argument("page_name")
@click.argument("locator_name")
@click.option("--automation-id", default=None)
@click.option("--name", default=None, help="UIA Name property")
@click.option("--class-name", default=None)
@click.option("--control-type", default=None)
@click.option("--description", default=None)
@click.option("--strategy", "strategies", multiple=True, metavar="TYPE=VALUE[@PRIORITY]",
              help="Fallback strategy (repeatable)")
@click.pass_context
@_handle_errors
def save(ctx, page_name, locator_name, automation_id, name, class_name,
         control_type, description, strategies):
    """Create or replace PAGE_NAME.LOCATOR_NAME."""
    attributes = {
        "automation_id": automation_id,
        "name": name,
        "class_name": class_name,
        "control_type": control_type,
        "description": description,
    }
    parsed = [_parse_strategy(s) for s in strategies]
    page, locator = _registry(ctx).save_locator(page_name, locator_name, attributes, parsed)
    click.echo(f"Saved {page}.{locator}")


@main.command()
@click.argument("full_name")
@click.pass_context
@_handle_errors
def delete(ctx, full_name):
    """Delete a locator (PAGE.LOCATOR)."""
    _registry(ctx).delete_locator(full_name)
    click.echo(f"Deleted {full_name}")


@main.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "fmt", default=None, help="xml or json (default: from extension)")
@click.pass_context
@_handle_errors
def import_cmd(ctx, file_path, fmt):
    """Import pages from an XML or flat JSON file."""
    path = pathlib.Path(file_path)
    if fmt is None:
        fmt = "json" if path.suffix.lower() == ".json" else ctx.obj["config"].default_format
    result = _registry(ctx).import_locators(path.read_text(encoding="utf-8"), fmt)
    click.echo(f"Imported {result.locators} locator(s) into {len(result.pages)} page(s)")


@main.command()
@click.option("--format", "fmt", default=None, help="xml or json (default: config)")
@click.option("--output", "output", default=None, type=click.Path(dir_okay=False),
              help="Write to FILE instead of stdout")
@click.pass_context
@_handle_errors
def export(ctx, fmt, output):
    """Export every page as XML or flat JSON."""
    text = _registry(ctx).export_locators(fmt or ctx.obj["config"].default_format)
    if output:
        pathlib.Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Exported to {output}")
    else:
        click.echo(text)
