"""
npm-facade — CLI entrypoint.

Usage:
    npm-facade --help
    npm-facade commands
    npm-facade call dist_tags.list react
    npm-facade --cwd ./app call install lodash -f save-dev
    npm-facade init package-template.json
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

import click

from npm_facade import __version__
from npm_facade.core.errors import ConfigError, InvalidOptionError, NpmFacadeError
from npm_facade.core.observability.logging_config import setup_logging


def _make_client(ctx: click.Context, stream: Any = None):
    from npm_facade.facade import Npm

    try:
        return Npm.from_config(
            ctx.obj.get("cwd"),
            stream,
            config_path=ctx.obj.get("config_path"),
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _parse_option(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint="--option")
    return key, value


@click.group()
@click.version_option(version=__version__, prog_name="npm-facade")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (shows command lines).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to npm-facade.yml (default: auto-detect).",
)
@click.option(
    "--cwd",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory npm runs in (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    cwd: str | None,
) -> None:
    """npm facade — run npm subcommands and get structured results."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["cwd"] = cwd

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("NPMF_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("NPMF_LOG_FILE"),
        log_file_level=os.environ.get("NPMF_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def commands(ctx: click.Context, as_json: bool) -> None:
    """List every binding and the npm subcommand it runs."""
    from npm_facade.core.services.catalog import COMMANDS

    table = {dotted: spec.name for dotted, spec in COMMANDS.items()}

    if as_json:
        click.echo(json.dumps(table, indent=2))
        return

    width = max(len(name) for name in table)
    if not ctx.obj.get("quiet"):
        click.secho(f"📦 {len(table)} npm bindings", fg="cyan", bold=True)
    for dotted, name in table.items():
        click.echo(f"   {dotted.ljust(width)}  → npm {name}")


@cli.command()
@click.argument("method")
@click.argument("args", nargs=-1)
@click.option("--option", "-o", "raw_options", multiple=True, help="npm option as KEY=VALUE.")
@click.option("--flag", "-f", "flags", multiple=True, help="Boolean npm option, e.g. -f save-dev.")
@click.option("--stream", is_flag=True, help="Copy npm's stdout to the terminal as it runs.")
@click.option("--dry-run", is_flag=True, help="Print the command line without running it.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def call(
    ctx: click.Context,
    method: str,
    args: tuple[str, ...],
    raw_options: tuple[str, ...],
    flags: tuple[str, ...],
    stream: bool,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Run a binding by dotted name, e.g. ``dist_tags.list``."""
    options: dict[str, Any] = dict(_parse_option(raw) for raw in raw_options)
    for flag in flags:
        options[flag] = True

    client = _make_client(ctx, sys.stdout if stream else None)

    try:
        command = client.binding(method)
    except KeyError:
        click.secho(f"❌ Unknown binding '{method}'. Run 'npm-facade commands'.", fg="red", err=True)
        sys.exit(2)

    try:
        if dry_run:
            click.echo(command.invocation(*args, options).command_line)
            return
        result = command(*args, options)
    except InvalidOptionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)
    except NpmFacadeError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json or not isinstance(result, str):
        click.echo(json.dumps(result, indent=2))
    elif not stream and result:
        click.echo(result)


@cli.command()
@click.argument("template", type=click.File("r", encoding="utf-8"))
@click.pass_context
def init(ctx: click.Context, template) -> None:
    """Write package.json from a JSON TEMPLATE file."""
    try:
        pkg = json.load(template)
    except json.JSONDecodeError as e:
        click.secho(f"❌ Invalid JSON in {template.name}: {e}", fg="red", err=True)
        sys.exit(1)

    if not isinstance(pkg, dict):
        click.secho("❌ package.json template must be a JSON object", fg="red", err=True)
        sys.exit(1)

    client = _make_client(ctx)
    target = client.init(pkg)
    if not ctx.obj.get("quiet"):
        click.secho(f"✅ Wrote {target}", fg="green")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
