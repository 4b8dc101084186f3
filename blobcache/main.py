"""
blobcache — CLI Entry Point

Usage:
    blobcache get KEY
    blobcache set KEY VALUE
    blobcache remove KEY
    blobcache has KEY
    blobcache keys
    blobcache dump
    blobcache clear --yes
    blobcache metrics [--format prometheus|json]
    blobcache config-status [--json]

Backend selection comes from BLOBCACHE_* env vars (a .env file in the
working directory is loaded first), a --config file, or the --backend,
--path and --url options, in increasing priority.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import click
from dotenv import load_dotenv

from .cli.helpers import EXIT_ERROR, EXIT_MISSING, backend_errors, open_store
from .cli.ops import config_status, metrics_cmd
from .config.loader import load_config, load_config_file
from .logging_config import setup_logging


def parse_value(raw: str) -> Any:
    """Parse VALUE as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@click.group()
@click.option("--config", "config_file", type=click.Path(dir_okay=False, path_type=Path), help="YAML or JSON config file")
@click.option("--backend", type=click.Choice(["memory", "json_file", "http"]), help="Backend kind")
@click.option("--path", "doc_path", help="Document path for the json_file backend")
@click.option("--url", help="Document URL for the http backend")
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Optional[Path],
    backend: Optional[str],
    doc_path: Optional[str],
    url: Optional[str],
    log_level: Optional[str],
) -> None:
    """blobcache — write-through key-value cache over a document store."""
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    setup_logging(level=log_level)

    ctx.ensure_object(dict)
    ctx.obj.setdefault("root", Path.cwd())

    with backend_errors(ctx):
        config = load_config_file(config_file) if config_file else load_config()
        ctx.obj["config"] = config.with_overrides(backend=backend, path=doc_path, url=url)


@cli.command()
@click.argument("key")
@click.pass_context
def get(ctx: click.Context, key: str) -> None:
    """Print the value stored under KEY as JSON."""
    with backend_errors(ctx):
        lookup = open_store(ctx).get(key)

    if not lookup.found:
        click.secho(f"Key not found: {key}", fg="yellow", err=True)
        ctx.exit(EXIT_MISSING)

    click.echo(json.dumps(lookup.value, indent=2))


@cli.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_cmd(ctx: click.Context, key: str, value: str) -> None:
    """Store VALUE (JSON, or a plain string) under KEY."""
    with backend_errors(ctx):
        open_store(ctx).set(key, parse_value(value))
    click.secho(f"✓ {key} saved", fg="green")


@cli.command()
@click.argument("key")
@click.pass_context
def remove(ctx: click.Context, key: str) -> None:
    """Remove KEY (no-op if absent)."""
    with backend_errors(ctx):
        store = open_store(ctx)
        existed = store.has_key(key)
        store.remove(key)

    if existed:
        click.secho(f"✓ {key} removed", fg="green")
    else:
        click.echo(f"{key} not present, nothing to do")


@cli.command()
@click.argument("key")
@click.pass_context
def has(ctx: click.Context, key: str) -> None:
    """Print true/false; exit 1 when KEY is absent."""
    with backend_errors(ctx):
        present = open_store(ctx).has_key(key)

    click.echo("true" if present else "false")
    if not present:
        ctx.exit(EXIT_MISSING)


@cli.command()
@click.pass_context
def keys(ctx: click.Context) -> None:
    """List stored keys."""
    with backend_errors(ctx):
        names = open_store(ctx).keys()
    for name in names:
        click.echo(name)


@cli.command()
@click.pass_context
def dump(ctx: click.Context) -> None:
    """Print the whole document as JSON."""
    with backend_errors(ctx):
        doc = open_store(ctx).snapshot()
    click.echo(json.dumps(doc, indent=2, sort_keys=True))


@cli.command()
@click.option("--yes", is_flag=True, help="Confirm wiping every key")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Remove every key from the store."""
    if not yes:
        click.secho("Refusing to clear without --yes", fg="yellow", err=True)
        ctx.exit(EXIT_ERROR)

    with backend_errors(ctx):
        open_store(ctx).clear()
    click.secho("✓ Store cleared", fg="green")


cli.add_command(metrics_cmd)
cli.add_command(config_status)


if __name__ == "__main__":
    cli()
