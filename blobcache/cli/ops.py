"""
CLI ops commands — metrics and configuration status.

Usage:
    blobcache metrics [--format prometheus|json]
    blobcache config-status [--json]
"""

from __future__ import annotations

import json

import click

from .helpers import backend_errors, open_store


@click.command("metrics")
@click.option("--format", "output_format", type=click.Choice(["prometheus", "json"]), default="prometheus")
@click.pass_context
def metrics_cmd(ctx: click.Context, output_format: str) -> None:
    """
    Load the document once and export the backend traffic it took.

    Metrics live in this process only, so the numbers cover the load
    (or the failure) of this invocation.
    """
    from ..observability.metrics import metrics

    with backend_errors(ctx):
        open_store(ctx)

    if output_format == "json":
        click.echo(json.dumps(metrics.export_json(), indent=2))
    else:
        click.echo(metrics.export_prometheus())


@click.command("config-status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def config_status(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved backend configuration without contacting it."""
    config = ctx.obj["config"]
    data = config.to_public_dict()

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("\n📋 Store Configuration\n")
    click.echo(f"  Backend:  {data['backend']}")
    if data["backend"] == "json_file":
        click.echo(f"  Path:     {data['path']}")
    elif data["backend"] == "http":
        click.echo(f"  URL:      {data['url'] or '(not set)'}")
        click.echo(f"  API key:  {'set' if data['api_key'] else 'not set'}")
        click.echo(f"  Timeout:  {data['timeout']}s")
    click.echo()
