"""CLI command for showing how an unload would run."""

import sys

import click

from unloader.api import plan as plan_unload
from unloader.cli.options import build_settings, settings_options
from unloader.core.exceptions import UnloaderError


@click.command()
@click.argument("relation", required=False, default="")
@click.argument("sinks", nargs=-1)
@settings_options
def plan(
    relation: str,
    sinks: tuple,
    load_format: str | None,
    load_format_default: str | None,
    database_url: str | None,
    app_home: str | None,
):
    """Show the batches and queries an unload would run, without running them.

    Examples:

        unloader plan docs a.tsv b.csv a2.tsv.gz
        unloader plan 'sentences(id,text)'
    """
    try:
        settings = build_settings(load_format, load_format_default, database_url, app_home)
        unload_plan = plan_unload(relation, list(sinks), settings)
    except UnloaderError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(e.exit_code)

    app = unload_plan.app
    click.echo(f"Plan for relation: {unload_plan.relation.name}")
    click.echo(f"  Application: {app.root if app else '(none)'}")
    click.echo(f"  Columns: {','.join(unload_plan.columns) or '*'}")
    click.echo("")

    for index, job in enumerate(unload_plan.jobs(), start=1):
        click.echo(f"Batch {index} ({job.batch.format.value}): {job.query}")
        for sink in job.batch.sinks:
            compression = "" if not sink.is_compressed else f" [{sink.compression.value}]"
            click.echo(f"  - {sink.path}{compression}")
