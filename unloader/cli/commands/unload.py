"""CLI command for unloading a relation."""

import sys

import click

from unloader.api import run_unload
from unloader.cli.options import build_settings, settings_options
from unloader.core.exceptions import UnloaderError, UsageError
from unloader.core.logging import configure_logging


@click.command()
@click.argument("relation", required=False, default="")
@click.argument("sinks", nargs=-1)
@settings_options
@click.option(
    "--batch-size",
    default=10000,
    type=click.IntRange(min=1),
    help="Rows fetched per database round trip (default: 10000)",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: INFO)",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Use JSON format for logs",
)
def unload(
    relation: str,
    sinks: tuple,
    load_format: str | None,
    load_format_default: str | None,
    database_url: str | None,
    app_home: str | None,
    batch_size: int,
    log_level: str,
    json_logs: bool,
):
    """Unload RELATION[(COL,COL,...)] into SINK files.

    Each sink's format (tsj, tsv, csv) comes from its name unless --format
    is set, and a trailing .bz2 or .gz compresses it. Adjacent sinks of the
    same format share one extraction query. Without sinks the relation is
    unloaded to input/RELATION.<format> of the application.

    Examples:

        unload sentences
        unload 'sentences(id,text)' out.csv.bz2
        unload docs a.tsv b.csv
        LOAD_FORMAT_DEFAULT=tsv unload docs docs.txt.gz
    """
    configure_logging(level=log_level, json_format=json_logs, relation=relation or None)

    try:
        settings = build_settings(
            load_format,
            load_format_default,
            database_url,
            app_home,
            batch_size=batch_size,
        )
        run_unload(relation, list(sinks), settings)

    except UsageError as e:
        click.echo(f"Usage error: {e}", err=True)
        sys.exit(e.exit_code)
    except UnloaderError as e:
        click.echo(f"Unload failed: {e}", err=True)
        sys.exit(e.exit_code)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)
