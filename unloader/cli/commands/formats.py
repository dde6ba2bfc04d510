"""CLI command for listing formats and compressors."""

import click

from unloader.core.compression import select_compressor
from unloader.core.exceptions import UsageError
from unloader.core.sinks import COMPRESSION_SUFFIXES, DataFormat


@click.command("formats")
def list_formats():
    """List recognized sink formats and the compressor used for each suffix."""
    click.echo("Formats:")
    for data_format in DataFormat:
        click.echo(f"  - {data_format.value} ({data_format.suffix})")

    click.echo("Compression:")
    for suffix, scheme in COMPRESSION_SUFFIXES:
        try:
            compressor = select_compressor(scheme)
            chosen = compressor.name + (" (parallel)" if compressor.parallel else "")
        except UsageError:
            chosen = "not installed"
        click.echo(f"  - {scheme.value} ({suffix}): {chosen}")
