"""Main CLI entry point for unloader."""

import click

from unloader import __version__
from unloader.cli.commands.formats import list_formats
from unloader.cli.commands.plan import plan
from unloader.cli.commands.unload import unload


@click.group()
@click.version_option(version=__version__)
def main():
    """Unloader - unload database relations into tsj, tsv and csv files."""
    pass


# Register commands
main.add_command(unload)
main.add_command(plan)
main.add_command(list_formats)


if __name__ == "__main__":
    main()
