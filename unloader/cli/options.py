"""Options shared by the commands that plan or run an unload."""

import click

from unloader.core.sinks import DataFormat
from unloader.models.settings import (
    ENV_APP_HOME,
    ENV_DATABASE_URL,
    ENV_LOAD_FORMAT,
    ENV_LOAD_FORMAT_DEFAULT,
    UnloadSettings,
)

FORMAT_CHOICE = click.Choice([f.value for f in DataFormat], case_sensitive=False)


def settings_options(func):
    """Add the options that make up UnloadSettings, each bound to its env var."""
    options = [
        click.option(
            "--format",
            "load_format",
            envvar=ENV_LOAD_FORMAT,
            type=FORMAT_CHOICE,
            help=f"Force this format for every sink, ignoring file names (env: {ENV_LOAD_FORMAT})",
        ),
        click.option(
            "--default-format",
            "load_format_default",
            envvar=ENV_LOAD_FORMAT_DEFAULT,
            type=FORMAT_CHOICE,
            help=f"Format for sinks whose name has no format suffix (env: {ENV_LOAD_FORMAT_DEFAULT})",
        ),
        click.option(
            "--database-url",
            envvar=ENV_DATABASE_URL,
            help=f"Database to unload from; overrides the application's db.url (env: {ENV_DATABASE_URL})",
        ),
        click.option(
            "--app",
            "app_home",
            envvar=ENV_APP_HOME,
            type=click.Path(file_okay=False),
            help=f"Application root directory (env: {ENV_APP_HOME})",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_settings(
    load_format: str | None,
    load_format_default: str | None,
    database_url: str | None,
    app_home: str | None,
    **extra,
) -> UnloadSettings:
    """Create UnloadSettings from parsed command-line options."""
    values = {
        "load_format": load_format,
        "load_format_default": load_format_default,
        "database_url": database_url,
        "app_home": app_home,
        **extra,
    }
    return UnloadSettings.build(**{k: v for k, v in values.items() if v is not None})
