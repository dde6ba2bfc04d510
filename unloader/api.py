"""Public Python API for unloader package.

This module provides the main entry points for planning and running unloads.
"""

from pathlib import Path
from typing import Optional, Sequence

from unloader.core.app import find_app
from unloader.core.engine import UnloadPlan, UnloadResult, execute, plan_unload
from unloader.models.settings import UnloadSettings


def plan(
    relation: str,
    sinks: Sequence[str] = (),
    settings: Optional[UnloadSettings] = None,
    start: Optional[Path] = None,
) -> UnloadPlan:
    """Work out what an unload would do without touching the database.

    Args:
        relation: ``RELATION`` or ``RELATION(COL,COL,...)``
        sinks: Destination paths; empty selects the default input file
        settings: Unload settings (default: read from the environment)
        start: Directory the application search starts from

    Returns:
        UnloadPlan with the resolved columns and classified sinks

    Raises:
        UsageError: If the relation argument is missing or malformed
        UnrecognizedFormatError: If a sink's format cannot be determined

    Example:
        >>> p = plan("sentences(id,text)", ["out.csv.bz2"])
        >>> [job.query for job in p.jobs()]
        ['SELECT id,text FROM sentences']
    """
    settings = settings or UnloadSettings.from_env()
    app = find_app(start=start, app_home=settings.app_home)
    return plan_unload(relation, sinks, settings, app=app)


def run_unload(
    relation: str,
    sinks: Sequence[str] = (),
    settings: Optional[UnloadSettings] = None,
    start: Optional[Path] = None,
    **execute_kwargs,
) -> UnloadResult:
    """Unload a relation into the given sinks.

    Args:
        relation: ``RELATION`` or ``RELATION(COL,COL,...)``
        sinks: Destination paths; empty selects the default input file
        settings: Unload settings (default: read from the environment)
        start: Directory the application search starts from
        **execute_kwargs: Passed to the engine (unloader, compressors, default_output)

    Returns:
        UnloadResult with the executed plan and run metrics

    Raises:
        UsageError: If arguments or configuration are invalid
        UnloaderFailure: If an extraction fails
        CompressionFailure: If a compressor failed

    Example:
        >>> from unloader import run_unload
        >>> run_unload("docs", ["a.tsv", "b.csv"])
    """
    return execute(plan(relation, sinks, settings, start), **execute_kwargs)
