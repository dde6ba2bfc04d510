"""Core orchestration of an unload run."""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Optional, Sequence

from unloader.connectors.base import DatabaseUnloader
from unloader.connectors.registry import load_unloader
from unloader.core.app import AppContext
from unloader.core.batch import Batch, BatchPlanner, plan_batches
from unloader.core.columns import resolve_columns
from unloader.core.compression import Compressor, CompressorSelector
from unloader.core.executor import UnloadExecutor, UnloadJob, stdout_stream
from unloader.core.failure import FailureSignal
from unloader.core.metrics import UnloadMetrics
from unloader.core.schema import CompiledSchemaProvider, SchemaProvider
from unloader.core.sinks import Compression, SinkSpec, classify_sink, default_sink_path
from unloader.core.spec import RelationSpec, parse_relation_spec
from unloader.models.settings import UnloadSettings

logger = logging.getLogger(__name__)


@dataclass
class UnloadPlan:
    """What an unload run will do, computed before touching the database."""

    relation: RelationSpec
    columns: tuple[str, ...]
    sinks: list[SinkSpec]
    settings: UnloadSettings
    app: Optional[AppContext] = None

    def batches(self) -> list[Batch]:
        return plan_batches(self.sinks, initial_format=self.settings.load_format)

    def jobs(self) -> list[UnloadJob]:
        return [self.job(batch) for batch in self.batches()]

    def job(self, batch: Batch) -> UnloadJob:
        return UnloadJob(relation=self.relation.name, columns=self.columns, batch=batch)

    @property
    def database_url(self) -> Optional[str]:
        if self.settings.database_url:
            return self.settings.database_url
        return self.app.database_url if self.app else None


@dataclass
class UnloadResult:
    """Outcome of a successful unload run."""

    plan: UnloadPlan
    metrics: UnloadMetrics
    row_counts: list[int] = field(default_factory=list)


def plan_unload(
    relation_arg: str,
    sinks: Sequence[str],
    settings: UnloadSettings,
    app: Optional[AppContext] = None,
    schema_provider: Optional[SchemaProvider] = None,
) -> UnloadPlan:
    """Parse, resolve columns and classify every sink.

    Every sink is classified here, so format errors surface before any
    extraction starts.

    Raises:
        UsageError: If the relation argument is missing or malformed
        UnrecognizedFormatError: If a sink's format cannot be determined
    """
    relation = parse_relation_spec(relation_arg)

    if schema_provider is None and app is not None:
        schema_provider = CompiledSchemaProvider(app.compiled_schema_path)
    columns = resolve_columns(relation.name, relation.explicit_columns, schema_provider, app)

    paths = list(sinks)
    if not paths:
        paths = [
            default_sink_path(
                relation.name,
                base_dir=app.root if app else None,
                forced_format=settings.load_format,
                default_format=settings.load_format_default,
            )
        ]
        logger.info(f"No sink given, unloading to {paths[0]}", extra={"relation": relation.name})

    specs = [
        classify_sink(path, settings.load_format, settings.load_format_default) for path in paths
    ]
    return UnloadPlan(
        relation=relation, columns=tuple(columns), sinks=specs, settings=settings, app=app
    )


def execute(
    plan: UnloadPlan,
    unloader: Optional[DatabaseUnloader] = None,
    compressors: Optional[Callable[[Compression], Compressor]] = None,
    default_output: Callable[[], BinaryIO] = stdout_stream,
) -> UnloadResult:
    """Execute an unload plan batch by batch.

    Batches run in order; a failing batch aborts the rest and batches that
    already completed are left in place. Compression failures are collected
    while batches run and raised once all of them are done. An unloader
    loaded from the plan's database URL is closed when the run ends.

    Raises:
        UsageError: If no database or compressor is available
        MissingFormatError: If a batch has no format
        UnloaderFailure: If an extraction fails
        CompressionFailure: If any compressor failed
    """
    compressors = compressors or CompressorSelector()
    for sink in plan.sinks:
        if sink.is_compressed:
            compressors(sink.compression)

    owns_unloader = unloader is None
    if owns_unloader:
        unloader = load_unloader(plan.database_url, plan.settings.batch_size)
    try:
        return _run(plan, unloader, compressors, default_output)
    finally:
        close = getattr(unloader, "close", None)
        if owns_unloader and close is not None:
            close()


def _run(
    plan: UnloadPlan,
    unloader: DatabaseUnloader,
    compressors: Callable[[Compression], Compressor],
    default_output: Callable[[], BinaryIO],
) -> UnloadResult:
    relation = plan.relation.name
    failures = FailureSignal()
    failures.arm()
    metrics = UnloadMetrics(relation)
    executor = UnloadExecutor(
        unloader,
        failures,
        compressors=compressors,
        default_output=default_output,
        metrics=metrics,
    )
    result = UnloadResult(plan=plan, metrics=metrics)

    def flush(batch: Batch) -> None:
        result.row_counts.append(executor.execute(plan.job(batch)))

    planner = BatchPlanner(flush=flush, initial_format=plan.settings.load_format)
    try:
        planner.extend(plan.sinks)
        planner.finish()
    except Exception:
        logger.error(
            f"Unload aborted after {planner.flushed} batch(es)",
            extra={"relation": relation},
        )
        raise
    finally:
        metrics.finish()

    failures.check()
    logger.info(f"Completed unload: {metrics.get_summary()}", extra={"relation": relation})
    return result
