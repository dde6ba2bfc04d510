"""Execution of unload batches against a DatabaseUnloader."""

import logging
import sys
import time
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional, Sequence

from unloader.connectors.base import DatabaseUnloader
from unloader.core.batch import Batch
from unloader.core.compression import Compressor, CompressorSelector
from unloader.core.exceptions import MissingFormatError, UnloaderFailure
from unloader.core.failure import FailureSignal
from unloader.core.metrics import UnloadMetrics
from unloader.core.outputs import CompressedOutput, FileOutput, SinkOutput
from unloader.core.sinks import Compression, SinkSpec

logger = logging.getLogger(__name__)

STDOUT_DESTINATION = "-"


@dataclass(frozen=True)
class UnloadJob:
    """Everything one extraction call needs."""

    relation: str
    columns: tuple[str, ...]
    batch: Batch

    @property
    def query(self) -> str:
        return build_query(self.relation, self.columns)


def build_query(relation: str, columns: Sequence[str]) -> str:
    """Return the extraction query for a relation and its selected columns."""
    selected = ",".join(columns) if columns else "*"
    return f"SELECT {selected} FROM {relation}"


def stdout_stream() -> BinaryIO:
    return sys.stdout.buffer


class UnloadExecutor:
    """Runs one UnloadJob per batch.

    Plain sinks are opened as files. Compressed sinks are realized as
    compressor processes fed by the unloader; each is joined after the
    unloader returns and a failing one is recorded on the FailureSignal
    instead of aborting the batch.
    """

    def __init__(
        self,
        unloader: DatabaseUnloader,
        failures: FailureSignal,
        compressors: Optional[Callable[[Compression], Compressor]] = None,
        default_output: Callable[[], BinaryIO] = stdout_stream,
        metrics: Optional[UnloadMetrics] = None,
    ):
        self._unloader = unloader
        self._failures = failures
        self._compressors = compressors or CompressorSelector()
        self._default_output = default_output
        self.metrics = metrics

    def make_output(self, sink: SinkSpec) -> SinkOutput:
        if sink.is_compressed:
            return CompressedOutput(sink.path, self._compressors(sink.compression))
        return FileOutput(sink.path)

    def execute(self, job: UnloadJob) -> int:
        """Unload one batch.

        Returns:
            Number of rows unloaded

        Raises:
            MissingFormatError: If the batch has no format
            UnloaderFailure: If the unloader call fails
        """
        batch = job.batch
        if batch.format is None:
            raise MissingFormatError(
                "Cannot unload a batch without a format", context={"relation": job.relation}
            )

        destinations = batch.paths or [STDOUT_DESTINATION]
        logger.info(
            f"Unloading {job.relation}({','.join(job.columns) or '*'}) "
            f"to {' '.join(destinations)} as {batch.format.value}",
            extra={"relation": job.relation},
        )

        start = time.time()
        outputs = [self.make_output(sink) for sink in batch.sinks]
        opened: list[SinkOutput] = []
        try:
            streams = []
            for output in outputs:
                streams.append(output.open())
                opened.append(output)
            if not streams:
                streams.append(self._default_output())
            row_count = self._unloader.unload(job.query, batch.format, streams)
        except OSError as e:
            raise UnloaderFailure(
                f"Failed to open sink: {e}", context={"relation": job.relation}
            ) from e
        finally:
            self._join(opened)

        if self.metrics is not None:
            self.metrics.record_batch(row_count, len(destinations), time.time() - start)
        logger.debug(f"Unloaded {row_count} rows", extra={"relation": job.relation})
        return row_count

    def _join(self, outputs: list[SinkOutput]) -> None:
        """Wait for every started output and record the ones that failed."""
        for output in outputs:
            reason = output.finish()
            if reason is not None:
                logger.error(f"Sink {output.path} failed: {reason}")
                self._failures.record(output.path, reason)
