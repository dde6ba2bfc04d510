"""Batching of consecutive same-format sinks."""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from unloader.core.exceptions import MissingFormatError
from unloader.core.sinks import DataFormat, SinkSpec


@dataclass
class Batch:
    """Sinks that share a format and are served by one extraction query."""

    format: Optional[DataFormat]
    sinks: list[SinkSpec] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [sink.path for sink in self.sinks]

    def __len__(self) -> int:
        return len(self.sinks)


class BatchPlanner:
    """Groups an ordered stream of sinks into batches.

    Consecutive sinks with the same format accumulate in one open batch. A
    format change flushes the open batch before starting the next one, so
    a format that reappears after another gets a batch of its own.

    Example:
        planner = BatchPlanner(flush=executor_callback)
        for sink in sinks:
            planner.add(sink)
        planner.finish()
    """

    def __init__(
        self,
        flush: Callable[[Batch], None],
        initial_format: Optional[DataFormat] = None,
    ):
        """Initialize the planner.

        Args:
            flush: Called with every completed batch, in order
            initial_format: Format of the open batch before any sink is added
        """
        self._flush = flush
        self._open = Batch(format=initial_format)
        self.flushed = 0

    @property
    def open_batch(self) -> Batch:
        return self._open

    def add(self, sink: SinkSpec) -> None:
        if sink.format != self._open.format:
            if self._open.sinks:
                self._emit(self._open)
            self._open = Batch(format=sink.format)
        self._open.sinks.append(sink)

    def extend(self, sinks: Iterable[SinkSpec]) -> None:
        for sink in sinks:
            self.add(sink)

    def finish(self) -> None:
        """Flush the open batch, even if it holds no sinks.

        Raises:
            MissingFormatError: If the open batch has no format
        """
        self._emit(self._open)
        self._open = Batch(format=self._open.format)

    def _emit(self, batch: Batch) -> None:
        if batch.format is None:
            raise MissingFormatError(
                "Cannot unload a batch without a format",
                context={"sinks": ",".join(batch.paths) or "-"},
            )
        self._flush(batch)
        self.flushed += 1


def plan_batches(
    sinks: Iterable[SinkSpec], initial_format: Optional[DataFormat] = None
) -> list[Batch]:
    """Return the batches ``sinks`` would be unloaded in, without executing them."""
    batches: list[Batch] = []
    planner = BatchPlanner(flush=batches.append, initial_format=initial_format)
    planner.extend(sinks)
    planner.finish()
    return batches
