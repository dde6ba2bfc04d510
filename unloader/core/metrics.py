"""Metrics collection for unload runs."""

import time
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class UnloadMetrics:
    """Collects metrics during an unload run."""

    relation: str
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    batches_executed: int = 0
    rows_unloaded: int = 0
    sinks_written: int = 0
    execution_time: float = 0.0

    batch_times: list[float] = field(default_factory=list)

    def record_batch(self, row_count: int, sink_count: int, batch_time: float) -> None:
        """Record an executed batch.

        Args:
            row_count: Rows extracted by the batch's query
            sink_count: Destinations the rows were written to
            batch_time: Time taken to execute the batch in seconds
        """
        self.batches_executed += 1
        self.rows_unloaded += row_count
        self.sinks_written += sink_count
        self.batch_times.append(batch_time)

    def finish(self) -> None:
        self.end_time = time.time()
        self.execution_time = self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "relation": self.relation,
            "execution_time": self.execution_time,
            "batches_executed": self.batches_executed,
            "rows_unloaded": self.rows_unloaded,
            "sinks_written": self.sinks_written,
            "batch_times": list(self.batch_times),
        }

    def get_summary(self) -> str:
        """Get human-readable summary of metrics."""
        if not self.end_time:
            self.finish()

        return " | ".join(
            [
                f"Relation: {self.relation}",
                f"Batches: {self.batches_executed}",
                f"Sinks: {self.sinks_written}",
                f"Rows: {self.rows_unloaded}",
                f"Time: {self.execution_time:.2f}s",
            ]
        )
