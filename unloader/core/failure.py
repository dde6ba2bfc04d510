"""Failure signal shared between the executor and compression consumers."""

import threading
from typing import Any

from unloader.core.exceptions import CompressionFailure


class FailureSignal:
    """Collects failures of compression consumers for one unload run.

    The signal is armed before the first batch executes and checked once
    after the last one. Recording is idempotent per sink and never resets.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._armed = False
        self._failures: list[dict[str, Any]] = []

    def arm(self) -> None:
        with self._lock:
            self._armed = True

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def raised(self) -> bool:
        with self._lock:
            return bool(self._failures)

    @property
    def failures(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._failures)

    def record(self, path: str, reason: str, **details: Any) -> None:
        """Mark the run as failed because of the sink at ``path``.

        Raises:
            RuntimeError: If the signal has not been armed
        """
        failure = {"path": path, "reason": reason, **details}
        with self._lock:
            if not self._armed:
                raise RuntimeError(f"Failure signal not armed, cannot record {path}")
            if failure not in self._failures:
                self._failures.append(failure)

    def check(self) -> None:
        """Raise if any compression consumer failed.

        Raises:
            CompressionFailure: Listing every failed sink
        """
        failures = self.failures
        if failures:
            paths = ", ".join(f["path"] for f in failures)
            raise CompressionFailure(f"Compression failed for: {paths}", failures=failures)
