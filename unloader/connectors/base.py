"""Base protocol for database unloaders.

This module defines the core abstraction for database unloaders:
- DatabaseUnloader: runs an extraction query and writes every row to each output
- stream_rows: shared cursor-to-outputs copy loop used by the drivers
"""

from typing import Any, BinaryIO, Callable, Protocol, Sequence, runtime_checkable

from unloader.connectors.formats import get_row_format
from unloader.core.sinks import DataFormat


@runtime_checkable
class DatabaseUnloader(Protocol):
    """Protocol for database-specific unload primitives.

    Example:
        class DuckDBUnloader:
            def unload(self, query, data_format, outputs) -> int:
                for row in self._conn.execute(query).fetchall():
                    ...
    """

    def unload(
        self,
        query: str,
        data_format: DataFormat,
        outputs: Sequence[BinaryIO],
    ) -> int:
        """Run ``query`` and write every row, encoded as ``data_format``, to each output.

        Args:
            query: SELECT statement to extract rows with.
            data_format: Row encoding to write.
            outputs: Writable binary streams; each receives the full result.

        Returns:
            Number of rows unloaded.

        Raises:
            UnloaderFailure: If connection, query or write fails.
        """
        ...


def stream_rows(
    fetchmany: Callable[[int], Sequence[Sequence[Any]]],
    batch_size: int,
    data_format: DataFormat,
    outputs: Sequence[BinaryIO],
) -> int:
    """Copy a cursor's rows, encoded as ``data_format``, to every output.

    Args:
        fetchmany: Cursor method returning up to ``n`` rows, empty when exhausted.
        batch_size: Rows fetched per call.
        data_format: Row encoding.
        outputs: Writable binary streams.

    Returns:
        Number of rows written to each output.
    """
    row_format = get_row_format(data_format)
    row_count = 0
    while True:
        rows = fetchmany(batch_size)
        if not rows:
            break
        chunk = row_format.encode_rows(rows)
        for output in outputs:
            output.write(chunk)
        row_count += len(rows)
    for output in outputs:
        output.flush()
    return row_count
