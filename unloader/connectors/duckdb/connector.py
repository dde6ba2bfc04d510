"""DuckDB unloader."""

from typing import BinaryIO, Sequence

from unloader.connectors.base import stream_rows
from unloader.connectors.registry import register_unloader

try:
    import duckdb
    from duckdb import DuckDBPyConnection
except ImportError:
    duckdb = None  # type: ignore
    DuckDBPyConnection = None  # type: ignore

from unloader.core.exceptions import UnloaderFailure
from unloader.core.sinks import DataFormat

DEFAULT_BATCH_SIZE = 10000


def database_path(database_url: str) -> str:
    """Return the database file of a ``duckdb://`` URL.

    Follows SQLAlchemy's sqlite convention: ``duckdb:///rel.duckdb`` is
    relative, ``duckdb:////abs/rel.duckdb`` is absolute, and ``duckdb://``
    or ``duckdb:///:memory:`` name an in-memory database.
    """
    _, _, path = database_url.partition("://")
    if path.startswith("/"):
        path = path[1:]
    return path or ":memory:"


class DuckDBUnloader:
    """Unloader for DuckDB database files.

    Opens the database read-only for each unload and streams the result
    with ``fetchmany``.
    """

    def __init__(self, database_url: str, batch_size: int = DEFAULT_BATCH_SIZE):
        """Initialize DuckDBUnloader.

        Raises:
            ImportError: If duckdb is not installed (install with: pip install unloader[duckdb])
        """
        if duckdb is None:
            raise ImportError(
                "DuckDBUnloader requires duckdb. "
                "Install it with: pip install unloader[duckdb]"
            )
        self._database = database_path(database_url)
        self._batch_size = batch_size

    def _connect(self) -> DuckDBPyConnection:
        try:
            if self._database == ":memory:":
                return duckdb.connect(self._database)
            return duckdb.connect(self._database, read_only=True)
        except duckdb.Error as e:
            raise UnloaderFailure(
                f"Failed to connect to DuckDB: {e}",
                context={"database": self._database},
            ) from e

    def unload(
        self,
        query: str,
        data_format: DataFormat,
        outputs: Sequence[BinaryIO],
    ) -> int:
        conn = self._connect()
        try:
            result = conn.execute(query)
            return stream_rows(result.fetchmany, self._batch_size, data_format, outputs)
        except duckdb.Error as e:
            raise UnloaderFailure(
                f"DuckDB unload failed: {e}",
                context={"database": self._database, "query": query},
            ) from e
        except OSError as e:
            raise UnloaderFailure(
                f"Failed to write unloaded rows: {e}",
                context={"database": self._database},
            ) from e
        finally:
            conn.close()


@register_unloader("duckdb")
def create_duckdb_unloader(database_url: str, batch_size: int = DEFAULT_BATCH_SIZE) -> DuckDBUnloader:
    """Factory function for creating DuckDBUnloader instances."""
    return DuckDBUnloader(database_url, batch_size)
