"""Generic SQL unloader using SQLAlchemy."""

from typing import BinaryIO, Sequence

from unloader.connectors.base import stream_rows
from unloader.connectors.registry import FALLBACK_SCHEME, register_unloader

try:
    from sqlalchemy import create_engine, text
    from sqlalchemy.engine import Engine
    from sqlalchemy.exc import SQLAlchemyError
except ImportError:
    create_engine = None  # type: ignore
    text = None  # type: ignore
    Engine = None  # type: ignore
    SQLAlchemyError = None  # type: ignore

from unloader.core.exceptions import UnloaderFailure
from unloader.core.sinks import DataFormat


class SQLUnloader:
    """Unloader for any database SQLAlchemy has a dialect for.

    Results are streamed with a server-side cursor where the dialect
    supports one, so large relations are never held in memory.
    """

    DEFAULT_BATCH_SIZE = 10000

    # db.url files commonly use the bare "postgres" scheme
    SCHEME_ALIASES = {"postgres": "postgresql"}

    def __init__(self, database_url: str, batch_size: int = DEFAULT_BATCH_SIZE):
        """Initialize SQLUnloader.

        Raises:
            ImportError: If sqlalchemy is not installed
        """
        if create_engine is None:
            raise ImportError(
                "SQLUnloader requires sqlalchemy. Install it with: pip install sqlalchemy"
            )
        self._url = self._normalize_url(database_url)
        self._batch_size = batch_size
        self._engine: Engine | None = None

    @classmethod
    def _normalize_url(cls, database_url: str) -> str:
        scheme, sep, rest = database_url.partition("://")
        return f"{cls.SCHEME_ALIASES.get(scheme, scheme)}{sep}{rest}"

    def _get_engine(self) -> Engine:
        """Get or create SQLAlchemy engine."""
        if self._engine is None:
            try:
                self._engine = create_engine(self._url, pool_pre_ping=True)
            except (SQLAlchemyError, ImportError) as e:
                raise UnloaderFailure(
                    f"Failed to create database engine: {e}",
                    context={"dialect": self._url.partition("://")[0]},
                ) from e
        return self._engine

    def close(self) -> None:
        """Dispose of the engine and close connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def unload(
        self,
        query: str,
        data_format: DataFormat,
        outputs: Sequence[BinaryIO],
    ) -> int:
        engine = self._get_engine()
        try:
            with engine.connect() as conn:
                result = conn.execution_options(stream_results=True).execute(text(query))
                return stream_rows(result.fetchmany, self._batch_size, data_format, outputs)
        except SQLAlchemyError as e:
            raise UnloaderFailure(
                f"Database unload failed: {e}",
                context={"query": query},
            ) from e
        except OSError as e:
            raise UnloaderFailure(f"Failed to write unloaded rows: {e}") from e


@register_unloader(FALLBACK_SCHEME)
def create_sql_unloader(database_url: str, batch_size: int = SQLUnloader.DEFAULT_BATCH_SIZE) -> SQLUnloader:
    """Factory function for creating SQLUnloader instances."""
    return SQLUnloader(database_url, batch_size)
