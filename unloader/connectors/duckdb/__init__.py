"""DuckDB unloader module."""

from unloader.connectors.duckdb.connector import DuckDBUnloader, create_duckdb_unloader

__all__ = ["DuckDBUnloader", "create_duckdb_unloader"]
