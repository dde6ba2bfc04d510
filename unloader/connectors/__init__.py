"""Database unloaders and their registry.

This module exposes:
- DatabaseUnloader: protocol implemented by every driver
- Registry functions: register_unloader, load_unloader, list_unloader_types
- Row encoders: RowFormat, get_row_format
- Driver implementations: DuckDBUnloader, SQLUnloader
"""

from unloader.connectors.base import DatabaseUnloader, stream_rows
from unloader.connectors.formats import (
    CSVFormat,
    RowFormat,
    TSJFormat,
    TSVFormat,
    get_row_format,
)

# Registry must be imported first (driver modules use decorators on import)
from unloader.connectors.registry import (
    clear_registry,
    list_unloader_types,
    load_unloader,
    register_unloader,
)

# Driver modules register themselves via @register_unloader on import
from unloader.connectors.duckdb.connector import DuckDBUnloader, create_duckdb_unloader
from unloader.connectors.sql.connector import SQLUnloader, create_sql_unloader


def reregister_builtins() -> None:
    """Re-register built-in unloaders after the registry is cleared.

    Intended for tests that call clear_registry().
    """
    current = list_unloader_types()
    if "duckdb" not in current:
        register_unloader("duckdb", create_duckdb_unloader)
    if "sql" not in current:
        register_unloader("sql", create_sql_unloader)


__all__ = [
    "DatabaseUnloader",
    "stream_rows",
    "RowFormat",
    "TSJFormat",
    "TSVFormat",
    "CSVFormat",
    "get_row_format",
    "register_unloader",
    "reregister_builtins",
    "load_unloader",
    "list_unloader_types",
    "clear_registry",
    "DuckDBUnloader",
    "SQLUnloader",
    "create_duckdb_unloader",
    "create_sql_unloader",
]
