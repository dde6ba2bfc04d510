"""SQLAlchemy unloader module."""

from unloader.connectors.sql.connector import SQLUnloader, create_sql_unloader

__all__ = ["SQLUnloader", "create_sql_unloader"]
