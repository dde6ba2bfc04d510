"""Configuration models for unloader."""

from unloader.models.schema_config import (
    ColumnSchema,
    CompiledConfig,
    RelationSchema,
    SchemaConfig,
)
from unloader.models.settings import UnloadSettings

__all__ = [
    "ColumnSchema",
    "CompiledConfig",
    "RelationSchema",
    "SchemaConfig",
    "UnloadSettings",
]
