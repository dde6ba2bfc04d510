"""Schema lookups against the compiled application artifact."""

import json
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from pydantic import ValidationError

from unloader.core.exceptions import UnloaderError
from unloader.models.schema_config import CompiledConfig, RelationSchema


class SchemaLookupError(UnloaderError):
    """Raised when the compiled schema cannot be read."""

    pass


@runtime_checkable
class SchemaProvider(Protocol):
    """Answers schema questions about a relation."""

    def lookup(self, relation: str) -> Optional[RelationSchema]:
        """Return the relation's declared schema, or None if it is not declared.

        Raises:
            SchemaLookupError: If the schema source is unreadable.
        """
        ...


class CompiledSchemaProvider:
    """SchemaProvider backed by the application's compiled schema JSON."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._config: CompiledConfig | None = None

    def _load(self) -> CompiledConfig:
        if self._config is None:
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8"))
                self._config = CompiledConfig.model_validate(raw)
            except (OSError, ValueError, ValidationError) as e:
                raise SchemaLookupError(
                    f"Failed to read compiled schema: {e}",
                    context={"path": str(self._path)},
                ) from e
        return self._config

    def lookup(self, relation: str) -> Optional[RelationSchema]:
        return self._load().schema_.relations.get(relation)
