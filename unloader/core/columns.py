"""Column resolution for relations unloaded without explicit columns."""

import logging
from typing import Optional, Sequence

from unloader.core.app import AppContext
from unloader.core.schema import SchemaLookupError, SchemaProvider

logger = logging.getLogger(__name__)

LABEL_COLUMN = "label"


def resolve_columns(
    relation: str,
    explicit_columns: Sequence[str],
    schema_provider: Optional[SchemaProvider],
    app: Optional[AppContext],
) -> list[str]:
    """Return the columns to select from ``relation``.

    Explicit columns are used as given. Without them, a random-variable
    relation of a compiled application is unloaded as its declared columns
    in declaration order followed by ``label``. Every other case yields an
    empty list, which selects all columns. Schema lookup failures are
    logged and fall back to selecting all columns.
    """
    if explicit_columns:
        return list(explicit_columns)

    if app is None or schema_provider is None or not app.is_compiled:
        return []

    try:
        relation_schema = schema_provider.lookup(relation)
    except SchemaLookupError as e:
        logger.warning(f"Ignoring schema lookup failure, selecting all columns: {e}")
        return []

    if relation_schema is None or not relation_schema.is_variable:
        return []

    columns = relation_schema.ordered_columns() + [LABEL_COLUMN]
    logger.debug(
        f"Resolved variable relation columns: {','.join(columns)}",
        extra={"relation": relation},
    )
    return columns
