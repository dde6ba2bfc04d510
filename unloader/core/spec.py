"""Parsing of ``RELATION[(COL,COL,...)]`` arguments."""

import re
from dataclasses import dataclass, field

from unloader.core.exceptions import UsageError

_COLUMNS_SUFFIX = re.compile(r"^(?P<name>[^(]*)\((?P<columns>.*)\)$", re.DOTALL)


@dataclass(frozen=True)
class RelationSpec:
    """A relation name plus the columns explicitly requested for it."""

    name: str
    explicit_columns: tuple[str, ...] = field(default_factory=tuple)


def parse_relation_spec(token: str | None) -> RelationSpec:
    """Split a relation argument into its name and explicit column list.

    ``sentences(id,text)`` yields ``RelationSpec("sentences", ("id", "text"))``
    and a bare ``sentences`` yields no explicit columns. Column names are not
    validated here.

    Raises:
        UsageError: If the token is empty or has no relation name
    """
    if not token or not token.strip():
        raise UsageError("Missing RELATION to unload")

    token = token.strip()
    match = _COLUMNS_SUFFIX.match(token)
    if match is None:
        return RelationSpec(name=token)

    name = match.group("name").strip()
    if not name:
        raise UsageError("Missing relation name", context={"argument": token})

    columns = tuple(
        column.strip() for column in match.group("columns").split(",") if column.strip()
    )
    return RelationSpec(name=name, explicit_columns=columns)
