"""Unloader registry for database-specific drivers.

Drivers register a factory under a URL scheme. ``load_unloader`` picks the
factory for a database URL's scheme and falls back to the generic SQL driver
for schemes without a dedicated one.
"""

from __future__ import annotations

from typing import Callable, overload

from unloader.connectors.base import DatabaseUnloader
from unloader.core.exceptions import UnloaderError, UsageError

UnloaderFactory = Callable[[str, int], DatabaseUnloader]

FALLBACK_SCHEME = "sql"

_unloader_registry: dict[str, UnloaderFactory] = {}


@overload
def register_unloader(scheme: str) -> Callable[[UnloaderFactory], UnloaderFactory]: ...


@overload
def register_unloader(scheme: str, factory: UnloaderFactory) -> None: ...


def register_unloader(
    scheme: str,
    factory: UnloaderFactory | None = None,
) -> Callable[[UnloaderFactory], UnloaderFactory] | None:
    """Register an unloader factory for a URL scheme.

    Can be used as a decorator or called directly:

        @register_unloader("duckdb")
        def create_duckdb_unloader(url, batch_size):
            return DuckDBUnloader(url, batch_size)

    Raises:
        UnloaderError: If the scheme is already registered.
    """

    def _register(f: UnloaderFactory) -> UnloaderFactory:
        if scheme in _unloader_registry:
            raise UnloaderError(
                f"Unloader '{scheme}' is already registered",
                context={"scheme": scheme},
            )
        _unloader_registry[scheme] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def url_scheme(database_url: str) -> str:
    """Return the scheme of a database URL without its driver suffix."""
    scheme, sep, _ = database_url.partition("://")
    if not sep or not scheme:
        raise UsageError("Malformed database URL", context={"url": _redact(database_url)})
    return scheme.split("+", 1)[0].lower()


def load_unloader(database_url: str | None, batch_size: int = 10000) -> DatabaseUnloader:
    """Create the unloader for ``database_url``.

    Raises:
        UsageError: If no database URL is configured or it is malformed.
        UnloaderError: If no driver can handle the URL.
    """
    if not database_url:
        raise UsageError(
            "No database configured; set DATABASE_URL or run inside an application with a db.url"
        )

    scheme = url_scheme(database_url)
    factory = _unloader_registry.get(scheme) or _unloader_registry.get(FALLBACK_SCHEME)
    if factory is None:
        available = ", ".join(sorted(_unloader_registry.keys())) or "(none)"
        raise UnloaderError(
            f"No unloader for database scheme '{scheme}'",
            context={"scheme": scheme, "available_types": available},
        )
    return factory(database_url, batch_size)


def list_unloader_types() -> list[str]:
    """Return a list of all registered unloader schemes."""
    return sorted(_unloader_registry.keys())


def clear_registry() -> None:
    """Clear all registered unloaders. Intended for testing only."""
    _unloader_registry.clear()


def _redact(database_url: str) -> str:
    head, sep, tail = database_url.rpartition("@")
    if not sep:
        return database_url
    scheme, _, _ = head.partition("://")
    return f"{scheme}://***@{tail}"
