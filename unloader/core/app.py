"""Application directory discovery."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from unloader.core.exceptions import UsageError

logger = logging.getLogger(__name__)

DB_URL_FILE = "db.url"
COMPILED_SCHEMA_PATH = Path("run") / "compiled" / "schema.json"


@dataclass(frozen=True)
class AppContext:
    """An application root directory."""

    root: Path

    @property
    def compiled_schema_path(self) -> Path:
        return self.root / COMPILED_SCHEMA_PATH

    @property
    def is_compiled(self) -> bool:
        """Return True if the application's schema has been compiled."""
        return self.compiled_schema_path.is_file()

    @property
    def database_url(self) -> Optional[str]:
        """Return the URL stored in the application's db.url, if any."""
        url_file = self.root / DB_URL_FILE
        if not url_file.is_file():
            return None
        return url_file.read_text().strip() or None


def find_app(start: Optional[Path] = None, app_home: Optional[str] = None) -> Optional[AppContext]:
    """Locate the application the unload runs against.

    An explicit ``app_home`` must be an existing directory. Otherwise the
    nearest directory containing ``db.url``, searching upward from ``start``
    (default: the working directory), is the application root.

    Returns:
        AppContext, or None when the command runs against a bare database URL

    Raises:
        UsageError: If app_home does not point to a directory
    """
    if app_home:
        root = Path(app_home).expanduser()
        if not root.is_dir():
            raise UsageError("Application directory does not exist", context={"app_home": app_home})
        return AppContext(root=root.resolve())

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / DB_URL_FILE).is_file():
            logger.debug(f"Found application at {candidate}")
            return AppContext(root=candidate)
    return None
