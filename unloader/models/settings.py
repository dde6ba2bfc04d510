"""Environment-level settings for unload runs."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from unloader.core.exceptions import UsageError
from unloader.core.sinks import DataFormat

ENV_LOAD_FORMAT = "LOAD_FORMAT"
ENV_LOAD_FORMAT_DEFAULT = "LOAD_FORMAT_DEFAULT"
ENV_DATABASE_URL = "DATABASE_URL"
ENV_APP_HOME = "UNLOADER_APP"


class UnloadSettings(BaseModel):
    """Configuration that applies to every sink of an unload run."""

    load_format: Optional[DataFormat] = Field(
        default=None,
        description="Format forced on every sink, disabling filename sniffing",
    )
    load_format_default: Optional[DataFormat] = Field(
        default=None,
        description="Fallback format when a sink's filename names none",
    )
    database_url: Optional[str] = Field(
        default=None,
        description="Database URL; overrides the application's db.url",
    )
    app_home: Optional[str] = Field(
        default=None,
        description="Application root; skips searching upward from the working directory",
    )
    batch_size: int = Field(
        default=10000, description="Rows fetched per database round trip", gt=0
    )

    @field_validator("load_format", "load_format_default", mode="before")
    @classmethod
    def normalize_format(cls, v):
        """Accept format names case-insensitively, with or without a leading dot."""
        if v is None or isinstance(v, DataFormat):
            return v
        v = str(v).strip().lower().lstrip(".")
        return v or None

    @field_validator("database_url", "app_home", mode="before")
    @classmethod
    def empty_as_unset(cls, v):
        """Treat empty strings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides
    ) -> "UnloadSettings":
        """Build settings from environment variables.

        Args:
            environ: Environment mapping (default: os.environ)
            **overrides: Values that take precedence over the environment

        Raises:
            UsageError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        values = {
            "load_format": environ.get(ENV_LOAD_FORMAT),
            "load_format_default": environ.get(ENV_LOAD_FORMAT_DEFAULT),
            "database_url": environ.get(ENV_DATABASE_URL),
            "app_home": environ.get(ENV_APP_HOME),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.build(**values)

    @classmethod
    def build(cls, **values) -> "UnloadSettings":
        """Validate settings, reporting bad values as usage errors."""
        try:
            return cls(**values)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise UsageError(
                f"Invalid unload settings: {fields}",
                context={"allowed_formats": ",".join(f.value for f in DataFormat)},
            ) from e
