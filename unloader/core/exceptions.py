"""Exception hierarchy for the unloader package."""


class UnloaderError(Exception):
    """Base exception for all unloader errors."""

    exit_code = 1

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class UsageError(UnloaderError):
    """Raised when the relation argument or configuration is missing or malformed."""

    exit_code = 2


class UnrecognizedFormatError(UsageError):
    """Raised when a sink's format cannot be determined and no default is configured."""

    def __init__(self, path: str, context: dict | None = None):
        super().__init__(
            f"Unrecognized format for sink '{path}'; "
            "name it with a .tsj, .tsv or .csv suffix or set LOAD_FORMAT_DEFAULT",
            context={"path": path, **(context or {})},
        )
        self.path = path


class MissingFormatError(UsageError):
    """Raised when a batch would be flushed without a determinable format."""

    pass


class UnloaderFailure(UnloaderError):
    """Raised when the database unload call itself fails."""

    pass


class CompressionFailure(UnloaderError):
    """Raised when one or more compression consumers failed."""

    def __init__(self, message: str, failures: list[dict] | None = None):
        super().__init__(message, context={"failed_sinks": len(failures or [])})
        self.failures = failures or []
