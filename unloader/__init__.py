"""Unloader - unload database relations into format-sniffed sink files.

Sinks sharing a format are served by a single extraction query and each
sink may be compressed with bzip2 or gzip.
"""

__version__ = "0.1.0"

# Public API
from unloader.api import plan, run_unload

# Core classes
from unloader.core.batch import Batch, BatchPlanner
from unloader.core.engine import UnloadPlan, UnloadResult

# Exceptions
from unloader.core.exceptions import (
    CompressionFailure,
    MissingFormatError,
    UnloaderError,
    UnloaderFailure,
    UnrecognizedFormatError,
    UsageError,
)
from unloader.core.sinks import Compression, DataFormat, SinkSpec

# Settings model
from unloader.models.settings import UnloadSettings

__all__ = [
    # Version
    "__version__",
    # Public API
    "plan",
    "run_unload",
    # Core classes
    "Batch",
    "BatchPlanner",
    "UnloadPlan",
    "UnloadResult",
    "SinkSpec",
    "DataFormat",
    "Compression",
    "UnloadSettings",
    # Exceptions
    "UnloaderError",
    "UsageError",
    "UnrecognizedFormatError",
    "MissingFormatError",
    "UnloaderFailure",
    "CompressionFailure",
]
