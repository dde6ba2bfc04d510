"""Core module for unloader package."""

from unloader.core.batch import Batch, BatchPlanner, plan_batches
from unloader.core.exceptions import (
    CompressionFailure,
    MissingFormatError,
    UnloaderError,
    UnloaderFailure,
    UnrecognizedFormatError,
    UsageError,
)
from unloader.core.failure import FailureSignal
from unloader.core.sinks import (
    Compression,
    DataFormat,
    SinkSpec,
    classify_sink,
    default_sink_path,
)
from unloader.core.spec import RelationSpec, parse_relation_spec

__all__ = [
    "Batch",
    "BatchPlanner",
    "plan_batches",
    "FailureSignal",
    "Compression",
    "DataFormat",
    "SinkSpec",
    "classify_sink",
    "default_sink_path",
    "RelationSpec",
    "parse_relation_spec",
    "UnloaderError",
    "UsageError",
    "UnrecognizedFormatError",
    "MissingFormatError",
    "UnloaderFailure",
    "CompressionFailure",
]
