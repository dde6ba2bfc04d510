"""Sink classification: output format and compression inferred per destination.

Format and compression are both sniffed from the destination path through
small ordered suffix tables, consulted first-match-wins. Classification is a
pure function of its inputs; the only filesystem access in this module is
the probe for an existing default input file.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from unloader.core.exceptions import UnrecognizedFormatError


class DataFormat(str, Enum):
    """Row serialization formats understood by the unloaders."""

    TSJ = "tsj"
    TSV = "tsv"
    CSV = "csv"

    @property
    def suffix(self) -> str:
        return f".{self.value}"


class Compression(str, Enum):
    """Compression schemes applied to a sink's output."""

    NONE = "none"
    BZIP2 = "bzip2"
    GZIP = "gzip"

    @property
    def suffix(self) -> str:
        return _COMPRESSION_SUFFIX_BY_SCHEME[self]


COMPRESSION_SUFFIXES: tuple[tuple[str, Compression], ...] = (
    (".bz2", Compression.BZIP2),
    (".gz", Compression.GZIP),
)

_COMPRESSION_SUFFIX_BY_SCHEME = {
    Compression.NONE: "",
    **{scheme: suffix for suffix, scheme in COMPRESSION_SUFFIXES},
}

FORMAT_SUFFIXES: tuple[tuple[str, DataFormat], ...] = tuple(
    (data_format.suffix + compression_suffix, data_format)
    for data_format in DataFormat
    for compression_suffix in ("", *(suffix for suffix, _ in COMPRESSION_SUFFIXES))
)

DEFAULT_INPUT_DIR = "input"


@dataclass(frozen=True)
class SinkSpec:
    """A destination path with its resolved format and compression."""

    path: str
    format: DataFormat
    compression: Compression = Compression.NONE

    @property
    def is_compressed(self) -> bool:
        return self.compression is not Compression.NONE


def detect_compression(path: str) -> Compression:
    """Return the compression scheme selected by the path's suffix."""
    for suffix, scheme in COMPRESSION_SUFFIXES:
        if path.endswith(suffix):
            return scheme
    return Compression.NONE


def detect_format(path: str) -> Optional[DataFormat]:
    """Return the format named by the path's suffix, or None if there is none."""
    for suffix, data_format in FORMAT_SUFFIXES:
        if path.endswith(suffix):
            return data_format
    return None


def classify_sink(
    path: str,
    forced_format: Optional[DataFormat] = None,
    default_format: Optional[DataFormat] = None,
) -> SinkSpec:
    """Determine the format and compression of one destination.

    Args:
        path: Destination path as given by the user
        forced_format: Format that wins unconditionally (LOAD_FORMAT)
        default_format: Fallback when the suffix names no format (LOAD_FORMAT_DEFAULT)

    Returns:
        SinkSpec for the destination

    Raises:
        UnrecognizedFormatError: If no format can be determined
    """
    data_format = forced_format or detect_format(path) or default_format
    if data_format is None:
        raise UnrecognizedFormatError(path)
    return SinkSpec(path=path, format=data_format, compression=detect_compression(path))


def default_sink_path(
    relation: str,
    base_dir: Optional[Path] = None,
    forced_format: Optional[DataFormat] = None,
    default_format: Optional[DataFormat] = None,
) -> str:
    """Pick the destination used when no sink was given.

    Probes ``input/<relation>.<format><compression>`` under ``base_dir`` for
    every format and compression, returning the first one that exists. When
    none exists the path is synthesized from the forced format, the default
    format or ``tsj``, in that order.
    """
    input_dir = Path(base_dir) / DEFAULT_INPUT_DIR if base_dir else Path(DEFAULT_INPUT_DIR)

    for suffix, _ in FORMAT_SUFFIXES:
        candidate = input_dir / f"{relation}{suffix}"
        if candidate.exists():
            return str(candidate)

    data_format = forced_format or default_format or DataFormat.TSJ
    return str(input_dir / f"{relation}{data_format.suffix}")
