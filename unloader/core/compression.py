"""Compressor strategies backed by external compression tools.

Each compression scheme has a parallel tool (``pbzip2``, ``pigz``) and a
serial one (``bzip2``, ``gzip``). The parallel tool is used when it is on
PATH, otherwise the serial one.
"""

import shutil
from dataclasses import dataclass
from typing import Callable, Optional

from unloader.core.exceptions import UsageError
from unloader.core.sinks import Compression


@dataclass(frozen=True)
class Compressor:
    """A command that compresses stdin to stdout."""

    name: str
    command: tuple[str, ...]
    parallel: bool = False


PARALLEL_COMPRESSORS = {
    Compression.BZIP2: Compressor("pbzip2", ("pbzip2", "-c"), parallel=True),
    Compression.GZIP: Compressor("pigz", ("pigz", "-c"), parallel=True),
}

SERIAL_COMPRESSORS = {
    Compression.BZIP2: Compressor("bzip2", ("bzip2", "-c")),
    Compression.GZIP: Compressor("gzip", ("gzip", "-c")),
}

Which = Callable[[str], Optional[str]]


def select_compressor(compression: Compression, which: Which = shutil.which) -> Compressor:
    """Pick the compressor for a scheme, preferring the parallel variant.

    Raises:
        ValueError: If the scheme is Compression.NONE
        UsageError: If neither variant is installed
    """
    if compression is Compression.NONE:
        raise ValueError("No compressor for uncompressed sinks")

    for compressor in (PARALLEL_COMPRESSORS[compression], SERIAL_COMPRESSORS[compression]):
        if which(compressor.command[0]):
            return compressor

    raise UsageError(
        f"No {compression.value} compressor found on PATH",
        context={
            "tried": ",".join(
                c.name for c in (PARALLEL_COMPRESSORS[compression], SERIAL_COMPRESSORS[compression])
            )
        },
    )


class CompressorSelector:
    """Caches compressor selection for the duration of a run."""

    def __init__(self, which: Which = shutil.which, overrides: dict | None = None):
        self._which = which
        self._selected: dict[Compression, Compressor] = dict(overrides or {})

    def __call__(self, compression: Compression) -> Compressor:
        if compression not in self._selected:
            self._selected[compression] = select_compressor(compression, self._which)
        return self._selected[compression]
