"""Output streams that realize sinks during an unload."""

import logging
import subprocess
from typing import BinaryIO, Optional, Protocol

from unloader.core.compression import Compressor

logger = logging.getLogger(__name__)


class SinkOutput(Protocol):
    """A destination the unloader writes raw rows to."""

    path: str

    def open(self) -> BinaryIO:
        """Start the output and return the stream to write rows into."""
        ...

    def finish(self) -> Optional[str]:
        """Close the output, returning a failure reason or None on success."""
        ...


class FileOutput:
    """Rows written straight to a file."""

    def __init__(self, path: str):
        self.path = path
        self._file: BinaryIO | None = None

    def open(self) -> BinaryIO:
        self._file = open(self.path, "wb")
        return self._file

    def finish(self) -> Optional[str]:
        if self._file is not None:
            self._file.close()
            self._file = None
        return None


class _PipeWriter:
    """Writes into a compressor's stdin, dropping data once the pipe breaks."""

    def __init__(self, pipe: BinaryIO, path: str):
        self._pipe = pipe
        self._path = path
        self.broken = False

    def write(self, data: bytes) -> int:
        if self.broken:
            return len(data)
        try:
            return self._pipe.write(data)
        except BrokenPipeError:
            logger.warning(f"Compressor for {self._path} stopped reading its input")
            self.broken = True
            return len(data)

    def flush(self) -> None:
        if self.broken:
            return
        try:
            self._pipe.flush()
        except BrokenPipeError:
            self.broken = True


class CompressedOutput:
    """Rows piped through a compressor process into a file.

    The compressor runs as a tracked child process consuming the unloader's
    output concurrently. ``finish`` joins it and reports its outcome.
    """

    def __init__(self, path: str, compressor: Compressor):
        self.path = path
        self.compressor = compressor
        self._file: BinaryIO | None = None
        self._process: subprocess.Popen | None = None
        self._writer: _PipeWriter | None = None

    def open(self) -> BinaryIO:
        self._file = open(self.path, "wb")
        try:
            self._process = subprocess.Popen(
                list(self.compressor.command),
                stdin=subprocess.PIPE,
                stdout=self._file,
                stderr=subprocess.PIPE,
            )
        except OSError:
            self._file.close()
            self._file = None
            raise
        self._writer = _PipeWriter(self._process.stdin, self.path)
        return self._writer  # type: ignore[return-value]

    def finish(self) -> Optional[str]:
        if self._process is None:
            return None

        process, self._process = self._process, None
        _, stderr = process.communicate()
        if self._file is not None:
            self._file.close()
            self._file = None

        if process.returncode != 0:
            message = (stderr or b"").decode(errors="replace").strip()
            reason = f"{self.compressor.name} exited with status {process.returncode}"
            return f"{reason}: {message}" if message else reason
        if self._writer is not None and self._writer.broken:
            return f"{self.compressor.name} closed its input early"
        return None
