"""Pytest configuration and shared fixtures."""

import json
import logging
import sys
import tempfile
from pathlib import Path
from typing import BinaryIO, Sequence

import pytest

from unloader.core.compression import Compressor
from unloader.core.sinks import Compression, DataFormat

GZIP_WITH_PYTHON = Compressor(
    "py-gzip",
    (
        sys.executable,
        "-c",
        "import gzip, sys; sys.stdout.buffer.write(gzip.compress(sys.stdin.buffer.read()))",
    ),
)

BZIP2_WITH_PYTHON = Compressor(
    "py-bzip2",
    (
        sys.executable,
        "-c",
        "import bz2, sys; sys.stdout.buffer.write(bz2.compress(sys.stdin.buffer.read()))",
    ),
)

FAILING_COMPRESSOR = Compressor(
    "broken",
    (
        sys.executable,
        "-c",
        "import sys; sys.stdin.buffer.read(); sys.stderr.write('disk full'); sys.exit(3)",
    ),
)


class FakeUnloader:
    """DatabaseUnloader that writes canned rows and records every call."""

    def __init__(self, rows: Sequence[bytes] = (b"1\talpha\n", b"2\tbeta\n"), fail: Exception | None = None):
        self.rows = list(rows)
        self.fail = fail
        self.calls: list[dict] = []
        self.closed = False

    def unload(self, query: str, data_format: DataFormat, outputs: Sequence[BinaryIO]) -> int:
        self.calls.append(
            {"query": query, "format": data_format, "output_count": len(outputs)}
        )
        if self.fail is not None:
            raise self.fail
        for output in outputs:
            for row in self.rows:
                output.write(row)
            output.flush()
        return len(self.rows)

    def close(self) -> None:
        self.closed = True


def python_compressors(compression: Compression) -> Compressor:
    """Compressor selector that does not depend on installed tools."""
    return {Compression.GZIP: GZIP_WITH_PYTHON, Compression.BZIP2: BZIP2_WITH_PYTHON}[compression]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_unloader():
    """A FakeUnloader writing two rows."""
    return FakeUnloader()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove unloader environment variables for the test."""
    for name in ("LOAD_FORMAT", "LOAD_FORMAT_DEFAULT", "DATABASE_URL", "UNLOADER_APP"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def compiled_schema():
    """Compiled schema with one variable and one plain relation."""
    return {
        "schema": {
            "relations": {
                "has_spouse": {
                    "variable_type": "boolean",
                    "columns": {
                        "c": {"index": 2, "type": "text"},
                        "a": {"index": 0, "type": "text"},
                        "b": {"index": 1, "type": "text"},
                    },
                },
                "sentences": {
                    "columns": {
                        "id": {"index": 0, "type": "bigint"},
                        "text": {"index": 1, "type": "text"},
                    },
                },
            }
        }
    }


@pytest.fixture
def app_dir(temp_dir, compiled_schema):
    """Create a compiled application directory with a db.url."""
    root = temp_dir / "app"
    (root / "run" / "compiled").mkdir(parents=True)
    (root / "input").mkdir()
    (root / "db.url").write_text("duckdb:///" + str(root / "app.duckdb") + "\n")
    (root / "run" / "compiled" / "schema.json").write_text(json.dumps(compiled_schema))
    return root


@pytest.fixture
def gzip_compressor():
    return GZIP_WITH_PYTHON


@pytest.fixture
def bzip2_compressor():
    return BZIP2_WITH_PYTHON


@pytest.fixture
def failing_compressor():
    return FAILING_COMPRESSOR


@pytest.fixture
def compressors():
    """Compressor selector backed by the Python interpreter instead of installed tools."""
    return python_compressors


@pytest.fixture
def make_unloader():
    """Factory for FakeUnloader instances."""
    return FakeUnloader


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers configure_logging attached during a test."""
    yield
    logger = logging.getLogger("unloader")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
