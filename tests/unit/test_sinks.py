"""Tests for sink classification."""

from pathlib import Path

import pytest

from unloader.core.exceptions import UnrecognizedFormatError, UsageError
from unloader.core.sinks import (
    FORMAT_SUFFIXES,
    Compression,
    DataFormat,
    SinkSpec,
    classify_sink,
    default_sink_path,
    detect_compression,
    detect_format,
)


class TestDetection:
    """Tests for suffix-based format and compression detection."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("out.tsj", DataFormat.TSJ),
            ("out.tsv", DataFormat.TSV),
            ("out.csv", DataFormat.CSV),
            ("dir.csv/out.tsv.bz2", DataFormat.TSV),
            ("out.csv.gz", DataFormat.CSV),
            ("out.txt", None),
            ("out.gz", None),
            ("out.tsv.zip", None),
        ],
    )
    def test_detect_format(self, path, expected):
        assert detect_format(path) is expected

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("out.tsv.bz2", Compression.BZIP2),
            ("out.tsv.gz", Compression.GZIP),
            ("out.gz", Compression.GZIP),
            ("out.tsv", Compression.NONE),
            ("out.gzip", Compression.NONE),
        ],
    )
    def test_detect_compression(self, path, expected):
        assert detect_compression(path) is expected

    def test_probe_order_covers_every_format_and_compression(self):
        """Test the suffix table order used for default path probing."""
        suffixes = [suffix for suffix, _ in FORMAT_SUFFIXES]
        assert suffixes == [
            ".tsj", ".tsj.bz2", ".tsj.gz",
            ".tsv", ".tsv.bz2", ".tsv.gz",
            ".csv", ".csv.bz2", ".csv.gz",
        ]


class TestClassifySink:
    """Tests for classify_sink."""

    def test_format_from_suffix(self):
        assert classify_sink("a.tsv") == SinkSpec("a.tsv", DataFormat.TSV, Compression.NONE)

    def test_compression_independent_of_format(self):
        """Test that x.tsv.gz is tsv with gzip."""
        spec = classify_sink("x.tsv.gz")
        assert spec.format is DataFormat.TSV
        assert spec.compression is Compression.GZIP
        assert spec.is_compressed

    def test_default_format_with_compression_only_suffix(self):
        """Test that x.gz with default tsj is tsj with gzip."""
        spec = classify_sink("x.gz", default_format=DataFormat.TSJ)
        assert spec.format is DataFormat.TSJ
        assert spec.compression is Compression.GZIP

    @pytest.mark.parametrize("path", ["a.tsj", "a.tsv.bz2", "a.txt", "a"])
    def test_forced_format_always_wins(self, path):
        spec = classify_sink(path, forced_format=DataFormat.CSV, default_format=DataFormat.TSV)
        assert spec.format is DataFormat.CSV

    def test_forced_format_keeps_suffix_compression(self):
        spec = classify_sink("a.tsj.bz2", forced_format=DataFormat.CSV)
        assert spec.compression is Compression.BZIP2

    def test_suffix_beats_default_format(self):
        spec = classify_sink("a.csv", default_format=DataFormat.TSJ)
        assert spec.format is DataFormat.CSV

    def test_unrecognized_format(self):
        with pytest.raises(UnrecognizedFormatError) as exc_info:
            classify_sink("data.txt")
        assert exc_info.value.path == "data.txt"
        assert "data.txt" in str(exc_info.value)
        assert isinstance(exc_info.value, UsageError)

    def test_classification_is_idempotent(self):
        first = classify_sink("out.csv.bz2", default_format=DataFormat.TSJ)
        second = classify_sink("out.csv.bz2", default_format=DataFormat.TSJ)
        assert first == second


class TestDefaultSinkPath:
    """Tests for default_sink_path."""

    def test_synthesized_tsj_without_configuration(self, temp_dir):
        assert default_sink_path("sentences", base_dir=temp_dir) == str(
            temp_dir / "input" / "sentences.tsj"
        )

    def test_relative_path_without_base_dir(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        assert default_sink_path("sentences") == str(Path("input") / "sentences.tsj")

    def test_forced_format_beats_default_format(self, temp_dir):
        path = default_sink_path(
            "docs", base_dir=temp_dir, forced_format=DataFormat.CSV, default_format=DataFormat.TSV
        )
        assert path.endswith("docs.csv")

    def test_default_format_used_for_extension(self, temp_dir):
        path = default_sink_path("docs", base_dir=temp_dir, default_format=DataFormat.TSV)
        assert path.endswith("docs.tsv")

    def test_existing_input_file_wins(self, temp_dir):
        (temp_dir / "input").mkdir()
        (temp_dir / "input" / "docs.tsv.gz").write_bytes(b"")
        path = default_sink_path("docs", base_dir=temp_dir, forced_format=DataFormat.TSJ)
        assert path == str(temp_dir / "input" / "docs.tsv.gz")

    def test_first_existing_input_file_in_probe_order(self, temp_dir):
        (temp_dir / "input").mkdir()
        (temp_dir / "input" / "docs.csv").write_bytes(b"")
        (temp_dir / "input" / "docs.tsj.bz2").write_bytes(b"")
        path = default_sink_path("docs", base_dir=temp_dir)
        assert path == str(temp_dir / "input" / "docs.tsj.bz2")
