"""Tests for UnloadExecutor."""

import gzip
import io

import pytest

from unloader.core.batch import Batch
from unloader.core.exceptions import MissingFormatError, UnloaderFailure
from unloader.core.executor import UnloadExecutor, UnloadJob, build_query
from unloader.core.failure import FailureSignal
from unloader.core.metrics import UnloadMetrics
from unloader.core.sinks import Compression, DataFormat, classify_sink


class TestBuildQuery:
    """Tests for build_query."""

    def test_all_columns(self):
        assert build_query("sentences", []) == "SELECT * FROM sentences"

    def test_explicit_columns(self):
        assert build_query("sentences", ["id", "text"]) == "SELECT id,text FROM sentences"


class TestUnloadExecutor:
    """Tests for executing single batches."""

    @pytest.fixture
    def failures(self):
        signal = FailureSignal()
        signal.arm()
        return signal

    def job(self, *paths, columns=(), data_format=None):
        sinks = [classify_sink(path) for path in paths]
        batch = Batch(format=data_format or sinks[0].format, sinks=sinks)
        return UnloadJob(relation="docs", columns=tuple(columns), batch=batch)

    def test_plain_sinks_receive_all_rows(self, temp_dir, fake_unloader, failures):
        executor = UnloadExecutor(fake_unloader, failures)
        a, b = temp_dir / "a.tsv", temp_dir / "b.tsv"

        row_count = executor.execute(self.job(str(a), str(b), columns=["id", "text"]))

        assert row_count == 2
        assert fake_unloader.calls == [
            {"query": "SELECT id,text FROM docs", "format": DataFormat.TSV, "output_count": 2}
        ]
        assert a.read_bytes() == b"1\talpha\n2\tbeta\n"
        assert b.read_bytes() == a.read_bytes()

    def test_compressed_sink(self, temp_dir, fake_unloader, failures, compressors):
        executor = UnloadExecutor(fake_unloader, failures, compressors=compressors)
        path = temp_dir / "a.tsv.gz"

        executor.execute(self.job(str(path)))

        assert gzip.decompress(path.read_bytes()) == b"1\talpha\n2\tbeta\n"
        assert not failures.raised

    def test_compression_failure_is_recorded_not_raised(
        self, temp_dir, fake_unloader, failures, failing_compressor
    ):
        executor = UnloadExecutor(
            fake_unloader, failures, compressors=lambda compression: failing_compressor
        )
        plain = temp_dir / "a.tsv"
        broken = temp_dir / "b.tsv.gz"

        row_count = executor.execute(self.job(str(plain), str(broken)))

        assert row_count == 2
        assert plain.read_bytes() == b"1\talpha\n2\tbeta\n"
        assert failures.raised
        assert failures.failures[0]["path"] == str(broken)

    def test_empty_batch_writes_to_default_output(self, fake_unloader, failures):
        stdout = io.BytesIO()
        executor = UnloadExecutor(fake_unloader, failures, default_output=lambda: stdout)

        executor.execute(UnloadJob("docs", (), Batch(format=DataFormat.CSV)))

        assert stdout.getvalue() == b"1\talpha\n2\tbeta\n"
        assert fake_unloader.calls[0]["format"] is DataFormat.CSV

    def test_batch_without_format(self, fake_unloader, failures):
        executor = UnloadExecutor(fake_unloader, failures)
        with pytest.raises(MissingFormatError):
            executor.execute(UnloadJob("docs", (), Batch(format=None)))
        assert fake_unloader.calls == []

    def test_unloader_failure_propagates_and_joins_outputs(
        self, temp_dir, make_unloader, failures, compressors
    ):
        unloader = make_unloader(fail=UnloaderFailure("relation does not exist"))
        executor = UnloadExecutor(unloader, failures, compressors=compressors)
        path = temp_dir / "a.csv.gz"

        with pytest.raises(UnloaderFailure):
            executor.execute(self.job(str(path)))

        assert path.exists()
        assert not failures.raised

    def test_unopenable_sink(self, temp_dir, fake_unloader, failures):
        executor = UnloadExecutor(fake_unloader, failures)
        with pytest.raises(UnloaderFailure, match="Failed to open sink"):
            executor.execute(self.job(str(temp_dir / "missing" / "a.tsv")))
        assert fake_unloader.calls == []

    def test_metrics_recorded(self, temp_dir, fake_unloader, failures):
        metrics = UnloadMetrics("docs")
        executor = UnloadExecutor(fake_unloader, failures, metrics=metrics)
        executor.execute(self.job(str(temp_dir / "a.tsj"), str(temp_dir / "b.tsj")))
        assert metrics.batches_executed == 1
        assert metrics.rows_unloaded == 2
        assert metrics.sinks_written == 2

    def test_compressor_chosen_per_scheme(self, temp_dir, fake_unloader, failures, compressors):
        executor = UnloadExecutor(fake_unloader, failures, compressors=compressors)
        output = executor.make_output(classify_sink(str(temp_dir / "a.tsv.bz2")))
        assert output.compressor is compressors(Compression.BZIP2)
