"""Tests for the batch mapping evaluator."""

import logging

import pandas as pd
import pytest

from wgsimtruth.config import EvaluationConfig, IdentifierConfig
from wgsimtruth.exceptions import EvaluationError
from wgsimtruth.modules.mapping_evaluator import RESULT_COLUMNS, MappingEvaluator


GOOD = "chr2_101_200_0:0:0_0:0:0_1/1"  # true interval 1100-1199
ON_CHR1 = "chr_1_11_60_0::0:0_2:0:a0_0/1"  # true interval 10-59


@pytest.fixture
def records():
    return [
        {"name": GOOD, "contig": "chr2", "start": 100},
        {"name": ON_CHR1, "contig": "chr_1", "start": 300},
        {"name": "garbage_read", "contig": "chr2", "start": 5},
        {"name": "unmapped_1_2_0:0", "contig": None},
        {"name": "chr2_1_20_0:0", "contig": "chr2", "start": 0, "mapq": 3},
        {"name": GOOD, "contig": "chr2", "start": 400, "flag": 256},
        {"name": GOOD, "contig": "chr2", "start": 400, "flag": 2048},
    ]


class TestMappingEvaluator:
    def test_summary_counts(self, genome, write_sam, records):
        evaluator = MappingEvaluator(genome, EvaluationConfig(min_mapq=10))
        df, summary = evaluator.evaluate(write_sam(records))

        assert summary.total == 5
        assert summary.filtered == 2
        assert summary.evaluated == 2
        assert summary.aligned == 1
        assert summary.misaligned == 1
        assert summary.unmapped == 1
        assert summary.low_mapq == 1
        assert summary.decode_failures == 1
        assert summary.percent_correct == pytest.approx(50.0)
        assert list(df.columns) == [
            "read_id", "mate", "reference_name", "location", "mapq", "low", "high", "status", "error",
        ]
        assert len(df) == 5

    def test_summary_metric_names(self, genome, write_sam, records):
        _, summary = MappingEvaluator(genome).evaluate(write_sam(records))
        assert list(summary.to_dict()) == [
            "total", "evaluated", "aligned", "misaligned", "unmapped", "low_mapq",
            "filtered", "decode_failures", "unknown_reference", "percent_correct",
        ]

    def test_per_read_rows(self, genome, write_sam, records):
        evaluator = MappingEvaluator(genome, EvaluationConfig(min_mapq=10))
        df, _ = evaluator.evaluate(write_sam(records))
        by_status = df.set_index("status")

        good = by_status.loc["aligned"]
        assert good["read_id"] == GOOD
        assert good["location"] == 1100
        assert (good["low"], good["high"]) == (1100, 1199)

        bad = by_status.loc["misaligned"]
        assert bad["location"] == 300
        assert (bad["low"], bad["high"]) == (10, 59)

        failed = by_status.loc["decode_failure"]
        assert failed["error"] == "missing_colon"
        assert pd.isna(failed["low"])

    def test_tolerance_changes_verdict(self, genome, write_sam):
        sam = write_sam([{"name": ON_CHR1, "contig": "chr_1", "start": 64}])
        _, strict = MappingEvaluator(genome, EvaluationConfig(max_k=4)).evaluate(sam)
        _, lenient = MappingEvaluator(genome, EvaluationConfig(max_k=5)).evaluate(sam)
        assert strict.misaligned == 1
        assert lenient.aligned == 1

    def test_secondary_can_be_included(self, genome, write_sam):
        sam = write_sam(
            [
                {"name": GOOD, "contig": "chr2", "start": 100},
                {"name": GOOD, "contig": "chr2", "start": 400, "flag": 256},
            ]
        )
        config = EvaluationConfig(include_secondary=True)
        _, summary = MappingEvaluator(genome, config).evaluate(sam)
        assert summary.total == 2
        assert summary.misaligned == 1

    def test_unknown_reference(self, genome, write_sam):
        contigs = [("chr2", 500), ("chrX", 100)]
        sam = write_sam([{"name": GOOD, "contig": "chrX", "start": 1}], contigs=contigs)
        df, summary = MappingEvaluator(genome).evaluate(sam)
        assert summary.unknown_reference == 1
        assert df.loc[0, "status"] == "unknown_reference"

    def test_over_long_name_is_skipped(self, genome, write_sam):
        sam = write_sam(
            [
                {"name": "chr2_1_20_0:" + "x" * 200, "contig": "chr2", "start": 0},
                {"name": GOOD, "contig": "chr2", "start": 100},
            ]
        )
        identifier = IdentifierConfig(max_identifier_length=100)
        df, summary = MappingEvaluator(genome, identifier=identifier).evaluate(sam)
        assert summary.decode_failures == 1
        assert summary.aligned == 1
        assert df.loc[0, "error"] == "identifier_too_long"

    def test_decode_failure_is_logged(self, genome, write_sam, caplog):
        sam = write_sam([{"name": "garbage", "contig": "chr2", "start": 0}])
        with caplog.at_level(logging.WARNING, logger="wgsimtruth"):
            MappingEvaluator(genome).evaluate(sam)
        assert "Skipping read garbage" in caplog.text

    def test_negative_max_k_rejected(self, genome):
        with pytest.raises(EvaluationError):
            MappingEvaluator(genome, EvaluationConfig(max_k=-1))


class TestRun:
    def test_run_writes_tsv(self, genome, write_sam, records, tmp_path):
        output = tmp_path / "out" / "per_read.tsv"
        evaluator = MappingEvaluator(genome, EvaluationConfig(min_mapq=10))
        result = evaluator.run(alignment_file=write_sam(records), output_tsv=output)

        assert result.success
        assert result.metrics["aligned"] == 1
        assert result.metrics["decode_failures"] == 1
        assert result.output_files["per_read"] == output
        assert result.warnings

        table = pd.read_csv(output, sep="\t")
        assert list(table.columns) == RESULT_COLUMNS
        assert len(table) == 5

    def test_run_fails_when_nothing_decodes(self, genome, write_sam):
        sam = write_sam([{"name": "nope", "contig": "chr2", "start": 0}])
        result = MappingEvaluator(genome).run(alignment_file=sam)
        assert not result.success
        assert "WGSim" in result.error_message

    def test_run_fails_when_no_mapped_read_decodes(self, genome, write_sam):
        sam = write_sam(
            [
                {"name": "junk1", "contig": "chr2", "start": 0},
                {"name": "junk2", "contig": "chr2", "start": 10},
                {"name": GOOD, "contig": None},
            ]
        )
        result = MappingEvaluator(genome).run(alignment_file=sam)
        assert not result.success
        assert result.metrics["unmapped"] == 1
        assert result.metrics["decode_failures"] == 2

    def test_run_succeeds_without_decode_failures(self, genome, write_sam):
        sam = write_sam([{"name": GOOD, "contig": None}])
        result = MappingEvaluator(genome).run(alignment_file=sam)
        assert result.success
        assert result.metrics["evaluated"] == 0

    def test_run_missing_file(self, genome, tmp_path):
        result = MappingEvaluator(genome).run(alignment_file=tmp_path / "missing.bam")
        assert not result.success
        assert "not found" in result.error_message
