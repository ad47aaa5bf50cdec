"""Judge every alignment of simulated reads against the truth in their names.

Walks a SAM/BAM/CRAM with pysam. Each primary, mapped alignment is moved into
genome coordinates (contig base + 0-based reference start), the read name is
decoded and the location is checked against the true interval widened by
``max_k``. Reads whose names cannot be decoded are logged and counted; one
bad name never stops the batch.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd
import pysam

from wgsimtruth.config import EvaluationConfig, IdentifierConfig
from wgsimtruth.core.genome import Genome, alignment_read_mode
from wgsimtruth.core.judge import read_misaligned
from wgsimtruth.core.wgsim_id import read_mate
from wgsimtruth.exceptions import (
    EvaluationError,
    IdentifierError,
    IdentifierParseError,
)
from wgsimtruth.modules.base import ModuleBase, ModuleResult
from wgsimtruth.utils.logging import LogTemplates
from wgsimtruth.utils.progress import iter_progress

RESULT_COLUMNS = [
    "read_id",
    "mate",
    "reference_name",
    "location",
    "mapq",
    "low",
    "high",
    "status",
    "error",
]

STATUS_ALIGNED = "aligned"
STATUS_MISALIGNED = "misaligned"
STATUS_UNMAPPED = "unmapped"
STATUS_LOW_MAPQ = "low_mapq"
STATUS_DECODE_FAILURE = "decode_failure"
STATUS_UNKNOWN_REFERENCE = "unknown_reference"


@dataclass
class EvaluationSummary:
    """Counts over one evaluated alignment file."""

    total: int = 0
    evaluated: int = 0
    aligned: int = 0
    misaligned: int = 0
    unmapped: int = 0
    low_mapq: int = 0
    filtered: int = 0
    decode_failures: int = 0
    unknown_reference: int = 0

    @property
    def percent_correct(self) -> float:
        return 100.0 * self.aligned / self.evaluated if self.evaluated else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["percent_correct"] = round(self.percent_correct, 4)
        return data


class MappingEvaluator(ModuleBase):
    """Count correct and misaligned placements of WGSim reads."""

    def __init__(
        self,
        genome: Genome,
        evaluation: Optional[EvaluationConfig] = None,
        identifier: Optional[IdentifierConfig] = None,
        enable_progress: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="mapping_evaluator", logger=logger)
        self.genome = genome
        self.evaluation = evaluation or EvaluationConfig()
        self.identifier = identifier or IdentifierConfig()
        self.enable_progress = enable_progress
        if self.evaluation.max_k < 0:
            raise EvaluationError(f"max_k must be >= 0, got {self.evaluation.max_k}")

    def _skip_record(self, record: pysam.AlignedSegment) -> bool:
        if record.is_secondary and not self.evaluation.include_secondary:
            return True
        if record.is_supplementary and not self.evaluation.include_supplementary:
            return True
        return False

    @staticmethod
    def _mate(record: pysam.AlignedSegment) -> Optional[int]:
        if record.is_paired:
            return 1 if record.is_read1 else 2 if record.is_read2 else None
        return read_mate(record.query_name or "")

    def judge_record(self, record: pysam.AlignedSegment, summary: EvaluationSummary) -> Dict[str, Any]:
        """Classify one alignment record and update ``summary``."""
        read_id = record.query_name or ""
        row: Dict[str, Any] = {
            "read_id": read_id,
            "mate": self._mate(record),
            "reference_name": None,
            "location": None,
            "mapq": None,
            "low": None,
            "high": None,
            "status": None,
            "error": None,
        }
        summary.total += 1

        if record.is_unmapped or record.reference_name is None:
            summary.unmapped += 1
            row["status"] = STATUS_UNMAPPED
            return row

        row["reference_name"] = record.reference_name
        row["mapq"] = record.mapping_quality
        if record.mapping_quality < self.evaluation.min_mapq:
            summary.low_mapq += 1
            row["status"] = STATUS_LOW_MAPQ
            return row

        contig_base = self.genome.offset_of_contig(record.reference_name)
        if contig_base is None:
            summary.unknown_reference += 1
            row["status"] = STATUS_UNKNOWN_REFERENCE
            row["error"] = f"reference {record.reference_name!r} not in genome"
            self.logger.warning(
                f"Alignment of {read_id} is on {record.reference_name!r}, which is not in the genome"
            )
            return row

        location = contig_base + record.reference_start
        row["location"] = location
        try:
            verdict = read_misaligned(
                read_id, location, self.genome, self.evaluation.max_k, **self.identifier.limits()
            )
        except IdentifierError as e:
            summary.decode_failures += 1
            row["status"] = STATUS_DECODE_FAILURE
            row["error"] = (
                e.kind.value if isinstance(e, IdentifierParseError) else "identifier_too_long"
            )
            self.logger.warning(LogTemplates.DECODE_FAILURE.format(read_id=read_id[:80], error=e))
            return row

        summary.evaluated += 1
        row["low"] = verdict.low
        row["high"] = verdict.high
        if verdict.misaligned:
            summary.misaligned += 1
            row["status"] = STATUS_MISALIGNED
            self.logger.debug(
                f"{read_id} placed at {location}, true interval {verdict.interval}"
            )
        else:
            summary.aligned += 1
            row["status"] = STATUS_ALIGNED
        return row

    def evaluate_records(
        self, records: Iterable[pysam.AlignedSegment]
    ) -> Tuple[pd.DataFrame, EvaluationSummary]:
        """Judge an iterable of alignment records.

        Returns:
            Per-record results (``RESULT_COLUMNS``) and the summary counts
        """
        summary = EvaluationSummary()
        rows: List[Dict[str, Any]] = []
        for record in iter_progress(records, desc="evaluate", enabled=self.enable_progress):
            if self._skip_record(record):
                summary.filtered += 1
                continue
            rows.append(self.judge_record(record, summary))

        df = pd.DataFrame(rows, columns=RESULT_COLUMNS)
        for column in ("mate", "location", "mapq", "low", "high"):
            df[column] = df[column].astype("Int64")
        return df, summary

    def evaluate(self, alignment_file: Path) -> Tuple[pd.DataFrame, EvaluationSummary]:
        """Judge every record of ``alignment_file``."""
        path = Path(alignment_file)
        # until_eof also yields unmapped reads and works without an index
        with pysam.AlignmentFile(str(path), alignment_read_mode(path)) as handle:
            return self.evaluate_records(handle.fetch(until_eof=True))

    def validate_inputs(self, alignment_file: Path, **kwargs: Any) -> bool:
        self.validate_input_file(alignment_file, "alignment")
        if len(self.genome) == 0:
            raise EvaluationError("Genome has no contigs")
        return True

    def execute(
        self, alignment_file: Path, output_tsv: Optional[Path] = None, **kwargs: Any
    ) -> ModuleResult:
        result = ModuleResult(success=False, module_name=self.name)
        df, summary = self.evaluate(alignment_file)

        for key, value in summary.to_dict().items():
            result.add_metric(key, value)

        if output_tsv is not None:
            output_tsv = Path(output_tsv)
            output_tsv.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(output_tsv, sep="\t", index=False, na_rep="NA")
            result.add_output("per_read", output_tsv)
            self.logger.info(
                LogTemplates.FILE_CREATED.format(path=output_tsv, size=output_tsv.stat().st_size)
            )

        self.logger.info(
            LogTemplates.EVALUATION_STATS.format(
                evaluated=summary.evaluated,
                total=summary.total,
                aligned=summary.aligned,
                misaligned=summary.misaligned,
                percent=summary.percent_correct,
            )
        )
        self.logger.info(
            LogTemplates.SKIPPED_STATS.format(
                unmapped=summary.unmapped,
                low_mapq=summary.low_mapq,
                failures=summary.decode_failures,
            )
        )
        if summary.decode_failures:
            result.add_warning(
                f"{summary.decode_failures} read name(s) could not be decoded as WGSim identifiers"
            )
        if summary.unknown_reference:
            result.add_warning(
                f"{summary.unknown_reference} alignment(s) on references missing from the genome"
            )
        # Only records that reached the decoder count: judged plus undecodable
        if summary.decode_failures and summary.evaluated == 0:
            result.error_message = "No read name could be decoded; are these WGSim reads?"
            return result

        result.success = True
        return result
