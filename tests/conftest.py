"""Pytest configuration for wgsimtruth tests."""

import logging
import sys
from pathlib import Path

import pysam
import pytest

# Add src directory to Python path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from wgsimtruth.core.genome import Genome  # noqa: E402

CONTIGS = [("chr_1", 1000), ("chr2", 500), ("chrM", 100)]


@pytest.fixture(autouse=True)
def reset_logging_after_test():
    """Reset wgsimtruth logger state after each test.

    setup_logging() sets propagate=False, which breaks caplog in later tests.
    """
    yield
    app_logger = logging.getLogger("wgsimtruth")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


@pytest.fixture
def genome():
    """chr_1 at 0, chr2 at 1000, chrM at 1500."""
    return Genome.from_lengths(CONTIGS)


@pytest.fixture
def reference_fasta(tmp_path):
    path = tmp_path / "ref.fa"
    with open(path, "w") as f:
        for name, length in CONTIGS:
            f.write(f">{name} test contig\n")
            seq = "ACGT" * (length // 4)
            for i in range(0, len(seq), 60):
                f.write(seq[i:i + 60] + "\n")
    return path


@pytest.fixture
def reference_fai(tmp_path):
    path = tmp_path / "ref.fa.fai"
    offset = 0
    lines = []
    for name, length in CONTIGS:
        lines.append(f"{name}\t{length}\t{offset}\t60\t61")
        offset += length + length // 60 + 1 + len(name) + 2
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def write_sam(tmp_path):
    """Write alignment records to a SAM file.

    Each record is a dict with ``name`` plus optional ``contig``, ``start``
    (0-based), ``mapq``, ``flag`` and ``length``; ``contig=None`` writes an
    unmapped record.
    """

    def _write(records, name="aln.sam", contigs=CONTIGS):
        path = tmp_path / name
        header = {
            "HD": {"VN": "1.6", "SO": "unsorted"},
            "SQ": [{"SN": sn, "LN": ln} for sn, ln in contigs],
        }
        contig_ids = {sn: i for i, (sn, _) in enumerate(contigs)}
        with pysam.AlignmentFile(str(path), "w", header=header) as out:
            for rec in records:
                length = rec.get("length", 20)
                seg = pysam.AlignedSegment(out.header)
                seg.query_name = rec["name"]
                seg.query_sequence = "A" * length
                seg.query_qualities = pysam.qualitystring_to_array("I" * length)
                contig = rec.get("contig")
                if contig is None:
                    seg.flag = 4 | rec.get("flag", 0)
                    seg.reference_id = -1
                    seg.reference_start = -1
                else:
                    seg.flag = rec.get("flag", 0)
                    seg.reference_id = contig_ids[contig]
                    seg.reference_start = rec["start"]
                    seg.mapping_quality = rec.get("mapq", 60)
                    seg.cigartuples = [(0, length)]
                out.write(seg)
        return path

    return _write
