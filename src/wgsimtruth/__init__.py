"""wgsimtruth: WGSim read-name truth decoding and alignment correctness checks."""

from wgsimtruth.__version__ import __version__
from wgsimtruth.core.coordinates import GenomeInterval
from wgsimtruth.core.genome import Contig, Genome
from wgsimtruth.core.judge import MisalignmentVerdict, is_misaligned, read_misaligned
from wgsimtruth.core.wgsim_id import (
    DecodeResult,
    ParsedIdentifier,
    ParseFailure,
    decode_interval,
    generate_identifier,
    generate_identifier_at,
    parse_identifier,
    try_decode,
)

__all__ = [
    "__version__",
    "Contig",
    "DecodeResult",
    "Genome",
    "GenomeInterval",
    "MisalignmentVerdict",
    "ParsedIdentifier",
    "ParseFailure",
    "decode_interval",
    "generate_identifier",
    "generate_identifier_at",
    "is_misaligned",
    "parse_identifier",
    "read_misaligned",
    "try_decode",
]
