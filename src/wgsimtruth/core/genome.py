"""Genome catalog: contigs laid end to end in one coordinate space.

Aligners that index the whole reference as a single sequence report
locations as offsets into the concatenation of all contigs. ``Genome`` keeps
the base offset of each contig so contig-relative positions (as written by
WGSim) can be moved into that space and back.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

import pandas as pd
import pysam
from Bio import SeqIO

from wgsimtruth.exceptions import FileFormatError, GenomeLookupError
from wgsimtruth.utils.logging import get_logger

logger = get_logger("genome")


@dataclass(frozen=True)
class Contig:
    """A named reference sequence and where it starts in the genome."""

    name: str
    beginning_offset: int
    length: int

    @property
    def end(self) -> int:
        """First absolute coordinate past this contig."""
        return self.beginning_offset + self.length

    def __contains__(self, location: int) -> bool:
        return self.beginning_offset <= location < self.end


class Genome:
    """Immutable, ordered catalog of contigs.

    Lookups never mutate the catalog, so a single instance can be shared by
    any number of readers.
    """

    def __init__(self, contigs: Sequence[Contig]):
        self._contigs: Tuple[Contig, ...] = tuple(contigs)
        self._by_name = {}
        previous_end = 0
        for contig in self._contigs:
            if contig.length < 0:
                raise GenomeLookupError(f"Contig {contig.name!r} has negative length")
            if contig.beginning_offset < previous_end:
                raise GenomeLookupError(
                    f"Contig {contig.name!r} starts at {contig.beginning_offset}, "
                    f"overlapping the previous contig ending at {previous_end}"
                )
            if contig.name in self._by_name:
                raise GenomeLookupError(f"Duplicate contig name: {contig.name!r}")
            self._by_name[contig.name] = contig
            previous_end = contig.end
        self._starts = [c.beginning_offset for c in self._contigs]

    # ---------- Constructors ----------
    @classmethod
    def from_lengths(
        cls, lengths: Iterable[Tuple[str, int]], padding: int = 0
    ) -> "Genome":
        """Lay out ``(name, length)`` pairs in order, ``padding`` bases apart."""
        if padding < 0:
            raise GenomeLookupError(f"Contig padding must be >= 0, got {padding}")
        contigs = []
        offset = 0
        for name, length in lengths:
            contigs.append(Contig(name=str(name), beginning_offset=offset, length=int(length)))
            offset += int(length) + padding
        return cls(contigs)

    @classmethod
    def from_fasta(cls, fasta_path: Union[str, Path], padding: int = 0) -> "Genome":
        """Build the catalog from the records of a FASTA file."""
        path = Path(fasta_path)
        if not path.exists():
            raise FileNotFoundError(f"Reference FASTA not found: {path}")
        lengths = [(record.id, len(record.seq)) for record in SeqIO.parse(str(path), "fasta")]
        if not lengths:
            raise FileFormatError(f"No FASTA records found in {path}")
        logger.debug(f"Loaded {len(lengths)} contigs from {path}")
        return cls.from_lengths(lengths, padding=padding)

    @classmethod
    def from_fai(cls, fai_path: Union[str, Path], padding: int = 0) -> "Genome":
        """Build the catalog from a samtools ``.fai`` index (name and length columns)."""
        path = Path(fai_path)
        if not path.exists():
            raise FileNotFoundError(f"FASTA index not found: {path}")
        try:
            df = pd.read_csv(
                path,
                sep="\t",
                header=None,
                usecols=[0, 1],
                names=["name", "length"],
                dtype={"name": str, "length": "int64"},
            )
        except (ValueError, pd.errors.ParserError) as e:
            raise FileFormatError(f"Malformed FASTA index {path}: {e}") from e
        if df.empty:
            raise FileFormatError(f"FASTA index {path} lists no contigs")
        logger.debug(f"Loaded {len(df)} contigs from {path}")
        return cls.from_lengths(zip(df["name"], df["length"]), padding=padding)

    @classmethod
    def from_alignment_header(cls, alignment_path: Union[str, Path], padding: int = 0) -> "Genome":
        """Build the catalog from the @SQ lines of a SAM/BAM/CRAM header."""
        path = Path(alignment_path)
        if not path.exists():
            raise FileNotFoundError(f"Alignment file not found: {path}")
        with pysam.AlignmentFile(str(path), alignment_read_mode(path)) as handle:
            lengths = list(zip(handle.references, handle.lengths))
        if not lengths:
            raise FileFormatError(f"Alignment header of {path} has no @SQ lines")
        return cls.from_lengths(lengths, padding=padding)

    # ---------- Lookups ----------
    def offset_of_contig(self, name: str) -> Optional[int]:
        """Base offset of the named contig, or None if the genome has no such contig."""
        contig = self._by_name.get(name)
        return None if contig is None else contig.beginning_offset

    def get_contig(self, name: str) -> Optional[Contig]:
        return self._by_name.get(name)

    def contig_at_location(self, location: int) -> Contig:
        """Return the contig holding absolute ``location``.

        Raises:
            GenomeLookupError: If the location falls in padding, before the
                first contig or past the end of the genome.
        """
        idx = bisect_right(self._starts, location) - 1
        if location < 0 or idx < 0 or location not in self._contigs[idx]:
            raise GenomeLookupError(f"Location {location} is not inside any contig")
        return self._contigs[idx]

    @property
    def contigs(self) -> Tuple[Contig, ...]:
        return self._contigs

    @property
    def size(self) -> int:
        """Extent of the coordinate space, including padding between contigs."""
        return self._contigs[-1].end if self._contigs else 0

    def __len__(self) -> int:
        return len(self._contigs)

    def __iter__(self) -> Iterator[Contig]:
        return iter(self._contigs)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"Genome(contigs={len(self._contigs)}, size={self.size})"


def alignment_read_mode(path: Path) -> str:
    """pysam read mode for an alignment file, chosen by extension."""
    suffix = path.suffix.lower()
    if suffix == ".bam":
        return "rb"
    if suffix == ".cram":
        return "rc"
    return "r"


def load_genome(
    reference: Optional[Path] = None,
    fai: Optional[Path] = None,
    padding: int = 0,
) -> Genome:
    """Load a genome from a FASTA index when given, else from the FASTA itself.

    A ``<reference>.fai`` sitting next to the FASTA is preferred over parsing
    the sequences.
    """
    if fai is not None:
        return Genome.from_fai(fai, padding=padding)
    if reference is None:
        raise GenomeLookupError("A reference FASTA or FASTA index is required")
    sibling_fai = Path(f"{reference}.fai")
    if sibling_fai.exists():
        logger.debug(f"Using FASTA index {sibling_fai}")
        return Genome.from_fai(sibling_fai, padding=padding)
    return Genome.from_fasta(reference, padding=padding)
