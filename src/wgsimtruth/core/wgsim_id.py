"""WGSim read identifiers: decode the true source location, or generate one.

WGSim names each read ``contig_begin_end_<pair info>:<more>``, with 1-based
``begin``/``end`` on the source contig. The contig name may itself contain
``_`` and the trailing part may contain more ``:``, so fields are found by
anchoring on the first ``:`` and walking back over exactly three ``_``:

    chr_1_100_200_0::0:0_2:0:a0_0/1
         ^   ^   ^ ^
         3   2   1 first colon

Everything before the third underscore is the contig name, the field after
it is the first offset and the field after the second underscore is the
second offset. An empty second field marks a single-end read.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from wgsimtruth.constants import (
    FIELD_SEPARATOR,
    GENERATED_ID_FILLER,
    MAX_CONTIG_NAME_LENGTH,
    MAX_IDENTIFIER_LENGTH,
    TAIL_SEPARATOR,
)
from wgsimtruth.core.coordinates import GenomeInterval, to_one_based
from wgsimtruth.core.genome import Contig, Genome
from wgsimtruth.exceptions import (
    IdentifierParseError,
    IdentifierTooLongError,
    ParseFailure,
)

# Leading decimal integer of a field; trailing text is ignored
_OFFSET_RE = re.compile(r"\s*\+?([0-9]+)", re.ASCII)
_MATE_RE = re.compile(r"/([12])$")


@dataclass(frozen=True)
class ParsedIdentifier:
    """Fields recovered from a WGSim read identifier (offsets are 1-based, contig-relative)."""

    contig_name: str
    offset1: int
    offset2: int
    is_single_end: bool = False

    def interval(self, contig_base: int) -> GenomeInterval:
        """Absolute interval for a contig starting at ``contig_base``."""
        return GenomeInterval.from_offsets(self.offset1, self.offset2, contig_base)


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of :func:`try_decode`: either an interval or the reason there is none."""

    read_id: str
    parsed: Optional[ParsedIdentifier] = None
    interval: Optional[GenomeInterval] = None
    error: Optional[IdentifierParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failure(self) -> Optional[ParseFailure]:
        return None if self.error is None else self.error.kind


def _parse_offset(field: str) -> Optional[int]:
    match = _OFFSET_RE.match(field)
    if match is None:
        return None
    value = int(match.group(1))
    # Offsets are 1-based; zero has no position
    return value if value > 0 else None


def _fail(kind: ParseFailure, read_id: str, reason: str) -> IdentifierParseError:
    return IdentifierParseError(
        kind, f"Failed to parse read id '{read_id}', {reason}", read_id=read_id
    )


def parse_identifier(
    read_id: str,
    max_identifier_length: int = MAX_IDENTIFIER_LENGTH,
    max_contig_name_length: int = MAX_CONTIG_NAME_LENGTH,
) -> ParsedIdentifier:
    """Split a WGSim read identifier into contig name and offsets.

    Args:
        read_id: Read name as found in the FASTQ/SAM, without the leading '@'
        max_identifier_length: Longest identifier accepted
        max_contig_name_length: Longest contig name accepted

    Returns:
        ParsedIdentifier with 1-based, contig-relative offsets

    Raises:
        IdentifierTooLongError: If ``read_id`` is longer than ``max_identifier_length``
        IdentifierParseError: If the identifier does not follow the dialect
    """
    if len(read_id) > max_identifier_length:
        raise IdentifierTooLongError(
            f"Got a read ID that was too long ({len(read_id)} > {max_identifier_length}); "
            f"it starts with {read_id[:64]!r}",
            read_id=read_id,
            length=len(read_id),
            max_length=max_identifier_length,
        )

    colon = read_id.find(TAIL_SEPARATOR)
    if colon < 0:
        raise _fail(ParseFailure.MISSING_COLON, read_id, "couldn't find a colon")

    first = read_id.rfind(FIELD_SEPARATOR, 0, colon)
    if first < 0:
        raise _fail(
            ParseFailure.MISSING_UNDERSCORE_1, read_id, "couldn't find underscore before colon"
        )
    second = read_id.rfind(FIELD_SEPARATOR, 0, first)
    if second < 0:
        raise _fail(
            ParseFailure.MISSING_UNDERSCORE_2,
            read_id,
            "couldn't find second underscore before colon",
        )
    third = read_id.rfind(FIELD_SEPARATOR, 0, second)
    if third < 0:
        raise _fail(
            ParseFailure.MISSING_UNDERSCORE_3,
            read_id,
            "couldn't find third underscore before colon",
        )

    contig_name = read_id[:third]
    if len(contig_name) > max_contig_name_length:
        raise _fail(
            ParseFailure.CONTIG_NAME_TOO_LONG, read_id, "contig name too big or misparsed"
        )

    offset1 = _parse_offset(read_id[third + 1:second])
    if offset1 is None:
        raise _fail(ParseFailure.BAD_OFFSET_1, read_id, "couldn't parse offset1")

    single_end = first == second + 1
    if single_end:
        offset2 = offset1
    else:
        offset2 = _parse_offset(read_id[second + 1:first])
        if offset2 is None:
            raise _fail(ParseFailure.BAD_OFFSET_2, read_id, "couldn't parse offset2")

    return ParsedIdentifier(
        contig_name=contig_name, offset1=offset1, offset2=offset2, is_single_end=single_end
    )


def decode_interval(read_id: str, genome: Genome, **limits: int) -> GenomeInterval:
    """Decode ``read_id`` into the absolute interval its read was simulated from.

    Raises:
        IdentifierTooLongError: If the identifier is over the length limit
        IdentifierParseError: On a malformed identifier, or with kind
            ``UNKNOWN_CONTIG`` when the contig is not in ``genome``
    """
    parsed = parse_identifier(read_id, **limits)
    return _locate(read_id, parsed, genome)


def _locate(read_id: str, parsed: ParsedIdentifier, genome: Genome) -> GenomeInterval:
    contig_base = genome.offset_of_contig(parsed.contig_name)
    if contig_base is None:
        raise IdentifierParseError(
            ParseFailure.UNKNOWN_CONTIG,
            f"Couldn't find contig name '{parsed.contig_name}' in the genome.",
            read_id=read_id,
        )
    return parsed.interval(contig_base)


def try_decode(read_id: str, genome: Optional[Genome] = None, **limits: int) -> DecodeResult:
    """Decode without raising for malformed identifiers.

    Without a ``genome`` only the fields are parsed. An over-long identifier
    is still raised as :class:`IdentifierTooLongError`.
    """
    try:
        parsed = parse_identifier(read_id, **limits)
        interval = _locate(read_id, parsed, genome) if genome is not None else None
    except IdentifierParseError as e:
        return DecodeResult(read_id=read_id, error=e)
    return DecodeResult(read_id=read_id, parsed=parsed, interval=interval)


def read_mate(read_id: str) -> Optional[int]:
    """Mate number from a trailing ``/1`` or ``/2``, if present."""
    match = _MATE_RE.search(read_id)
    return int(match.group(1)) if match else None


# ---------- Encoding ----------
def generate_identifier(
    contig_name: str, offset_in_contig: int, read_length: int, first_half: bool = True
) -> str:
    """Build a minimal WGSim-style identifier that :func:`parse_identifier` accepts.

    Args:
        contig_name: Source contig
        offset_in_contig: Zero-based start of the read on the contig
        read_length: Read length, at least 1
        first_half: Mate 1 (``/1``) when True, mate 2 (``/2``) otherwise
    """
    if offset_in_contig < 0:
        raise ValueError(f"offset_in_contig must be >= 0, got {offset_in_contig}")
    if read_length < 1:
        raise ValueError(f"read_length must be >= 1, got {read_length}")
    begin = to_one_based(offset_in_contig)
    end = offset_in_contig + read_length
    mate = 1 if first_half else 2
    return f"{contig_name}_{begin}_{end}_{GENERATED_ID_FILLER}/{mate}"


def generate_identifier_for_contig(
    contig: Contig, offset_in_contig: int, read_length: int, first_half: bool = True
) -> str:
    return generate_identifier(contig.name, offset_in_contig, read_length, first_half)


def generate_identifier_at(
    genome: Genome, genome_location: int, read_length: int, first_half: bool = True
) -> str:
    """Identifier for a read starting at absolute ``genome_location``.

    Raises:
        GenomeLookupError: If the location is not inside any contig
    """
    contig = genome.contig_at_location(genome_location)
    return generate_identifier_for_contig(
        contig, genome_location - contig.beginning_offset, read_length, first_half
    )
