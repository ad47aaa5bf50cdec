"""Decide whether an aligner placed a simulated read at its true location."""

from __future__ import annotations

from dataclasses import dataclass

from wgsimtruth.core.coordinates import GenomeInterval
from wgsimtruth.core.genome import Genome
from wgsimtruth.core.wgsim_id import decode_interval


@dataclass(frozen=True)
class MisalignmentVerdict:
    """Judgement for one read together with the true interval it was checked against."""

    misaligned: bool
    interval: GenomeInterval

    @property
    def low(self) -> int:
        return self.interval.low

    @property
    def high(self) -> int:
        return self.interval.high


def is_misaligned(location: int, interval: GenomeInterval, max_k: int) -> bool:
    """True when ``location`` lies more than ``max_k`` bases outside ``interval``.

    A read is misaligned iff ``location > high + max_k`` or
    ``location + max_k < low``; both interval ends are inclusive.

    Raises:
        ValueError: If ``location`` or ``max_k`` is negative
    """
    return not interval.contains(location, tolerance=max_k)


def read_misaligned(
    read_id: str, location: int, genome: Genome, max_k: int, **limits: int
) -> MisalignmentVerdict:
    """Decode ``read_id`` and judge ``location`` against its true interval.

    Decode failures are raised, never reported as a verdict.

    Raises:
        IdentifierTooLongError: If ``read_id`` is over the length limit
        IdentifierParseError: If ``read_id`` cannot be decoded against ``genome``
    """
    interval = decode_interval(read_id, genome, **limits)
    return MisalignmentVerdict(
        misaligned=is_misaligned(location, interval, max_k), interval=interval
    )
