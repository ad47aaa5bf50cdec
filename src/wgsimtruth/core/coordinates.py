"""Coordinate helpers shared by the decoder, the judge and the encoder.

Read identifiers carry 1-based, contig-relative offsets. Everything else in
wgsimtruth works in absolute, zero-based whole-genome coordinates. The
conversions between the two live here so they happen exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def to_absolute(one_based_offset: int, contig_base: int) -> int:
    """Convert a 1-based contig offset to a zero-based genome coordinate."""
    return one_based_offset + contig_base - 1


def to_one_based(offset_in_contig: int) -> int:
    """Convert a zero-based contig offset to the 1-based form written in identifiers."""
    return offset_in_contig + 1


@dataclass(frozen=True)
class GenomeInterval:
    """Closed interval [low, high] of absolute genome coordinates."""

    low: int
    high: int

    def __post_init__(self) -> None:
        _require_non_negative("low", self.low)
        if self.high < self.low:
            raise ValueError(f"Interval high ({self.high}) is below low ({self.low})")

    @classmethod
    def spanning(cls, first: int, second: int) -> "GenomeInterval":
        """Build the interval covering two coordinates given in either order."""
        return cls(low=min(first, second), high=max(first, second))

    @classmethod
    def from_offsets(cls, offset1: int, offset2: int, contig_base: int) -> "GenomeInterval":
        """Build the interval for two 1-based offsets on a contig starting at ``contig_base``."""
        return cls.spanning(to_absolute(offset1, contig_base), to_absolute(offset2, contig_base))

    @property
    def span(self) -> int:
        return self.high - self.low + 1

    def contains(self, location: int, tolerance: int = 0) -> bool:
        """True when ``location`` is within ``tolerance`` bases of the interval.

        Both ends are inclusive. Python integers do not wrap, so
        ``high + tolerance`` is exact even for coordinates beyond 32 or 64 bits.
        """
        _require_non_negative("location", location)
        _require_non_negative("tolerance", tolerance)
        return not (location > self.high + tolerance or location + tolerance < self.low)

    def __str__(self) -> str:
        return f"{self.low}-{self.high}"
