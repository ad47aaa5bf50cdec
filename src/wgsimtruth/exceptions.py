"""Custom exceptions for wgsimtruth."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from wgsimtruth.constants import MAX_IDENTIFIER_LENGTH


class ParseFailure(str, Enum):
    """Recoverable reasons a WGSim read identifier could not be decoded."""

    MISSING_COLON = "missing_colon"
    MISSING_UNDERSCORE_1 = "missing_underscore_1"
    MISSING_UNDERSCORE_2 = "missing_underscore_2"
    MISSING_UNDERSCORE_3 = "missing_underscore_3"
    CONTIG_NAME_TOO_LONG = "contig_name_too_long"
    BAD_OFFSET_1 = "bad_offset_1"
    BAD_OFFSET_2 = "bad_offset_2"
    UNKNOWN_CONTIG = "unknown_contig"


class WgsimTruthError(Exception):
    """Base exception for all wgsimtruth errors."""

    pass


class ConfigurationError(WgsimTruthError):
    """Raised when configuration is invalid or missing."""

    pass


class GenomeLookupError(WgsimTruthError):
    """Raised when a genome catalog cannot be built or a location is outside every contig."""

    pass


class FileFormatError(WgsimTruthError):
    """Raised when file format is invalid or unsupported."""

    pass


class EvaluationError(WgsimTruthError):
    """Raised when a batch evaluation cannot be carried out."""

    pass


class IdentifierError(WgsimTruthError):
    """Base class for errors tied to a single read identifier."""

    def __init__(
        self,
        message: str = "",
        read_id: Optional[str] = None,
        max_length: Optional[int] = None,
    ):
        """Initialize with the offending identifier.

        Args:
            message: Error message
            read_id: Identifier that failed
            max_length: When given, ``read_id`` is clipped to this many characters
        """
        super().__init__(message)
        if read_id is not None and max_length is not None and len(read_id) > max_length:
            read_id = read_id[:max_length]
        self.read_id = read_id


class IdentifierTooLongError(IdentifierError):
    """Raised when an identifier exceeds the maximum accepted length.

    This is a contract violation by the caller rather than a malformed read;
    whether it aborts a run is up to the application. ``read_id`` holds the
    first ``max_length`` characters and ``length`` the full length.
    """

    def __init__(
        self,
        message: str = "",
        read_id: Optional[str] = None,
        length: int = 0,
        max_length: int = MAX_IDENTIFIER_LENGTH,
    ):
        super().__init__(message, read_id, max_length=max_length)
        self.length = length


class IdentifierParseError(IdentifierError):
    """Raised when an identifier does not follow the WGSim naming dialect."""

    def __init__(
        self,
        kind: ParseFailure,
        message: str = "",
        read_id: Optional[str] = None,
    ):
        super().__init__(message, read_id)
        self.kind = kind
