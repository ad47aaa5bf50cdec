"""Unified constants for wgsimtruth.

Limits and fixed text shared by the identifier decoder, the encoder and the
configuration defaults.
"""

# ================== Identifier Limits ==================
# Longest read identifier accepted by the decoder (characters)
MAX_IDENTIFIER_LENGTH: int = 1023

# Longest contig name the decoder will extract (characters)
MAX_CONTIG_NAME_LENGTH: int = 199


# ================== Dialect Delimiters ==================
FIELD_SEPARATOR: str = "_"
TAIL_SEPARATOR: str = ":"

# Fixed filler written between the end offset and the mate suffix.
# Only enough structure for the decoder to find its delimiters.
GENERATED_ID_FILLER: str = "0::0:0_2:0:a0_0"


# ================== Evaluation Defaults ==================
# Edit-distance tolerance applied around the true interval
DEFAULT_MAX_K: int = 0

# Reads below this MAPQ are counted but not judged
DEFAULT_MIN_MAPQ: int = 0
