"""Resource files and configuration templates."""


def get_default_config() -> str:
    """Return default configuration YAML content."""
    return """# wgsimtruth Configuration File

# Reference genome (can be overridden by CLI arguments).
# Give either the FASTA or its samtools .fai index.
reference: ~
fai: ~

# Runtime settings
runtime:
  log_level: "WARNING"
  log_file: ~
  enable_progress: true

# Read identifier limits
identifier:
  max_identifier_length: 1023
  max_contig_name_length: 199

# Alignment evaluation
evaluation:
  # Edit-distance tolerance around the true interval
  max_k: 0
  # Reads below this MAPQ are counted but not judged
  min_mapq: 0
  include_secondary: false
  include_supplementary: false
  # Bases between consecutive contigs in the aligner's genome coordinates
  contig_padding: 0
"""
