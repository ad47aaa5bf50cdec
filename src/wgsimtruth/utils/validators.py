"""Validation utilities for wgsimtruth."""

from __future__ import annotations

import importlib
from typing import List

# import name -> distribution name
REQUIRED_MODULES = {
    "click": "click",
    "yaml": "PyYAML",
    "pandas": "pandas",
    "Bio": "biopython",
    "pysam": "pysam",
    "tqdm": "tqdm",
}


def validate_installation(full_check: bool = False) -> List[str]:
    """
    Validate wgsimtruth installation and dependencies.

    Args:
        full_check: If True, also exercise a decode/encode round trip

    Returns:
        List of validation issues (empty if all good)
    """
    issues = []

    for module, distribution in REQUIRED_MODULES.items():
        try:
            importlib.import_module(module)
        except ImportError:
            issues.append(f"Missing Python module: {module} (install '{distribution}')")

    try:
        from wgsimtruth.core.genome import Genome
        from wgsimtruth.core.wgsim_id import decode_interval, generate_identifier
    except ImportError as e:
        issues.append(f"wgsimtruth module import error: {e}")
        return issues

    if full_check:
        genome = Genome.from_lengths([("chr_1", 1000), ("chr2", 1000)])
        read_id = generate_identifier("chr2", 99, 50, first_half=False)
        interval = decode_interval(read_id, genome)
        if (interval.low, interval.high) != (1099, 1148):
            issues.append(f"Round trip of {read_id} decoded to {interval}, expected 1099-1148")

    return issues
