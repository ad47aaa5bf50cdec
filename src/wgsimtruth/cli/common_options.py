"""Shared Click options and helpers for wgsimtruth subcommands."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, TypeVar

import click

from wgsimtruth.config import Config
from wgsimtruth.core.genome import Genome, load_genome
from wgsimtruth.utils.logging import LogTemplates, get_logger

F = TypeVar("F", bound=Callable[..., None])


def reference_option(func: F) -> F:
    """Reference genome FASTA option."""
    return click.option(
        "-r",
        "--reference",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Reference genome FASTA (contig order defines genome coordinates)",
    )(func)


def fai_option(func: F) -> F:
    """FASTA index option."""
    return click.option(
        "--fai",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="samtools .fai index of the reference (faster than reading the FASTA)",
    )(func)


def max_k_option(func: F) -> F:
    """Edit-distance tolerance option."""
    return click.option(
        "-k",
        "--max-k",
        type=click.IntRange(min=0),
        default=None,
        help="Tolerance in bases around the true interval [default: from config, 0]",
    )(func)


def genome_options(func: F) -> F:
    """Apply reference and index options together."""
    return reference_option(fai_option(func))


def get_config(ctx: click.Context) -> Config:
    """Config object attached by the top-level group (defaults when run standalone)."""
    obj = ctx.find_object(dict)
    if obj is None or "config" not in obj:
        return Config()
    return obj["config"]


def resolve_genome(
    cfg: Config,
    reference: Optional[Path],
    fai: Optional[Path],
    required: bool = True,
) -> Optional[Genome]:
    """Load the genome named on the command line, falling back to the config file."""
    reference = reference or cfg.reference
    fai = fai or cfg.fai
    if reference is None and fai is None:
        if required:
            raise click.UsageError("A reference is required: pass --reference or --fai")
        return None
    genome = load_genome(reference=reference, fai=fai, padding=cfg.evaluation.contig_padding)
    get_logger("cli").info(
        LogTemplates.GENOME_LOADED.format(count=len(genome), size=genome.size, path=fai or reference)
    )
    return genome
