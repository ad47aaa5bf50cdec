"""`evaluate` subcommand implementation."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from wgsimtruth.cli.common_options import genome_options, get_config, max_k_option, resolve_genome
from wgsimtruth.cli.exit_codes import EXIT_ERROR
from wgsimtruth.core.genome import Genome
from wgsimtruth.modules.mapping_evaluator import MappingEvaluator
from wgsimtruth.utils.logging import get_logger


@click.command()
@click.argument("alignments", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@genome_options
@max_k_option
@click.option("--min-mapq", type=click.IntRange(min=0), default=None, help="Count reads below this MAPQ without judging them")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write per-read results to this TSV",
)
@click.pass_context
def evaluate(
    ctx: click.Context,
    alignments: Path,
    reference: Optional[Path],
    fai: Optional[Path],
    max_k: Optional[int],
    min_mapq: Optional[int],
    output: Optional[Path],
) -> None:
    """Count correctly placed and misaligned WGSim reads in a SAM/BAM/CRAM.

    Genome coordinates come from --reference/--fai, or from the @SQ lines of
    the alignment header when neither is given.
    """
    logger = get_logger("evaluate")
    cfg = get_config(ctx)
    if max_k is not None:
        cfg.evaluation.max_k = max_k
    if min_mapq is not None:
        cfg.evaluation.min_mapq = min_mapq

    genome = resolve_genome(cfg, reference, fai, required=False)
    if genome is None:
        logger.info(f"Taking contig order from the header of {alignments}")
        genome = Genome.from_alignment_header(
            alignments, padding=cfg.evaluation.contig_padding
        )

    evaluator = MappingEvaluator(
        genome,
        evaluation=cfg.evaluation,
        identifier=cfg.identifier,
        enable_progress=cfg.runtime.enable_progress,
    )
    result = evaluator.run(alignment_file=alignments, output_tsv=output)

    for key, value in result.metrics.items():
        click.echo(f"{key}\t{value}")

    if not result.success:
        logger.error(result.error_message or "Evaluation failed")
        sys.exit(EXIT_ERROR)
