"""`decode`, `encode` and `check` subcommands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

import click
from Bio import SeqIO

from wgsimtruth.cli.common_options import genome_options, get_config, max_k_option, resolve_genome
from wgsimtruth.cli.exit_codes import EXIT_ERROR
from wgsimtruth.core.wgsim_id import generate_identifier, generate_identifier_at, try_decode
from wgsimtruth.core.judge import read_misaligned
from wgsimtruth.exceptions import IdentifierError, WgsimTruthError
from wgsimtruth.utils.logging import LogTemplates, get_logger

DECODE_HEADER = ("read_id", "contig", "offset1", "offset2", "single_end", "low", "high")


def _fastq_ids(fastq: Path) -> Iterator[str]:
    for record in SeqIO.parse(str(fastq), "fastq"):
        yield record.id


def _fmt(value: Optional[int]) -> str:
    return "NA" if value is None else str(value)


@click.command()
@click.argument("read_ids", nargs=-1)
@click.option(
    "--fastq",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Decode the ID of every record in a FASTQ file",
)
@genome_options
@click.option("--no-header", is_flag=True, help="Omit the column header line")
@click.pass_context
def decode(
    ctx: click.Context,
    read_ids: Tuple[str, ...],
    fastq: Optional[Path],
    reference: Optional[Path],
    fai: Optional[Path],
    no_header: bool,
) -> None:
    """Decode WGSim read IDs into contig, offsets and genome interval.

    Without --reference/--fai only the fields are printed and the interval
    columns are NA. Undecodable IDs are reported on stderr and skipped.
    """
    logger = get_logger("decode")
    cfg = get_config(ctx)
    if not read_ids and fastq is None:
        raise click.UsageError("Give one or more READ_IDS or --fastq")

    genome = resolve_genome(cfg, reference, fai, required=False)
    ids: Iterable[str] = read_ids
    if fastq is not None:
        ids = _fastq_ids(fastq)

    if not no_header:
        click.echo("\t".join(DECODE_HEADER))

    failures = 0
    for read_id in ids:
        try:
            result = try_decode(read_id, genome, **cfg.identifier.limits())
        except IdentifierError as e:
            failures += 1
            logger.error(LogTemplates.DECODE_FAILURE.format(read_id=read_id[:80], error=e))
            continue
        if not result.ok:
            failures += 1
            logger.warning(LogTemplates.DECODE_FAILURE.format(read_id=read_id, error=result.error))
            continue
        parsed = result.parsed
        interval = result.interval
        click.echo(
            "\t".join(
                [
                    read_id,
                    parsed.contig_name,
                    str(parsed.offset1),
                    str(parsed.offset2),
                    "1" if parsed.is_single_end else "0",
                    _fmt(interval.low if interval else None),
                    _fmt(interval.high if interval else None),
                ]
            )
        )

    if failures:
        logger.warning(f"{failures} identifier(s) could not be decoded")
        sys.exit(EXIT_ERROR)


@click.command()
@click.option("--contig", default=None, help="Source contig name")
@click.option(
    "--offset",
    type=click.IntRange(min=0),
    default=None,
    help="Zero-based read start on --contig",
)
@click.option(
    "--location",
    type=click.IntRange(min=0),
    default=None,
    help="Zero-based read start in genome coordinates (needs a reference)",
)
@click.option("-l", "--length", "read_length", type=click.IntRange(min=1), required=True, help="Read length")
@click.option("--mate", type=click.Choice(["1", "2"]), default="1", show_default=True, help="Mate suffix")
@genome_options
@click.pass_context
def encode(
    ctx: click.Context,
    contig: Optional[str],
    offset: Optional[int],
    location: Optional[int],
    read_length: int,
    mate: str,
    reference: Optional[Path],
    fai: Optional[Path],
) -> None:
    """Generate the WGSim-style ID for a read.

    Use --contig with --offset, or --location with --reference/--fai.
    """
    first_half = mate == "1"
    if location is not None:
        if contig is not None or offset is not None:
            raise click.UsageError("--location cannot be combined with --contig/--offset")
        genome = resolve_genome(get_config(ctx), reference, fai)
        try:
            click.echo(generate_identifier_at(genome, location, read_length, first_half))
        except WgsimTruthError as e:
            get_logger("encode").error(str(e))
            sys.exit(EXIT_ERROR)
        return

    if contig is None or offset is None:
        raise click.UsageError("Give --contig and --offset, or --location")
    click.echo(generate_identifier(contig, offset, read_length, first_half))


@click.command()
@click.argument("read_id")
@click.argument("location", type=click.IntRange(min=0))
@genome_options
@max_k_option
@click.pass_context
def check(
    ctx: click.Context,
    read_id: str,
    location: int,
    reference: Optional[Path],
    fai: Optional[Path],
    max_k: Optional[int],
) -> None:
    """Judge whether LOCATION (genome coordinate) is a correct placement of READ_ID.

    Prints the verdict followed by the true interval.
    """
    cfg = get_config(ctx)
    genome = resolve_genome(cfg, reference, fai)
    tolerance = cfg.max_k if max_k is None else max_k
    try:
        verdict = read_misaligned(read_id, location, genome, tolerance, **cfg.identifier.limits())
    except IdentifierError as e:
        get_logger("check").error(str(e))
        sys.exit(EXIT_ERROR)
    label = "misaligned" if verdict.misaligned else "aligned"
    click.echo(f"{label}\t{verdict.low}\t{verdict.high}")
