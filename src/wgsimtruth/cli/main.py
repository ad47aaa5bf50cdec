"""Click application entrypoint for wgsimtruth."""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from types import FrameType
from typing import Optional

import click

from wgsimtruth import __version__
from wgsimtruth.cli.exit_codes import (
    EXIT_ERROR,
    EXIT_SIGINT,
    EXIT_SIGTERM,
    EXIT_SUCCESS,
)
from wgsimtruth.config import Config, load_config
from wgsimtruth.exceptions import WgsimTruthError
from wgsimtruth.utils.logging import get_logger, level_from_verbosity, setup_logging

from .commands.config import init_config
from .commands.evaluate import evaluate
from .commands.identifiers import check, decode, encode
from .commands.validate import validate


def _handle_signal(signum: int, frame: Optional[FrameType]) -> None:
    """Handle interrupt signals for graceful shutdown."""
    sig_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
    click.echo(f"\n{sig_name} received, stopping...", err=True)
    raise KeyboardInterrupt(sig_name)


def _print_version(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        click.echo(f"wgsimtruth {__version__}")
        ctx.exit()


class _ErrorHandlingGroup(click.Group):
    """Group that turns wgsimtruth errors raised by subcommands into exit code 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except WgsimTruthError as exc:
            get_logger("cli").error(str(exc))
            ctx.exit(EXIT_ERROR)
        except FileNotFoundError as exc:
            get_logger("cli").error(str(exc))
            ctx.exit(EXIT_ERROR)


@click.group(
    cls=_ErrorHandlingGroup,
    context_settings=dict(help_option_names=["-h", "--help"]),
)
@click.option(
    "-V",
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_version,
    help="Show the version and exit.",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (YAML)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase log verbosity (-v for INFO, -vv for DEBUG)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a detailed log to this file",
)
@click.option("--no-progress", is_flag=True, help="Disable progress bars")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    log_file: Optional[Path],
    no_progress: bool,
) -> None:
    """wgsimtruth: decode WGSim read names and check alignments against them."""
    ctx.ensure_object(dict)

    cfg = load_config(config) if config else Config()
    if log_file is not None:
        cfg.runtime.log_file = log_file
    if no_progress:
        cfg.runtime.enable_progress = False
    cfg.validate()

    level = level_from_verbosity(verbose, default=cfg.runtime.log_level_value)
    setup_logging(level=level, log_file=cfg.runtime.log_file)
    get_logger("cli").debug(f"Configuration: {cfg.to_dict()}")

    ctx.obj["config"] = cfg


cli.add_command(decode)
cli.add_command(encode)
cli.add_command(check)
cli.add_command(evaluate)
cli.add_command(init_config)
cli.add_command(validate)


def main(argv: list[str] | None = None) -> int:
    """Main entry point with signal handling."""
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        cli(argv)
        return EXIT_SUCCESS
    except KeyboardInterrupt as exc:
        return EXIT_SIGTERM if "SIGTERM" in str(exc) else EXIT_SIGINT
    except SystemExit as exc:
        # Preserve explicit exit codes from cli()
        if exc.code is None:
            return EXIT_SUCCESS
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR
    except WgsimTruthError as exc:
        click.echo(f"Error: {exc}", err=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
