"""Installation validation command."""

from __future__ import annotations

import sys

import click

from wgsimtruth import __version__
from wgsimtruth.cli.exit_codes import EXIT_ERROR
from wgsimtruth.utils.validators import validate_installation


@click.command()
@click.option("--full", is_flag=True, help="Also run a decode/encode round trip")
def validate(full: bool) -> None:
    """Validate wgsimtruth installation and dependencies."""
    click.echo("Validating wgsimtruth installation...")

    issues = validate_installation(full_check=full)

    if not issues:
        click.echo("✓ All checks passed!")
        click.echo(f"  wgsimtruth version: {__version__}")
    else:
        click.echo("✗ Issues found:")
        for issue in issues:
            click.echo(f"  - {issue}")
        sys.exit(EXIT_ERROR)
