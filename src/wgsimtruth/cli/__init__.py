"""Command-line interface for wgsimtruth."""

from wgsimtruth.cli.main import cli, main

__all__ = ["cli", "main"]
