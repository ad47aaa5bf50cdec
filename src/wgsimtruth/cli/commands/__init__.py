"""wgsimtruth subcommands."""
