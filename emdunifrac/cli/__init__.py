"""Command-line interface for EMDUniFrac."""

from emdunifrac.cli.utils import (
    setup_logging,
    validate_file_path,
    validate_arguments,
)

import click

from emdunifrac.cli.compute import compute


@click.group()
def cli():
    """EMDUniFrac - Fast UniFrac distances via the Earth Mover's Distance on a tree."""
    pass


# Register commands
cli.add_command(compute)


def main():
    """Main entry point for CLI."""
    cli()


__all__ = [
    "cli",
    "compute",
    "main",
    "setup_logging",
    "validate_file_path",
    "validate_arguments",
]
