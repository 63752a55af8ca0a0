"""Walnut CLI - Command line interface for running custom methods."""

from __future__ import annotations

from walnut.cli.main import cli, execute_suite, parse_var, setup_logging


def main() -> None:
    """Main entry point for the walnut CLI."""
    cli()


__all__ = ["main", "cli", "execute_suite", "parse_var", "setup_logging"]
