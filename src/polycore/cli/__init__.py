"""Command-line interface for polycore.

This module provides the CLI using Typer with rich output for inspecting
a polygon given on the command line.
"""

from polycore.cli.app import cli, main

__all__ = ["cli", "main"]
