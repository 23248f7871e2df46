"""CLI application entry point for polycore.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from polycore import __version__
from polycore.cli.output import console, print_error, print_header, print_report
from polycore.config import GeometryConfig, LoggingConfig, PolycoreSettings
from polycore.core import PolygonAnalyzer
from polycore.exceptions import PolycoreError
from polycore.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="polycore",
    help="Classify and measure a polygon in 3-D space.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]polycore[/bold blue] v{__version__}")
        raise typer.Exit()


def parse_location(text: str) -> tuple[float, float, float]:
    """Parse an "x,y,z" string into a location.

    Args:
        text: Three comma-separated numbers

    Returns:
        The location as a tuple of floats

    Raises:
        ValueError: If the text doesn't hold exactly three numbers
    """
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 3:
        raise ValueError(f"expected x,y,z but got {text!r}")
    x, y, z = (float(part) for part in parts)
    return (x, y, z)


@app.command()
def inspect(
    corners: Annotated[
        list[str],
        typer.Argument(
            help="Corner locations as x,y,z in cyclic order",
            show_default=False,
        ),
    ],
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Distance below which two locations coincide",
            min=0.0,
        ),
    ] = 1e-4,
    point: Annotated[
        str | None,
        typer.Option(
            "--point",
            "-p",
            help="Location x,y,z to test for containment",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Also show the turn angle at every corner",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Classify a polygon and report its measurements.

    The polygon is checked for degeneracy, planarity and self-intersection.
    Simple polygons also report area, winding, centroid and convexity.

    Example:
        polycore -- 0,0,0 1,0,0 1,0,1 0,0,1

    Put "--" before the corners when any coordinate is negative.
    """
    try:
        locations = [parse_location(text) for text in corners]
        probe = parse_location(point) if point is not None else None
    except ValueError as e:
        print_error("Invalid location", details=str(e))
        raise typer.Exit(code=2)

    try:
        settings = PolycoreSettings(
            geometry=GeometryConfig(tolerance=tolerance),
            logging=LoggingConfig(log_file=log_file, log_level=log_level),
        )
    except ValidationError as e:
        print_error("Invalid option", details="; ".join(err["msg"] for err in e.errors()))
        raise typer.Exit(code=2)

    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
    )

    print_header(__version__)

    try:
        analyzer = PolygonAnalyzer(settings.geometry.tolerance)
        report = analyzer.analyze(locations, probe=probe)
    except PolycoreError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    print_report(report, verbose=verbose)


def cli() -> None:
    """CLI entry point for console scripts."""
    app()


def main() -> None:
    """Main entry point (alias for cli)."""
    cli()


if __name__ == "__main__":
    main()
