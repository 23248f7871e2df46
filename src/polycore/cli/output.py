"""Rich console output helpers for the CLI.

This module renders polygon reports using the Rich library.
"""

import math

from rich.console import Console
from rich.table import Table

from polycore.core import PolygonKind, PolygonReport

console = Console()

# Unicode symbols for consistent visual language
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]polycore[/bold] v{version}")
    console.print("─" * 44)


def _flag(value: bool | None) -> str:
    if value is None:
        return "n/a"
    return f"[green]{SYM_OK} yes[/green]" if value else f"[dim]{SYM_ERR} no[/dim]"


def _number(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:.6g}"


def _location(value: tuple[float, float, float] | None) -> str:
    if value is None:
        return "n/a"
    return "(" + ", ".join(f"{c:.6g}" for c in value) + ")"


def build_report_table(report: PolygonReport) -> Table:
    """Build a two-column table of polygon properties.

    Args:
        report: Report produced by PolygonAnalyzer

    Returns:
        Rich table ready to print
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Property", style="bold")
    table.add_column("Value")

    triangle = report.largest_triangle
    table.add_row("Corners", str(report.num_corners))
    table.add_row("Tolerance", _number(report.tolerance))
    table.add_row("Kind", report.kind.name.lower())
    table.add_row("Degenerate", _flag(report.is_degenerate))
    table.add_row("Planar", _flag(report.is_planar))
    table.add_row("Self-intersecting", _flag(report.is_self_intersecting))
    table.add_row("Convex", _flag(report.is_convex))
    table.add_row("Perimeter", _number(report.perimeter))
    table.add_row("Diameter", _number(report.diameter))
    table.add_row(
        "Largest triangle",
        "-".join(str(i) for i in triangle) if triangle is not None else "n/a",
    )
    table.add_row("Area", _number(report.area))
    table.add_row("Signed area", _number(report.signed_area))
    table.add_row(
        "Winding",
        report.winding.name.lower().replace("_", "-") if report.winding else "n/a",
    )
    table.add_row("Centroid", _location(report.centroid))
    if report.probe_inside is not None:
        table.add_row("Point inside", _flag(report.probe_inside))
    return table


def print_report(report: PolygonReport, verbose: bool = False) -> None:
    """Print a polygon report.

    Args:
        report: Report produced by PolygonAnalyzer
        verbose: Also list the turn angle at every corner
    """
    console.print(build_report_table(report))

    if verbose and report.turn_angles:
        console.print("\n[bold]Turns[/bold]")
        for corner_i, turn in enumerate(report.turn_angles):
            text = "undefined" if math.isnan(turn) else f"{math.degrees(turn):.1f}°"
            console.print(f"  C{corner_i} {SYM_DOT} {text}")

    if report.kind is PolygonKind.SIMPLE:
        console.print(f"\n[bold green]{SYM_OK} Simple polygon[/bold green]")
    else:
        console.print(f"\n[bold yellow]{SYM_DOT} Not simple:[/bold yellow] {report.rejection}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
