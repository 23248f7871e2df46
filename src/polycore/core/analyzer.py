"""Polygon analysis: classify a corner list through all three layers.

The analyzer builds a Polygon, then tries to upgrade it to GenericPolygon and
SimplePolygon, collecting whatever each layer can report. Unlike the polygon
constructors it never raises for invalid geometry; the failed invariant is
recorded in the report instead.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from polycore.core.generic import GenericPolygon
from polycore.core.polygon import Polygon
from polycore.core.simple import SimplePolygon
from polycore.exceptions import PolygonValidationError

logger = logging.getLogger(__name__)


class PolygonKind(Enum):
    """Most capable layer a corner list qualifies for."""

    DEGENERATE = auto()
    GENERIC = auto()
    SIMPLE = auto()


class WindingDirection(Enum):
    """Winding direction of a simple polygon, as reported by signed_area()."""

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


@dataclass
class PolygonReport:
    """Properties of a polygon gathered by PolygonAnalyzer.

    Fields that only a richer layer can provide are None when the polygon
    doesn't qualify for that layer.

    Attributes:
        num_corners: Number of corners
        tolerance: Comparison tolerance used
        kind: Most capable layer the polygon qualifies for
        is_degenerate: Result of Polygon.is_degenerate()
        is_planar: Result of Polygon.is_planar()
        perimeter: Sum of side lengths
        diameter: Largest corner-to-corner distance
        largest_triangle: Corner indices of the largest triangle
        rejection: Why the polygon isn't simple ("degenerate", "non-planar",
            "self-intersecting"), or None
        is_self_intersecting: Set for generic and simple polygons
        is_convex: Set for simple polygons
        area: Set for simple polygons
        signed_area: Set for simple polygons
        winding: Set for simple polygons
        centroid: Set for simple polygons
        probe_inside: Whether the probe location is inside (simple polygons
            only, and only when a probe was given)
        turn_angles: Per-corner turn angles (signed for simple polygons,
            magnitudes otherwise)
    """

    num_corners: int
    tolerance: float
    kind: PolygonKind
    is_degenerate: bool
    is_planar: bool
    perimeter: float
    diameter: float
    largest_triangle: tuple[int, int, int] | None
    rejection: str | None = None
    is_self_intersecting: bool | None = None
    is_convex: bool | None = None
    area: float | None = None
    signed_area: float | None = None
    winding: WindingDirection | None = None
    centroid: tuple[float, float, float] | None = None
    probe_inside: bool | None = None
    turn_angles: list[float] = field(default_factory=list)

    def is_simple(self) -> bool:
        """Check if the polygon qualified as a SimplePolygon."""
        return self.kind is PolygonKind.SIMPLE


class PolygonAnalyzer:
    """Analyzes corner lists to determine which polygon layer they support.

    The analyzer is stateless apart from its tolerance.
    """

    def __init__(self, tolerance: float | None = None) -> None:
        self.tolerance = tolerance

    def analyze(
        self,
        corners: Iterable[Sequence[float]],
        probe: Sequence[float] | None = None,
    ) -> PolygonReport:
        """Analyze a corner list.

        Process:
        1. Build a base Polygon (fails only on malformed input)
        2. Upgrade to GenericPolygon unless degenerate
        3. Upgrade to SimplePolygon unless non-planar or self-intersecting

        Args:
            corners: Corner locations in cyclic order
            probe: Optional location to test for containment

        Returns:
            PolygonReport describing the polygon

        Raises:
            InvalidArgumentError: If the corners or tolerance are malformed
        """
        polygon = Polygon(corners, self.tolerance)
        report = PolygonReport(
            num_corners=polygon.num_corners,
            tolerance=polygon.tolerance,
            kind=PolygonKind.DEGENERATE,
            is_degenerate=polygon.is_degenerate(),
            is_planar=polygon.is_planar(),
            perimeter=polygon.perimeter(),
            diameter=polygon.diameter(),
            largest_triangle=polygon.largest_triangle(),
            turn_angles=[polygon.abs_turn_angle(i) for i in range(polygon.num_corners)],
        )

        try:
            generic = polygon.to_generic()
        except PolygonValidationError as exc:
            report.rejection = exc.invariant
            logger.debug("Polygon analysis: %s", report)
            return report

        report.kind = PolygonKind.GENERIC
        report.is_self_intersecting = generic.is_self_intersecting()

        try:
            simple = generic.to_simple()
        except PolygonValidationError as exc:
            report.rejection = exc.invariant
            logger.debug("Polygon analysis: %s", report)
            return report

        self._describe_simple(simple, report, probe)
        logger.debug("Polygon analysis: %s", report)
        return report

    def _describe_simple(
        self,
        simple: SimplePolygon,
        report: PolygonReport,
        probe: Sequence[float] | None,
    ) -> None:
        report.kind = PolygonKind.SIMPLE
        report.is_convex = simple.is_convex()
        report.area = simple.area()
        report.signed_area = simple.signed_area()
        report.winding = (
            WindingDirection.COUNTER_CLOCKWISE
            if report.signed_area > 0.0
            else WindingDirection.CLOCKWISE
        )
        report.centroid = tuple(float(c) for c in simple.centroid())
        report.turn_angles = [simple.turn_angle(i) for i in range(simple.num_corners)]
        if probe is not None:
            report.probe_inside = simple.is_inside(probe)


def classify(polygon: Polygon) -> PolygonKind:
    """Return the most capable layer a polygon qualifies for."""
    if polygon.is_degenerate():
        return PolygonKind.DEGENERATE
    generic = polygon if isinstance(polygon, GenericPolygon) else polygon.to_generic()
    if generic.is_planar() and not generic.is_self_intersecting():
        return PolygonKind.SIMPLE
    return PolygonKind.GENERIC
