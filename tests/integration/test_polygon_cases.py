"""Integration tests over a catalogue of polygons.

Each case is run through every layer it qualifies for and checked for
consistent answers: corners lie on themselves, midpoints lie on their
sides, simple polygons contain their own corners and turn through a full
circle, and the analyzer agrees with the constructors.
"""

import math

import pytest

from polycore import GenericPolygon, Polygon, SimplePolygon
from polycore.core import PolygonAnalyzer, PolygonKind, classify
from polycore.exceptions import PolygonValidationError

TOLERANCE = 0.01

DEGENERATE_CASES = {
    "empty": [],
    "1-gon": [(1, 2, 3)],
    "duplicative 2-gon": [(3, 4, 0), (3, 4, 0)],
    "distinct 2-gon": [(1, 4, 9), (1, 9, 4)],
    "duplicative triangle": [(3, 4, -1), (3, 4, 2), (3, 4, -1)],
    "near-duplicative triangle": [(3, 2, 0.0005), (5, 2, 1), (3, 2, 0)],
    "small collinear triangle": [(3, 4, 12), (2.9, 4.1, 11.9), (2.8, 4.2, 11.8)],
    "lopsided collinear triangle": [(3, 4, 12), (2.9999, 4.0001, 11.9999), (0, 0, 0)],
    "small collinear quad": [
        (3, 4, 12),
        (2.9, 4.1, 11.9),
        (2.8, 4.2, 11.8),
        (2.7, 4.3, 11.7),
    ],
    "duplicative quad in Y-Z plane": [(3, 4, 0), (3, 4, 1), (3, 5, 1), (3, 4, 0)],
    "duplicative pentagon in X-Z plane": [
        (1, 4, 0),
        (2, 4, 0),
        (1, 4, 0),
        (3, 4, 0),
        (2, 4, 1),
    ],
}

DEGENERATE_NON_PLANAR_CASES = {
    "hexagon with duplicate corner": [
        (1, 4, 0),
        (3, 4, 0),
        (3, 4, 0),
        (3, 5, 1),
        (2, 4, 1),
        (1, 4, 1),
    ],
    "pentagon with reversal": [(1, 2, 1), (1, 2, 3), (1, 2, 2), (-2, 2, 2), (-1, 3, 1)],
}

GENERIC_CASES = {
    "self-intersecting quad": [(1, 9, 9), (1, -9, -9), (2, 9, 9), (2, -9, -9)],
    "chevron with clipped point": [(1, 0, 2), (0, 0, 0), (1, 0, -2), (0, 0, -1), (0, 0, 1)],
}

GENERIC_NON_PLANAR_CASES = {
    "skewed quad": [(0, 9, 9), (0, 12, 9), (1, 12, 6), (0, 9, 6)],
    "hexagon with redundant corner": [
        (1, 4, 0),
        (2, 4, 0),
        (3, 4, 0),
        (3, 5, 1),
        (2, 4, 1),
        (1, 4, 1),
    ],
}

SIMPLE_CASES = {
    "3-4-5 triangle in X-Y plane": [(0, 9, 9), (0, 12, 9), (4, 12, 9)],
    "square in Y-Z plane": [(0, 9, 9), (0, 12, 9), (0, 12, 6), (0, 9, 6)],
    "horizontal concave chevron": [(1, 0, 2), (0, 0, 0), (1, 0, -2), (-1, 0, 0)],
    "long base passes origin": [(1, 9, 9), (1, -9, -9), (2, 0, 0)],
    "horizontal quad with straight corner": [(1, 4, 0), (2, 4, 0), (3, 4, 0), (2, 4, 1)],
    "four-pointed star": [
        (1, 2, 0),
        (0, 6, 0),
        (-1, 2, 0),
        (-5, 1, 0),
        (-1, 0, 0),
        (0, -4, 0),
        (1, 0, 0),
        (5, 1, 0),
    ],
}


def _params(cases: dict[str, list]) -> list:
    return [pytest.param(corners, id=name) for name, corners in cases.items()]


def check_common(polygon: Polygon) -> None:
    """Checks that hold for every polygon."""
    corners = polygon.corners()
    assert len(corners) == polygon.num_corners

    for corner_i, corner in enumerate(corners):
        assert polygon.on_corner(corner, corner_i)
        assert polygon.corner_at(corner) <= corner_i

    for side_i in range(polygon.num_corners):
        midpoint = polygon.midpoint(side_i)
        assert polygon.on_side(midpoint, side_i)
        assert polygon.side_length(side_i) >= 0.0

    assert polygon.perimeter() >= polygon.diameter()
    if polygon.num_corners > 0:
        longest = polygon.find_longest()
        shortest = polygon.find_shortest()
        assert polygon.side_length(longest) >= polygon.side_length(shortest)


class TestDegenerateCases:
    """Degenerate corner lists stay at the base layer."""

    @pytest.mark.parametrize("corners", _params(DEGENERATE_CASES))
    def test_degenerate_planar(self, corners: list) -> None:
        """These cases are degenerate and planar."""
        polygon = Polygon(corners, TOLERANCE)
        assert polygon.is_degenerate()
        assert polygon.is_planar()
        check_common(polygon)

        with pytest.raises(PolygonValidationError):
            GenericPolygon(corners, TOLERANCE)
        assert classify(polygon) is PolygonKind.DEGENERATE

    @pytest.mark.parametrize("corners", _params(DEGENERATE_NON_PLANAR_CASES))
    def test_degenerate_non_planar(self, corners: list) -> None:
        """These cases are degenerate and non-planar."""
        polygon = Polygon(corners, TOLERANCE)
        assert polygon.is_degenerate()
        assert not polygon.is_planar()
        check_common(polygon)

        report = PolygonAnalyzer(TOLERANCE).analyze(corners)
        assert report.rejection == "degenerate"


class TestGenericCases:
    """Non-degenerate corner lists that aren't simple."""

    @pytest.mark.parametrize("corners", _params(GENERIC_CASES))
    def test_generic_planar(self, corners: list) -> None:
        """These cases are planar but self-intersecting."""
        polygon = GenericPolygon(corners, TOLERANCE)
        assert polygon.is_planar()
        assert polygon.is_self_intersecting()
        check_common(polygon)

        report = PolygonAnalyzer(TOLERANCE).analyze(corners)
        assert report.kind is PolygonKind.GENERIC
        assert report.rejection == "self-intersecting"

    @pytest.mark.parametrize("corners", _params(GENERIC_NON_PLANAR_CASES))
    def test_generic_non_planar(self, corners: list) -> None:
        """These cases are non-planar."""
        polygon = GenericPolygon(corners, TOLERANCE)
        assert not polygon.is_planar()
        check_common(polygon)

        report = PolygonAnalyzer(TOLERANCE).analyze(corners)
        assert report.kind is PolygonKind.GENERIC
        assert report.rejection == "non-planar"


class TestSimpleCases:
    """Corner lists that form simple polygons."""

    @pytest.mark.parametrize("corners", _params(SIMPLE_CASES))
    def test_simple(self, corners: list) -> None:
        """Simple polygons are consistent across all their queries."""
        polygon = SimplePolygon(corners, TOLERANCE)
        check_common(polygon)
        assert not polygon.is_self_intersecting()

        turn_sum = 0.0
        for corner_i, corner in enumerate(polygon.corners()):
            assert polygon.in_plane(corner)
            assert polygon.is_inside(corner)
            turn = polygon.turn_angle(corner_i)
            assert abs(turn) <= math.pi
            assert abs(polygon.interior_angle(corner_i) - (math.pi - turn)) < 1e-12
            turn_sum += turn
        assert abs(abs(turn_sum) - 2 * math.pi) < 1e-6

        assert polygon.area() > 0.0
        assert abs(abs(polygon.signed_area()) - polygon.area()) < 1e-12
        assert polygon.is_inside(polygon.rep())
        assert polygon.score(polygon.rep()) >= 0.0

        report = PolygonAnalyzer(TOLERANCE).analyze(corners)
        assert report.is_simple()
        assert report.is_convex == polygon.is_convex()

    @pytest.mark.parametrize("corners", _params(SIMPLE_CASES))
    def test_reversed_simple(self, corners: list) -> None:
        """Reversing a simple polygon negates its signed area."""
        forward = SimplePolygon(corners, TOLERANCE)
        backward = SimplePolygon(list(reversed(corners)), TOLERANCE)
        assert abs(forward.signed_area() + backward.signed_area()) < 1e-9
        assert forward.is_convex() == backward.is_convex()

    def test_convexity(self) -> None:
        """Triangles and squares are convex; chevrons and stars aren't."""
        assert SimplePolygon(SIMPLE_CASES["3-4-5 triangle in X-Y plane"], TOLERANCE).is_convex()
        assert SimplePolygon(SIMPLE_CASES["square in Y-Z plane"], TOLERANCE).is_convex()
        assert not SimplePolygon(
            SIMPLE_CASES["horizontal concave chevron"], TOLERANCE
        ).is_convex()
        assert not SimplePolygon(SIMPLE_CASES["four-pointed star"], TOLERANCE).is_convex()
