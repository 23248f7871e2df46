"""Unit tests for the vector helpers."""

import math

import numpy as np
import pytest

from polycore.core.vectors import (
    as_point,
    cross_2d,
    distance_squared,
    distance_squared_to_segment,
    do_coincide,
    dominant_axis_sign,
    intersect_segments,
    length_squared,
    normalize,
    within_segment,
)
from polycore.exceptions import InvalidArgumentError


class TestAsPoint:
    """Tests for as_point."""

    def test_copies_and_freezes(self) -> None:
        """The result is a read-only float64 copy."""
        source = [1, 2, 3]
        point = as_point(source)
        assert point.dtype == np.float64
        assert not point.flags.writeable
        source[0] = 9
        assert point[0] == 1.0

    def test_array_input_copied(self) -> None:
        """Numpy input is copied, not referenced."""
        source = np.array([1.0, 2.0, 3.0])
        point = as_point(source)
        source[1] = 0.0
        assert point[1] == 2.0

    @pytest.mark.parametrize(
        "location",
        [None, (1, 2), [[1, 2, 3]], (math.nan, 0, 0), (0, -math.inf, 0), ("x", 1, 2)],
    )
    def test_rejects_malformed(self, location: object) -> None:
        """Anything but three finite numbers is rejected."""
        with pytest.raises(InvalidArgumentError):
            as_point(location)

    def test_description_in_message(self) -> None:
        """Error messages name the argument."""
        with pytest.raises(InvalidArgumentError, match="corners\\[2\\]"):
            as_point((1, 2), "corners[2]")


class TestVectorMath:
    """Tests for the small vector helpers."""

    def test_distances(self) -> None:
        """Squared distance and squared length."""
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([4.0, 6.0, 3.0])
        assert distance_squared(a, b) == 25.0
        assert length_squared(b - a) == 25.0

    def test_do_coincide_inclusive(self) -> None:
        """Points exactly at the tolerance coincide."""
        a = np.zeros(3)
        b = np.array([0.5, 0.0, 0.0])
        assert do_coincide(a, b, 0.25)
        assert not do_coincide(a, b, 0.24)

    def test_normalize(self) -> None:
        """Normalized vectors have unit length; zero stays zero."""
        assert np.allclose(normalize(np.array([3.0, 0.0, 4.0])), (0.6, 0.0, 0.8))
        assert np.array_equal(normalize(np.zeros(3)), np.zeros(3))

    def test_dominant_axis_sign(self) -> None:
        """Sign of the largest-magnitude component."""
        assert dominant_axis_sign(np.array([0.1, -0.9, 0.3])) == -1.0
        assert dominant_axis_sign(np.array([0.0, 0.2, 0.7])) == 1.0
        assert dominant_axis_sign(np.zeros(3)) == 0.0

    def test_cross_2d(self) -> None:
        """2-D cross product of planar offsets."""
        assert cross_2d(1.0, 0.0, 0.0, 1.0) == 1.0
        assert cross_2d(0.0, 1.0, 1.0, 0.0) == -1.0


class TestSegments:
    """Tests for the segment helpers."""

    def test_within_segment(self) -> None:
        """Parameters in [0, 1] pass; slack is measured in squared units."""
        assert within_segment(0.0, 0.0)
        assert within_segment(1.0, 0.0)
        assert within_segment(-0.01, 0.001)
        assert not within_segment(-0.1, 0.001)
        assert not within_segment(1.1, 0.001)

    def test_distance_to_segment_interior(self) -> None:
        """A point beside the segment projects onto its interior."""
        sd, closest = distance_squared_to_segment(
            np.array([0.5, 2.0, 0.0]), np.array([0.0, 0.0, 0.0]), np.array([1.0, 0.0, 0.0])
        )
        assert abs(sd - 4.0) < 1e-12
        assert np.allclose(closest, [0.5, 0.0, 0.0])

    def test_distance_to_segment_clamped(self) -> None:
        """A point past an end measures to that end."""
        sd, closest = distance_squared_to_segment(
            np.array([3.0, 0.0, 0.0]), np.array([0.0, 0.0, 0.0]), np.array([1.0, 0.0, 0.0])
        )
        assert abs(sd - 4.0) < 1e-12
        assert np.allclose(closest, [1.0, 0.0, 0.0])

    def test_crossing_segments(self) -> None:
        """Crossing segments meet at their crossing point."""
        result = intersect_segments(
            np.array([0.0, 0.0, 0.0]),
            np.array([2.0, 0.0, 2.0]),
            np.array([0.0, 0.0, 2.0]),
            np.array([2.0, 0.0, 0.0]),
            1e-8,
        )
        assert result is not None
        assert np.allclose(result, [1.0, 0.0, 1.0])

    def test_skew_segments_miss(self) -> None:
        """Segments on skew lines don't meet."""
        result = intersect_segments(
            np.array([0.0, 0.0, 0.0]),
            np.array([2.0, 0.0, 0.0]),
            np.array([1.0, 1.0, -1.0]),
            np.array([1.0, 1.0, 1.0]),
            1e-8,
        )
        assert result is None

    def test_lines_cross_beyond_segment(self) -> None:
        """Lines that cross past the end of a segment don't count."""
        result = intersect_segments(
            np.array([0.0, 0.0, 0.0]),
            np.array([1.0, 0.0, 0.0]),
            np.array([2.0, 0.0, -1.0]),
            np.array([2.0, 0.0, 1.0]),
            1e-8,
        )
        assert result is None

    def test_collinear_overlap(self) -> None:
        """Overlapping collinear segments meet at an end of one of them."""
        result = intersect_segments(
            np.array([0.0, 0.0, 0.0]),
            np.array([2.0, 0.0, 0.0]),
            np.array([1.0, 0.0, 0.0]),
            np.array([3.0, 0.0, 0.0]),
            1e-8,
        )
        assert result is not None
        assert np.allclose(result, [1.0, 0.0, 0.0])

    def test_parallel_apart(self) -> None:
        """Parallel segments on separate lines don't meet."""
        result = intersect_segments(
            np.array([0.0, 0.0, 0.0]),
            np.array([2.0, 0.0, 0.0]),
            np.array([0.0, 0.0, 1.0]),
            np.array([2.0, 0.0, 1.0]),
            1e-8,
        )
        assert result is None

    def test_zero_length_segment(self) -> None:
        """A zero-length segment meets a segment it lies on."""
        point = np.array([1.0, 0.0, 0.0])
        result = intersect_segments(
            point, point, np.array([0.0, 0.0, 0.0]), np.array([2.0, 0.0, 0.0]), 1e-8
        )
        assert result is not None
        assert np.allclose(result, point)
