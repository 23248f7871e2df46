"""Base polygon layer: an immutable cyclic list of 3-D corners.

A Polygon accepts any corner list, including degenerate and non-planar ones.
It provides:
- Cyclic index arithmetic over corners and sides
- Memoized squared distances and per-corner turn data
- Degeneracy and planarity tests
- Nearest-corner and nearest-side queries
- Corner/side sharing with another polygon
- Sub-polygons built from a contiguous range of corners

Side i joins corner i to corner (i + 1) mod N.

Every derived quantity is computed at most once and cached, since the corners
never change after construction. Caches are plain attributes that hold None
until populated, so an instance should be owned by a single thread; racing
threads would only repeat identical work.

The combinatorial searches (largest_triangle, most_distant, diameter) are
brute force, O(N^3) and O(N^2). That suits mesh faces and terrain tiles,
not polygons with thousands of corners.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from polycore.config import get_default_settings
from polycore.core.vectors import (
    Vector,
    as_point,
    distance_squared,
    do_coincide,
    length_squared,
)
from polycore.exceptions import CornerIndexError, InvalidArgumentError

if TYPE_CHECKING:
    from polycore.core.generic import GenericPolygon
    from polycore.core.simple import SimplePolygon

logger = logging.getLogger(__name__)


def _pair_key(index1: int, index2: int) -> tuple[int, int]:
    if index1 <= index2:
        return (index1, index2)
    return (index2, index1)


class Polygon:
    """An immutable polygon in 3-D space, possibly degenerate or non-planar.

    Attributes:
        num_corners: Number of corners (N >= 0)
        tolerance: Distance below which two locations coincide
    """

    def __init__(
        self,
        corners: Iterable[Sequence[float]],
        tolerance: float | None = None,
    ) -> None:
        """Create a polygon from a corner list.

        Each corner is copied, so later changes to the caller's buffers have
        no effect on the polygon.

        Args:
            corners: Corner locations in cyclic order, each 3 finite numbers
            tolerance: Comparison tolerance (>= 0); the configured default
                is used if None

        Raises:
            InvalidArgumentError: If corners is None, a corner is malformed,
                or the tolerance is negative or NaN
        """
        if corners is None:
            raise InvalidArgumentError("corners must not be None")
        if tolerance is None:
            tolerance = get_default_settings().geometry.tolerance
        tolerance = float(tolerance)
        if math.isnan(tolerance) or tolerance < 0.0:
            raise InvalidArgumentError(f"tolerance must be >= 0, got {tolerance}")

        self._corners: tuple[Vector, ...] = tuple(
            as_point(corner, f"corners[{index}]") for index, corner in enumerate(corners)
        )
        self._num_corners = len(self._corners)
        self._tolerance = tolerance
        self._tolerance2 = tolerance * tolerance
        self._reset_caches()

    def _reset_caches(self) -> None:
        n = self._num_corners
        self._is_degenerate: bool | None = None
        self._is_planar: bool | None = None
        self._largest_triangle: tuple[int, int, int] | None = None
        self._squared_distances: dict[tuple[int, int], float] = {}
        self._dot_products: list[float | None] = [None] * n
        self._cross_products: list[Vector | None] = [None] * n

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(num_corners={self._num_corners}, "
            f"tolerance={self._tolerance})"
        )

    # ------------------------------------------------------------------
    # Basic accessors
    # ------------------------------------------------------------------

    @property
    def num_corners(self) -> int:
        return self._num_corners

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def corner(self, corner_index: int) -> Vector:
        """Copy the location of one corner."""
        self._validate_index(corner_index, "corner index")
        return self._corners[corner_index].copy()

    def corners(self) -> list[Vector]:
        """Copy the locations of all corners, in order."""
        return [corner.copy() for corner in self._corners]

    def next_index(self, index: int) -> int:
        """Index of the corner (or side) that follows the given one."""
        self._validate_index(index, "index")
        return (index + 1) % self._num_corners

    def prev_index(self, index: int) -> int:
        """Index of the corner (or side) that precedes the given one."""
        self._validate_index(index, "index")
        return (index + self._num_corners - 1) % self._num_corners

    # ------------------------------------------------------------------
    # Memoized pairwise and per-corner data
    # ------------------------------------------------------------------

    def squared_distance(self, corner_index1: int, corner_index2: int) -> float:
        """Squared distance between two corners, computed once per pair.

        Args:
            corner_index1: Index of the first corner
            corner_index2: Index of the second corner

        Returns:
            Squared distance (>= 0), identical for either argument order
        """
        self._validate_index(corner_index1, "index of first corner")
        self._validate_index(corner_index2, "index of 2nd corner")

        key = _pair_key(corner_index1, corner_index2)
        result = self._squared_distances.get(key)
        if result is None:
            if corner_index1 == corner_index2:
                result = 0.0
            else:
                result = distance_squared(
                    self._corners[corner_index1], self._corners[corner_index2]
                )
            self._squared_distances[key] = result

        return result

    def dot_product(self, corner_index: int) -> float:
        """Dot product of the sides entering and leaving a corner."""
        self._validate_index(corner_index, "corner index")
        if self._dot_products[corner_index] is None:
            self._set_corner_products(corner_index)
        return self._dot_products[corner_index]

    def cross_product(self, corner_index: int) -> Vector:
        """Cross product of the sides entering and leaving a corner."""
        self._validate_index(corner_index, "corner index")
        if self._cross_products[corner_index] is None:
            self._set_corner_products(corner_index)
        return self._cross_products[corner_index].copy()

    def abs_turn_angle(self, corner_index: int) -> float:
        """Magnitude of the turn at a corner.

        Args:
            corner_index: Index of the corner

        Returns:
            Angle in radians, in [0, pi], or NaN if either adjacent side has
            zero length
        """
        self._validate_index(corner_index, "corner index")

        next_i = self.next_index(corner_index)
        prev_i = self.prev_index(corner_index)
        ls_previous = self.squared_distance(prev_i, corner_index)
        ls_current = self.squared_distance(corner_index, next_i)
        ls_product = ls_previous * ls_current
        if ls_product == 0.0:
            return math.nan

        cos_angle = self.dot_product(corner_index) / math.sqrt(ls_product)
        cos_angle = max(-1.0, min(1.0, cos_angle))
        return math.acos(cos_angle)

    def _set_corner_products(self, corner_index: int) -> None:
        a = self._corners[self.prev_index(corner_index)]
        b = self._corners[corner_index]
        c = self._corners[self.next_index(corner_index)]
        offset_ab = b - a
        offset_bc = c - b

        self._dot_products[corner_index] = float(np.dot(offset_ab, offset_bc))
        cross = np.cross(offset_ab, offset_bc)
        cross.flags.writeable = False
        self._cross_products[corner_index] = cross

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def is_degenerate(self) -> bool:
        """Test for fewer than 3 corners, coincident corners, or a reversal.

        A reversal is a 180-degree turn: the side leaving a corner doubles
        back along the side entering it. It is detected from the dot product
        alone, so no NaN can arise from acos.
        """
        if self._is_degenerate is None:
            self._is_degenerate = self._compute_is_degenerate()
        return self._is_degenerate

    def _compute_is_degenerate(self) -> bool:
        n = self._num_corners
        if n < 3:
            return True

        for i in range(n):
            for j in range(i + 1, n):
                if self.do_coincide(i, j):
                    return True

        for corner_i in range(n):
            dot = self.dot_product(corner_i)
            ls_previous = self.squared_distance(self.prev_index(corner_i), corner_i)
            ls_current = self.squared_distance(corner_i, self.next_index(corner_i))
            length_product = math.sqrt(ls_previous * ls_current)
            if dot < self._tolerance2 - length_product:
                return True

        return False

    def is_planar(self) -> bool:
        """Test whether all corners lie within tolerance of a single plane.

        Polygons with fewer than 4 corners are trivially planar. Corners that
        share one coordinate value are accepted without fitting a plane, as
        are corners that all lie within tolerance of a line. Otherwise the
        plane through the largest triangle of corners is used.
        """
        if self._is_planar is None:
            self._is_planar = self._compute_is_planar()
        return self._is_planar

    def _compute_is_planar(self) -> bool:
        if self._num_corners < 4:
            return True

        stacked = np.vstack(self._corners)
        spread = stacked - stacked[0]
        for axis in range(3):
            if np.all(spread[:, axis] * spread[:, axis] <= self._tolerance2):
                return True

        triangle = self.largest_triangle()
        if triangle is None:
            return True
        a, b, c = (self._corners[i] for i in triangle)
        cross = np.cross(b - a, c - b)
        cross_length = math.sqrt(length_squared(cross))
        if cross_length <= self._tolerance * self.diameter():
            # every corner lies within tolerance of the diameter's line
            return True

        normal = cross / cross_length
        constant = -float(np.dot(normal, a))
        for corner in self._corners:
            pseudo_distance = float(np.dot(normal, corner)) + constant
            if pseudo_distance * pseudo_distance > self._tolerance2:
                return False

        return True

    def largest_triangle(self) -> tuple[int, int, int] | None:
        """Find the three corners that form the triangle of largest area.

        Ties keep the first triple found in lexicographic order.

        Returns:
            Corner indices in ascending order, or None if N < 3
        """
        if self._largest_triangle is None:
            n = self._num_corners
            largest_sa = -1.0
            for i in range(n - 2):
                for j in range(i + 1, n - 1):
                    for k in range(j + 1, n):
                        sa = self.squared_area(i, j, k)
                        if sa > largest_sa:
                            largest_sa = sa
                            self._largest_triangle = (i, j, k)

        return self._largest_triangle

    def squared_area(self, index_a: int, index_b: int, index_c: int) -> float:
        """Squared area of the triangle formed by three corners."""
        self._validate_index(index_a, "index of first corner")
        self._validate_index(index_b, "index of 2nd corner")
        self._validate_index(index_c, "index of 3rd corner")

        a = self._corners[index_a]
        cross = np.cross(self._corners[index_b] - a, self._corners[index_c] - a)
        return length_squared(cross) / 4.0

    def do_coincide(self, corner_index1: int, corner_index2: int) -> bool:
        """Test whether two corners lie within tolerance of each other."""
        return self.squared_distance(corner_index1, corner_index2) <= self._tolerance2

    # ------------------------------------------------------------------
    # Collinearity
    # ------------------------------------------------------------------

    def most_distant(self, subset: Iterable[int]) -> tuple[int, int] | None:
        """Find the pair of corners in a subset that are farthest apart.

        Args:
            subset: Corner indices to consider

        Returns:
            The pair (i, j) with i < j, or None if the subset has fewer than
            2 distinct corners
        """
        indices = self._validated_subset(subset)

        largest_sd = -1.0
        result = None
        for position, i in enumerate(indices):
            for j in indices[position + 1:]:
                sd = self.squared_distance(i, j)
                if sd > largest_sd:
                    largest_sd = sd
                    result = (i, j)

        return result

    def all_collinear(
        self, corner_index1: int, corner_index2: int, subset: Iterable[int]
    ) -> bool:
        """Test whether every corner in a subset lies on the line through two corners.

        Each candidate is projected onto the line; it is collinear if the
        projection coincides with it. If the two defining corners coincide
        the line is undefined and the result is True.
        """
        self._validate_index(corner_index1, "index of first corner")
        self._validate_index(corner_index2, "index of 2nd corner")
        indices = self._validated_subset(subset)

        if self.do_coincide(corner_index1, corner_index2):
            return True

        first = self._corners[corner_index1]
        fl = self._corners[corner_index2] - first
        norm_squared_fl = self.squared_distance(corner_index1, corner_index2)

        for middle_i in indices:
            fm = self._corners[middle_i] - first
            fraction = float(np.dot(fm, fl)) / norm_squared_fl
            projection = fl * fraction
            if not do_coincide(projection, fm, self._tolerance2):
                return False

        return True

    def are_collinear(self, corner_index1: int, corner_index2: int, corner_index3: int) -> bool:
        """Test whether three corners lie on a single line.

        True whenever two of them coincide, since the middle corner is then
        undefined.
        """
        self._validate_index(corner_index1, "index of first corner")
        self._validate_index(corner_index2, "index of 2nd corner")
        self._validate_index(corner_index3, "index of 3rd corner")

        if (
            self.do_coincide(corner_index1, corner_index2)
            or self.do_coincide(corner_index1, corner_index3)
            or self.do_coincide(corner_index2, corner_index3)
        ):
            return True

        corners = {corner_index1, corner_index2, corner_index3}
        first_i, last_i = self.most_distant(corners)
        middle = corners - {first_i, last_i}
        return self.all_collinear(first_i, last_i, middle)

    # ------------------------------------------------------------------
    # Sides and nearest features
    # ------------------------------------------------------------------

    def side_length(self, side_index: int) -> float:
        """Length of a side."""
        self._validate_index(side_index, "side index")
        return math.sqrt(self.squared_distance(side_index, self.next_index(side_index)))

    def midpoint(self, side_index: int) -> Vector:
        """Location of the midpoint of a side."""
        self._validate_index(side_index, "side index")
        corner1 = self._corners[side_index]
        corner2 = self._corners[self.next_index(side_index)]
        return (corner1 + corner2) / 2.0

    def perimeter(self) -> float:
        """Sum of the side lengths."""
        return math.fsum(self.side_length(i) for i in range(self._num_corners))

    def diameter(self) -> float:
        """Largest distance between any two corners (0 for fewer than 2)."""
        pair = self.most_distant(range(self._num_corners))
        if pair is None:
            return 0.0
        return math.sqrt(self.squared_distance(*pair))

    def find_longest(self) -> int:
        """Index of the longest side, or -1 if there are no corners."""
        result = -1
        biggest_sd = -math.inf
        for side_i in range(self._num_corners):
            sd = self.squared_distance(side_i, self.next_index(side_i))
            if sd > biggest_sd:
                result = side_i
                biggest_sd = sd
        return result

    def find_shortest(self) -> int:
        """Index of the shortest side, or -1 if there are no corners."""
        result = -1
        least_sd = math.inf
        for side_i in range(self._num_corners):
            sd = self.squared_distance(side_i, self.next_index(side_i))
            if sd < least_sd:
                result = side_i
                least_sd = sd
        return result

    def squared_distance_to_corner(self, location: Sequence[float], corner_index: int) -> float:
        """Squared distance from a location to a corner."""
        point = as_point(location)
        self._validate_index(corner_index, "corner index")
        return distance_squared(self._corners[corner_index], point)

    def squared_distance_to_side(
        self, location: Sequence[float], side_index: int
    ) -> tuple[float, Vector]:
        """Squared distance from a location to the nearest point of a side.

        The location is projected onto the side's line and the projection is
        clamped to the side.

        Args:
            location: The location to measure from
            side_index: Index of the side

        Returns:
            Tuple of (squared_distance, closest_point_on_side)
        """
        point = as_point(location)
        self._validate_index(side_index, "side index")

        next_i = self.next_index(side_index)
        corner1 = self._corners[side_index]
        side_offset = self._corners[next_i] - corner1
        side_length_squared = self.squared_distance(side_index, next_i)
        if side_length_squared == 0.0:
            return distance_squared(corner1, point), corner1.copy()

        point_offset = point - corner1
        t = float(np.dot(point_offset, side_offset)) / side_length_squared
        t = max(0.0, min(1.0, t))
        closest_offset = side_offset * t

        return distance_squared(closest_offset, point_offset), corner1 + closest_offset

    def find_corner(self, location: Sequence[float]) -> int:
        """Index of the corner nearest to a location, or -1 if there are none."""
        point = as_point(location)

        result = -1
        best_sd = math.inf
        for corner_i, corner in enumerate(self._corners):
            sd = distance_squared(corner, point)
            if sd < best_sd:
                result = corner_i
                best_sd = sd
        return result

    def find_side(self, location: Sequence[float]) -> tuple[int, Vector | None]:
        """Find the side nearest to a location.

        Args:
            location: The location to search from

        Returns:
            Tuple of (side_index, closest_point_on_perimeter), or (-1, None)
            if there are no corners
        """
        point = as_point(location)

        result = -1
        closest = None
        least_sd = math.inf
        for side_i in range(self._num_corners):
            sd, closest_on_side = self.squared_distance_to_side(point, side_i)
            if sd < least_sd:
                result = side_i
                least_sd = sd
                closest = closest_on_side

        return result, closest

    def on_corner(self, location: Sequence[float], corner_index: int) -> bool:
        """Test whether a location coincides with a given corner."""
        return self.squared_distance_to_corner(location, corner_index) <= self._tolerance2

    def corner_at(self, location: Sequence[float]) -> int:
        """Index of the first corner coinciding with a location, or -1."""
        point = as_point(location)
        for corner_i in range(self._num_corners):
            if self.on_corner(point, corner_i):
                return corner_i
        return -1

    def on_side(self, location: Sequence[float], side_index: int) -> bool:
        """Test whether a location lies within tolerance of a given side."""
        sd, _ = self.squared_distance_to_side(location, side_index)
        return sd <= self._tolerance2

    def side_at(self, location: Sequence[float]) -> int:
        """Index of the first side within tolerance of a location, or -1."""
        point = as_point(location)
        for side_i in range(self._num_corners):
            if self.on_side(point, side_i):
                return side_i
        return -1

    # ------------------------------------------------------------------
    # Derived polygons
    # ------------------------------------------------------------------

    def from_range(self, first_index: int, last_index: int) -> "Polygon":
        """Build a polygon from a cyclic range of this polygon's corners.

        Planarity and any squared distances already known carry over to the
        new polygon.

        Args:
            first_index: Index of the first corner to include
            last_index: Index of the last corner to include

        Returns:
            A new base Polygon with at least 2 corners

        Raises:
            InvalidArgumentError: If the indices are equal
        """
        self._validate_index(first_index, "first corner index")
        self._validate_index(last_index, "last corner index")
        if first_index == last_index:
            raise InvalidArgumentError("corner indices must differ")

        old_indices = [first_index]
        while old_indices[-1] != last_index:
            old_indices.append(self.next_index(old_indices[-1]))

        result = Polygon([self._corners[i] for i in old_indices], self._tolerance)

        if self._is_planar:
            result._is_planar = True
        for new_i, old_i in enumerate(old_indices):
            for new_j in range(new_i, len(old_indices)):
                sd = self._squared_distances.get(_pair_key(old_i, old_indices[new_j]))
                if sd is not None:
                    result._squared_distances[(new_i, new_j)] = sd

        return result

    def shared_corners(self, other: "Polygon") -> list[tuple[int, int]]:
        """List the corners this polygon shares with another.

        Two corners are shared if they coincide within the average of the
        two polygons' squared tolerances.

        Returns:
            Sorted (this_index, other_index) pairs
        """
        if not isinstance(other, Polygon):
            raise InvalidArgumentError("other must be a Polygon")

        tolerance2 = (self._tolerance2 + other._tolerance2) / 2.0
        result = []
        for this_i, this_corner in enumerate(self._corners):
            for other_i, other_corner in enumerate(other._corners):
                if do_coincide(this_corner, other_corner, tolerance2):
                    result.append((this_i, other_i))
        return result

    def shares_corner_with(self, other: "Polygon") -> bool:
        """Test whether any corner coincides with a corner of another polygon."""
        return bool(self.shared_corners(other))

    def shared_sides(self, other: "Polygon") -> list[tuple[int, int]]:
        """List the sides this polygon shares with another.

        A side is shared when both of its corners are shared and they are
        adjacent in the other polygon too, in either winding direction.

        Returns:
            Sorted (this_side, other_side) pairs
        """
        corner_map = set(self.shared_corners(other))

        result = set()
        for this_i, other_i in corner_map:
            this_n = self.next_index(this_i)
            if (this_n, other.next_index(other_i)) in corner_map:
                result.add((this_i, other_i))
            other_p = other.prev_index(other_i)
            if (this_n, other_p) in corner_map:
                result.add((this_i, other_p))

        return sorted(result)

    def shares_side_with(self, other: "Polygon") -> bool:
        """Test whether any side coincides with a side of another polygon."""
        return bool(self.shared_sides(other))

    # ------------------------------------------------------------------
    # Upgrades
    # ------------------------------------------------------------------

    def to_generic(self) -> "GenericPolygon":
        """Validate this polygon as a GenericPolygon.

        Raises:
            DegeneratePolygonError: If the polygon is degenerate
        """
        from polycore.core.generic import GenericPolygon

        return self._upgrade(GenericPolygon)

    def to_simple(self) -> "SimplePolygon":
        """Validate this polygon as a SimplePolygon.

        Raises:
            DegeneratePolygonError: If the polygon is degenerate
            NonPlanarPolygonError: If the polygon is not planar
            SelfIntersectingPolygonError: If two sides intersect
        """
        from polycore.core.simple import SimplePolygon

        return self._upgrade(SimplePolygon)

    def _upgrade(self, cls: type["Polygon"]) -> "Polygon":
        result = cls.__new__(cls)
        result._corners = self._corners
        result._num_corners = self._num_corners
        result._tolerance = self._tolerance
        result._tolerance2 = self._tolerance2
        result._reset_caches()
        result._adopt_caches(self)
        result._validate()

        logger.debug("Upgraded %r to %s", self, cls.__name__)
        return result

    def _adopt_caches(self, source: "Polygon") -> None:
        self._is_degenerate = source._is_degenerate
        self._is_planar = source._is_planar
        self._largest_triangle = source._largest_triangle
        self._squared_distances = dict(source._squared_distances)
        self._dot_products = list(source._dot_products)
        self._cross_products = list(source._cross_products)

    def _validate(self) -> None:
        """Check the construction invariants of this layer (none for Polygon)."""
        pass

    # ------------------------------------------------------------------
    # Argument checks
    # ------------------------------------------------------------------

    def _validate_index(self, index: int, description: str) -> None:
        if not 0 <= index < self._num_corners:
            raise CornerIndexError(description, index, self._num_corners)

    def _validated_subset(self, subset: Iterable[int]) -> list[int]:
        if subset is None:
            raise InvalidArgumentError("subset must not be None")
        indices = sorted(set(subset))
        for index in indices:
            self._validate_index(index, "subset index")
        return indices
