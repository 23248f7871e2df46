"""Simple polygon layer: planar, non-degenerate and not self-intersecting.

A simple polygon has a well-defined interior, so it supports:
- A planar frame: unit normal, plane constant and two in-plane basis vectors
- Signed area (shoelace formula) and centroid
- Signed turn angles, interior angles and convexity
- In-plane, point-in-polygon and segment-in-polygon tests
- Merging with a neighbor along shared sides

The frame comes from the largest triangle of corners. Its normal follows the
polygon's winding, so turn angles are positive at convex corners regardless
of corner order. The x basis runs along the triangle's first edge and the
z basis is x cross normal. Planar offsets are measured from corner 0.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np

from polycore.core.generic import GenericPolygon
from polycore.core.polygon import Polygon
from polycore.core.vectors import (
    Vector,
    as_point,
    cross_2d,
    distance_squared,
    do_coincide,
    dominant_axis_sign,
    normalize,
)
from polycore.exceptions import (
    InvalidArgumentError,
    NonPlanarPolygonError,
    SelfIntersectingPolygonError,
)

logger = logging.getLogger(__name__)


class SimplePolygon(GenericPolygon):
    """A planar, non-self-intersecting, non-degenerate polygon in 3-D space.

    Constructed like GenericPolygon:

        SimplePolygon(corners, tolerance)

    Raises DegeneratePolygonError, NonPlanarPolygonError or
    SelfIntersectingPolygonError if the corners don't qualify.
    """

    def _reset_caches(self) -> None:
        super()._reset_caches()
        self._is_convex: bool | None = None
        self._plane_normal: Vector | None = None
        self._plane_constant: float | None = None
        self._plane_x_basis: Vector | None = None
        self._plane_z_basis: Vector | None = None
        self._planar_offsets: list[tuple[float, float] | None] = [None] * self._num_corners
        self._frame_area: float | None = None
        self._centroid: tuple[float, float] | None = None

    def _validate(self) -> None:
        super()._validate()
        if not self.is_planar():
            logger.debug("Rejected non-planar polygon: %r", self)
            raise NonPlanarPolygonError(self._num_corners, self._tolerance)
        if self.is_self_intersecting():
            logger.debug("Rejected self-intersecting polygon: %r", self)
            raise SelfIntersectingPolygonError(self._num_corners, self._tolerance)

    # ------------------------------------------------------------------
    # Planar frame
    # ------------------------------------------------------------------

    def _set_plane(self) -> None:
        a_index, b_index, c_index = self.largest_triangle()
        a = self._corners[a_index]
        offset_b = self._corners[b_index] - a
        offset_c = self._corners[c_index] - self._corners[b_index]

        normal = normalize(np.cross(offset_b, offset_c))
        x_basis = normalize(offset_b)
        z_basis = np.cross(x_basis, normal)
        for vector in (normal, x_basis, z_basis):
            vector.flags.writeable = False

        self._plane_normal = normal
        self._plane_constant = -float(np.dot(normal, a))
        self._plane_x_basis = x_basis
        self._plane_z_basis = z_basis

    def plane_normal(self) -> Vector:
        """Unit normal of the polygon's plane."""
        if self._plane_normal is None:
            self._set_plane()
        return self._plane_normal.copy()

    def plane_constant(self) -> float:
        """Constant d such that normal . p + d == 0 for points p in the plane."""
        if self._plane_constant is None:
            self._set_plane()
        return self._plane_constant

    def plane_basis(self) -> tuple[Vector, Vector]:
        """The in-plane (x_basis, z_basis) unit vectors of the planar frame."""
        if self._plane_x_basis is None:
            self._set_plane()
        return self._plane_x_basis.copy(), self._plane_z_basis.copy()

    def _pseudo_distance(self, point: Vector) -> float:
        if self._plane_normal is None:
            self._set_plane()
        return float(np.dot(self._plane_normal, point)) + self._plane_constant

    def planar_coordinates(self, location: Sequence[float]) -> tuple[float, float]:
        """(x, z) coordinates of a location in the planar frame.

        Off-plane locations are projected along the normal.
        """
        point = as_point(location)
        if self._plane_x_basis is None:
            self._set_plane()
        offset = point - self._corners[0]
        return (
            float(np.dot(offset, self._plane_x_basis)),
            float(np.dot(offset, self._plane_z_basis)),
        )

    def planar_offset(self, corner_index: int) -> tuple[float, float]:
        """(x, z) coordinates of a corner in the planar frame, relative to corner 0."""
        self._validate_index(corner_index, "corner index")
        if self._planar_offsets[corner_index] is None:
            if corner_index == 0:
                self._planar_offsets[0] = (0.0, 0.0)
            else:
                self._planar_offsets[corner_index] = self.planar_coordinates(
                    self._corners[corner_index]
                )
        return self._planar_offsets[corner_index]

    def _to_world(self, x: float, z: float) -> Vector:
        if self._plane_x_basis is None:
            self._set_plane()
        return self._corners[0] + self._plane_x_basis * x + self._plane_z_basis * z

    # ------------------------------------------------------------------
    # Area and centroid
    # ------------------------------------------------------------------

    def _signed_frame_area(self) -> float:
        """Shoelace area measured in the planar frame."""
        if self._frame_area is None:
            total = 0.0
            for corner_i in range(self._num_corners):
                x1, z1 = self.planar_offset(corner_i)
                x2, z2 = self.planar_offset(self.next_index(corner_i))
                total += cross_2d(x1, z1, x2, z2)
            self._frame_area = 0.5 * total
        return self._frame_area

    def signed_area(self) -> float:
        """Calculate signed area using the shoelace formula.

        The sign of the area indicates winding direction, as seen looking
        down the dominant axis of the plane normal from its positive side
        (from +Y for a horizontal polygon):
        - Positive area: counter-clockwise winding
        - Negative area: clockwise winding

        Reversing the corner order negates the result, with one caveat: when
        the normal lies (almost) exactly between two axes, rounding may pick
        a different dominant axis for the reversed polygon, and then both
        orders report the same sign. Compare plane_normal() directly when
        winding must be consistent for such polygons.

        Returns:
            Signed area in square world units
        """
        # The frame's x-z rotation runs opposite to the frame normal.
        if self._plane_normal is None:
            self._set_plane()
        return -self._signed_frame_area() * dominant_axis_sign(self._plane_normal)

    def area(self) -> float:
        """Area of the polygon (>= 0)."""
        return abs(self._signed_frame_area())

    def centroid(self) -> Vector:
        """Location of the polygon's centroid (center of mass)."""
        if self._centroid is None:
            sum_x = 0.0
            sum_z = 0.0
            for corner_i in range(self._num_corners):
                x1, z1 = self.planar_offset(corner_i)
                x2, z2 = self.planar_offset(self.next_index(corner_i))
                cross = cross_2d(x1, z1, x2, z2)
                sum_x += (x1 + x2) * cross
                sum_z += (z1 + z2) * cross

            six_area = 6.0 * self._signed_frame_area()
            self._centroid = (sum_x / six_area, sum_z / six_area)

        return self._to_world(*self._centroid)

    # ------------------------------------------------------------------
    # Angles and convexity
    # ------------------------------------------------------------------

    def _turn_sign(self, corner_index: int) -> float:
        if self._plane_normal is None:
            self._set_plane()
        return float(np.dot(self._plane_normal, self.cross_product(corner_index)))

    def turn_angle(self, corner_index: int) -> float:
        """Signed turn angle at a corner, in radians.

        Positive for a left turn about the plane normal, negative for a
        right turn.
        """
        self._validate_index(corner_index, "corner index")
        return math.copysign(self.abs_turn_angle(corner_index), self._turn_sign(corner_index))

    def interior_angle(self, corner_index: int) -> float:
        """Interior angle at a corner, in radians (0 to 2*pi)."""
        return math.pi - self.turn_angle(corner_index)

    def is_convex(self) -> bool:
        """Test whether every corner turns the same way as the plane normal.

        Straight corners count as convex. A corner turns the wrong way only
        when its turn exceeds the squared tolerance, so rounding at a
        straight corner of a tilted polygon doesn't matter.
        """
        if self._is_convex is None:
            self._is_convex = all(
                self._turn_sign(corner_i) >= -self._tolerance2
                for corner_i in range(self._num_corners)
            )
        return self._is_convex

    # ------------------------------------------------------------------
    # Location queries
    # ------------------------------------------------------------------

    def in_plane(self, location: Sequence[float]) -> bool:
        """Test whether a location lies within tolerance of the polygon's plane."""
        pseudo_distance = self._pseudo_distance(as_point(location))
        return pseudo_distance * pseudo_distance <= self._tolerance2

    def is_inside(self, location: Sequence[float]) -> bool:
        """Determine if a location is inside the polygon.

        The location must lie in the polygon's plane. Locations within
        tolerance of the perimeter count as inside. Otherwise a ray is cast
        in the planar frame and crossings with the sides are counted: odd
        means inside, even means outside.

        Args:
            location: The location to test

        Returns:
            True if the location is in the plane and inside or on the polygon
        """
        point = as_point(location)
        if not self.in_plane(point):
            return False

        _, closest = self.find_side(point)
        if distance_squared(point, closest) <= self._tolerance2:
            return True

        x, z = self.planar_coordinates(point)
        inside = False
        j = self._num_corners - 1
        for i in range(self._num_corners):
            xi, zi = self.planar_offset(i)
            xj, zj = self.planar_offset(j)

            # Check if ray from point crosses side (j, i)
            if ((zi > z) != (zj > z)) and (x < (xj - xi) * (z - zi) / (zj - zi) + xi):
                inside = not inside

            j = i

        return inside

    def find_location(self, location: Sequence[float]) -> Vector:
        """Find the location in the polygon nearest to a given one.

        Returns the location itself if it is inside; otherwise its projection
        onto the plane if that is inside; otherwise the nearest point on the
        perimeter (of the projection).
        """
        point = as_point(location)
        if self.is_inside(point):
            return point.copy()

        pseudo_distance = self._pseudo_distance(point)
        projection = point - self._plane_normal * pseudo_distance
        if self.is_inside(projection):
            return projection

        _, closest = self.find_side(projection)
        return closest

    def rep(self) -> Vector:
        """A representative location: the centroid if inside, else the nearest perimeter point."""
        center = self.centroid()
        if self.is_inside(center):
            return center

        _, closest = self.find_side(center)
        return closest

    def score(self, location: Sequence[float]) -> float:
        """Score a location by its squared distance to the perimeter.

        Args:
            location: The location to score

        Returns:
            Squared distance to the nearest perimeter point, positive if the
            location is inside and negative if outside. Off-plane locations
            score as their projection plus the squared distance to the plane.
        """
        point = as_point(location)
        pseudo_distance = self._pseudo_distance(point)
        squared_pd = pseudo_distance * pseudo_distance
        if squared_pd > self._tolerance2:
            projection = point - self._plane_normal * pseudo_distance
            return self.score(projection) + squared_pd

        _, closest = self.find_side(point)
        result = distance_squared(point, closest)
        if self.is_inside(point):
            return result
        return -result

    def support_distance(self, location: Sequence[float], cosine_tolerance: float) -> float:
        """Vertical distance from a location down to the polygon.

        Args:
            location: The location to drop from
            cosine_tolerance: Minimum |normal.y| for the plane to offer
                support (0 to 1)

        Returns:
            Distance along -Y, or infinity if the plane is too steep, lies
            above the location, or the dropped location misses the polygon
        """
        point = as_point(location)
        if not 0.0 <= cosine_tolerance <= 1.0:
            raise InvalidArgumentError(
                f"cosine tolerance must be in [0, 1], got {cosine_tolerance}"
            )

        if self._plane_normal is None:
            self._set_plane()
        normal_y = float(self._plane_normal[1])
        if abs(normal_y) < cosine_tolerance or normal_y == 0.0:
            return math.inf

        distance = self._pseudo_distance(point) / normal_y
        if distance < 0.0:
            return math.inf

        projection = point.copy()
        projection[1] -= distance
        if not self.is_inside(projection):
            return math.inf
        return distance

    def contains_segment(
        self, start_location: Sequence[float], end_location: Sequence[float]
    ) -> bool:
        """Test whether a segment lies entirely inside the polygon.

        Both ends must be inside. A segment with both ends on one side is
        inside. Otherwise the segment is split where it meets the perimeter
        (at its midpoint if it meets the perimeter only at an end) and each
        half is tested in turn.

        Args:
            start_location: Start of the segment
            end_location: End of the segment

        Returns:
            True if every point of the segment is inside or on the polygon
        """
        start = as_point(start_location, "start location")
        end = as_point(end_location, "end location")
        if not self.is_inside(start) or not self.is_inside(end):
            return False
        if self.is_convex():
            return True

        for side_i in range(self._num_corners):
            if self.on_side(start, side_i) and self.on_side(end, side_i):
                return True

        joint = self.intersection_with_perimeter(start, end)
        if joint is None:
            return True
        if do_coincide(start, joint, self._tolerance2) or do_coincide(
            end, joint, self._tolerance2
        ):
            joint = (start + end) / 2.0

        return self.contains_segment(start, joint) and self.contains_segment(joint, end)

    # ------------------------------------------------------------------
    # Merging
    # ------------------------------------------------------------------

    def can_merge(self, other: object) -> bool:
        """Test whether this polygon merges with another into a simple polygon.

        The other polygon must be a SimplePolygon with the same tolerance
        that shares one contiguous run of sides with this one.
        """
        if not isinstance(other, SimplePolygon) or other.tolerance != self._tolerance:
            return False
        corners = self._merge_corners(other)
        if corners is None:
            return False

        candidate = Polygon(corners, self._tolerance)
        if candidate.is_degenerate() or not candidate.is_planar():
            return False
        return not candidate.to_generic().is_self_intersecting()

    def merge(self, other: "SimplePolygon") -> "SimplePolygon":
        """Merge this polygon with another along their shared sides.

        The result starts with this polygon's unshared corners, in this
        polygon's winding, and continues with the other polygon's.

        Args:
            other: A simple polygon with the same tolerance

        Returns:
            A new SimplePolygon covering both polygons

        Raises:
            InvalidArgumentError: If the tolerances differ or the polygons
                don't share exactly one run of sides
            PolygonValidationError: If the merged corners aren't simple
        """
        if not isinstance(other, SimplePolygon):
            raise InvalidArgumentError("other must be a SimplePolygon")
        if other.tolerance != self._tolerance:
            raise InvalidArgumentError(
                f"tolerances differ: {self._tolerance} != {other.tolerance}"
            )
        corners = self._merge_corners(other)
        if corners is None:
            raise InvalidArgumentError("polygons don't share a single run of sides")

        result = SimplePolygon(corners, self._tolerance)
        logger.debug("Merged %r with %r into %r", self, other, result)
        return result

    def _merge_corners(self, other: "SimplePolygon") -> list[Vector] | None:
        """Corners of the union of two polygons, or None if they can't merge."""
        shared = {this_i for this_i, _ in self.shared_sides(other)}
        if not shared or len(shared) == self._num_corners:
            return None

        # The shared sides must form one contiguous run.
        run_starts = [side_i for side_i in shared if self.prev_index(side_i) not in shared]
        if len(run_starts) != 1:
            return None
        first = run_starts[0]
        last = first
        while self.next_index(last) in shared:
            last = self.next_index(last)
        end = self.next_index(last)

        corner_map = dict(self.shared_corners(other))
        other_first = corner_map[first]
        other_end = corner_map[end]

        # Leave the run in the other polygon by walking away from it.
        if other.next_index(other_first) == corner_map[self.next_index(first)]:
            step = other.prev_index
        else:
            step = other.next_index

        result = []
        corner_i = end
        while True:
            result.append(self._corners[corner_i].copy())
            if corner_i == first:
                break
            corner_i = self.next_index(corner_i)

        other_i = step(other_first)
        while other_i != other_end:
            if other_i == other_first:
                return None
            result.append(other.corner(other_i))
            other_i = step(other_i)

        return result
