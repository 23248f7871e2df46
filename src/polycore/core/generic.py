"""Generic polygon layer: non-degenerate, possibly self-intersecting.

Adds segment intersection between corner pairs, intersection of arbitrary
segments with the perimeter, and a whole-polygon self-intersection test on
top of Polygon.
"""

import logging
from collections.abc import Iterable, Sequence

import numpy as np

from polycore.core.polygon import Polygon
from polycore.core.vectors import (
    Vector,
    as_point,
    distance_squared_to_segment,
    do_coincide,
    intersect_segments,
    length_squared,
    within_segment,
)
from polycore.exceptions import DegeneratePolygonError, InvalidArgumentError

logger = logging.getLogger(__name__)


class GenericPolygon(Polygon):
    """A non-degenerate polygon in 3-D space.

    It has at least 3 corners, no two corners coincide, and no corner turns
    back on itself. It may still be non-planar or self-intersecting.
    """

    def __init__(
        self,
        corners: Iterable[Sequence[float]],
        tolerance: float | None = None,
    ) -> None:
        """Create a generic polygon.

        Raises:
            DegeneratePolygonError: If the corners form a degenerate polygon
        """
        super().__init__(corners, tolerance)
        self._validate()

    def _reset_caches(self) -> None:
        super()._reset_caches()
        self._is_self_intersecting: bool | None = None

    def _adopt_caches(self, source: Polygon) -> None:
        super()._adopt_caches(source)
        self._is_self_intersecting = getattr(source, "_is_self_intersecting", None)

    def _validate(self) -> None:
        super()._validate()
        if self.is_degenerate():
            logger.debug("Rejected degenerate polygon: %r", self)
            raise DegeneratePolygonError(self._num_corners, self._tolerance)

    def is_self_intersecting(self) -> bool:
        """Test whether any two sides intersect other than at a shared corner."""
        if self._is_self_intersecting is None:
            self._is_self_intersecting = self._compute_is_self_intersecting()
        return self._is_self_intersecting

    def _compute_is_self_intersecting(self) -> bool:
        n = self._num_corners
        for side_i in range(n):
            for side_j in range(side_i + 1, n):
                if self.do_sides_intersect(side_i, side_j):
                    return True
        return False

    def do_sides_intersect(self, side_index1: int, side_index2: int) -> bool:
        """Test whether two sides of this polygon intersect."""
        self._validate_index(side_index1, "index of 1st side")
        self._validate_index(side_index2, "index of 2nd side")

        return self.do_segments_intersect(
            side_index1,
            self.next_index(side_index1),
            side_index2,
            self.next_index(side_index2),
        )

    def does_segment_intersect_perimeter(self, corner_index: int, partner_index: int) -> bool:
        """Test whether the segment joining two corners meets any side."""
        self._validate_index(corner_index, "index of first corner")
        self._validate_index(partner_index, "index of second corner")
        if corner_index == partner_index:
            raise InvalidArgumentError("segment is trivial")

        for side_i in range(self._num_corners):
            if self.do_segments_intersect(
                corner_index, partner_index, side_i, self.next_index(side_i)
            ):
                return True
        return False

    def intersection_with_perimeter(
        self, start_location: Sequence[float], end_location: Sequence[float]
    ) -> Vector | None:
        """Find a location where a segment meets the perimeter.

        Corners within tolerance of the segment are preferred over crossings
        in the middle of a side.

        Args:
            start_location: Start of the segment
            end_location: End of the segment

        Returns:
            A new location (a corner, or a point on the segment), or None if
            the segment misses the perimeter
        """
        start = as_point(start_location, "start location")
        end = as_point(end_location, "end location")

        for corner in self._corners:
            sd, _ = distance_squared_to_segment(corner, start, end)
            if sd <= self._tolerance2:
                return corner.copy()

        for side_i in range(self._num_corners):
            result = intersect_segments(
                self._corners[side_i],
                self._corners[self.next_index(side_i)],
                start,
                end,
                self._tolerance2,
            )
            if result is not None:
                return result

        return None

    def do_segments_intersect(
        self, corner1: int, partner1: int, corner2: int, partner2: int
    ) -> bool:
        """Test whether two segments, each joining two corners, intersect.

        Segments that share both corners coincide. Segments that share one
        corner and are not parallel meet only at that corner, which does not
        count. Parallel segments intersect only if they are collinear and
        their spans overlap.

        Otherwise the closest points of the two infinite lines are found; the
        segments intersect if those points coincide and each lies on its
        segment, allowing slack of one tolerance at either end.

        Args:
            corner1: First corner of the 1st segment
            partner1: Second corner of the 1st segment
            corner2: First corner of the 2nd segment
            partner2: Second corner of the 2nd segment

        Returns:
            True if the segments intersect

        Raises:
            InvalidArgumentError: If either segment joins a corner to itself
        """
        self._validate_index(corner1, "index of 1st corner of 1st segment")
        self._validate_index(partner1, "index of 2nd corner of 1st segment")
        if corner1 == partner1:
            raise InvalidArgumentError("1st segment is trivial")
        self._validate_index(corner2, "index of 1st corner of 2nd segment")
        self._validate_index(partner2, "index of 2nd corner of 2nd segment")
        if corner2 == partner2:
            raise InvalidArgumentError("2nd segment is trivial")

        corners = {corner1, partner1, corner2, partner2}
        num_unique = len(corners)
        if num_unique == 2:
            return True

        p1 = self._corners[corner1]
        offset1 = self._corners[partner1] - p1
        p2 = self._corners[corner2]
        offset2 = self._corners[partner2] - p2
        n = np.cross(offset1, offset2)

        if length_squared(n) < self._tolerance2:
            # parallel: test for collinear overlap
            first_i, last_i = self.most_distant(corners)
            middle = corners - {first_i, last_i}
            if self.all_collinear(first_i, last_i, middle):
                return self._is_overlap(first_i, corner1, partner1, corner2, partner2)
            return False

        if num_unique == 3:
            return False

        n1 = np.cross(offset1, n)
        n2 = np.cross(offset2, n)
        t1 = float(np.dot(p2 - p1, n2)) / float(np.dot(offset1, n2))
        t2 = float(np.dot(p1 - p2, n1)) / float(np.dot(offset2, n1))
        closest1 = p1 + offset1 * t1
        closest2 = p2 + offset2 * t2
        if not do_coincide(closest1, closest2, self._tolerance2):
            return False

        fuzz1 = self._tolerance2 / self.squared_distance(corner1, partner1)
        if not within_segment(t1, fuzz1):
            return False
        fuzz2 = self._tolerance2 / self.squared_distance(corner2, partner2)
        return within_segment(t2, fuzz2)

    def _is_overlap(
        self, ext: int, corner1: int, partner1: int, corner2: int, partner2: int
    ) -> bool:
        """Test whether two collinear segments overlap.

        ext is an extreme corner: one end of the longest span among the
        involved corners. The segment containing ext overlaps the other one
        if it reaches at least as far from ext as the nearer end of the other.
        """
        if ext in (corner1, partner1):
            other_corner, other_partner = corner2, partner2
            ext_partner = partner1 if ext == corner1 else corner1
        else:
            other_corner, other_partner = corner1, partner1
            ext_partner = partner2 if ext == corner2 else corner2

        if ext in (other_corner, other_partner):
            return True

        sd_partner = self.squared_distance(ext, ext_partner)
        if sd_partner > self.squared_distance(ext, other_corner):
            return True
        return sd_partner > self.squared_distance(ext, other_partner)
