"""polycore - Tolerance-based geometry for polygons in 3-D space.

polycore classifies a cyclic sequence of 3-D corners joined by straight sides
and caches what it learns: degeneracy, planarity, self-intersection, convexity,
signed area, centroid and point containment.

Three layers add capability in turn:

- Polygon: any corner list; index arithmetic, distances, turn data
- GenericPolygon: non-degenerate; segment and self-intersection tests
- SimplePolygon: planar and not self-intersecting; area, centroid, containment

Example:
    >>> from polycore import SimplePolygon
    >>> square = SimplePolygon([(0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1)], 1e-4)
    >>> round(square.area(), 6)
    1.0
"""

from polycore.core import GenericPolygon, Polygon, SimplePolygon

__version__ = "0.1.0"

__all__ = ["GenericPolygon", "Polygon", "SimplePolygon", "__version__"]
