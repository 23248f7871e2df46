"""Core geometry for polygons in 3-D space.

This module contains:

- Vector helpers over numpy (point copying, coincidence tests)
- The three polygon layers (Polygon, GenericPolygon, SimplePolygon)
- Polygon analysis (layer classification and property reports)

All polygons are immutable; derived properties are computed lazily and
cached for the lifetime of the object.

Key classes:
- Polygon: Any corner list; distances, turn data, degeneracy, planarity
- GenericPolygon: Non-degenerate; segment and self-intersection tests
- SimplePolygon: Planar and non-self-intersecting; area, centroid, containment
- PolygonAnalyzer: Classifies a corner list without raising
"""

from polycore.core.analyzer import (
    PolygonAnalyzer,
    PolygonKind,
    PolygonReport,
    WindingDirection,
    classify,
)
from polycore.core.generic import GenericPolygon
from polycore.core.polygon import Polygon
from polycore.core.simple import SimplePolygon

__all__ = [
    # Polygon layers
    "GenericPolygon",
    "Polygon",
    "SimplePolygon",
    # Analysis
    "PolygonAnalyzer",
    "PolygonKind",
    "PolygonReport",
    "WindingDirection",
    "classify",
]
