"""Exception hierarchy for polycore."""


class PolycoreError(Exception):
    """Base exception for all polycore errors."""

    pass


class InvalidArgumentError(PolycoreError, ValueError):
    """An argument violates a precondition of the called operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class CornerIndexError(InvalidArgumentError, IndexError):
    """A corner or side index lies outside the polygon."""

    def __init__(self, description: str, index: int, num_corners: int) -> None:
        self.description = description
        self.index = index
        self.num_corners = num_corners
        super().__init__(
            f"{description} must be in [0, {num_corners - 1}], got {index}"
            if num_corners > 0
            else f"{description} is invalid for a polygon with no corners, got {index}"
        )


class GeometryError(PolycoreError):
    """Errors in geometric calculations."""

    pass


class PolygonValidationError(GeometryError, ValueError):
    """A polygon failed one of its construction invariants."""

    invariant = "invalid"

    def __init__(self, num_corners: int, tolerance: float) -> None:
        self.num_corners = num_corners
        self.tolerance = tolerance
        super().__init__(
            f"{self.invariant} polygon ({num_corners} corners, tolerance={tolerance})"
        )


class DegeneratePolygonError(PolygonValidationError):
    """Fewer than 3 corners, coincident corners, or a reversal at some corner."""

    invariant = "degenerate"


class NonPlanarPolygonError(PolygonValidationError):
    """Corners do not all lie in one plane."""

    invariant = "non-planar"


class SelfIntersectingPolygonError(PolygonValidationError):
    """Two sides of the polygon intersect away from a shared corner."""

    invariant = "self-intersecting"
