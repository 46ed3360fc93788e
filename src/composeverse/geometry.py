"""Small vector helpers shared by the frame computation and the renderer."""

import math

from composeverse.models import Point


def direction_unit(source: Point, destination: Point) -> Point:
    """Unit vector pointing from `source` to `destination`.

    Returns (0.0, 0.0) when the two points coincide.
    """
    dx = destination[0] - source[0]
    dy = destination[1] - source[1]
    dist = math.hypot(dx, dy)
    if dist == 0:
        return (0.0, 0.0)
    return (dx / dist, dy / dist)


def offset(point: Point, direction: Point, distance: float) -> Point:
    """Move `point` by `distance` along `direction`."""
    return (point[0] + direction[0] * distance, point[1] + direction[1] * distance)


def lerp_point(start: Point, end: Point, fraction: float) -> Point:
    return (
        start[0] + (end[0] - start[0]) * fraction,
        start[1] + (end[1] - start[1]) * fraction,
    )
