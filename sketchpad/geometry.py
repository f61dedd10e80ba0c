"""Geometry kernel: point containment and bounding boxes for canvas shapes.

All routines are pure and work in canvas pixel space (origin top-left,
y pointing down).
"""
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from sketchpad.shapes import Ellipse, Group, Line, Polygon, Rectangle, Shape

Point = Tuple[float, float]
Bounds = Tuple[float, float, float, float]


def point_in_rect(point: Sequence[float], x: float, y: float, width: float, height: float) -> bool:
    """Strict interior test; the boundary is outside.

    A rectangle dragged towards the top-left has a negative width or height
    and therefore contains nothing.
    """
    px, py = float(point[0]), float(point[1])
    return x < px < x + width and y < py < y + height


def point_in_ellipse(point: Sequence[float], cx: float, cy: float, rx: float, ry: float) -> bool:
    if rx <= 0.0 or ry <= 0.0:
        return False
    nx = (float(point[0]) - cx) / rx
    ny = (float(point[1]) - cy) / ry
    return nx * nx + ny * ny <= 1.0


def line_distance(point: Sequence[float], p1: Sequence[float], p2: Sequence[float]) -> float:
    """Perpendicular distance from ``point`` to the infinite line through ``p1`` and ``p2``."""
    x, y = float(point[0]), float(point[1])
    x1, y1 = float(p1[0]), float(p1[1])
    x2, y2 = float(p2[0]), float(p2[1])
    length = math.hypot(x2 - x1, y2 - y1)
    if length == 0.0:
        return float("inf")
    return abs((y2 - y1) * x - (x2 - x1) * y + x2 * y1 - y2 * x1) / length


def point_in_polygon(point: Sequence[float], polygon: Sequence[Sequence[float]]) -> bool:
    """Even-odd ray casting against the edges of ``polygon``."""
    pts = np.asarray(polygon, dtype=float)
    if pts.ndim != 2 or pts.shape[0] < 3:
        return False
    px, py = float(point[0]), float(point[1])
    xi, yi = pts[:, 0], pts[:, 1]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)
    straddles = (yi > py) != (yj > py)
    with np.errstate(divide="ignore", invalid="ignore"):
        crossing_x = (xj - xi) * (py - yi) / (yj - yi) + xi
    hits = straddles & (px < crossing_x)
    return bool(np.count_nonzero(hits) % 2)


def bounds_contains(point: Sequence[float], shape: Shape, tolerance: float) -> bool:
    """Return True when ``point`` selects ``shape``.

    ``tolerance`` is the pick distance for lines; the canvas passes the
    current tool line width, not the line's own. Ellipses and circles are
    tested around ``(x + rx, y + ry)``. Groups never match.
    """
    if isinstance(shape, Rectangle):
        return point_in_rect(point, shape.x, shape.y, shape.width, shape.height)
    if isinstance(shape, Ellipse):
        rx, ry = shape.radii()
        return point_in_ellipse(point, shape.x + rx, shape.y + ry, rx, ry)
    if isinstance(shape, Line):
        return line_distance(point, (shape.x1, shape.y1), (shape.x2, shape.y2)) < tolerance
    if isinstance(shape, Polygon):
        return point_in_polygon(point, shape.points)
    if isinstance(shape, Group):
        return False
    raise TypeError(f"Not a shape: {shape!r}")


def shape_bounds(shape: Shape) -> Optional[Bounds]:
    """Axis-aligned ``(min_x, min_y, max_x, max_y)`` of the stroked outline."""
    if isinstance(shape, Rectangle):
        xs = (shape.x, shape.x + shape.width)
        ys = (shape.y, shape.y + shape.height)
        return (min(xs), min(ys), max(xs), max(ys))
    if isinstance(shape, Ellipse):
        rx, ry = shape.radii()
        return (shape.x - rx, shape.y - ry, shape.x + rx, shape.y + ry)
    if isinstance(shape, Line):
        return (
            min(shape.x1, shape.x2),
            min(shape.y1, shape.y2),
            max(shape.x1, shape.x2),
            max(shape.y1, shape.y2),
        )
    if isinstance(shape, Polygon):
        if not shape.points:
            return None
        pts = np.asarray(shape.points, dtype=float)
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        return (float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))
    if isinstance(shape, Group):
        return union_bounds(shape_bounds(member) for member in shape.objects)
    raise TypeError(f"Not a shape: {shape!r}")


def union_bounds(boxes) -> Optional[Bounds]:
    present = [box for box in boxes if box is not None]
    if not present:
        return None
    arr = np.asarray(present, dtype=float)
    return (
        float(arr[:, 0].min()),
        float(arr[:, 1].min()),
        float(arr[:, 2].max()),
        float(arr[:, 3].max()),
    )


def normalize_rect(x0: float, y0: float, x1: float, y1: float) -> Bounds:
    return (min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))


def rect_contains_bounds(outer: Bounds, inner: Bounds) -> bool:
    return outer[0] <= inner[0] and outer[1] <= inner[1] and inner[2] <= outer[2] and inner[3] <= outer[3]


__all__ = [
    "Bounds",
    "point_in_rect",
    "point_in_ellipse",
    "line_distance",
    "point_in_polygon",
    "bounds_contains",
    "shape_bounds",
    "union_bounds",
    "normalize_rect",
    "rect_contains_bounds",
]
