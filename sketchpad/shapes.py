"""Shape model for the sketchpad canvas.

Every shape kind is a small dataclass carrying the stroke color and line width
captured when it was created. The module also owns the structural operations
the rest of the package relies on: creating a primitive from a drag, translating,
cloning (used by copy/paste and by the history snapshots), grouping, and
rendering onto a :class:`~sketchpad.surface.RenderSurface`.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Sequence, Tuple, Union

Point = Tuple[float, float]

PRIMITIVE_KINDS = ("line", "rectangle", "ellipse", "square", "circle")


@dataclass
class Rectangle:
    x: float
    y: float
    width: float
    height: float
    color: str
    line_width: int
    kind: str = field(init=False, default="rectangle")


@dataclass
class Square(Rectangle):
    """Rectangle with equal sides.

    Unlike the other primitives, a square built by ``create_primitive`` does
    not keep the signed drag deltas: both sides are the positive
    ``max(|dx|, |dy|)`` the live preview draws, so it always extends right and
    down from the anchor.
    """

    kind: str = field(init=False, default="square")


@dataclass
class Ellipse:
    x: float
    y: float
    width: float
    height: float
    color: str
    line_width: int
    kind: str = field(init=False, default="ellipse")

    def radii(self) -> Tuple[float, float]:
        return abs(self.width) / 2.0, abs(self.height) / 2.0


@dataclass
class Circle(Ellipse):
    kind: str = field(init=False, default="circle")

    def radii(self) -> Tuple[float, float]:
        radius = max(abs(self.width), abs(self.height)) / 2.0
        return radius, radius


@dataclass
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    line_width: int
    kind: str = field(init=False, default="line")


@dataclass
class Polygon:
    points: List[Point]
    color: str
    line_width: int
    kind: str = field(init=False, default="polygon")


@dataclass
class Group:
    """Value copies of the grouped shapes plus their top-left anchor."""

    objects: List["Shape"]
    x: float
    y: float
    kind: str = field(init=False, default="group")


Shape = Union[Rectangle, Ellipse, Line, Polygon, Group]


def _unknown(shape: object) -> TypeError:
    return TypeError(f"Not a shape: {shape!r}")


def create_primitive(
    kind: str,
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    line_width: int,
    color: str,
) -> Shape:
    """Build the shape a drag from ``(x0, y0)`` to ``(x1, y1)`` describes.

    Rectangles, ellipses and circles keep the signed drag deltas as their
    width and height. Squares take the larger absolute delta as their side so
    the stored shape matches the live preview. Lines keep both endpoints.
    """
    kind = str(getattr(kind, "value", kind))
    dx = x1 - x0
    dy = y1 - y0
    if kind == "line":
        return Line(x0, y0, x1, y1, color, line_width)
    if kind == "rectangle":
        return Rectangle(x0, y0, dx, dy, color, line_width)
    if kind == "square":
        side = max(abs(dx), abs(dy))
        return Square(x0, y0, side, side, color, line_width)
    if kind == "ellipse":
        return Ellipse(x0, y0, dx, dy, color, line_width)
    if kind == "circle":
        return Circle(x0, y0, dx, dy, color, line_width)
    raise ValueError(f"'{kind}' does not create a primitive shape")


def clone_polygon_points(points: Iterable[Sequence[float]]) -> List[Point]:
    return [(p[0], p[1]) for p in points]


def clone_shape(shape: Shape) -> Shape:
    """Return an independent value copy of ``shape``."""
    if isinstance(shape, (Rectangle, Ellipse, Line)):
        return replace(shape)
    if isinstance(shape, Polygon):
        return replace(shape, points=clone_polygon_points(shape.points))
    if isinstance(shape, Group):
        return replace(shape, objects=[clone_shape(member) for member in shape.objects])
    raise _unknown(shape)


def clone_objects(objects: Iterable[Shape]) -> List[Shape]:
    return [clone_shape(shape) for shape in objects]


def translate(shape: Shape, dx: float, dy: float) -> Shape:
    """Return a copy of ``shape`` moved by ``(dx, dy)``.

    Groups move their members along with their anchor.
    """
    if isinstance(shape, (Rectangle, Ellipse)):
        return replace(shape, x=shape.x + dx, y=shape.y + dy)
    if isinstance(shape, Line):
        return replace(
            shape,
            x1=shape.x1 + dx,
            y1=shape.y1 + dy,
            x2=shape.x2 + dx,
            y2=shape.y2 + dy,
        )
    if isinstance(shape, Polygon):
        return replace(shape, points=[(x + dx, y + dy) for x, y in shape.points])
    if isinstance(shape, Group):
        return replace(
            shape,
            objects=[translate(member, dx, dy) for member in shape.objects],
            x=shape.x + dx,
            y=shape.y + dy,
        )
    raise _unknown(shape)


def reference_point(shape: Shape) -> Point:
    """Coordinate a drag is measured against when moving ``shape``."""
    if isinstance(shape, (Rectangle, Ellipse, Group)):
        return (shape.x, shape.y)
    if isinstance(shape, Line):
        return (shape.x1, shape.y1)
    if isinstance(shape, Polygon):
        return shape.points[0]
    raise _unknown(shape)


def make_group(members: Sequence[Shape]) -> Group:
    copies = [clone_shape(member) for member in members]
    anchors = [reference_point(member) for member in copies]
    return Group(
        objects=copies,
        x=min(anchor[0] for anchor in anchors),
        y=min(anchor[1] for anchor in anchors),
    )


def render(shape: Shape, surface) -> None:
    """Stroke ``shape`` with its own stored color and width."""
    if isinstance(shape, Group):
        for member in shape.objects:
            render(member, surface)
        return
    surface.set_stroke_style(shape.color, shape.line_width)
    if isinstance(shape, Rectangle):
        surface.stroke_rect(shape.x, shape.y, shape.width, shape.height)
    elif isinstance(shape, Ellipse):
        rx, ry = shape.radii()
        surface.stroke_ellipse(shape.x, shape.y, rx, ry)
    elif isinstance(shape, Line):
        surface.stroke_line_segment(shape.x1, shape.y1, shape.x2, shape.y2)
    elif isinstance(shape, Polygon):
        surface.stroke_polyline(shape.points)
    else:
        raise _unknown(shape)


__all__ = [
    "Point",
    "PRIMITIVE_KINDS",
    "Rectangle",
    "Square",
    "Ellipse",
    "Circle",
    "Line",
    "Polygon",
    "Group",
    "Shape",
    "create_primitive",
    "clone_polygon_points",
    "clone_shape",
    "clone_objects",
    "translate",
    "reference_point",
    "make_group",
    "render",
]
