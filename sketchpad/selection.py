"""Hit-testing and selection bookkeeping."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from sketchpad.geometry import Bounds, bounds_contains, normalize_rect, rect_contains_bounds, shape_bounds
from sketchpad.shapes import Group, Shape

Point = Tuple[float, float]


def find_topmost(point: Point, objects: Sequence[Shape], tolerance: float) -> Optional[Shape]:
    """Return the first shape in ``objects`` that contains ``point``.

    ``objects`` is stored bottom-to-top and is scanned front to back, so among
    overlapping shapes the one drawn first (the bottom-most) wins.
    """
    for shape in objects:
        if bounds_contains(point, shape, tolerance):
            return shape
    return None


def find_group(point: Point, objects: Sequence[Shape]) -> Optional[Group]:
    """Return the first group whose bounding box contains ``point``.

    Groups never match ``find_topmost``; this is the lookup the canvas uses to
    pick one for ungrouping.
    """
    px, py = float(point[0]), float(point[1])
    for shape in objects:
        if not isinstance(shape, Group):
            continue
        box = shape_bounds(shape)
        if box is not None and box[0] <= px <= box[2] and box[1] <= py <= box[3]:
            return shape
    return None


def shapes_in_rect(rect: Bounds, objects: Sequence[Shape]) -> List[Shape]:
    """Shapes whose bounding box lies entirely inside ``rect`` (any corner order)."""
    outer = normalize_rect(*rect)
    found: List[Shape] = []
    for shape in objects:
        box = shape_bounds(shape)
        if box is not None and rect_contains_bounds(outer, box):
            found.append(shape)
    return found


def index_of(objects: Sequence[Shape], shape: Shape) -> Optional[int]:
    """Position of ``shape`` in ``objects`` by identity, not value."""
    for idx, candidate in enumerate(objects):
        if candidate is shape:
            return idx
    return None


def contains_ref(objects: Sequence[Shape], shape: Shape) -> bool:
    return index_of(objects, shape) is not None


@dataclass
class Selection:
    """Non-owning references into the session's shape collection."""

    single: Optional[Shape] = None
    many: List[Shape] = field(default_factory=list)

    def toggle(self, shape: Shape) -> None:
        idx = index_of(self.many, shape)
        if idx is None:
            self.many.append(shape)
        else:
            self.many.pop(idx)

    def clear(self) -> None:
        self.single = None
        self.many = []
