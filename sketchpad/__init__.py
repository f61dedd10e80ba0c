"""Interactive 2D sketchpad: shapes, hit-testing, undo/redo and a Qt canvas."""
from sketchpad.config import SketchpadConfig, load_config
from sketchpad.controller import Mode, Session, ToolState
from sketchpad.history import History
from sketchpad.shapes import (
    Circle,
    Ellipse,
    Group,
    Line,
    Polygon,
    Rectangle,
    Shape,
    Square,
)
from sketchpad.surface import QImageSurface, RecordingSurface, RenderSurface

__all__ = [
    "SketchpadConfig",
    "load_config",
    "Mode",
    "Session",
    "ToolState",
    "History",
    "Circle",
    "Ellipse",
    "Group",
    "Line",
    "Polygon",
    "Rectangle",
    "Shape",
    "Square",
    "QImageSurface",
    "RecordingSurface",
    "RenderSurface",
]
