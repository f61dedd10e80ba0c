"""Interaction controller for the sketchpad canvas.

A :class:`Session` is the document context: it owns the shape collection,
the selection, the clipboard, the undo history and the gesture state machine,
and it is the only thing that talks to the rendering surface. Pointer events
arrive in order through :meth:`Session.pointer_down`, :meth:`Session.pointer_move`
and :meth:`Session.pointer_up`; everything else is an explicit command.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from sketchpad.config import SketchpadConfig
from sketchpad.history import History
from sketchpad.logger import get_logger, set_debug
from sketchpad.selection import Selection, contains_ref, find_group, find_topmost, index_of
from sketchpad.shapes import (
    PRIMITIVE_KINDS,
    Group,
    Polygon,
    Shape,
    clone_objects,
    clone_polygon_points,
    clone_shape,
    create_primitive,
    make_group,
    reference_point,
    render,
    translate,
)
from sketchpad.surface import RenderSurface

logger = get_logger(__name__)

Point = Tuple[float, float]


class Mode(str, Enum):
    FREEHAND = "freehand"
    LINE = "line"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    SQUARE = "square"
    CIRCLE = "circle"
    POLYGON = "polygon"
    MOVE = "move"


@dataclass
class ToolState:
    """Current tool settings, edited by the UI and read by the session."""

    mode: Mode = Mode.FREEHAND
    color: str = "#000000"
    line_width: int = 1


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    mode: Mode
    anchor: Point


@dataclass(frozen=True)
class Moving:
    shape: Shape
    offset: Point


@dataclass(frozen=True)
class BuildingPolygon:
    points: Tuple[Point, ...]


GestureState = Union[Idle, Drawing, Moving, BuildingPolygon]

IDLE = Idle()


def parse_mode(mode: Union[str, Mode]) -> Mode:
    try:
        return Mode(mode)
    except ValueError:
        raise ValueError(f"Unknown mode '{mode}'") from None


class Session:
    """Shapes, selection, clipboard and history for one canvas."""

    def __init__(
        self,
        surface: RenderSurface,
        config: Optional[SketchpadConfig] = None,
        tool: Optional[ToolState] = None,
    ):
        self.config = config or SketchpadConfig()
        self.surface = surface
        self.tool = tool or ToolState(
            color=self.config.default_color,
            line_width=self.config.default_line_width,
        )
        self.objects: List[Shape] = []
        self.selection = Selection()
        self.copied: Optional[Shape] = None
        self.history = History(self.config.max_history)
        self.points: List[Point] = []
        self.state: GestureState = IDLE

        self._saved_image: object | None = None
        self._last_point: Optional[Point] = None
        self._gesture_origin: Optional[List[Shape]] = None
        if self.config.debug:
            set_debug(True)

    # ------------------------------------------------------------------
    # Tool state
    @property
    def mode(self) -> Mode:
        return parse_mode(self.tool.mode)

    def set_mode(self, mode: Union[str, Mode]) -> None:
        mode = parse_mode(mode)
        self.tool.mode = mode
        if mode is not Mode.POLYGON:
            self.points.clear()
        self.selection.clear()
        self._end_gesture()
        self.state = BuildingPolygon(tuple(self.points)) if self.points else IDLE

    def set_color(self, color: str) -> None:
        self.tool.color = color

    def set_line_width(self, width: int) -> None:
        width = int(width)
        if width < 1:
            raise ValueError(f"Line width must be positive, got {width}")
        self.tool.line_width = width

    # ------------------------------------------------------------------
    # Selection
    @property
    def selected_object(self) -> Optional[Shape]:
        return self.selection.single

    @property
    def selected_objects(self) -> List[Shape]:
        return list(self.selection.many)

    def shape_at(self, x: float, y: float) -> Optional[Shape]:
        return find_topmost((x, y), self.objects, self.tool.line_width)

    def group_at(self, x: float, y: float) -> Optional[Group]:
        return find_group((x, y), self.objects)

    def select(self, shape: Optional[Shape]) -> None:
        if shape is not None and not contains_ref(self.objects, shape):
            logger.debug("select: shape is not on the canvas")
            return
        self.selection.single = shape

    def select_many(self, shapes: Iterable[Shape]) -> None:
        self.selection.many = [shape for shape in shapes if contains_ref(self.objects, shape)]

    def toggle_selection(self, shape: Shape) -> None:
        if contains_ref(self.objects, shape):
            self.selection.toggle(shape)

    # ------------------------------------------------------------------
    # Pointer gestures
    def pointer_down(self, x: float, y: float) -> None:
        point = (x, y)
        if self.mode is Mode.MOVE:
            shape = self.shape_at(x, y)
            self.selection.single = shape
            if shape is None:
                return
            self._gesture_origin = clone_objects(self.objects)
            self._saved_image = self.surface.snapshot()
            rx, ry = reference_point(shape)
            self.state = Moving(shape, (x - rx, y - ry))
            return
        self._saved_image = self.surface.snapshot()
        self._last_point = None
        self.state = Drawing(self.mode, point)
        self.pointer_move(x, y)

    def pointer_move(self, x: float, y: float) -> None:
        state = self.state
        point = (x, y)
        if isinstance(state, Moving):
            self._drag(state, point)
            return
        if not isinstance(state, Drawing):
            return
        if state.mode is Mode.FREEHAND:
            start = self._last_point or point
            self.surface.set_stroke_style(self.tool.color, self.tool.line_width)
            self.surface.stroke_line_segment(start[0], start[1], x, y)
            self._last_point = point
            return
        self._restore_saved_image()
        if state.mode is Mode.POLYGON:
            if self.points:
                self.surface.set_stroke_style(self.tool.color, self.tool.line_width)
                self.surface.stroke_polyline(self.points + [point])
            return
        preview = create_primitive(
            state.mode.value,
            state.anchor[0],
            state.anchor[1],
            x,
            y,
            self.tool.line_width,
            self.tool.color,
        )
        render(preview, self.surface)

    def pointer_up(self, x: float, y: float) -> None:
        state = self.state
        if isinstance(state, Moving):
            self.history.commit(self._gesture_origin or [])
            logger.debug("move: committed %s", state.shape.kind)
        elif isinstance(state, Drawing):
            if state.mode is Mode.POLYGON:
                self.points.append(state.anchor)
                self._end_gesture()
                self.state = BuildingPolygon(tuple(self.points))
                return
            self.history.commit(self.objects)
            if state.mode.value in PRIMITIVE_KINDS:
                shape = create_primitive(
                    state.mode.value,
                    state.anchor[0],
                    state.anchor[1],
                    x,
                    y,
                    self.tool.line_width,
                    self.tool.color,
                )
                self.objects.append(shape)
                logger.debug("draw: added %s", shape.kind)
            else:
                logger.debug("draw: freehand stroke committed")
        else:
            return
        if self.mode is not Mode.POLYGON:
            self.points.clear()
        self._end_gesture()
        self.state = IDLE

    def finalize_polygon(self) -> Optional[Polygon]:
        if self.mode is not Mode.POLYGON or len(self.points) < 2:
            logger.debug("finalize: %d buffered point(s), nothing to close", len(self.points))
            return None
        closed = clone_polygon_points(self.points)
        closed.append(closed[0])
        polygon = Polygon(points=closed, color=self.tool.color, line_width=self.tool.line_width)
        self.surface.set_stroke_style(polygon.color, polygon.line_width)
        self.surface.stroke_polyline(closed)
        self.history.commit(self.objects)
        self.objects.append(polygon)
        self.points.clear()
        self._end_gesture()
        self.state = IDLE
        logger.debug("finalize: polygon with %d vertices", len(closed) - 1)
        return polygon

    def _drag(self, state: Moving, point: Point) -> None:
        idx = index_of(self.objects, state.shape)
        if idx is None:
            return
        rx, ry = reference_point(state.shape)
        dx = point[0] - state.offset[0] - rx
        dy = point[1] - state.offset[1] - ry
        moved = translate(state.shape, dx, dy)
        self.objects[idx] = moved
        self.selection.single = moved
        nrx, nry = reference_point(moved)
        self.state = Moving(moved, (point[0] - nrx, point[1] - nry))
        self._restore_saved_image()
        self.redraw()
        render(moved, self.surface)

    def _restore_saved_image(self) -> None:
        if self._saved_image is not None:
            self.surface.restore(self._saved_image)

    def _end_gesture(self) -> None:
        self._saved_image = None
        self._last_point = None
        self._gesture_origin = None

    # ------------------------------------------------------------------
    # Commands
    def cut(self) -> Optional[Shape]:
        shape = self.selection.single
        if shape is None or not contains_ref(self.objects, shape):
            logger.debug("cut: nothing selected")
            return None
        self.history.commit(self.objects)
        self.copied = shape
        self.objects = [s for s in self.objects if s is not shape]
        self.redraw()
        self.selection.single = None
        logger.debug("cut: %s", shape.kind)
        return shape

    def paste(self) -> Optional[Shape]:
        if self.copied is None:
            logger.debug("paste: clipboard empty")
            return None
        self.history.commit(self.objects)
        dx, dy = self.config.paste_offset
        pasted = translate(clone_shape(self.copied), dx, dy)
        self.objects.append(pasted)
        self.redraw()
        logger.debug("paste: %s", pasted.kind)
        return pasted

    def group(self, selection: Optional[Iterable[Shape]] = None) -> Optional[Group]:
        candidates = self.selection.many if selection is None else list(selection)
        members = [shape for shape in candidates if contains_ref(self.objects, shape)]
        if len(members) < 2:
            logger.debug("group: need at least two shapes, got %d", len(members))
            return None
        self.history.commit(self.objects)
        group = make_group(members)
        self.objects = [s for s in self.objects if not contains_ref(members, s)]
        self.objects.append(group)
        self.redraw()
        self.selection.many = []
        if self.selection.single is not None and contains_ref(members, self.selection.single):
            self.selection.single = None
        logger.debug("group: %d shapes", len(members))
        return group

    def ungroup(self) -> Optional[List[Shape]]:
        shape = self.selection.single
        if not isinstance(shape, Group) or not contains_ref(self.objects, shape):
            logger.debug("ungroup: no group selected")
            return None
        self.history.commit(self.objects)
        self.objects = [s for s in self.objects if s is not shape]
        self.objects.extend(shape.objects)
        self.redraw()
        self.selection.single = None
        logger.debug("ungroup: %d shapes", len(shape.objects))
        return list(shape.objects)

    def clear(self) -> None:
        self.history.commit(self.objects)
        self.surface.clear()
        self.objects = []
        self.selection.clear()
        logger.debug("clear")

    def undo(self) -> bool:
        if not self.history.can_undo():
            logger.debug("undo: history empty")
            return False
        self.objects = self.history.undo(self.objects)
        self.selection.clear()
        self.redraw()
        logger.debug("undo: %d shapes", len(self.objects))
        return True

    def redo(self) -> bool:
        if not self.history.can_redo():
            logger.debug("redo: nothing undone")
            return False
        self.objects = self.history.redo(self.objects)
        self.selection.clear()
        self.redraw()
        logger.debug("redo: %d shapes", len(self.objects))
        return True

    def redraw(self) -> None:
        self.surface.clear()
        for shape in self.objects:
            render(shape, self.surface)


__all__ = [
    "Mode",
    "ToolState",
    "Idle",
    "Drawing",
    "Moving",
    "BuildingPolygon",
    "GestureState",
    "parse_mode",
    "Session",
]
