"""Rendering surfaces the sketchpad session strokes shapes onto."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Sequence, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QPolygonF

Point = Tuple[float, float]


class RenderSurface:
    """Common interface every surface implements.

    ``snapshot`` returns an opaque buffer that ``restore`` accepts; restoring
    the same buffer repeatedly must always yield the same pixels.
    """

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        raise NotImplementedError

    def stroke_ellipse(self, cx: float, cy: float, rx: float, ry: float) -> None:
        raise NotImplementedError

    def stroke_line_segment(self, x1: float, y1: float, x2: float, y2: float) -> None:
        raise NotImplementedError

    def stroke_polyline(self, points: Sequence[Point]) -> None:
        raise NotImplementedError

    def set_stroke_style(self, color: str, width: int) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def snapshot(self) -> object:
        raise NotImplementedError

    def restore(self, buffer: object) -> None:
        raise NotImplementedError


class RecordingSurface(RenderSurface):
    """Display-list surface for headless sessions.

    Every call is appended to ``commands`` as ``(name, args)``; a snapshot is
    a frozen copy of the list.
    """

    def __init__(self):
        self.commands: List[Tuple[str, tuple]] = []

    def _record(self, name: str, *args) -> None:
        self.commands.append((name, args))

    def stroke_rect(self, x, y, width, height):
        self._record("rect", x, y, width, height)

    def stroke_ellipse(self, cx, cy, rx, ry):
        self._record("ellipse", cx, cy, rx, ry)

    def stroke_line_segment(self, x1, y1, x2, y2):
        self._record("line", x1, y1, x2, y2)

    def stroke_polyline(self, points):
        self._record("polyline", tuple((p[0], p[1]) for p in points))

    def set_stroke_style(self, color, width):
        self._record("style", color, width)

    def clear(self):
        self.commands = []

    def snapshot(self):
        return tuple(self.commands)

    def restore(self, buffer):
        self.commands = list(buffer)

    def strokes(self) -> List[Tuple[str, tuple]]:
        """Recorded commands without the style changes."""
        return [cmd for cmd in self.commands if cmd[0] != "style"]


class QImageSurface(RenderSurface):
    """Raster surface backed by a ``QImage``."""

    def __init__(self, width: int, height: int, background: str = "#ffffff"):
        self._background = QColor(background)
        self._image = QImage(int(width), int(height), QImage.Format_ARGB32_Premultiplied)
        self._image.fill(self._background)
        self._pen = QPen(QColor("#000000"))
        self._pen.setWidthF(1.0)
        self._pen.setCapStyle(Qt.RoundCap)
        self._pen.setJoinStyle(Qt.RoundJoin)

    @property
    def image(self) -> QImage:
        return self._image

    def width(self) -> int:
        return self._image.width()

    def height(self) -> int:
        return self._image.height()

    def pixel_color(self, x: int, y: int) -> QColor:
        return self._image.pixelColor(int(x), int(y))

    @contextmanager
    def _painting(self) -> Iterator[QPainter]:
        painter = QPainter(self._image)
        try:
            painter.setRenderHint(QPainter.Antialiasing, True)
            painter.setPen(self._pen)
            painter.setBrush(Qt.NoBrush)
            yield painter
        finally:
            painter.end()

    def stroke_rect(self, x, y, width, height):
        with self._painting() as painter:
            painter.drawRect(QRectF(float(x), float(y), float(width), float(height)).normalized())

    def stroke_ellipse(self, cx, cy, rx, ry):
        with self._painting() as painter:
            painter.drawEllipse(QPointF(float(cx), float(cy)), float(rx), float(ry))

    def stroke_line_segment(self, x1, y1, x2, y2):
        with self._painting() as painter:
            painter.drawLine(QPointF(float(x1), float(y1)), QPointF(float(x2), float(y2)))

    def stroke_polyline(self, points):
        if not points:
            return
        polygon = QPolygonF([QPointF(float(x), float(y)) for x, y in points])
        with self._painting() as painter:
            painter.drawPolyline(polygon)

    def set_stroke_style(self, color, width):
        self._pen.setColor(QColor(color))
        self._pen.setWidthF(float(width))

    def clear(self):
        self._image.fill(self._background)

    def snapshot(self) -> QImage:
        return self._image.copy()

    def restore(self, buffer: QImage) -> None:
        self._image = buffer.copy()


__all__ = ["RenderSurface", "RecordingSurface", "QImageSurface"]
