"""Qt canvas widget driving a sketchpad :class:`~sketchpad.controller.Session`."""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QWidget

from sketchpad.config import SketchpadConfig, load_config
from sketchpad.controller import Mode, Session
from sketchpad.surface import QImageSurface


class Canvas(QWidget):
    """Drawing surface forwarding left-button gestures to the session."""

    status_changed = Signal(str)
    mode_changed = Signal(str)

    def __init__(self, config: Optional[SketchpadConfig] = None):
        super().__init__()
        self.setObjectName("SketchpadCanvas")
        self.config = config or load_config()
        size = QSize(self.config.canvas_width, self.config.canvas_height)
        self.setMinimumSize(size)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(False)
        self.setToolTip(
            "Canvas: drag with the active tool.\n"
            "Polygon: click each vertex, double-click to close.\n"
            "Move: drag a shape; Shift-click adds it to the group selection."
        )
        self.surface = QImageSurface(size.width(), size.height(), self.config.background)
        self.session = Session(self.surface, self.config)

    # ------------------------------------------------------------------
    # Tool state
    def set_mode(self, mode: str) -> None:
        self.session.set_mode(mode)
        self.mode_changed.emit(self.session.mode.value)
        self.update()

    def set_color(self, color: str) -> None:
        self.session.set_color(color)

    def set_line_width(self, width: int) -> None:
        self.session.set_line_width(width)

    # ------------------------------------------------------------------
    # Commands
    def cut(self) -> None:
        shape = self.session.cut()
        self._post(f"Cut {shape.kind}" if shape is not None else "Cut: select a shape first")

    def paste(self) -> None:
        shape = self.session.paste()
        self._post(f"Pasted {shape.kind}" if shape is not None else "Paste: clipboard is empty")

    def group(self) -> None:
        group = self.session.group()
        if group is None:
            self._post("Group: Shift-click at least two shapes")
        else:
            self.session.select(group)
            self._post(f"Grouped {len(group.objects)} shapes")

    def ungroup(self) -> None:
        members = self.session.ungroup()
        self._post(f"Ungrouped {len(members)} shapes" if members is not None else "Ungroup: select a group")

    def clear(self) -> None:
        self.session.clear()
        self._post("Cleared")

    def undo(self) -> None:
        self._post("Undo" if self.session.undo() else "Nothing to undo")

    def redo(self) -> None:
        self._post("Redo" if self.session.redo() else "Nothing to redo")

    def pick_group(self, x: float, y: float) -> bool:
        """Select the group under ``(x, y)`` when no plain shape was hit."""
        if self.session.selected_object is not None:
            return False
        group = self.session.group_at(x, y)
        if group is None:
            return False
        self.session.select(group)
        self._post(f"Selected group of {len(group.objects)} shapes")
        return True

    def _post(self, message: str) -> None:
        self.status_changed.emit(message)
        self.update()

    # ------------------------------------------------------------------
    # Painting and events
    def sizeHint(self) -> QSize:  # pragma: no cover - GUI layout handling
        return QSize(self.surface.width(), self.surface.height())

    def paintEvent(self, event):  # pragma: no cover - GUI entry point
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(self.config.background))
        painter.drawImage(0, 0, self.surface.image)
        painter.end()

    def mousePressEvent(self, event):  # pragma: no cover - GUI entry point
        if event.button() != Qt.LeftButton:
            return
        x, y = event.position().x(), event.position().y()
        if self.session.mode is Mode.MOVE and event.modifiers() & Qt.ShiftModifier:
            shape = self.session.shape_at(x, y)
            if shape is not None:
                self.session.toggle_selection(shape)
                self._post(f"{len(self.session.selected_objects)} shape(s) selected")
            return
        self.session.pointer_down(x, y)
        if self.session.mode is Mode.MOVE:
            self.pick_group(x, y)
        self.update()

    def mouseMoveEvent(self, event):  # pragma: no cover - GUI entry point
        if not (event.buttons() & Qt.LeftButton):
            return
        self.session.pointer_move(event.position().x(), event.position().y())
        self.update()

    def mouseReleaseEvent(self, event):  # pragma: no cover - GUI entry point
        if event.button() != Qt.LeftButton:
            return
        self.session.pointer_up(event.position().x(), event.position().y())
        self.update()

    def mouseDoubleClickEvent(self, event):  # pragma: no cover - GUI entry point
        if event.button() != Qt.LeftButton:
            return
        if self.session.finalize_polygon() is not None:
            self._post("Polygon closed")
