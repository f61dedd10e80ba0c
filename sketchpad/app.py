"""Application bootstrap for the sketchpad."""
from __future__ import annotations

import sys

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QAction, QActionGroup, QColor
from PySide6.QtWidgets import (
    QApplication,
    QColorDialog,
    QLabel,
    QMainWindow,
    QSpinBox,
    QStatusBar,
    QToolBar,
)

from sketchpad.config import SketchpadConfig, load_config
from sketchpad.controller import Mode
from sketchpad.widgets import Canvas

MODE_DEFINITIONS = (
    (Mode.FREEHAND, "Freehand", "Freehand: drag to paint directly onto the canvas."),
    (Mode.LINE, "Line", "Line: drag from the first endpoint to the second."),
    (Mode.RECTANGLE, "Rectangle", "Rectangle: drag from one corner to the opposite corner."),
    (Mode.ELLIPSE, "Ellipse", "Ellipse: drag out from the center."),
    (Mode.SQUARE, "Square", "Square: drag from a corner; the longer side wins."),
    (Mode.CIRCLE, "Circle", "Circle: drag out from the center."),
    (Mode.POLYGON, "Polygon", "Polygon: click each vertex, double-click to close."),
    (Mode.MOVE, "Move", "Move: drag a shape. Shift-click to collect shapes for grouping."),
)


class Main(QMainWindow):
    """Top-level window wiring the canvas to its toolbar and status bar."""

    def __init__(self, config: SketchpadConfig | None = None):
        super().__init__()
        self.setWindowTitle("Sketchpad")

        self.canvas = Canvas(config)
        self.setCentralWidget(self.canvas)

        self._mode_actions: dict[str, QAction] = {}
        self._setup_status_bar()
        self._make_toolbar()
        self._make_menu()

        self.canvas.status_changed.connect(self._on_status_changed)
        self.canvas.mode_changed.connect(self._on_mode_changed)
        self.canvas.set_mode(Mode.FREEHAND)

    # ------------------------------------------------------------------
    # UI scaffolding
    def _setup_status_bar(self) -> None:
        bar = QStatusBar()
        bar.setSizeGripEnabled(False)
        self.setStatusBar(bar)
        self._mode_label = QLabel("Mode: Freehand")
        bar.addPermanentWidget(self._mode_label)

    def _make_toolbar(self) -> None:
        toolbar = QToolBar("Tools")
        toolbar.setMovable(False)
        toolbar.setIconSize(QSize(24, 24))
        self.addToolBar(Qt.TopToolBarArea, toolbar)

        action_group = QActionGroup(self)
        action_group.setExclusive(True)
        for mode, text, tip in MODE_DEFINITIONS:
            action = QAction(text, self)
            action.setCheckable(True)
            action.setActionGroup(action_group)
            action.triggered.connect(lambda checked, m=mode: self._activate_mode(m, checked))
            action.setToolTip(tip)
            action.setStatusTip(tip)
            toolbar.addAction(action)
            self._mode_actions[mode.value] = action

        toolbar.addSeparator()
        edits = (
            ("Cut", "Cut the selected shape.", self.canvas.cut),
            ("Paste", "Paste the last cut shape, offset from the original.", self.canvas.paste),
            ("Group", "Group the Shift-clicked shapes.", self.canvas.group),
            ("Ungroup", "Split the selected group back into shapes.", self.canvas.ungroup),
            ("Clear", "Remove every shape from the canvas.", self.canvas.clear),
        )
        for text, tip, slot in edits:
            action = QAction(text, self)
            action.triggered.connect(slot)
            action.setToolTip(tip)
            action.setStatusTip(tip)
            toolbar.addAction(action)

        toolbar.addSeparator()
        color_action = QAction("Color", self)
        color_action.triggered.connect(self._pick_color)
        color_action.setToolTip("Choose the stroke color for new shapes.")
        toolbar.addAction(color_action)

        toolbar.addWidget(QLabel(" Width "))
        self._width_box = QSpinBox()
        self._width_box.setRange(1, 60)
        self._width_box.setValue(self.canvas.session.tool.line_width)
        self._width_box.setToolTip("Stroke width for new shapes and the line pick tolerance.")
        self._width_box.valueChanged.connect(self.canvas.set_line_width)
        toolbar.addWidget(self._width_box)

    def _make_menu(self) -> None:
        edit_menu = self.menuBar().addMenu("&Edit")
        undo_action = edit_menu.addAction("Undo")
        undo_action.setShortcut("Ctrl+Z")
        undo_action.triggered.connect(self.canvas.undo)
        undo_action.setStatusTip("Undo the last change to the shapes.")
        redo_action = edit_menu.addAction("Redo")
        redo_action.setShortcut("Ctrl+Y")
        redo_action.triggered.connect(self.canvas.redo)
        redo_action.setStatusTip("Redo the last undone change.")

    # ------------------------------------------------------------------
    # Event handlers
    def _activate_mode(self, mode: Mode, checked: bool) -> None:
        if not checked:
            return
        self.canvas.set_mode(mode)

    def _on_mode_changed(self, name: str) -> None:
        self._mode_label.setText(f"Mode: {name.title()}")
        action = self._mode_actions.get(name)
        if action:
            blocked = action.blockSignals(True)
            action.setChecked(True)
            action.blockSignals(blocked)

    def _on_status_changed(self, message: str) -> None:
        if message:
            self.statusBar().showMessage(message, 4000)
        else:
            self.statusBar().clearMessage()

    def _pick_color(self) -> None:  # pragma: no cover - GUI entry point
        current = QColor(self.canvas.session.tool.color)
        color = QColorDialog.getColor(current, self, "Stroke color")
        if color.isValid():
            self.canvas.set_color(color.name())


def main() -> int:
    app = QApplication(sys.argv)
    window = Main(load_config())
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
