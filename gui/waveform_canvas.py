"""WaveformCanvas - QPainter view of a sliding window.

Renders every channel as a polyline over the full widget area. The widget is
always dirty: each snapshot it receives schedules a full repaint.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from core.polyline import PolylineRenderer
from shared.models import Polyline, WindowSnapshot

logger = logging.getLogger(__name__)


class WaveformCanvas(QtWidgets.QWidget):
    """Multi-channel waveform widget fed by SlidingWindowBuffer notifications."""

    def __init__(
        self,
        renderer: Optional[PolylineRenderer] = None,
        parent: Optional[QtWidgets.QWidget] = None,
        *,
        background: QtGui.QColor | str = "white",
    ) -> None:
        super().__init__(parent)
        self._renderer = renderer if renderer is not None else PolylineRenderer()
        self._background = QtGui.QColor(background)
        self._snapshot: Optional[WindowSnapshot] = None
        self._last_polylines: List[Polyline] = []
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, True)

    @property
    def last_polylines(self) -> List[Polyline]:
        """Polylines drawn by the most recent paint pass."""
        return list(self._last_polylines)

    def on_snapshot(self, snapshot: WindowSnapshot) -> None:
        self._snapshot = snapshot
        if self._renderer.needs_render():
            self.update()

    def current_polylines(self) -> List[Polyline]:
        """Render the latest snapshot at the widget's current size."""
        if self._snapshot is None:
            return []
        return self._renderer.render_snapshot(self._snapshot, self.width(), self.height())

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QtGui.QPainter(self)
        try:
            painter.setRenderHint(QtGui.QPainter.Antialiasing)
            painter.fillRect(self.rect(), self._background)
            self._last_polylines = self.current_polylines()
            for polyline in self._last_polylines:
                pen = QtGui.QPen(QtGui.QColor(polyline.color), self._renderer.stroke_width)
                pen.setStyle(QtCore.Qt.SolidLine)
                painter.setPen(pen)
                painter.setBrush(QtCore.Qt.NoBrush)
                painter.drawPolyline(_to_polygon(polyline))
        finally:
            painter.end()

    def sizeHint(self) -> QtCore.QSize:  # type: ignore[override]
        return QtCore.QSize(600, 120)


def _to_polygon(polyline: Polyline) -> QtGui.QPolygonF:
    return QtGui.QPolygonF([QtCore.QPointF(float(x), float(y)) for x, y in polyline.points])


__all__ = ["WaveformCanvas"]
