from __future__ import annotations

import logging
from typing import Dict, List, Optional

import numpy as np
import pyqtgraph as pg
from PySide6 import QtCore, QtWidgets

from core.polyline import PolylineRenderer
from shared.models import Polyline, WindowSnapshot

logger = logging.getLogger(__name__)


class ChannelCurve:
    """
    Manages the curve item for a single channel's polyline.
    """

    def __init__(self, plot_item: pg.PlotItem, color: str, width: float) -> None:
        self._plot_item = plot_item
        self._curve = pg.PlotCurveItem(pen=pg.mkPen(color, width=width))
        try:
            self._curve.setDownsampling(ds=True, auto=True, method="peak")
        except AttributeError:
            pass
        self._plot_item.addItem(self._curve)

    def update_data(self, polyline: Polyline) -> None:
        self._curve.setData(polyline.xs, polyline.ys)

    def clear(self) -> None:
        self._curve.setData(np.zeros(0), np.zeros(0))

    def cleanup(self) -> None:
        """Remove curve from plot."""
        self._plot_item.removeItem(self._curve)


class TracePlotView(pg.PlotWidget):
    """
    pyqtgraph rendition of the waveform view.

    The plot uses screen coordinates directly: x spans [0, width] and the y
    axis is inverted so that 0 sits at the top, matching WaveformCanvas.
    """

    def __init__(
        self,
        renderer: Optional[PolylineRenderer] = None,
        parent: Optional[QtWidgets.QWidget] = None,
        *,
        background: str = "w",
    ) -> None:
        super().__init__(parent=parent, background=background, enableMenu=False)
        self._renderer = renderer if renderer is not None else PolylineRenderer()
        self._curves: Dict[int, ChannelCurve] = {}
        self._last_polylines: List[Polyline] = []

        try:
            self.hideButtons()
        except Exception as exc:
            logger.debug("Failed to hide plot buttons: %s", exc)
        self.setMouseEnabled(x=False, y=False)
        plot_item = self.getPlotItem()
        plot_item.hideAxis("left")
        plot_item.hideAxis("bottom")
        plot_item.invertY(True)
        plot_item.setContentsMargins(0, 0, 0, 0)

    @property
    def last_polylines(self) -> List[Polyline]:
        return list(self._last_polylines)

    def on_snapshot(self, snapshot: WindowSnapshot) -> None:
        if not self._renderer.needs_render():
            return
        width, height = self.width(), self.height()
        polylines = self._renderer.render_snapshot(snapshot, width, height)
        self._apply(polylines, width, height)

    def _apply(self, polylines: List[Polyline], width: int, height: int) -> None:
        plot_item = self.getPlotItem()
        drawn = set()
        for polyline in polylines:
            curve = self._curves.get(polyline.channel_index)
            if curve is None:
                curve = ChannelCurve(plot_item, polyline.color, self._renderer.stroke_width)
                self._curves[polyline.channel_index] = curve
            curve.update_data(polyline)
            drawn.add(polyline.channel_index)
        for index, curve in self._curves.items():
            if index not in drawn:
                curve.clear()
        if width > 0 and height > 0:
            plot_item.setXRange(0.0, float(width), padding=0.0)
            plot_item.setYRange(0.0, float(height), padding=0.0)
        self._last_polylines = polylines

    def clear_curves(self) -> None:
        for curve in self._curves.values():
            curve.cleanup()
        self._curves.clear()
        self._last_polylines = []

    def sizeHint(self) -> QtCore.QSize:  # type: ignore[override]
        return QtCore.QSize(600, 120)


__all__ = ["TracePlotView"]
