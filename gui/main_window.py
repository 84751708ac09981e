from __future__ import annotations

import logging
from typing import List, Optional

from PySide6 import QtGui, QtWidgets

from core.polyline import PolylineRenderer
from core.view_binding import ViewBinding
from daq.sine_source import SineWaveSource
from shared.app_settings import AppSettings, AppSettingsStore
from shared.sliding_window import SlidingWindowBuffer
from .tick_clock import QtTickClock
from .trace_plot_view import TracePlotView
from .waveform_canvas import WaveformCanvas


class MainWindow(QtWidgets.QMainWindow):
    """Stack of waveform views that all observe one sliding-window buffer.

    The pause state and the view kind are user settings: toggling them writes
    through the settings store, and the window follows store changes.
    """

    def __init__(self, settings_store: Optional[AppSettingsStore] = None, *, autostart: bool = True) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._settings_store = settings_store if settings_store is not None else AppSettingsStore()
        settings = self._settings_store.get()

        self.setWindowTitle("TraceWindow")
        self.statusBar()

        self.buffer = SlidingWindowBuffer.from_config(settings.window_config())
        self.source = SineWaveSource(
            settings.channel_count,
            settings.sampling_rate,
            frequency_hz=settings.signal_frequency_hz,
            amplitude=settings.signal_amplitude,
        )
        self.binding = ViewBinding()
        self._renderer = PolylineRenderer(stroke_width=settings.stroke_width)
        self.views: List[QtWidgets.QWidget] = []
        self._use_plot_view = settings.use_plot_view

        self.clock = QtTickClock(self.buffer, self.source.next_sample, parent=self)
        self.clock.ticked.connect(self._on_ticked)

        self._init_ui(settings)
        self._populate_views(settings)
        self._unsubscribe_settings = self._settings_store.subscribe(self._on_settings_changed, replay=False)

        self._logger.info(
            "MainWindow ready: %d views, %d channels, capacity %d",
            len(self.views),
            self.buffer.channel_count,
            self.buffer.capacity,
        )
        if autostart and not settings.start_paused:
            self.clock.start()

    @property
    def settings_store(self) -> AppSettingsStore:
        return self._settings_store

    def _init_ui(self, settings: AppSettings) -> None:
        central = QtWidgets.QWidget(self)
        self._views_layout = QtWidgets.QVBoxLayout(central)
        self._views_layout.setContentsMargins(16, 16, 16, 16)
        self._views_layout.setSpacing(20)
        self._views_layout.addStretch(1)
        self.setCentralWidget(central)

        toolbar = self.addToolBar("Acquisition")
        toolbar.setMovable(False)
        self.run_action = QtGui.QAction("Pause", self)
        self.run_action.setCheckable(True)
        self.run_action.setChecked(settings.start_paused)
        self._update_run_text(settings.start_paused)
        self.run_action.toggled.connect(self._on_pause_toggled)
        toolbar.addAction(self.run_action)
        clear_action = QtGui.QAction("Clear", self)
        clear_action.triggered.connect(self._on_clear)
        toolbar.addAction(clear_action)
        toolbar.addSeparator()
        self.plot_view_action = QtGui.QAction("Plot view", self)
        self.plot_view_action.setCheckable(True)
        self.plot_view_action.setChecked(settings.use_plot_view)
        self.plot_view_action.toggled.connect(self._on_plot_view_toggled)
        toolbar.addAction(self.plot_view_action)

        self._close_shortcut = QtGui.QShortcut(QtGui.QKeySequence.StandardKey.Close, self)
        self._close_shortcut.activated.connect(self.close)

    def _populate_views(self, settings: AppSettings) -> None:
        parent = self.centralWidget()
        for index in range(settings.view_count):
            view = self._create_view(settings, parent)
            view.setFixedSize(settings.view_width, settings.view_height)
            # Keep the trailing stretch last.
            self._views_layout.insertWidget(index, view)
            self.views.append(view)
            self.binding.attach(view, self.buffer)

    def _clear_views(self) -> None:
        for view in self.views:
            self.binding.detach(view)
            self._views_layout.removeWidget(view)
            view.deleteLater()
        self.views = []

    def _create_view(self, settings: AppSettings, parent: QtWidgets.QWidget) -> QtWidgets.QWidget:
        if settings.use_plot_view:
            return TracePlotView(self._renderer, parent)
        return WaveformCanvas(self._renderer, parent)

    def _update_run_text(self, paused: bool) -> None:
        self.run_action.setText("Resume" if paused else "Pause")

    def _on_pause_toggled(self, paused: bool) -> None:
        if paused:
            self.clock.stop()
        else:
            self.clock.start()
        self._update_run_text(paused)
        self._settings_store.update(start_paused=paused)

    def _on_plot_view_toggled(self, checked: bool) -> None:
        self._settings_store.update(use_plot_view=checked)

    def _on_settings_changed(self, settings: AppSettings) -> None:
        if self.run_action.isChecked() != settings.start_paused:
            self.run_action.setChecked(settings.start_paused)
        if settings.use_plot_view != self._use_plot_view:
            self._use_plot_view = settings.use_plot_view
            self.plot_view_action.blockSignals(True)
            self.plot_view_action.setChecked(settings.use_plot_view)
            self.plot_view_action.blockSignals(False)
            self._clear_views()
            self._populate_views(settings)
            self._logger.info("Switched to %s views", "plot" if settings.use_plot_view else "canvas")

    def _on_clear(self) -> None:
        self.buffer.clear()
        self.source.reset()
        self.statusBar().showMessage("Window cleared", 2000)

    def _on_ticked(self, ticks: int) -> None:
        if ticks % self.buffer.sampling_rate == 0:
            self.statusBar().showMessage(
                f"{len(self.buffer)}/{self.buffer.capacity} samples per channel"
            )

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self.clock.stop()
        self._unsubscribe_settings()
        self.binding.detach_all()
        super().closeEvent(event)


__all__ = ["MainWindow"]
