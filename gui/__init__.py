__all__ = ["MainWindow", "QtTickClock", "TracePlotView", "WaveformCanvas"]

from .main_window import MainWindow
from .tick_clock import QtTickClock
from .trace_plot_view import TracePlotView
from .waveform_canvas import WaveformCanvas
