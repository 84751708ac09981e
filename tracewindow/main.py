import gc
import sys

import pyqtgraph as pg
from PySide6.QtWidgets import QApplication

from gui.main_window import MainWindow
from gui.qsettings_adapter import create_gui_settings_store


# Enable OpenGL hardware acceleration for the plot-based views.
# This must be set before any PyQtGraph widgets are created.
pg.setConfigOptions(useOpenGL=True, enableExperimental=True, antialias=True)

# Every tick allocates a fresh snapshot; raise gen0 to reduce per-frame GC pauses.
gc.set_threshold(1500, 15, 15)


def main() -> int:
    app = QApplication(sys.argv)
    app.setApplicationName("TraceWindow")
    window = MainWindow(create_gui_settings_store())
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
