"""QTimer-driven producer clock.

Runs the producer on the GUI thread so that the buffer append and every view's
repaint request happen in the same event-loop turn.

QTimer only has millisecond resolution, so the timer fires at the floor of the
sample period and each timeout catches up to the sample count owed by the
elapsed wall time. At 256 Hz that is a 3 ms timer delivering 256 samples per
second on average rather than a 4 ms timer delivering 250.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from PySide6 import QtCore

from daq.ticker import SampleProducer
from shared.errors import InvalidInputError
from shared.sliding_window import SlidingWindowBuffer

logger = logging.getLogger(__name__)


class QtTickClock(QtCore.QObject):
    """Appends producer samples at the buffer's sampling rate."""

    ticked = QtCore.Signal(int)

    def __init__(
        self,
        buffer: SlidingWindowBuffer,
        producer: SampleProducer,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._buffer = buffer
        self._producer = producer
        self._rate = buffer.sampling_rate
        self._timer = QtCore.QTimer(self)
        self._timer.setTimerType(QtCore.Qt.PreciseTimer)
        interval_ms = max(1, int(math.floor(buffer.config.tick_interval_sec * 1000.0)))
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)
        self._elapsed = QtCore.QElapsedTimer()
        self._ticks = 0
        self._scheduled = 0

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if not self._timer.isActive():
            self._scheduled = 0
            self._elapsed.start()
            self._timer.start()
            logger.info("Tick clock started (%d ms, %d Hz)", self._timer.interval(), self._rate)

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            self._elapsed.invalidate()
            logger.info("Tick clock stopped after %d ticks", self._ticks)

    def _elapsed_ns(self) -> int:
        return self._elapsed.nsecsElapsed()

    def _due_ticks(self) -> int:
        if not self._elapsed.isValid():
            return 0
        target = self._elapsed_ns() * self._rate // 1_000_000_000
        due = target - self._scheduled
        if due > self._rate:
            # More than a second behind (stalled event loop); skip ahead.
            logger.debug("Tick clock skipping %d samples", due - self._rate)
            self._scheduled = target - self._rate
            due = self._rate
        return max(0, due)

    def _on_timeout(self) -> None:
        for _ in range(self._due_ticks()):
            self._scheduled += 1
            self._emit_tick()

    def _emit_tick(self) -> bool:
        try:
            self._buffer.add_sample(self._producer())
        except InvalidInputError as exc:
            logger.warning("Dropped tick: %s", exc)
            return False
        self._ticks += 1
        self.ticked.emit(self._ticks)
        return True


__all__ = ["QtTickClock"]
