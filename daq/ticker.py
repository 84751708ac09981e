from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Sequence

from shared.errors import InvalidInputError
from shared.sliding_window import SlidingWindowBuffer

logger = logging.getLogger(__name__)

SampleProducer = Callable[[], Sequence[float]]


class PeriodicTicker:
    """
    Background clock that pushes one producer tick per sample period.

    Ticks are scheduled against a monotonic deadline so a slow tick does not
    shift every later one. A malformed tick is logged and dropped; on the
    background thread so is a tick whose producer or values raise.
    """

    def __init__(
        self,
        buffer: SlidingWindowBuffer,
        producer: SampleProducer,
        *,
        interval_sec: Optional[float] = None,
    ) -> None:
        if interval_sec is None:
            interval_sec = buffer.config.tick_interval_sec
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self._buffer = buffer
        self._producer = producer
        self._interval = float(interval_sec)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._ticks = 0
        self._dropped = 0

    @property
    def interval_sec(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def dropped(self) -> int:
        return self._dropped

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="PeriodicTicker", daemon=True)
        self._thread.start()
        logger.info("Ticker started at %.1f Hz", 1.0 / self._interval)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        logger.info("Ticker stopped after %d ticks (%d dropped)", self._ticks, self._dropped)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def tick_once(self) -> bool:
        """Run a single producer tick synchronously. Returns False if dropped."""
        values = self._producer()
        try:
            self._buffer.add_sample(values)
        except InvalidInputError as exc:
            self._dropped += 1
            logger.warning("Dropped tick: %s", exc)
            return False
        self._ticks += 1
        return True

    def _run(self) -> None:
        deadline = time.perf_counter()
        while not self._stop_event.is_set():
            try:
                self.tick_once()
            except Exception as exc:
                self._dropped += 1
                logger.error("Ticker tick error: %s", exc)
            deadline += self._interval
            delay = deadline - time.perf_counter()
            if delay < 0:
                # Fell behind; resynchronize.
                deadline = time.perf_counter()
                continue
            self._stop_event.wait(delay)


__all__ = ["PeriodicTicker", "SampleProducer"]
