from __future__ import annotations

import math
from typing import List

import numpy as np


class SineWaveSource:
    """
    Synthetic multi-channel producer.

    Channel `i` carries `amplitude * sin(2π f t + i * 2π / channels)`, so the
    traces are evenly phase-shifted. Time advances by one sample period on
    every call to `next_sample()`.
    """

    def __init__(
        self,
        channel_count: int,
        sampling_rate: int,
        *,
        frequency_hz: float = 1.0,
        amplitude: float = 0.5,
    ) -> None:
        if channel_count <= 0:
            raise ValueError("channel_count must be positive")
        if sampling_rate <= 0:
            raise ValueError("sampling_rate must be positive")
        self._channel_count = int(channel_count)
        self._dt = 1.0 / float(sampling_rate)
        self._frequency_hz = float(frequency_hz)
        self._amplitude = float(amplitude)
        self._phases = np.arange(self._channel_count, dtype=np.float64) * (2.0 * math.pi / self._channel_count)
        self._time = 0.0

    @property
    def channel_count(self) -> int:
        return self._channel_count

    @property
    def time(self) -> float:
        return self._time

    def next_sample(self) -> List[float]:
        """Return one value per channel and advance time by one sample period."""
        omega_t = 2.0 * math.pi * self._frequency_hz * self._time
        values = self._amplitude * np.sin(omega_t + self._phases)
        self._time += self._dt
        return values.tolist()

    def reset(self) -> None:
        self._time = 0.0


__all__ = ["SineWaveSource"]
