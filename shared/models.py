from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np


def _freeze_array(array: np.ndarray, *, ndim: int | None = None) -> np.ndarray:
    """Return a read-only, C-contiguous copy of `array`, validating dimensions."""
    arr = np.array(array, dtype=np.float64, copy=True, order="C")
    if ndim is not None and arr.ndim != ndim:
        raise ValueError(f"array must be {ndim}D, got {arr.ndim}D")
    arr.setflags(write=False)
    return arr


# ----------------------------
# Window configuration
# ----------------------------

@dataclass(frozen=True)
class WindowConfig:
    """Shape of a sliding window, fixed for the lifetime of a buffer."""

    channel_count: int
    sampling_rate: int
    window_duration_sec: int

    def __post_init__(self) -> None:
        for name in ("channel_count", "sampling_rate", "window_duration_sec"):
            value = getattr(self, name)
            if isinstance(value, bool) or int(value) != value:
                raise ValueError(f"{name} must be an integer")
            if value <= 0:
                raise ValueError(f"{name} must be positive")
            object.__setattr__(self, name, int(value))

    @property
    def capacity(self) -> int:
        return self.sampling_rate * self.window_duration_sec

    @property
    def tick_interval_sec(self) -> float:
        return 1.0 / float(self.sampling_rate)


# ----------------------------
# Render-pass data
# ----------------------------

@dataclass(frozen=True)
class WindowSnapshot:
    """Point-in-time copy of every channel in a SlidingWindowBuffer.

    `samples` is channel-major with shape (channels, length) and is never
    writeable, so renderers can hold on to it while the buffer keeps moving.
    """

    samples: np.ndarray = field(repr=False)
    capacity: int
    tick: int = 0

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        if self.tick < 0:
            raise ValueError("tick must be non-negative")
        samples = _freeze_array(self.samples, ndim=2)
        if samples.shape[1] > self.capacity:
            raise ValueError("snapshot length exceeds capacity")
        object.__setattr__(self, "samples", samples)

    @property
    def n_channels(self) -> int:
        return self.samples.shape[0]

    @property
    def n_samples(self) -> int:
        return self.samples.shape[1]

    @property
    def is_empty(self) -> bool:
        return self.samples.size == 0

    def channel(self, index: int) -> np.ndarray:
        return self.samples[index]


@dataclass(frozen=True)
class AmplitudeRange:
    """Vertical normalization bounds for one render pass."""

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def as_tuple(self) -> Tuple[float, float]:
        return (self.min, self.max)


@dataclass(frozen=True)
class Polyline:
    """Screen-space points for one channel, ordered oldest sample first."""

    channel_index: int
    color: str
    points: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        if self.channel_index < 0:
            raise ValueError("channel_index must be non-negative")
        points = _freeze_array(self.points, ndim=2)
        if points.shape[1] != 2:
            raise ValueError("points must have shape (n, 2)")
        object.__setattr__(self, "points", points)

    @property
    def xs(self) -> np.ndarray:
        return self.points[:, 0]

    @property
    def ys(self) -> np.ndarray:
        return self.points[:, 1]

    def __len__(self) -> int:
        return self.points.shape[0]


__all__ = [
    "WindowConfig",
    "WindowSnapshot",
    "AmplitudeRange",
    "Polyline",
]
