from __future__ import annotations

from collections import deque
from typing import Deque, Tuple

import numpy as np


class SampleChannel:
    """
    Bounded FIFO of float samples for a single channel.

    Once the channel holds `capacity` samples, every append drops the oldest
    one. Not thread-safe on its own; SlidingWindowBuffer serializes access.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._samples: Deque[float] = deque(maxlen=self._capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._samples) == self._capacity

    def append(self, value: float) -> None:
        """Append `value`, evicting the oldest sample when full."""
        self._samples.append(float(value))

    def clear(self) -> None:
        self._samples.clear()

    def values(self) -> Tuple[float, ...]:
        return tuple(self._samples)

    def to_array(self) -> np.ndarray:
        return np.fromiter(self._samples, dtype=np.float64, count=len(self._samples))

    def __len__(self) -> int:
        return len(self._samples)


__all__ = ["SampleChannel"]
