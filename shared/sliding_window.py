from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from .errors import InvalidInputError
from .models import WindowConfig, WindowSnapshot
from .sample_channel import SampleChannel

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[WindowSnapshot], None]


class SlidingWindowBuffer:
    """
    Fixed-width history of the most recent samples on every channel.

    Each tick appends one value to every channel or, if the tick is malformed,
    to none of them, so all channels always have the same length. Mutation and
    snapshotting share one re-entrant lock, which keeps snapshots consistent if
    the producer runs on another thread than the views.

    Subscribers are called after every successful append with a single
    snapshot shared by all of them. The subscriber table may be modified from
    inside a callback; changes apply from the next notification.
    """

    def __init__(self, channel_count: int, sampling_rate: int, window_duration_sec: int) -> None:
        self._config = WindowConfig(
            channel_count=channel_count,
            sampling_rate=sampling_rate,
            window_duration_sec=window_duration_sec,
        )
        capacity = self._config.capacity
        self._channels: Tuple[SampleChannel, ...] = tuple(
            SampleChannel(capacity) for _ in range(self._config.channel_count)
        )
        self._lock = RLock()
        self._tick = 0
        self._subscribers: Dict[int, SnapshotCallback] = {}
        self._next_token = 0
        logger.debug(
            "SlidingWindowBuffer created: channels=%d, capacity=%d",
            self._config.channel_count,
            capacity,
        )

    @classmethod
    def from_config(cls, config: WindowConfig) -> "SlidingWindowBuffer":
        return cls(config.channel_count, config.sampling_rate, config.window_duration_sec)

    # ---- Properties -----------------------------------------------------------

    @property
    def config(self) -> WindowConfig:
        return self._config

    @property
    def channel_count(self) -> int:
        return self._config.channel_count

    @property
    def capacity(self) -> int:
        return self._config.capacity

    @property
    def sampling_rate(self) -> int:
        return self._config.sampling_rate

    @property
    def tick(self) -> int:
        """Number of successful appends since creation or the last clear()."""
        with self._lock:
            return self._tick

    def channel(self, index: int) -> Tuple[float, ...]:
        with self._lock:
            return self._channels[index].values()

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels[0])

    # ---- Mutation -------------------------------------------------------------

    def add_sample(self, values: Sequence[float]) -> None:
        """
        Append one value per channel, evicting the oldest sample where full.

        Raises InvalidInputError without touching any channel when the number
        of values differs from `channel_count`.
        """
        received = len(values)
        if received != self.channel_count:
            raise InvalidInputError(self.channel_count, received)
        converted = [float(value) for value in values]

        with self._lock:
            for channel, value in zip(self._channels, converted):
                channel.append(value)
            self._tick += 1
            snapshot = self._snapshot_locked()
            callbacks = list(self._subscribers.values())
        self._notify(callbacks, snapshot)

    def clear(self) -> None:
        """Drop every retained sample on all channels and notify subscribers."""
        with self._lock:
            for channel in self._channels:
                channel.clear()
            self._tick = 0
            snapshot = self._snapshot_locked()
            callbacks = list(self._subscribers.values())
        logger.info("SlidingWindowBuffer cleared")
        self._notify(callbacks, snapshot)

    # ---- Reading --------------------------------------------------------------

    def snapshot(self) -> WindowSnapshot:
        """Return an immutable copy of every channel's current contents."""
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> WindowSnapshot:
        length = len(self._channels[0])
        samples = np.empty((self.channel_count, length), dtype=np.float64)
        for row, channel in enumerate(self._channels):
            samples[row] = channel.to_array()
        return WindowSnapshot(samples=samples, capacity=self.capacity, tick=self._tick)

    # ---- Subscriptions --------------------------------------------------------

    def subscribe(self, callback: SnapshotCallback) -> int:
        """Register `callback` for change notifications; returns its token."""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
        logger.debug("Subscriber %d registered", token)
        return token

    def unsubscribe(self, token: int) -> None:
        """Remove a subscription. Unknown or already removed tokens are ignored."""
        with self._lock:
            removed = self._subscribers.pop(token, None)
        if removed is not None:
            logger.debug("Subscriber %d removed", token)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _notify(self, callbacks: List[SnapshotCallback], snapshot: WindowSnapshot) -> None:
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception as exc:
                logger.warning("Window subscriber callback failed: %s", exc)
                continue


__all__ = ["SlidingWindowBuffer", "SnapshotCallback"]
