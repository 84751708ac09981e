from __future__ import annotations

import enum
from typing import List, Optional, Sequence

import numpy as np

from shared.models import AmplitudeRange, Polyline, WindowSnapshot

from .amplitude import compute_range

# Material cyan, yellow, light green, pink accent, orange.
DEFAULT_PALETTE: tuple[str, ...] = ("#00BCD4", "#FFEB3B", "#8BC34A", "#FF4081", "#FF9800")
DEFAULT_STROKE_WIDTH = 2.0


class RenderPolicy(enum.Enum):
    """When a view should recompute its polylines."""

    # Every change notification triggers a full recomputation of every channel.
    ALWAYS_DIRTY = "always_dirty"


class PolylineRenderer:
    """
    Converts a window snapshot into one screen-space polyline per channel.

    The x axis is scaled against the window capacity rather than the number of
    samples present: until the window fills, a channel only covers the left
    part of the width. The y axis maps `rng.max` to 0 and `rng.min` to
    `height`.
    """

    def __init__(
        self,
        palette: Optional[Sequence[str]] = None,
        *,
        stroke_width: float = DEFAULT_STROKE_WIDTH,
        policy: RenderPolicy = RenderPolicy.ALWAYS_DIRTY,
    ) -> None:
        palette = tuple(palette) if palette is not None else DEFAULT_PALETTE
        if not palette:
            raise ValueError("palette must not be empty")
        if stroke_width <= 0:
            raise ValueError("stroke_width must be positive")
        self._palette = palette
        self._stroke_width = float(stroke_width)
        self._policy = policy

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    @property
    def stroke_width(self) -> float:
        return self._stroke_width

    @property
    def policy(self) -> RenderPolicy:
        return self._policy

    def needs_render(self) -> bool:
        return self._policy is RenderPolicy.ALWAYS_DIRTY

    def color_for(self, channel_index: int) -> str:
        return self._palette[channel_index % len(self._palette)]

    def render(
        self,
        snapshot: WindowSnapshot,
        rng: AmplitudeRange,
        width: float,
        height: float,
    ) -> List[Polyline]:
        """
        Build polylines for every non-empty channel of `snapshot`.

        A zero or negative size yields an empty list.
        """
        width = float(width)
        height = float(height)
        if width <= 0.0 or height <= 0.0 or snapshot.is_empty:
            return []

        length = snapshot.n_samples
        capacity = snapshot.capacity
        if capacity > 1:
            xs = np.arange(length, dtype=np.float64) / (capacity - 1) * width
        else:
            xs = np.zeros(length, dtype=np.float64)

        span = rng.max - rng.min
        polylines: List[Polyline] = []
        for index in range(snapshot.n_channels):
            samples = snapshot.channel(index)
            ys = height - (samples - rng.min) / span * height
            points = np.column_stack((xs, ys))
            polylines.append(Polyline(channel_index=index, color=self.color_for(index), points=points))
        return polylines

    def render_snapshot(self, snapshot: WindowSnapshot, width: float, height: float) -> List[Polyline]:
        """Compute the amplitude range for `snapshot` and render it."""
        return self.render(snapshot, compute_range(snapshot), width, height)


__all__ = ["DEFAULT_PALETTE", "DEFAULT_STROKE_WIDTH", "PolylineRenderer", "RenderPolicy"]
