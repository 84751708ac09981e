"""Attach renderable views to a SlidingWindowBuffer's change notifications.

Any object with an ``on_snapshot(snapshot)`` method can be attached. Every view
bound to the same buffer receives the very same snapshot on each tick, so
their render passes never diverge.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Protocol, Tuple

from shared.models import Polyline, WindowSnapshot
from shared.sliding_window import SlidingWindowBuffer

from .amplitude import compute_range
from .polyline import PolylineRenderer

logger = logging.getLogger(__name__)


class SnapshotView(Protocol):
    def on_snapshot(self, snapshot: WindowSnapshot) -> None:
        ...


class ViewBinding:
    """Tracks which buffer each view is subscribed to."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._bindings: Dict[SnapshotView, Tuple[SlidingWindowBuffer, int]] = {}

    def attach(self, view: SnapshotView, buffer: SlidingWindowBuffer) -> None:
        """Subscribe `view` to `buffer`. Re-attaching to another buffer moves it."""
        with self._lock:
            current = self._bindings.get(view)
            if current is not None and current[0] is buffer:
                return
            if current is not None:
                current[0].unsubscribe(current[1])
            token = buffer.subscribe(view.on_snapshot)
            self._bindings[view] = (buffer, token)
        logger.debug("Attached view %r (token %d)", view, token)

    def detach(self, view: SnapshotView) -> None:
        """Unsubscribe `view`. Detaching an unknown view does nothing."""
        with self._lock:
            binding = self._bindings.pop(view, None)
        if binding is None:
            return
        buffer, token = binding
        buffer.unsubscribe(token)
        logger.debug("Detached view %r (token %d)", view, token)

    def detach_all(self) -> None:
        with self._lock:
            bindings = list(self._bindings.values())
            self._bindings.clear()
        for buffer, token in bindings:
            buffer.unsubscribe(token)

    def is_attached(self, view: SnapshotView) -> bool:
        with self._lock:
            return view in self._bindings

    def buffer_for(self, view: SnapshotView) -> Optional[SlidingWindowBuffer]:
        with self._lock:
            binding = self._bindings.get(view)
        return binding[0] if binding is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)


class PolylineView:
    """Headless view: re-renders its polylines on every notification."""

    def __init__(self, width: float, height: float, renderer: Optional[PolylineRenderer] = None) -> None:
        self._width = float(width)
        self._height = float(height)
        self._renderer = renderer if renderer is not None else PolylineRenderer()
        self._polylines: List[Polyline] = []
        self._snapshot: Optional[WindowSnapshot] = None
        self.render_count = 0

    @property
    def size(self) -> Tuple[float, float]:
        return (self._width, self._height)

    @property
    def polylines(self) -> List[Polyline]:
        return list(self._polylines)

    def resize(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)
        if self._snapshot is not None:
            self._render(self._snapshot)

    def on_snapshot(self, snapshot: WindowSnapshot) -> None:
        self._snapshot = snapshot
        if self._renderer.needs_render():
            self._render(snapshot)

    def _render(self, snapshot: WindowSnapshot) -> None:
        rng = compute_range(snapshot)
        self._polylines = self._renderer.render(snapshot, rng, self._width, self._height)
        self.render_count += 1


__all__ = ["PolylineView", "SnapshotView", "ViewBinding"]
