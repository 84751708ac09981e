"""Core rendering utilities."""

from .amplitude import DEFAULT_RANGE, compute_range
from .polyline import DEFAULT_PALETTE, PolylineRenderer, RenderPolicy
from .view_binding import PolylineView, SnapshotView, ViewBinding
from shared.models import AmplitudeRange, Polyline, WindowConfig, WindowSnapshot

__all__ = [
    "AmplitudeRange",
    "Polyline",
    "WindowConfig",
    "WindowSnapshot",
    "DEFAULT_RANGE",
    "DEFAULT_PALETTE",
    "compute_range",
    "PolylineRenderer",
    "RenderPolicy",
    "PolylineView",
    "SnapshotView",
    "ViewBinding",
]
