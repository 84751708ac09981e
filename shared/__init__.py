"""
Shared data structures available to both the rendering core and the GUI.
"""

from .errors import InvalidInputError
from .models import AmplitudeRange, Polyline, WindowConfig, WindowSnapshot
from .sample_channel import SampleChannel
from .sliding_window import SlidingWindowBuffer

__all__ = [
    "AmplitudeRange",
    "InvalidInputError",
    "Polyline",
    "SampleChannel",
    "SlidingWindowBuffer",
    "WindowConfig",
    "WindowSnapshot",
]
