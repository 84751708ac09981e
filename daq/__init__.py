"""Sample producers and the clocks that drive them."""

from .sine_source import SineWaveSource
from .ticker import PeriodicTicker

__all__ = ["SineWaveSource", "PeriodicTicker"]
