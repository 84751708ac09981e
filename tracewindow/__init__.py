"""TraceWindow: live multi-channel waveform display."""

__version__ = "0.1.0"
