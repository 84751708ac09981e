"""Vertical range for normalizing a window snapshot into drawing space."""

from __future__ import annotations

import numpy as np

from shared.models import AmplitudeRange, WindowSnapshot

DEFAULT_RANGE = AmplitudeRange(-1.0, 1.0)
FLAT_SIGNAL_PADDING = 1.0


def compute_range(snapshot: WindowSnapshot) -> AmplitudeRange:
    """
    Return the (min, max) of every sample across every channel.

    An empty snapshot gets DEFAULT_RANGE. A flat signal (min == max) is widened
    by FLAT_SIGNAL_PADDING on both sides, or by one ulp where the padding
    would round away, so the span of a finite flat signal is always positive.
    NaN and infinite samples are passed through untouched.
    """
    samples = snapshot.samples
    if samples.size == 0:
        return DEFAULT_RANGE

    lo = float(np.min(samples))
    hi = float(np.max(samples))
    if lo == hi:
        low, high = lo - FLAT_SIGNAL_PADDING, hi + FLAT_SIGNAL_PADDING
        if np.isfinite(lo) and not (low < lo and hi < high):
            # Beyond 2**53 the padding is lost to rounding.
            low, high = float(np.nextafter(lo, -np.inf)), float(np.nextafter(hi, np.inf))
        return AmplitudeRange(low, high)
    return AmplitudeRange(lo, hi)


__all__ = ["DEFAULT_RANGE", "FLAT_SIGNAL_PADDING", "compute_range"]
