"""
Property-based tests for SlidingWindowBuffer using Hypothesis.

Differential testing: the production buffer is compared tick by tick against
the list-based ReferenceWindow.

Properties verified:
1. Length after N ticks equals min(N, capacity) on every channel
2. FIFO: the oldest retained sample is the (N - C + 1)-th inserted one
3. Malformed ticks never change the contents
4. Range and rendered y values agree with the naive reference
"""
from __future__ import annotations

import numpy as np
from hypothesis import given, settings, strategies as st

from core.amplitude import compute_range
from core.polyline import PolylineRenderer
from shared.errors import InvalidInputError
from shared.sliding_window import SlidingWindowBuffer
from test.fixtures.reference_models import ReferenceWindow, reference_range


channels_strategy = st.integers(min_value=1, max_value=4)
rate_strategy = st.integers(min_value=1, max_value=8)
duration_strategy = st.integers(min_value=1, max_value=3)
finite_floats = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)


class TestSlidingWindowPropertyBased:
    """Hypothesis-based property tests for window invariants."""

    @given(
        n_channels=channels_strategy,
        rate=rate_strategy,
        duration=duration_strategy,
        n_ticks=st.integers(min_value=0, max_value=60),
    )
    @settings(max_examples=100, deadline=None)
    def test_length_and_fifo_order(self, n_channels: int, rate: int, duration: int, n_ticks: int):
        buf = SlidingWindowBuffer(n_channels, rate, duration)
        capacity = buf.capacity

        for n in range(1, n_ticks + 1):
            buf.add_sample([float(n * 10 + ch) for ch in range(n_channels)])

        assert len(buf) == min(n_ticks, capacity)
        for ch in range(n_channels):
            values = buf.channel(ch)
            assert len(values) == len(buf)
            if n_ticks > capacity:
                oldest_tick = n_ticks - capacity + 1
                assert values[0] == float(oldest_tick * 10 + ch)
            if values:
                assert values[-1] == float(n_ticks * 10 + ch)

    @given(
        n_channels=channels_strategy,
        rate=rate_strategy,
        ticks=st.lists(st.lists(finite_floats, min_size=0, max_size=5), max_size=40),
    )
    @settings(max_examples=100, deadline=None)
    def test_matches_reference_model(self, n_channels: int, rate: int, ticks: list[list[float]]):
        buf = SlidingWindowBuffer(n_channels, rate, 1)
        ref = ReferenceWindow(n_channels, buf.capacity)

        for values in ticks:
            before = buf.snapshot().samples.tobytes()
            accepted = ref.add(values)
            if accepted:
                buf.add_sample(values)
            else:
                try:
                    buf.add_sample(values)
                except InvalidInputError:
                    pass
                else:
                    raise AssertionError("mismatched tick was accepted")
                assert buf.snapshot().samples.tobytes() == before

        for ch in range(n_channels):
            assert list(buf.channel(ch)) == ref.channel(ch)
        assert compute_range(buf.snapshot()).as_tuple() == reference_range(ref.all_samples())

    @given(
        rows=st.lists(finite_floats, min_size=1, max_size=30),
        width=st.integers(min_value=1, max_value=2000),
        height=st.integers(min_value=1, max_value=2000),
    )
    @settings(max_examples=100, deadline=None)
    def test_rendered_y_within_height(self, rows: list[float], width: int, height: int):
        buf = SlidingWindowBuffer(1, len(rows), 1)
        for value in rows:
            buf.add_sample([value])

        (line,) = PolylineRenderer().render_snapshot(buf.snapshot(), width, height)

        tolerance = 1e-9 * height
        assert line.ys.min() >= -tolerance
        assert line.ys.max() <= height + tolerance
        assert line.xs.min() >= 0.0
        assert np.all(np.diff(line.xs) > 0) or len(line) == 1
