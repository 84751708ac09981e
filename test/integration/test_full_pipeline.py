"""
End-to-end pipeline: producer -> buffer -> notification -> views.

Exercises the same wiring the GUI uses, with headless PolylineViews in place
of widgets.
"""
from __future__ import annotations

import numpy as np

from core.amplitude import compute_range
from core.view_binding import PolylineView, ViewBinding
from daq.sine_source import SineWaveSource
from daq.ticker import PeriodicTicker
from shared.app_settings import AppSettingsStore
from shared.sliding_window import SlidingWindowBuffer


def _build_session(view_count=3):
    settings = AppSettingsStore().get()
    buffer = SlidingWindowBuffer.from_config(settings.window_config())
    source = SineWaveSource(
        settings.channel_count,
        settings.sampling_rate,
        frequency_hz=settings.signal_frequency_hz,
        amplitude=settings.signal_amplitude,
    )
    binding = ViewBinding()
    views = [PolylineView(settings.view_width, settings.view_height) for _ in range(view_count)]
    for view in views:
        binding.attach(view, buffer)
    ticker = PeriodicTicker(buffer, source.next_sample)
    return buffer, binding, views, ticker


def test_views_stay_in_lockstep_while_window_fills():
    buffer, _, views, ticker = _build_session()

    for _ in range(buffer.sampling_rate):
        ticker.tick_once()

    reference = views[0].polylines
    assert len(reference) == buffer.channel_count
    for view in views[1:]:
        assert view.render_count == views[0].render_count == buffer.sampling_rate
        for a, b in zip(reference, view.polylines):
            np.testing.assert_array_equal(a.points, b.points)

    # One second of a five second window: the traces cover the left fifth.
    max_x = max(line.xs.max() for line in reference)
    expected = (buffer.sampling_rate - 1) / (buffer.capacity - 1) * 600
    assert max_x == expected
    assert max_x < 600 / 4


def test_full_window_spans_width_and_amplitude():
    buffer, _, views, ticker = _build_session(view_count=1)

    for _ in range(buffer.capacity + 10):
        ticker.tick_once()

    assert len(buffer) == buffer.capacity
    rng = compute_range(buffer.snapshot())
    assert -0.5 <= rng.min < -0.49
    assert 0.49 < rng.max <= 0.5
    for line in views[0].polylines:
        assert len(line) == buffer.capacity
        assert line.xs[0] == 0.0
        assert line.xs[-1] == 600.0
        assert line.ys.min() >= 0.0
        assert line.ys.max() <= 120.0


def test_teardown_detaches_every_view():
    buffer, binding, views, ticker = _build_session()
    ticker.tick_once()
    binding.detach_all()
    ticker.tick_once()

    assert buffer.subscriber_count == 0
    assert all(view.render_count == 1 for view in views)


def test_documented_two_channel_scenario():
    buffer = SlidingWindowBuffer(channel_count=2, sampling_rate=4, window_duration_sec=1)
    binding = ViewBinding()
    left, right = PolylineView(300, 100), PolylineView(300, 100)
    binding.attach(left, buffer)
    binding.attach(right, buffer)

    for tick in [(1, 10), (2, 20), (3, 30), (4, 40), (5, 50)]:
        buffer.add_sample(tick)

    snap = buffer.snapshot()
    np.testing.assert_array_equal(snap.samples, [[2, 3, 4, 5], [20, 30, 40, 50]])
    assert compute_range(snap).as_tuple() == (2.0, 50.0)
    for a, b in zip(left.polylines, right.polylines):
        np.testing.assert_array_equal(a.points, b.points)
