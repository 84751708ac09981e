from __future__ import annotations

import math
import time

import numpy as np
import pytest

from daq.sine_source import SineWaveSource
from daq.ticker import PeriodicTicker
from shared.sliding_window import SlidingWindowBuffer


class TestSineWaveSource:
    def test_first_sample_is_phase_offsets(self):
        source = SineWaveSource(3, 256, frequency_hz=1.0, amplitude=0.5)
        values = source.next_sample()
        expected = [0.5 * math.sin(i * 2 * math.pi / 3) for i in range(3)]
        np.testing.assert_allclose(values, expected, atol=1e-12)

    def test_time_advances_one_period_per_sample(self):
        source = SineWaveSource(2, 100)
        for _ in range(25):
            source.next_sample()
        assert source.time == pytest.approx(0.25)
        # quarter period of a 1 Hz sine with amplitude 0.5
        assert source.next_sample()[0] == pytest.approx(0.5)

    def test_reset(self):
        source = SineWaveSource(1, 10)
        first = source.next_sample()
        source.next_sample()
        source.reset()
        assert source.next_sample() == first

    def test_rejects_bad_configuration(self):
        with pytest.raises(ValueError):
            SineWaveSource(0, 10)
        with pytest.raises(ValueError):
            SineWaveSource(2, 0)


class TestPeriodicTicker:
    def test_interval_defaults_to_sample_period(self):
        buf = SlidingWindowBuffer(channel_count=1, sampling_rate=200, window_duration_sec=1)
        ticker = PeriodicTicker(buf, lambda: [0.0])
        assert ticker.interval_sec == pytest.approx(0.005)

    def test_tick_once_appends(self):
        buf = SlidingWindowBuffer(channel_count=2, sampling_rate=4, window_duration_sec=1)
        source = SineWaveSource(2, 4)
        ticker = PeriodicTicker(buf, source.next_sample)
        assert ticker.tick_once()
        assert len(buf) == 1
        assert ticker.ticks == 1

    def test_malformed_tick_is_dropped(self):
        buf = SlidingWindowBuffer(channel_count=2, sampling_rate=4, window_duration_sec=1)
        ticker = PeriodicTicker(buf, lambda: [1.0])
        assert not ticker.tick_once()
        assert ticker.dropped == 1
        assert len(buf) == 0

    def test_background_thread_fills_window_and_stops(self):
        buf = SlidingWindowBuffer(channel_count=3, sampling_rate=500, window_duration_sec=1)
        source = SineWaveSource(3, 500)
        ticker = PeriodicTicker(buf, source.next_sample)

        ticker.start()
        deadline = time.monotonic() + 5.0
        while ticker.ticks < 20 and time.monotonic() < deadline:
            time.sleep(0.01)
        ticker.stop()

        assert not ticker.is_running()
        assert ticker.ticks >= 20
        count = len(buf)
        assert count == min(ticker.ticks, buf.capacity)
        time.sleep(0.05)
        assert len(buf) == count

    def test_background_thread_survives_failing_ticks(self):
        """A non-numeric value or a raising producer drops that tick only."""
        buf = SlidingWindowBuffer(channel_count=2, sampling_rate=200, window_duration_sec=1)
        calls = {"n": 0}

        def flaky():
            calls["n"] += 1
            if calls["n"] == 3:
                return [1.0, "x"]
            if calls["n"] == 5:
                raise RuntimeError("sensor unplugged")
            return [0.0, 0.0]

        ticker = PeriodicTicker(buf, flaky)
        ticker.start()
        deadline = time.monotonic() + 5.0
        while ticker.ticks < 10 and time.monotonic() < deadline:
            time.sleep(0.01)
        try:
            assert ticker.is_running()
        finally:
            ticker.stop()

        assert ticker.ticks >= 10
        assert ticker.dropped == 2
        assert len(buf) == min(ticker.ticks, buf.capacity)

    def test_rejects_non_positive_interval(self):
        buf = SlidingWindowBuffer(channel_count=1, sampling_rate=4, window_duration_sec=1)
        with pytest.raises(ValueError):
            PeriodicTicker(buf, lambda: [0.0], interval_sec=0)
