"""Tests for RequestThrottle."""

from watchbrainz.execution.throttle import RequestThrottle


class TestRequestThrottle:
    def test_pause_sleeps_for_delay(self):
        slept = []
        throttle = RequestThrottle(delay=1.0, sleep=slept.append)
        throttle.pause()
        throttle.pause()
        assert slept == [1.0, 1.0]
        assert throttle.pauses == 2

    def test_zero_delay_counts_without_sleeping(self):
        slept = []
        throttle = RequestThrottle(delay=0, sleep=slept.append)
        throttle.pause()
        assert slept == []
        assert throttle.pauses == 1
