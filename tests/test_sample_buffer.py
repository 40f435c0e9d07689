import math
import threading
import time

import pytest

from eeg_focus.acquisition.sample_buffer import SampleBuffer
from eeg_focus.core.exceptions import ConfigurationError


def test_fifo_order():
    buf = SampleBuffer()
    for i, t in enumerate([1000, 1001, 1030]):
        buf.push(float(i), t)
    assert [buf.pop().value for _ in range(3)] == [0.0, 1.0, 2.0]
    assert buf.pop() is None


def test_push_keeps_arrival_time():
    buf = SampleBuffer()
    buf.push(12, 1234.7)
    sample = buf.pop()
    assert sample.value == 12.0
    assert sample.timestamp == 1234


def test_overflow_drops_oldest():
    buf = SampleBuffer(capacity=5)
    for i in range(8):
        buf.push(float(i), i)
    assert len(buf) == 5
    assert buf.dropped == 3
    assert [s.value for s in buf.drain()] == [3.0, 4.0, 5.0, 6.0, 7.0]
    assert len(buf) == 0


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_rejects_non_finite(value):
    buf = SampleBuffer()
    assert buf.push(value, 0) is False
    assert len(buf) == 0


@pytest.mark.parametrize("pending, expected", [(0, "low"), (4, "low"), (5, "normal"),
                                               (50, "normal"), (51, "high")])
def test_health(pending, expected):
    buf = SampleBuffer()
    for i in range(pending):
        buf.push(1.0, i)
    assert buf.health() == expected


def test_clear():
    buf = SampleBuffer()
    buf.push(1.0, 0)
    buf.clear()
    assert len(buf) == 0


def test_invalid_capacity():
    with pytest.raises(ConfigurationError):
        SampleBuffer(capacity=0)


def test_concurrent_push_and_pop():
    n = 2000
    buf = SampleBuffer(capacity=n)
    popped = []

    def consume():
        deadline = time.monotonic() + 5.0
        while len(popped) < n and time.monotonic() < deadline:
            sample = buf.pop()
            if sample is not None:
                popped.append(sample.value)

    consumer = threading.Thread(target=consume)
    consumer.start()
    for i in range(n):
        assert buf.push(float(i), i)
    consumer.join(timeout=10.0)

    assert not consumer.is_alive()
    assert popped == [float(i) for i in range(n)]
    assert buf.dropped == 0
