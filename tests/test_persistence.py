import math

import pytest

from eeg_focus.core.exceptions import ConfigurationError
from eeg_focus.detection.persistence import PersistenceMonitor, PersistencePhase

LOW = 0.1
HIGH = 0.5


def feed(monitor, subject, readings, start=0.0):
    result = None
    for i, beta in enumerate(readings):
        result = monitor.check(subject, beta, now=start + i)
    return result


def test_all_low_raises_alarm():
    monitor = PersistenceMonitor()
    assert feed(monitor, "s1", [LOW] * 29) is False
    assert monitor.check("s1", LOW, now=29.0) is True


def test_all_high_no_alarm():
    monitor = PersistenceMonitor()
    assert feed(monitor, "s1", [HIGH] * 30) is False


def test_exactly_alert_fraction_raises_alarm():
    monitor = PersistenceMonitor()
    assert feed(monitor, "s1", [LOW] * 24 + [HIGH] * 6) is True


def test_below_alert_fraction_no_alarm():
    monitor = PersistenceMonitor()
    assert feed(monitor, "s1", [LOW] * 23 + [HIGH] * 7) is False


def test_order_does_not_matter():
    monitor = PersistenceMonitor()
    assert feed(monitor, "s1", [HIGH] * 6 + [LOW] * 24) is True


def test_threshold_is_strict():
    monitor = PersistenceMonitor()
    assert feed(monitor, "s1", [0.34] * 30) is False


def test_phases():
    monitor = PersistenceMonitor()
    assert monitor.phase("s1") is PersistencePhase.UNSEEDED
    feed(monitor, "s1", [LOW] * 10)
    assert monitor.phase("s1") is PersistencePhase.ACCUMULATING
    feed(monitor, "s1", [LOW] * 20, start=10.0)
    assert monitor.phase("s1") is PersistencePhase.JUDGING


def test_old_readings_pruned_by_time():
    monitor = PersistenceMonitor(window_sec=300)
    assert feed(monitor, "s1", [LOW] * 30) is True
    assert monitor.check("s1", LOW, now=400.0) is False
    assert len(monitor.history("s1")) == 1
    assert monitor.phase("s1") is PersistencePhase.ACCUMULATING


def test_reading_at_window_edge_is_kept():
    monitor = PersistenceMonitor(window_sec=300)
    monitor.check("s1", LOW, now=0.0)
    monitor.check("s1", LOW, now=300.0)
    assert len(monitor.history("s1")) == 2


def test_subjects_are_independent():
    monitor = PersistenceMonitor()
    feed(monitor, "a", [LOW] * 30)
    assert monitor.check("b", LOW, now=30.0) is False
    assert monitor.phase("b") is PersistencePhase.ACCUMULATING
    assert sorted(monitor.subjects) == ["a", "b"]


def test_separate_monitors_do_not_share_state():
    first = PersistenceMonitor()
    feed(first, "s1", [LOW] * 30)
    second = PersistenceMonitor()
    assert second.phase("s1") is PersistencePhase.UNSEEDED


@pytest.mark.parametrize("bad", [math.nan, math.inf, -0.5])
def test_invalid_readings_are_ignored(bad):
    monitor = PersistenceMonitor()
    feed(monitor, "s1", [LOW] * 29)
    assert monitor.check("s1", bad, now=29.0) is False
    assert len(monitor.history("s1")) == 29


def test_low_beta_fraction():
    monitor = PersistenceMonitor()
    feed(monitor, "s1", [LOW, LOW, LOW, HIGH])
    assert monitor.low_beta_fraction("s1") == pytest.approx(0.75)
    assert monitor.low_beta_fraction("nobody") == 0.0


def test_reset():
    monitor = PersistenceMonitor()
    feed(monitor, "a", [LOW] * 5)
    feed(monitor, "b", [LOW] * 5)
    monitor.reset("a")
    assert monitor.phase("a") is PersistencePhase.UNSEEDED
    assert monitor.phase("b") is PersistencePhase.ACCUMULATING
    monitor.reset()
    assert monitor.subjects == []


def test_uses_injected_clock():
    now = [1000.0]
    monitor = PersistenceMonitor(clock=lambda: now[0])
    monitor.check("s1", LOW)
    now[0] = 2000.0
    monitor.check("s1", LOW)
    assert [r.time for r in monitor.history("s1")] == [2000.0]


def test_custom_parameters():
    monitor = PersistenceMonitor(min_readings=3, low_beta_threshold=1.0, alert_fraction=0.5)
    assert feed(monitor, "s1", [0.5, 2.0, 0.5]) is True


@pytest.mark.parametrize("kwargs", [{"window_sec": 0}, {"min_readings": 0},
                                    {"alert_fraction": 0.0}, {"alert_fraction": 1.5}])
def test_invalid_configuration(kwargs):
    with pytest.raises(ConfigurationError):
        PersistenceMonitor(**kwargs)
