import threading

import numpy as np

from eeg_focus.acquisition.sample_buffer import SampleBuffer
from eeg_focus.acquisition.sources import FakeEEGSource
from eeg_focus.core.config import LOW_BETA_THRESHOLD, PERSISTENCE_MIN_READINGS
from eeg_focus.detection.persistence import PersistenceMonitor
from eeg_focus.session.records import analyze_samples


def test_burst_arrivals_are_ordered_and_jittered():
    source = FakeEEGSource(250, jitter_ms=6.0, gap_probability=0.0, seed=1)
    burst = source.generate_burst(1.0, start_ms=0)

    assert len(burst) == 250
    arrivals = [s.timestamp for s in burst]
    assert arrivals == sorted(arrivals)
    assert arrivals[0] >= 0
    assert arrivals[-1] <= 996 + 6
    assert np.all(np.isfinite([s.value for s in burst]))


def test_gaps_drop_samples():
    source = FakeEEGSource(250, gap_probability=0.5, seed=2)
    burst = source.generate_burst(1.0, start_ms=0)
    assert 0 < len(burst) < 250


def test_time_advances_between_bursts():
    source = FakeEEGSource(250, seed=3)
    source.generate_values(0.5)
    assert source.time == 0.5


def test_seeded_sources_are_reproducible():
    a = FakeEEGSource(250, seed=4).generate_values(1.0)
    b = FakeEEGSource(250, seed=4).generate_values(1.0)
    np.testing.assert_array_equal(a, b)


def test_stream_into_stops_on_event():
    source = FakeEEGSource(250, seed=5)
    buf = SampleBuffer(capacity=10000)
    stop = threading.Event()
    timer = threading.Timer(0.3, stop.set)
    timer.start()
    source.stream_into(buf, stop, burst_sec=0.05)
    timer.join()
    assert len(buf) > 0


def test_drowsy_half_of_cycle():
    source = FakeEEGSource(250, seed=6, drowsy_cycle_time=600.0)
    assert not source.is_drowsy
    source.time = 299.0
    assert not source.is_drowsy
    source.time = 300.0
    assert source.is_drowsy
    source.time = 600.0
    assert not source.is_drowsy

    assert not FakeEEGSource(250, drowsy_cycle_time=None).is_drowsy


def test_beta_power_crosses_low_beta_threshold():
    alert = FakeEEGSource(250, seed=7)
    alert_beta = analyze_samples(alert.generate_values(2.0)).band_powers.beta
    assert alert_beta > LOW_BETA_THRESHOLD

    drowsy = FakeEEGSource(250, seed=7)
    drowsy.time = 400.0
    drowsy_beta = analyze_samples(drowsy.generate_values(2.0)).band_powers.beta
    assert drowsy_beta < LOW_BETA_THRESHOLD


def test_sustained_drowsiness_raises_alarm():
    source = FakeEEGSource(250, seed=8)
    source.time = 300.0
    monitor = PersistenceMonitor()

    warnings = []
    for i in range(PERSISTENCE_MIN_READINGS):
        analysis = analyze_samples(source.generate_values(2.0), monitor=monitor,
                                   subject_id="alice", now=2.0 * i)
        warnings.append(analysis.low_beta_warning)

    assert not any(warnings[:-1])
    assert warnings[-1] is True
