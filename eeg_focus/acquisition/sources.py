"""
Synthetic EEG stream

The wireless transport that delivers real readings lives outside this
package. This module provides a stand-in that produces a single-channel
signal delivered the way the sensor delivers it: in irregular bursts, with
jittered arrival times and occasional gaps.
"""

import logging
import threading
import time
from typing import List, Optional

import numpy as np

from ..core.config import SAMPLING_RATE
from ..core.data_types import Sample
from .sample_buffer import SampleBuffer


class FakeEEGSource:
    """
    Generate synthetic single-channel EEG with irregular arrival timing

    The signal is 1/f-ish noise plus an alpha (10 Hz) and a beta (20 Hz)
    rhythm whose amplitudes slowly trade off, so the focus score moves over
    a run. The second half of every drowsiness cycle fades the beta rhythm
    out; a run that stays drowsy for a few minutes raises the low-beta alarm.
    """

    def __init__(self, fs: float = SAMPLING_RATE, jitter_ms: float = 6.0,
                 gap_probability: float = 0.02, seed: Optional[int] = None,
                 drowsy_cycle_time: Optional[float] = 600.0):
        self.fs = fs
        self.jitter_ms = jitter_ms
        self.gap_probability = gap_probability
        self.time = 0.0
        self.state_cycle_time = 20.0  # Alpha/beta trade-off period (seconds)
        self.drowsy_cycle_time = drowsy_cycle_time  # Alert then drowsy halves (seconds), None to disable
        self.drowsy_beta_amp = 0.1
        self.rng = np.random.default_rng(seed)

    @property
    def is_drowsy(self) -> bool:
        if not self.drowsy_cycle_time:
            return False
        return self.time % self.drowsy_cycle_time >= self.drowsy_cycle_time / 2

    def generate_values(self, duration_sec: float) -> np.ndarray:
        """
        Generate synthetic signal values

        Args:
            duration_sec: Duration of data to generate

        Returns:
            np.ndarray: Signal values (samples,)
        """
        n_samples = int(duration_sec * self.fs)
        t = self.time + np.arange(n_samples) / self.fs

        # Base noise
        data = self.rng.standard_normal(n_samples) * 0.2

        phase = 2 * np.pi * self.time / self.state_cycle_time
        alpha_amp = 0.6 + 0.4 * np.sin(phase)
        if self.is_drowsy:
            beta_amp = self.drowsy_beta_amp
        else:
            beta_amp = 0.5 + 0.4 * np.cos(phase)
        data += alpha_amp * np.sin(2 * np.pi * 10 * t + self.rng.random() * 2 * np.pi)
        data += beta_amp * np.sin(2 * np.pi * 20 * t + self.rng.random() * 2 * np.pi)

        self.time += n_samples / self.fs
        return data

    def generate_burst(self, duration_sec: float, start_ms: Optional[int] = None) -> List[Sample]:
        """
        Generate samples with jittered arrival times

        Args:
            duration_sec: Signal duration covered by the burst
            start_ms: Arrival time of the first sample (defaults to now)

        Returns:
            List[Sample]: Samples in arrival order, some possibly missing
        """
        if start_ms is None:
            start_ms = int(time.time() * 1000)

        values = self.generate_values(duration_sec)
        nominal = start_ms + np.arange(len(values)) * (1000.0 / self.fs)
        jitter = self.rng.uniform(0, self.jitter_ms, len(values))
        # Arrival order is preserved; jitter only delays
        arrivals = np.maximum.accumulate(nominal + jitter)
        keep = self.rng.random(len(values)) >= self.gap_probability

        return [Sample(value=float(v), timestamp=int(a))
                for v, a, k in zip(values, arrivals, keep) if k]

    def stream_into(self, buffer: SampleBuffer, stop_event: threading.Event,
                    burst_sec: float = 0.1):
        """
        Push bursts into a buffer in real time until stop_event is set

        Args:
            buffer: Destination buffer (the ingestion callback)
            stop_event: Set to stop streaming
            burst_sec: Signal duration delivered per burst
        """
        logging.info(f"Synthetic stream started: {self.fs} Hz, {burst_sec * 1000:.0f} ms bursts")
        while not stop_event.is_set():
            for sample in self.generate_burst(burst_sec):
                buffer.push(sample.value, sample.timestamp)
            # Irregular delivery: bursts come a little early or late
            stop_event.wait(burst_sec * self.rng.uniform(0.7, 1.3))
        logging.info("Synthetic stream stopped")
