"""
Rate stabilizer (jitter buffer output stage)

Converts the bursty contents of a SampleBuffer into a uniformly spaced
series: exactly one output sample per tick, holding the last known value
when nothing new has arrived.
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, List, Optional

from ..core.config import SAMPLING_RATE, RECENT_HISTORY_SIZE
from ..core.data_types import StabilizedSample
from ..core.exceptions import ConfigurationError
from .sample_buffer import SampleBuffer

SampleListener = Callable[[StabilizedSample], None]


class RateStabilizer:
    """
    Emit one StabilizedSample per nominal sample interval

    Output timestamps are derived from the grid (origin + k * interval), never
    from raw arrival times, so spacing is uniform regardless of input jitter.
    Samples synthesized from the last known value are flagged as interpolated.
    """

    def __init__(self, buffer: SampleBuffer, sampling_rate: float = SAMPLING_RATE,
                 history_size: int = RECENT_HISTORY_SIZE):
        if sampling_rate <= 0:
            raise ConfigurationError(f"Sampling rate must be positive, got {sampling_rate}")
        if history_size < 1:
            raise ConfigurationError(f"History size must be at least 1, got {history_size}")

        self.buffer = buffer
        self.sampling_rate = sampling_rate
        self.interval_ms = 1000.0 / sampling_rate
        self._recent = deque(maxlen=history_size)
        self._listeners: List[SampleListener] = []

        self._last_value: Optional[float] = None
        self._origin_ms: Optional[int] = None
        self._emitted = 0
        self._held = 0

        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def held_count(self) -> int:
        """Number of interpolated samples emitted since the last reset"""
        return self._held

    def add_listener(self, listener: SampleListener):
        """Register a callback receiving every emitted sample"""
        self._listeners.append(listener)

    def remove_listener(self, listener: SampleListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def tick(self) -> Optional[StabilizedSample]:
        """
        Advance the output grid by one interval

        Returns:
            StabilizedSample: the emitted sample, or None if the stream has
            not started yet
        """
        with self._state_lock:
            raw = self.buffer.pop()
            if raw is not None:
                if self._origin_ms is None:
                    self._origin_ms = raw.timestamp
                self._last_value = raw.value
                interpolated = False
            elif self._last_value is not None:
                interpolated = True
            else:
                return None

            timestamp = self._origin_ms + int(round(self._emitted * self.interval_ms))
            sample = StabilizedSample(value=self._last_value, timestamp=timestamp,
                                      interpolated=interpolated)
            self._emitted += 1
            if interpolated:
                self._held += 1
            self._recent.append(sample)

        for listener in list(self._listeners):
            try:
                listener(sample)
            except Exception as e:
                logging.error(f"Sample listener failed: {e}")

        return sample

    def recent(self) -> List[StabilizedSample]:
        """Most recent emitted samples, oldest first"""
        with self._state_lock:
            return list(self._recent)

    def buffer_health(self) -> str:
        return self.buffer.health()

    def start(self):
        """Start ticking on a background thread at the nominal interval"""
        if self.is_running:
            logging.warning("Rate stabilizer already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="rate-stabilizer", daemon=True)
        self._thread.start()
        logging.info(f"Rate stabilizer started: {self.sampling_rate} Hz "
                     f"({self.interval_ms:.2f} ms interval)")

    def _run(self):
        period = self.interval_ms / 1000.0
        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            self.tick()
            next_tick += period
            delay = next_tick - time.monotonic()
            if delay < 0:
                # Fell behind; resume pacing from now instead of bursting
                next_tick = time.monotonic()
                delay = 0.0
            self._stop_event.wait(delay)

    def stop(self):
        """
        Stop the tick timer and reset to a clean state

        Pending raw samples, the last known value and the timestamp origin are
        all discarded so that the next session does not hold values over from
        this one.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=max(1.0, 5 * self.interval_ms / 1000.0))
            self._thread = None

        with self._state_lock:
            self.buffer.clear()
            self._last_value = None
            self._origin_ms = None
            self._emitted = 0
            self._held = 0
            self._recent.clear()

        logging.info("Rate stabilizer stopped")
