"""
Raw sample buffer

The transport pushes readings whenever they arrive, with no timing guarantees.
This buffer absorbs the bursts in a bounded FIFO that the rate stabilizer
drains on its own clock.
"""

import logging
import math
import threading
from collections import deque
from typing import List, Optional

from ..core.config import BUFFER_CAPACITY, BUFFER_LOW_WATERMARK, BUFFER_HIGH_WATERMARK
from ..core.data_types import Sample
from ..core.exceptions import ConfigurationError


class SampleBuffer:
    """
    Bounded, thread-safe FIFO of raw samples

    push() is called from the ingestion callback and never blocks; when the
    buffer is full the oldest pending sample is dropped. pop() is called from
    the stabilizer tick.
    """

    def __init__(self, capacity: int = BUFFER_CAPACITY,
                 low_watermark: int = BUFFER_LOW_WATERMARK,
                 high_watermark: int = BUFFER_HIGH_WATERMARK):
        if capacity < 1:
            raise ConfigurationError(f"Buffer capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.low_watermark = low_watermark
        self.high_watermark = high_watermark
        self.dropped = 0
        self._queue = deque()
        self._lock = threading.Lock()

    def push(self, value: float, arrival_time_ms: int) -> bool:
        """
        Enqueue a raw reading

        Args:
            value: Sensor reading
            arrival_time_ms: Arrival time in milliseconds

        Returns:
            bool: False if the reading was rejected as non-finite
        """
        value = float(value)
        if not math.isfinite(value):
            logging.warning(f"Rejected non-finite sample: {value}")
            return False

        sample = Sample(value=value, timestamp=int(arrival_time_ms))
        with self._lock:
            self._queue.append(sample)
            overflow = len(self._queue) - self.capacity
            for _ in range(max(overflow, 0)):
                self._queue.popleft()
            if overflow > 0:
                self.dropped += overflow

        if overflow > 0:
            logging.debug(f"Buffer overflow: dropped {overflow} oldest sample(s), {self.dropped} total")
        return True

    def pop(self) -> Optional[Sample]:
        """Dequeue the oldest pending sample, or None if empty"""
        with self._lock:
            if not self._queue:
                return None
            return self._queue.popleft()

    def drain(self) -> List[Sample]:
        """Dequeue all pending samples in arrival order"""
        with self._lock:
            samples = list(self._queue)
            self._queue.clear()
        return samples

    def clear(self):
        with self._lock:
            self._queue.clear()

    def health(self) -> str:
        """
        Classify occupancy for diagnostics

        Returns:
            str: "low", "normal" or "high"
        """
        pending = len(self)
        if pending < self.low_watermark:
            return "low"
        if pending > self.high_watermark:
            return "high"
        return "normal"

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)
