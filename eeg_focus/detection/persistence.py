"""
Sustained low-beta detection

This module tracks beta power per subject over a trailing time window and
raises an alarm when most recent readings are below a low-beta cutoff.
Unlike the stateless metrics, history is kept across calls, so each
PersistenceMonitor owns the histories of the subjects it has seen.
"""

import logging
import math
import threading
import time
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional

from ..core.config import (PERSISTENCE_WINDOW_SEC, PERSISTENCE_MIN_READINGS,
                           LOW_BETA_THRESHOLD, LOW_BETA_ALERT_FRACTION)
from ..core.data_types import BetaReading
from ..core.exceptions import ConfigurationError


class PersistencePhase(Enum):
    UNSEEDED = "unseeded"          # No readings for this subject
    ACCUMULATING = "accumulating"  # Fewer than the minimum readings
    JUDGING = "judging"            # Enough readings to raise the alarm


class PersistenceMonitor:
    """
    Per-subject rolling window of beta readings

    History for a subject is created on its first reading and pruned by age
    on every insert. The alarm is raised when at least alert_fraction of the
    retained readings are below low_beta_threshold, once min_readings are
    available.
    """

    def __init__(self, window_sec: float = PERSISTENCE_WINDOW_SEC,
                 min_readings: int = PERSISTENCE_MIN_READINGS,
                 low_beta_threshold: float = LOW_BETA_THRESHOLD,
                 alert_fraction: float = LOW_BETA_ALERT_FRACTION,
                 clock: Callable[[], float] = time.time):
        if window_sec <= 0:
            raise ConfigurationError(f"Window must be positive, got {window_sec}")
        if min_readings < 1:
            raise ConfigurationError(f"Minimum readings must be at least 1, got {min_readings}")
        if not 0.0 < alert_fraction <= 1.0:
            raise ConfigurationError(f"Alert fraction must be in (0, 1], got {alert_fraction}")

        self.window_sec = window_sec
        self.min_readings = min_readings
        self.low_beta_threshold = low_beta_threshold
        self.alert_fraction = alert_fraction
        self.clock = clock
        self._histories: Dict[str, Deque[BetaReading]] = {}
        self._lock = threading.Lock()

    def _prune(self, history: Deque[BetaReading], now: float):
        cutoff = now - self.window_sec
        while history and history[0].time < cutoff:
            history.popleft()

    def _low_fraction(self, history: Deque[BetaReading]) -> float:
        if not history:
            return 0.0
        low = sum(1 for r in history if r.beta_power < self.low_beta_threshold)
        return low / len(history)

    def check(self, subject_id: str, beta_power: float, now: Optional[float] = None) -> bool:
        """
        Record a beta reading and judge sustained low beta

        Args:
            subject_id: Subject identifier
            beta_power: Beta band power of the latest window
            now: Reading time in seconds (defaults to the monitor clock)

        Returns:
            bool: True if the low-beta alarm is raised
        """
        if now is None:
            now = self.clock()

        with self._lock:
            history = self._histories.setdefault(subject_id, deque())

            beta_power = float(beta_power)
            if math.isfinite(beta_power) and beta_power >= 0:
                history.append(BetaReading(time=now, beta_power=beta_power))
            else:
                logging.warning(f"Ignoring invalid beta power for {subject_id}: {beta_power}")

            self._prune(history, now)

            if len(history) < self.min_readings:
                return False

            return self._low_fraction(history) >= self.alert_fraction

    def phase(self, subject_id: str) -> PersistencePhase:
        with self._lock:
            history = self._histories.get(subject_id)
            if not history:
                return PersistencePhase.UNSEEDED
            if len(history) < self.min_readings:
                return PersistencePhase.ACCUMULATING
            return PersistencePhase.JUDGING

    def history(self, subject_id: str) -> List[BetaReading]:
        """Retained readings for a subject, oldest first"""
        with self._lock:
            return list(self._histories.get(subject_id, ()))

    def low_beta_fraction(self, subject_id: str) -> float:
        with self._lock:
            return self._low_fraction(self._histories.get(subject_id, deque()))

    def reset(self, subject_id: Optional[str] = None):
        """Forget one subject's history, or all histories"""
        with self._lock:
            if subject_id is None:
                self._histories.clear()
            else:
                self._histories.pop(subject_id, None)

    @property
    def subjects(self) -> List[str]:
        with self._lock:
            return list(self._histories)
