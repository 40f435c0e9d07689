"""
Core data types for EEG Focus

This module defines the fundamental data structures used throughout the system
for representing raw and stabilized samples, spectra and band powers.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np


@dataclass(frozen=True)
class Sample:
    """A raw reading as delivered by the transport"""
    value: float
    timestamp: int            # Arrival time (ms)


@dataclass(frozen=True)
class StabilizedSample:
    """A reading on the uniform output grid"""
    value: float
    timestamp: int            # Grid time (ms)
    interpolated: bool = False  # True when held from the last known value

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "timestamp": self.timestamp, "interpolated": self.interpolated}


@dataclass
class SpectrumResult:
    """
    Single-segment power spectrum

    frequencies and power are index-aligned. When the input window was too
    short, both are empty and error holds the reason.
    """
    frequencies: np.ndarray
    power: np.ndarray
    sampling_rate: float
    n_fft: int = 0
    n_samples: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def insufficient(cls, sampling_rate: float, n_samples: int, message: str) -> "SpectrumResult":
        return cls(
            frequencies=np.zeros(0),
            power=np.zeros(0),
            sampling_rate=sampling_rate,
            n_fft=0,
            n_samples=n_samples,
            error=message,
        )


@dataclass
class BandPowers:
    """Container for frequency band powers"""
    delta: float = 0.0
    theta: float = 0.0
    alpha: float = 0.0
    beta: float = 0.0
    gamma: float = 0.0

    @classmethod
    def zeros(cls) -> "BandPowers":
        return cls()

    def to_dict(self) -> Dict[str, float]:
        return {
            "delta": float(self.delta),
            "theta": float(self.theta),
            "alpha": float(self.alpha),
            "beta": float(self.beta),
            "gamma": float(self.gamma),
        }


@dataclass
class BetaReading:
    """A single beta-power observation held by the persistence monitor"""
    time: float               # Seconds
    beta_power: float
