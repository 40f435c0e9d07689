"""
Configuration constants for EEG Focus

This module contains all configuration parameters for stream stabilization,
spectral analysis and focus/persistence detection. The module-level constants
are the documented defaults; AnalysisConfig bundles them so that a pipeline
can be run against a different parameterization without touching globals.
"""

import json
import logging
import numbers
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Tuple

from .exceptions import ConfigurationError

# ============================================================================
# STREAM CONFIGURATION
# ============================================================================

SAMPLING_RATE = 250               # Nominal sensor sampling rate (Hz)
MIN_SAMPLES_FOR_PROCESSING = 32   # Below this the spectrum is not computed
BUFFER_CAPACITY = 200             # Pending raw samples kept before dropping the oldest
RECENT_HISTORY_SIZE = 100         # Stabilized samples kept for live display
BUFFER_LOW_WATERMARK = 5          # Fewer pending samples than this -> "low"
BUFFER_HIGH_WATERMARK = 50        # More pending samples than this -> "high"

# ============================================================================
# SPECTRAL CONFIGURATION
# ============================================================================

PASSBAND = (5.0, 60.0)            # Bins kept for band averaging (Hz, inclusive)

# Frequency Bands (Hz). Theta starts at 5 and beta at 13 so that no bin is
# shared with the passband floor or with alpha.
FREQ_BANDS = {
    "delta": (0.5, 4.0),    # Always 0 with the 5-60 Hz passband
    "theta": (5.0, 8.0),
    "alpha": (8.0, 13.0),
    "beta": (13.0, 30.0),   # Focus, attention
    "gamma": (30.0, 60.0),
}

# ============================================================================
# DETECTION CONFIGURATION
# ============================================================================

MIN_BETA = 0.0001                 # Beta power mapped to a focus score of 0
MAX_BETA = 1.0                    # Beta power mapped to a focus score of 100

PERSISTENCE_WINDOW_SEC = 300.0    # Trailing window of beta readings per subject
PERSISTENCE_MIN_READINGS = 30     # Readings required before judging
LOW_BETA_THRESHOLD = 0.34         # A reading below this counts as low beta
LOW_BETA_ALERT_FRACTION = 0.8     # Fraction of low readings that raises the alarm

# ============================================================================
# RUNTIME CONFIGURATION
# ============================================================================

ANALYSIS_WINDOW_SEC = 2.0         # Live analysis window duration (seconds)
STATUS_INTERVAL_SEC = 2.0         # Console status print interval (seconds)
STAGE_DURATION_SEC = 15.0         # Default duration of a recording stage


_INT_FIELDS = {"min_samples", "buffer_capacity", "history_size", "low_watermark",
               "high_watermark", "persistence_min_readings"}
_FLOAT_FIELDS = {"sampling_rate", "min_beta", "max_beta", "persistence_window_sec",
                 "low_beta_threshold", "low_beta_alert_fraction", "analysis_window_sec"}


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(number)


def _as_range(value: Any) -> Tuple[float, float]:
    if isinstance(value, (str, bytes)):
        raise TypeError(f"expected a [low, high] pair, got {value!r}")
    low, high = value
    return float(low), float(high)


@dataclass
class AnalysisConfig:
    """
    Parameters for the stabilization and analysis pipeline

    Every field defaults to the module constant of the same meaning, so
    AnalysisConfig() reproduces the reference behaviour. Override fields
    to test the pipeline against other parameterizations.
    """

    sampling_rate: float = SAMPLING_RATE
    min_samples: int = MIN_SAMPLES_FOR_PROCESSING
    buffer_capacity: int = BUFFER_CAPACITY
    history_size: int = RECENT_HISTORY_SIZE
    low_watermark: int = BUFFER_LOW_WATERMARK
    high_watermark: int = BUFFER_HIGH_WATERMARK
    passband: Tuple[float, float] = PASSBAND
    freq_bands: Dict[str, Tuple[float, float]] = field(default_factory=lambda: dict(FREQ_BANDS))
    min_beta: float = MIN_BETA
    max_beta: float = MAX_BETA
    persistence_window_sec: float = PERSISTENCE_WINDOW_SEC
    persistence_min_readings: int = PERSISTENCE_MIN_READINGS
    low_beta_threshold: float = LOW_BETA_THRESHOLD
    low_beta_alert_fraction: float = LOW_BETA_ALERT_FRACTION
    analysis_window_sec: float = ANALYSIS_WINDOW_SEC

    @property
    def interval_ms(self) -> float:
        """Nominal inter-sample interval in milliseconds"""
        return 1000.0 / self.sampling_rate

    def validate(self) -> "AnalysisConfig":
        """
        Check that the parameters describe a possible pipeline

        Raises:
            ConfigurationError: on any impossible static parameter
        """
        for name in sorted(_INT_FIELDS | _FLOAT_FIELDS):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
        if self.sampling_rate <= 0:
            raise ConfigurationError(f"sampling_rate must be positive, got {self.sampling_rate}")
        if self.min_samples < 2:
            raise ConfigurationError(f"min_samples must be at least 2, got {self.min_samples}")
        if self.buffer_capacity < 1 or self.history_size < 1:
            raise ConfigurationError("buffer_capacity and history_size must be at least 1")
        if self.low_watermark > self.high_watermark:
            raise ConfigurationError("low_watermark must not exceed high_watermark")
        low, high = self.passband
        if low < 0 or high <= low:
            raise ConfigurationError(f"Invalid passband: {self.passband}")
        for name, (band_low, band_high) in self.freq_bands.items():
            if band_high < band_low:
                raise ConfigurationError(f"Invalid range for band '{name}': {(band_low, band_high)}")
        if self.max_beta <= self.min_beta:
            raise ConfigurationError("max_beta must be greater than min_beta")
        if self.persistence_window_sec <= 0 or self.persistence_min_readings < 1:
            raise ConfigurationError("Persistence window and minimum readings must be positive")
        if not 0.0 < self.low_beta_alert_fraction <= 1.0:
            raise ConfigurationError("low_beta_alert_fraction must be in (0, 1]")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        """Build a validated config from a mapping, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logging.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        try:
            for name, value in values.items():
                if name in _INT_FIELDS:
                    values[name] = _as_int(value)
                elif name in _FLOAT_FIELDS:
                    values[name] = float(value)
            if "passband" in values:
                values["passband"] = _as_range(values["passband"])
            if "freq_bands" in values:
                values["freq_bands"] = {str(k): _as_range(v) for k, v in values["freq_bands"].items()}
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid config value: {e}") from e
        return cls(**values).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: str) -> AnalysisConfig:
    """
    Load an AnalysisConfig from a JSON file

    Args:
        path: JSON file with any subset of AnalysisConfig fields

    Returns:
        AnalysisConfig: validated configuration
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a JSON object: {path}")
    logging.info(f"Loaded config: {path}")
    return AnalysisConfig.from_dict(data)
