"""
Spectral engine

This module computes a single-segment power spectrum of a window of
stabilized samples. It is a simplified Welch estimate: one periodogram, no
taper window, no segment averaging.
"""

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from scipy import fft as sp_fft

from ..core.config import SAMPLING_RATE, MIN_SAMPLES_FOR_PROCESSING, AnalysisConfig
from ..core.data_types import Sample, StabilizedSample, SpectrumResult
from ..core.exceptions import ConfigurationError, InsufficientDataError, InvalidInputError

SampleLike = Union[float, int, Sample, StabilizedSample]


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (n >= 1)"""
    return 1 << (int(n) - 1).bit_length()


def sample_values(samples: Sequence[SampleLike], exclude_interpolated: bool = False) -> np.ndarray:
    """
    Extract the numeric values of a window

    Args:
        samples: Plain numbers or Sample/StabilizedSample objects
        exclude_interpolated: Drop samples held from the last known value

    Returns:
        np.ndarray: Values as float64 (samples,)
    """
    if isinstance(samples, np.ndarray) and samples.dtype != object:
        return samples.astype(np.float64, copy=False).ravel()

    values = []
    for s in samples:
        if hasattr(s, "value"):
            if exclude_interpolated and getattr(s, "interpolated", False):
                continue
            values.append(s.value)
        else:
            values.append(s)
    return np.asarray(values, dtype=np.float64)


class SpectralEngine:
    """
    Compute one-sided power spectra of sample windows

    Windows shorter than the sampling rate are first padded with their own
    mean (not zero) up to one second of data, then zero-padded to the next
    power of two. The mean padding avoids a step at the end of the data that
    would otherwise leak into every bin.
    """

    def __init__(self, sampling_rate: float = SAMPLING_RATE,
                 min_samples: int = MIN_SAMPLES_FOR_PROCESSING):
        if sampling_rate <= 0:
            raise ConfigurationError(f"Sampling rate must be positive, got {sampling_rate}")
        if min_samples < 2:
            raise ConfigurationError(f"Minimum samples must be at least 2, got {min_samples}")
        self.sampling_rate = sampling_rate
        self.min_samples = min_samples

    def pad(self, values: np.ndarray) -> np.ndarray:
        """
        Pad a window to the FFT length

        Args:
            values: Raw window values (samples,)

        Returns:
            np.ndarray: Padded values whose length is a power of two
        """
        target_len = int(self.sampling_rate)
        if len(values) < target_len:
            values = np.concatenate([values, np.full(target_len - len(values), values.mean())])

        n_fft = next_power_of_two(len(values))
        if n_fft > len(values):
            values = np.concatenate([values, np.zeros(n_fft - len(values))])
        return values

    def compute_psd(self, values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute the power spectrum of a window

        Args:
            values: Window values (samples,)

        Returns:
            Tuple[frequencies, power]: N/2 bins from 0 Hz upwards

        Raises:
            InsufficientDataError: fewer than min_samples values
            InvalidInputError: non-finite values in the window
        """
        data = np.asarray(values, dtype=np.float64).ravel()
        if len(data) < self.min_samples:
            raise InsufficientDataError(len(data), self.min_samples)
        if not np.all(np.isfinite(data)):
            raise InvalidInputError("Window contains non-finite values")

        padded = self.pad(data)
        n_fft = len(padded)

        spectrum = sp_fft.rfft(padded)[: n_fft // 2]
        power = (spectrum.real ** 2 + spectrum.imag ** 2) / n_fft
        freqs = np.arange(n_fft // 2) * self.sampling_rate / n_fft

        logging.debug(f"PSD computed: {len(data)} samples, n_fft={n_fft}, "
                      f"resolution={self.sampling_rate / n_fft:.3f} Hz")
        return freqs, power

    def analyze(self, values: Sequence[float]) -> SpectrumResult:
        """
        Compute the spectrum, degrading to an insufficient-data result

        Args:
            values: Window values (samples,)

        Returns:
            SpectrumResult: spectrum, or empty arrays with error set
        """
        data = np.asarray(values, dtype=np.float64).ravel()
        try:
            freqs, power = self.compute_psd(data)
        except InsufficientDataError as e:
            logging.debug(str(e))
            return SpectrumResult.insufficient(self.sampling_rate, len(data), str(e))

        return SpectrumResult(
            frequencies=freqs,
            power=power,
            sampling_rate=self.sampling_rate,
            n_fft=2 * len(freqs),
            n_samples=len(data),
        )


def analyze_window(samples: Sequence[SampleLike], sampling_rate: float = SAMPLING_RATE,
                   config: Optional[AnalysisConfig] = None,
                   exclude_interpolated: bool = False) -> SpectrumResult:
    """
    Compute the power spectrum of a sample window

    Args:
        samples: Plain numbers or Sample/StabilizedSample objects
        sampling_rate: Sampling rate of the window (Hz)
        config: Optional config providing min_samples
        exclude_interpolated: Drop held samples before the transform

    Returns:
        SpectrumResult: spectrum, or an insufficient-data result
    """
    min_samples = config.min_samples if config is not None else MIN_SAMPLES_FOR_PROCESSING
    engine = SpectralEngine(sampling_rate, min_samples)
    return engine.analyze(sample_values(samples, exclude_interpolated))
