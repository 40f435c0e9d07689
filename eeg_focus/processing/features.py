"""
EEG band power extraction

This module partitions a power spectrum into the canonical frequency bands.
Bins are first restricted to the analysis passband, then averaged per band.
"""

import logging
from typing import Dict, Tuple

import numpy as np

from ..core.config import FREQ_BANDS, PASSBAND
from ..core.data_types import BandPowers, SpectrumResult


class BandPowerExtractor:
    """
    Extract mean band powers from a spectrum

    Bands are averaged over passband bins only. Delta (0.5-4 Hz) lies below
    the 5 Hz passband floor and is therefore always 0.
    """

    def __init__(self, passband: Tuple[float, float] = PASSBAND,
                 freq_bands: Dict[str, Tuple[float, float]] = FREQ_BANDS):
        self.passband = passband
        self.freq_bands = freq_bands

    def band_power(self, freqs: np.ndarray, power: np.ndarray,
                   freq_range: Tuple[float, float]) -> float:
        """
        Average power in a frequency band

        Args:
            freqs: Bin frequencies (already passband-filtered)
            power: Bin powers aligned with freqs
            freq_range: (low_freq, high_freq) in Hz, inclusive

        Returns:
            float: Mean power of the bins in range, 0.0 if there are none
        """
        freq_mask = (freqs >= freq_range[0]) & (freqs <= freq_range[1])

        if not np.any(freq_mask):
            return 0.0

        return float(np.mean(power[freq_mask]))

    def extract(self, spectrum: SpectrumResult) -> BandPowers:
        """
        Extract all band powers from a spectrum

        Args:
            spectrum: Spectral engine output

        Returns:
            BandPowers: Mean power per band, all zero when no bin survives
            the passband (including insufficient-data spectra)
        """
        freqs = np.asarray(spectrum.frequencies, dtype=np.float64)
        power = np.asarray(spectrum.power, dtype=np.float64)

        low, high = self.passband
        passband_mask = (freqs >= low) & (freqs <= high)
        if not np.any(passband_mask):
            if spectrum.ok:
                logging.debug("No spectrum bins inside the passband")
            return BandPowers.zeros()

        freqs = freqs[passband_mask]
        power = power[passband_mask]

        powers = BandPowers()
        for band_name, freq_range in self.freq_bands.items():
            if hasattr(powers, band_name):
                setattr(powers, band_name, self.band_power(freqs, power, freq_range))
            else:
                logging.warning(f"Ignoring unknown band: {band_name}")
        return powers


def band_powers(spectrum: SpectrumResult) -> BandPowers:
    """Band powers of a spectrum with the default passband and bands"""
    return BandPowerExtractor().extract(spectrum)
