"""
EEG signal processing components

This module contains the spectral engine and band power extraction used
for both live and per-stage analysis.
"""

from .spectral import SpectralEngine, analyze_window
from .features import BandPowerExtractor, band_powers

__all__ = ['SpectralEngine', 'analyze_window', 'BandPowerExtractor', 'band_powers']
