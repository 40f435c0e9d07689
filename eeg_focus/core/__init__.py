"""
Core data types, configuration and errors for EEG Focus

This module contains the fundamental data classes used throughout the system.
"""

from .data_types import Sample, StabilizedSample, SpectrumResult, BandPowers, BetaReading
from .exceptions import EEGFocusError, InsufficientDataError, InvalidInputError, ConfigurationError
from .config import *

__all__ = [
    'Sample', 'StabilizedSample', 'SpectrumResult', 'BandPowers', 'BetaReading',
    'EEGFocusError', 'InsufficientDataError', 'InvalidInputError', 'ConfigurationError',
    'AnalysisConfig', 'load_config',
]
