"""
EEG Focus - Stream stabilization and spectral focus analysis

A modular Python package that turns an irregular single-channel EEG stream
into a uniformly sampled signal and derives band powers, a focus score and a
sustained low-beta alarm from it.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.config import AnalysisConfig, load_config
from .core.data_types import Sample, StabilizedSample, SpectrumResult, BandPowers
from .core.exceptions import EEGFocusError, InsufficientDataError, InvalidInputError, ConfigurationError
from .acquisition.sample_buffer import SampleBuffer
from .acquisition.stabilizer import RateStabilizer
from .acquisition.sources import FakeEEGSource
from .processing.spectral import SpectralEngine, analyze_window
from .processing.features import BandPowerExtractor, band_powers
from .detection.focus import FocusNormalizer, focus_score
from .detection.persistence import PersistenceMonitor, PersistencePhase
from .session.stages import Stage, StageRecorder, StageWindow
from .session.records import StageSummary, WindowAnalysis, analyze_samples, summarize_stage

__all__ = [
    'AnalysisConfig', 'load_config',
    'Sample', 'StabilizedSample', 'SpectrumResult', 'BandPowers',
    'EEGFocusError', 'InsufficientDataError', 'InvalidInputError', 'ConfigurationError',
    'SampleBuffer', 'RateStabilizer', 'FakeEEGSource',
    'SpectralEngine', 'analyze_window',
    'BandPowerExtractor', 'band_powers',
    'FocusNormalizer', 'focus_score',
    'PersistenceMonitor', 'PersistencePhase',
    'Stage', 'StageRecorder', 'StageWindow',
    'StageSummary', 'WindowAnalysis', 'analyze_samples', 'summarize_stage',
]
