"""
EEG data acquisition and stream stabilization

This module handles buffering of irregularly arriving raw samples, the rate
stabilizer that turns them into a uniform series, and a synthetic source for
running without hardware.
"""

from .sample_buffer import SampleBuffer
from .stabilizer import RateStabilizer
from .sources import FakeEEGSource

__all__ = ['SampleBuffer', 'RateStabilizer', 'FakeEEGSource']
