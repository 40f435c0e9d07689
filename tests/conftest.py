"""Shared pytest configuration and fixtures for the EEG Focus test suite."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from eeg_focus.core.data_types import StabilizedSample


@pytest.fixture
def sine_10hz():
    """2 seconds of a 10 Hz sine sampled at 250 Hz"""
    t = np.arange(500) / 250.0
    return np.sin(2 * np.pi * 10 * t)


@pytest.fixture
def stabilized_sine(sine_10hz):
    return [StabilizedSample(value=float(v), timestamp=4 * i) for i, v in enumerate(sine_10hz)]
