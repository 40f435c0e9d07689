"""
Mental state detection

This module implements the focus score and the sustained low-beta
persistence monitor.
"""

from .focus import FocusNormalizer, focus_score
from .persistence import PersistenceMonitor, PersistencePhase

__all__ = ['FocusNormalizer', 'focus_score', 'PersistenceMonitor', 'PersistencePhase']
