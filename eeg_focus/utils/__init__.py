"""
Utility functions and helpers

This module contains utility functions for the EEG Focus system.
"""

from .logging_setup import setup_logging

__all__ = ['setup_logging']
