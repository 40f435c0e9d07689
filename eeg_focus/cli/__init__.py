"""
Command-line interface

This module provides the eeg-focus command and the real-time processing loop.
"""

from .main import main, create_parser

__all__ = ['main', 'create_parser']
