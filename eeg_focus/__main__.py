"""
Main entry point for EEG Focus package

This allows running the package with: python -m eeg_focus
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
