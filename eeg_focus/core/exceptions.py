"""
Error types for EEG Focus
"""


class EEGFocusError(Exception):
    """Base class for all EEG Focus errors"""


class InsufficientDataError(EEGFocusError):
    """Too few samples for spectral analysis (recoverable - wait for more data)"""

    def __init__(self, n_samples: int, required: int):
        self.n_samples = n_samples
        self.required = required
        super().__init__(
            f"Insufficient data for processing. Need at least {required} samples, got {n_samples}."
        )


class InvalidInputError(EEGFocusError, ValueError):
    """Non-finite or negative value where a non-negative quantity is required"""


class ConfigurationError(EEGFocusError, ValueError):
    """Impossible static parameter, e.g. a non-positive sampling rate"""
