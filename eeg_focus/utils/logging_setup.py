"""
Logging configuration for EEG Focus
"""

import logging


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the command line tools

    Args:
        debug: If True, enable DEBUG level logging (per-window spectra,
            buffer overflows)
    """
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if debug:
        logging.debug("Debug logging enabled")
