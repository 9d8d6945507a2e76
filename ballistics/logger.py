"""
Logging
=======
Package logger for the ballistics core.

Console output at INFO level is enabled on import; a DEBUG file log can be
switched on for tracing the zero search step by step:

    from ballistics.logger import enable_file_logging, disable_file_logging

    enable_file_logging("zero_debug.log")
    ...
    disable_file_logging()
"""

import logging
from typing import Optional

__all__ = ('logger',
           'enable_file_logging',
           'disable_file_logging',
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.DEBUG)

logger: logging.Logger = logging.getLogger('ballistics')
logger.addHandler(console_handler)
logger.setLevel(logging.INFO)

file_handler: Optional[logging.FileHandler] = None


def enable_file_logging(filename: str = "ballistics_debug.log") -> None:
    """
    Log everything down to DEBUG into *filename* (append mode).

    Replaces a previously enabled file handler.
    """
    global file_handler
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
    logger.addHandler(file_handler)
    logger.setLevel(logging.DEBUG)


def disable_file_logging() -> None:
    """Remove and close the file handler; safe to call repeatedly."""
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
        logger.setLevel(logging.INFO)
