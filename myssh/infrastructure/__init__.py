"""
Infrastructure layer containing external dependencies and I/O operations.

This layer handles configuration files, logging, and communication with
the SSH transport library.
"""

from .config.loader import ConfigLoader
from .logging.setup import setup_logging

__all__ = [
    "ConfigLoader",
    "setup_logging",
]
