"""
Configuration management infrastructure.

This module provides configuration models and loading from YAML/JSON files
and environment variables.
"""

from .models import ApplicationConfig, SSHConfig, LoggingConfig
from .loader import ConfigLoader

__all__ = [
    "ApplicationConfig",
    "SSHConfig",
    "LoggingConfig",
    "ConfigLoader",
]
