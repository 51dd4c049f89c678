"""
SSH client implementation for the myssh package.

This module provides the connection manager together with its
configuration record and host key policy.
"""

from .client import SSHClient
from .config import ConnectionConfig, HostKeyPolicy, load_default_key, translate_extra_options

__all__ = [
    "SSHClient",
    "ConnectionConfig",
    "HostKeyPolicy",
    "load_default_key",
    "translate_extra_options",
]
