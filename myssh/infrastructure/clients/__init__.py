"""
Client implementations.

This module provides the asyncssh-backed SSH client.
"""

from .ssh import SSHClient, ConnectionConfig, HostKeyPolicy

__all__ = [
    "SSHClient",
    "ConnectionConfig",
    "HostKeyPolicy",
]
