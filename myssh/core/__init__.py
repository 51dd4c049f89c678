"""
Core module containing domain models, exceptions, and client interfaces.

This module defines the abstractions of the myssh package, independent of
the transport library that implements the SSH protocol.
"""

from .interfaces.clients import ISSHClient, SessionState
from .domain.results import CommandResult
from .exceptions import (
    SSHException,
    ConfigurationError,
    SSHConnectionError,
    ConnectionTimeoutError,
    ExecChannelError,
    TransferError,
)

__all__ = [
    "ISSHClient",
    "SessionState",
    "CommandResult",
    "SSHException",
    "ConfigurationError",
    "SSHConnectionError",
    "ConnectionTimeoutError",
    "ExecChannelError",
    "TransferError",
]
