"""
myssh - A simple asyncio SSH client built on asyncssh.

This package wraps an asyncssh session with connection retries and a
timeout, and exposes command execution, SFTP file transfer and interactive
shells as coroutines.
"""

__version__ = "0.1.0"

# Public API exports
from .core.domain.results import CommandResult
from .core.interfaces.clients import ISSHClient, SessionState
from .core.exceptions import (
    SSHException,
    ConfigurationError,
    SSHConnectionError,
    ConnectionTimeoutError,
    ExecChannelError,
    TransferError,
)
from .infrastructure.clients.ssh import SSHClient, ConnectionConfig, HostKeyPolicy

__all__ = [
    "SSHClient",
    "ConnectionConfig",
    "HostKeyPolicy",
    "CommandResult",
    "ISSHClient",
    "SessionState",
    "SSHException",
    "ConfigurationError",
    "SSHConnectionError",
    "ConnectionTimeoutError",
    "ExecChannelError",
    "TransferError",
]
