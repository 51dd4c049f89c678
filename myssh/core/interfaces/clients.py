"""
Client interfaces for the SSH connection manager.

This module defines the session states and the contract that SSH client
implementations expose to callers.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional

from ..domain.results import CommandResult


ProgressCallback = Callable[[str, str, float], None]


class SessionState(Enum):
    """Session connection state."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ISSHClient(ABC):
    """Interface for SSH client implementation."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish the SSH session, retrying as configured."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Tear down the SSH session without waiting for acknowledgment."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the session is established."""
        pass

    @abstractmethod
    def get_status(self) -> SessionState:
        """Get current session state."""
        pass

    @abstractmethod
    async def exec(self, command: str) -> CommandResult:
        """Execute a command on the remote server."""
        pass

    @abstractmethod
    async def upload_file(
        self,
        local_path: str,
        remote_path: str,
        progress: Optional[ProgressCallback] = None
    ) -> None:
        """Upload a file to the remote server."""
        pass

    @abstractmethod
    async def download_file(
        self,
        remote_path: str,
        local_path: str,
        progress: Optional[ProgressCallback] = None
    ) -> None:
        """Download a file from the remote server."""
        pass

    @abstractmethod
    async def shell(self, term_type: str = "xterm") -> Any:
        """Open an interactive shell channel."""
        pass
