"""
Exception hierarchy for the myssh package.

Every error raised by the SSH client derives from SSHException, so callers
can catch the whole family with a single except clause. The transport's own
exception is always chained as ``__cause__``.
"""

from typing import Optional


class SSHException(Exception):
    """Base exception class for all SSH-related errors"""
    pass


class ConfigurationError(SSHException):
    """Exception raised for invalid connection or application settings"""
    pass


class SSHConnectionError(SSHException):
    """Exception raised when the transport fails to establish a session"""

    def __init__(self, message: str, host: Optional[str] = None, port: Optional[int] = None):
        self.host = host
        self.port = port
        super().__init__(message)


class ConnectionTimeoutError(SSHConnectionError):
    """Exception raised when session establishment exceeds the timeout"""

    def __init__(
        self,
        message: str,
        timeout_ms: Optional[int] = None,
        host: Optional[str] = None,
        port: Optional[int] = None
    ):
        self.timeout_ms = timeout_ms
        super().__init__(message, host, port)


class ExecChannelError(SSHException):
    """Exception raised for transport errors on a command channel"""

    def __init__(self, message: str, command: Optional[str] = None):
        self.command = command
        super().__init__(message)


class TransferError(SSHException):
    """Exception raised for file transfer errors"""

    def __init__(
        self,
        message: str,
        source_path: Optional[str] = None,
        destination_path: Optional[str] = None
    ):
        self.source_path = source_path
        self.destination_path = destination_path
        super().__init__(message)
