"""
Tests for the exception hierarchy.
"""

import pytest

from myssh.core.exceptions import (
    ConfigurationError,
    ConnectionTimeoutError,
    ExecChannelError,
    SSHConnectionError,
    SSHException,
    TransferError,
)


class TestExceptionHierarchy:
    """Test that every client error can be caught as SSHException."""

    @pytest.mark.parametrize("error", [
        ConfigurationError("bad"),
        SSHConnectionError("refused"),
        ConnectionTimeoutError("slow"),
        ExecChannelError("lost"),
        TransferError("failed"),
    ])
    def test_family(self, error: SSHException) -> None:
        assert isinstance(error, SSHException)

    def test_timeout_is_connection_error(self) -> None:
        error = ConnectionTimeoutError("Connection timeout after 500ms", 500, "h", 22)

        assert isinstance(error, SSHConnectionError)
        assert error.timeout_ms == 500
        assert error.host == "h"
        assert error.port == 22
        assert str(error) == "Connection timeout after 500ms"

    def test_does_not_shadow_builtin(self) -> None:
        assert not issubclass(SSHConnectionError, ConnectionError)

    def test_context_attributes(self) -> None:
        exec_error = ExecChannelError("Command execution failed: lost", command="ls")
        transfer_error = TransferError("File upload failed: denied", "a.txt", "/srv/a.txt")

        assert exec_error.command == "ls"
        assert transfer_error.source_path == "a.txt"
        assert transfer_error.destination_path == "/srv/a.txt"
