"""
Shared fixtures for the myssh test suite.

The fake transport stands in for ``asyncssh.connect`` and the objects it
returns, so the client's lifecycle can be exercised without a server.
"""

import asyncio
import time
from typing import Any, Dict, Generator, List, Optional, Union
from unittest.mock import patch

import asyncssh
import pytest

from myssh.infrastructure.clients.ssh import ConnectionConfig


class FakeCompleted:
    """Mimics asyncssh.SSHCompletedProcess."""

    def __init__(self, exit_status: Optional[int] = 0, stdout: Any = "", stderr: Any = ""):
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr


class FakeSFTPClient:
    """In-memory SFTP client keyed by remote path."""

    def __init__(self, transport: "FakeTransport"):
        self._transport = transport

    async def put(self, localpath: str, remotepath: str, progress_handler: Any = None) -> None:
        if self._transport.sftp_error is not None:
            raise self._transport.sftp_error

        with open(localpath, "rb") as f:
            data = f.read()

        self._transport.remote_files[remotepath] = data
        if progress_handler:
            progress_handler(localpath.encode(), remotepath.encode(), len(data), len(data))

    async def get(self, remotepath: str, localpath: str, progress_handler: Any = None) -> None:
        if self._transport.sftp_error is not None:
            raise self._transport.sftp_error

        if remotepath not in self._transport.remote_files:
            raise asyncssh.SFTPNoSuchFile(f"No such file: {remotepath}")

        data = self._transport.remote_files[remotepath]
        with open(localpath, "wb") as f:
            f.write(data)

        if progress_handler:
            progress_handler(remotepath.encode(), localpath.encode(), len(data), len(data))


class FakeSFTPContext:
    def __init__(self, client: FakeSFTPClient):
        self._client = client

    async def __aenter__(self) -> FakeSFTPClient:
        return self._client

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeProcess:
    def __init__(self, term_type: Optional[str]):
        self.term_type = term_type


class FakeConnection:
    """Mimics asyncssh.SSHClientConnection."""

    def __init__(self, transport: "FakeTransport"):
        self._transport = transport
        self.closed = False
        self.commands: List[str] = []
        self.encodings: List[Optional[str]] = []

    async def run(
        self, command: str, check: bool = False, encoding: Optional[str] = "utf-8"
    ) -> FakeCompleted:
        self.commands.append(command)
        self.encodings.append(encoding)
        outcome = self._transport.commands.get(command, FakeCompleted())
        if isinstance(outcome, BaseException):
            raise outcome

        # Output is scripted as bytes; asyncssh only hands back bytes without an encoding
        return FakeCompleted(
            outcome.exit_status,
            _encode_output(outcome.stdout, encoding),
            _encode_output(outcome.stderr, encoding)
        )

    def start_sftp_client(self) -> FakeSFTPContext:
        if self._transport.sftp_open_error is not None:
            raise self._transport.sftp_open_error
        return FakeSFTPContext(FakeSFTPClient(self._transport))

    async def create_process(self, term_type: Optional[str] = None) -> FakeProcess:
        return FakeProcess(term_type)

    def close(self) -> None:
        self.closed = True

    def is_closed(self) -> bool:
        return self.closed


def _encode_output(data: Any, encoding: Optional[str]) -> Any:
    if data is None:
        return None
    raw = data.encode("utf-8") if isinstance(data, str) else data
    if encoding is None:
        return raw
    # Strict decoding, as asyncssh does when an encoding is set
    return raw.decode(encoding)


class FakeTransport:
    """Replacement for asyncssh.connect recording every handshake."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.attempt_times: List[float] = []
        self.connections: List[FakeConnection] = []
        self.failures: List[BaseException] = []
        self.hang = False
        self.cancelled = False
        self.host_key_trusted = True
        self.commands: Dict[str, Union[FakeCompleted, BaseException]] = {}
        self.remote_files: Dict[str, bytes] = {}
        self.sftp_error: Optional[BaseException] = None
        self.sftp_open_error: Optional[BaseException] = None

    async def connect(self, **kwargs: Any) -> FakeConnection:
        self.calls.append(kwargs)
        self.attempt_times.append(time.monotonic())

        if self.hang:
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                self.cancelled = True
                raise

        if self.failures:
            raise self.failures.pop(0)

        # known_hosts=None switches verification off in asyncssh
        if not self.host_key_trusted and kwargs.get("known_hosts", "default") is not None:
            raise asyncssh.HostKeyNotVerifiable("Host key is not trusted")

        connection = FakeConnection(self)
        self.connections.append(connection)
        return connection


@pytest.fixture
def transport() -> Generator[FakeTransport, None, None]:
    """Patch asyncssh.connect with a fake transport."""
    fake = FakeTransport()
    with patch.object(asyncssh, "connect", new=fake.connect):
        yield fake


@pytest.fixture
def messages() -> List[str]:
    """Collects progress messages from the client's sink."""
    return []


@pytest.fixture
def ssh_config(messages: List[str]) -> ConnectionConfig:
    """Connection configuration for testing."""
    return ConnectionConfig(
        host="example.test",
        port=2222,
        username="tester",
        password="secret",
        timeout_ms=500,
        retry_delay_ms=10,
        logger=messages.append
    )
