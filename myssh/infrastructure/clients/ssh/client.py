"""
SSH client implementation for the myssh package.

This module provides the connection manager that drives an asyncssh
session: connect with bounded retry and timeout, command execution,
SFTP file transfer, and interactive shells.
"""

import asyncio
import logging
from typing import Any, Optional, Union

import asyncssh

from ....core.domain.results import CommandResult
from ....core.exceptions import (
    ConfigurationError,
    ConnectionTimeoutError,
    ExecChannelError,
    SSHConnectionError,
    TransferError,
)
from ....core.interfaces.clients import ISSHClient, ProgressCallback, SessionState
from .config import ConnectionConfig, load_default_key

logger = logging.getLogger(__name__)


class SSHClient(ISSHClient):
    """
    SSH client implementation.

    Owns at most one asyncssh connection. Every public operation goes
    through ``ensure_connected()``, so the first ``exec``, transfer or
    shell call on a disconnected client performs the connect.
    """

    def __init__(self, config: ConnectionConfig, name: Optional[str] = None):
        """
        Initialize SSH client.

        Args:
            config: SSH connection configuration
            name: Client name for identification
        """
        self._config = load_default_key(config)
        self._name = name or self.__class__.__name__

        self._state = SessionState.DISCONNECTED
        self._connection: Optional[asyncssh.SSHClientConnection] = None
        self._lock = asyncio.Lock()
        self._attempts = 0

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self.get_status()

    @property
    def attempts(self) -> int:
        """Number of transport handshakes started by this client."""
        return self._attempts

    def is_connected(self) -> bool:
        """Check if client is connected."""
        self._discard_closed_connection()
        return self._state == SessionState.CONNECTED and self._connection is not None

    def get_status(self) -> SessionState:
        """Get current session state."""
        self._discard_closed_connection()
        return self._state

    async def __aenter__(self) -> "SSHClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.disconnect()

    async def connect(self) -> None:
        """
        Establish the SSH session.

        Makes up to ``retries + 1`` attempts, waiting ``retry_delay_ms``
        between them. Returns immediately when already connected.

        Raises:
            ConnectionTimeoutError: The last attempt timed out
            SSHConnectionError: The last attempt failed in the transport
        """
        if self.is_connected():
            return

        async with self._lock:
            if self.is_connected():
                return

            max_attempts = self._config.max_attempts
            for attempt in range(1, max_attempts + 1):
                self._update_state(SessionState.CONNECTING)
                try:
                    self._connection = await self._connect_once()
                except SSHConnectionError as e:
                    self._update_state(SessionState.DISCONNECTED)
                    if attempt >= max_attempts:
                        logger.error(f"SSH connection failed after {attempt} attempt(s): {e}")
                        raise

                    self._log(
                        f"Connection failed ({attempt}/{max_attempts}), "
                        f"retrying in {self._config.retry_delay_ms}ms...",
                        logging.WARNING
                    )
                    await asyncio.sleep(self._config.retry_delay)
                except BaseException:
                    # Configuration errors and cancellation are not retried
                    self._update_state(SessionState.DISCONNECTED)
                    raise
                else:
                    self._update_state(SessionState.CONNECTED)
                    return

    async def ensure_connected(self) -> None:
        """Connect unless a session is already established."""
        if not self.is_connected():
            await self.connect()

    def disconnect(self) -> None:
        """
        Disconnect from the SSH server.

        Closes the session and marks the client disconnected at once,
        without waiting for the server to acknowledge.
        """
        if self._connection is None:
            self._update_state(SessionState.DISCONNECTED)
            return

        connection = self._connection
        self._connection = None
        self._update_state(SessionState.DISCONNECTED)
        connection.close()

        self._log(f"Disconnected from {self._config.host}:{self._config.port}")

    async def exec(self, command: str) -> CommandResult:
        """
        Execute a command on the remote server.

        A non-zero exit code is returned as part of the result, not raised.

        Args:
            command: Command line passed to the remote shell

        Returns:
            Exit code with the complete stdout and stderr

        Raises:
            ExecChannelError: The command channel failed in the transport
        """
        await self.ensure_connected()
        connection = self._require_connection()

        logger.debug(f"Executing command on {self._config.host}: {command}")
        try:
            # Raw bytes, so output that is not valid UTF-8 cannot break the channel
            completed = await connection.run(command, check=False, encoding=None)
        except (asyncssh.Error, OSError) as e:
            logger.error(f"Command execution failed: {e}")
            raise ExecChannelError(f"Command execution failed: {e}", command=command) from e

        code = completed.exit_status if completed.exit_status is not None else 0
        return CommandResult(
            code=code,
            stdout=_as_text(completed.stdout),
            stderr=_as_text(completed.stderr)
        )

    async def upload_file(
        self,
        local_path: str,
        remote_path: str,
        progress: Optional[ProgressCallback] = None
    ) -> None:
        """Upload a file to the remote server."""
        await self.ensure_connected()
        connection = self._require_connection()

        try:
            async with connection.start_sftp_client() as sftp:
                await sftp.put(
                    local_path,
                    remote_path,
                    progress_handler=_progress_handler(local_path, remote_path, progress)
                )
        except (asyncssh.Error, OSError) as e:
            logger.error(f"File upload failed: {e}")
            raise TransferError(f"File upload failed: {e}", local_path, remote_path) from e

        logger.info(f"File uploaded: {local_path} -> {remote_path}")

    async def download_file(
        self,
        remote_path: str,
        local_path: str,
        progress: Optional[ProgressCallback] = None
    ) -> None:
        """Download a file from the remote server."""
        await self.ensure_connected()
        connection = self._require_connection()

        try:
            async with connection.start_sftp_client() as sftp:
                await sftp.get(
                    remote_path,
                    local_path,
                    progress_handler=_progress_handler(remote_path, local_path, progress)
                )
        except (asyncssh.Error, OSError) as e:
            logger.error(f"File download failed: {e}")
            raise TransferError(f"File download failed: {e}", remote_path, local_path) from e

        logger.info(f"File downloaded: {remote_path} -> {local_path}")

    async def shell(self, term_type: str = "xterm") -> asyncssh.SSHClientProcess:
        """
        Open an interactive shell with a pseudo-terminal.

        The returned process is handed to the caller as-is; its stdin,
        stdout and stderr are not interpreted here.
        """
        await self.ensure_connected()
        connection = self._require_connection()

        try:
            return await connection.create_process(term_type=term_type)
        except (asyncssh.Error, OSError) as e:
            logger.error(f"Shell request failed: {e}")
            raise ExecChannelError(f"Shell request failed: {e}") from e

    async def _connect_once(self) -> asyncssh.SSHClientConnection:
        """Run a single transport handshake bounded by the timeout."""
        config = self._config
        self._attempts += 1

        try:
            kwargs = config.to_asyncssh_kwargs()
            # wait_for cancels the pending handshake when the timer fires
            connection = await asyncio.wait_for(
                asyncssh.connect(**kwargs),
                timeout=config.timeout
            )
        except asyncio.TimeoutError as e:
            message = f"Connection timeout after {config.timeout_ms}ms"
            self._log(message, logging.WARNING)
            raise ConnectionTimeoutError(
                message, timeout_ms=config.timeout_ms, host=config.host, port=config.port
            ) from e
        except (asyncssh.Error, asyncssh.KeyImportError, OSError) as e:
            self._log(f"Connection error: {e}", logging.WARNING)
            raise SSHConnectionError(
                f"Failed to connect to {config.host}:{config.port}: {e}",
                host=config.host, port=config.port
            ) from e
        except (ValueError, TypeError) as e:
            self._log(f"Invalid connection options: {e}", logging.WARNING)
            raise ConfigurationError(f"Invalid connection options: {e}") from e

        self._log(f"Connected to {config.host}:{config.port}")
        return connection

    def _require_connection(self) -> asyncssh.SSHClientConnection:
        if self._connection is None:
            raise SSHConnectionError(
                "SSH client not connected", host=self._config.host, port=self._config.port
            )
        return self._connection

    def _discard_closed_connection(self) -> None:
        """Forget a session the transport has already closed."""
        if self._connection is None or not self._connection.is_closed():
            return

        self._connection = None
        self._update_state(SessionState.DISCONNECTED)
        self._log(
            f"Connection to {self._config.host}:{self._config.port} closed by transport",
            logging.WARNING
        )

    def _log(self, message: str, level: int = logging.DEBUG) -> None:
        self._config.logger(message)
        logger.log(level, message)

    def _update_state(self, state: SessionState) -> None:
        """Update session state."""
        old_state = self._state
        self._state = state

        if old_state != state:
            logger.debug(f"Client {self._name} state changed: {old_state.value} -> {state.value}")


def _as_text(data: Union[str, bytes, None]) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def _progress_handler(
    source: str,
    destination: str,
    callback: Optional[ProgressCallback]
) -> Optional[Any]:
    if callback is None:
        return None

    def handler(src: bytes, dst: bytes, bytes_done: int, total_bytes: int) -> None:
        percent = (bytes_done / total_bytes) * 100 if total_bytes else 100.0
        callback(source, destination, percent)

    return handler
