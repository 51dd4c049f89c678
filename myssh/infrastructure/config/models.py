"""
Configuration models and data structures.

This module defines the file-backed configuration of the myssh command
line tool and its conversion into a ConnectionConfig for the SSH client.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ...core.exceptions import ConfigurationError
from ..clients.ssh.config import ConnectionConfig, HostKeyPolicy, LogSink


@dataclass
class SSHConfig:
    """SSH connection settings as stored in a configuration file."""
    host: str = "localhost"
    port: int = 22
    username: Optional[str] = None
    password: Optional[str] = None
    private_key_path: Optional[str] = None
    passphrase: Optional[str] = None
    agent_path: Optional[str] = None
    use_default_key: bool = False
    timeout_ms: int = 10000
    retries: int = 0
    retry_delay_ms: int = 2000
    host_key_policy: str = HostKeyPolicy.VERIFY.value
    known_hosts_path: Optional[str] = None
    extra_options: Dict[str, str] = field(default_factory=dict)

    def to_connection_config(self, logger: Optional[LogSink] = None) -> ConnectionConfig:
        """
        Build the connection record used by SSHClient.

        Args:
            logger: Sink for progress messages

        Returns:
            Connection configuration with the private key file read into memory

        Raises:
            ConfigurationError: If the private key file cannot be read
        """
        private_key = None
        if self.private_key_path:
            key_path = Path(self.private_key_path).expanduser()
            try:
                private_key = key_path.read_bytes()
            except OSError as e:
                raise ConfigurationError(f"Cannot read private key {key_path}: {e}")

        kwargs: Dict[str, Any] = {}
        if logger is not None:
            kwargs['logger'] = logger

        return ConnectionConfig(
            host=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            private_key=private_key,
            passphrase=self.passphrase,
            agent_path=self.agent_path,
            use_default_key=self.use_default_key,
            timeout_ms=self.timeout_ms,
            retries=self.retries,
            retry_delay_ms=self.retry_delay_ms,
            host_key_policy=HostKeyPolicy.parse(self.host_key_policy),
            known_hosts_path=self.known_hosts_path,
            extra_options=dict(self.extra_options),
            **kwargs
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_directory: str = "logs"
    log_file: str = "myssh.log"
    max_file_size: str = "10 MB"
    backup_count: int = 5
    console_enabled: bool = True
    file_enabled: bool = False
    transport_level: str = "WARNING"


@dataclass
class ApplicationConfig:
    """Main application configuration."""

    ssh: SSHConfig = field(default_factory=SSHConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_file_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate_ssh()
        self._validate_logging()

    def _validate_ssh(self) -> None:
        """Validate SSH connection values."""
        if not (1 <= self.ssh.port <= 65535):
            raise ValueError(f"SSH port must be between 1 and 65535, got {self.ssh.port}")

        if self.ssh.timeout_ms <= 0:
            raise ValueError(f"SSH timeout must be positive, got {self.ssh.timeout_ms}")

        if self.ssh.retries < 0:
            raise ValueError(f"SSH retries must not be negative, got {self.ssh.retries}")

        if self.ssh.retry_delay_ms < 0:
            raise ValueError(f"SSH retry delay must not be negative, got {self.ssh.retry_delay_ms}")

        try:
            HostKeyPolicy.parse(self.ssh.host_key_policy)
        except ConfigurationError as e:
            raise ValueError(str(e))

    def _validate_logging(self) -> None:
        """Validate logging levels."""
        stdlib_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        loguru_levels = stdlib_levels | {"TRACE", "SUCCESS"}

        if self.logging.level.upper() not in loguru_levels:
            raise ValueError(
                f"Log level must be one of {sorted(loguru_levels)}, got {self.logging.level}")

        # asyncssh logs through the standard library
        if self.logging.transport_level.upper() not in stdlib_levels:
            raise ValueError(
                f"Transport log level must be one of {sorted(stdlib_levels)}, "
                f"got {self.logging.transport_level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'ssh': asdict(self.ssh),
            'logging': asdict(self.logging),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary."""
        try:
            ssh_config = SSHConfig(**data.get('ssh', {}))
            logging_config = LoggingConfig(**data.get('logging', {}))
        except TypeError as e:
            raise ValueError(f"Invalid configuration: {e}")

        return cls(
            ssh=ssh_config,
            logging=logging_config,
            config_file_path=data.get('config_file_path')
        )
