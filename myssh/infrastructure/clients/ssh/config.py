"""
SSH connection configuration for the myssh package.

This module provides the immutable connection record used by the SSH
client, default private key discovery, and the translation of the record
into ``asyncssh.connect`` keyword arguments.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import asyncssh

from ....core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LogSink = Callable[[str], None]


def _silent(message: str) -> None:
    pass


class HostKeyPolicy(str, Enum):
    """How the server's host key is checked."""
    VERIFY = "verify"
    ACCEPT_ANY = "accept-any"

    @classmethod
    def parse(cls, value: Union[str, "HostKeyPolicy"]) -> "HostKeyPolicy":
        """Parse a policy name, accepting ``accept_any`` as well."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ConfigurationError(f"Unknown host key policy: {value}")


# OpenSSH -o names understood by translate_extra_options
_BOOLEAN_WORDS = {"yes": True, "true": True, "no": False, "false": False}
_IGNORED_HOST_KEY_OPTIONS = ("StrictHostKeyChecking", "UserKnownHostsFile")


def default_key_path() -> Path:
    """Location of the per-user default private key."""
    return Path.home() / ".ssh" / "id_rsa"


@dataclass(frozen=True)
class ConnectionConfig:
    """
    SSH connection settings.

    Authentication precedence: an explicit ``password``, ``private_key`` or
    ``agent_path`` always wins. ``use_default_key`` only applies when none of
    those is set, and only if the default key file exists.
    """

    host: str = "localhost"
    port: int = 22
    username: Optional[str] = None

    # Authentication
    password: Optional[str] = None
    private_key: Optional[bytes] = None
    passphrase: Optional[str] = None
    agent_path: Optional[str] = None
    use_default_key: bool = False

    # Connection lifecycle
    timeout_ms: int = 10000
    retries: int = 0
    retry_delay_ms: int = 2000

    # Host key handling
    host_key_policy: HostKeyPolicy = HostKeyPolicy.VERIFY
    known_hosts_path: Optional[str] = None

    # Passthrough tuning
    extra_options: Dict[str, str] = field(default_factory=dict)
    transport_options: Dict[str, Any] = field(default_factory=dict)

    logger: LogSink = field(default=_silent, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Post-initialization validation."""
        object.__setattr__(self, "host_key_policy", HostKeyPolicy.parse(self.host_key_policy))

        if not self.host:
            raise ConfigurationError("Host is required for SSH connection")

        if not (1 <= self.port <= 65535):
            raise ConfigurationError(f"Port must be between 1 and 65535, got {self.port}")

        if self.timeout_ms <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout_ms}ms")

        if self.retries < 0:
            raise ConfigurationError(f"Retries must not be negative, got {self.retries}")

        if self.retry_delay_ms < 0:
            raise ConfigurationError(f"Retry delay must not be negative, got {self.retry_delay_ms}ms")

        if self.logger is None:
            object.__setattr__(self, "logger", _silent)

    @property
    def timeout(self) -> float:
        """Per-attempt timeout in seconds."""
        return self.timeout_ms / 1000.0

    @property
    def retry_delay(self) -> float:
        """Delay between attempts in seconds."""
        return self.retry_delay_ms / 1000.0

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def has_explicit_credentials(self) -> bool:
        """True when a password, private key or agent is configured."""
        return bool(self.password or self.private_key or self.agent_path)

    def to_asyncssh_kwargs(self) -> Dict[str, Any]:
        """Convert to asyncssh connection kwargs."""
        kwargs: Dict[str, Any] = {
            'host': self.host,
            'port': self.port,
        }

        if self.username:
            kwargs['username'] = self.username

        # Authentication
        if self.password:
            kwargs['password'] = self.password

        if self.private_key:
            key = asyncssh.import_private_key(self.private_key, self.passphrase)
            kwargs['client_keys'] = [key]

        if self.agent_path:
            kwargs['agent_path'] = self.agent_path

        # Known hosts: None disables verification entirely
        if self.host_key_policy is HostKeyPolicy.ACCEPT_ANY:
            kwargs['known_hosts'] = None
        elif self.known_hosts_path:
            kwargs['known_hosts'] = self.known_hosts_path

        for name, value in translate_extra_options(self.extra_options, self.logger).items():
            if name == 'username' and 'username' in kwargs:
                continue
            kwargs[name] = value

        kwargs.update(self.transport_options)
        return kwargs


def translate_extra_options(options: Dict[str, str], sink: LogSink = _silent) -> Dict[str, Any]:
    """
    Map OpenSSH-style ``-o Name=value`` options onto asyncssh kwargs.

    Args:
        options: Option names and string values
        sink: Progress message sink for ignored options

    Returns:
        asyncssh keyword arguments
    """
    kwargs: Dict[str, Any] = {}

    for name, value in options.items():
        if name == "ServerAliveInterval":
            kwargs['keepalive_interval'] = _parse_int(name, value)
        elif name == "ServerAliveCountMax":
            kwargs['keepalive_count_max'] = _parse_int(name, value)
        elif name == "ConnectTimeout":
            kwargs['connect_timeout'] = _parse_int(name, value)
        elif name == "Compression":
            if _parse_bool(name, value):
                kwargs['compression_algs'] = ['zlib@openssh.com', 'zlib']
            else:
                kwargs['compression_algs'] = ['none']
        elif name == "ForwardAgent":
            kwargs['agent_forwarding'] = _parse_bool(name, value)
        elif name == "User":
            kwargs['username'] = value
        elif name in _IGNORED_HOST_KEY_OPTIONS:
            message = f"Ignoring SSH option {name}={value}: use host_key_policy instead"
            sink(message)
            logger.warning(message)
        else:
            message = f"Ignoring unsupported SSH option {name}={value}"
            sink(message)
            logger.warning(message)

    return kwargs


def _parse_int(name: str, value: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigurationError(f"SSH option {name} expects an integer, got {value!r}")


def _parse_bool(name: str, value: str) -> bool:
    normalized = str(value).strip().lower()
    if normalized not in _BOOLEAN_WORDS:
        raise ConfigurationError(f"SSH option {name} expects yes or no, got {value!r}")
    return _BOOLEAN_WORDS[normalized]


def load_default_key(config: ConnectionConfig, key_path: Optional[Path] = None) -> ConnectionConfig:
    """
    Resolve the default private key for a configuration.

    Read failures are reported through the config's sink and never raised;
    the returned config then carries no key and the transport falls back
    to its own defaults.

    Args:
        config: Connection configuration
        key_path: Key file to use instead of ``~/.ssh/id_rsa``

    Returns:
        The same config, or a copy carrying the default key bytes
    """
    if not config.use_default_key or config.has_explicit_credentials():
        return config

    path = key_path or default_key_path()
    try:
        if not path.exists():
            logger.debug(f"Default SSH key not found: {path}")
            return config
        key_data = path.read_bytes()
    except OSError as e:
        message = f"Failed to load default SSH key: {e}"
        config.logger(message)
        logger.warning(message)
        return config

    config.logger(f"Using default SSH key: {path}")
    return replace(config, private_key=key_data)
