"""
Main entry point for the myssh command line tool.

This module provides the command-line interface: an interactive prompt
loop plus one-shot commands for running a remote command and transferring
files.
"""

import asyncio
import sys
from typing import Callable, Optional

import typer

from .core.domain.results import CommandResult
from .core.exceptions import SSHException
from .infrastructure.clients.ssh import ConnectionConfig, HostKeyPolicy, SSHClient
from .infrastructure.config.loader import ConfigLoader
from .infrastructure.config.models import ApplicationConfig, SSHConfig
from .infrastructure.logging.setup import setup_logging

# Create CLI application
cli = typer.Typer(
    name="myssh",
    help="Simple SSH client with connection retries, command execution and SFTP transfers"
)

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Configuration file path")
HOST_OPTION = typer.Option(None, "--host", "-H", help="Remote host")
PORT_OPTION = typer.Option(None, "--port", "-p", help="Remote port")
USER_OPTION = typer.Option(None, "--user", "-u", help="Login name")
PASSWORD_OPTION = typer.Option(None, "--password", help="Password authentication")
KEY_OPTION = typer.Option(None, "--key", "-i", help="Private key file")
DEFAULT_KEY_OPTION = typer.Option(
    False, "--default-key", help="Use ~/.ssh/id_rsa when no other credential is given"
)
ACCEPT_ANY_OPTION = typer.Option(
    False, "--accept-any-host-key", help="Skip host key verification"
)
RETRIES_OPTION = typer.Option(None, "--retries", help="Additional connection attempts")
TIMEOUT_OPTION = typer.Option(None, "--timeout-ms", help="Connection timeout in milliseconds")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Print connection progress")


def ssh_echo(message: str) -> None:
    """Progress sink printing connection messages."""
    typer.echo(f"[SSH] {message}")


def load_application_config(
    config_file: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    key: Optional[str] = None,
    default_key: bool = False,
    accept_any_host_key: bool = False,
    retries: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    verbose: bool = False
) -> ApplicationConfig:
    """Load configuration and apply command line overrides."""
    config = ConfigLoader().load_config(config_file)
    ssh = config.ssh

    if host:
        ssh.host = host
    if port:
        ssh.port = port
    if user:
        ssh.username = user
    if password:
        ssh.password = password
    if key:
        ssh.private_key_path = key
    if default_key:
        ssh.use_default_key = True
    if accept_any_host_key:
        ssh.host_key_policy = HostKeyPolicy.ACCEPT_ANY.value
    if retries is not None:
        ssh.retries = retries
    if timeout_ms is not None:
        ssh.timeout_ms = timeout_ms
    if verbose:
        config.logging.level = "DEBUG"

    # Re-run validation on the overridden values
    return ApplicationConfig(ssh=ssh, logging=config.logging, config_file_path=config_file)


def print_result(result: CommandResult) -> None:
    """Print command output the way a terminal session shows it."""
    if result.stdout:
        typer.echo(result.stdout.rstrip())
    if result.stderr:
        typer.echo(f"STDERR: {result.stderr.rstrip()}", err=True)
    if result.code != 0:
        typer.echo(f"Exit code: {result.code}")


def read_command() -> Optional[str]:
    """Read one command line; None on end of input."""
    try:
        line = typer.prompt(">", default="", show_default=False, prompt_suffix=" ")
    except (typer.Abort, EOFError):
        return None
    return line.strip()


async def run_interactive(
    config: ConnectionConfig,
    reader: Callable[[], Optional[str]] = read_command
) -> None:
    """
    Connect and run commands read from the prompt until ``exit``.

    Args:
        config: Connection configuration
        reader: Blocking line reader, run off the event loop
    """
    client = SSHClient(config)

    typer.echo(f"\nConnecting to {config.username}@{config.host}:{config.port}...")
    await client.connect()
    typer.echo("Connected successfully!\n")
    typer.echo('Enter SSH commands (type "exit" to quit):')

    loop = asyncio.get_running_loop()
    try:
        while True:
            command = await loop.run_in_executor(None, reader)
            if command is None or command.lower() == "exit":
                break
            if not command:
                continue

            try:
                result = await client.exec(command)
            except SSHException as e:
                typer.echo(f"Error executing command: {e}", err=True)
                continue

            print_result(result)
    finally:
        client.disconnect()
        typer.echo("Disconnected from server.")


async def run_command(config: ConnectionConfig, command: str) -> CommandResult:
    """Connect, run a single command and disconnect."""
    async with SSHClient(config) as client:
        return await client.exec(command)


async def run_upload(config: ConnectionConfig, local_path: str, remote_path: str) -> None:
    async with SSHClient(config) as client:
        await client.upload_file(local_path, remote_path)


async def run_download(config: ConnectionConfig, remote_path: str, local_path: str) -> None:
    async with SSHClient(config) as client:
        await client.download_file(remote_path, local_path)


def _connection_config(config: ApplicationConfig, verbose: bool) -> ConnectionConfig:
    setup_logging(config.logging)
    return config.ssh.to_connection_config(logger=ssh_echo if verbose else None)


@cli.command()
def interactive(
    config_file: Optional[str] = CONFIG_OPTION,
    verbose: bool = typer.Option(True, "--verbose/--quiet", help="Print connection progress")
) -> None:
    """Prompt for connection details and run remote commands in a loop."""

    typer.echo("MySsh Command Line Tool")
    typer.echo("======================")
    typer.echo("Host key checking is disabled for this session.\n")

    try:
        base = ConfigLoader().load_config(config_file)
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)

    host = typer.prompt("Host", default=base.ssh.host)
    port = typer.prompt("Port", default=base.ssh.port, type=int)
    username = typer.prompt("Username", default=base.ssh.username)
    use_password = typer.confirm("Use password", default=True)

    ssh = SSHConfig(
        host=host,
        port=port,
        username=username or None,
        timeout_ms=base.ssh.timeout_ms,
        retries=1,
        retry_delay_ms=base.ssh.retry_delay_ms,
        host_key_policy=HostKeyPolicy.ACCEPT_ANY.value,
        extra_options=dict(base.ssh.extra_options)
    )

    if use_password:
        ssh.password = typer.prompt("Password", hide_input=True)
    else:
        typer.echo("Using default key from ~/.ssh/id_rsa")
        ssh.use_default_key = True

    try:
        config = ApplicationConfig(ssh=ssh, logging=base.logging)
        connection_config = _connection_config(config, verbose)
        asyncio.run(run_interactive(connection_config))
    except (SSHException, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command(name="exec")
def exec_command(
    command: str = typer.Argument(..., help="Command to run on the remote host"),
    config_file: Optional[str] = CONFIG_OPTION,
    host: Optional[str] = HOST_OPTION,
    port: Optional[int] = PORT_OPTION,
    user: Optional[str] = USER_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
    key: Optional[str] = KEY_OPTION,
    default_key: bool = DEFAULT_KEY_OPTION,
    accept_any_host_key: bool = ACCEPT_ANY_OPTION,
    retries: Optional[int] = RETRIES_OPTION,
    timeout_ms: Optional[int] = TIMEOUT_OPTION,
    verbose: bool = VERBOSE_OPTION
) -> None:
    """Run a single remote command and exit with its exit code."""

    try:
        config = load_application_config(
            config_file, host, port, user, password, key, default_key,
            accept_any_host_key, retries, timeout_ms, verbose
        )
        result = asyncio.run(run_command(_connection_config(config, verbose), command))
    except (SSHException, ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)

    print_result(result)
    if result.code != 0:
        sys.exit(result.code)


@cli.command()
def upload(
    local_path: str = typer.Argument(..., help="Local source file"),
    remote_path: str = typer.Argument(..., help="Remote destination path"),
    config_file: Optional[str] = CONFIG_OPTION,
    host: Optional[str] = HOST_OPTION,
    port: Optional[int] = PORT_OPTION,
    user: Optional[str] = USER_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
    key: Optional[str] = KEY_OPTION,
    default_key: bool = DEFAULT_KEY_OPTION,
    accept_any_host_key: bool = ACCEPT_ANY_OPTION,
    retries: Optional[int] = RETRIES_OPTION,
    timeout_ms: Optional[int] = TIMEOUT_OPTION,
    verbose: bool = VERBOSE_OPTION
) -> None:
    """Upload a local file over SFTP."""

    try:
        config = load_application_config(
            config_file, host, port, user, password, key, default_key,
            accept_any_host_key, retries, timeout_ms, verbose
        )
        asyncio.run(run_upload(_connection_config(config, verbose), local_path, remote_path))
    except (SSHException, ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)

    typer.echo(f"Uploaded {local_path} -> {remote_path}")


@cli.command()
def download(
    remote_path: str = typer.Argument(..., help="Remote source file"),
    local_path: str = typer.Argument(..., help="Local destination path"),
    config_file: Optional[str] = CONFIG_OPTION,
    host: Optional[str] = HOST_OPTION,
    port: Optional[int] = PORT_OPTION,
    user: Optional[str] = USER_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
    key: Optional[str] = KEY_OPTION,
    default_key: bool = DEFAULT_KEY_OPTION,
    accept_any_host_key: bool = ACCEPT_ANY_OPTION,
    retries: Optional[int] = RETRIES_OPTION,
    timeout_ms: Optional[int] = TIMEOUT_OPTION,
    verbose: bool = VERBOSE_OPTION
) -> None:
    """Download a remote file over SFTP."""

    try:
        config = load_application_config(
            config_file, host, port, user, password, key, default_key,
            accept_any_host_key, retries, timeout_ms, verbose
        )
        asyncio.run(run_download(_connection_config(config, verbose), remote_path, local_path))
    except (SSHException, ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)

    typer.echo(f"Downloaded {remote_path} -> {local_path}")


@cli.command()
def init_config(
    output: str = typer.Option(
        "myssh.yaml", "--output", "-o", help="Output configuration file"
    ),
    format: str = typer.Option(
        "yaml", "--format", "-f", help="Configuration format (yaml/json)"
    )
) -> None:
    """Generate a default configuration file."""

    config = ApplicationConfig()
    config_loader = ConfigLoader()

    try:
        config_loader.save_config(config, output, format)
        typer.echo(f"Default configuration saved to {output}")
    except ValueError as e:
        typer.echo(f"Error saving configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
def validate_config(
    config_file: str = typer.Argument(..., help="Configuration file to validate")
) -> None:
    """Validate a configuration file."""

    config_loader = ConfigLoader()

    try:
        config = config_loader.load_config(config_file)
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(1)

    typer.echo(f"Configuration file {config_file} is valid")
    typer.echo(f"Target: {config.ssh.username or '<default user>'}@{config.ssh.host}:{config.ssh.port}")
    typer.echo(f"Host key policy: {config.ssh.host_key_policy}")


if __name__ == "__main__":
    cli()
