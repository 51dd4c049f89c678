"""
Configuration loading and saving utilities.

This module provides functionality to load configuration from YAML or JSON
files with overrides taken from environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from .models import ApplicationConfig

_SUFFIX_FORMATS = {".yaml": "yaml", ".yml": "yaml", ".json": "json"}


class ConfigLoader:
    """Configuration loader supporting multiple formats and sources."""

    def __init__(self, env_prefix: str = "MYSSH_") -> None:
        self._env_prefix = env_prefix

    def load_config(self, config_file: Optional[str] = None) -> ApplicationConfig:
        """
        Load configuration from file and environment variables.

        Args:
            config_file: Path to configuration file (optional)

        Returns:
            Loaded and validated configuration
        """
        config_data: Dict[str, Any] = {}

        if config_file:
            config_data = self._load_from_file(config_file)

        env_overrides = self._load_from_environment()
        config_data = self._merge_configs(config_data, env_overrides)

        config = ApplicationConfig.from_dict(config_data)
        config.config_file_path = config_file

        return config

    def save_config(self, config: ApplicationConfig, file_path: str, format: str = "yaml") -> None:
        """
        Save configuration to file.

        Args:
            config: Configuration to save
            file_path: Output file path
            format: File format (yaml or json)
        """
        fmt = format.lower()
        if fmt not in ("yaml", "json"):
            raise ValueError(f"Unsupported format: {format}")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                if fmt == "yaml":
                    yaml.safe_dump(config.to_dict(), f, default_flow_style=False, indent=2)
                else:
                    json.dump(config.to_dict(), f, indent=2)
        except OSError as e:
            raise ValueError(f"Error writing {fmt.upper()} to {file_path}: {e}")

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load a YAML or JSON mapping, chosen by file suffix."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
        if fmt is None:
            raise ValueError(f"Unsupported configuration file format: {path.suffix}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                if fmt == "yaml":
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid {fmt.upper()} in {file_path}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading {file_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration in {file_path} must be a mapping")
        return data

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration overrides from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings: Dict[str, Tuple[str, Callable[[str], Any]]] = {
            f"{self._env_prefix}HOST": ("ssh.host", str),
            f"{self._env_prefix}PORT": ("ssh.port", int),
            f"{self._env_prefix}USERNAME": ("ssh.username", str),
            f"{self._env_prefix}PASSWORD": ("ssh.password", str),
            f"{self._env_prefix}KEY_PATH": ("ssh.private_key_path", str),
            f"{self._env_prefix}USE_DEFAULT_KEY": ("ssh.use_default_key", self._parse_bool),
            f"{self._env_prefix}TIMEOUT_MS": ("ssh.timeout_ms", int),
            f"{self._env_prefix}RETRIES": ("ssh.retries", int),
            f"{self._env_prefix}RETRY_DELAY_MS": ("ssh.retry_delay_ms", int),
            f"{self._env_prefix}HOST_KEY_POLICY": ("ssh.host_key_policy", str),
            f"{self._env_prefix}LOG_LEVEL": ("logging.level", str),
            f"{self._env_prefix}LOG_DIR": ("logging.log_directory", str),
            f"{self._env_prefix}LOG_FILE": ("logging.file_enabled", self._parse_bool),
        }

        for env_var, (config_path, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    converted_value = converter(value)
                except (ValueError, TypeError) as e:
                    raise ValueError(f"Invalid value for {env_var}: {value} ({e})")
                self._set_nested_value(config, config_path, converted_value)

        return config

    def _parse_bool(self, value: str) -> bool:
        """Parse boolean value from string."""
        return value.lower() in ('true', '1', 'yes', 'on', 'enabled')

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """Set a nested configuration value using dot notation."""
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result
