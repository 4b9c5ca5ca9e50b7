"""
Configuration Management Module

Loads output settings from TOML, YAML or JSON files and environment
variables on top of built-in defaults. Key derivation parameters are fixed
by the file format and are not configurable.
"""

import os
import json
from typing import Any, Dict, Optional

import toml
import yaml


class ConfigError(Exception):
    """Raised when configuration operations fail."""
    pass


class Config:
    """
    Configuration manager for aes-file-cli.

    Values are looked up with dotted keys, e.g. ``output.show_iv``.
    Precedence, lowest first: defaults, config file, environment variables.
    """

    DEFAULT_CONFIG = {
        'output': {
            'verbose': False,
            'color_output': True,
            'show_iv': True,
        },
    }

    ENV_MAPPINGS = {
        'AES_FILE_CLI_VERBOSE': ('output', 'verbose'),
        'AES_FILE_CLI_COLOR_OUTPUT': ('output', 'color_output'),
        'AES_FILE_CLI_SHOW_IV': ('output', 'show_iv'),
    }

    def __init__(
        self,
        config_file: Optional[str] = None,
        use_defaults: bool = True,
        use_environment: bool = True
    ):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file
            use_defaults: Search the default locations when no file is given
            use_environment: Apply AES_FILE_CLI_* environment variables
        """
        self.config_file = config_file
        self._config = self._deep_copy_dict(self.DEFAULT_CONFIG)
        self._load_config(use_defaults, use_environment)

    def _deep_copy_dict(self, d: Dict[str, Any]) -> Dict[str, Any]:
        """Create a deep copy of a dictionary."""
        result = {}
        for key, value in d.items():
            if isinstance(value, dict):
                result[key] = self._deep_copy_dict(value)
            else:
                result[key] = value
        return result

    @staticmethod
    def _expand_path(path: str) -> str:
        """Expand user home directory and environment variables."""
        expanded = os.path.expanduser(path)
        expanded = os.path.expandvars(expanded)
        return os.path.abspath(expanded)

    def _get_default_config_paths(self) -> list:
        """Get list of default configuration file paths."""
        config_dir = self._expand_path('~/.aes-file-cli')

        return [
            os.path.join(config_dir, 'config.toml'),
            os.path.join(config_dir, 'config.yaml'),
            os.path.join(config_dir, 'config.yml'),
            os.path.join(config_dir, 'config.json'),
            './aes-file-cli.toml',
            './aes-file-cli.yaml',
            './aes-file-cli.yml',
            './aes-file-cli.json',
        ]

    def _load_config(self, use_defaults: bool, use_environment: bool) -> None:
        """Load configuration from file and environment variables."""
        if self.config_file:
            self._load_from_file(self.config_file)
        elif use_defaults:
            for path in self._get_default_config_paths():
                if os.path.exists(path):
                    self.config_file = path
                    self._load_from_file(path)
                    break

        if use_environment:
            self._load_from_environment()

    def _load_from_file(self, file_path: str) -> None:
        """Load configuration from a file."""
        file_path = self._expand_path(file_path)

        try:
            with open(file_path, 'r') as f:
                if file_path.endswith('.toml'):
                    file_config = toml.load(f)
                elif file_path.endswith(('.yaml', '.yml')):
                    file_config = yaml.safe_load(f)
                elif file_path.endswith('.json'):
                    file_config = json.load(f)
                else:
                    raise ConfigError(f"Unsupported config file format: {file_path}")
        except ConfigError:
            raise
        except (OSError, ValueError, toml.TomlDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {file_path}: {e}") from e

        if file_config is None:
            return
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file must contain a mapping: {file_path}")

        self._merge_config(file_config)

    def _load_from_environment(self) -> None:
        """Load configuration from environment variables."""
        for env_var, config_path in self.ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is not None:
                self._set_nested_value(config_path, value.lower() in ('true', '1', 'yes', 'on'))

    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        """Merge new configuration with existing configuration."""
        self._deep_merge(self._config, new_config)

    def _deep_merge(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """Deep merge source dictionary into target dictionary."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._deep_merge(target[key], value)
            else:
                target[key] = value

    def _set_nested_value(self, path: tuple, value: Any) -> None:
        """Set a nested configuration value."""
        current = self._config
        for key in path[:-1]:
            current = current.setdefault(key, {})
        current[path[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value
        """
        current = self._config

        try:
            for k in key.split('.'):
                current = current[k]
            return current
        except (KeyError, TypeError):
            return default

    def validate(self) -> None:
        """
        Validate configuration keys and values.

        Raises:
            ConfigError: If a section or key is unknown or a value is not a boolean
        """
        for section, values in self._config.items():
            defaults = self.DEFAULT_CONFIG.get(section)
            if defaults is None:
                raise ConfigError(f"Unknown configuration section: {section}")
            if not isinstance(values, dict):
                raise ConfigError(f"Configuration section {section} must be a mapping")

            for key, value in values.items():
                if key not in defaults:
                    raise ConfigError(f"Unknown configuration key: {section}.{key}")
                if not isinstance(value, bool):
                    raise ConfigError(f"{section}.{key} must be true or false, got {value!r}")


def load_config(config_file: Optional[str] = None) -> Config:
    """
    Load and validate configuration.

    Args:
        config_file: Path to configuration file

    Returns:
        Config object
    """
    config = Config(config_file)
    config.validate()
    return config
