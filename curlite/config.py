"""
load the config from config.yaml and environment variables (.env included)
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

# Environment variable -> nested config key
ENV_MAPPINGS = {
    'CURLITE_BACKEND': ('transport', 'backend'),
    'CURLITE_TIMEOUT': ('transport', 'timeout'),
    'CURLITE_FOLLOW_REDIRECTS': ('transport', 'follow_redirects'),
    'CURLITE_MAX_REDIRECTS': ('transport', 'max_redirects'),
    'CURLITE_USER_AGENT': ('transport', 'user_agent'),
    'CURLITE_LOG_LEVEL': ('logging', 'level'),
    'CURLITE_LOG_JSON': ('logging', 'json'),
}


class Config:
    """Configuration loader that reads from config.yaml and environment variables."""

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to a config.yaml file. If None, the config.yaml
                        shipped next to this module is used.
            environ: Environment to read overrides from. Defaults to os.environ.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._environ = os.environ if environ is None else environ
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file and override with environment variables."""
        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if not isinstance(config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {self.config_path}")

        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        for env_var, config_path in ENV_MAPPINGS.items():
            env_value = self._environ.get(env_var)
            if env_value is None:
                continue

            current = config
            for key in config_path[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            current[config_path[-1]] = self._convert_env_value(env_value)

        return config

    def _convert_env_value(self, value: str):
        """Convert environment variable string to appropriate Python type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, *keys, default=None):
        """Get configuration value by walking nested keys.

        Args:
            *keys: Configuration keys (e.g., 'transport', 'timeout')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def override(self, section: str, **values) -> None:
        """Set values in a section, ignoring None (e.g. unset command-line flags)."""
        if not isinstance(self._config.get(section), dict):
            self._config[section] = {}
        target = self._config[section]
        for key, value in values.items():
            if value is not None:
                target[key] = value

    @property
    def transport(self) -> Dict[str, Any]:
        """Get HTTP transport configuration."""
        return copy.deepcopy(self.get('transport') or {})

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return copy.deepcopy(self.get('logging') or {})
