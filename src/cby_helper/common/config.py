"""
Configuration management for CBY Helper.
Loads settings from YAML files, with environment variable overrides.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "default_config.yaml"

# Apps Script web app publishing the hub sheet as a JSON array
DEFAULT_SHEET_ENDPOINT = (
    "https://script.google.com/macros/s/"
    "AKfycbza1E7FT2x62m-THXFzRNddvQHIwlFzp3UTcC1OaQ2vhzAi0EjJYqMnHjDT8B__Uhum/exec"
)

DEFAULT_REFOCUS_DELAY_MS = 200


class Config:
    """Manages application configuration from YAML files."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, uses the bundled default_config.yaml
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config = yaml.safe_load(f) or {}

        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """Override config values from environment variables."""
        if 'CBY_SHEET_ENDPOINT' in os.environ:
            self.set('sheet.endpoint', os.environ['CBY_SHEET_ENDPOINT'])

        if 'CBY_SHEET_TIMEOUT' in os.environ:
            raw = os.environ['CBY_SHEET_TIMEOUT'].strip()
            self.set('sheet.timeout', float(raw) if raw else None)

        if 'CBY_LOG_LEVEL' in os.environ:
            self.set('logging.level', os.environ['CBY_LOG_LEVEL'])

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'sheet.endpoint')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config = Config()
            >>> config.get('scanner.refocus_delay_ms')
            200
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'sheet.timeout')
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save(self, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to save to. If None, uses original config_path
        """
        save_path = Path(path) if path else self.config_path

        with open(save_path, 'w') as f:
            yaml.dump(self._config, f, default_flow_style=False, indent=2)

    @property
    def sheet_endpoint(self) -> str:
        """Get the hub sheet endpoint URL."""
        return self.get('sheet.endpoint') or DEFAULT_SHEET_ENDPOINT

    @property
    def sheet_timeout(self) -> Optional[float]:
        """Get the sheet request timeout in seconds (None waits forever)."""
        return self.get('sheet.timeout')

    @property
    def refocus_delay(self) -> float:
        """Get the input re-focus delay in seconds."""
        return self.get('scanner.refocus_delay_ms', DEFAULT_REFOCUS_DELAY_MS) / 1000.0

    @property
    def refresh_on_start(self) -> bool:
        """Check if the hub directory should be fetched at startup."""
        return bool(self.get('scanner.refresh_on_start', False))

    @property
    def log_level(self) -> str:
        """Get the logging level name."""
        return self.get('logging.level', 'INFO')

    def __repr__(self) -> str:
        """String representation."""
        return f"Config(path={self.config_path})"


# Global config instance (can be imported by other modules)
_global_config: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config(config_path)

    return _global_config
