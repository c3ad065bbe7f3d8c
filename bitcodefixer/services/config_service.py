"""
Configuration Service

Read access to the per-user JSON config file (~/.codefixrc.json).
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from bitcodefixer.core.errors import ConfigLoadError

logger = logging.getLogger("BitCodeFixer.ConfigService")

DEFAULT_CONFIG_PATH = Path.home() / ".codefixrc.json"


class ConfigService:
    """
    Service class for the user config file.

    Provides:
    - Configuration loading (missing file is not an error)
    - Dot-notation lookup ("openai.apiKey")
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config service.

        Args:
            config_path: Path to config file
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path).expanduser()
        self._config: Dict[str, Any] = {}

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.

        Returns:
            Configuration dictionary (empty if the file does not exist)

        Raises:
            ConfigLoadError: If the file cannot be read or is not a JSON object
        """
        if not self.config_path.exists():
            logger.debug(f"No config file at {self.config_path}")
            self._config = {}
            return {}

        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigLoadError(f"Error parsing {self.config_path}: {e}") from e
        except OSError as e:
            raise ConfigLoadError(f"Cannot read {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigLoadError(f"{self.config_path} must contain a JSON object")

        self._config = data
        logger.info(f"Configuration loaded from {self.config_path}")
        return self._config.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key (supports dot notation: "openai.apiKey")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value if value is not None else default

    def get_first(self, *keys: str, default: Any = None) -> Any:
        """First non-empty value among several keys (camelCase and snake_case aliases)."""
        for key in keys:
            value = self.get(key)
            if value not in (None, ""):
                return value
        return default

    def get_all(self) -> Dict[str, Any]:
        """
        Get all configuration.

        Returns:
            Complete configuration dictionary
        """
        return self._config.copy()
