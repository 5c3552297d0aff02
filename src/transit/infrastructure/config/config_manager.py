"""Configuration manager for loading and validating .transit.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml
from pydantic import ValidationError

from transit.domain.config import ClientConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".transit.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .transit.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (DEFAULT_CONFIG)
    2. .transit.yml file (searched from current directory upwards)
    3. Environment variables (TRANSIT_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "timeout": 30.0,
        "connect_timeout": 10.0,
        "headers": {},
        "retry": {
            "enabled": True,
            "max_attempts": 3,
            "retry_delay": 1.0,
            "retry_statuses": [429, 502, 503, 504],
        },
        "tls": {
            "verify": True,
            "ca_bundle": None,
            "ca_cert_pem": None,
        },
        "pool": {
            "pool_connections": 10,
            "pool_maxsize": 100,
            "pool_block": False,
        },
        "telemetry": {
            "enabled": True,
            "placement": "outer",
        },
    }

    # env var -> (section, key, converter); section None means top level
    ENV_OVERRIDES: Dict[str, tuple] = {
        "TRANSIT_TIMEOUT": (None, "timeout", float),
        "TRANSIT_RETRY_MAX_ATTEMPTS": ("retry", "max_attempts", int),
        "TRANSIT_RETRY_DELAY": ("retry", "retry_delay", float),
        "TRANSIT_CA_BUNDLE": ("tls", "ca_bundle", str),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .transit.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: ClientConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .transit.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> ClientConfig:
        """Load configuration from file and validate with Pydantic

        Returns:
            Validated ClientConfig instance

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file cannot be parsed
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return ClientConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply TRANSIT_* environment variable overrides

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied

        Raises:
            ConfigurationError: If an override cannot be converted
        """
        for env_name, (section, key, convert) in self.ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if not raw:
                continue
            value = self._convert_env(env_name, raw, convert)
            target = config if section is None else config.setdefault(section, {})
            target[key] = value
            logger.debug(f"Applied {env_name} override")
        return config

    @staticmethod
    def _convert_env(env_name: str, raw: str, convert: Callable[[str], Any]) -> Any:
        try:
            return convert(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}") from e
