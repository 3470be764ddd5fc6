"""Configuration loader for stubcraft."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..domain.models import StubCraftError
from .models import StubCraftConfig

logger = logging.getLogger(__name__)


class ConfigurationError(StubCraftError):
    """Raised when configuration loading or validation fails."""

    pass


class ConfigLoader:
    """Configuration loader that merges TOML/YAML files, environment variables, and CLI arguments."""

    DEFAULT_CONFIG_FILES = [
        ".stubcraft.toml",  # TOML files (preferred)
        ".stubcraft.yml",
        ".stubcraft.yaml",
        "stubcraft.toml",
        "stubcraft.yml",
        "stubcraft.yaml",
    ]

    ENV_PREFIX = "STUBCRAFT_"

    def __init__(self, config_file: str | Path | None = None):
        """Initialize the configuration loader.

        Args:
            config_file: Path to configuration file. If None, will search for default files.
        """
        self.config_file = Path(config_file) if config_file else None
        self._config_cache: StubCraftConfig | None = None

    def load_config(
        self,
        env_overrides: dict[str, Any] | None = None,
        cli_overrides: dict[str, Any] | None = None,
        reload: bool = False,
    ) -> StubCraftConfig:
        """Load configuration from all sources.

        Args:
            env_overrides: Environment variable overrides
            cli_overrides: CLI argument overrides
            reload: Force reload even if cached

        Returns:
            Validated stubcraft configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self._config_cache is not None and not reload:
            return self._config_cache

        config_dict: dict[str, Any] = {}

        # 1. Configuration file (TOML or YAML)
        file_config = self._load_config_file()
        if file_config:
            config_dict = self._deep_merge(config_dict, file_config)
            logger.debug(f"Loaded configuration from {self._get_config_file_path()}")

        # 2. Environment variable overrides
        env_config = env_overrides if env_overrides is not None else self._load_env_config()
        if env_config:
            config_dict = self._deep_merge(config_dict, env_config)
            logger.debug("Applied environment variable overrides")

        # 3. CLI overrides (highest priority)
        if cli_overrides:
            config_dict = self._deep_merge(config_dict, cli_overrides)
            logger.debug("Applied CLI argument overrides")

        try:
            self._config_cache = StubCraftConfig(**config_dict)
        except ValidationError as e:
            error_msg = f"Configuration validation failed: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

        logger.debug("Configuration loaded and validated successfully")
        return self._config_cache

    def _load_config_file(self) -> dict[str, Any] | None:
        """Load configuration from TOML or YAML file."""
        config_file = self._get_config_file_path()

        if not config_file or not config_file.exists():
            logger.debug("No configuration file found, using defaults")
            return None

        try:
            if config_file.suffix.lower() == ".toml":
                return self._load_toml_file(config_file)
            elif config_file.suffix.lower() in (".yml", ".yaml"):
                return self._load_yaml_file(config_file)
            else:
                logger.warning(f"Unknown configuration file type: {config_file}")
                return None

        except OSError as e:
            error_msg = f"Failed to read {config_file}: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

    def _load_toml_file(self, config_file: Path) -> dict[str, Any] | None:
        """Load configuration from TOML file."""
        try:
            with open(config_file, "rb") as f:
                content = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            error_msg = f"Invalid TOML in {config_file}: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

        if not content:
            logger.warning(f"Configuration file {config_file} is empty")
            return None
        return content

    def _load_yaml_file(self, config_file: Path) -> dict[str, Any] | None:
        """Load configuration from YAML file."""
        try:
            with open(config_file, encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            error_msg = f"Invalid YAML in {config_file}: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

        if not content:
            logger.warning(f"Configuration file {config_file} is empty")
            return None
        if not isinstance(content, dict):
            raise ConfigurationError(f"Configuration file {config_file} must contain a mapping")
        return content

    def _load_env_config(self) -> dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            # e.g. STUBCRAFT_RENDER__SUBTESTS -> render.subtests
            config_key = key[len(self.ENV_PREFIX) :].lower()
            nested_keys = config_key.split("__")
            self._set_nested_value(env_config, nested_keys, self._parse_env_value(value))

        return env_config

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate Python type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        elif value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            return value

    def _set_nested_value(self, config: dict[str, Any], keys: list, value: Any) -> None:
        """Set a nested value in the configuration dictionary."""
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _get_config_file_path(self) -> Path | None:
        """Get the path to the configuration file."""
        if self.config_file:
            return self.config_file

        for filename in self.DEFAULT_CONFIG_FILES:
            path = Path(filename)
            if path.exists():
                return path

        return None

    def _deep_merge(
        self, base: dict[str, Any], updates: dict[str, Any]
    ) -> dict[str, Any]:
        """Deeply merge updates into base dictionary."""
        result = base.copy()

        for key, value in updates.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(
    config_file: str | Path | None = None,
    env_overrides: dict[str, Any] | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> StubCraftConfig:
    """Load stubcraft configuration from all sources.

    Args:
        config_file: Path to configuration file
        env_overrides: Environment variable overrides
        cli_overrides: CLI argument overrides

    Returns:
        Validated stubcraft configuration
    """
    loader = ConfigLoader(config_file)
    return loader.load_config(env_overrides, cli_overrides)
