"""Configuration management for servopilot."""

import os
import sys
from pathlib import Path
from typing import Any

import pydantic
import yaml

from servopilot.exceptions import ConfigurationError
from servopilot.models.config import AppConfig


def default_config_path() -> Path:
    """Platform-specific location of config.yaml."""
    if sys.platform == "win32":
        # Windows: %APPDATA%\servopilot
        config_dir = Path(os.getenv("APPDATA", str(Path.home()))) / "servopilot"
    elif sys.platform == "darwin":
        # macOS: ~/Library/Application Support/servopilot
        config_dir = Path.home() / "Library" / "Application Support" / "servopilot"
    else:
        # Linux/Unix: ~/.config/servopilot
        config_dir = Path.home() / ".config" / "servopilot"
    return config_dir / "config.yaml"


class ConfigManager:
    """Manages application configuration with YAML file and environment variable support."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. If None, uses SERVOPILOT_CONFIG_PATH
                        environment variable or defaults to platform-specific config directory
        """
        if config_path is None:
            env_path = os.getenv("SERVOPILOT_CONFIG_PATH")
            config_path = Path(env_path).expanduser() if env_path else default_config_path()

        self.config_path = config_path
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """Load configuration from file and apply environment variable overrides.

        Returns:
            Loaded configuration

        Raises:
            ConfigurationError: if the file cannot be parsed or fails validation
        """
        config_data: dict[str, Any] = {}

        # 1. Load from YAML file if it exists
        if self.config_path.exists():
            try:
                with open(self.config_path, encoding="utf-8") as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError("config.invalid", path=self.config_path, reason=e) from e
            if not isinstance(config_data, dict):
                raise ConfigurationError(
                    "config.invalid", path=self.config_path, reason="top-level YAML must be a mapping"
                )

        # 2. Create config object (applies defaults, validates calibration table)
        try:
            config = AppConfig(**config_data)
        except pydantic.ValidationError as e:
            raise ConfigurationError("config.invalid", path=self.config_path, reason=e) from e

        # 3. Apply environment variable overrides
        return self._apply_env_overrides(config)

    def save(self, config: AppConfig) -> None:
        """Save configuration to YAML file.

        Args:
            config: Configuration to save
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = config.model_dump(mode="json", exclude_none=True)
        # Calibration points are written back as compact [angle, value] pairs
        config_dict["servo"]["calibration"]["points"] = [list(p) for p in config.servo.calibration.pairs()]

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def _apply_env_overrides(self, config: AppConfig) -> AppConfig:
        """Apply environment variable overrides.

        Environment variables use the format: SERVOPILOT_<KEY>
        Examples:
            - SERVOPILOT_GPIO_PIN=12
            - SERVOPILOT_DATA_DIR=~/custom/path

        Args:
            config: Base configuration

        Returns:
            Configuration with environment overrides applied
        """
        try:
            if pin := os.getenv("SERVOPILOT_GPIO_PIN"):
                config.servo.gpio_pin = int(pin)
            if min_pwm := os.getenv("SERVOPILOT_MIN_PWM"):
                config.servo.min_pwm = int(min_pwm)
            if max_pwm := os.getenv("SERVOPILOT_MAX_PWM"):
                config.servo.max_pwm = int(max_pwm)
            if delay_ms := os.getenv("SERVOPILOT_DELAY_MS"):
                config.loop.delay_ms = int(delay_ms)
        except ValueError as e:
            raise ConfigurationError("config.invalid", path="environment", reason=e) from e

        if data_dir := os.getenv("SERVOPILOT_DATA_DIR"):
            config.paths.data_dir = Path(data_dir).expanduser()

        if log_level := os.getenv("SERVOPILOT_LOG_LEVEL"):
            if log_level.upper() in ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR"):
                config.advanced.log_level = log_level.upper()  # type: ignore

        return config

    def get_config(self) -> AppConfig:
        """Get configuration (singleton pattern).

        Returns:
            Current configuration
        """
        if self._config is None:
            self._config = self.load()
        return self._config

    def reload(self) -> AppConfig:
        """Reload configuration from file.

        Returns:
            Reloaded configuration
        """
        self._config = self.load()
        return self._config


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config() -> AppConfig:
    """Get the global configuration."""
    return _config_manager.get_config()


def reload_config() -> AppConfig:
    """Reload the global configuration from disk."""
    return _config_manager.reload()


def set_config_path(config_path: Path) -> AppConfig:
    """Point the global configuration manager at a different file and load it."""
    global _config_manager
    _config_manager = ConfigManager(config_path)
    return _config_manager.get_config()
