"""
Manages loading, validation, and saving of the INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from convertio_cli.exceptions import ConfigurationError
from convertio_cli.models.config import (
    DEFAULT_BASE_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    ConvertConfig,
)

log = logging.getLogger(__name__)

API_KEY_ENV_VAR = "CONVERTIO_API_KEY"


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ConvertConfig:
        """
        Loads configuration from the INI file and the environment, applies CLI
        overrides, and validates it.

        Precedence, lowest first: INI file, CONVERTIO_API_KEY, CLI options. The
        file may be missing when the key comes from the environment.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated ConvertConfig object.

        Raises:
            ConfigurationError: If the config file is invalid or validation fails.
        """
        config_data = self.read_settings()

        if cli_options:
            config_data.update(cli_options)

        try:
            return ConvertConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save; missing keys get defaults.
        """
        config = configparser.ConfigParser()
        config["DEFAULT"] = {}

        defaults = ConvertConfig.model_construct(api_key="")
        for key in sorted(ConvertConfig.get_ini_keys()):
            value = settings.get(key, getattr(defaults, key, None))
            if value is not None:
                config["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        try:
            return {
                "api_key": section.get("api_key", ""),
                "base_url": section.get("base_url", DEFAULT_BASE_URL),
                "poll_interval": section.getfloat(
                    "poll_interval", DEFAULT_POLL_INTERVAL
                ),
                "request_timeout": section.getfloat(
                    "request_timeout", DEFAULT_REQUEST_TIMEOUT
                ),
            }
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e

    def read_settings(self) -> dict[str, Any]:
        """Returns the raw settings from the file and environment, unvalidated."""
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
        else:
            log.debug(f"No configuration file at '{self.config_file_path}'.")

        config_data = self._get_config_as_dict()
        if env_key := os.getenv(API_KEY_ENV_VAR, "").strip():
            config_data["api_key"] = env_key
        return config_data
