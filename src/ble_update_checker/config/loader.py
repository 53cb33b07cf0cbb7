"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ble_update_checker.config.settings import UpdaterConfig

logger = logging.getLogger(__name__)

# Environment variable -> config field
ENV_OVERRIDES = {
    "BLE_UPDATE_RELEASES_URL": "releases_url",
    "BLE_UPDATE_CATALOG_FILE": "catalog_file",
    "BLE_UPDATE_SHOW_BETA": "show_beta_versions",
    "BLE_UPDATE_LOG_LEVEL": "log_level",
}


class ConfigLoader:
    """Loads update checker configuration from YAML and the environment."""

    DEFAULT_CONFIG_PATHS = [
        "/etc/ble-update-checker/config.yaml",
        "./config/config.yaml",
        "~/.config/ble-update-checker/config.yaml"
    ]

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to configuration file (optional)
            environ: Environment to read overrides from (defaults to os.environ)
        """
        self.config_path = config_path
        self.environ = os.environ if environ is None else environ
        self.source: Optional[Path] = None

    def load(self) -> UpdaterConfig:
        """Load configuration.

        The first readable file wins. Environment overrides are applied on
        top. Invalid files are skipped; invalid combined values fall back to
        defaults.

        Returns:
            Update checker configuration
        """
        data = self._load_file()
        data.update(self._env_overrides())

        try:
            return UpdaterConfig(**data)
        except ValidationError as e:
            logger.error(f"Invalid configuration, using defaults: {e}")
            return UpdaterConfig()

    def _load_file(self) -> Dict[str, Any]:
        if self.config_path:
            paths = [self.config_path]
        else:
            paths = self.DEFAULT_CONFIG_PATHS

        for path in paths:
            expanded_path = Path(path).expanduser()
            if not expanded_path.exists():
                continue
            try:
                with open(expanded_path, 'r') as f:
                    data = yaml.safe_load(f) or {}
                if not isinstance(data, dict):
                    raise ValueError("top level must be a mapping")
                logger.info(f"Loaded configuration from {expanded_path}")
                self.source = expanded_path
                return dict(data)
            except (OSError, yaml.YAMLError, ValueError) as e:
                logger.error(f"Error loading config from {expanded_path}: {e}")

        logger.warning("No configuration file found, using defaults")
        return {}

    def _env_overrides(self) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value:
                overrides[field_name] = value
        return overrides


def load_config(config_path: Optional[str] = None) -> UpdaterConfig:
    """Load configuration from the default locations.

    Returns:
        Update checker configuration
    """
    return ConfigLoader(config_path).load()
