"""Update checker configuration."""

from ble_update_checker.config.loader import ConfigLoader, load_config
from ble_update_checker.config.settings import UpdaterConfig

__all__ = ["ConfigLoader", "UpdaterConfig", "load_config"]
