"""BLE firmware update checker.

Determines whether a newer firmware release exists for a connected BLE
peripheral:
- Reading device identity from the Device Information Service
- Loading and caching the remote releases catalog
- Selecting the latest compatible release for the board
- Reporting the result to a delegate
"""

from ble_update_checker.catalog import CatalogLoader, CatalogStore, get_catalog_store
from ble_update_checker.checker import CheckState, UpdateChecker, UpdateCheckerDelegate
from ble_update_checker.models import (
    DeviceInfo,
    FirmwareRelease,
    OutcomeReason,
    ReleasesCatalog,
    UpdateOutcome,
)
from ble_update_checker.resolver import UpdateResolver, resolve

__version__ = "0.1.0"

__all__ = [
    "CatalogLoader",
    "CatalogStore",
    "get_catalog_store",
    "CheckState",
    "UpdateChecker",
    "UpdateCheckerDelegate",
    "DeviceInfo",
    "FirmwareRelease",
    "OutcomeReason",
    "ReleasesCatalog",
    "UpdateOutcome",
    "UpdateResolver",
    "resolve",
]
