"""Data models for the update checker."""

from ble_update_checker.models.device_info import LEGACY_BOOTLOADER_VERSION, DeviceInfo
from ble_update_checker.models.outcome import OutcomeReason, UpdateOutcome
from ble_update_checker.models.release import FirmwareRelease, ReleasesCatalog

__all__ = [
    "DeviceInfo",
    "LEGACY_BOOTLOADER_VERSION",
    "FirmwareRelease",
    "ReleasesCatalog",
    "OutcomeReason",
    "UpdateOutcome",
]
