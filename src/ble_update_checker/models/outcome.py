"""Update resolution outcome."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ble_update_checker.models.device_info import DeviceInfo
from ble_update_checker.models.release import FirmwareRelease


class OutcomeReason(str, Enum):
    """Why a resolution ended the way it did."""

    UNKNOWN_DEVICE = "unknown_device"
    BOARD_NOT_FOUND = "board_not_found"
    NO_COMPATIBLE_RELEASE = "no_compatible_release"
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"


class UpdateOutcome(BaseModel):
    """Result of resolving a device against the releases catalog."""

    model_config = ConfigDict(frozen=True)

    is_update_available: bool
    latest_release: Optional[FirmwareRelease] = None
    device_info: DeviceInfo
    all_releases_for_board: Tuple[FirmwareRelease, ...] = ()
    reason: OutcomeReason
