"""BLE transport and Device Information Service access."""

from ble_update_checker.ble.device_information import (
    DEVICE_INFORMATION_SERVICE_UUID,
    DFU_SERVICE_UUID,
    read_device_info,
)
from ble_update_checker.ble.transport import BleakPeripheral, Peripheral

__all__ = [
    "BleakPeripheral",
    "Peripheral",
    "DEVICE_INFORMATION_SERVICE_UUID",
    "DFU_SERVICE_UUID",
    "read_device_info",
]
