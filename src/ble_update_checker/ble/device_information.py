"""Device Information Service access.

Bluefruit-style boards put two values into the Firmware Revision String,
``"<softdevice>, <bootloader>"`` (for example ``"S110 8.0.0, 0.2"``), and
report the application firmware version in the Software Revision String.
"""

import asyncio
import logging
from typing import Dict, Optional, Tuple

from ble_update_checker.ble.transport import Peripheral
from ble_update_checker.exceptions import IdentityReadIncomplete, TransportError
from ble_update_checker.models import DeviceInfo

logger = logging.getLogger(__name__)


def uuid16(short: int) -> str:
    """Expand a 16-bit SIG UUID to its 128-bit string form."""
    return f"0000{short:04x}-0000-1000-8000-00805f9b34fb"


DEVICE_INFORMATION_SERVICE_UUID = uuid16(0x180A)
MANUFACTURER_NAME_UUID = uuid16(0x2A29)
MODEL_NUMBER_UUID = uuid16(0x2A24)
FIRMWARE_REVISION_UUID = uuid16(0x2A26)
HARDWARE_REVISION_UUID = uuid16(0x2A27)
SOFTWARE_REVISION_UUID = uuid16(0x2A28)

# Nordic legacy DFU service used by the board bootloaders
DFU_SERVICE_UUID = "00001530-1212-efde-1523-785feabcd123"

BOOTLOADER_SEPARATOR = ", "

_IDENTITY_CHARACTERISTICS: Dict[str, str] = {
    "manufacturer": MANUFACTURER_NAME_UUID,
    "model_number": MODEL_NUMBER_UUID,
    "firmware_revision": FIRMWARE_REVISION_UUID,
    "hardware_revision": HARDWARE_REVISION_UUID,
    "software_revision": SOFTWARE_REVISION_UUID,
}


def decode_string(value: Optional[bytes]) -> Optional[str]:
    """Decode a UTF-8 characteristic value, dropping NUL padding."""
    if value is None:
        return None
    text = value.decode("utf-8", errors="replace").rstrip("\x00").strip()
    return text or None


def split_firmware_revision(firmware_revision: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split a firmware revision string into its softdevice and bootloader parts.

    Returns:
        (softdevice or plain revision, bootloader version or None)
    """
    if not firmware_revision:
        return None, None

    head, separator, tail = firmware_revision.partition(BOOTLOADER_SEPARATOR)
    if not separator:
        return firmware_revision, None
    return head.strip() or None, tail.strip() or None


def build_device_info(values: Dict[str, Optional[str]]) -> DeviceInfo:
    """Build DeviceInfo from decoded characteristic strings.

    Raises:
        IdentityReadIncomplete: If the model number is missing
    """
    model_number = values.get("model_number")
    if not model_number:
        raise IdentityReadIncomplete("Model number characteristic not readable")

    revision, bootloader_version = split_firmware_revision(values.get("firmware_revision"))
    firmware_version = values.get("software_revision") or revision

    return DeviceInfo(
        manufacturer=values.get("manufacturer"),
        model_number=model_number,
        firmware_revision=firmware_version,
        hardware_revision=values.get("hardware_revision"),
        bootloader_version=bootloader_version,
    )


async def _read_optional(peripheral: Peripheral, name: str, uuid: str) -> Optional[str]:
    try:
        return decode_string(await peripheral.read_characteristic(uuid))
    except TransportError as e:
        logger.debug(f"Could not read {name} from {peripheral.identifier}: {e}")
        return None


async def read_device_info(peripheral: Peripheral) -> DeviceInfo:
    """Read the identity characteristics of a connected peripheral.

    All reads run concurrently and every one completes before the result is
    built. Optional fields that fail to read are left as None.

    Raises:
        IdentityReadIncomplete: If the model number cannot be read
    """
    names = list(_IDENTITY_CHARACTERISTICS)
    results = await asyncio.gather(
        *(_read_optional(peripheral, name, _IDENTITY_CHARACTERISTICS[name]) for name in names)
    )
    values = dict(zip(names, results))

    logger.debug(f"Identity of {peripheral.identifier}: {values}")
    return build_device_info(values)
