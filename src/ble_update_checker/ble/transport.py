"""Peripheral transport interface and its bleak implementation."""

import asyncio
import logging
from typing import Optional, Protocol, Union

from bleak import BleakClient
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError

from ble_update_checker.exceptions import ConnectionFailure, TransportError

logger = logging.getLogger(__name__)


class Peripheral(Protocol):
    """Operations the update checker needs from a BLE peripheral."""

    @property
    def identifier(self) -> str:
        """Stable identifier of the peripheral (address or UUID)."""
        ...

    @property
    def is_connected(self) -> bool:
        """Whether the link is currently up."""
        ...

    async def connect(self) -> None:
        """Establish the link.

        Raises:
            ConnectionFailure: If the link cannot be established
        """
        ...

    async def has_service(self, uuid: str) -> bool:
        """Check if the peripheral exposes a GATT service."""
        ...

    async def read_characteristic(self, uuid: str) -> bytes:
        """Read a characteristic value.

        Raises:
            TransportError: If the characteristic is missing or the read fails
        """
        ...


class BleakPeripheral:
    """Peripheral backed by a bleak client.

    Example:
        >>> peripheral = BleakPeripheral("C4:2A:11:00:00:01")
        >>> await peripheral.connect()
        >>> await peripheral.has_service(DEVICE_INFORMATION_SERVICE_UUID)
        >>> await peripheral.disconnect()
    """

    def __init__(
        self,
        address_or_device: Union[str, BLEDevice],
        connect_timeout: float = 20.0,
        client: Optional[BleakClient] = None,
    ) -> None:
        """Initialize peripheral.

        Args:
            address_or_device: Bluetooth address or a device found by BleakScanner
            connect_timeout: Connection timeout in seconds
            client: Existing bleak client to wrap
        """
        self.client = client or BleakClient(address_or_device, timeout=connect_timeout)

    @property
    def identifier(self) -> str:
        return self.client.address

    @property
    def is_connected(self) -> bool:
        return self.client.is_connected

    async def connect(self) -> None:
        logger.info(f"Connecting to {self.identifier}")
        try:
            await self.client.connect()
        except (BleakError, asyncio.TimeoutError, OSError) as e:
            raise ConnectionFailure(f"Failed to connect to {self.identifier}: {e}") from e

        if not self.client.is_connected:
            raise ConnectionFailure(f"Failed to connect to {self.identifier}")

    async def disconnect(self) -> None:
        try:
            await self.client.disconnect()
        except BleakError as e:
            logger.warning(f"Error disconnecting from {self.identifier}: {e}")

    async def has_service(self, uuid: str) -> bool:
        if not self.client.is_connected:
            raise ConnectionFailure(f"Not connected to {self.identifier}")

        # bleak discovers services as part of connect()
        try:
            services = self.client.services
        except BleakError as e:
            raise TransportError(f"Services not discovered on {self.identifier}: {e}") from e
        return services.get_service(uuid) is not None

    async def read_characteristic(self, uuid: str) -> bytes:
        try:
            value = await self.client.read_gatt_char(uuid)
        except (BleakError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(f"Failed to read {uuid} from {self.identifier}: {e}") from e
        return bytes(value)
