"""Firmware update checker for BLE peripherals.

Drives one check against a peripheral: ensure the link is up, look for the
update services, read the device identity, resolve it against the cached
releases catalog and notify the delegate.

Exactly one delegate notification is delivered per check, unless the
delegate has been garbage collected in the meantime, in which case nothing
is delivered.
"""

import logging
import weakref
from enum import Enum
from typing import Optional, Protocol, Tuple

from ble_update_checker.ble.device_information import (
    DEVICE_INFORMATION_SERVICE_UUID,
    DFU_SERVICE_UUID,
    read_device_info,
)
from ble_update_checker.ble.transport import Peripheral
from ble_update_checker.catalog.store import CatalogStore, get_catalog_store
from ble_update_checker.exceptions import ConnectionFailure, ServiceAbsent, TransportError
from ble_update_checker.models import DeviceInfo, FirmwareRelease, UpdateOutcome
from ble_update_checker.resolver import UpdateResolver

logger = logging.getLogger(__name__)


class CheckState(str, Enum):
    """Progress of a single update check."""

    IDLE = "idle"
    CONNECTING = "connecting"
    DISCOVERING_SERVICE = "discovering_service"
    READING_IDENTITY = "reading_identity"
    RESOLVING = "resolving"
    REPORTED = "reported"
    SERVICE_NOT_FOUND = "service_not_found"
    CONNECTION_FAILED = "connection_failed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            CheckState.REPORTED,
            CheckState.SERVICE_NOT_FOUND,
            CheckState.CONNECTION_FAILED,
        )


class UpdateCheckerDelegate(Protocol):
    """Receiver of update check results.

    The checker holds its delegate through a weak reference, so delegate
    classes must support one. Classes defining ``__slots__`` need a
    ``__weakref__`` slot.
    """

    def on_firmware_updates_available(
        self,
        is_update_available: bool,
        latest_release: Optional[FirmwareRelease],
        device_info: DeviceInfo,
        all_releases: Tuple[FirmwareRelease, ...],
    ) -> None:
        """Called when the device identity was resolved, update or not."""
        ...

    def on_dfu_service_not_found(self) -> None:
        """Called when the peripheral lacks the update services or cannot be reached."""
        ...


class UpdateChecker:
    """Checks a peripheral for available firmware updates.

    Each instance keeps the state, device info and outcome of its most recent
    check. Use one instance per peripheral when running checks concurrently.

    Example:
        >>> checker = UpdateChecker()
        >>> await checker.connect_and_check_updates_for_peripheral(peripheral, delegate)
        >>> checker.device_info
    """

    def __init__(
        self,
        catalog_store: Optional[CatalogStore] = None,
        resolver: Optional[UpdateResolver] = None,
        require_dfu_service: bool = True,
    ) -> None:
        """Initialize update checker.

        Args:
            catalog_store: Catalog store to resolve against (defaults to the global store)
            resolver: Resolver to use (defaults to one that offers beta releases)
            require_dfu_service: Also require the DFU service to be present
        """
        self.catalog_store = catalog_store if catalog_store is not None else get_catalog_store()
        self.resolver = resolver or UpdateResolver()
        self.require_dfu_service = require_dfu_service

        self.state = CheckState.IDLE
        self.device_info: Optional[DeviceInfo] = None
        self.outcome: Optional[UpdateOutcome] = None

        self._delegate_ref: Optional["weakref.ReferenceType[UpdateCheckerDelegate]"] = None

    def _set_state(self, state: CheckState) -> None:
        logger.debug(f"Update check: {self.state.value} -> {state.value}")
        self.state = state

    def _begin(self, delegate: UpdateCheckerDelegate) -> None:
        try:
            delegate_ref = weakref.ref(delegate)
        except TypeError as e:
            raise TypeError(
                f"Update delegate {type(delegate).__name__} does not support weak references"
            ) from e

        self.state = CheckState.IDLE
        self.device_info = None
        self.outcome = None
        self._delegate_ref = delegate_ref

    def _delegate(self) -> Optional[UpdateCheckerDelegate]:
        if self._delegate_ref is None:
            return None
        delegate = self._delegate_ref()
        if delegate is None:
            logger.debug("Delegate released before the check finished; dropping result")
        return delegate

    async def check_updates_for_peripheral(
        self,
        peripheral: Peripheral,
        delegate: UpdateCheckerDelegate,
    ) -> CheckState:
        """Check for updates on an already connected peripheral.

        Args:
            peripheral: Connected peripheral
            delegate: Receiver of the result (held weakly)

        Returns:
            Terminal state of the check

        Raises:
            TypeError: If the delegate does not support weak references
        """
        self._begin(delegate)
        # Only the weak reference may keep the delegate alive from here on
        del delegate
        return await self._run(peripheral)

    async def connect_and_check_updates_for_peripheral(
        self,
        peripheral: Peripheral,
        delegate: UpdateCheckerDelegate,
    ) -> CheckState:
        """Connect to a peripheral if needed, then check for updates.

        A connection failure is reported through ``on_dfu_service_not_found``.

        Args:
            peripheral: Peripheral to check
            delegate: Receiver of the result (held weakly)

        Returns:
            Terminal state of the check

        Raises:
            TypeError: If the delegate does not support weak references
        """
        self._begin(delegate)
        del delegate

        if not peripheral.is_connected:
            self._set_state(CheckState.CONNECTING)
            try:
                await peripheral.connect()
            except TransportError as e:
                logger.warning(f"Connection to {peripheral.identifier} failed: {e}")
                self._set_state(CheckState.CONNECTION_FAILED)
                self._notify_service_not_found()
                return self.state

        return await self._run(peripheral)

    async def _run(self, peripheral: Peripheral) -> CheckState:
        try:
            self._set_state(CheckState.DISCOVERING_SERVICE)
            await self._discover_services(peripheral)

            self._set_state(CheckState.READING_IDENTITY)
            device_info = await read_device_info(peripheral)
        except ConnectionFailure as e:
            logger.warning(f"Lost connection to {peripheral.identifier}: {e}")
            self._set_state(CheckState.CONNECTION_FAILED)
            self._notify_service_not_found()
            return self.state
        except (ServiceAbsent, TransportError) as e:
            logger.info(f"Update service not found on {peripheral.identifier}: {e}")
            self._set_state(CheckState.SERVICE_NOT_FOUND)
            self._notify_service_not_found()
            return self.state

        self.device_info = device_info

        self._set_state(CheckState.RESOLVING)
        outcome = self.resolver.resolve(device_info, self.catalog_store.catalog)
        self.outcome = outcome

        logger.info(
            f"{peripheral.identifier} ({device_info.model_number}) runs "
            f"{device_info.firmware_revision}; update available: {outcome.is_update_available}"
        )

        self._set_state(CheckState.REPORTED)
        self._notify_updates_available(outcome)
        return self.state

    async def _discover_services(self, peripheral: Peripheral) -> None:
        """Check that the peripheral exposes the services needed for updates.

        Raises:
            ServiceAbsent: If a required service is missing
        """
        required = [DEVICE_INFORMATION_SERVICE_UUID]
        if self.require_dfu_service:
            required.append(DFU_SERVICE_UUID)

        for uuid in required:
            if not await peripheral.has_service(uuid):
                raise ServiceAbsent(f"Service {uuid} not found")

    def _notify_updates_available(self, outcome: UpdateOutcome) -> None:
        delegate = self._delegate()
        if delegate is None:
            return
        try:
            delegate.on_firmware_updates_available(
                outcome.is_update_available,
                outcome.latest_release,
                outcome.device_info,
                outcome.all_releases_for_board,
            )
        except Exception as e:
            logger.error(f"Update delegate failed: {e}", exc_info=True)

    def _notify_service_not_found(self) -> None:
        delegate = self._delegate()
        if delegate is None:
            return
        try:
            delegate.on_dfu_service_not_found()
        except Exception as e:
            logger.error(f"Update delegate failed: {e}", exc_info=True)
