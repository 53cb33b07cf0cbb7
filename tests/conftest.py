"""Pytest configuration and shared fixtures."""

import asyncio
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from ble_update_checker.ble.device_information import (
    DEVICE_INFORMATION_SERVICE_UUID,
    DFU_SERVICE_UUID,
    FIRMWARE_REVISION_UUID,
    HARDWARE_REVISION_UUID,
    MANUFACTURER_NAME_UUID,
    MODEL_NUMBER_UUID,
    SOFTWARE_REVISION_UUID,
)
from ble_update_checker.catalog import CatalogStore, reset_catalog_store
from ble_update_checker.exceptions import ConnectionFailure, TransportError
from ble_update_checker.models import DeviceInfo, FirmwareRelease, ReleasesCatalog


class FakePeripheral:
    """In-memory peripheral implementing the transport protocol."""

    def __init__(
        self,
        services: Iterable[str] = (DEVICE_INFORMATION_SERVICE_UUID, DFU_SERVICE_UUID),
        characteristics: Optional[Dict[str, bytes]] = None,
        connected: bool = True,
        connect_error: Optional[Exception] = None,
        read_gate: Optional[asyncio.Event] = None,
        identifier: str = "C4:2A:11:00:00:01",
    ) -> None:
        self.services = set(services)
        self.characteristics = dict(characteristics or {})
        self.connected = connected
        self.connect_error = connect_error
        self.read_gate = read_gate
        self._identifier = identifier
        self.connect_calls = 0
        self.reads: List[str] = []

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def is_connected(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        self.connect_calls += 1
        await asyncio.sleep(0)
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def has_service(self, uuid: str) -> bool:
        if not self.connected:
            raise ConnectionFailure("Not connected")
        return uuid in self.services

    async def read_characteristic(self, uuid: str) -> bytes:
        if self.read_gate is not None:
            await self.read_gate.wait()
        self.reads.append(uuid)
        if uuid not in self.characteristics:
            raise TransportError(f"Characteristic {uuid} not found")
        return self.characteristics[uuid]


class RecordingDelegate:
    """Delegate that records every notification it receives."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, tuple]] = []

    def on_firmware_updates_available(self, is_update_available, latest_release, device_info, all_releases):
        self.calls.append(
            ("updates_available", (is_update_available, latest_release, device_info, all_releases))
        )

    def on_dfu_service_not_found(self):
        self.calls.append(("service_not_found", ()))


def make_release(
    version: str,
    board: str = "BoardA",
    min_bootloader: Optional[str] = None,
    beta: bool = False,
    notes: str = "",
) -> FirmwareRelease:
    """Build a release with a download URL derived from its version."""
    return FirmwareRelease(
        version=version,
        board_identifier=board,
        download_url=f"https://releases.example.com/{board}/{version}.hex",
        min_bootloader_version=min_bootloader,
        release_notes=notes,
        is_beta=beta,
    )


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset global singleton instances between tests."""
    yield
    reset_catalog_store()


@pytest.fixture
def board_a_catalog() -> ReleasesCatalog:
    """Catalog with three BoardA releases, the newest one a beta."""
    return ReleasesCatalog({
        "BoardA": [
            make_release("1.0.0"),
            make_release("1.2.0"),
            make_release("2.0.0-beta", beta=True),
        ],
        "BoardB": [
            make_release("0.6.7", board="BoardB", min_bootloader="0.2"),
            make_release("0.5.0", board="BoardB"),
        ],
    })


@pytest.fixture
def catalog_store(board_a_catalog) -> CatalogStore:
    """Provide a catalog store holding the BoardA catalog."""
    return CatalogStore(board_a_catalog)


@pytest.fixture
def device_info() -> DeviceInfo:
    """Provide a BoardA device running 1.0.0 with no bootloader reported."""
    return DeviceInfo(
        manufacturer="Adafruit Industries",
        model_number="BoardA",
        firmware_revision="1.0.0",
        hardware_revision="QFACA10",
        bootloader_version=None,
    )


@pytest.fixture
def identity_characteristics() -> Dict[str, bytes]:
    """Characteristic values of a BoardA peripheral."""
    return {
        MANUFACTURER_NAME_UUID: b"Adafruit Industries",
        MODEL_NUMBER_UUID: b"BoardA",
        FIRMWARE_REVISION_UUID: b"S110 8.0.0, 0.2",
        HARDWARE_REVISION_UUID: b"QFACA10",
        SOFTWARE_REVISION_UUID: b"1.0.0",
    }


@pytest.fixture
def peripheral(identity_characteristics) -> FakePeripheral:
    """Provide a connected peripheral exposing both update services."""
    return FakePeripheral(characteristics=identity_characteristics)


@pytest.fixture
def delegate() -> RecordingDelegate:
    return RecordingDelegate()


@pytest.fixture
def release_factory():
    """Provide the release builder."""
    return make_release


@pytest.fixture
def peripheral_factory(identity_characteristics):
    """Provide a builder for fake peripherals with BoardA identity by default."""
    def _make(**kwargs) -> FakePeripheral:
        kwargs.setdefault("characteristics", identity_characteristics)
        return FakePeripheral(**kwargs)

    return _make


# Markers for test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "requires_hardware: Tests requiring actual hardware")
    config.addinivalue_line("markers", "requires_network: Tests requiring network")
