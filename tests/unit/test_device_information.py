"""Tests for Device Information Service reads."""

import pytest

from ble_update_checker.ble.device_information import (
    FIRMWARE_REVISION_UUID,
    HARDWARE_REVISION_UUID,
    MANUFACTURER_NAME_UUID,
    MODEL_NUMBER_UUID,
    SOFTWARE_REVISION_UUID,
    build_device_info,
    decode_string,
    read_device_info,
    split_firmware_revision,
    uuid16,
)
from ble_update_checker.exceptions import IdentityReadIncomplete


class TestDecoding:
    """Test characteristic value decoding."""

    def test_uuid16(self) -> None:
        assert uuid16(0x180A) == "0000180a-0000-1000-8000-00805f9b34fb"

    def test_decode_string(self) -> None:
        assert decode_string(b"BoardA") == "BoardA"
        assert decode_string(b"BoardA\x00\x00") == "BoardA"
        assert decode_string(b"  1.0.0 ") == "1.0.0"
        assert decode_string(b"") is None
        assert decode_string(None) is None

    def test_split_firmware_revision_with_bootloader(self) -> None:
        assert split_firmware_revision("S110 8.0.0, 0.2") == ("S110 8.0.0", "0.2")

    def test_split_firmware_revision_without_bootloader(self) -> None:
        assert split_firmware_revision("1.0.0") == ("1.0.0", None)
        assert split_firmware_revision(None) == (None, None)

    def test_build_device_info_prefers_software_revision(self) -> None:
        info = build_device_info({
            "model_number": "BoardA",
            "firmware_revision": "S110 8.0.0, 0.2",
            "software_revision": "0.6.7",
        })

        assert info.firmware_revision == "0.6.7"
        assert info.bootloader_version == "0.2"

    def test_build_device_info_falls_back_to_firmware_revision(self) -> None:
        info = build_device_info({"model_number": "BoardA", "firmware_revision": "1.4.0"})

        assert info.firmware_revision == "1.4.0"
        assert info.bootloader_version is None

    def test_build_device_info_requires_model_number(self) -> None:
        with pytest.raises(IdentityReadIncomplete):
            build_device_info({"firmware_revision": "1.4.0"})


class TestReadDeviceInfo:
    """Test reading identity from a peripheral."""

    @pytest.mark.asyncio
    async def test_reads_all_fields(self, peripheral) -> None:
        info = await read_device_info(peripheral)

        assert info.manufacturer == "Adafruit Industries"
        assert info.model_number == "BoardA"
        assert info.firmware_revision == "1.0.0"
        assert info.hardware_revision == "QFACA10"
        assert info.bootloader_version == "0.2"
        assert set(peripheral.reads) == {
            MANUFACTURER_NAME_UUID,
            MODEL_NUMBER_UUID,
            FIRMWARE_REVISION_UUID,
            HARDWARE_REVISION_UUID,
            SOFTWARE_REVISION_UUID,
        }

    @pytest.mark.asyncio
    async def test_optional_fields_degrade_to_none(self, peripheral_factory) -> None:
        """Test unreadable optional characteristics leave fields empty."""
        peripheral = peripheral_factory(characteristics={MODEL_NUMBER_UUID: b"BoardA"})

        info = await read_device_info(peripheral)

        assert info.model_number == "BoardA"
        assert info.manufacturer is None
        assert info.firmware_revision is None
        assert info.hardware_revision is None
        assert info.bootloader_version is None

    @pytest.mark.asyncio
    async def test_missing_model_number_raises(self, peripheral_factory, identity_characteristics) -> None:
        characteristics = dict(identity_characteristics)
        del characteristics[MODEL_NUMBER_UUID]
        peripheral = peripheral_factory(characteristics=characteristics)

        with pytest.raises(IdentityReadIncomplete):
            await read_device_info(peripheral)

    @pytest.mark.asyncio
    async def test_blank_model_number_raises(self, peripheral_factory, identity_characteristics) -> None:
        characteristics = dict(identity_characteristics)
        characteristics[MODEL_NUMBER_UUID] = b"\x00"
        peripheral = peripheral_factory(characteristics=characteristics)

        with pytest.raises(IdentityReadIncomplete):
            await read_device_info(peripheral)
