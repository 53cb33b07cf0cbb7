"""Device identity model."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Bootloader version reported by boards that predate the secure bootloader
LEGACY_BOOTLOADER_VERSION = "0.0"


class DeviceInfo(BaseModel):
    """Identity reported by a peripheral's Device Information Service.

    Built once per successful identity read and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    manufacturer: Optional[str] = Field(None, description="Manufacturer name string")
    model_number: Optional[str] = Field(None, description="Model number, used as catalog board key")
    firmware_revision: Optional[str] = Field(None, description="Running firmware version")
    hardware_revision: Optional[str] = Field(None, description="Hardware revision string")
    bootloader_version: Optional[str] = Field(None, description="Bootloader version, if reported")

    @property
    def has_bootloader_version(self) -> bool:
        """Check if the device reported a bootloader version."""
        return bool(self.bootloader_version)

    @property
    def has_legacy_bootloader(self) -> bool:
        """Check if the device runs the legacy default bootloader."""
        return self.bootloader_version == LEGACY_BOOTLOADER_VERSION
