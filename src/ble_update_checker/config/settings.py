"""Update checker configuration."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_RELEASES_URL = "https://releases.example.com/ble/releases.json"


class UpdaterConfig(BaseModel):
    """Configuration for the firmware update checker.

    Defines where releases come from and which of them may be offered.
    """

    # Releases server
    releases_url: str = Field(
        default=DEFAULT_RELEASES_URL,
        description="URL of the releases catalog document"
    )

    catalog_file: Optional[str] = Field(
        default=None,
        description="Local catalog document used instead of the releases server"
    )

    # Release selection
    show_beta_versions: bool = Field(
        default=True,
        description="Offer beta firmware releases"
    )

    require_dfu_service: bool = Field(
        default=True,
        description="Treat peripherals without the DFU service as not updatable"
    )

    # Timeouts
    request_timeout_sec: float = Field(
        default=10.0,
        description="HTTP request timeout in seconds",
        ge=1.0,
        le=60.0
    )

    connect_timeout_sec: float = Field(
        default=20.0,
        description="BLE connection timeout in seconds",
        ge=1.0,
        le=120.0
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level
