"""Releases catalog document parsing.

Document shape (JSON or YAML)::

    boards:
      Bluefruit LE Micro:
        name: Bluefruit LE Micro
        firmware:
          - version: "0.6.7"
            hex_url: https://example.com/blefriend32_s110_xxac_0_6_7.hex
            init_url: https://example.com/blefriend32_s110_xxac_0_6_7.dat
            min_bootloader_version: "0.2"
            release_notes: "- Fixed advertising interval"
            beta: false
"""

import json
import logging
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ble_update_checker.exceptions import CatalogParseError
from ble_update_checker.models import FirmwareRelease, ReleasesCatalog

logger = logging.getLogger(__name__)


class FirmwareEntry(BaseModel):
    """Firmware entry as published in the catalog document."""

    version: str = Field(..., min_length=1)
    hex_url: str = Field(..., min_length=1)
    init_url: Optional[str] = None
    min_bootloader_version: Optional[str] = None
    release_notes: str = ""
    beta: bool = False

    @field_validator("version", "min_bootloader_version", mode="before")
    @classmethod
    def require_string_version(cls, v: Any) -> Any:
        """Reject versions a YAML loader turned into numbers (1.10 becomes 1.1)."""
        if v is not None and not isinstance(v, str):
            raise ValueError(f"version {v!r} must be a quoted string")
        return v

    def to_release(self, board_identifier: str) -> FirmwareRelease:
        return FirmwareRelease(
            version=self.version,
            board_identifier=board_identifier,
            download_url=self.hex_url,
            init_file_url=self.init_url,
            min_bootloader_version=self.min_bootloader_version,
            release_notes=self.release_notes,
            is_beta=self.beta,
        )


class BoardEntry(BaseModel):
    """Board entry as published in the catalog document."""

    name: Optional[str] = None
    firmware: List[FirmwareEntry] = Field(default_factory=list)


class CatalogDocument(BaseModel):
    """Top level of the catalog document."""

    boards: Dict[str, BoardEntry] = Field(default_factory=dict)

    @field_validator("boards")
    @classmethod
    def normalize_board_identifiers(cls, v: Dict[str, BoardEntry]) -> Dict[str, BoardEntry]:
        """Strip board keys so they match the releases filed under them."""
        boards: Dict[str, BoardEntry] = {}
        for key, board in v.items():
            board_identifier = key.strip()
            if not board_identifier:
                raise ValueError("board identifier must not be blank")
            if board_identifier in boards:
                raise ValueError(f"duplicate board identifier {board_identifier!r}")
            boards[board_identifier] = board
        return boards


def parse_catalog(data: Any) -> ReleasesCatalog:
    """Build a catalog from a decoded document.

    Args:
        data: Decoded JSON/YAML document

    Returns:
        Releases catalog

    Raises:
        CatalogParseError: If the document does not match the expected shape
    """
    if not isinstance(data, dict):
        raise CatalogParseError("Catalog document must be a mapping")

    try:
        document = CatalogDocument.model_validate(data)
        boards = {
            board_identifier: [entry.to_release(board_identifier) for entry in board.firmware]
            for board_identifier, board in document.boards.items()
        }
    except ValidationError as e:
        raise CatalogParseError(f"Invalid catalog document: {e}") from e

    logger.debug(f"Parsed catalog with {len(boards)} boards")
    return ReleasesCatalog(boards)


def parse_catalog_text(text: str, content_type: Optional[str] = None) -> ReleasesCatalog:
    """Parse catalog document text.

    JSON is tried first unless the content type says YAML; YAML is the
    fallback since it also accepts most hand-written documents.

    Raises:
        CatalogParseError: If the text cannot be decoded or validated
    """
    is_yaml = bool(content_type) and "yaml" in content_type.lower()

    if not is_yaml:
        try:
            return parse_catalog(json.loads(text))
        except json.JSONDecodeError:
            pass

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogParseError(f"Catalog document is neither JSON nor YAML: {e}") from e

    return parse_catalog(data)
