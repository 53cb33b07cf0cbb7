"""Firmware release and releases catalog models."""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FirmwareRelease(BaseModel):
    """A single firmware release published for a board."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(..., min_length=1, examples=["0.6.7"])
    board_identifier: str = Field(..., min_length=1, description="Matches DeviceInfo.model_number")

    # Download info
    download_url: str = Field(..., description="Firmware image (hex) location")
    init_file_url: Optional[str] = Field(None, description="DFU init packet location")

    # Compatibility
    min_bootloader_version: Optional[str] = None

    # Release notes
    release_notes: str = ""
    is_beta: bool = False

    @field_validator("version", "board_identifier")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Drop surrounding whitespace picked up from catalog documents."""
        return v.strip()


class ReleasesCatalog:
    """Table mapping board identifiers to their known firmware releases.

    Instances are immutable: a refresh builds a new catalog and publishes it
    instead of editing the current one.

    Example:
        >>> catalog = ReleasesCatalog({"BoardA": [release]})
        >>> catalog.releases_for_board("BoardA")
    """

    __slots__ = ("_boards",)

    def __init__(self, boards: Optional[Mapping[str, Iterable[FirmwareRelease]]] = None) -> None:
        """Initialize catalog.

        Args:
            boards: Mapping from board identifier to its releases (any order)
        """
        frozen: Dict[str, Tuple[FirmwareRelease, ...]] = {}
        for board_identifier, releases in (boards or {}).items():
            frozen[board_identifier] = tuple(releases)
        self._boards = MappingProxyType(frozen)

    @classmethod
    def empty(cls) -> "ReleasesCatalog":
        return cls()

    @property
    def boards(self) -> Mapping[str, Tuple[FirmwareRelease, ...]]:
        return self._boards

    @property
    def board_identifiers(self) -> Tuple[str, ...]:
        return tuple(sorted(self._boards))

    @property
    def is_empty(self) -> bool:
        return not self._boards

    def releases_for_board(self, board_identifier: str) -> Tuple[FirmwareRelease, ...]:
        """Get releases for a board (exact, case-sensitive match).

        Returns:
            Releases in catalog order, or an empty tuple for unknown boards
        """
        return self._boards.get(board_identifier, ())

    def __len__(self) -> int:
        return len(self._boards)

    def __contains__(self, board_identifier: object) -> bool:
        return board_identifier in self._boards

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReleasesCatalog):
            return NotImplemented
        return dict(self._boards) == dict(other._boards)

    def __repr__(self) -> str:
        return f"ReleasesCatalog(boards={len(self._boards)})"
