"""Firmware version ordering.

Versions are compared with major.minor.patch semantics using
``packaging``. Pre-release suffixes are understood (``2.0.0-beta`` sorts
below ``2.0.0`` and above ``1.2.0``). Anything that does not parse sorts
below every valid version.
"""

from typing import Optional, Tuple

from packaging.version import InvalidVersion, Version

_LOWEST: Tuple[int, Optional[Version]] = (0, None)


def parse_version(text: Optional[str]) -> Optional[Version]:
    """Parse a firmware version string.

    Args:
        text: Version string such as "1.2.0", "v0.6.7" or "2.0.0-beta"

    Returns:
        Parsed version, or None if the string is missing or malformed
    """
    if text is None:
        return None

    cleaned = text.strip()
    if cleaned[:1] in ("v", "V"):
        cleaned = cleaned[1:]
    if not cleaned:
        return None

    try:
        return Version(cleaned)
    except InvalidVersion:
        return None


def version_key(text: Optional[str]) -> Tuple[int, Optional[Version]]:
    """Sort key placing malformed versions below all valid ones."""
    parsed = parse_version(text)
    if parsed is None:
        return _LOWEST
    return (1, parsed)


def compare_versions(a: Optional[str], b: Optional[str]) -> int:
    """Compare two version strings.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    key_a = version_key(a)
    key_b = version_key(b)

    if key_a[0] != key_b[0]:
        return -1 if key_a[0] < key_b[0] else 1
    if key_a[1] is None:
        # Both malformed
        return 0
    if key_a[1] < key_b[1]:
        return -1
    if key_a[1] > key_b[1]:
        return 1
    return 0


def is_valid_version(text: Optional[str]) -> bool:
    return parse_version(text) is not None


def is_newer(candidate: Optional[str], current: Optional[str]) -> bool:
    """Check if candidate is strictly newer than current.

    A missing or malformed current version counts as lowest, so any valid
    candidate is newer than it.
    """
    return compare_versions(candidate, current) > 0
