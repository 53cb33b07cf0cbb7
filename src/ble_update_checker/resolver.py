"""Update resolution engine.

Decides, for a device identity and a releases catalog, which release is the
latest one the device can take and whether it is an upgrade.

Selection rules:
    - releases are matched by exact, case-sensitive board identifier
    - beta releases are dropped when ``include_beta`` is False
    - releases needing a newer bootloader than the device reports are dropped;
      devices that report no bootloader version are not filtered
    - the highest version wins; malformed versions sort lowest
    - identical versions prefer the non-beta release, then catalog order
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ble_update_checker.models import (
    DeviceInfo,
    FirmwareRelease,
    OutcomeReason,
    ReleasesCatalog,
    UpdateOutcome,
)
from ble_update_checker.versions import compare_versions, is_newer, version_key

logger = logging.getLogger(__name__)


def _release_sort_key(release: FirmwareRelease):
    # Newest first; on equal versions non-beta before beta
    return (version_key(release.version), not release.is_beta)


def sort_releases(releases: Sequence[FirmwareRelease]) -> Tuple[FirmwareRelease, ...]:
    """Sort releases newest first.

    The sort is stable, so fully tied releases keep their catalog order and
    the first one listed is picked as latest.
    """
    return tuple(sorted(releases, key=_release_sort_key, reverse=True))


def is_bootloader_compatible(release: FirmwareRelease, bootloader_version: Optional[str]) -> bool:
    """Check if a release can be installed over the given bootloader.

    Args:
        release: Candidate release
        bootloader_version: Bootloader reported by the device, or None if unknown

    Returns:
        True unless the device reports a bootloader older than the release requires
    """
    if not bootloader_version or not release.min_bootloader_version:
        return True
    return compare_versions(release.min_bootloader_version, bootloader_version) <= 0


def resolve(
    device_info: DeviceInfo,
    catalog: ReleasesCatalog,
    *,
    include_beta: bool = True,
) -> UpdateOutcome:
    """Resolve the latest applicable release for a device.

    Never raises for unknown devices or boards; those are reported through
    the outcome reason.

    Args:
        device_info: Identity read from the peripheral
        catalog: Releases catalog to search
        include_beta: Whether beta releases may be offered

    Returns:
        Update outcome
    """
    model_number = (device_info.model_number or "").strip()
    if not model_number:
        logger.debug("Device reported no model number")
        return UpdateOutcome(
            is_update_available=False,
            latest_release=None,
            device_info=device_info,
            all_releases_for_board=(),
            reason=OutcomeReason.UNKNOWN_DEVICE,
        )

    board_releases = catalog.releases_for_board(model_number)
    if not board_releases:
        logger.debug(f"No releases found for board {model_number}")
        return UpdateOutcome(
            is_update_available=False,
            latest_release=None,
            device_info=device_info,
            all_releases_for_board=(),
            reason=OutcomeReason.BOARD_NOT_FOUND,
        )

    candidates: List[FirmwareRelease] = []
    for release in board_releases:
        if release.is_beta and not include_beta:
            continue
        if not is_bootloader_compatible(release, device_info.bootloader_version):
            logger.debug(
                f"Skipping {release.version}: requires bootloader "
                f"{release.min_bootloader_version}, device has {device_info.bootloader_version}"
            )
            continue
        candidates.append(release)

    ordered = sort_releases(candidates)
    if not ordered:
        return UpdateOutcome(
            is_update_available=False,
            latest_release=None,
            device_info=device_info,
            all_releases_for_board=(),
            reason=OutcomeReason.NO_COMPATIBLE_RELEASE,
        )

    latest = ordered[0]
    update_available = is_newer(latest.version, device_info.firmware_revision)

    logger.debug(
        f"Board {model_number}: latest {latest.version}, "
        f"current {device_info.firmware_revision}, update={update_available}"
    )

    return UpdateOutcome(
        is_update_available=update_available,
        latest_release=latest,
        device_info=device_info,
        all_releases_for_board=ordered,
        reason=OutcomeReason.UPDATE_AVAILABLE if update_available else OutcomeReason.UP_TO_DATE,
    )


class UpdateResolver:
    """Resolver bound to a beta-release policy.

    Example:
        >>> resolver = UpdateResolver(include_beta=False)
        >>> outcome = resolver.resolve(device_info, catalog)
    """

    def __init__(self, include_beta: bool = True) -> None:
        self.include_beta = include_beta

    def resolve(self, device_info: DeviceInfo, catalog: ReleasesCatalog) -> UpdateOutcome:
        return resolve(device_info, catalog, include_beta=self.include_beta)
