"""CLI for the BLE firmware update checker.

Provides command-line interface for refreshing the releases catalog and
checking peripherals for firmware updates.
"""

import asyncio
import logging
import sys
from typing import Optional, Tuple

import click

from ble_update_checker.ble.transport import BleakPeripheral
from ble_update_checker.catalog import CatalogLoader, CatalogStore
from ble_update_checker.checker import CheckState, UpdateChecker
from ble_update_checker.config import UpdaterConfig, load_config
from ble_update_checker.models import DeviceInfo, FirmwareRelease
from ble_update_checker.resolver import UpdateResolver, sort_releases

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


async def load_catalog(config: UpdaterConfig, store: CatalogStore) -> bool:
    """Populate the store from the configured catalog source.

    Returns:
        True if a catalog was published
    """
    loader = CatalogLoader(
        config.releases_url,
        store=store,
        timeout=config.request_timeout_sec,
    )
    try:
        if config.catalog_file:
            return loader.load_file(config.catalog_file)
        return await loader.refresh()
    finally:
        await loader.close()


class ConsoleDelegate:
    """Prints update check results."""

    def __init__(self) -> None:
        self.reported = False

    def on_firmware_updates_available(
        self,
        is_update_available: bool,
        latest_release: Optional[FirmwareRelease],
        device_info: DeviceInfo,
        all_releases: Tuple[FirmwareRelease, ...],
    ) -> None:
        self.reported = True

        click.echo(f"  Manufacturer: {device_info.manufacturer or 'unknown'}")
        click.echo(f"  Model: {device_info.model_number}")
        click.echo(f"  Firmware: {device_info.firmware_revision or 'unknown'}")
        click.echo(f"  Hardware: {device_info.hardware_revision or 'unknown'}")
        click.echo(f"  Bootloader: {device_info.bootloader_version or 'unknown'}")

        if device_info.has_legacy_bootloader:
            click.echo("⚠ The legacy bootloader on this device cannot be updated with this tool")

        if latest_release is None:
            click.echo("✓ No releases found for this board")
        elif is_update_available:
            click.echo(f"✓ Update available: {latest_release.version}")
            click.echo(f"  Download: {latest_release.download_url}")
            if latest_release.release_notes:
                click.echo(f"  Notes: {latest_release.release_notes}")
        else:
            click.echo(f"✓ Up to date (latest release: {latest_release.version})")

        if len(all_releases) > 1:
            click.echo(f"  {len(all_releases)} releases available for this board")

    def on_dfu_service_not_found(self) -> None:
        click.echo("✗ No DFU service found on device")


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Configuration file")
@click.pass_context
def cli(ctx, config_path):
    """BLE firmware update checker CLI."""
    config = load_config(config_path)
    setup_logging(config.log_level)
    ctx.obj = config


@cli.command()
@click.pass_obj
def refresh(config: UpdaterConfig):
    """Refresh the releases catalog."""
    store = CatalogStore()

    if not asyncio.run(load_catalog(config, store)):
        click.echo("✗ Failed to refresh releases catalog")
        sys.exit(1)

    click.echo(f"✓ Releases catalog loaded: {len(store.catalog)} boards")
    for board_identifier in store.catalog.board_identifiers:
        click.echo(f"  {board_identifier}: {len(store.catalog.releases_for_board(board_identifier))} releases")


@cli.command()
@click.argument("board")
@click.pass_obj
def releases(config: UpdaterConfig, board):
    """List known releases for a board."""
    store = CatalogStore()

    if not asyncio.run(load_catalog(config, store)):
        click.echo("✗ Failed to refresh releases catalog")
        sys.exit(1)

    board_releases = sort_releases(store.catalog.releases_for_board(board))
    if not board_releases:
        click.echo(f"No releases found for {board}")
        return

    for release in board_releases:
        if release.is_beta and not config.show_beta_versions:
            continue
        label = " (beta)" if release.is_beta else ""
        bootloader = release.min_bootloader_version or "any"
        click.echo(f"{release.version}{label}  bootloader>={bootloader}  {release.download_url}")


@cli.command()
@click.argument("address")
@click.option(
    "--connect/--no-connect",
    default=True,
    help="Connect before checking (default: connect)"
)
@click.pass_obj
def check(config: UpdaterConfig, address, connect):
    """Check a peripheral for firmware updates."""

    async def _check():
        store = CatalogStore()
        if not await load_catalog(config, store):
            logger.warning("Releases catalog unavailable; no updates will be offered")

        peripheral = BleakPeripheral(address, connect_timeout=config.connect_timeout_sec)
        checker = UpdateChecker(
            catalog_store=store,
            resolver=UpdateResolver(include_beta=config.show_beta_versions),
            require_dfu_service=config.require_dfu_service,
        )
        delegate = ConsoleDelegate()

        try:
            if connect:
                state = await checker.connect_and_check_updates_for_peripheral(peripheral, delegate)
            else:
                state = await checker.check_updates_for_peripheral(peripheral, delegate)
        finally:
            if peripheral.is_connected:
                await peripheral.disconnect()

        return 0 if state == CheckState.REPORTED else 1

    exit_code = asyncio.run(_check())
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
