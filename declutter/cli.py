"""Command Line Interface for Declutter."""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from .adb import ADBDevice, ADBError, PackageManager, User, list_devices
from .config import DeclutterConfig, get_config, get_lists_path, load_config, save_config, set_config
from .core import (
    ClassificationError,
    ClassificationStore,
    ExportResult,
    PackageRecord,
    PackageState,
    Removal,
    UadList,
    apply_selection,
    export_backup,
    export_selection,
    fetch_packages,
    filter_records,
    load_selection,
)
from .util import format_diff_time_from_now, get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

STATE_STYLES = {
    PackageState.ENABLED: "green",
    PackageState.DISABLED: "yellow",
    PackageState.UNINSTALLED: "red",
}

REMOVAL_STYLES = {
    Removal.RECOMMENDED: "green",
    Removal.ADVANCED: "yellow",
    Removal.EXPERT: "magenta",
    Removal.UNSAFE: "red",
    Removal.UNLISTED: "dim",
}


def _enum_choice(enum_cls) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


def _to_enum(enum_cls, value: Optional[str]):
    """Map a case-insensitive choice back to its enum member."""
    if value is None:
        return None
    return next(m for m in enum_cls if m.value.lower() == value.lower())


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Configuration file path")
def cli(verbose: bool, config: Optional[Path]):
    """Declutter - reconcile Android system packages with curated debloat lists."""
    if config:
        set_config(load_config(config))

    level = "DEBUG" if verbose else get_config().log_level
    setup_logging(level=level, log_file=get_config().log_file)


@cli.group()
def device():
    """Device management commands."""
    pass


@device.command("list")
def device_list():
    """List connected devices."""
    try:
        devices = list_devices(get_config().adb_path)
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)

    _list_devices(devices)


def _list_devices(devices: List[ADBDevice]):
    """Helper to display device list."""
    if not devices:
        console.print("[yellow]No devices found[/yellow]")
        return

    table = Table(title="Connected Devices")
    table.add_column("Serial", style="cyan")
    table.add_column("Model", style="white")
    table.add_column("Brand", style="white")
    table.add_column("Android", style="white")

    for dev in devices:
        try:
            info = dev.get_device_info()
            table.add_row(info.serial, info.model, info.brand, info.android_version)
        except ADBError:
            table.add_row(dev.serial, "Unknown", "Unknown", "Unknown")

    console.print(table)


@device.command("users")
@click.option("--serial", "-s", help="Device serial number")
def device_users(serial: Optional[str]):
    """List user profiles on a device."""
    dev = _get_target_device(serial)

    try:
        users = dev.list_users()
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Users on {dev.serial}")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Protected", style="white")

    for user in users:
        table.add_row(str(user.id), user.name, "Yes" if user.protected else "No")

    console.print(table)


def _get_target_device(serial: Optional[str]) -> ADBDevice:
    """Get target device for operations, exiting when none fits."""
    try:
        devices = list_devices(get_config().adb_path)
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)

    if not devices:
        console.print("[red]No devices found[/red]")
        sys.exit(1)

    if serial:
        dev = next((d for d in devices if d.serial == serial), None)
        if dev is None:
            console.print(f"[red]Device with serial {serial} not found[/red]")
            sys.exit(1)
        return dev

    if len(devices) > 1:
        console.print("[yellow]Multiple devices found. Please specify --serial[/yellow]")
        _list_devices(devices)
        sys.exit(1)

    return devices[0]


def _resolve_user(dev: ADBDevice, user_id: Optional[int]) -> Optional[User]:
    """Find the requested device user, falling back to the configured default."""
    if user_id is None:
        user_id = get_config().default_user
    if user_id is None:
        return None

    user = next((u for u in dev.list_users() if u.id == user_id), None)
    if user is None:
        console.print(f"[red]User {user_id} not found on {dev.serial}[/red]")
        sys.exit(1)
    return user


def _load_store(config: DeclutterConfig) -> ClassificationStore:
    """Load the classification lists, or an empty store when none exist yet."""
    lists_path = get_lists_path(config)

    if not lists_path.exists():
        logger.warning(f"No classification lists at {lists_path}, every package will be unlisted")
        return ClassificationStore.empty()

    try:
        return ClassificationStore.load(lists_path)
    except ClassificationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_records(serial: Optional[str], user_id: Optional[int]) -> List[PackageRecord]:
    """Reconcile the packages of a device user."""
    store = _load_store(get_config())
    dev = _get_target_device(serial)

    try:
        user = _resolve_user(dev, user_id)
        return fetch_packages(store, PackageManager(dev), user)
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)


def _records_table(records: List[PackageRecord], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Package", style="cyan")
    table.add_column("State")
    table.add_column("List", style="white")
    table.add_column("Removal")
    table.add_column("Description", style="white", overflow="fold")

    for record in records:
        table.add_row(
            record.name,
            f"[{STATE_STYLES[record.state]}]{record.state.value}[/]",
            record.uad_list.value,
            f"[{REMOVAL_STYLES[record.removal]}]{record.removal.value}[/]",
            record.description.split("\n")[0],
        )

    return table


def _report_export(result: ExportResult, what: str, open_after: bool):
    """Print an export result and optionally reveal the file."""
    if not result.ok:
        console.print(f"[red]{what} failed: {result.error}[/red]")
        sys.exit(1)

    console.print(f"[bold green]{what} written to {result.path}[/bold green]")

    if open_after or get_config().export.open_after_export:
        click.launch(str(result.path), locate=True)


@cli.group()
def packages():
    """Package inspection and export commands."""
    pass


@packages.command("list")
@click.option("--serial", "-s", help="Device serial number")
@click.option("--user", "-u", "user_id", type=int, help="Device user id")
@click.option("--state", type=_enum_choice(PackageState), help="Only packages in this state")
@click.option("--list", "uad_list", type=_enum_choice(UadList), help="Only packages from this list")
@click.option("--removal", type=_enum_choice(Removal), help="Only packages with this removal level")
@click.option("--search", help="Match package name or description")
@click.option("--all-users", is_flag=True, help="List packages of every user profile")
def packages_list(serial: Optional[str], user_id: Optional[int], state: Optional[str],
                  uad_list: Optional[str], removal: Optional[str], search: Optional[str],
                  all_users: bool):
    """List device packages with their classification."""
    filters = dict(
        state=_to_enum(PackageState, state),
        uad_list=_to_enum(UadList, uad_list),
        removal=_to_enum(Removal, removal),
        search=search,
    )

    if not all_users:
        records = filter_records(_load_records(serial, user_id), **filters)
        console.print(_records_table(records, f"Packages ({len(records)})"))
        return

    store = _load_store(get_config())
    dev = _get_target_device(serial)

    try:
        users = [u for u in dev.list_users() if not u.protected]
        tables = []
        for user in tqdm(users, desc="Fetching packages", unit="user"):
            records = filter_records(fetch_packages(store, PackageManager(dev), user), **filters)
            tables.append(_records_table(records, f"User {user.id} {user.name} ({len(records)})"))
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)

    for table in tables:
        console.print(table)


@packages.command("backup")
@click.option("--serial", "-s", help="Device serial number")
@click.option("--user", "-u", "user_id", type=int, help="Device user id")
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), help="Output directory")
@click.option("--open", "open_after", is_flag=True, help="Reveal the backup file when done")
def packages_backup(serial: Optional[str], user_id: Optional[int], output: Optional[Path], open_after: bool):
    """Back up the list of uninstalled packages to a CSV file."""
    records = _load_records(serial, user_id)
    directory = output or get_config().export.directory

    result = asyncio.run(export_backup(records, directory=directory))
    _report_export(result, "Backup", open_after)


@packages.command("export-selection")
@click.option("--serial", "-s", help="Device serial number")
@click.option("--user", "-u", "user_id", type=int, help="Device user id")
@click.option("--package", "-p", "names", multiple=True, help="Package to select")
@click.option("--from-file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Select packages listed in a previous selection export")
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), help="Output directory")
@click.option("--open", "open_after", is_flag=True, help="Reveal the selection file when done")
def packages_export_selection(serial: Optional[str], user_id: Optional[int], names: List[str],
                              from_file: Optional[Path], output: Optional[Path], open_after: bool):
    """Export selected package names to a plain text file."""
    records = _load_records(serial, user_id)

    wanted = list(names)
    if from_file:
        wanted += load_selection(from_file)

    missing = apply_selection(records, wanted)
    for name in missing:
        console.print(f"[yellow]Not on device: {name}[/yellow]")

    directory = output or get_config().export.directory
    result = asyncio.run(export_selection(records, directory=directory))
    _report_export(result, "Selection", open_after)


@cli.group()
def lists():
    """Classification lists commands."""
    pass


@lists.command("info")
def lists_info():
    """Show the classification lists in use."""
    lists_path = get_lists_path(get_config())

    if not lists_path.exists():
        console.print(f"[yellow]No classification lists found at {lists_path}[/yellow]")
        return

    store = _load_store(get_config())

    table = Table(title="Classification Lists")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("File", str(lists_path))
    table.add_row("Packages", str(len(store)))
    table.add_row("Last updated", format_diff_time_from_now(store.last_modified()))

    console.print(table)


@cli.group("config")
def config_group():
    """Configuration commands."""
    pass


@config_group.command("show")
def config_show():
    """Show the active configuration."""
    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    config = get_config()
    for key, value in config.model_dump(exclude={"export"}).items():
        table.add_row(key, str(value))
    for key, value in config.export.model_dump().items():
        table.add_row(f"export.{key}", str(value))

    console.print(table)


@config_group.command("init")
@click.option("--path", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Where to write the file")
def config_init(config_path: Optional[Path]):
    """Write the active configuration to a YAML file."""
    written = save_config(get_config(), config_path)
    console.print(f"[bold green]Configuration written to {written}[/bold green]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
