"""ADB module initialization."""

from .device import (
    ADBDevice,
    ADBError,
    DeviceInfo,
    User,
    check_adb_available,
    list_devices,
    parse_users,
)
from .package import PackageManager, strip_package_prefix
from .shell import ShellCommand

__all__ = [
    # device
    "ADBDevice",
    "ADBError",
    "DeviceInfo",
    "User",
    "check_adb_available",
    "list_devices",
    "parse_users",
    # shell
    "ShellCommand",
    # package
    "PackageManager",
    "strip_package_prefix",
]
