"""ADB device management and communication."""

import re
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..util.logging import get_logger

logger = get_logger(__name__)

USER_INFO_PATTERN = re.compile(r"UserInfo\{(\d+):([^:]*):([0-9a-fA-F]+)\}")

# UserInfo flag marking a managed (work) profile
FLAG_MANAGED_PROFILE = 0x20


@dataclass
class DeviceInfo:
    """Information about an Android device."""
    
    serial: str
    model: str
    brand: str
    android_version: str
    sdk_version: str
    state: str = "device"
    
    @property
    def display_name(self) -> str:
        """Get a human-readable device name."""
        return f"{self.brand} {self.model} ({self.serial})"


@dataclass(frozen=True)
class User:
    """A user profile on an Android device."""
    
    id: int
    name: str = ""
    protected: bool = False


class ADBError(Exception):
    """ADB command execution error."""
    pass


class ADBDevice:
    """Represents an ADB-connected Android device."""
    
    def __init__(self, serial: str, adb_path: str = "adb"):
        self.serial = serial
        self.adb_path = adb_path
        self._device_info: Optional[DeviceInfo] = None
    
    @retry(
        retry=retry_if_exception_type(ADBError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _run_command(self, command: List[str], timeout: int = 30) -> str:
        """Run an ADB command with retry logic."""
        cmd = [self.adb_path, "-s", self.serial] + command
        
        try:
            logger.debug(f"Running ADB command: {' '.join(cmd)}")
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=True
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            error_msg = f"ADB command failed: {' '.join(cmd)}\nError: {e.stderr}"
            logger.error(error_msg)
            raise ADBError(error_msg) from e
        except subprocess.TimeoutExpired as e:
            error_msg = f"ADB command timed out: {' '.join(cmd)}"
            logger.error(error_msg)
            raise ADBError(error_msg) from e
    
    def get_device_info(self) -> DeviceInfo:
        """Get detailed device information."""
        if self._device_info is not None:
            return self._device_info
        
        props = {
            "model": self._run_command(["shell", "getprop", "ro.product.model"]),
            "brand": self._run_command(["shell", "getprop", "ro.product.brand"]),
            "android_version": self._run_command(["shell", "getprop", "ro.build.version.release"]),
            "sdk_version": self._run_command(["shell", "getprop", "ro.build.version.sdk"]),
        }
        
        self._device_info = DeviceInfo(serial=self.serial, **props)
        logger.info(f"Device info: {self._device_info.display_name}")
        return self._device_info
    
    def list_users(self) -> List[User]:
        """List the user profiles present on the device."""
        output = self._run_command(["shell", "pm", "list", "users"])
        return parse_users(output)


def parse_users(output: str) -> List[User]:
    """Parse `pm list users` output into users, in device order."""
    users = []
    
    for match in USER_INFO_PATTERN.finditer(output):
        user_id, name, flags = match.groups()
        users.append(User(
            id=int(user_id),
            name=name,
            protected=bool(int(flags, 16) & FLAG_MANAGED_PROFILE),
        ))
    
    return users


def check_adb_available(adb_path: str = "adb") -> bool:
    """Check if ADB is available and working."""
    try:
        result = subprocess.run(
            [adb_path, "version"],
            capture_output=True,
            text=True,
            timeout=10
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False


def list_devices(adb_path: str = "adb") -> List[ADBDevice]:
    """List all connected ADB devices."""
    if not check_adb_available(adb_path):
        raise ADBError("ADB is not available or not in PATH")
    
    try:
        result = subprocess.run(
            [adb_path, "devices"],
            capture_output=True,
            text=True,
            timeout=10,
            check=True
        )
    except subprocess.CalledProcessError as e:
        raise ADBError(f"Failed to list devices: {e.stderr}") from e
    
    devices = []
    lines = result.stdout.strip().split("\n")[1:]  # Skip header
    
    for line in lines:
        parts = line.strip().split("\t")
        if len(parts) >= 2 and parts[1] == "device":
            devices.append(ADBDevice(parts[0], adb_path))
    
    return devices
