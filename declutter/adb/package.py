"""Device package listings, one name per line.

`PackageManager` is the device-side source of the three facts the
reconciler needs: which packages exist for a user (installed or
uninstalled-for-user), which of them are enabled, and which are
disabled. Each call returns a newline-joined listing with the
``package:`` prefix removed.
"""

from typing import List, Optional

from .device import ADBDevice, User
from .shell import ShellCommand
from ..util.logging import get_logger

logger = get_logger(__name__)

PACKAGE_PREFIX = "package:"


class PackageManager:
    """Queries system package listings on an Android device."""
    
    def __init__(self, device: ADBDevice):
        self.device = device
        self.shell = ShellCommand(device)
    
    def all_packages(self, user: Optional[User] = None) -> str:
        """List every system package, including ones uninstalled for the user."""
        return self._list_packages(["-s", "-u"], user)
    
    def enabled_packages(self, user: Optional[User] = None) -> str:
        """List enabled system packages."""
        return self._list_packages(["-s", "-e"], user)
    
    def disabled_packages(self, user: Optional[User] = None) -> str:
        """List disabled system packages."""
        return self._list_packages(["-s", "-d"], user)
    
    def _list_packages(self, flags: List[str], user: Optional[User]) -> str:
        args = ["pm", "list", "packages"] + flags
        if user is not None:
            args += ["--user", str(user.id)]
        
        output = self.shell.execute_args(args)
        names = strip_package_prefix(output)
        
        logger.debug(f"pm list packages {' '.join(flags)}: {len(names)} packages")
        return "\n".join(names)


def strip_package_prefix(output: str) -> List[str]:
    """Extract package names from `pm list packages` output."""
    names = []
    
    for line in output.split("\n"):
        line = line.strip()
        if line.startswith(PACKAGE_PREFIX):
            names.append(line[len(PACKAGE_PREFIX):])
    
    return names
