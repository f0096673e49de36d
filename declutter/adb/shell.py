"""ADB shell command execution utilities."""

import shlex
from typing import List

from .device import ADBDevice


class ShellCommand:
    """Utility for executing shell commands on Android device."""
    
    def __init__(self, device: ADBDevice):
        self.device = device
    
    def execute(self, command: str, timeout: int = 30) -> str:
        """Execute a shell command on the device."""
        return self.device._run_command(["shell", command], timeout=timeout)
    
    def execute_args(self, args: List[str], timeout: int = 30) -> str:
        """Execute a shell command built from separate arguments."""
        return self.execute(" ".join(shlex.quote(arg) for arg in args), timeout=timeout)
