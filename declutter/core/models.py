"""Package record model and classification tags."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_DESCRIPTION = "[No description]: CONTRIBUTION WELCOMED"


class PackageState(str, Enum):
    """State of a package for a device user."""
    
    ENABLED = "Enabled"
    DISABLED = "Disabled"
    UNINSTALLED = "Uninstalled"


class UadList(str, Enum):
    """Curated list documenting a package."""
    
    AOSP = "Aosp"
    CARRIER = "Carrier"
    GOOGLE = "Google"
    MISC = "Misc"
    OEM = "Oem"
    PENDING = "Pending"
    UNLISTED = "Unlisted"


class Removal(str, Enum):
    """Documented safety of removing a package.
    
    Levels:
        RECOMMENDED: Pointless or outright harmful, safe to remove
        ADVANCED: Breaks obscure or minor features
        EXPERT: Breaks widely used features
        UNSAFE: Can break vital parts of the system, including boot
        UNLISTED: No classification available
    """
    
    RECOMMENDED = "Recommended"
    ADVANCED = "Advanced"
    EXPERT = "Expert"
    UNSAFE = "Unsafe"
    UNLISTED = "Unlisted"


@dataclass
class PackageRecord:
    """Canonical view of one package on the device."""
    
    name: str
    state: PackageState = PackageState.UNINSTALLED
    description: str = DEFAULT_DESCRIPTION
    uad_list: UadList = UadList.UNLISTED
    removal: Removal = Removal.UNLISTED
    selected: bool = False
    marked: bool = False
