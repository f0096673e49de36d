"""Reconciliation of device package state with classification data.

The device reports three independent facts about package names: which
exist for a user, which are enabled and which are disabled. These are
merged with the classification database into exactly one
`PackageRecord` per device package, sorted case-insensitively by name.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Protocol, Tuple

from .models import DEFAULT_DESCRIPTION, PackageRecord, PackageState, Removal, UadList
from ..adb.device import User
from ..util.logging import get_logger

logger = get_logger(__name__)


class ClassificationLookup(Protocol):
    """Anything that can classify a package by name.
    
    `lookup` returns None for unknown names, otherwise an object with
    `description`, `uad_list` and `removal` attributes.
    """
    
    def lookup(self, name: str): ...


class DeviceStateProvider(Protocol):
    """Source of newline-joined package listings for a device user."""
    
    def all_packages(self, user: Optional[User] = None) -> str: ...
    
    def enabled_packages(self, user: Optional[User] = None) -> str: ...
    
    def disabled_packages(self, user: Optional[User] = None) -> str: ...


def split_listing(listing: str) -> List[str]:
    """Split a newline-delimited listing into package names.
    
    Surrounding whitespace is stripped, blank lines are dropped and
    repeated names are kept only once, in order of first appearance.
    """
    names = []
    seen = set()
    
    for line in listing.splitlines():
        name = line.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        names.append(name)
    
    return names


@dataclass(frozen=True)
class DeviceState:
    """Snapshot of the package listings of one device user."""
    
    all: Tuple[str, ...]
    enabled: FrozenSet[str]
    disabled: FrozenSet[str]
    
    @classmethod
    def from_listings(cls, all_listing: str, enabled_listing: str, disabled_listing: str) -> "DeviceState":
        """Build a snapshot from three newline-delimited listings."""
        return cls(
            all=tuple(split_listing(all_listing)),
            enabled=frozenset(split_listing(enabled_listing)),
            disabled=frozenset(split_listing(disabled_listing)),
        )
    
    @classmethod
    def fetch(cls, provider: DeviceStateProvider, user: Optional[User] = None) -> "DeviceState":
        """Query a provider for the listings of a user."""
        return cls.from_listings(
            provider.all_packages(user),
            provider.enabled_packages(user),
            provider.disabled_packages(user),
        )


def reconcile(classification_store: ClassificationLookup, device_state: DeviceState) -> List[PackageRecord]:
    """Merge device state and classification into sorted package records."""
    records = []
    
    for name in device_state.all:
        record = PackageRecord(
            name=name,
            state=PackageState.UNINSTALLED,
            description=DEFAULT_DESCRIPTION,
            uad_list=UadList.UNLISTED,
            removal=Removal.UNLISTED,
        )
        
        entry = classification_store.lookup(name)
        if entry is not None:
            if entry.description:
                record.description = entry.description
            record.uad_list = entry.uad_list
            record.removal = entry.removal
        
        # Enabled wins when a name shows up in both sets
        if name in device_state.enabled:
            record.state = PackageState.ENABLED
        elif name in device_state.disabled:
            record.state = PackageState.DISABLED
        
        records.append(record)
    
    records.sort(key=lambda r: r.name.lower())
    return records


def fetch_packages(
    classification_store: ClassificationLookup,
    provider: DeviceStateProvider,
    user: Optional[User] = None
) -> List[PackageRecord]:
    """Fetch the device state of a user and reconcile it."""
    device_state = DeviceState.fetch(provider, user)
    records = reconcile(classification_store, device_state)
    
    logger.info(
        f"Reconciled {len(records)} packages "
        f"({len(device_state.enabled)} enabled, {len(device_state.disabled)} disabled)"
    )
    return records


def restore_flags(previous: Iterable[PackageRecord], records: List[PackageRecord]) -> List[PackageRecord]:
    """Carry `selected` and `marked` flags over from an earlier rebuild."""
    flags = {p.name: (p.selected, p.marked) for p in previous}
    
    for record in records:
        if record.name in flags:
            record.selected, record.marked = flags[record.name]
    
    return records


def apply_selection(records: List[PackageRecord], names: Iterable[str]) -> List[str]:
    """Select the records named in `names`.
    
    Returns:
        Names that matched no record, in the order given
    """
    by_name = {r.name: r for r in records}
    missing = []
    
    for name in names:
        record = by_name.get(name)
        if record is None:
            missing.append(name)
        else:
            record.selected = True
    
    if missing:
        logger.warning(f"{len(missing)} selected package(s) not found on device")
    
    return missing


def filter_records(
    records: Iterable[PackageRecord],
    state: Optional[PackageState] = None,
    uad_list: Optional[UadList] = None,
    removal: Optional[Removal] = None,
    search: Optional[str] = None
) -> List[PackageRecord]:
    """Filter records by state, list, removal and name/description search."""
    needle = search.lower() if search else None
    
    def matches(record: PackageRecord) -> bool:
        if state is not None and record.state != state:
            return False
        if uad_list is not None and record.uad_list != uad_list:
            return False
        if removal is not None and record.removal != removal:
            return False
        if needle and needle not in record.name.lower() and needle not in record.description.lower():
            return False
        return True
    
    return [r for r in records if matches(r)]
