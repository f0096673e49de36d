"""Core package reconciliation and export."""

from .classification import ClassificationEntry, ClassificationError, ClassificationStore
from .export import (
    BACKUP_HEADER,
    EXPORT_FILE_NAME,
    ExportError,
    ExportResult,
    export_backup,
    export_selection,
    generate_backup_name,
    load_selection,
)
from .models import DEFAULT_DESCRIPTION, PackageRecord, PackageState, Removal, UadList
from .reconcile import (
    DeviceState,
    apply_selection,
    fetch_packages,
    filter_records,
    reconcile,
    restore_flags,
    split_listing,
)

__all__ = [
    # models
    "DEFAULT_DESCRIPTION",
    "PackageRecord",
    "PackageState",
    "Removal",
    "UadList",
    # classification
    "ClassificationEntry",
    "ClassificationError",
    "ClassificationStore",
    # reconcile
    "DeviceState",
    "apply_selection",
    "fetch_packages",
    "filter_records",
    "reconcile",
    "restore_flags",
    "split_listing",
    # export
    "BACKUP_HEADER",
    "EXPORT_FILE_NAME",
    "ExportError",
    "ExportResult",
    "export_backup",
    "export_selection",
    "generate_backup_name",
    "load_selection",
]
