"""Backup and selection export of package records."""

import asyncio
import csv
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from .models import PackageRecord, PackageState
from ..util.logging import get_logger
from ..util.timeutil import now_local

logger = get_logger(__name__)

EXPORT_FILE_NAME = "selection_export.txt"
BACKUP_HEADER = ("Package Name", "Description")


class ExportError(Exception):
    """Export file could not be written."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """Outcome of an export: the written file, or why it failed."""
    
    ok: bool
    path: Optional[Path] = None
    error: Optional[str] = None
    
    @classmethod
    def success(cls, path: Path) -> "ExportResult":
        return cls(ok=True, path=path)
    
    @classmethod
    def failure(cls, error: str) -> "ExportResult":
        return cls(ok=False, error=error)
    
    def unwrap(self) -> Path:
        """Get the written path, raising `ExportError` on failure."""
        if not self.ok:
            raise ExportError(self.error)
        return self.path


def generate_backup_name(timestamp: datetime) -> str:
    """Backup file name for the date of `timestamp`, in its own timezone."""
    return f"uninstalled_packages_{timestamp.strftime('%Y%m%d')}.csv"


async def export_backup(
    records: Iterable[PackageRecord],
    now: Optional[datetime] = None,
    directory: Optional[Path] = None
) -> ExportResult:
    """Export uninstalled packages with their description to a CSV file.
    
    Args:
        records: Reconciled package records
        now: Instant naming the backup (local time if None)
        directory: Output directory (current working directory if None)
        
    Returns:
        Result holding the CSV path or the error message
    """
    if now is None:
        now = now_local()
    
    backup_file = (directory or Path.cwd()) / generate_backup_name(now)
    uninstalled = [r for r in records if r.state == PackageState.UNINSTALLED]
    
    try:
        f = await asyncio.to_thread(open, backup_file, "w", newline="", encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to create backup file {backup_file}: {e}")
        return ExportResult.failure(str(e))
    
    try:
        with f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(BACKUP_HEADER)
            
            for record in uninstalled:
                writer.writerow([record.name, record.description.replace("\n", " ")])
            
            await asyncio.to_thread(f.flush)
    except (OSError, ValueError, csv.Error) as e:
        logger.error(f"Failed to write backup file {backup_file}: {e}")
        _discard(backup_file)
        return ExportResult.failure(str(e))
    
    logger.info(f"Exported {len(uninstalled)} uninstalled packages to {backup_file}")
    return ExportResult.success(backup_file)


async def export_selection(
    records: Iterable[PackageRecord],
    directory: Optional[Path] = None
) -> ExportResult:
    """Export the names of selected packages, one per line."""
    export_file = (directory or Path.cwd()) / EXPORT_FILE_NAME
    selected = "\n".join(r.name for r in records if r.selected)
    
    try:
        await asyncio.to_thread(export_file.write_text, selected, encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write selection file {export_file}: {e}")
        return ExportResult.failure(str(e))
    
    logger.info(f"Exported selection to {export_file}")
    return ExportResult.success(export_file)


def load_selection(path: Path) -> List[str]:
    """Read package names back from a selection export."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def _discard(path: Path) -> None:
    """Remove a partially written file, best effort."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove partial file {path}: {e}")
