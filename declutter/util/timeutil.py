"""Utility functions for time operations."""

from datetime import datetime, timedelta, timezone
from pathlib import Path


def now_local() -> datetime:
    """Get the current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def last_modified_date(path: Path) -> datetime:
    """Get the modification time of a file in UTC.
    
    Falls back to the current time when the file is missing or its
    metadata cannot be read.
    """
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, timezone.utc)
    except OSError:
        return datetime.now(timezone.utc)


def format_diff_time_from_now(date: datetime) -> str:
    """Format the time elapsed since `date` in human readable form."""
    elapsed = max(datetime.now(timezone.utc) - date, timedelta(0))
    days = elapsed.days
    
    if days == 0:
        hours = elapsed.seconds // 3600
        if hours == 0:
            return f"{elapsed.seconds // 60} min(s) ago"
        return f"{hours} hour(s) ago"
    
    return f"{days} day(s) ago"
