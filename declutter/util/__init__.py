"""Utility module initialization."""

from .logging import get_logger, setup_logging
from .paths import ensure_directory, setup_app_dir
from .timeutil import format_diff_time_from_now, last_modified_date, now_local

__all__ = [
    # logging
    "get_logger",
    "setup_logging",
    # paths
    "ensure_directory",
    "setup_app_dir",
    # timeutil
    "format_diff_time_from_now",
    "last_modified_date",
    "now_local",
]
