"""Utility functions for path operations."""

from pathlib import Path

from ..util.logging import get_logger

logger = get_logger(__name__)

APP_DIR_NAME = "declutter"


def ensure_directory(path: Path) -> Path:
    """Ensure directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def setup_app_dir(base_dir: Path) -> Path:
    """Create the application directory under `base_dir` and return it."""
    app_dir = base_dir / APP_DIR_NAME
    try:
        ensure_directory(app_dir)
    except OSError:
        logger.error(f"Can't create directory: {app_dir}")
        raise
    return app_dir
