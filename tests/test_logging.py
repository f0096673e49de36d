"""Tests for logging setup."""

import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from declutter.util.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("declutter")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


class TestSetupLogging:
    """Test logger configuration."""
    
    def test_console_only(self):
        """Test a single Rich handler at the requested level."""
        logger = setup_logging("warning", console=Console(stderr=True))
        
        assert [type(h) for h in logger.handlers] == [RichHandler]
        assert logger.level == logging.WARNING
    
    def test_reconfigure_replaces_handlers(self):
        """Test repeated setup does not stack handlers."""
        setup_logging("INFO")
        logger = setup_logging("DEBUG")
        
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.DEBUG
    
    def test_log_file_gets_debug(self, tmp_path):
        """Test the log file receives debug records while the console stays at INFO."""
        log_file = tmp_path / "logs" / "declutter.log"
        logger = setup_logging("INFO", log_file=log_file)
        
        get_logger("declutter.core.export").debug("writing rows")
        for handler in logger.handlers:
            handler.flush()
        
        assert logger.handlers[0].level == logging.INFO
        assert "writing rows" in log_file.read_text(encoding="utf-8")
    
    def test_unknown_level(self):
        """Test an invalid level name is rejected."""
        with pytest.raises(ValueError):
            setup_logging("LOUD")
