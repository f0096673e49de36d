"""Tests for the command line interface."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from declutter.adb.device import User
from declutter.cli import cli
from declutter.config import DeclutterConfig, set_config
from declutter.core.export import EXPORT_FILE_NAME


@pytest.fixture
def workspace(tmp_path):
    """Configuration pointing at a temporary lists file and export dir."""
    lists_file = tmp_path / "uad_lists.json"
    lists_file.write_text(json.dumps({
        "com.android.chrome": {"list": "Google", "description": "Chrome", "removal": "Recommended"},
    }), encoding="utf-8")
    
    config = DeclutterConfig(data_dir=tmp_path, lists_file=lists_file)
    config.export.directory = tmp_path
    set_config(config)
    return tmp_path


@pytest.fixture
def device():
    """A single connected device with three system packages."""
    mock_device = MagicMock()
    mock_device.serial = "emulator-5554"
    mock_device.list_users.return_value = [User(id=0, name="Owner")]
    
    manager = MagicMock()
    manager.all_packages.return_value = "com.android.chrome\ncom.oem.bloat\ncom.android.phone"
    manager.enabled_packages.return_value = "com.android.phone"
    manager.disabled_packages.return_value = "com.android.chrome"
    
    with patch("declutter.cli.list_devices", return_value=[mock_device]), \
            patch("declutter.cli.PackageManager", return_value=manager):
        yield mock_device


class TestPackagesCommands:
    """Test package commands."""
    
    def test_list(self, workspace, device):
        """Test packages are listed with their state."""
        result = CliRunner().invoke(cli, ["packages", "list"])
        
        assert result.exit_code == 0, result.output
        assert "Packages (3)" in result.output
    
    def test_list_filtered(self, workspace, device):
        """Test state filtering."""
        result = CliRunner().invoke(cli, ["packages", "list", "--state", "disabled"])
        
        assert result.exit_code == 0, result.output
        assert "Packages (1)" in result.output
    
    def test_backup(self, workspace, device):
        """Test the backup command writes uninstalled packages."""
        result = CliRunner().invoke(cli, ["packages", "backup"])
        
        assert result.exit_code == 0, result.output
        backups = list(workspace.glob("uninstalled_packages_*.csv"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8").splitlines()[1] == \
            "com.oem.bloat,[No description]: CONTRIBUTION WELCOMED"
    
    def test_export_selection(self, workspace, device):
        """Test selected packages are exported and unknown ones reported."""
        result = CliRunner().invoke(
            cli, ["packages", "export-selection", "-p", "com.oem.bloat", "-p", "com.missing"]
        )
        
        assert result.exit_code == 0, result.output
        assert "com.missing" in result.output
        assert (workspace / EXPORT_FILE_NAME).read_text(encoding="utf-8") == "com.oem.bloat"
    
    def test_unknown_user(self, workspace, device):
        """Test an unknown user id fails."""
        result = CliRunner().invoke(cli, ["packages", "list", "--user", "42"])
        
        assert result.exit_code == 1
    
    def test_serial_selects_device(self, workspace, device):
        """Test --serial picks one of several connected devices."""
        other = MagicMock()
        other.serial = "other-device"

        with patch("declutter.cli.list_devices", return_value=[other, device]):
            result = CliRunner().invoke(cli, ["packages", "list", "--serial", "emulator-5554"])
            missing = CliRunner().invoke(cli, ["packages", "list", "--serial", "nope"])

        assert result.exit_code == 0, result.output
        assert "Packages (3)" in result.output
        assert missing.exit_code == 1
        assert "Device with serial nope not found" in missing.output

    def test_no_device(self, workspace):
        """Test commands fail without a device."""
        with patch("declutter.cli.list_devices", return_value=[]):
            result = CliRunner().invoke(cli, ["packages", "list"])
        
        assert result.exit_code == 1
        assert "No devices found" in result.output


class TestListsCommands:
    """Test classification lists commands."""
    
    def test_info(self, workspace):
        """Test lists info shows the entry count."""
        result = CliRunner().invoke(cli, ["lists", "info"])
        
        assert result.exit_code == 0, result.output
        assert "Packages" in result.output
        assert "ago" in result.output


class TestConfigCommands:
    """Test configuration commands."""
    
    def test_init(self, workspace):
        """Test the configuration can be written out."""
        target = workspace / "config.yaml"
        
        result = CliRunner().invoke(cli, ["config", "init", "--path", str(target)])
        
        assert result.exit_code == 0, result.output
        assert "adb_path: adb" in target.read_text(encoding="utf-8")
