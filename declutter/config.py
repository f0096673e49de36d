"""Configuration management for Declutter."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from ruamel.yaml import YAML

DEFAULT_CONFIG_PATH = Path.home() / ".config/declutter/config.yaml"


class ExportConfig(BaseModel):
    """Configuration for backup and selection exports."""
    
    model_config = ConfigDict(validate_assignment=True)
    
    directory: Optional[Path] = Field(
        default=None,
        description="Directory receiving export files (current directory if unset)"
    )
    open_after_export: bool = Field(default=False, description="Reveal exported files in the file manager")


class DeclutterConfig(BaseModel):
    """Main configuration for Declutter."""
    
    model_config = ConfigDict(validate_assignment=True)
    
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local/share",
        description="Base directory for application data"
    )
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config/declutter",
        description="Configuration directory"
    )
    lists_file: Optional[Path] = Field(
        default=None,
        description="Classification lists JSON file (uad_lists.json in the app data dir if unset)"
    )
    
    export: ExportConfig = Field(default_factory=ExportConfig)
    
    # Runtime settings
    adb_path: str = Field(default="adb", description="Path to ADB binary")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="File receiving a DEBUG level log")
    default_user: Optional[int] = Field(default=None, description="Device user id to inspect by default")


def load_config(config_path: Optional[Path] = None) -> DeclutterConfig:
    """Load configuration from file or create default."""
    
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    
    if config_path.exists():
        yaml = YAML(typ="safe")
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
        return DeclutterConfig(**data)
    
    return DeclutterConfig()


def save_config(config: DeclutterConfig, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file."""
    
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    
    config_path.parent.mkdir(parents=True, exist_ok=True)
    
    yaml = YAML()
    yaml.default_flow_style = False
    
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(mode="json"), f)
    
    return config_path


def get_config() -> DeclutterConfig:
    """Get the global configuration instance."""
    
    if not hasattr(get_config, "_config"):
        get_config._config = load_config()
    
    return get_config._config


def set_config(config: DeclutterConfig) -> None:
    """Replace the global configuration instance."""
    get_config._config = config


def get_lists_path(config: DeclutterConfig) -> Path:
    """Resolve the classification lists file for a configuration."""
    if config.lists_file is not None:
        return config.lists_file
    
    from .util.paths import setup_app_dir
    
    return setup_app_dir(config.data_dir) / "uad_lists.json"
