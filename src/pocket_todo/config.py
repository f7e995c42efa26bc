"""Configuration management for the pocket-todo application."""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional, Dict, Any
import yaml

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.todo"
CONFIG_FILE_NAME = "config.yaml"
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class ConfigModel:
    """Global configuration model for pocket-todo."""

    # File paths
    data_dir: str = DEFAULT_DATA_DIR
    storage_file: str = "todo.json"
    placeholder_file: str = "todo.txt"  # created by `init`, never read

    # Serialization
    json_indent: int = 2

    # Behavior settings
    strict_exit_codes: bool = False  # exit 1 on logical failures

    # UI and diagnostics
    no_color: bool = False
    log_level: str = "warning"

    def __post_init__(self):
        """Post-initialization setup."""
        # Expand user paths. Directories are created by `init` only.
        self.data_dir = os.path.expanduser(str(self.data_dir))
        if self.log_level not in LOG_LEVELS:
            logger.warning(f"Unknown log level {self.log_level!r}, using 'warning'")
            self.log_level = "warning"

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def with_overrides(self, **overrides: Any) -> "ConfigModel":
        """Return a copy with the non-None overrides applied."""
        data: Dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ConfigModel(**data)

    def get_storage_path(self) -> Path:
        """Get the JSON storage file path."""
        return Path(self.data_dir) / self.storage_file

    def get_placeholder_path(self) -> Path:
        """Get the path of the file `init` creates."""
        return Path(self.data_dir) / self.placeholder_file

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / CONFIG_FILE_NAME


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file, falling back to defaults.

    A missing file is not created here; storage setup belongs to `init`.
    """
    config = ConfigModel()

    if config_path is None:
        config_path = config.get_config_path()

    if not config_path.exists():
        logger.debug(f"No configuration at {config_path}, using defaults")
        return config

    try:
        with open(config_path, 'r') as f:
            yaml_content = f.read()
        config = ConfigModel.from_yaml(yaml_content)
        logger.debug(f"Loaded configuration from {config_path}")
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}; using defaults")
        config = ConfigModel()

    return config
