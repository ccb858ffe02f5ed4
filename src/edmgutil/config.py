"""Configuration loading."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from pydantic import ValidationError

from edmgutil.errors import ConfigError
from edmgutil.models.config import EdmgConfig


logger = logging.getLogger(__name__)

CONFIG_ENV = "EDMGUTIL_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/edmgutil/config.yaml")


class ConfigManager:
    """Loads the edmgutil configuration file."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager."""
        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV)
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        self.config_path = Path(config_path).expanduser()
        self.yaml = YAML(typ="safe")
        self.config: Optional[EdmgConfig] = None

    def load(self) -> EdmgConfig:
        """Load the configuration, falling back to defaults when no file exists."""
        if not self.config_path.exists():
            logger.debug(f"No config file at {self.config_path}, using defaults")
            self.config = EdmgConfig()
            return self.config

        try:
            data = self._read_yaml(self.config_path) or {}
            self.config = EdmgConfig(**data)
            logger.debug(f"Loaded config: {self.config_path}")
        except (ValidationError, YAMLError, TypeError) as e:
            logger.error(f"Invalid config {self.config_path}: {e}")
            raise ConfigError(f"invalid configuration in {self.config_path}: {e}") from e

        return self.config

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse YAML file."""
        return self.yaml.load(file_path.read_text())
