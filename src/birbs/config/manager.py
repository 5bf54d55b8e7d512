"""Configuration loading and saving."""

import logging
import shutil
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from birbs.config.models import BirbsConfig
from birbs.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(self, path_resolver: PathResolver | None = None, config_path: Path | None = None):
        """Initialize ConfigManager.

        Args:
            path_resolver: Optional PathResolver instance. If None, creates a new one.
            config_path: Explicit config file, overriding the resolved location.
        """
        self.path_resolver = path_resolver or PathResolver()
        self.config_path = config_path or self.path_resolver.get_birbs_config_path()

    def load(self) -> BirbsConfig:
        """Load configuration, falling back to defaults when no file exists.

        Returns:
            BirbsConfig: Loaded and validated configuration

        Raises:
            ValueError: If the file content does not validate
        """
        if not self.config_path.exists():
            logger.info("No configuration at %s, using defaults", self.config_path)
            return BirbsConfig()

        raw_config = self._read_yaml()
        try:
            return BirbsConfig.model_validate(raw_config)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

    def save(self, config: BirbsConfig) -> None:
        """Save configuration to file with backup.

        Args:
            config: Configuration to save

        Raises:
            PermissionError: If config file cannot be written
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            backup_path = self.config_path.with_suffix(".yaml.backup")
            try:
                shutil.copy2(self.config_path, backup_path)
            except PermissionError:
                logger.warning("Could not create backup at %s", backup_path)

        config_yaml = yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False)
        self.config_path.write_text(config_yaml)
        logger.info("Configuration saved successfully to %s", self.config_path)

    def _read_yaml(self) -> dict[str, Any]:
        """Read YAML config file.

        Returns:
            dict: Raw configuration dictionary
        """
        raw = yaml.safe_load(self.config_path.read_text()) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Configuration at {self.config_path} must be a mapping")
        return raw
