"""Birbs configuration package.

Pydantic models for every setting, loaded from and saved to YAML.
"""

from .manager import ConfigManager
from .models import BirbsConfig

__all__ = [
    "BirbsConfig",
    "ConfigManager",
]
