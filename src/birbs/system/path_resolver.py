import os
from pathlib import Path


class PathResolver:
    """Central authority for file path resolution in birbs.

    Uses environment variables for configuration with sensible defaults.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        self.data_dir = Path(os.getenv("BIRBS_DATA", "/var/lib/birbs"))

    def get_birbs_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks BIRBS_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("BIRBS_CONFIG")
        if config_path:
            return Path(config_path)

        # Default: runtime config in data directory
        return self.data_dir / "config" / "birbs.yaml"
