"""TOML-based configuration provider.

Loads configuration from the repository's ``.hg/revtree.toml`` with global
config fallback.

Config loading priority (highest to lowest):
1. Local: <repo>/.hg/revtree.toml (repo-specific)
2. Global: ~/.config/revtree/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from revtree.domain.config import RevtreeConfig
from revtree.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config if present
    2. Load local config if present
    3. Local values override global values (key-level within a section)
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.
    """

    def __init__(self, global_path: Path | None = None) -> None:
        self._global_path = global_path

    @property
    def global_path(self) -> Path:
        return self._global_path or get_global_config_path()

    def _overlay(self, config: RevtreeConfig, path: Path, label: str) -> RevtreeConfig:
        """Apply one config file over ``config``; invalid files are ignored."""
        if not path.exists():
            return config
        try:
            merged = RevtreeConfig.from_partial(config, load_config_data(path))
        except (FileNotFoundError, ValueError, TypeError) as e:
            logger.warning("Failed to parse %s config at %s: %s. Ignoring it.", label, path, e)
            return config
        logger.debug("Loaded %s config from %s", label, path)
        return merged

    def load_global(self, base: RevtreeConfig) -> RevtreeConfig:
        """Apply the global config file over ``base``."""
        return self._overlay(base, self.global_path, "global")

    def load(self, repo_root: Path) -> RevtreeConfig:
        """Load configuration with global fallback.

        Args:
            repo_root: Repository root containing ``.hg/``

        Returns:
            RevtreeConfig instance with merged global/local values or defaults
        """
        config = self.load_global(RevtreeConfig.default())
        return self._overlay(config, get_local_config_path(repo_root), "local")
