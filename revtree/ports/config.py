"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from revtree.domain.config import RevtreeConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, repo_root: Path) -> RevtreeConfig:
        """Load configuration for a repository.

        Args:
            repo_root: Repository root (the directory containing ``.hg/``).

        Returns:
            RevtreeConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config file is missing or invalid.
        """
        ...

    def load_global(self, base: RevtreeConfig) -> RevtreeConfig:
        """Apply only the user-wide config over ``base`` (used outside a repository)."""
        ...
