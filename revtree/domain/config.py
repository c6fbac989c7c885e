"""Config domain models for revtree.

Configuration is stored in TOML (global ``~/.config/revtree/config.toml`` and
repository-local ``.hg/revtree.toml``) and represents user preferences for
invoking the VCS, selecting history, and displaying the tree. This module
defines the domain models that represent validated configuration state.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any


@dataclass(frozen=True)
class VcsConfig:
    """Configuration for the external tools.

    Attributes:
        executable: Mercurial executable (default: "hg").
        patch_executable: Patch tool used for hunk-level reverts.
        plain: Run hg with HGPLAIN=1 so output ignores user formatting.

    Raises:
        ValueError: If an executable name is empty.
    """

    executable: str = "hg"
    patch_executable: str = "patch"
    plain: bool = True

    def __post_init__(self) -> None:
        """Validate vcs config after initialization."""
        if not self.executable:
            raise ValueError("executable cannot be empty")
        if not self.patch_executable:
            raise ValueError("patch_executable cannot be empty")


@dataclass(frozen=True)
class LogConfig:
    """Configuration for the history query.

    Attributes:
        revset: Revset selecting and ordering history (topological,
               most-recent-first by default).
        limit: Maximum number of changesets fetched per refresh.

    Raises:
        ValueError: If revset is empty or limit is not positive.
    """

    revset: str = "reverse(sort(all(), topo))"
    limit: int = 200

    def __post_init__(self) -> None:
        """Validate log config after initialization."""
        if not self.revset.strip():
            raise ValueError("revset cannot be empty")
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")


@dataclass(frozen=True)
class DisplayConfig:
    """Configuration for tree display.

    Attributes:
        syntax_highlighting: Highlight the diff preview pane (default: True)
        theme: Pygments style for highlighting (default: "ansi" to respect
              the terminal color scheme)
        show_dates: Append the changeset date to history rows
        pending_title: Title of the synthetic working-copy node
    """

    syntax_highlighting: bool = True
    theme: str = "ansi"
    show_dates: bool = True
    pending_title: str = "Pending changes"


@dataclass(frozen=True)
class RevtreeConfig:
    """Complete revtree configuration.

    Attributes:
        vcs: External tool settings
        log: History query settings
        display: Display settings
    """

    vcs: VcsConfig = field(default_factory=VcsConfig)
    log: LogConfig = field(default_factory=LogConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @staticmethod
    def default() -> "RevtreeConfig":
        """Create a config with all default values."""
        return RevtreeConfig(
            vcs=VcsConfig(),
            log=LogConfig(),
            display=DisplayConfig(),
        )

    @staticmethod
    def from_partial(base: "RevtreeConfig", data: dict[str, Any]) -> "RevtreeConfig":
        """Overlay raw section data onto an existing config.

        Only keys present in ``data`` change; each section is re-validated.

        Args:
            base: Config supplying values for anything missing from data.
            data: Parsed TOML data keyed by section name.

        Returns:
            New RevtreeConfig with the overrides applied.

        Raises:
            ValueError: If a section is not a table, a key is unknown, or a
                value fails validation.
        """
        sections: dict[str, Any] = {}
        for section_field in fields(base):
            name = section_field.name
            overrides = data.get(name)
            if overrides is None:
                continue
            if not isinstance(overrides, dict):
                raise ValueError(f"Section [{name}] must be a table")
            current = getattr(base, name)
            known = {f.name for f in fields(current)}
            unknown = sorted(set(overrides) - known)
            if unknown:
                raise ValueError(f"Unknown key(s) in [{name}]: {', '.join(unknown)}")
            sections[name] = replace(current, **overrides)
        return replace(base, **sections)
