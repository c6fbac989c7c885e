"""Factory classes for wiring the tree engine to its adapters.

This module centralizes the creation of the engine and its dependencies,
keeping the CLI and TUI layers free from direct adapter construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revtree.adapters.editor import SubprocessEditor
    from revtree.adapters.hg_cmd.commands import HgCommands
    from revtree.adapters.process.async_runner import AsyncProcessRunner
    from revtree.core.actions import Confirm, RepositoryActions
    from revtree.core.orchestrator import Orchestrator
    from revtree.core.patching import PatchReverter
    from revtree.core.tree.engine import TreeEngine
    from revtree.domain.config import RevtreeConfig
    from revtree.ports.config import ConfigProvider
    from revtree.ports.progress import ProgressIndicator


class ConfigFactory:
    """Factory for configuration-related objects."""

    def create_config_provider(self, global_path: Path | None = None) -> ConfigProvider:
        from revtree.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider(global_path=global_path)


@dataclass
class TreeComponents:
    """Everything an interactive or batch session needs."""

    orchestrator: Orchestrator
    commands: HgCommands
    engine: TreeEngine
    patcher: PatchReverter
    actions: RepositoryActions


class TreeFactory:
    """Factory for the engine and its collaborators.

    Args:
        config: Effective configuration.
        repo_root: Repository root; every command runs there.
    """

    def __init__(self, config: RevtreeConfig, repo_root: Path) -> None:
        self._config = config
        self._repo_root = repo_root

    def create_runner(self) -> AsyncProcessRunner:
        """Create the process runner, with HGPLAIN set when configured."""
        from revtree.adapters.process.async_runner import AsyncProcessRunner

        env = {"HGPLAIN": "1"} if self._config.vcs.plain else None
        return AsyncProcessRunner(env=env)

    def create_commands(self) -> HgCommands:
        from revtree.adapters.hg_cmd.commands import HgCommands

        return HgCommands(
            executable=self._config.vcs.executable,
            revset=self._config.log.revset,
            limit=self._config.log.limit,
        )

    def create_editor(self) -> SubprocessEditor:
        from revtree.adapters.editor import SubprocessEditor

        return SubprocessEditor()

    def create_components(
        self,
        progress: ProgressIndicator | None = None,
        confirm: Confirm | None = None,
    ) -> TreeComponents:
        """Create the orchestrator, engine and action objects.

        Args:
            progress: Progress indicator driven by the orchestrator.
            confirm: Async yes/no prompt for destructive actions.

        Returns:
            TreeComponents sharing one orchestrator.
        """
        from revtree.core.actions import RepositoryActions
        from revtree.core.orchestrator import Orchestrator
        from revtree.core.patching import PatchReverter
        from revtree.core.tree.engine import TreeEngine

        orchestrator = Orchestrator(self.create_runner(), self._repo_root, progress=progress)
        commands = self.create_commands()
        engine = TreeEngine(
            orchestrator, commands, pending_title=self._config.display.pending_title
        )
        patcher = PatchReverter(orchestrator, self._config.vcs.patch_executable)
        actions = RepositoryActions(orchestrator, commands, engine, patcher, confirm=confirm)
        return TreeComponents(
            orchestrator=orchestrator,
            commands=commands,
            engine=engine,
            patcher=patcher,
            actions=actions,
        )
