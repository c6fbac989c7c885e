"""VCS mutations and per-node commands.

Every mutation is a one-shot invocation followed by a full rebuild of the
tree. Destructive mutations ask the UI for confirmation first; declining
aborts silently. Which command applies depends on the selected node's kind,
resolved through small dispatch tables rather than per-class methods.
"""

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from revtree.core.orchestrator import Orchestrator
from revtree.core.parsing import parse_phase
from revtree.core.patching import PatchReverter
from revtree.core.tree.engine import TreeEngine
from revtree.domain.entities import Changeset, ChangedFile, Hunk, Node, Shelve
from revtree.domain.exceptions import UnsupportedActionError
from revtree.domain.value_objects import CommandSpec, Phase
from revtree.ports.vcs import VCSCommands

logger = logging.getLogger(__name__)

Confirm = Callable[[str], Awaitable[bool]]


async def _always_confirm(prompt: str) -> bool:
    return True


def _kind(node: Node) -> str:
    if isinstance(node, Changeset) and node.is_pending:
        return "pending changes"
    return type(node).__name__.lower()


class RepositoryActions:
    """Runs VCS mutations against the node under the cursor.

    Args:
        orchestrator: Runs the VCS commands.
        commands: Builds the VCS command specs.
        engine: Tree engine, rebuilt after every mutation.
        patcher: Reverse-applies single hunks.
        confirm: Async yes/no prompt for destructive actions.
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        commands: VCSCommands,
        engine: TreeEngine,
        patcher: PatchReverter,
        confirm: Confirm | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.commands = commands
        self.engine = engine
        self.patcher = patcher
        self.confirm: Confirm = confirm or _always_confirm

        self._reverters: dict[type, Callable[[Node], Awaitable[bool]]] = {
            Changeset: self._revert_changeset,
            ChangedFile: self._revert_file,
            Hunk: self._revert_hunk,
        }

    # -- helpers ---------------------------------------------------------

    async def _mutate(self, spec: CommandSpec, description: str) -> str:
        output = await self.orchestrator.run_one(spec, description)
        logger.debug("%s finished: %s", description, output.strip()[:200])
        await self.engine.rebuild()
        return output

    def _top_level(self, node: Node) -> Node:
        top = node
        for ancestor in self.engine.arena.ancestors(node):
            top = ancestor
        return top

    def _committed(self, node: Node, action: str) -> Changeset:
        """Resolve a node to a committed changeset or raise."""
        if isinstance(node, Changeset) and not node.is_pending:
            return node
        raise UnsupportedActionError(f"Cannot {action} {_kind(node)}")

    def _in_shelve(self, node: Node) -> bool:
        return isinstance(self._top_level(node), Shelve)

    # -- mutations -------------------------------------------------------

    async def update(self, node: Node) -> str:
        """Update the working copy to a changeset."""
        changeset = self._committed(node, "update to")
        return await self._mutate(self.commands.update(changeset.rev), "Updating")

    async def strip(self, node: Node) -> str | None:
        """Strip a changeset and its descendants (confirmed)."""
        changeset = self._committed(node, "strip")
        if not await self.confirm(f"Strip {changeset.rev} and its descendants?"):
            return None
        return await self._mutate(self.commands.strip(changeset.rev), "Stripping")

    async def revert(self, node: Node) -> bool:
        """Revert the selected node (confirmed).

        Pending changes revert everything, a committed changeset restores
        every file to that revision, a file restores one path and a hunk is
        reverse-applied on its own.

        Returns:
            True if the revert ran, False if it was declined.

        Raises:
            UnsupportedActionError: For shelves and their contents.
        """
        reverter = self._reverters.get(type(node))
        if reverter is None:
            raise UnsupportedActionError(f"Cannot revert {_kind(node)}")
        if self._in_shelve(node):
            raise UnsupportedActionError(
                f"Cannot revert a {_kind(node)} inside a shelve",
                hint="Unshelve it first",
            )
        return await reverter(node)

    async def _revert_changeset(self, node: Changeset) -> bool:
        if node.is_pending:
            prompt = "Revert all pending changes?"
        else:
            prompt = f"Revert all files to {node.rev}?"
        if not await self.confirm(prompt):
            return False
        await self._mutate(
            self.commands.revert([], revision=node.rev, all_files=True), "Reverting"
        )
        return True

    async def _revert_file(self, node: ChangedFile) -> bool:
        target = node.revision or "the working copy parent"
        if not await self.confirm(f"Revert {node.path} to {target}?"):
            return False
        await self._mutate(
            self.commands.revert([node.path], revision=node.revision), "Reverting"
        )
        return True

    async def _revert_hunk(self, node: Hunk) -> bool:
        file = self.engine.parent_of(node)
        if not isinstance(file, ChangedFile):
            raise UnsupportedActionError("Hunk has no owning file")
        if not await self.confirm(f"Revert hunk {node.header} in {file.path}?"):
            return False
        await self.patcher.revert_hunk(file, node, then=self.engine.rebuild)
        return True

    async def shelve(self, node: Node, name: str | None = None) -> str:
        """Shelve pending changes, or a single pending file."""
        if isinstance(node, Changeset) and node.is_pending:
            paths: list[str] = []
        elif isinstance(node, ChangedFile) and self.engine.parent_of(node) is self.engine.pending:
            paths = [node.path]
        else:
            raise UnsupportedActionError(f"Cannot shelve {_kind(node)}")
        return await self._mutate(self.commands.shelve(name or None, paths), "Shelving")

    def _shelve_of(self, node: Node) -> Shelve:
        top = self._top_level(node)
        if isinstance(top, Shelve):
            return top
        raise UnsupportedActionError(f"{_kind(node).capitalize()} is not a shelve")

    async def unshelve(self, node: Node) -> str:
        """Restore the shelve containing the selected node."""
        shelve = self._shelve_of(node)
        return await self._mutate(self.commands.unshelve(shelve.name), "Unshelving")

    async def delete_shelve(self, node: Node) -> str | None:
        """Delete the shelve containing the selected node (confirmed)."""
        shelve = self._shelve_of(node)
        if not await self.confirm(f"Delete shelve {shelve.name}?"):
            return None
        return await self._mutate(self.commands.delete_shelve(shelve.name), "Deleting shelve")

    async def commit(self, message: str) -> str:
        """Commit pending changes."""
        if not message.strip():
            raise UnsupportedActionError("Empty commit message, nothing committed")
        return await self._mutate(self.commands.commit(message), "Committing")

    async def amend(self, message: str | None = None) -> str:
        """Fold pending changes into the working copy parent."""
        return await self._mutate(self.commands.amend(message or None), "Amending")

    async def duplicate(self, node: Node) -> str:
        """Graft a copy of a changeset onto the working copy parent."""
        changeset = self._committed(node, "duplicate")
        return await self._mutate(self.commands.duplicate(changeset.rev), "Duplicating")

    async def uncommit(self) -> str | None:
        """Undo the working copy parent, keeping its changes pending (confirmed)."""
        if not await self.confirm("Uncommit the working copy parent?"):
            return None
        return await self._mutate(self.commands.uncommit(), "Uncommitting")

    async def get_phase(self, node: Node) -> str | None:
        """Query a changeset's phase."""
        changeset = self._committed(node, "query the phase of")
        output = await self.orchestrator.run_one(self.commands.get_phase(changeset.rev), "Phase")
        return parse_phase(output)

    async def set_phase(self, node: Node, phase: str) -> str:
        """Force a changeset into ``phase``.

        Raises:
            ValueError: If ``phase`` is not a known phase name.
        """
        changeset = self._committed(node, "set the phase of")
        phase = str(Phase(phase.strip()))
        return await self._mutate(
            self.commands.set_phase(changeset.rev, phase), "Setting phase"
        )

    # -- read-only helpers ----------------------------------------------

    async def diff_text(self, node: Node) -> str:
        """Unified diff shown in the preview pane for a node."""
        if isinstance(node, Hunk):
            file = self.engine.parent_of(node)
            preamble = file.preamble if isinstance(file, ChangedFile) else []
            return "\n".join([*preamble, *node.lines]) + "\n"
        if isinstance(node, Shelve):
            return await self.orchestrator.run_one(self.commands.shelve_diff(node.name), "Diff")
        if isinstance(node, ChangedFile):
            if self._in_shelve(node):
                lines = list(node.preamble)
                for hunk in node.hunks or []:
                    lines.extend(hunk.lines)
                return "\n".join(lines) + "\n"
            return await self.orchestrator.run_one(
                self.commands.diff(node.path, node.revision), "Diff"
            )
        return await self.orchestrator.run_one(self.commands.diff_changeset(node.rev), "Diff")

    def editor_target(self, node: Node) -> tuple[Path, int]:
        """File and line to open in an editor for a File or Hunk node."""
        if isinstance(node, ChangedFile):
            return Path(self.orchestrator.cwd) / node.path, 1
        if isinstance(node, Hunk):
            file = self.engine.parent_of(node)
            if isinstance(file, ChangedFile):
                return Path(self.orchestrator.cwd) / file.path, node.first_new_line
        raise UnsupportedActionError(f"Cannot open {_kind(node)} in an editor")
