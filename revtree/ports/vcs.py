"""Version Control System (VCS) port interface.

Defines the abstract interface for building VCS invocations. The core never
talks to the VCS directly: it asks this port for a ``CommandSpec`` and runs
it through the orchestrator, then parses the text that comes back.
"""

from typing import Protocol

from revtree.domain.value_objects import CommandSpec


class VCSCommands(Protocol):
    """Protocol for constructing VCS queries and mutations."""

    # Queries

    def log(self) -> CommandSpec:
        """History query producing ``changeset:``/``summary:``/``parent:``/``tag:`` blocks."""
        ...

    def status(self) -> CommandSpec:
        """Working-copy status against its parent (``<char> <path>`` lines)."""
        ...

    def status_change(self, rev: str) -> CommandSpec:
        """Files touched by a single revision (``<char> <path>`` lines)."""
        ...

    def current_parent(self) -> CommandSpec:
        """Short id(s) of the working copy's parent, one per line."""
        ...

    def shelve_list(self) -> CommandSpec:
        """Shelve listing (``<name> (<age>) <message>`` lines)."""
        ...

    def shelve_diff(self, name: str) -> CommandSpec:
        """Unified diff stored in a shelve, with per-file ``diff --git`` headers."""
        ...

    def diff(self, path: str, revision: str | None) -> CommandSpec:
        """Unified diff of one file, for a revision or the working copy."""
        ...

    def diff_changeset(self, revision: str | None) -> CommandSpec:
        """Unified diff of a whole revision, or of the working copy."""
        ...

    def get_phase(self, rev: str) -> CommandSpec:
        """Phase query (``<rev>: <phase>``)."""
        ...

    # Mutations

    def update(self, rev: str) -> CommandSpec:
        ...

    def strip(self, rev: str) -> CommandSpec:
        ...

    def revert(
        self, paths: list[str], revision: str | None = None, all_files: bool = False
    ) -> CommandSpec:
        ...

    def shelve(self, name: str | None, paths: list[str]) -> CommandSpec:
        ...

    def unshelve(self, name: str) -> CommandSpec:
        ...

    def delete_shelve(self, name: str) -> CommandSpec:
        ...

    def commit(self, message: str) -> CommandSpec:
        ...

    def amend(self, message: str | None) -> CommandSpec:
        ...

    def duplicate(self, rev: str) -> CommandSpec:
        ...

    def uncommit(self) -> CommandSpec:
        ...

    def set_phase(self, rev: str, phase: str) -> CommandSpec:
        ...
