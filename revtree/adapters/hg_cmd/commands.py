"""Mercurial adapter implementing the VCSCommands port.

Builds ``CommandSpec`` values for every query and mutation the tree needs.
Nothing here runs a process; the orchestrator does.
"""

from revtree.domain.value_objects import CommandSpec, Phase

# One block per changeset. p1node/p2node print zeros for a missing parent;
# the parser folds those away.
LOG_TEMPLATE = (
    "changeset: {node|short}\\n"
    "summary: {desc|firstline}\\n"
    "date: {date|isodate}\\n"
    "user: {author|person}\\n"
    "branch: {branch}\\n"
    "phase: {phase}\\n"
    "parent: {p1node|short}\\n"
    "parent: {p2node|short}\\n"
    '{tags % "tag: {tag}\\n"}'
    "\\n"
)

PARENT_TEMPLATE = "{node|short}\\n"


def _pattern(path: str) -> str:
    """Exact repository-relative file pattern (no globbing)."""
    return f"path:{path}"


class HgCommands:
    """Command-spec builder for the ``hg`` executable.

    Args:
        executable: hg executable name or path.
        revset: Revset selecting and ordering the history.
        limit: Maximum number of changesets per history query.
    """

    def __init__(
        self,
        executable: str = "hg",
        revset: str = "reverse(sort(all(), topo))",
        limit: int = 200,
    ) -> None:
        self.executable = executable
        self.revset = revset
        self.limit = limit

    def _spec(self, *args: str) -> CommandSpec:
        return CommandSpec(self.executable, args)

    # Queries

    def log(self) -> CommandSpec:
        return self._spec(
            "log", "-r", self.revset, "-l", str(self.limit), "--template", LOG_TEMPLATE
        )

    def status(self) -> CommandSpec:
        return self._spec("status")

    def status_change(self, rev: str) -> CommandSpec:
        return self._spec("status", "--change", rev)

    def current_parent(self) -> CommandSpec:
        return self._spec("log", "-r", "parents()", "--template", PARENT_TEMPLATE)

    def shelve_list(self) -> CommandSpec:
        return self._spec("shelve", "--list")

    def shelve_diff(self, name: str) -> CommandSpec:
        return self._spec("shelve", "--patch", name)

    def diff(self, path: str, revision: str | None) -> CommandSpec:
        args = ["diff", "--git"]
        if revision is not None:
            args += ["--change", revision]
        args.append(_pattern(path))
        return self._spec(*args)

    def diff_changeset(self, revision: str | None) -> CommandSpec:
        if revision is None:
            return self._spec("diff", "--git")
        return self._spec("diff", "--git", "--change", revision)

    def get_phase(self, rev: str) -> CommandSpec:
        return self._spec("phase", "-r", rev)

    # Mutations

    def update(self, rev: str) -> CommandSpec:
        return self._spec("update", "-r", rev)

    def strip(self, rev: str) -> CommandSpec:
        return self._spec("--config", "extensions.strip=", "strip", "-r", rev)

    def revert(
        self, paths: list[str], revision: str | None = None, all_files: bool = False
    ) -> CommandSpec:
        args = ["revert"]
        if revision is not None:
            args += ["-r", revision]
        if all_files:
            args.append("--all")
        else:
            args += [_pattern(p) for p in paths]
        return self._spec(*args)

    def shelve(self, name: str | None, paths: list[str]) -> CommandSpec:
        args = ["shelve"]
        if name:
            args += ["--name", name]
        args += [_pattern(p) for p in paths]
        return self._spec(*args)

    def unshelve(self, name: str) -> CommandSpec:
        return self._spec("unshelve", name)

    def delete_shelve(self, name: str) -> CommandSpec:
        return self._spec("shelve", "--delete", name)

    def commit(self, message: str) -> CommandSpec:
        return self._spec("commit", "--message", message)

    def amend(self, message: str | None) -> CommandSpec:
        if message:
            return self._spec("commit", "--amend", "--message", message)
        # A no-op editor keeps the existing description
        return self._spec("--config", "ui.editor=true", "commit", "--amend")

    def duplicate(self, rev: str) -> CommandSpec:
        return self._spec("graft", "--force", "-r", rev)

    def uncommit(self) -> CommandSpec:
        return self._spec("--config", "extensions.uncommit=", "uncommit")

    def set_phase(self, rev: str, phase: str) -> CommandSpec:
        return self._spec("phase", "--force", f"--{Phase(phase)}", "-r", rev)
