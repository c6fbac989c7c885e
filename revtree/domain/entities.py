"""Domain entities and value objects.

Core domain models representing the revision tree: changesets, the files
they touch, diff hunks, and shelves. These are plain dataclasses with no
dependencies on infrastructure.

Every entity carries the same tree capabilities:

- ``node_id``: stable handle assigned by the node arena of the current
  population (``None`` until registered).
- ``parent_node``: handle of the owning node, or ``None`` for top-level
  changesets and shelves.
- ``expanded``: display-only flag.

Children are cached on the owner (``files`` / ``hunks``) and are ``None``
until first fetched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TypeAlias

NodeId: TypeAlias = int

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def map_new_file_lines(lines: list[str]) -> list[int | None]:
    """Map each hunk line to its line number in the new file.

    The header line and removal lines map to ``None``. Context and addition
    lines are numbered consecutively from the header's new-file start.

    Args:
        lines: Hunk lines, header first.

    Returns:
        List aligned with ``lines``.
    """
    if not lines:
        return []
    match = HUNK_HEADER_RE.match(lines[0])
    if match is None:
        return [None] * len(lines)

    next_line = int(match.group(3))
    numbers: list[int | None] = [None]
    for line in lines[1:]:
        if line.startswith("-") or line.startswith("\\"):
            numbers.append(None)
        else:
            numbers.append(next_line)
            next_line += 1
    return numbers


@dataclass(eq=False)
class Hunk:
    """One contiguous block of a unified diff for a single file.

    Hunks are leaves: they are never expanded further.

    Attributes:
        lines: Raw diff lines, the ``@@ -a,b +c,d @@`` header first.
        line_numbers: New-file line number per line (``None`` for the
            header and removal lines).
    """

    lines: list[str]
    line_numbers: list[int | None] = field(default_factory=list)
    node_id: NodeId | None = None
    parent_node: NodeId | None = None
    expanded: bool = False

    def __post_init__(self) -> None:
        if not self.line_numbers:
            self.line_numbers = map_new_file_lines(self.lines)

    @property
    def header(self) -> str:
        return self.lines[0] if self.lines else ""

    @property
    def first_new_line(self) -> int:
        """First new-file line this hunk touches (1 when unknown)."""
        for number in self.line_numbers:
            if number is not None:
                return number
        match = HUNK_HEADER_RE.match(self.header)
        if match is not None:
            return max(1, int(match.group(3)))
        return 1


@dataclass(eq=False)
class ChangedFile:
    """A file touched by a changeset or a shelve.

    Attributes:
        path: Repository-relative path.
        status: One-character status code (``M``, ``A``, ``R``, ``?``, ...).
        revision: Revision to diff against, or ``None`` for the working copy.
        hunks: Lazily fetched hunks (``None`` until fetched).
        preamble: File-header lines of the file's diff (``diff --git``,
            ``---``/``+++``), needed to turn a single hunk back into a patch.
    """

    path: str
    status: str
    revision: str | None = None
    hunks: list[Hunk] | None = None
    preamble: list[str] = field(default_factory=list)
    node_id: NodeId | None = None
    parent_node: NodeId | None = None
    expanded: bool = False


@dataclass(eq=False)
class Changeset:
    """One committed revision, or the synthetic pending-changes node.

    Attributes:
        rev: Short revision hash, or ``None`` for the uncommitted working copy.
        summary: First line of the description.
        title: Display title (only the pending-changes node has one).
        tags: Tags in the order the log declared them.
        fields: Raw log fields in source order; repeated keys accumulate.
        files: Lazily fetched changed files (``None`` until fetched).
        parent_revisions: Resolved parent changesets (declaration order).
        child_revisions: Changesets that declared this one as a parent.
        current: True if this is the working copy's parent.
    """

    rev: str | None
    summary: str = ""
    title: str | None = None
    tags: list[str] = field(default_factory=list)
    fields: dict[str, list[str]] = field(default_factory=dict)
    files: list[ChangedFile] | None = None
    parent_revisions: list[Changeset] = field(default_factory=list)
    child_revisions: list[Changeset] = field(default_factory=list)
    current: bool = False
    node_id: NodeId | None = None
    parent_node: NodeId | None = None
    expanded: bool = False

    @property
    def is_pending(self) -> bool:
        return self.rev is None

    @property
    def declared_parents(self) -> list[str]:
        """Parent revision ids as declared in the log (null revisions dropped)."""
        return list(self.fields.get("parent", []))

    def field_value(self, key: str) -> str | None:
        """Return the first value recorded for a log field."""
        values = self.fields.get(key)
        return values[0] if values else None


@dataclass(eq=False)
class Shelve:
    """A named snapshot of uncommitted changes set aside for later.

    Attributes:
        name: Shelve name.
        age: Relative-age label (e.g., "3m ago").
        message: One-line message.
        files: Lazily fetched files with their hunks (``None`` until fetched).
    """

    name: str
    age: str = ""
    message: str = ""
    files: list[ChangedFile] | None = None
    node_id: NodeId | None = None
    parent_node: NodeId | None = None
    expanded: bool = False


Node: TypeAlias = Changeset | ChangedFile | Hunk | Shelve

# Which attribute holds each expandable variant's cached children.
# Hunks are leaves and have no entry.
CHILDREN_ATTR: dict[type, str] = {
    Changeset: "files",
    ChangedFile: "hunks",
    Shelve: "files",
}


def is_expandable(node: Node) -> bool:
    """Check whether a node kind can have children."""
    return type(node) in CHILDREN_ATTR


def cached_children(node: Node) -> list[Node] | None:
    """Return a node's cached children, or ``None`` if never fetched."""
    attr = CHILDREN_ATTR.get(type(node))
    if attr is None:
        return None
    return getattr(node, attr)


def set_cached_children(node: Node, children: list[Node] | None) -> None:
    """Replace a node's cached children.

    Raises:
        TypeError: If the node kind is a leaf.
    """
    attr = CHILDREN_ATTR.get(type(node))
    if attr is None:
        raise TypeError(f"{type(node).__name__} cannot hold children")
    setattr(node, attr, children)
