"""Row formatting for the display sequence.

Each entity variant has one formatter in a dispatch table. A formatter
returns prompt_toolkit ``(style, text)`` fragments for the row body; the
indentation and expand marker are added here for every variant so the tree
shape stays uniform. The plain-text form used by ``revtree dump`` is the
concatenation of the same fragments.
"""

from collections.abc import Callable

from revtree.core.presentation.colors import STATUS_STYLES
from revtree.core.tree.sequence import Row
from revtree.domain.entities import Changeset, ChangedFile, Hunk, Node, Shelve, is_expandable

Fragment = tuple[str, str]

INDENT = "  "
EXPANDED_MARKER = "▾ "
COLLAPSED_MARKER = "▸ "
LEAF_MARKER = "  "
SEPARATOR_TEXT = "─" * 40


def _marker(node: Node) -> Fragment:
    if not is_expandable(node):
        return ("class:marker", LEAF_MARKER)
    return ("class:marker", EXPANDED_MARKER if node.expanded else COLLAPSED_MARKER)


class RowFormatter:
    """Formats rows of a display sequence.

    Args:
        depth_of: Callable returning a node's depth (0 for top level).
        show_dates: Append the changeset date to history rows.
    """

    def __init__(self, depth_of: Callable[[Node], int], show_dates: bool = True) -> None:
        self.depth_of = depth_of
        self.show_dates = show_dates
        self._formatters: dict[type, Callable[[Node], list[Fragment]]] = {
            Changeset: self._changeset,
            ChangedFile: self._file,
            Hunk: self._hunk,
            Shelve: self._shelve,
        }

    def _changeset(self, node: Changeset) -> list[Fragment]:
        if node.is_pending:
            count = len(node.files or [])
            return [
                ("class:pending", node.title or "Pending changes"),
                ("class:dimmed", f" ({count} file{'s' if count != 1 else ''})"),
            ]
        parts: list[Fragment] = [
            ("class:current", "@ ") if node.current else ("class:marker", "o "),
            ("class:rev", node.rev or ""),
        ]
        if node.tags:
            parts.append(("class:tag", f" [{', '.join(node.tags)}]"))
        parts.append(("", f" {node.summary}"))
        date = node.field_value("date")
        if self.show_dates and date:
            parts.append(("class:dimmed", f"  {date}"))
        return parts

    def _file(self, node: ChangedFile) -> list[Fragment]:
        return [
            (STATUS_STYLES.get(node.status, ""), node.status),
            ("", f" {node.path}"),
        ]

    def _hunk(self, node: Hunk) -> list[Fragment]:
        """Every diff line of the hunk, continuation lines indented."""
        pad = INDENT * (self.depth_of(node) + 1)
        parts: list[Fragment] = []
        for index, line in enumerate(node.lines):
            if index:
                parts.append(("", "\n" + pad))
            if index == 0:
                style = "class:diff.header"
            elif line.startswith("+"):
                style = "class:diff.added"
            elif line.startswith("-"):
                style = "class:diff.removed"
            else:
                style = ""
            parts.append((style, line))
        return parts

    def _shelve(self, node: Shelve) -> list[Fragment]:
        parts: list[Fragment] = [("class:shelve", node.name)]
        if node.age:
            parts.append(("class:dimmed", f" ({node.age})"))
        if node.message:
            parts.append(("", f" {node.message}"))
        return parts

    def fragments(self, row: Row) -> list[Fragment]:
        """Fragments for one row, without a trailing newline."""
        node = row.entity
        if node is None:
            return [("class:separator", SEPARATOR_TEXT)]
        indent = INDENT * self.depth_of(node)
        return [("", indent), _marker(node), *self._formatters[type(node)](node)]

    def plain(self, row: Row) -> str:
        """Uncolored text of one row."""
        return "".join(text for _style, text in self.fragments(row))

    def render(self, rows: list[Row], selected: Row | None = None) -> list[Fragment]:
        """Fragments for a list of rows, one row per line.

        The selected row is highlighted and carries the cursor position so
        the enclosing window scrolls to keep it visible.
        """
        result: list[Fragment] = []
        for row in rows:
            parts = self.fragments(row)
            if row is selected:
                result.append(("[SetCursorPosition]", ""))
                parts = [(f"class:selected {style}".strip(), text) for style, text in parts]
            result.extend(parts)
            result.append(("", "\n"))
        return result
