"""Tree navigation over the flat display sequence.

Pure traversal functions: they follow row links and parent handles, never
fetch, and never mutate the tree. Dead ends raise a NavigationError
subclass and leave the caller's cursor where it was.
"""

from revtree.core.tree.sequence import Row
from revtree.domain.entities import NodeId
from revtree.domain.exceptions import NoChildError, NoParentError, NoSiblingError


def _parent_handle(row: Row) -> NodeId | None:
    """Parent handle of a row's entity; separators count as top level."""
    return row.entity.parent_node if row.entity is not None else None


def up(row: Row) -> Row:
    """Move to the row of the current node's parent.

    Raises:
        NoParentError: If the node is top-level or its parent is not displayed.
    """
    if row.entity is None or row.entity.parent_node is None:
        raise NoParentError("Already at the top level")
    parent_id = row.entity.parent_node
    candidate = row.prev
    while candidate is not None:
        if candidate.entity is not None and candidate.entity.node_id == parent_id:
            return candidate
        candidate = candidate.prev
    raise NoParentError("Parent is not displayed")


def down(row: Row) -> Row:
    """Move to the first child, which must be the very next row.

    Raises:
        NoChildError: If the next row is not a child of the current node.
    """
    following = row.next
    if (
        row.entity is None
        or following is None
        or following.entity is None
        or following.entity.parent_node != row.entity.node_id
    ):
        raise NoChildError("No expanded children here")
    return following


def _walk_same_level(row: Row, count: int, forward: bool) -> Row:
    if count < 1:
        return row
    level = _parent_handle(row)
    passed = 0
    candidate = row.next if forward else row.prev
    while candidate is not None:
        if candidate.entity is not None and candidate.entity.parent_node == level:
            passed += 1
            if passed == count:
                return candidate
        candidate = candidate.next if forward else candidate.prev
    direction = "next" if forward else "previous"
    raise NoSiblingError(f"No {direction} node at this level")


def next_same_level(row: Row, count: int = 1) -> Row:
    """Move forward ``count`` rows that share the current row's parent.

    Raises:
        NoSiblingError: If the sequence ends before ``count`` such rows.
    """
    return _walk_same_level(row, count, forward=True)


def prev_same_level(row: Row, count: int = 1) -> Row:
    """Move backward ``count`` rows that share the current row's parent.

    Raises:
        NoSiblingError: If the sequence starts before ``count`` such rows.
    """
    return _walk_same_level(row, count, forward=False)


def next_row(row: Row) -> Row:
    """The following row, skipping separators (stays put at the end)."""
    candidate = row.next
    while candidate is not None and candidate.is_separator:
        candidate = candidate.next
    return candidate if candidate is not None else row


def prev_row(row: Row) -> Row:
    """The preceding row, skipping separators (stays put at the start)."""
    candidate = row.prev
    while candidate is not None and candidate.is_separator:
        candidate = candidate.prev
    return candidate if candidate is not None else row
