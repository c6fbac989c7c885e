"""Flat display sequence: a doubly linked list of rows.

Rows stay valid while other rows are spliced in or removed around them, so
the cursor and any in-flight operation can hold on to a row across edits.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from revtree.domain.entities import Node, NodeId


@dataclass(eq=False)
class Row:
    """One display row: an entity, or a separator when ``entity`` is None."""

    entity: Node | None
    prev: Row | None = None
    next: Row | None = None
    attached: bool = False

    @property
    def is_separator(self) -> bool:
        return self.entity is None

    def __repr__(self) -> str:
        label = "separator" if self.entity is None else type(self.entity).__name__
        return f"Row({label})"


class DisplaySequence:
    """Order-preserving row list with O(1) splice/remove and entity lookup."""

    def __init__(self) -> None:
        self.head: Row | None = None
        self.tail: Row | None = None
        self._rows_by_id: dict[NodeId, Row] = {}
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[Row]:
        return self.iter_from(self.head)

    def iter_from(self, row: Row | None, reverse: bool = False) -> Iterator[Row]:
        """Iterate starting at ``row`` (inclusive) in either direction."""
        while row is not None:
            following = row.prev if reverse else row.next
            yield row
            row = following

    def entities(self) -> list[Node | None]:
        return [row.entity for row in self]

    def row_for(self, node: Node) -> Row | None:
        """Return the row materializing ``node``, if any."""
        if node.node_id is None:
            return None
        row = self._rows_by_id.get(node.node_id)
        if row is not None and row.entity is node:
            return row
        return None

    def index_of(self, target: Row) -> int:
        """Position of a row (linear scan)."""
        for index, row in enumerate(self):
            if row is target:
                return index
        raise ValueError("row is not in the sequence")

    def _index(self, row: Row) -> None:
        row.attached = True
        self._length += 1
        if row.entity is not None and row.entity.node_id is not None:
            self._rows_by_id[row.entity.node_id] = row

    def append(self, entity: Node | None) -> Row:
        """Append a row at the end."""
        row = Row(entity, prev=self.tail)
        if self.tail is None:
            self.head = row
        else:
            self.tail.next = row
        self.tail = row
        self._index(row)
        return row

    def insert_after(self, anchor: Row, entity: Node | None) -> Row:
        """Insert a row immediately after ``anchor``."""
        if not anchor.attached:
            raise ValueError("anchor row is not in the sequence")
        row = Row(entity, prev=anchor, next=anchor.next)
        if anchor.next is None:
            self.tail = row
        else:
            anchor.next.prev = row
        anchor.next = row
        self._index(row)
        return row

    def remove(self, row: Row) -> None:
        """Unlink a row. Its neighbours become adjacent."""
        if not row.attached:
            return
        if row.prev is None:
            self.head = row.next
        else:
            row.prev.next = row.next
        if row.next is None:
            self.tail = row.prev
        else:
            row.next.prev = row.prev
        row.prev = row.next = None
        row.attached = False
        self._length -= 1
        if row.entity is not None and row.entity.node_id is not None:
            if self._rows_by_id.get(row.entity.node_id) is row:
                del self._rows_by_id[row.entity.node_id]

    def clear(self) -> None:
        for row in list(self):
            row.prev = row.next = None
            row.attached = False
        self.head = self.tail = None
        self._rows_by_id.clear()
        self._length = 0
