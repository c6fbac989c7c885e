"""Interactive tree session.

Manages the cursor, the transient message and the preview pane of an
interactive session over a TreeEngine.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from revtree.core.tree.arena import NodeKey
from revtree.core.tree.engine import TreeEngine
from revtree.core.tree.sequence import Row
from revtree.domain.entities import Node
from revtree.domain.exceptions import NavigationError

logger = logging.getLogger(__name__)


@dataclass
class TreeSession:
    """Cursor and message state for one interactive session."""

    engine: TreeEngine
    cursor: Row | None = None
    message: str | None = None
    message_is_error: bool = False
    preview_text: str | None = None
    preview_visible: bool = False

    @property
    def selected(self) -> Node | None:
        """Entity under the cursor (None on an empty tree)."""
        if self.cursor is None or not self.cursor.attached:
            return None
        return self.cursor.entity

    def set_message(self, text: str, error: bool = False) -> None:
        self.message = text
        self.message_is_error = error

    def clear_message(self) -> None:
        self.message = None
        self.message_is_error = False

    def ensure_cursor(self) -> None:
        """Put the cursor on a displayed, non-separator row."""
        if self.cursor is not None and self.cursor.attached and not self.cursor.is_separator:
            return
        self.cursor = self._first_row()

    def _first_row(self) -> Row | None:
        for row in self.engine.sequence:
            if not row.is_separator:
                return row
        return None

    def move(self, step: Callable[[Row], Row]) -> bool:
        """Apply a navigation step to the cursor.

        Navigation dead ends become the transient message and leave the
        cursor where it was.

        Returns:
            True if the cursor moved.
        """
        self.ensure_cursor()
        if self.cursor is None:
            return False
        try:
            target = step(self.cursor)
        except NavigationError as e:
            self.set_message(e.message)
            return False
        moved = target is not self.cursor
        self.cursor = target
        return moved

    def remember(self) -> NodeKey | None:
        """Key of the node under the cursor, stable across rebuilds."""
        node = self.selected
        if node is None:
            return None
        return self.engine.arena.key(node)

    def restore(self, key: NodeKey | None) -> None:
        """Move the cursor to the row matching ``key``.

        Falls back to the closest displayed ancestor (a shorter key prefix)
        and finally to the first row.
        """
        self.cursor = None
        if key:
            rows_by_key = {
                self.engine.arena.key(row.entity): row
                for row in self.engine.sequence
                if row.entity is not None
            }
            for length in range(len(key), 0, -1):
                row = rows_by_key.get(key[:length])
                if row is not None:
                    self.cursor = row
                    break
        self.ensure_cursor()

    async def refresh(self) -> None:
        """Rebuild the tree and keep the cursor on the same node."""
        key = self.remember()
        await self.engine.rebuild()
        self.restore(key)

    async def toggle(self, force_refetch: bool = False) -> None:
        """Expand or collapse the node under the cursor."""
        node = self.selected
        if node is None:
            return
        await self.engine.toggle(node, force_refetch=force_refetch)
        self.ensure_cursor()

    def toggle_preview(self) -> None:
        self.preview_visible = not self.preview_visible

    def rows(self) -> list[Row]:
        return list(self.engine.sequence)
