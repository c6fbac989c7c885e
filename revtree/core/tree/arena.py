"""Node arena: stable integer handles for the entities of one population.

Entities never hold references to their owner; they store the owner's
handle (``parent_node``) and the arena resolves it. Ownership flows one way,
from an owner's cached children list down to the children, so a collapsed or
refreshed subtree is dropped without cycles to break.
"""

import itertools
from collections.abc import Iterator

from revtree.domain.entities import (
    Changeset,
    ChangedFile,
    Hunk,
    Node,
    NodeId,
    Shelve,
    cached_children,
)

NodeKey = tuple[tuple[str, str], ...]

# Handles are unique across populations so a node left over from a previous
# population can never alias a node of the current one.
_handles = itertools.count(1)


def _own_key(node: Node) -> tuple[str, str]:
    if isinstance(node, Changeset):
        return ("changeset", node.rev or "")
    if isinstance(node, ChangedFile):
        return ("file", node.path)
    if isinstance(node, Hunk):
        return ("hunk", node.header)
    if isinstance(node, Shelve):
        return ("shelve", node.name)
    raise TypeError(f"Unknown node kind: {type(node).__name__}")


class NodeArena:
    """Registry mapping handles to the entities of the current population."""

    def __init__(self) -> None:
        self._nodes: dict[NodeId, Node] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: Node) -> bool:
        return node.node_id is not None and self._nodes.get(node.node_id) is node

    def register(self, node: Node, parent: Node | None = None) -> NodeId:
        """Assign a handle to ``node`` and record its owner.

        Args:
            node: Entity to register.
            parent: Owning entity (must already be registered), or None for
                a top-level node.

        Returns:
            The new handle.
        """
        node_id = next(_handles)
        node.node_id = node_id
        node.parent_node = parent.node_id if parent is not None else None
        self._nodes[node_id] = node
        return node_id

    def adopt(self, owner: Node, children: list[Node]) -> list[Node]:
        """Register ``children`` (and any prefetched grandchildren) under ``owner``."""
        for child in children:
            self.register(child, owner)
            grandchildren = cached_children(child)
            if grandchildren:
                self.adopt(child, grandchildren)
        return children

    def release_children(self, owner: Node) -> None:
        """Forget every cached descendant of ``owner``."""
        for child in cached_children(owner) or []:
            self.release_children(child)
            if child.node_id is not None and self._nodes.get(child.node_id) is child:
                del self._nodes[child.node_id]

    def get(self, node_id: NodeId | None) -> Node | None:
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def parent_of(self, node: Node) -> Node | None:
        return self.get(node.parent_node)

    def ancestors(self, node: Node) -> Iterator[Node]:
        """Yield the owner chain from the direct parent up to the top level."""
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def depth(self, node: Node) -> int:
        return sum(1 for _ in self.ancestors(node))

    def key(self, node: Node) -> NodeKey:
        """Identity of a node that survives a rebuild (kind and name chain)."""
        chain = [_own_key(node)]
        chain.extend(_own_key(ancestor) for ancestor in self.ancestors(node))
        return tuple(reversed(chain))
