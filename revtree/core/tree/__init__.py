"""Lazy revision tree: node arena, flat display sequence and the tree engine."""

from revtree.core.tree.arena import NodeArena, NodeKey
from revtree.core.tree.engine import TreeEngine
from revtree.core.tree.sequence import DisplaySequence, Row

__all__ = [
    "NodeArena",
    "NodeKey",
    "TreeEngine",
    "DisplaySequence",
    "Row",
]
