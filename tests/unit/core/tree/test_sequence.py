"""Unit tests for the flat display sequence."""

import pytest

from revtree.core.tree.arena import NodeArena
from revtree.core.tree.sequence import DisplaySequence
from revtree.domain.entities import Changeset, Shelve


@pytest.fixture
def nodes() -> list[Changeset]:
    arena = NodeArena()
    changesets = [Changeset(rev=f"abcdef{i}") for i in range(4)]
    for cs in changesets:
        arena.register(cs)
    return changesets


class TestDisplaySequence:
    """Tests for splice and remove."""

    def test_append_and_iterate(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        for node in nodes[:3]:
            seq.append(node)

        assert seq.entities() == nodes[:3]
        assert len(seq) == 3

    def test_insert_after_middle(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        first = seq.append(nodes[0])
        seq.append(nodes[1])

        seq.insert_after(first, nodes[2])

        assert seq.entities() == [nodes[0], nodes[2], nodes[1]]

    def test_insert_after_tail_moves_tail(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        last = seq.append(nodes[0])

        row = seq.insert_after(last, nodes[1])

        assert seq.tail is row
        assert [r.entity for r in seq.iter_from(seq.tail, reverse=True)] == [nodes[1], nodes[0]]

    def test_remove_keeps_neighbours_linked(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        rows = [seq.append(node) for node in nodes[:3]]

        seq.remove(rows[1])

        assert seq.entities() == [nodes[0], nodes[2]]
        assert rows[0].next is rows[2]
        assert rows[2].prev is rows[0]
        assert not rows[1].attached
        assert seq.row_for(nodes[1]) is None

    def test_remove_head_and_tail(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        rows = [seq.append(node) for node in nodes[:3]]

        seq.remove(rows[0])
        seq.remove(rows[2])

        assert seq.head is rows[1]
        assert seq.tail is rows[1]
        assert len(seq) == 1

    def test_remove_twice_is_harmless(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        row = seq.append(nodes[0])

        seq.remove(row)
        seq.remove(row)

        assert len(seq) == 0
        assert seq.head is None

    def test_insert_after_detached_anchor_fails(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        row = seq.append(nodes[0])
        seq.remove(row)

        with pytest.raises(ValueError):
            seq.insert_after(row, nodes[1])

    def test_separators(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        seq.append(nodes[0])
        separator = seq.append(None)

        assert separator.is_separator
        assert seq.entities() == [nodes[0], None]

    def test_row_lookup_and_index(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        rows = [seq.append(node) for node in nodes]

        assert seq.row_for(nodes[2]) is rows[2]
        assert seq.index_of(rows[3]) == 3
        assert seq.row_for(Shelve(name="unregistered")) is None

    def test_clear(self, nodes: list[Changeset]) -> None:
        seq = DisplaySequence()
        rows = [seq.append(node) for node in nodes]

        seq.clear()

        assert len(seq) == 0
        assert list(seq) == []
        assert not any(row.attached for row in rows)
