"""Unit tests for tree navigation over the display sequence."""

import asyncio

import pytest

from revtree.core import navigation
from revtree.core.tree.engine import TreeEngine
from revtree.core.tree.sequence import Row
from revtree.domain.entities import Changeset, ChangedFile, Shelve
from revtree.domain.exceptions import NoChildError, NoParentError, NoSiblingError
from tests.conftest import MID, ROOT, TIP


def _row(engine: TreeEngine, predicate) -> Row:
    row = engine.find_row(predicate)
    assert row is not None
    return row


def _rev_row(engine: TreeEngine, rev: str) -> Row:
    return _row(engine, lambda n: isinstance(n, Changeset) and n.rev == rev)


def _file_row(engine: TreeEngine, path: str) -> Row:
    return _row(engine, lambda n: isinstance(n, ChangedFile) and n.path == path)


class TestUpDown:
    """Tests for parent and first-child moves."""

    def test_up_from_file(self, engine: TreeEngine) -> None:
        assert navigation.up(_file_row(engine, "bar.txt")).entity is engine.pending

    def test_up_at_top_level_fails(self, engine: TreeEngine) -> None:
        with pytest.raises(NoParentError):
            navigation.up(_rev_row(engine, TIP))
        with pytest.raises(NoParentError):
            navigation.up(engine.sequence.head)

    def test_up_from_hunk(self, engine: TreeEngine) -> None:
        foo_row = _file_row(engine, "foo.txt")
        asyncio.run(engine.expand(foo_row.entity))

        hunk_row = foo_row.next.next
        assert navigation.up(hunk_row) is foo_row

    def test_down_to_first_child(self, engine: TreeEngine) -> None:
        mid_row = _rev_row(engine, MID)

        assert navigation.down(mid_row).entity.path == "a.txt"

    def test_down_from_collapsed_node_fails(self, engine: TreeEngine) -> None:
        with pytest.raises(NoChildError):
            navigation.down(_rev_row(engine, TIP))

    def test_down_on_leaf_fails(self, engine: TreeEngine) -> None:
        foo_row = _file_row(engine, "foo.txt")
        asyncio.run(engine.expand(foo_row.entity))

        with pytest.raises(NoChildError):
            navigation.down(foo_row.next)

    def test_down_from_last_row_fails(self, engine: TreeEngine) -> None:
        with pytest.raises(NoChildError):
            navigation.down(engine.sequence.tail)


class TestSameLevel:
    """Tests for sibling-at-depth moves."""

    def test_next_skips_other_levels(self, engine: TreeEngine) -> None:
        """MID's expanded file row is skipped on the way to ROOT."""
        assert navigation.next_same_level(_rev_row(engine, MID)).entity.rev == ROOT

    def test_next_with_count(self, engine: TreeEngine) -> None:
        assert navigation.next_same_level(_rev_row(engine, TIP), 2).entity.rev == ROOT

    def test_top_level_crosses_separators(self, engine: TreeEngine) -> None:
        target = navigation.next_same_level(_rev_row(engine, ROOT))

        assert isinstance(target.entity, Shelve)

    def test_prev(self, engine: TreeEngine) -> None:
        assert navigation.prev_same_level(_rev_row(engine, MID)).entity.rev == TIP

    def test_files_stay_within_owner(self, engine: TreeEngine) -> None:
        bar_row = _file_row(engine, "bar.txt")

        assert navigation.prev_same_level(bar_row).entity.path == "foo.txt"
        with pytest.raises(NoSiblingError):
            navigation.next_same_level(bar_row)

    def test_boundary_fails(self, engine: TreeEngine) -> None:
        with pytest.raises(NoSiblingError):
            navigation.next_same_level(engine.sequence.tail)
        with pytest.raises(NoSiblingError):
            navigation.prev_same_level(engine.sequence.head)

    def test_count_past_boundary_fails(self, engine: TreeEngine) -> None:
        with pytest.raises(NoSiblingError):
            navigation.next_same_level(_rev_row(engine, TIP), 10)


class TestRowSteps:
    """Tests for plain up/down row moves."""

    def test_next_row_skips_separator(self, engine: TreeEngine) -> None:
        assert navigation.next_row(_file_row(engine, "bar.txt")).entity.rev == TIP

    def test_prev_row_skips_separator(self, engine: TreeEngine) -> None:
        assert navigation.prev_row(_rev_row(engine, TIP)).entity.path == "bar.txt"

    def test_stays_put_at_ends(self, engine: TreeEngine) -> None:
        head, tail = engine.sequence.head, engine.sequence.tail

        assert navigation.prev_row(head) is head
        assert navigation.next_row(tail) is tail
