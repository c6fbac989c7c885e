"""Unit tests for the node arena."""

from revtree.core.tree.arena import NodeArena
from revtree.domain.entities import Changeset, ChangedFile, Hunk, Shelve


class TestNodeArena:
    """Tests for handles, ownership and keys."""

    def test_register_assigns_unique_handles(self) -> None:
        arena = NodeArena()
        a, b = Changeset(rev="aaaaaa1"), Changeset(rev="bbbbbb2")

        arena.register(a)
        arena.register(b)

        assert a.node_id != b.node_id
        assert arena.get(a.node_id) is a
        assert a.parent_node is None

    def test_handles_unique_across_arenas(self) -> None:
        first, second = NodeArena(), NodeArena()
        a, b = Changeset(rev="aaaaaa1"), Changeset(rev="aaaaaa1")

        first.register(a)
        second.register(b)

        assert a.node_id != b.node_id
        assert a not in second

    def test_adopt_registers_prefilled_grandchildren(self) -> None:
        arena = NodeArena()
        shelve = Shelve(name="wip")
        hunk = Hunk(lines=["@@ -1 +1 @@", "-a", "+b"])
        file = ChangedFile(path="foo.txt", status="M", hunks=[hunk])
        arena.register(shelve)

        arena.adopt(shelve, [file])

        assert arena.parent_of(file) is shelve
        assert arena.parent_of(hunk) is file
        assert arena.depth(hunk) == 2
        assert list(arena.ancestors(hunk)) == [file, shelve]

    def test_release_children_forgets_descendants(self) -> None:
        arena = NodeArena()
        cs = Changeset(rev="aaaaaa1")
        hunk = Hunk(lines=["@@ -1 +1 @@"])
        file = ChangedFile(path="foo.txt", status="M", hunks=[hunk])
        arena.register(cs)
        cs.files = [file]
        arena.adopt(cs, [file])

        arena.release_children(cs)

        assert file not in arena
        assert hunk not in arena
        assert cs in arena
        assert len(arena) == 1

    def test_key_is_stable_across_populations(self) -> None:
        def build() -> tuple[NodeArena, ChangedFile]:
            arena = NodeArena()
            cs = Changeset(rev="aaaaaa1")
            file = ChangedFile(path="foo.txt", status="M")
            arena.register(cs)
            arena.adopt(cs, [file])
            return arena, file

        arena1, file1 = build()
        arena2, file2 = build()

        assert arena1.key(file1) == arena2.key(file2)
        assert arena1.key(file1) == (("changeset", "aaaaaa1"), ("file", "foo.txt"))
