"""Lazy tree materialization over the flat display sequence.

The engine owns the current population (arena + display sequence). Nodes
are expanded by splicing their cached children into the sequence right
after them, fetching the children through the orchestrator the first time.
Collapsing removes every materialized descendant in one pass but keeps the
cached children, so re-expanding is free until a forced refetch or rebuild.

Invariant: the sequence is the pre-order traversal of every node whose
ancestors are all expanded, with separator rows between the pending block,
the history block and the shelve block.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable

from revtree.core.hierarchy import link
from revtree.core.orchestrator import Orchestrator
from revtree.core.parsing import (
    diff_preamble,
    parse_changesets,
    parse_diff,
    parse_revision_ids,
    parse_shelve_diff,
    parse_shelve_list,
    parse_status_files,
)
from revtree.core.tree.arena import NodeArena
from revtree.core.tree.sequence import DisplaySequence, Row
from revtree.domain.entities import (
    Changeset,
    ChangedFile,
    Node,
    Shelve,
    cached_children,
    is_expandable,
    set_cached_children,
)
from revtree.domain.value_objects import CommandSpec
from revtree.ports.vcs import VCSCommands

logger = logging.getLogger(__name__)

DEFAULT_PENDING_TITLE = "Pending changes"


class TreeEngine:
    """Owns the display sequence and expands/collapses nodes lazily.

    Args:
        orchestrator: Runs VCS queries.
        commands: Builds VCS query specs.
        pending_title: Title given to the synthetic working-copy node.
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        commands: VCSCommands,
        pending_title: str = DEFAULT_PENDING_TITLE,
    ) -> None:
        self.orchestrator = orchestrator
        self.commands = commands
        self.pending_title = pending_title
        self.sequence = DisplaySequence()
        self.arena = NodeArena()
        self.pending: Changeset | None = None
        self.changesets: list[Changeset] = []
        self.shelves: list[Shelve] = []
        # Children fetches in flight, keyed by id() of the node being fetched
        self._inflight: dict[int, asyncio.Future[list[Node]]] = {}

        # Per-variant children query: (spec builder, parser)
        self._fetchers: dict[type, Callable[[Node], tuple[CommandSpec, Callable[[str], list]]]] = {
            Changeset: self._changeset_fetch,
            ChangedFile: self._file_fetch,
            Shelve: self._shelve_fetch,
        }

    # -- fetch dispatch -------------------------------------------------

    def _changeset_fetch(self, node: Changeset) -> tuple[CommandSpec, Callable[[str], list]]:
        if node.rev is None:
            spec = self.commands.status()
        else:
            spec = self.commands.status_change(node.rev)
        return spec, lambda text: parse_status_files(node, text, node.rev)

    def _file_fetch(self, node: ChangedFile) -> tuple[CommandSpec, Callable[[str], list]]:
        def parse(text: str) -> list:
            node.preamble = diff_preamble(text)
            return parse_diff(text)

        return self.commands.diff(node.path, node.revision), parse

    def _shelve_fetch(self, node: Shelve) -> tuple[CommandSpec, Callable[[str], list]]:
        return self.commands.shelve_diff(node.name), parse_shelve_diff

    def _store_children(self, node: Node, children: list[Node]) -> None:
        self.arena.release_children(node)
        set_cached_children(node, children)
        self.arena.adopt(node, children)

    async def fetch_children(self, node: Node) -> list[Node]:
        """Run the node's children query and cache the result on it."""
        spec, parse = self._fetchers[type(node)](node)
        text = await self.orchestrator.run_one(spec, "Loading")
        children = parse(text)
        self._store_children(node, children)
        return children

    async def _shared_fetch(self, node: Node) -> list[Node]:
        """Fetch a node's children, joining a fetch already in flight for it."""
        key = id(node)
        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self.fetch_children(node))
            self._inflight[key] = pending
            pending.add_done_callback(lambda _done: self._inflight.pop(key, None))
        return await asyncio.shield(pending)

    # -- expand / collapse ---------------------------------------------

    def _splice_children(self, node: Node, anchor: Row) -> Row:
        """Insert ``node``'s cached children after ``anchor`` in pre-order.

        Children that are themselves expanded bring their own subtree along.

        Returns:
            The last row inserted (``anchor`` if nothing was inserted).
        """
        last = anchor
        for child in cached_children(node) or []:
            last = self.sequence.insert_after(last, child)
            if child.expanded:
                last = self._splice_children(child, last)
        return last

    async def expand(self, node: Node, force_refetch: bool = False) -> None:
        """Expand a node, fetching its children on first expansion.

        Expanding an already expanded node is a no-op unless
        ``force_refetch`` is set, in which case the cached children are
        discarded, refetched and re-spliced. Concurrent expansions of the same
        node share one fetch and splice its children once.

        Args:
            node: Node to expand. Hunks are leaves and are ignored.
            force_refetch: Discard cached children and query again.
        """
        if not is_expandable(node):
            return
        if node.expanded and not force_refetch:
            return
        if node.expanded:
            self.collapse(node)

        if cached_children(node) is None or force_refetch or id(node) in self._inflight:
            await self._shared_fetch(node)
            if node.expanded:
                # Another expansion finished the splice during the fetch
                return

        node.expanded = True
        row = self.sequence.row_for(node)
        if row is None:
            # The row vanished while the fetch was in flight (e.g. a
            # concurrent rebuild); the children stay cached.
            logger.debug("Expanded node is no longer displayed; skipping splice")
            return
        self._splice_children(node, row)

    def collapse(self, node: Node) -> None:
        """Collapse a node, removing all of its displayed descendants.

        Cached children are kept. Every descendant loses its expanded flag so
        a later expansion starts collapsed at every level.
        """
        row = self.sequence.row_for(node)
        if row is not None:
            descendants = {node.node_id}
            doomed: list[Row] = []
            for candidate in self.sequence.iter_from(row.next):
                entity = candidate.entity
                if entity is not None and entity.parent_node in descendants:
                    descendants.add(entity.node_id)
                    doomed.append(candidate)
            for candidate in doomed:
                self.sequence.remove(candidate)

        node.expanded = False
        self._clear_expanded(node)

    def _clear_expanded(self, node: Node) -> None:
        for child in cached_children(node) or []:
            if child.expanded:
                child.expanded = False
                self._clear_expanded(child)

    async def toggle(self, node: Node, force_refetch: bool = False) -> None:
        """Expand a collapsed node, collapse an expanded one.

        With ``force_refetch`` an expanded node is refreshed instead of
        collapsed.
        """
        if node.expanded and not force_refetch:
            self.collapse(node)
        else:
            await self.expand(node, force_refetch=force_refetch)

    async def expand_many(self, nodes: Iterable[Node]) -> None:
        """Expand several nodes, fetching all missing children in one round."""
        targets = [n for n in nodes if is_expandable(n) and not n.expanded]
        missing = [n for n in targets if cached_children(n) is None]
        if missing:
            queries = [self._fetchers[type(n)](n) for n in missing]
            outputs = await self.orchestrator.run_all([spec for spec, _ in queries], "Loading")
            for node, (_spec, parse), text in zip(missing, queries, outputs):
                self._store_children(node, parse(text))
        for node in targets:
            await self.expand(node)

    # -- population ------------------------------------------------------

    def refresh_specs(self) -> list[CommandSpec]:
        """The queries of one refresh round, in positional order.

        0: history log, 1: working-copy status, 2: status of the working
        copy's parent, 3: current-parent id, 4: shelve list.
        """
        return [
            self.commands.log(),
            self.commands.status(),
            self.commands.status_change("."),
            self.commands.current_parent(),
            self.commands.shelve_list(),
        ]

    async def rebuild(self) -> None:
        """Discard the population and rebuild it from a fresh query round."""
        log_text, pending_text, parent_status_text, parent_text, shelve_text = (
            await self.orchestrator.run_all(self.refresh_specs(), "Refreshing")
        )

        self.sequence.clear()
        self.arena = NodeArena()

        pending = Changeset(rev=None, title=self.pending_title)
        self.arena.register(pending)
        pending_files = parse_status_files(pending, pending_text, None)
        if pending_files:
            self._store_children(pending, pending_files)
            pending.expanded = True
            self.pending = pending
        else:
            self.pending = None

        changesets = parse_changesets(log_text)
        link(changesets)
        current_revs = set(parse_revision_ids(parent_text))
        for cs in changesets:
            self.arena.register(cs)
            cs.current = cs.rev in current_revs
            if cs.current:
                self._store_children(cs, parse_status_files(cs, parent_status_text, cs.rev))
                cs.expanded = True
        self.changesets = changesets

        self.shelves = parse_shelve_list(shelve_text)
        for shelve in self.shelves:
            self.arena.register(shelve)

        if self.pending is not None:
            self._append_subtree(self.pending)
        self.sequence.append(None)
        for cs in self.changesets:
            self._append_subtree(cs)
        self.sequence.append(None)
        for shelve in self.shelves:
            self._append_subtree(shelve)

        logger.debug(
            "Rebuilt tree: %d changeset(s), %d shelve(s), pending=%s",
            len(self.changesets),
            len(self.shelves),
            self.pending is not None,
        )

    def _append_subtree(self, node: Node) -> None:
        row = self.sequence.append(node)
        if node.expanded:
            self._splice_children(node, row)

    # -- queries ---------------------------------------------------------

    def depth(self, node: Node) -> int:
        return self.arena.depth(node)

    def parent_of(self, node: Node) -> Node | None:
        return self.arena.parent_of(node)

    def find_row(self, predicate: Callable[[Node], bool]) -> Row | None:
        for row in self.sequence:
            if row.entity is not None and predicate(row.entity):
                return row
        return None


