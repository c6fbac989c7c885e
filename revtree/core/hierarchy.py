"""Changeset hierarchy: link parsed changesets into a parent/child DAG."""

import logging
from collections.abc import Iterable

from revtree.domain.entities import Changeset

logger = logging.getLogger(__name__)


def link(changesets: Iterable[Changeset]) -> None:
    """Link changesets to their parents and children in place.

    For each changeset, every declared parent id that resolves to a fetched
    changeset produces a bidirectional edge. Parents outside the fetched
    window are dropped. Both edge lists follow declaration order: a
    changeset's parents in the order its log block listed them, a parent's
    children in the order the children appear in the log.

    Args:
        changesets: Parsed changesets in log order. Existing edges are reset.
    """
    changesets = list(changesets)
    by_rev = {cs.rev: cs for cs in changesets if cs.rev is not None}

    for cs in changesets:
        cs.parent_revisions = []
        cs.child_revisions = []

    dropped = 0
    for cs in changesets:
        for parent_rev in cs.declared_parents:
            parent = by_rev.get(parent_rev)
            if parent is None:
                dropped += 1
                continue
            parent.child_revisions.append(cs)
            cs.parent_revisions.append(parent)

    if dropped:
        logger.debug("Dropped %d parent reference(s) outside the fetched window", dropped)
