"""Algebraic cancellation of moved-but-unchanged values.

A value removed at one leaf and inserted at another nets out to no
observable change: typically an event that only moved within its list.
Matching is global across the whole graph, not scoped per resource, so
coinciding values in unrelated resources also cancel each other.

A leaf holding a whole field edit (``remove`` and ``insert`` side by side)
only cancels when each of its values is matched, and only together with
partners that cancel as well.  A replacement whose inserted value merely
coincides with some other removal stays visible.
"""

from __future__ import annotations

from kubedrift.diff.graph import LEAF_LEVEL, ChangeGraph, Node
from kubedrift.observability.logging import get_logger

_log = get_logger("diff.cancellation")


def cancel_out_changes(graph: ChangeGraph, root_hash: str) -> int:
    """Mark insert/remove pairs of equal value as canceled.

    For each value, the last inserting and last removing level-4 node in
    DFS order are paired.  Returns the number of nodes newly canceled.
    """
    leaves: dict[str, Node] = {}
    insertions: dict[str, Node] = {}
    removals: dict[str, Node] = {}

    for node in graph.depth_first_search(root_hash):
        if node.level != LEAF_LEVEL:
            continue
        leaves[node.hash] = node
        for value in node.change.insert:
            insertions[value] = node
        for value in node.change.remove:
            removals[value] = node

    partners: dict[str, set[str]] = {}
    for node_hash, node in leaves.items():
        found = _partners(node, insertions, removals)
        if found is not None:
            partners[node_hash] = found
    matched = set(partners)

    # Drop nodes paired with a partner that cannot cancel, until stable.
    while True:
        unmatched = {node_hash for node_hash in matched if not partners[node_hash] <= matched}
        if not unmatched:
            break
        matched -= unmatched

    newly_canceled = 0
    for node_hash in sorted(matched):
        node = leaves[node_hash]
        if not node.change.canceled:
            node.change.cancel()
            newly_canceled += 1

    _log.debug("cancellation pass complete", root=root_hash, canceled=newly_canceled)
    return newly_canceled


def _partners(node: Node, insertions: dict[str, Node], removals: dict[str, Node]) -> set[str] | None:
    """Hashes of the nodes pairing with every value of *node*, or None if one is unpaired."""
    found: set[str] = set()
    if not node.change.insert and not node.change.remove:
        return None
    for value in node.change.insert:
        partner = removals.get(value)
        if insertions[value] is not node or partner is None:
            return None
        found.add(partner.hash)
    for value in node.change.remove:
        partner = insertions.get(value)
        if removals[value] is not node or partner is None:
            return None
        found.add(partner.hash)
    return found
