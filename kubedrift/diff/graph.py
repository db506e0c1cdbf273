"""Change graph: a hash-keyed arena of change nodes.

The graph owns every node.  Parent links and child lists hold hashes that
are resolved through the arena, never direct references, so the structure
stays trivially serializable.  Exactly one writer (the comparator) adds
nodes; later passes only flip ``ChangeType.canceled`` on existing nodes.

Levels:
    0  workload root
    1  cluster
    2  namespace
    3  workload events of one resource instance
    4  one field-level change (always a leaf)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from kubedrift.models.events import FileProcessEvent, NetworkEvent

LEAF_LEVEL = 4


class NodeType(StrEnum):
    """What a change node stands for."""

    WORKLOAD = "workload"
    CLUSTER = "cluster"
    NAMESPACE = "namespace"
    WORKLOAD_EVENTS = "workload-events"
    FILE_PROCESS_EVENT = "file-process-event"
    NETWORK_EVENT = "network-event"


@dataclass
class ChangeType:
    """Values kept, inserted and removed at a node, plus its annotations.

    ``event`` is the logical field name ("source", "ip", ...) and
    ``granular_event`` the event category ("file", "egress", ...).
    ``canceled`` only ever goes from False to True, through :meth:`cancel`.
    """

    keep: list[str] = field(default_factory=list)
    insert: list[str] = field(default_factory=list)
    remove: list[str] = field(default_factory=list)
    event: str = ""
    granular_event: str = ""
    canceled: bool = False

    def cancel(self) -> None:
        self.canceled = True

    def to_dict(self) -> dict[str, object]:
        return {
            "keep": self.keep or None,
            "insert": self.insert or None,
            "remove": self.remove or None,
            "granular_event": self.granular_event,
            "event": self.event,
            "canceled": self.canceled,
        }


@dataclass
class Node:
    """A single entry of the change graph."""

    type: NodeType
    hash: str
    path: str
    level: int
    parent_hash: str = ""
    network_data: NetworkEvent | None = None
    file_process_data: FileProcessEvent | None = None
    change: ChangeType = field(default_factory=ChangeType)
    children: list[str] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.level == LEAF_LEVEL


class ChangeGraph:
    """Hash-keyed node store with parent links.

    Lookups that miss return ``None`` (or an empty list) rather than
    raising; callers check existence explicitly.
    """

    def __init__(self) -> None:
        self.nodes: dict[str, Node] = {}
        self.root_hash: str | None = None

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_hash: object) -> bool:
        return node_hash in self.nodes

    def add_node(self, node: Node | None, parent_hash: str = "") -> None:
        """Store *node* and link it under *parent_hash*.

        A node whose parent is not in the graph is stored but unreachable
        from traversal.  A node stored at an existing hash replaces it.
        """
        if node is None:
            return
        node.parent_hash = parent_hash
        self.nodes[node.hash] = node

        if not parent_hash:
            if self.root_hash is None:
                self.root_hash = node.hash
            return

        parent = self.nodes.get(parent_hash)
        if parent is None or node.hash in parent.children:
            return
        parent.children.append(node.hash)

    def get_node(self, node_hash: str) -> Node | None:
        return self.nodes.get(node_hash)

    def depth_first_search(self, root_hash: str) -> list[Node]:
        """Pre-order traversal from *root_hash*; each node is visited once."""
        root = self.nodes.get(root_hash)
        if root is None:
            return []

        result: list[Node] = []
        visited: set[str] = set()
        # Explicit stack; children are pushed reversed to keep pre-order.
        stack: list[str] = [root.hash]
        while stack:
            current_hash = stack.pop()
            if current_hash in visited:
                continue
            node = self.nodes.get(current_hash)
            if node is None:
                continue
            visited.add(current_hash)
            result.append(node)
            stack.extend(reversed(node.children))
        return result

    @staticmethod
    def group_level4_by_parent(nodes: Iterable[Node]) -> dict[str, list[Node]]:
        """Bucket the level-4 nodes of *nodes* by parent hash, in input order."""
        grouped: dict[str, list[Node]] = {}
        for node in nodes:
            if node.level == LEAF_LEVEL:
                grouped.setdefault(node.parent_hash, []).append(node)
        return grouped

    def level4_nodes(self, root_hash: str) -> dict[str, list[Node]]:
        """Level-4 nodes reachable from *root_hash*, grouped by parent."""
        return self.group_level4_by_parent(self.depth_first_search(root_hash))

    def node_to_dict(self, node: Node) -> dict[str, object]:
        """Render *node* and its subtree in the persisted diff-report shape."""
        return self._render(node, set())

    def _render(self, node: Node, seen: set[str]) -> dict[str, object]:
        seen.add(node.hash)
        children = [
            self._render(child, seen)
            for child_hash in node.children
            if child_hash not in seen and (child := self.nodes.get(child_hash)) is not None
        ]
        return {
            "type": node.type.value,
            "path": node.path,
            "level": node.level,
            "parent": node.parent_hash,
            "networkdata": node.network_data.to_dict() if node.network_data is not None else None,
            "fileprocessdata": node.file_process_data.to_dict() if node.file_process_data is not None else None,
            "changetype": node.change.to_dict(),
            "children": children or None,
        }
