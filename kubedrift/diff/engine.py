"""Hash-guided tree comparator.

Walks the latest and baseline snapshot trees in lock-step, one level at a
time.  Hash equality is taken as proof of subtree equality, so identical
subtrees are skipped without being visited and produce no graph nodes.
Only when two resource instances differ does the walk descend into their
event lists, where events are paired by list index and compared field by
field.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Protocol, TypeVar

from kubedrift.diff.graph import ChangeGraph, ChangeType, Node, NodeType
from kubedrift.diff.hashing import generate_hash
from kubedrift.diff.myers import EditAction, EditKind, myers_diff
from kubedrift.models.events import (
    FILE_PROCESS_FIELDS,
    NETWORK_FIELDS,
    EventCategory,
    FileProcessEvent,
    NetworkEvent,
    ResourceKind,
)
from kubedrift.models.snapshot import Cluster, Namespace, Workload, WorkloadEvents
from kubedrift.observability.logging import get_logger

_log = get_logger("diff.engine")

ROOT_PATH = "workload"

_CHANGED = "Change"


class _Hashed(Protocol):
    @property
    def content_hash(self) -> str: ...


_S = TypeVar("_S", bound=_Hashed)

_Event = FileProcessEvent | NetworkEvent


def difference(latest: Workload, baseline: Workload) -> ChangeGraph:
    """Compare two snapshots and return the graph of detected changes.

    The graph root is ``latest.content_hash``.  When both snapshots hash
    equal the graph is empty.  Raises :class:`~kubedrift.errors.HashingError`
    if any compared subtree cannot be hashed.
    """
    graph = ChangeGraph()
    root_hash = latest.content_hash
    if root_hash == baseline.content_hash:
        _log.debug("snapshots identical, skipping comparison", root=root_hash)
        return graph

    graph.add_node(Node(type=NodeType.WORKLOAD, hash=root_hash, path=ROOT_PATH, level=0))
    _TreeComparator(graph).compare_clusters(latest.clusters, baseline.clusters, root_hash, ROOT_PATH)
    _log.debug("comparison complete", root=root_hash, nodes=len(graph))
    return graph


class _TreeComparator:
    """Emits change nodes into a single graph during one comparison run."""

    def __init__(self, graph: ChangeGraph) -> None:
        self._graph = graph

    # ------------------------------------------------------------------
    # Levels 1-3: keyed subtrees
    # ------------------------------------------------------------------

    def compare_clusters(
        self,
        latest: Mapping[str, Cluster],
        baseline: Mapping[str, Cluster],
        parent_hash: str,
        parent_path: str,
    ) -> None:
        def recurse(latest_cluster: Cluster, baseline_cluster: Cluster, node_hash: str, path: str) -> None:
            self.compare_namespaces(latest_cluster.namespaces, baseline_cluster.namespaces, node_hash, path)

        self._compare_keyed(
            latest,
            baseline,
            node_type=NodeType.CLUSTER,
            level=1,
            parent_hash=parent_hash,
            path_of=lambda name: f"{parent_path}/cluster/{name}",
            recurse=recurse,
        )

    def compare_namespaces(
        self,
        latest: Mapping[str, Namespace],
        baseline: Mapping[str, Namespace],
        parent_hash: str,
        parent_path: str,
    ) -> None:
        def recurse(latest_ns: Namespace, baseline_ns: Namespace, node_hash: str, path: str) -> None:
            for kind in ResourceKind:
                self.compare_resources(latest_ns.of_kind(kind), baseline_ns.of_kind(kind), kind, node_hash, path)

        self._compare_keyed(
            latest,
            baseline,
            node_type=NodeType.NAMESPACE,
            level=2,
            parent_hash=parent_hash,
            path_of=lambda name: f"{parent_path}/namespace/{name}",
            recurse=recurse,
        )

    def compare_resources(
        self,
        latest: Mapping[str, WorkloadEvents],
        baseline: Mapping[str, WorkloadEvents],
        kind: ResourceKind,
        parent_hash: str,
        parent_path: str,
    ) -> None:
        self._compare_keyed(
            latest,
            baseline,
            node_type=NodeType.WORKLOAD_EVENTS,
            level=3,
            parent_hash=parent_hash,
            path_of=lambda name: f"{parent_path}/resource-type/{kind.value}/resource-name/{name}",
            recurse=self.compare_events,
        )

    def _compare_keyed(
        self,
        latest: Mapping[str, _S],
        baseline: Mapping[str, _S],
        *,
        node_type: NodeType,
        level: int,
        parent_hash: str,
        path_of: Callable[[str], str],
        recurse: Callable[[_S, _S, str, str], None],
    ) -> None:
        """Apply the per-level policy to one keyed mapping.

        Present on both sides with equal hashes: skipped.  Present on both
        with differing hashes: one node, then recurse.  Present on one side
        only: one node recording the whole subtree as inserted or removed.
        """
        for name in sorted(latest):
            latest_child = latest[name]
            path = path_of(name)
            baseline_child = baseline.get(name)

            if baseline_child is None:
                self._add_subtree(node_type, level, name, latest_child, EditKind.INSERT, parent_hash, path)
                continue

            latest_hash = latest_child.content_hash
            if latest_hash == baseline_child.content_hash:
                continue

            node_hash = generate_hash(path, _CHANGED, latest_hash)
            self._graph.add_node(Node(type=node_type, hash=node_hash, path=path, level=level), parent_hash)
            _log.debug("subtree changed", path=path, level=level)
            recurse(latest_child, baseline_child, node_hash, path)

        for name in sorted(baseline.keys() - latest.keys()):
            self._add_subtree(node_type, level, name, baseline[name], EditKind.REMOVE, parent_hash, path_of(name))

    def _add_subtree(
        self,
        node_type: NodeType,
        level: int,
        name: str,
        subtree: _Hashed,
        kind: EditKind,
        parent_hash: str,
        path: str,
    ) -> None:
        change = ChangeType(insert=[name]) if kind is EditKind.INSERT else ChangeType(remove=[name])
        node_hash = generate_hash(path, kind.value, subtree.content_hash)
        self._graph.add_node(
            Node(type=node_type, hash=node_hash, path=path, level=level, change=change),
            parent_hash,
        )
        _log.debug("subtree only on one side", path=path, level=level, change=kind.value)

    # ------------------------------------------------------------------
    # Level 4: event lists
    # ------------------------------------------------------------------

    def compare_events(self, latest: WorkloadEvents, baseline: WorkloadEvents, parent_hash: str, path: str) -> None:
        for category in EventCategory:
            latest_events = latest.events.get(category)
            baseline_events = baseline.events.get(category)
            if not latest_events and not baseline_events:
                continue
            self._compare_event_list(latest_events, baseline_events, category, parent_hash, f"{path}/events/{category}")

    def _compare_event_list(
        self,
        latest: Sequence[_Event | None],
        baseline: Sequence[_Event | None],
        category: EventCategory,
        parent_hash: str,
        category_path: str,
    ) -> None:
        fields = NETWORK_FIELDS if category.is_network else FILE_PROCESS_FIELDS
        paired = min(len(latest), len(baseline))

        # Leaf identity is scoped to the list position, so no two deltas share a node.
        pairs = zip(latest[:paired], baseline[:paired], strict=True)
        for index, (latest_event, baseline_event) in enumerate(pairs):
            if latest_event is None or baseline_event is None:
                continue
            for field_name in fields:
                self._compare_field(
                    latest_event, baseline_event, field_name, category, parent_hash, category_path, index
                )

        # Surplus entries are whole events, not field edits.
        for index, event in enumerate(latest[paired:], start=paired):
            if event is not None:
                self._add_whole_event(event, EditKind.INSERT, fields, category, parent_hash, category_path, index)
        for index, event in enumerate(baseline[paired:], start=paired):
            if event is not None:
                self._add_whole_event(event, EditKind.REMOVE, fields, category, parent_hash, category_path, index)

    def _compare_field(
        self,
        latest: _Event,
        baseline: _Event,
        field_name: str,
        category: EventCategory,
        parent_hash: str,
        category_path: str,
        index: int,
    ) -> None:
        latest_value = latest.field_value(field_name)
        baseline_value = baseline.field_value(field_name)
        if latest_value == baseline_value:
            return

        if latest_value and baseline_value:
            actions = myers_diff([baseline_value], [latest_value])
        elif not latest_value:
            actions = [EditAction(EditKind.REMOVE, baseline_value)]
        else:
            actions = [EditAction(EditKind.INSERT, latest_value)]

        change = ChangeType(event=field_name, granular_event=category.value)
        kinds: list[str] = []
        for action in actions:
            match action.kind:
                case EditKind.KEEP:
                    change.keep.append(action.value)
                case EditKind.INSERT:
                    change.insert.append(action.value)
                    kinds.append(action.kind.value)
                case EditKind.REMOVE:
                    change.remove.append(action.value)
                    kinds.append(action.kind.value)

        changed = f"{','.join(change.remove)}->{','.join(change.insert)}"
        payload = latest if change.insert else baseline
        node = _leaf(
            payload,
            node_hash=generate_hash(f"{category_path}/{index}/{field_name}", "+".join(kinds), changed),
            path=f"{category_path}/{field_name}",
            change=change,
        )
        self._graph.add_node(node, parent_hash)

    def _add_whole_event(
        self,
        event: _Event,
        kind: EditKind,
        fields: Sequence[str],
        category: EventCategory,
        parent_hash: str,
        category_path: str,
        index: int,
    ) -> None:
        for field_name in fields:
            value = event.field_value(field_name)
            if not value:
                continue
            change = ChangeType(event=field_name, granular_event=category.value)
            if kind is EditKind.INSERT:
                change.insert.append(value)
            else:
                change.remove.append(value)
            node = _leaf(
                event,
                node_hash=generate_hash(f"{category_path}/{index}/{field_name}", kind.value, value),
                path=f"{category_path}/{field_name}",
                change=change,
            )
            self._graph.add_node(node, parent_hash)


def _leaf(event: _Event, *, node_hash: str, path: str, change: ChangeType) -> Node:
    if isinstance(event, NetworkEvent):
        return Node(
            type=NodeType.NETWORK_EVENT,
            hash=node_hash,
            path=path,
            level=4,
            network_data=event,
            change=change,
        )
    return Node(
        type=NodeType.FILE_PROCESS_EVENT,
        hash=node_hash,
        path=path,
        level=4,
        file_process_data=event,
        change=change,
    )
