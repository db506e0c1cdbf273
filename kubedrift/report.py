"""Drift report pipeline.

Runs the engine phases strictly in sequence on one fresh graph:
comparison, then cancellation, then filtering.  The finished report is
handed to consumers read-only.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from kubedrift.diff.cancellation import cancel_out_changes
from kubedrift.diff.engine import difference
from kubedrift.diff.filters import FilterCriteria, filter_graph
from kubedrift.diff.graph import ChangeGraph, Node
from kubedrift.models.snapshot import Workload
from kubedrift.observability.logging import get_logger

_log = get_logger("report")


@dataclass(frozen=True)
class DriftReport:
    """Annotated change graph of one latest-vs-baseline comparison."""

    graph: ChangeGraph
    root_hash: str
    total_changes: int
    canceled_changes: int

    @property
    def active_changes(self) -> int:
        return self.total_changes - self.canceled_changes

    @property
    def has_drift(self) -> bool:
        return self.active_changes > 0

    def level4_nodes(self) -> dict[str, list[Node]]:
        return self.graph.level4_nodes(self.root_hash)

    def to_dict(self, include_canceled: bool = False) -> list[dict[str, object]]:
        """Level-4 nodes in the persisted node shape, grouped by parent."""
        return [
            self.graph.node_to_dict(node)
            for nodes in self.level4_nodes().values()
            for node in nodes
            if include_canceled or not node.change.canceled
        ]


def build_report(latest: Workload, baseline: Workload, criteria: FilterCriteria | None = None) -> DriftReport:
    """Compare *latest* against *baseline* and annotate the result.

    Raises :class:`~kubedrift.errors.HashingError` if a snapshot cannot be
    hashed.
    """
    t_start = time.monotonic()
    root_hash = latest.content_hash

    graph = difference(latest, baseline)
    leaves = [node for nodes in graph.level4_nodes(root_hash).values() for node in nodes]
    _log.info("comparison finished", nodes=len(graph), changes=len(leaves))

    canceled = cancel_out_changes(graph, root_hash)
    _log.info("cancellation finished", canceled=canceled)

    if criteria is not None:
        filtered = filter_graph(graph, root_hash, criteria)
        _log.info("filtering finished", canceled=filtered)

    report = DriftReport(
        graph=graph,
        root_hash=root_hash,
        total_changes=len(leaves),
        canceled_changes=sum(1 for node in leaves if node.change.canceled),
    )
    _log.info(
        "drift report built",
        active=report.active_changes,
        canceled=report.canceled_changes,
        duration_ms=int((time.monotonic() - t_start) * 1000),
    )
    return report
