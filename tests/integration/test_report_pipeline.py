"""End-to-end tests: difference -> cancellation -> filtering."""

from __future__ import annotations

from kubedrift.diff.filters import FilterCriteria
from kubedrift.diff.graph import Node, NodeType
from kubedrift.report import DriftReport, build_report
from kubedrift.models.snapshot import Workload


def _active(report: DriftReport) -> list[Node]:
    return [n for nodes in report.level4_nodes().values() for n in nodes if not n.change.canceled]


def _by_value(report: DriftReport) -> dict[str, Node]:
    return {
        value: node
        for nodes in report.level4_nodes().values()
        for node in nodes
        for value in node.change.insert + node.change.remove
    }


class TestUnfilteredReport:
    def test_counts(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline)
        assert report.root_hash == latest.content_hash
        assert report.total_changes == 6
        assert report.canceled_changes == 2
        assert report.active_changes == 4
        assert report.has_drift

    def test_swapped_events_cancel(self, latest: Workload, baseline: Workload) -> None:
        nodes = _by_value(build_report(latest, baseline))
        assert nodes["/var/log/a"].change.canceled
        assert nodes["/var/log/b"].change.canceled
        assert not nodes["/etc/passwd"].change.canceled

    def test_structural_nodes(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline)
        visited = report.graph.depth_first_search(report.root_hash)
        removed_clusters = [n for n in visited if n.type is NodeType.CLUSTER and n.change.remove]
        inserted_namespaces = [n for n in visited if n.type is NodeType.NAMESPACE and n.change.insert]
        assert [n.path for n in removed_clusters] == ["workload/cluster/legacy"]
        assert [n.path for n in inserted_namespaces] == ["workload/cluster/prod/namespace/monitoring"]

    def test_groups_follow_resource_instances(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline)
        groups = report.level4_nodes()
        resource_paths = {report.graph.get_node(parent).path.rsplit("/", 1)[-1] for parent in groups}  # type: ignore[union-attr]
        assert resource_paths == {"api", "web"}

    def test_to_dict_hides_canceled_by_default(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline)
        assert len(report.to_dict()) == 4
        assert len(report.to_dict(include_canceled=True)) == 6
        assert all(entry["level"] == 4 for entry in report.to_dict())


class TestFilteredReport:
    def test_ignore_path(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline, FilterCriteria.from_values(ignore_paths=["r:^/proc/"]))
        assert sorted(n.change.event + ":" + n.change.granular_event for n in _active(report)) == [
            "ip:egress",
            "source:file",
        ]

    def test_ignore_command(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline, FilterCriteria.from_values(ignore_commands=["r:^curl$"]))
        assert all(n.network_data is None for n in _active(report))
        assert report.active_changes == 3

    def test_workload_allow_list(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline, FilterCriteria.from_values(workloads=["deployment/web"]))
        assert report.active_changes == 3
        assert all("/resource-name/web/" in n.path for n in _active(report))

    def test_everything_filtered(self, latest: Workload, baseline: Workload) -> None:
        report = build_report(latest, baseline, FilterCriteria.from_values(workloads=["r:^job/"]))
        assert report.active_changes == 0
        assert not report.has_drift


class TestIdenticalSnapshots:
    def test_no_drift(self, latest: Workload) -> None:
        report = build_report(latest, latest)
        assert report.total_changes == 0
        assert report.to_dict() == []
        assert len(report.graph) == 0
