"""Caller-supplied allow/deny criteria applied to level-4 changes.

Each configured criterion is evaluated independently for every level-4
node; a failing criterion marks the node canceled.  Nodes are never
removed and never un-canceled, so re-running a filter is a no-op.

Allow-lists (workload, source, destination) keep only matching nodes.
Deny-lists (ignore-command, ignore-path) cancel matching nodes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from kubedrift.diff.graph import ChangeGraph, Node
from kubedrift.errors import PatternError
from kubedrift.observability.logging import get_logger

_log = get_logger("diff.filters")

REGEX_PREFIX = "r:"

# Inline flags with no pattern behind them would match everything.
_BARE_FLAGS = frozenset({"(?i)", "(?m)", "(?s)", "(?x)", "(?a)"})


@dataclass(frozen=True)
class PatternSet:
    """Literal strings plus compiled regexes for one filter category."""

    literals: tuple[str, ...] = ()
    regexes: tuple[re.Pattern[str], ...] = ()

    @property
    def configured(self) -> bool:
        return bool(self.literals or self.regexes)

    def matches(self, value: str) -> bool:
        """True if *value* equals a literal or any regex finds a match in it."""
        if value in self.literals:
            return True
        return any(regex.search(value) for regex in self.regexes)

    @classmethod
    def from_values(cls, values: Iterable[str]) -> PatternSet:
        """Build a set from raw option values; ``r:``-prefixed ones are regexes.

        Raises:
            PatternError: a regex is empty, only inline flags, or invalid.
        """
        literals: list[str] = []
        regexes: list[re.Pattern[str]] = []
        for raw in values:
            value = raw.strip()
            if not value.startswith(REGEX_PREFIX):
                if value:
                    literals.append(value)
                continue
            pattern = value[len(REGEX_PREFIX) :].strip("\"'")
            if not pattern:
                raise PatternError(f"empty regex pattern in '{raw}'")
            if pattern in _BARE_FLAGS:
                raise PatternError(f"regex flag {pattern} provided but no actual pattern")
            try:
                regexes.append(re.compile(pattern))
            except re.error as exc:
                raise PatternError(f"invalid regex pattern '{pattern}': {exc}") from exc
        return cls(literals=tuple(literals), regexes=tuple(regexes))


@dataclass(frozen=True)
class FilterCriteria:
    """The five filter categories; unconfigured ones are skipped."""

    workloads: PatternSet = field(default_factory=PatternSet)
    sources: PatternSet = field(default_factory=PatternSet)
    destinations: PatternSet = field(default_factory=PatternSet)
    ignore_commands: PatternSet = field(default_factory=PatternSet)
    ignore_paths: PatternSet = field(default_factory=PatternSet)

    @property
    def is_empty(self) -> bool:
        return not any(
            ps.configured
            for ps in (self.workloads, self.sources, self.destinations, self.ignore_commands, self.ignore_paths)
        )

    @classmethod
    def from_values(
        cls,
        *,
        workloads: Iterable[str] = (),
        sources: Iterable[str] = (),
        destinations: Iterable[str] = (),
        ignore_commands: Iterable[str] = (),
        ignore_paths: Iterable[str] = (),
    ) -> FilterCriteria:
        return cls(
            workloads=PatternSet.from_values(workloads),
            sources=PatternSet.from_values(sources),
            destinations=PatternSet.from_values(destinations),
            ignore_commands=PatternSet.from_values(ignore_commands),
            ignore_paths=PatternSet.from_values(ignore_paths),
        )


def parse_path_info(path: str) -> dict[str, str]:
    """Split a change path into its ``key/value`` segment pairs.

    ``workload/cluster/c1/namespace/ns/resource-type/deployment/...`` yields
    ``{"cluster": "c1", "namespace": "ns", "resource-type": "deployment", ...}``.
    The leading root segment and a trailing unpaired field name are skipped.
    """
    segments = path.split("/")
    info: dict[str, str] = {}
    for i in range(1, len(segments) - 1, 2):
        info[segments[i]] = segments[i + 1]
    return info


def workload_from_path(path: str) -> str:
    """Return ``<resource-type>/<resource-name>`` for a path, or ``""``."""
    info = parse_path_info(path)
    resource_type = info.get("resource-type", "")
    resource_name = info.get("resource-name", "")
    if not resource_type or not resource_name:
        return ""
    return f"{resource_type}/{resource_name}"


def filter_graph(graph: ChangeGraph, root_hash: str, criteria: FilterCriteria) -> int:
    """Cancel every level-4 node that fails a configured criterion.

    Returns the number of nodes newly canceled by this pass.
    """
    if criteria.is_empty:
        return 0

    newly_canceled = 0
    for nodes in graph.level4_nodes(root_hash).values():
        for node in nodes:
            was_canceled = node.change.canceled
            _apply(node, criteria)
            if node.change.canceled and not was_canceled:
                newly_canceled += 1

    _log.debug("filter pass complete", root=root_hash, canceled=newly_canceled)
    return newly_canceled


def _apply(node: Node, criteria: FilterCriteria) -> None:
    if criteria.workloads.configured and not criteria.workloads.matches(workload_from_path(node.path)):
        node.change.cancel()

    fp = node.file_process_data
    if fp is not None:
        if criteria.sources.configured and fp.source and not criteria.sources.matches(fp.source):
            node.change.cancel()
        if criteria.destinations.configured and fp.destination and not criteria.destinations.matches(fp.destination):
            node.change.cancel()
        if criteria.ignore_paths.configured and any(
            path and criteria.ignore_paths.matches(path) for path in (fp.source, fp.destination)
        ):
            node.change.cancel()

    net = node.network_data
    if net is not None and criteria.ignore_commands.configured:
        if net.command and criteria.ignore_commands.matches(net.command):
            node.change.cancel()
