"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ReportConfig:
    """Drift report input/output configuration."""

    baseline_path: str = "baseline/report.json"
    output_dir: str = "kubedrift_out/reports/"
    include_canceled: bool = False


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeDriftConfig:
    """Top-level kubedrift configuration."""

    report: ReportConfig = field(default_factory=ReportConfig)
    log: LogConfig = field(default_factory=LogConfig)
