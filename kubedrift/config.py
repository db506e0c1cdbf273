"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubedrift.models.config import KubeDriftConfig, LogConfig, ReportConfig


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEDRIFT_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_output_dir(value: str) -> str:
    # Report file names are appended directly to the directory.
    if value and not value.endswith("/"):
        return value + "/"
    return value


def load_config() -> KubeDriftConfig:
    """Load configuration from KUBEDRIFT_* environment variables."""
    return KubeDriftConfig(
        report=ReportConfig(
            baseline_path=_env("BASELINE_PATH", "baseline/report.json"),
            output_dir=_validate_output_dir(_env("OUTPUT_DIR", "kubedrift_out/reports/")),
            include_canceled=_env_bool("INCLUDE_CANCELED", False),
        ),
        log=LogConfig(
            level=validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
