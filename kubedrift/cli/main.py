"""Click commands for kubedrift.

``kubedrift report`` compares a latest snapshot against a baseline and
writes the surviving level-4 changes as JSON, suitable for gating a
deployment or pull request on behavioral drift.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import click

from kubedrift.config import load_config, validate_log_level
from kubedrift.diff.filters import FilterCriteria
from kubedrift.errors import KubeDriftError
from kubedrift.loader import load_snapshot
from kubedrift.models.config import KubeDriftConfig
from kubedrift.observability.logging import get_logger, setup_logging
from kubedrift.report import build_report


def _check_log_level(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return validate_log_level(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.group()
@click.option(
    "--log-level",
    default=None,
    callback=_check_log_level,
    help="Override KUBEDRIFT_LOG_LEVEL (debug, info, warning, error).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Behavioral drift reports for Kubernetes workloads."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    if log_level:
        config.log.level = log_level
    setup_logging(config.log.level)
    ctx.obj = config


@cli.command()
@click.option("--latest", "latest_path", required=True, type=click.Path(dir_okay=False), help="Latest snapshot JSON.")
@click.option("--baseline", "baseline_path", default=None, type=click.Path(dir_okay=False), help="Baseline snapshot JSON.")
@click.option("--workload", "workloads", multiple=True, help="Keep only <type>/<name> workloads (r:<regex> allowed).")
@click.option("--source", "-s", "sources", multiple=True, help="Keep only these source paths.")
@click.option("--destination", "-d", "destinations", multiple=True, help="Keep only these destination paths.")
@click.option("--ignore-command", "ignore_commands", multiple=True, help="Drop network changes from these commands.")
@click.option("--ignore-path", "ignore_paths", multiple=True, help="Drop file/process changes touching these paths.")
@click.option("--include-canceled", is_flag=True, help="Also emit canceled changes.")
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False), help="Write JSON here instead of stdout.")
@click.option("--save", is_flag=True, help="Write JSON into the configured output directory.")
@click.option("--fail-on-drift", is_flag=True, help="Exit 1 when any uncanceled change remains.")
@click.pass_obj
def report(
    config: KubeDriftConfig,
    latest_path: str,
    baseline_path: str | None,
    workloads: tuple[str, ...],
    sources: tuple[str, ...],
    destinations: tuple[str, ...],
    ignore_commands: tuple[str, ...],
    ignore_paths: tuple[str, ...],
    include_canceled: bool,
    output: str | None,
    save: bool,
    fail_on_drift: bool,
) -> None:
    """Diff LATEST against the baseline and print level-4 changes as JSON."""
    log = get_logger("cli")
    include_canceled = include_canceled or config.report.include_canceled

    try:
        criteria = FilterCriteria.from_values(
            workloads=workloads,
            sources=sources,
            destinations=destinations,
            ignore_commands=ignore_commands,
            ignore_paths=ignore_paths,
        )
        latest = load_snapshot(latest_path)
        baseline = load_snapshot(baseline_path or config.report.baseline_path)
        result = build_report(latest, baseline, criteria)
    except KubeDriftError as exc:
        raise click.ClickException(str(exc)) from exc

    payload = json.dumps(result.to_dict(include_canceled=include_canceled), indent=2)

    if save and output is None:
        stamp = datetime.now(tz=UTC).strftime("%Y%m%d-%H%M%S")
        output = f"{config.report.output_dir}diff_{stamp}.json"

    if output is None:
        click.echo(payload)
    else:
        out = Path(output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload + "\n", encoding="utf-8")
        log.info("report written", path=str(out))

    click.echo(
        f"{result.active_changes} active change(s), {result.canceled_changes} canceled",
        err=True,
    )
    if fail_on_drift and result.has_drift:
        raise click.exceptions.Exit(1)
