"""CLI for building the events/alerts chart datasets of a network."""

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import click

from ..adapters.magma import MagmaAPIClient
from ..charts import TimeInterval, aggregate, select_step
from ..config.settings import load_settings
from ..core.time import format_utc_iso8601, localize
from ..observability import configure_loguru, get_logger
from .cli_common import CLIContext, ExitCode, cli_command, handle_cli_error

__all__ = ["cli", "dataset_command", "main", "parse_last", "resolve_interval"]

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

log = get_logger("cli")


def parse_last(last: str) -> timedelta:
    """Parse a lookback such as '30m', '6h' or '2d'.

    Raises
    ------
    ValueError
        If format is invalid
    """
    value = last.strip().lower()
    units = {"m": "minutes", "h": "hours", "d": "days"}

    if len(value) < 2 or value[-1] not in units:
        raise ValueError(f"Invalid --last format: {last} (use '30m', '6h', '2d')")

    try:
        amount = int(value[:-1])
    except ValueError as exc:
        raise ValueError(f"Invalid --last format: {last} (use '30m', '6h', '2d')") from exc

    if amount <= 0:
        raise ValueError(f"--last must be positive, got {last}")

    return timedelta(**{units[value[-1]]: amount})


def _parse_point(value: str, tz: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(f"Invalid datetime: {value} (use ISO-8601, e.g. 2025-10-08T12:00)") from exc
    return localize(parsed, tz)


def resolve_interval(
    start: str | None,
    end: str | None,
    last: str | None,
    tz: str,
    now: datetime | None = None,
) -> TimeInterval:
    """Build the interval from either --start/--end or --last.

    Naive --start/--end values are read in ``tz``. A missing --end means now.
    """
    now = now or datetime.now(timezone.utc)

    if last:
        if start:
            raise ValueError("Use either --last or --start/--end, not both")
        end_dt = _parse_point(end, tz) if end else now
        return TimeInterval(end_dt - parse_last(last), end_dt)

    if not start:
        raise ValueError("Either --start or --last is required")

    end_dt = _parse_point(end, tz) if end else now
    return TimeInterval(_parse_point(start, tz), end_dt)


async def _build_datasets(client: Any, interval: TimeInterval, trace_id: str) -> tuple[Any, Any, list[str]]:
    notifications: list[str] = []
    async with client:
        alerts, events = await aggregate(interval, client, notifications.append, trace_id=trace_id)
    return alerts, events, notifications


@click.group(
    context_settings=CONTEXT_SETTINGS,
    help="Event and alert chart datasets for orchestrator networks",
)
def cli() -> None:
    """Root command for chart datasets."""


@cli.command("dataset")
@click.option("--network-id", "-n", type=str, help="Network ID (default: ALERTCHART_NETWORK_ID)")
@click.option("--start", type=str, help="Range start (ISO-8601)")
@click.option("--end", type=str, help="Range end (ISO-8601, default: now)")
@click.option("--last", type=str, help="Lookback from --end, e.g. '30m', '6h', '2d'")
@click.option("--tz", type=str, help="Timezone for naive --start/--end (default: ALERTCHART_DEFAULT_TZ)")
@click.option("--env-file", type=click.Path(dir_okay=False, path_type=Path), help="Path to .env file")
@cli_command
def dataset_command(
    ctx: CLIContext,
    network_id: str | None,
    start: str | None,
    end: str | None,
    last: str | None,
    tz: str | None,
    env_file: Path | None,
) -> int:
    """Fetch event counts and alerts for a time range.

    Examples:
        # Last six hours of the configured network
        alertchart dataset --last 6h

        # Explicit range in local time, as JSON
        alertchart dataset -n lte_net --start 2025-10-08T08:00 --end 2025-10-08T12:00 --tz Europe/Brussels --json
    """
    try:
        settings = load_settings(env_file)
        configure_loguru(
            log_dir=settings.log_dir,
            level="DEBUG" if ctx.verbose else settings.log_level,
            enable_console=ctx.verbose and not ctx.json_output,
        )

        interval = resolve_interval(start, end, last, tz or settings.default_timezone)
        granularity = select_step(interval.start, interval.end)
        client = MagmaAPIClient.from_settings(settings, network_id)

        log.info("Building chart datasets", network_id=client.network_id, trace_id=ctx.trace_id)
        alerts, events, notifications = asyncio.run(_build_datasets(client, interval, ctx.trace_id))

        for message in notifications:
            click.echo(f"⚠️  {message}", err=True)

        meta = {
            "network_id": client.network_id,
            "start": format_utc_iso8601(interval.start),
            "end": format_utc_iso8601(interval.end),
            "step": granularity.step_string(),
        }
        # One event point per bucket; empty only when the alerts query failed.
        if events.data:
            meta["buckets"] = len(events)
        if notifications:
            meta["notification"] = notifications[0]

        if ctx.json_output:
            ctx.output([alerts.to_dict(), events.to_dict()], meta=meta)
        else:
            summary = {**meta, alerts.label: f"{len(alerts)} points", events.label: f"{len(events)} points"}
            ctx.output(summary)
            if ctx.verbose:
                for series in (alerts, events):
                    click.echo(f"{series.label}:")
                    ctx.output([f"t={point.t} y={point.y}" for point in series.data])

        return int(ExitCode.SUCCESS)

    except Exception as exc:
        return handle_cli_error(ctx, exc)


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    if args is None:
        args = sys.argv[1:]

    try:
        return cli.main(args=list(args), prog_name="alertchart", standalone_mode=False) or 0
    except click.UsageError as exc:
        exc.show()
        return int(ExitCode.INPUT_ERROR)
    except SystemExit as exc:
        return int(exc.code) if exc.code is not None else 0


if __name__ == "__main__":
    sys.exit(main())
