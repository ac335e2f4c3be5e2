"""Loguru configuration with timing for remote fetches.

This module provides centralized loguru configuration with:
- Colored console output
- Structured JSON log files with rotation
- Context manager for timing operations

Focus areas:
- Dashboard dataset aggregation -> orchestrator REST API
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "configure_loguru",
    "get_logger",
    "timing_context",
]

COMPONENTS = ("aggregator", "magma", "cli")


def configure_loguru(
    *,
    log_dir: Path | None = None,
    level: str = "INFO",
    rotation: str = "100 MB",
    retention: str = "10 days",
    compression: str = "zip",
    enable_console: bool = True,
    enable_timing_logs: bool = True,
) -> None:
    """Configure loguru with structured logging and timing support.

    Parameters
    ----------
    log_dir
        Directory for log files (None disables file sinks)
    level
        Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    rotation
        Log rotation policy (e.g., "100 MB", "1 day")
    retention
        Log retention policy (e.g., "10 days", "1 week")
    compression
        Compression for rotated logs (zip, gz, bz2, xz)
    enable_console
        Enable console output on stderr
    enable_timing_logs
        Enable separate timing logs file

    Example
    -------
    >>> from alertchart.observability import configure_loguru
    >>> configure_loguru(log_dir=Path("logs"), level="INFO")
    """
    logger.remove()

    if enable_console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=False,
            filter=_with_component,
        )

    if log_dir is None:
        logger.bind(component="alertchart").debug("Loguru configured", level=level)
        return

    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / "alertchart.jsonl",
        format="{message}",
        level=level,
        rotation=rotation,
        retention=retention,
        compression=compression,
        serialize=True,
        backtrace=True,
        diagnose=False,
        enqueue=True,
    )

    if enable_timing_logs:
        logger.add(
            log_dir / "timing.jsonl",
            format="{message}",
            level="DEBUG",
            rotation=rotation,
            retention=retention,
            compression=compression,
            serialize=True,
            backtrace=False,
            diagnose=False,
            enqueue=True,
            filter=lambda record: record["extra"].get("timing", False),
        )

    for component in COMPONENTS:
        logger.add(
            log_dir / f"{component}.jsonl",
            format="{message}",
            level=level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            serialize=True,
            backtrace=True,
            diagnose=False,
            enqueue=True,
            filter=lambda record, comp=component: record["extra"].get("component") == comp,
        )

    logger.bind(component="alertchart").info("Loguru configured", log_dir=str(log_dir), level=level)


def _with_component(record: dict[str, Any]) -> bool:
    # Console format reads extra[component]; unbound records get a default.
    record["extra"].setdefault("component", "alertchart")
    return True


def get_logger(component: str = "alertchart") -> Any:
    """Get logger instance bound to specific component.

    Parameters
    ----------
    component
        Component name (aggregator, magma, cli)

    Returns
    -------
    Logger
        Loguru logger bound to component
    """
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "alertchart",
    trace_id: str | None = None,
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Context manager for timing operations.

    Parameters
    ----------
    operation
        Name of the operation being timed
    component
        Component name for filtering logs
    trace_id
        Trace ID for correlation
    **metadata
        Additional metadata to log

    Yields
    ------
    dict
        Context dictionary that can be updated with additional data

    Example
    -------
    >>> with timing_context("aggregate", component="aggregator") as ctx:
    ...     alerts, events = await aggregate(interval, source)
    ...     ctx["buckets"] = len(events.data)
    """
    start_time_ns = time.perf_counter_ns()

    context: dict[str, Any] = {
        "operation": operation,
        "component": component,
        "trace_id": trace_id,
        **metadata,
    }

    bound = logger.bind(component=component, timing=True, operation=operation, trace_id=trace_id)
    bound.debug(f"START: {operation}", phase="start", timestamp_ns=start_time_ns, **metadata)

    try:
        yield context
    finally:
        end_time_ns = time.perf_counter_ns()
        duration_ns = end_time_ns - start_time_ns

        bound.info(
            f"END: {operation}",
            phase="end",
            duration_ms=duration_ns / 1_000_000,
            duration_ns=duration_ns,
            start_ns=start_time_ns,
            end_ns=end_time_ns,
            **{k: v for k, v in context.items() if k not in ("operation", "component", "trace_id")},
        )
