"""Common CLI utilities: JSON output, stable exit codes and trace IDs."""

import json
import traceback
import uuid
from enum import IntEnum
from typing import Any

import click

from ..config.settings import ConfigError


class ExitCode(IntEnum):
    """Stable exit codes for CLI commands."""

    SUCCESS = 0  # Successful execution
    INPUT_ERROR = 2  # Bad option values (time range, timezone, network)
    CONFIG_ERROR = 6  # Configuration error
    UNKNOWN_ERROR = 7  # Unknown/unexpected error


class CLIContext:
    """Context for CLI execution with JSON output and trace ID."""

    def __init__(
        self,
        json_output: bool = False,
        trace_id: str | None = None,
        verbose: bool = False,
    ):
        """Initialize CLI context.

        Args:
            json_output: Enable JSON output mode
            trace_id: Trace ID for correlation
            verbose: Verbose output
        """
        self.json_output = json_output
        self.trace_id = trace_id or f"trace-{uuid.uuid4().hex[:12]}"
        self.verbose = verbose

    def output(
        self, data: Any, status: str = "success", error: str | None = None, meta: dict[str, Any] | None = None
    ) -> None:
        """Output result in appropriate format.

        Args:
            data: Result data
            status: Status ("success", "error")
            error: Error message if status is error
            meta: Additional metadata
        """
        if self.json_output:
            # JSON mode: print only JSON on stdout
            result: dict[str, Any] = {"status": status, "trace_id": self.trace_id}

            if error:
                result["error"] = error
            else:
                result["data"] = data

            if meta:
                result["meta"] = meta

            click.echo(json.dumps(result, ensure_ascii=False, indent=2))
        elif status == "error":
            click.echo(f"❌ {error}", err=True)
        elif isinstance(data, dict):
            for key, value in data.items():
                click.echo(f"{key}: {value}")
        elif isinstance(data, list):
            for item in data:
                click.echo(f"  - {item}")
        else:
            click.echo(data)


def cli_command(func):
    """Decorator to add common CLI options to commands.

    Adds:
    - --json: JSON output mode
    - --trace-id: Trace ID for correlation
    - --verbose: Verbose output
    """
    import functools

    @click.option("--json", "json_output", is_flag=True, help="Output as JSON (machine-readable)")
    @click.option("--trace-id", type=str, help="Trace ID for correlation")
    @click.option("--verbose", "-v", is_flag=True, help="Verbose output")
    @functools.wraps(func)
    def wrapper(
        json_output: bool,
        trace_id: str | None,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        ctx = CLIContext(json_output=json_output, trace_id=trace_id, verbose=verbose)
        return func(ctx, *args, **kwargs)

    return wrapper


def handle_cli_error(ctx: CLIContext, exc: Exception) -> int:
    """Report an error and return the matching exit code.

    Args:
        ctx: CLI context
        exc: Exception to handle

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, ConfigError):
        exit_code = ExitCode.CONFIG_ERROR
    elif isinstance(exc, (ValueError, click.BadParameter)):
        exit_code = ExitCode.INPUT_ERROR
    else:
        exit_code = ExitCode.UNKNOWN_ERROR

    ctx.output(None, status="error", error=str(exc), meta={"exit_code": int(exit_code)})

    if ctx.verbose and not ctx.json_output:
        click.echo("\nTraceback:", err=True)
        click.echo(traceback.format_exc(), err=True)

    return int(exit_code)
