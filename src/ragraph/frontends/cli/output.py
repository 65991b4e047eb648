"""Output formatting for CLI commands."""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import Any, NoReturn

import rich_click as click
from rich.console import Console
from rich.table import Table

from ragraph.core.graph import Message, StateItem
from ragraph.core.run_logging import truncate


def format_state(state: Any, full: bool = False) -> str:
    """Render a state value for a table cell.

    Message histories show only their last message.
    """
    if isinstance(state, list) and state and isinstance(state[-1], Message):
        last = state[-1]
        text = f"{last.role.value}: {last.content}"
    else:
        text = str(state)
    return text if full else truncate(text, max_length=80)


def print_trace(trace: Sequence[StateItem[Any]], full: bool = False) -> None:
    """Print a trace as a table, one row per step."""
    table = Table(title="Trace", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Node", style="cyan")
    table.add_column("State")
    for i, item in enumerate(trace):
        table.add_row(str(i), item.node, format_state(item.state, full=full))
    Console().print(table)


def output_json(data: Any, indent: int = 2) -> None:
    """Output data as formatted JSON."""
    click.echo(json.dumps(data, indent=indent, default=str))


def trace_to_dict(trace: Sequence[StateItem[Any]], error: str | None = None) -> dict[str, Any]:
    return {
        "success": error is None,
        "error": error,
        "trace": [item.to_dict() for item in trace],
    }


def error_exit(message: str, code: int = 1) -> NoReturn:
    """Print error message and exit with code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)
