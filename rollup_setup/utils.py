"""Shared utility functions for roll-up setup.

Provides async command execution and Rich-based console reporting.  All
progress output in the tool goes through the module-level ``console`` so
tests can capture it from ``sys.stdout``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    capture: bool = True,
    stdin: int | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and wait for it to exit.

    Args:
        cmd: Argument vector; ``cmd[0]`` is resolved on ``PATH``.
        cwd: Working directory for the child process.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams so the user sees live output).
        stdin: Passed through to the child; ``None`` inherits the parent's
            stdin, ``asyncio.subprocess.DEVNULL`` detaches it.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        OSError: If the executable cannot be spawned (e.g. not installed).
    """
    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=stdin,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
    )
    stdout_bytes, stderr_bytes = await process.communicate()

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_info(message: str) -> None:
    """Print a plain progress line."""
    console.print(escape(message), highlight=False, soft_wrap=True)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", highlight=False, soft_wrap=True)


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False, soft_wrap=True)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]", highlight=False, soft_wrap=True)


def print_command(label: str, command: str) -> None:
    """Print a copy-pasteable command on a single unwrapped line."""
    console.print(f"{label}{command}", markup=False, highlight=False, soft_wrap=True)


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("File", style="dim", no_wrap=True)
    table.add_column("Status")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()
