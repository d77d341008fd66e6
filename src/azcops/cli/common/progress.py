"""Progress formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from azcops.cli.common.output import err_console
from azcops.core.executions import ExecutionDetail

_MAX_LABEL_WIDTH = 56


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def execution_label(execution_id: str) -> str:
    """Return the short execution name shown next to the spinner."""
    return _truncate(execution_id.rstrip("/").rsplit("/", 1)[-1], _MAX_LABEL_WIDTH)


@contextmanager
def execution_progress(
    job_name: str,
) -> Iterator[Callable[[ExecutionDetail], None]]:
    """
    Show a live counter while execution details are fetched.

    Yields a callback to pass as ``on_item``; it advances the counter,
    counts failures and shows the last execution handled. The total is
    unknown up front, so only a spinner and counters are rendered.
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}[/]"),
        TextColumn("fetched={task.completed:.0f}"),
        TextColumn("failures=[bold red]{task.fields[failures]}[/]"),
        TextColumn("[dim]{task.fields[last]}[/]"),
        TimeElapsedColumn(),
        console=err_console,
        transient=True,
    )
    task_id = progress.add_task(job_name, total=None, failures=0, last="")
    failures = 0

    def on_item(detail: ExecutionDetail) -> None:
        nonlocal failures
        if not detail.ok:
            failures += 1
        progress.update(
            task_id,
            advance=1,
            failures=failures,
            last=execution_label(detail.execution_id),
        )

    with progress:
        yield on_item
