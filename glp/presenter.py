"""Terminal rendering of pipeline rows.

Color scheme
------------
- green  : success
- red    : failed
- yellow : running, pending
- dim    : canceled, canceling, skipped
"""

from collections.abc import Sequence
from datetime import datetime

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from glp.models.gitlab import Job
from glp.models.row import DisplayRow
from glp.stages import Stage

FINISHED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

STATUS_STYLES: dict[str, str] = {
    "success": "green",
    "failed": "red",
    "running": "yellow",
    "pending": "yellow",
    "canceled": "dim",
    "canceling": "dim",
    "skipped": "dim",
}

STATUS_SYMBOLS: dict[str, str] = {
    "success": "✓",
    "failed": "✗",
    "running": "●",
    "pending": "○",
    "canceled": "⊘",
    "skipped": "»",
    "manual": "▶",
}


def format_duration(seconds: float) -> str:
    """Format a duration like "1h 2m 3s", dropping sub-second precision."""
    remaining = int(seconds)
    parts: list[str] = []
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60), ("s", 1)):
        value, remaining = divmod(remaining, size)
        if value:
            parts.append(f"{value}{unit}")
    return " ".join(parts) or "0s"


def format_finished_at(finished_at: datetime) -> str:
    """Format a finish timestamp in local time."""
    return finished_at.astimezone().strftime(FINISHED_AT_FORMAT)


def status_label(name: str, status: str) -> Text:
    """Style a label by status; manual items get a suffix instead of a color."""
    if status == "manual":
        return Text(f"{name} [manual]")
    return Text(name, style=STATUS_STYLES.get(status, ""))


def duration_cell(row: DisplayRow) -> Text:
    """Bracketed duration, blank while the pipeline has not finished."""
    if row.finished_at is None or row.detail is None or row.detail.duration is None:
        return Text()
    return Text(f"[{format_duration(row.detail.duration)}]")


def finished_at_cell(row: DisplayRow) -> Text:
    """Finish time, blank when unknown."""
    if row.finished_at is None:
        return Text()
    return Text(format_finished_at(row.finished_at))


def build_table(rows: Sequence[DisplayRow], *, show_finished: bool) -> Table:
    """Build an aligned, borderless grid with one line per pipeline.

    Only the ref column shrinks when the console is too narrow; it is cut
    with an ellipsis so every row stays on one line.
    """
    table = Table.grid(padding=(0, 1))
    table.add_column(no_wrap=True)
    table.add_column(no_wrap=True)
    table.add_column(overflow="ellipsis")
    table.add_column(no_wrap=True)
    if show_finished:
        table.add_column(no_wrap=True)

    for row in rows:
        summary = row.summary
        symbol = STATUS_SYMBOLS.get(summary.status, "?")
        style = STATUS_STYLES.get(summary.status, "")
        cells = [
            Text(f"{symbol} #{summary.id}", style=style),
            status_label(summary.status, summary.status),
            Text(f"({summary.ref})", no_wrap=True, overflow="ellipsis"),
            duration_cell(row),
        ]
        if show_finished:
            cells.append(finished_at_cell(row))
        table.add_row(*cells)

    return table


def job_label(job: Job) -> Text:
    """Job name colored by status, followed by its duration."""
    duration = format_duration(job.duration) if job.duration is not None else "-"
    label = status_label(job.name, job.status)
    label.append(f" ({duration})")
    return label


def build_tree(
    row: DisplayRow, stages: Sequence[Stage], *, show_finished: bool
) -> Tree:
    """Build a stage/job tree rooted at the pipeline line."""
    tree = Tree(build_table([row], show_finished=show_finished), guide_style="dim")
    for stage in stages:
        branch = tree.add(status_label(stage.name, stage.status))
        for job in stage.jobs:
            branch.add(job_label(job))
    return tree


def render_rows(
    rows: Sequence[DisplayRow],
    *,
    show_finished: bool = False,
    console: Console | None = None,
) -> None:
    """Write pipeline rows to the console (stdout by default).

    Rows carrying stages are followed by their stage/job tree.
    """
    if not rows:
        return
    console = console or Console(highlight=False)

    if not any(row.stages for row in rows):
        console.print(build_table(rows, show_finished=show_finished))
        return

    for row in rows:
        if row.stages:
            console.print(build_tree(row, row.stages, show_finished=show_finished))
        else:
            console.print(build_table([row], show_finished=show_finished))
