from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from index_timeseries.domain.models import PlannedStep, SweepReport

_STATUS_STYLES = {"ok": "green", "failed": "bold red", "skipped": "yellow"}


def _short(commit: str) -> str:
    return commit[:12] if commit else "[dim]<none>[/dim]"


def _when(moment: Optional[datetime]) -> str:
    return moment.strftime("%Y-%m-%d %H:%M") if moment else "N/A"


def print_plan(planned: List[PlannedStep], console: Optional[Console] = None) -> None:
    """
    Render the commits a sweep would benchmark, one row per day offset.
    """
    console = console or Console()

    if not planned:
        console.print("[yellow]No offsets in range.[/yellow]")
        return

    table = Table(title="Index Sweep Plan", box=box.ROUNDED)
    table.add_column("Days Ago", justify="right", style="cyan")
    table.add_column("Before (UTC)", style="dim")
    table.add_column("Commit", style="magenta")
    table.add_column("Commit Time", style="green")

    for step in planned:
        table.add_row(
            str(step.offset),
            _when(step.before),
            _short(step.commit),
            _when(step.commit_time),
        )

    console.print(table)


def print_steps(report: SweepReport, console: Optional[Console] = None) -> None:
    """
    Render a finished sweep as a rich table.

    Setup steps appear in the caption; each benchmark run gets a row.
    """
    console = console or Console()

    if not report.steps:
        console.print("[yellow]No benchmark steps were run.[/yellow]")
        return

    setup_info = " │ ".join(f"{s.step}: {s.status}" for s in report.setup)
    table = Table(
        title="Index Time-Series Sweep",
        box=box.ROUNDED,
        caption=(
            f"{report.succeeded} ok, {report.failed} failed, {report.skipped} skipped"
            + (f"\n[dim]{setup_info}[/dim]" if setup_info else "")
        ),
    )
    table.add_column("Days Ago", justify="right", style="cyan", no_wrap=True)
    table.add_column("Commit", style="magenta")
    table.add_column("Status")
    table.add_column("Exit", justify="right")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU (s)", justify="right", style="red")

    for step in report.steps:
        style = _STATUS_STYLES.get(step.status, "")
        mem_str = "N/A"
        if step.peak_rss_bytes:
            mem_str = f"{step.peak_rss_bytes / (1024 * 1024):.2f}"
        cpu_str = f"{step.child_cpu_seconds:.1f}" if step.child_cpu_seconds is not None else "N/A"
        table.add_row(
            str(step.offset),
            _short(step.commit),
            f"[{style}]{step.status}[/{style}]" if style else step.status,
            "-" if step.returncode is None else str(step.returncode),
            f"{step.duration_seconds:.1f}",
            mem_str,
            cpu_str,
        )

    console.print(table)
