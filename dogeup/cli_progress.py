"""Console rendering and progress helpers for dogeup CLI."""
from __future__ import annotations

from typing import Any, Dict, Optional
import time

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import RunState, UploadOutcome
from .orchestrator.models import RunResult


console = Console()


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """Show only the first characters of a key."""
    if not value:
        return "(missing)"
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * (len(value) - visible)


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]doge-up[/bold green]",
        subtitle="[dim]object storage upload[/dim]",
        border_style="blue",
    )
    console.print(panel)


class RunProgressDisplay:
    """Event-based console timeline for an upload run."""

    _PALETTE = {
        "DONE": "green",
        "FAIL": "red",
        "RTRY": "yellow",
        "SYNC": "cyan",
        "INFO": "blue",
    }

    def __init__(self):
        self._total = 0
        self._uploaded_bytes = 0

    def _emit_timeline(self, status: str, message: str) -> None:
        stamp = time.strftime("%H:%M:%S")
        color = self._PALETTE.get(status, "white")
        console.print(f"[dim]{stamp}[/dim] [{color}]{status:<4}[/{color}] {message}", highlight=False)

    def on_state(self, state: RunState) -> None:
        if state == RunState.FETCHING_CREDENTIAL:
            self._emit_timeline("INFO", "requesting temporary credential")
        elif state == RunState.ENUMERATING:
            self._emit_timeline("INFO", "collecting local files")

    def on_file_start(self, object_key: str, index: int, total: int) -> None:
        self._total = total
        self._emit_timeline("SYNC", f"[{index + 1}/{total}] {object_key}")

    def on_file_complete(self, outcome: UploadOutcome) -> None:
        self._uploaded_bytes += outcome.size
        self._emit_timeline("DONE", f"{outcome.object_key} {_human_size(outcome.size)}")

    def on_file_retry(self, object_key: str, attempt: int, reason: str) -> None:
        self._emit_timeline("RTRY", f"{object_key} attempt={attempt} cause={reason}")

    def on_finish(self, result: RunResult) -> None:
        if result.success:
            if result.total_files == 0:
                self._emit_timeline("INFO", "nothing to upload")
                return
            self._emit_timeline(
                "DONE",
                f"uploaded {result.uploaded_files}/{result.total_files} file(s), "
                f"{_human_size(self._uploaded_bytes)}",
            )
            return
        self._emit_timeline(
            "FAIL",
            f"uploaded {result.uploaded_files}/{result.total_files} file(s) before failure",
        )

    def attach(self, orchestrator) -> None:
        orchestrator.on_state(self.on_state)
        orchestrator.on_file_start(self.on_file_start)
        orchestrator.on_file_complete(self.on_file_complete)
        orchestrator.on_file_retry(self.on_file_retry)
        orchestrator.on_finish(self.on_finish)
