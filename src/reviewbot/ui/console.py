"""Rich-powered console output for review-bot."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.table import Table

from reviewbot.github.client import SyncResult
from reviewbot.parser.models import FileReport


class Console:
    """Terminal output for review-bot using Rich."""

    def __init__(self) -> None:
        self.console = RichConsole()

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}", soft_wrap=True)

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}", soft_wrap=True)

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}", soft_wrap=True)

    def show_file_report(self, report: FileReport) -> None:
        """Summarize one file's classification in a table."""
        table = Table(title=report.file_path, border_style="cyan")
        table.add_column("Kind", style="bold")
        table.add_column("Name")
        table.add_column("Script", style="cyan")

        for pair in report.pairs:
            table.add_row("pair", pair.function.name, pair.script)
        for script in report.scripts:
            table.add_row("script", "", script)
        for function in report.functions:
            table.add_row("function", function.name, "")

        if report.is_empty:
            self.info(f"{report.file_path}: no scripts or functions found")
            return
        self.console.print(table)

    def show_sync_result(self, result: SyncResult) -> None:
        self.success(f"Review comment {result.action} (id {result.comment_id})")
