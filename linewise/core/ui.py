"""Rich-based terminal output for explanations."""

from __future__ import annotations

import contextlib
from typing import Iterator, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from linewise.explain.models import REMOTE, ExplanationSet

_THEMES = {
    "default": {"number": "dim", "code": "cyan", "explanation": "white"},
    "plain": {"number": "", "code": "", "explanation": ""},
}


class ExplainUI:
    """Wrap the Rich console to render explanation sets consistently."""

    def __init__(self, *, theme: str = "default", enable_progress: bool = True, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.theme = theme
        self.enable_progress = enable_progress

    def info(self, message: str) -> None:
        self.console.print(Text(message, style="green"))

    def warn(self, message: str) -> None:
        self.console.print(Text(message, style="yellow"))

    def error(self, message: str) -> None:
        self.console.print(Text(message, style="bold red"))

    @contextlib.contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        if not self.enable_progress:
            yield
            return
        progress = Progress(SpinnerColumn(), TextColumn("{task.description}"), TimeElapsedColumn(), console=self.console, transient=True)
        task = progress.add_task(message, total=None)
        with progress:
            yield
            progress.update(task, completed=1)

    def explanation_table(self, result: ExplanationSet, *, title: str = "Explanations") -> Table:
        styles = _THEMES.get(self.theme, _THEMES["default"])
        source = "model" if result.source == REMOTE else "local analysis"
        table = Table(title=title, caption=f"source: {source}", show_lines=True)
        table.add_column("#", justify="right", style=styles["number"])
        table.add_column("Code", style=styles["code"], overflow="fold")
        table.add_column("Explanation", style=styles["explanation"], overflow="fold")
        for item in result:
            if not isinstance(item, dict):
                table.add_row("?", "", Text(str(item)))
                continue
            table.add_row(
                str(item.get("lineNumber", "?")),
                Text(str(item.get("code", ""))),
                Text(str(item.get("explanation", ""))),
            )
        return table

    def render(self, result: ExplanationSet, *, title: str = "Explanations") -> None:
        if not len(result):
            self.warn("Nothing to explain.")
            return
        self.console.print(self.explanation_table(result, title=title))


__all__ = ["ExplainUI"]
