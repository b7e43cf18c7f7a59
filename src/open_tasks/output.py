#!/usr/bin/env python3
"""
Terminal Output

Verbosity-filtered rendering of task progress on a rich console. Three
levels are supported:

- quiet: command start/end lines only
- summary: adds cards and created files
- verbose: adds progress, info, warning and error messages
"""

import sys
import time
from enum import IntEnum
from typing import Any, List, Mapping, Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .errors import ValidationError
from .utils.json_logger import create_task_logger


class Verbosity(IntEnum):
    QUIET = 0
    SUMMARY = 1
    VERBOSE = 2

    @classmethod
    def parse(cls, value: Union["Verbosity", str]) -> "Verbosity":
        if isinstance(value, Verbosity):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValidationError(
                f"Invalid verbosity: {value}. Expected one of: quiet, summary, verbose"
            ) from None

    @property
    def label(self) -> str:
        return self.name.lower()


def format_execution_time(duration_ms: float) -> str:
    """Render a duration as ``"450ms"`` or ``"1.2s"``."""
    if duration_ms < 1000:
        return f"{int(duration_ms)}ms"
    return f"{duration_ms / 1000:.1f}s"


# Cross-platform safe success/failure symbols (avoid Unicode on legacy Windows)
def symbol(ok: bool) -> str:
    enc = (getattr(sys.stdout, "encoding", None) or "").lower()
    if "utf" in enc:
        return "✓" if ok else "✗"
    return "OK" if ok else "FAIL"


class OutputSink:
    """Writes task output to a console, dropping what the verbosity hides."""

    def __init__(
        self,
        verbosity: Union[Verbosity, str] = Verbosity.SUMMARY,
        console: Optional[Console] = None,
    ):
        self.verbosity = Verbosity.parse(verbosity)
        self.console = console or Console()
        self.files_created: List[str] = []

    def enabled(self, level: Verbosity) -> bool:
        return self.verbosity >= level

    def write(self, message: str, level: Verbosity = Verbosity.VERBOSE, style: Optional[str] = None) -> None:
        if self.enabled(level):
            self.console.print(Text(message, style=style or ""))

    def command_start(self, name: str) -> None:
        self.console.print(f"[bold blue]Running:[/bold blue] {name}", highlight=False)

    def command_end(self, duration_ms: float) -> None:
        self.console.print(
            f"[green]{symbol(True)} Completed in {format_execution_time(duration_ms)}[/green]",
            highlight=False,
        )

    def file_created(self, path: str) -> None:
        self.files_created.append(str(path))
        if self.enabled(Verbosity.SUMMARY):
            self.console.print(Text(f"  + {path}", style="dim"))

    def card(self, title: str, body: Union[str, Mapping[str, Any]], style: str = "blue") -> None:
        if not self.enabled(Verbosity.SUMMARY):
            return
        if isinstance(body, Mapping):
            content = Table(show_header=False, box=None, padding=(0, 1))
            content.add_column(style="bold")
            content.add_column()
            for key, value in body.items():
                content.add_row(str(key), "" if value is None else str(value))
        else:
            content = Text(str(body))
        self.console.print(Panel(content, title=title, border_style=style, expand=False))


class TaskLogger:
    """Per-task facade over an :class:`OutputSink`.

    Announces the task on creation and reports its duration on ``complete``.
    Messages are mirrored to the stdlib logger of the same task.
    """

    def __init__(self, sink: OutputSink, task_name: str):
        self.sink = sink
        self.task_name = task_name
        self.start_time = time.monotonic()
        self.log = create_task_logger(task_name)
        self.sink.command_start(task_name)

    def file_created(self, path: str) -> None:
        self.log.debug(f"File created: {path}")
        self.sink.file_created(path)

    def card(self, title: str, body: Union[str, Mapping[str, Any]], style: str = "blue") -> None:
        self.sink.card(title, body, style=style)

    def progress(self, message: str) -> None:
        self.log.debug(message)
        self.sink.write(message, style="cyan")

    def info(self, message: str) -> None:
        self.log.info(message)
        self.sink.write(message)

    def warning(self, message: str) -> None:
        self.log.warning(message)
        self.sink.write(message, style="yellow")

    def error(self, message: str) -> None:
        self.log.error(message)
        self.sink.write(message, style="red")

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.start_time) * 1000

    def complete(self) -> float:
        duration = self.elapsed_ms
        self.sink.command_end(duration)
        return duration
