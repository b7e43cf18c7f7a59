"""Per-invocation execution context for task handlers."""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from rich.console import Console

from .config import OpenTasksConfig
from .output import OutputSink, Verbosity
from .workflow import BaseFlow, DirectoryFlow, InMemoryFlow, format_timestamp


@dataclass
class ExecutionContext:
    """Everything a task handler needs for one run."""

    cwd: Path
    output_dir: Path
    flow: BaseFlow
    sink: OutputSink
    config: Dict[str, Any]
    verbosity: Verbosity
    dry_run: bool = False


class ContextBuilder:
    """Builds an :class:`ExecutionContext` for a task run.

    Outputs of each run go to ``{cwd}/{output_dir}/{timestamp}-{task}`` so
    runs never overwrite each other.
    """

    def __init__(
        self,
        cwd: Path,
        config: Union[OpenTasksConfig, Mapping[str, Any], None] = None,
        console: Optional[Console] = None,
    ):
        self.cwd = Path(cwd)
        if isinstance(config, OpenTasksConfig):
            self.config = config.to_dict()
        else:
            self.config = {**OpenTasksConfig().to_dict(), **dict(config or {})}
        self.console = console

    def run_directory(self, task_name: str, output_dir: Optional[Union[str, Path]] = None) -> Path:
        base = Path(output_dir or self.config["output_dir"]).expanduser()
        if not base.is_absolute():
            base = self.cwd / base
        stamp = format_timestamp(datetime.now(timezone.utc))
        return base / f"{stamp}-{task_name}"

    def build(
        self,
        task_name: str,
        output_dir: Optional[Union[str, Path]] = None,
        verbosity: Union[Verbosity, str] = "summary",
        dry_run: bool = False,
        in_memory: bool = False,
    ) -> ExecutionContext:
        level = Verbosity.parse(verbosity)
        run_dir = self.run_directory(task_name, output_dir)
        runtime_config = {**self.config, "verbosity": level.label, "dry_run": dry_run}

        if in_memory:
            flow: BaseFlow = InMemoryFlow(cwd=self.cwd, config=runtime_config)
        else:
            flow = DirectoryFlow(run_dir, cwd=self.cwd, config=runtime_config)

        console = self.console or Console(no_color=not runtime_config.get("colors", True))
        return ExecutionContext(
            cwd=self.cwd,
            output_dir=run_dir,
            flow=flow,
            sink=OutputSink(level, console=console),
            config=runtime_config,
            verbosity=level,
            dry_run=dry_run,
        )
