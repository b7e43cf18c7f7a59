"""``clean`` task: remove old per-run output directories."""

import asyncio
import shutil
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

from ..context import ExecutionContext
from ..errors import ValidationError
from ..output import TaskLogger
from .base import ReferenceHandle, TaskHandler, parse_task_args

DEFAULT_RETENTION_DAYS = 7


@dataclass
class CleanArgs:
    days: int = DEFAULT_RETENTION_DAYS


def directory_size(path: Path) -> int:
    return sum(f.stat().st_size for f in path.rglob("*") if f.is_file())


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


class CleanTask(TaskHandler):
    name = "clean"
    description = "Clean up old log directories with configurable retention"
    examples = ["ot clean", "ot clean --days 30 --verbose"]

    def validate(self, args: List[str]) -> CleanArgs:
        positionals, options = parse_task_args(args, value_options=["days"])
        if positionals:
            raise ValidationError(f"clean takes no positional arguments: {' '.join(positionals)}")
        if "days" not in options:
            return CleanArgs()
        try:
            days = int(options["days"])
        except ValueError:
            days = -1
        if days < 0:
            raise ValidationError("Invalid --days value. Must be a non-negative number.")
        return CleanArgs(days=days)

    async def run_task(
        self, parsed: CleanArgs, context: ExecutionContext, task_logger: TaskLogger
    ) -> ReferenceHandle:
        logs_dir = context.output_dir.parent
        now = datetime.now(timezone.utc)

        if not logs_dir.is_dir():
            message = "No logs directory found. Nothing to clean."
            task_logger.card("Clean Complete", message)
            return ReferenceHandle(id="clean-result", content=message, timestamp=now, token="clean")

        cutoff = time.time() - timedelta(days=parsed.days).total_seconds()
        task_logger.progress(f"Scanning {logs_dir}...")

        deleted: List[str] = []
        freed = 0
        for entry in sorted(p for p in logs_dir.iterdir() if p.is_dir()):
            if entry == context.output_dir or entry.stat().st_mtime >= cutoff:
                continue
            try:
                size = directory_size(entry)
                await asyncio.to_thread(shutil.rmtree, entry)
            except OSError as e:
                task_logger.warning(f"Could not remove {entry.name}: {e}")
                continue
            deleted.append(entry.name)
            freed += size
            task_logger.info(f"Deleted: {entry.name} ({format_size(size)})")

        noun = "directory" if len(deleted) == 1 else "directories"
        message = f"Cleaned {len(deleted)} old log {noun}, freed {format_size(freed)}"
        task_logger.card(
            "Clean Complete",
            {
                "Logs Directory": str(logs_dir),
                "Retention Days": parsed.days,
                "Directories Deleted": len(deleted),
                "Space Freed": format_size(freed),
            },
            style="green",
        )
        return ReferenceHandle(id="clean-result", content=message, timestamp=now, token="clean")
