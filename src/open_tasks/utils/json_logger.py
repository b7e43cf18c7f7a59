"""
JSON structured logging utilities for open-tasks.
"""

import json
import logging
import sys
import time
from typing import Any, Dict, Optional, Union

CONTEXT_FIELDS = ["task", "ref_id", "token", "location", "previous_id", "exit_code"]
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs logs as structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""

        payload: Dict[str, Any] = {
            "ts": int(time.time() * 1000),  # Unix timestamp in milliseconds
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Task and reference context passed through ``extra=``
        for attr in CONTEXT_FIELDS:
            value = getattr(record, attr, None)
            if value is not None:
                payload[attr] = value

        return json.dumps(payload, ensure_ascii=False, default=str)


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(level: Union[int, str] = logging.WARNING, json_format: bool = False) -> None:
    """Configure the root logger to write to stderr.

    stdout is left to the task output so that it can be piped.
    """

    resolved = _coerce_level(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(resolved)


class TaskLoggerAdapter(logging.LoggerAdapter):
    """Adds the running task's name to every record."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("task", self.extra["task"])
        kwargs["extra"] = extra
        return msg, kwargs


def create_task_logger(task: str, name: Optional[str] = None) -> TaskLoggerAdapter:
    """Create a logger with task context."""

    return TaskLoggerAdapter(logging.getLogger(name or f"open_tasks.task.{task}"), {"task": task})
