"""Logging and error reporting helpers."""

from .error_report import write_error_report
from .json_logger import JsonFormatter, configure_logging, create_task_logger

__all__ = ["JsonFormatter", "configure_logging", "create_task_logger", "write_error_report"]
