"""External process integrations."""

from .process import ProcessResult, ProcessRunner, render_command

__all__ = ["ProcessResult", "ProcessRunner", "render_command"]
