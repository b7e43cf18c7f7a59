"""Process execution utilities for shell and AI CLI commands."""

import asyncio
import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Result of a process execution."""

    code: int
    stdout: str
    stderr: str
    ok: bool = False
    details: str = ""

    def __post_init__(self):
        self.ok = self.code == 0
        if not self.details:
            self.details = self.stderr if self.stderr else "Process completed"


def render_command(command: Union[str, List[str]]) -> str:
    """Render a command the way it would be typed in a shell."""
    if isinstance(command, str):
        return command
    return " ".join(shlex.quote(part) for part in command)


class ProcessRunner:
    """Execute external processes with proper error handling and dry-run support."""

    def __init__(self, dry_run: bool = False):
        """Initialize ProcessRunner.

        Args:
            dry_run: If True, commands will be logged but not executed
        """
        self.dry_run = dry_run
        self.logger = logging.getLogger(__name__)

    def run(
        self,
        command: Union[str, List[str]],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        **kwargs,
    ) -> ProcessResult:
        """Run a command and return the result.

        Args:
            command: Command to execute (string runs through the shell)
            cwd: Working directory for the command
            env: Extra environment variables layered over the current ones
            timeout: Timeout in seconds
            **kwargs: Additional arguments for subprocess.run

        Returns:
            ProcessResult with execution details
        """
        cmd_str = render_command(command)
        if isinstance(command, str):
            kwargs.setdefault("shell", True)

        self.logger.info(f"{'[DRY RUN] ' if self.dry_run else ''}Running: {cmd_str}")

        if self.dry_run:
            return ProcessResult(
                code=0,
                stdout=f"[DRY RUN] Would execute: {cmd_str}",
                stderr="",
                details="Dry run - command not executed",
            )

        process_env = None
        if env:
            process_env = {**os.environ, **env}

        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                env=process_env,
                timeout=timeout,
                capture_output=True,
                text=True,
                stdin=subprocess.DEVNULL,
                **kwargs,
            )

            return ProcessResult(
                code=result.returncode,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
                details=result.stderr if result.returncode != 0 else "Success",
            )

        except subprocess.TimeoutExpired as e:
            return ProcessResult(
                code=-1,
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr),
                details=f"Command timed out after {timeout} seconds",
            )

        except FileNotFoundError as e:
            return ProcessResult(
                code=127,
                stdout="",
                stderr=str(e),
                details=f"Command not found: {cmd_str.split(' ', 1)[0]}",
            )

        except OSError as e:
            return ProcessResult(
                code=-1,
                stdout="",
                stderr=str(e),
                details=f"Process execution failed: {str(e)}",
            )

    async def run_async(
        self,
        command: Union[str, List[str]],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        **kwargs,
    ) -> ProcessResult:
        """Run a command in a worker thread so the event loop is not blocked."""
        return await asyncio.to_thread(
            self.run, command, cwd=cwd, env=env, timeout=timeout, **kwargs
        )

    def check_tool_available(self, tool_name: str) -> bool:
        """Check if a tool is available in PATH."""
        return shutil.which(tool_name) is not None


def _decode(output: Union[bytes, str, None]) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
