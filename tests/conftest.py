"""
Shared test configuration for open-tasks.

Provides:
- Flow fixtures for both storage backends
- A stubbed ProcessRunner so no external tool is ever spawned
- Console and execution context fixtures with captured output
"""

import io
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from rich.console import Console

from open_tasks.config import OpenTasksConfig
from open_tasks.context import ContextBuilder
from open_tasks.integrations import ProcessResult, ProcessRunner
from open_tasks.workflow import DirectoryFlow, InMemoryFlow


class StubRunner(ProcessRunner):
    """ProcessRunner that records calls and returns a canned result."""

    def __init__(
        self,
        result: Optional[ProcessResult] = None,
        dry_run: bool = False,
        available: bool = True,
    ):
        super().__init__(dry_run=dry_run)
        self.available = available
        self.result = result or ProcessResult(code=0, stdout="stub output\n", stderr="")
        self.calls: List[Dict[str, Any]] = []

    def run(self, command, cwd=None, env=None, timeout=None, **kwargs) -> ProcessResult:
        self.calls.append(
            {"command": command, "cwd": cwd, "env": env, "timeout": timeout, "kwargs": kwargs}
        )
        return self.result

    def check_tool_available(self, tool_name: str) -> bool:
        return self.available


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary project directory."""
    return tmp_path


@pytest.fixture
def memory_flow(temp_dir):
    return InMemoryFlow(cwd=temp_dir)


@pytest.fixture
def directory_flow(temp_dir):
    return DirectoryFlow(temp_dir / "outputs", cwd=temp_dir)


@pytest.fixture(params=["memory", "directory"])
def flow(request, temp_dir):
    """Every flow backend, so engine properties are checked on both."""
    if request.param == "memory":
        return InMemoryFlow(cwd=temp_dir)
    return DirectoryFlow(temp_dir / "outputs", cwd=temp_dir)


@pytest.fixture
def stub_runner():
    return StubRunner()


@pytest.fixture
def console():
    """Console writing to an in-memory buffer, read back via ``console.file``."""
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def test_config():
    return OpenTasksConfig()


@pytest.fixture
def context_builder(temp_dir, test_config, console):
    return ContextBuilder(temp_dir, test_config, console=console)


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def runner_factory():
    """Build a StubRunner with a specific canned result."""
    return StubRunner
