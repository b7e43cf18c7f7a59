"""Base configuration shared by every agent CLI tool."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional


@dataclass
class AgentConfig(ABC):
    """How to invoke one agent CLI tool.

    Subclasses declare the executable in ``tool`` and turn a prompt into a
    full argument vector in ``build_command``.
    """

    tool: ClassVar[str] = ""

    working_directory: Optional[str] = None
    timeout: Optional[float] = None
    dry_run: bool = False

    @abstractmethod
    def build_command(self, prompt: str) -> List[str]:
        """Return the argument vector, executable first."""

    def environment(self) -> Dict[str, str]:
        """Extra environment variables for the tool process."""
        return {}
