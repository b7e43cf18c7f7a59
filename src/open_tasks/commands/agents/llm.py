"""Configuration for Simon Willison's ``llm`` CLI."""

from dataclasses import dataclass
from typing import List, Optional

from .base import AgentConfig


@dataclass
class LlmConfig(AgentConfig):
    """Runs ``llm PROMPT`` with optional model, system prompt and temperature."""

    tool = "llm"

    model: Optional[str] = None
    system: Optional[str] = None
    temperature: Optional[float] = None

    def build_command(self, prompt: str) -> List[str]:
        command = [self.tool, prompt]
        if self.model:
            command.extend(["-m", self.model])
        if self.system:
            command.extend(["-s", self.system])
        if self.temperature is not None:
            command.extend(["-o", "temperature", str(self.temperature)])
        return command
