"""Gemini CLI configuration."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .base import AgentConfig


@dataclass
class GeminiConfig(AgentConfig):
    """Runs ``gemini -p PROMPT`` followed by any context files."""

    tool = "gemini"

    model: Optional[str] = None
    context_files: List[str] = field(default_factory=list)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    enable_search: bool = False
    api_key: Optional[str] = None

    def build_command(self, prompt: str) -> List[str]:
        command = [self.tool, "-p", prompt]
        if self.model:
            command.extend(["--model", self.model])
        command.extend(self.context_files)
        if self.temperature is not None:
            command.extend(["--temperature", str(self.temperature)])
        if self.max_tokens is not None:
            command.extend(["--max-tokens", str(self.max_tokens)])
        if self.enable_search:
            command.append("--search")
        return command

    def environment(self) -> Dict[str, str]:
        return {"GEMINI_API_KEY": self.api_key} if self.api_key else {}
