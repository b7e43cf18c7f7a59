"""OpenAI Codex CLI configuration."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .base import AgentConfig


@dataclass
class CodexConfig(AgentConfig):
    """Runs ``codex exec PROMPT`` non-interactively."""

    tool = "codex"

    model: Optional[str] = None
    full_auto: bool = False
    api_key: Optional[str] = None

    def build_command(self, prompt: str) -> List[str]:
        command = [self.tool, "exec", prompt]
        if self.model:
            command.extend(["--model", self.model])
        if self.full_auto:
            command.append("--full-auto")
        return command

    def environment(self) -> Dict[str, str]:
        return {"OPENAI_API_KEY": self.api_key} if self.api_key else {}
