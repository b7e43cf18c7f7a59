"""Claude Code CLI configuration."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .base import AgentConfig

CLAUDE_MODELS = (
    "claude-sonnet-4-5-20250929",
    "claude-haiku-4-5-20251001",
    "claude-opus-4-1-20250805",
    "claude-sonnet-4-5",
    "claude-haiku-4-5",
    "claude-opus-4-1",
    "sonnet",
    "haiku",
    "opus",
)


@dataclass
class ClaudeConfig(AgentConfig):
    """Runs ``claude -p PROMPT`` with optional model and tool permissions."""

    tool = "claude"

    model: Optional[str] = None
    allow_all_tools: bool = False
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    extended_thinking: bool = False
    api_key: Optional[str] = None

    def build_command(self, prompt: str) -> List[str]:
        command = [self.tool, "-p", prompt]
        if self.allow_all_tools:
            command.append("--allow-all-tools")
        if self.model:
            command.extend(["--model", self.model])
        if self.temperature is not None:
            command.extend(["--temperature", str(self.temperature)])
        if self.max_tokens is not None:
            command.extend(["--max-tokens", str(self.max_tokens)])
        if self.extended_thinking:
            command.append("--thinking")
        return command

    def environment(self) -> Dict[str, str]:
        return {"ANTHROPIC_API_KEY": self.api_key} if self.api_key else {}
