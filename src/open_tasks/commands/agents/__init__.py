"""Agent CLI tool configurations and the command that runs them."""

from .base import AgentConfig
from .claude import CLAUDE_MODELS, ClaudeConfig
from .codex import CodexConfig
from .command import AgentCommand
from .config_loader import (
    AgentDefinition,
    AgentType,
    available_agent_configs,
    load_agent_config,
    load_agent_config_by_name,
)
from .gemini import GeminiConfig
from .llm import LlmConfig

__all__ = [
    "AgentConfig",
    "AgentCommand",
    "AgentDefinition",
    "AgentType",
    "CLAUDE_MODELS",
    "ClaudeConfig",
    "CodexConfig",
    "GeminiConfig",
    "LlmConfig",
    "available_agent_configs",
    "load_agent_config",
    "load_agent_config_by_name",
]
