"""Built-in commands that tasks compose through ``IFlow.run``."""

from .agents import (
    AgentCommand,
    AgentConfig,
    AgentDefinition,
    ClaudeConfig,
    CodexConfig,
    GeminiConfig,
    LlmConfig,
    available_agent_configs,
    load_agent_config,
    load_agent_config_by_name,
)
from .core import JoinCommand, ReplaceCommand, SetCommand
from .files import ReadCommand, WriteCommand
from .prompt import PromptCommand
from .question import QuestionCommand
from .shell import ShellCommand
from .transforms import (
    JsonTransformCommand,
    MatchCommand,
    TemplateCommand,
    TextTransformCommand,
)

__all__ = [
    "AgentCommand",
    "AgentConfig",
    "AgentDefinition",
    "ClaudeConfig",
    "CodexConfig",
    "GeminiConfig",
    "JoinCommand",
    "JsonTransformCommand",
    "LlmConfig",
    "MatchCommand",
    "PromptCommand",
    "QuestionCommand",
    "ReadCommand",
    "ReplaceCommand",
    "SetCommand",
    "ShellCommand",
    "TemplateCommand",
    "TextTransformCommand",
    "WriteCommand",
    "available_agent_configs",
    "load_agent_config",
    "load_agent_config_by_name",
]
