"""Build agent configurations from ``agents:`` entries in the config file."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ...errors import ConfigurationError
from .base import AgentConfig
from .claude import ClaudeConfig
from .codex import CodexConfig
from .gemini import GeminiConfig
from .llm import LlmConfig


class AgentType(str, Enum):
    claude = "claude"
    gemini = "gemini"
    codex = "codex"
    llm = "llm"


class AgentDefinition(BaseModel):
    name: str = Field(..., min_length=1)
    type: AgentType
    model: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    working_directory: Optional[str] = None
    options: Dict[str, Any] = Field(default_factory=dict)


AGENT_TYPES = {
    AgentType.claude: ClaudeConfig,
    AgentType.gemini: GeminiConfig,
    AgentType.codex: CodexConfig,
    AgentType.llm: LlmConfig,
}


def _parse_definition(definition: Union[AgentDefinition, Mapping[str, Any]]) -> AgentDefinition:
    if isinstance(definition, AgentDefinition):
        return definition
    try:
        return AgentDefinition.model_validate(dict(definition))
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid agent definition: {e}") from e


def load_agent_config(definition: Union[AgentDefinition, Mapping[str, Any]]) -> AgentConfig:
    """Instantiate the agent config described by one definition.

    ``options`` are passed through as keyword arguments of the config class,
    so an option the tool does not understand is a configuration error.
    """
    definition = _parse_definition(definition)
    config_class = AGENT_TYPES[definition.type]

    kwargs: Dict[str, Any] = dict(definition.options)
    if definition.model:
        kwargs["model"] = definition.model
    if definition.timeout:
        kwargs["timeout"] = definition.timeout
    if definition.working_directory:
        kwargs["working_directory"] = definition.working_directory

    try:
        return config_class(**kwargs)
    except TypeError as e:
        raise ConfigurationError(
            f"Invalid options for {definition.type.value} agent '{definition.name}': {e}"
        ) from e


def available_agent_configs(config: Mapping[str, Any]) -> List[str]:
    """Names of the agents declared in ``config['agents']``."""
    names = []
    for entry in config.get("agents") or []:
        name = entry.name if isinstance(entry, AgentDefinition) else entry.get("name")
        if name:
            names.append(name)
    return names


def load_agent_config_by_name(config: Mapping[str, Any], name: str) -> AgentConfig:
    agents = config.get("agents")
    if not agents:
        raise ConfigurationError("No agent configurations found in config")

    for entry in agents:
        entry_name = entry.name if isinstance(entry, AgentDefinition) else entry.get("name")
        if entry_name == name:
            return load_agent_config(entry)

    raise ConfigurationError(
        f"Agent configuration '{name}' not found. "
        f"Available agents: {', '.join(available_agent_configs(config)) or 'none'}"
    )
