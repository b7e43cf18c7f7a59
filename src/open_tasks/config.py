"""
Configuration management for open-tasks.

Settings are merged in order of precedence, lowest first: built-in defaults,
the user file ``~/.open-tasks/config.yaml``, the project file
``.open-tasks/config.yaml`` and ``OPEN_TASKS_*`` environment variables.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_DIR = ".open-tasks"
CONFIG_FILE = "config.yaml"
ENV_PREFIX = "OPEN_TASKS_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")
VERBOSITIES = ("quiet", "summary", "verbose")


@dataclass
class OpenTasksConfig:
    """open-tasks runtime configuration."""

    # Storage
    output_dir: str = ".open-tasks/logs"
    default_file_extension: str = "txt"

    # Task discovery
    custom_tasks_dirs: List[str] = field(
        default_factory=lambda: [".open-tasks/tasks", "~/.open-tasks/tasks"]
    )

    # Terminal output and logging
    colors: bool = True
    log_level: str = "WARNING"
    log_format: str = "text"
    default_verbosity: str = "summary"

    # Agent CLI definitions, see ``commands.agents.AgentDefinition``
    agents: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OpenTasksConfig":
        known = set(cls.field_names())
        for key in data:
            if key not in known:
                logger.debug(f"Ignoring unknown config key: {key}")
        return cls(**{key: value for key, value in data.items() if key in known})

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log_level '{self.log_level}', expected one of {', '.join(LOG_LEVELS)}")

        if self.log_format not in LOG_FORMATS:
            errors.append(f"Invalid log_format '{self.log_format}', expected text or json")

        if self.default_verbosity not in VERBOSITIES:
            errors.append(
                f"Invalid default_verbosity '{self.default_verbosity}', "
                f"expected one of {', '.join(VERBOSITIES)}"
            )

        if not self.output_dir:
            errors.append("output_dir must not be empty")

        if not self.default_file_extension or "/" in self.default_file_extension:
            errors.append(f"Invalid default_file_extension '{self.default_file_extension}'")

        if not isinstance(self.agents, list):
            errors.append("agents must be a list of agent definitions")
        else:
            for index, agent in enumerate(self.agents):
                if not isinstance(agent, Mapping) or not agent.get("name") or not agent.get("type"):
                    errors.append(f"Agent #{index + 1} must define 'name' and 'type'")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def read_config_file(path: Path) -> Dict[str, Any]:
    """Load one YAML config file; a missing file yields an empty mapping."""
    if not path.is_file():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded config from {path}")
    return data


def _coerce_env_value(key: str, value: str) -> Any:
    if key == "colors":
        return value.lower() in ("1", "true", "yes", "on")
    if key == "custom_tasks_dirs":
        return [part for part in value.split(os.pathsep) if part]
    return value


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``OPEN_TASKS_*`` overrides."""
    environ = os.environ if environ is None else environ
    known = set(OpenTasksConfig.field_names()) - {"agents"}
    overrides = {}

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        config_key = key[len(ENV_PREFIX) :].lower()
        if config_key in known:
            overrides[config_key] = _coerce_env_value(config_key, value)

    return overrides


def load_config(
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> OpenTasksConfig:
    """Merge defaults, user file, project file and environment."""
    cwd = Path(cwd) if cwd else Path.cwd()
    home = Path(home) if home else Path.home()

    merged: Dict[str, Any] = {}
    for path in (home / CONFIG_DIR / CONFIG_FILE, cwd / CONFIG_DIR / CONFIG_FILE):
        merged.update(read_config_file(path))
    merged.update(config_from_env(environ))

    return OpenTasksConfig.from_dict(merged)
