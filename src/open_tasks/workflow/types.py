#!/usr/bin/env python3
"""
Workflow Types

Core contracts of the workflow engine: the committed reference record, the
decorator and command interfaces, and the flow interface every command and
task handler talks to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class StringRef:
    """Identity and location record for one committed value.

    The same type doubles as the draft reference threaded through the
    decorator chain. Instances are frozen; decorators return new ones.
    """

    id: str
    location: str
    timestamp: datetime
    token: Optional[str] = None

    @property
    def label(self) -> str:
        """Human-facing name: the token when present, otherwise the id."""
        return self.token or self.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "token": self.token,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
        }


class IRefDecorator(ABC):
    """Pure transform applied to a draft reference before it is committed."""

    @abstractmethod
    def decorate(self, ref: StringRef) -> StringRef:
        """Return a new reference; must not touch the stored value."""
        pass


# Ordered (value, decorators) pairs produced by a command
CommandOutput = List[Tuple[Any, List[IRefDecorator]]]


class ICommand(ABC):
    """A reusable unit of work composed with others through a flow.

    What to do is configured in ``__init__``; ``execute`` only receives the
    shared flow and ad hoc arguments.
    """

    @abstractmethod
    async def execute(self, context: "IFlow", args: List[Any]) -> CommandOutput:
        """Run the command and return the values to commit, in order."""
        pass


class IFlow(ABC):
    """Storage backend abstraction shared by all commands in a task."""

    cwd: Path
    config: Dict[str, Any]

    @abstractmethod
    async def set(
        self, value: Any, decorators: Optional[List[IRefDecorator]] = None
    ) -> StringRef:
        """Commit a value through the decorator pipeline."""
        pass

    @abstractmethod
    async def get(self, ref: StringRef) -> Optional[str]:
        """Return the committed content of ``ref`` or None when it is missing."""
        pass

    @abstractmethod
    async def run(
        self, command: ICommand, args: Optional[List[Any]] = None
    ) -> List[StringRef]:
        """Execute a command and commit each of its outputs in order."""
        pass

    @abstractmethod
    def token(self, name: str) -> Optional[str]:
        """Return the content most recently committed under ``name``."""
        pass

    @abstractmethod
    def lookup(self, id_or_token: str) -> Optional[StringRef]:
        """Find a committed reference by id, then by token."""
        pass

    @abstractmethod
    def list(self) -> List[StringRef]:
        """Return every committed reference in commit order."""
        pass
