"""
Open Tasks Workflow Engine

Content-addressable, decorator-driven naming and storage for command outputs.
"""

from .base import BaseFlow, disambiguate_location, serialize_value
from .decorators import (
    FileNameDecorator,
    PrefixDecorator,
    TimestampedFileNameDecorator,
    TokenDecorator,
    apply_decorators,
    format_timestamp,
)
from .directory import DirectoryFlow, validate_output_path
from .memory import InMemoryFlow
from .token_index import TokenIndex
from .types import CommandOutput, ICommand, IFlow, IRefDecorator, StringRef

__all__ = [
    "BaseFlow",
    "CommandOutput",
    "DirectoryFlow",
    "FileNameDecorator",
    "ICommand",
    "IFlow",
    "IRefDecorator",
    "InMemoryFlow",
    "PrefixDecorator",
    "StringRef",
    "TimestampedFileNameDecorator",
    "TokenDecorator",
    "TokenIndex",
    "apply_decorators",
    "format_timestamp",
    "disambiguate_location",
    "serialize_value",
    "validate_output_path",
]
