"""
Error types for Open Tasks.

Soft misses (an absent reference or token) are represented as ``None`` by the
flow engine and never raised. Everything below propagates to the CLI
boundary, where it is reported and turned into a non-zero exit.
"""


class OpenTasksError(Exception):
    """Base exception for all Open Tasks errors"""

    pass


class ValidationError(OpenTasksError):
    """Raised when task arguments are malformed"""

    pass


class ConfigurationError(OpenTasksError):
    """Raised when configuration is invalid"""

    pass


class StorageWriteError(OpenTasksError):
    """Raised when a value cannot be persisted by a flow backend"""

    pass


class CommandExecutionError(OpenTasksError):
    """Raised when a command fails while executing"""

    pass


class ReferenceNotFoundError(CommandExecutionError):
    """Raised when a command needs a reference whose content is missing"""

    def __init__(self, label: str, kind: str = "Reference"):
        super().__init__(f"{kind} not found: {label}")
        self.label = label


class UnknownTaskError(OpenTasksError):
    """Raised when no task is registered under the requested name"""

    def __init__(self, name: str, available=None):
        available = sorted(available or [])
        message = f"Unknown task: {name}"
        if available:
            message += f"\n\nAvailable tasks: {', '.join(available)}"
        super().__init__(message)
        self.name = name
        self.available = available
