#!/usr/bin/env python3
"""
Reference Decorators

Naming and indexing strategies applied to a draft reference before commit.
Each decorator returns a new reference and never sees the stored value, so a
pipeline is a plain left fold over the decorator list.
"""

from dataclasses import replace
from datetime import datetime, timezone
from functools import reduce
from typing import Iterable, Optional

from .types import IRefDecorator, StringRef


def format_timestamp(timestamp: datetime) -> str:
    """Format as compact ISO-8601 in UTC with millis, e.g. ``20251018T123045-678``."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    timestamp = timestamp.astimezone(timezone.utc)
    return f"{timestamp.strftime('%Y%m%dT%H%M%S')}-{timestamp.microsecond // 1000:03d}"


def apply_decorators(
    draft: StringRef, decorators: Optional[Iterable[IRefDecorator]]
) -> StringRef:
    """Fold decorators over a draft, left to right."""
    return reduce(lambda ref, decorator: decorator.decorate(ref), decorators or [], draft)


class TokenDecorator(IRefDecorator):
    """Assigns a human-chosen token to the reference."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("Token must be a non-empty string")
        self.token = token

    def decorate(self, ref: StringRef) -> StringRef:
        return replace(ref, token=self.token)

    def __repr__(self) -> str:
        return f"TokenDecorator({self.token!r})"


class FileNameDecorator(IRefDecorator):
    """Overwrites the location verbatim."""

    def __init__(self, file_name: str):
        self.file_name = file_name

    def decorate(self, ref: StringRef) -> StringRef:
        return replace(ref, location=self.file_name)

    def __repr__(self) -> str:
        return f"FileNameDecorator({self.file_name!r})"


class TimestampedFileNameDecorator(IRefDecorator):
    """Derives ``{timestamp}-{millis}-{token_or_id}.{extension}`` from the draft.

    Without an explicit name the draft's token is used, falling back to its
    id, so it composes after a TokenDecorator.
    """

    def __init__(self, token_or_id: Optional[str] = None, extension: str = "txt"):
        self.token_or_id = token_or_id
        self.extension = extension.lstrip(".")

    def decorate(self, ref: StringRef) -> StringRef:
        name = self.token_or_id or ref.label
        location = f"{format_timestamp(ref.timestamp)}-{name}.{self.extension}"
        return replace(ref, location=location)

    def __repr__(self) -> str:
        return (
            f"TimestampedFileNameDecorator({self.token_or_id!r}, "
            f"extension={self.extension!r})"
        )


class PrefixDecorator(IRefDecorator):
    """Prepends a fixed string to the current location."""

    def __init__(self, prefix: str):
        self.prefix = prefix

    def decorate(self, ref: StringRef) -> StringRef:
        return replace(ref, location=f"{self.prefix}{ref.location}")

    def __repr__(self) -> str:
        return f"PrefixDecorator({self.prefix!r})"
