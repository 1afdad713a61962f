"""
errors.py

Responsibility: the single exception hierarchy raised by addongen.

The CLI catches `AddOnGenError` and turns it into a non-zero exit status;
library code raises the most specific subclass and never swallows it.
"""

from __future__ import annotations


class AddOnGenError(RuntimeError):
    pass


class ConfigError(AddOnGenError, ValueError):
    pass


class DescriptionError(AddOnGenError, ValueError):
    pass


class GenerationError(AddOnGenError):
    pass


class NamingConflictError(AddOnGenError):
    """Two distinct source names render to the same target identifier."""

    def __init__(self, first: str, second: str, identifier: str, scope: str) -> None:
        super().__init__(f"Names {first!r} and {second!r} both map to {identifier!r} in {scope}")
        self.first = first
        self.second = second
        self.identifier = identifier
        self.scope = scope


class WriteError(AddOnGenError):
    pass


class GitHubError(AddOnGenError):
    pass
