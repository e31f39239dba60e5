"""
Error Types Module

Exceptions raised at the system boundary. Malformed Brainfuck source is never
an error: the parser, linter and formatter represent it as tree data.
"""

from typing import Optional


class BrainSurgeonError(Exception):
    """Base class for every error the tool reports to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IOFailure(BrainSurgeonError):
    """A file could not be read, written or backed up."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

    def __repr__(self):
        return f"IOFailure(path='{self.path}', message='{self.message}')"


class ConfigError(BrainSurgeonError):
    """A formatter configuration is malformed."""
