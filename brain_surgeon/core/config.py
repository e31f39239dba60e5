"""
Formatter Configuration Module

Style options for the formatter and loading them from a JSON file.
"""

import json
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict
import logging

from .errors import ConfigError, IOFailure

logger = logging.getLogger(__name__)


@dataclass
class FormatterConfig:
    """Formatting style options."""
    space_between_groups: bool = True   # space before a group when the line has content
    comment_prefix: str = "#"           # prepended to comments that lack it
    comment_on_newline: bool = False    # comments always get their own line
    loop_on_newline: bool = True        # '[' on its own line instead of trailing content
    move_on_newline: bool = True        # movement groups start a new line
    end_line_at_io: bool = True         # end the line after '.' and ','
    tally_commands: bool = True         # space every five characters in long groups
    tab_indent: bool = False
    indent_spaces: int = 4

    def indent_unit(self) -> str:
        """Indentation for one nesting level."""
        if self.tab_indent:
            return "\t"
        return " " * self.indent_spaces

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FormatterConfig':
        """
        Build a configuration from plain data, validating keys and types.

        Args:
            data: Mapping of option name to value; missing options keep defaults

        Returns:
            FormatterConfig instance

        Raises:
            ConfigError: On unknown options or values of the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be an object, got {type(data).__name__}")

        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown configuration option(s): {', '.join(unknown)}")

        defaults = cls()
        for name, value in data.items():
            expected = type(getattr(defaults, name))
            # bool is a subclass of int, so check it explicitly
            if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
                raise ConfigError(f"Option '{name}' must be an integer")
            if not isinstance(value, expected):
                raise ConfigError(f"Option '{name}' must be of type {expected.__name__}")

        if data.get('indent_spaces', 0) < 0:
            raise ConfigError("Option 'indent_spaces' must not be negative")

        return cls(**data)


def load_config(path: str) -> FormatterConfig:
    """
    Load a formatter configuration from a JSON file.

    Raises:
        IOFailure: If the file cannot be read
        ConfigError: If the content is not a valid configuration
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        logger.error(f"Failed to read config {path}: {e}")
        raise IOFailure(f"Cannot read config file: {path} ({e.strerror or e})", path) from e

    try:
        data = json.loads(content)
    except ValueError as e:
        raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e

    config = FormatterConfig.from_dict(data)
    logger.debug(f"Loaded formatter config from {path}: {config}")
    return config
