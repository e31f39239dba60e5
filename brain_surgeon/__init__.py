"""
brain-surgeon

Lexer, parser, linter and formatter for Brainfuck source files.
"""

__version__ = "1.0.0"

from .core.lexer import BrainfuckLexer, tokenize
from .core.parser import BrainfuckParser, parse, parse_source
from .core.linter import BrainfuckLinter, lint_tree, lint_to_json
from .core.formatter import BrainfuckFormatter, format_tree, format_source
from .core.config import FormatterConfig

__all__ = [
    'BrainfuckLexer',
    'BrainfuckParser',
    'BrainfuckLinter',
    'BrainfuckFormatter',
    'FormatterConfig',
    'tokenize',
    'parse',
    'parse_source',
    'lint_tree',
    'lint_to_json',
    'format_tree',
    'format_source',
]
