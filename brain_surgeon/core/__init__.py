"""
Core modules: lexing, parsing, linting and formatting of Brainfuck programs.
"""

from .lexer import BrainfuckLexer
from .parser import BrainfuckParser
from .linter import BrainfuckLinter
from .formatter import BrainfuckFormatter

__all__ = [
    'BrainfuckLexer',
    'BrainfuckParser',
    'BrainfuckLinter',
    'BrainfuckFormatter'
]
