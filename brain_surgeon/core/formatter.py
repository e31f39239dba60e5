"""
Formatter Module

This module re-serializes a parsed Brainfuck program into canonical,
style-configurable text. Instructions are grouped by category, long groups
can be tallied in fives, loops are indented per nesting level and comments
are normalized to a common prefix.
"""

from typing import List, Optional, Sequence
import logging

from .config import FormatterConfig
from .nodes import (
    Command, CommandKind, Comment, Loop, Program, Statement,
    UnmatchedClose, Whitespace,
)
from .parser import parse_source

logger = logging.getLogger(__name__)

TALLY_SIZE = 5


class _Sequence:
    """Formatting state for one statement sequence (program or loop body)."""

    def __init__(self, statements: Sequence[Statement], depth: int, loop: Optional[Loop] = None):
        self.statements = statements
        self.index = 0
        self.depth = depth
        self.loop = loop
        self.line = ""                                # content of the current line, no indent
        self.group = ""                               # pending command group
        self.last_command: Optional[CommandKind] = None
        self.pending_comments: List[str] = []

    def next_statement(self) -> Optional[Statement]:
        if self.index >= len(self.statements):
            return None
        statement = self.statements[self.index]
        self.index += 1
        return statement


def same_group(previous: CommandKind, current: CommandKind) -> bool:
    """Whether two adjacent commands belong to the same command group."""
    if previous.is_movement and current.is_movement:
        return True
    if previous.is_arithmetic and current.is_arithmetic:
        return True
    return previous is current


class BrainfuckFormatter:
    """
    Formatter for Brainfuck syntax trees.

    This class provides:
    - Grouping of movement and increment/decrement runs
    - Tally-mark spacing for long command groups
    - Newline placement around movement groups, I/O and loops
    - Comment prefix normalization

    All buffers are local to a format() call.
    """

    def __init__(self, config: Optional[FormatterConfig] = None):
        """
        Initialize the formatter.

        Args:
            config: Style options, defaults to FormatterConfig()
        """
        self.config = config or FormatterConfig()

    def format(self, program: Program) -> str:
        """
        Format a program tree.

        Args:
            program: Parsed program, possibly malformed

        Returns:
            Formatted text, one line per output line with trailing newlines
        """
        lines: List[str] = []
        stack = [_Sequence(program.statements, 0)]

        while stack:
            frame = stack[-1]
            statement = frame.next_statement()

            if statement is None:
                self._flush_comment(frame, lines)
                self._flush_line(frame, lines)
                stack.pop()
                if frame.loop is not None and frame.loop.is_terminated:
                    self._emit(lines, frame.depth - 1, "]")
                continue

            if isinstance(statement, Command):
                self._add_command(frame, lines, statement.command)

            elif isinstance(statement, Loop):
                self._open_loop(frame, lines)
                stack.append(_Sequence(statement.body, frame.depth + 1, statement))

            elif isinstance(statement, Comment):
                frame.pending_comments.append(statement.text)

            elif isinstance(statement, UnmatchedClose):
                self._flush_comment(frame, lines)
                self._flush_line(frame, lines)
                self._emit(lines, frame.depth, "]")

            elif isinstance(statement, Whitespace):
                continue

            else:
                raise TypeError(f"Unknown statement type: {type(statement).__name__}")

        logger.debug(f"Formatted program into {len(lines)} lines")
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def _add_command(self, frame: _Sequence, lines: List[str], command: CommandKind):
        self._flush_comment(frame, lines)

        if frame.group and not same_group(frame.last_command, command):
            self._flush_group(frame)

        if command.is_movement and self.config.move_on_newline and not frame.group and frame.line:
            self._flush_line(frame, lines)

        frame.group += command.symbol
        frame.last_command = command

        if command.is_io and self.config.end_line_at_io:
            self._flush_line(frame, lines)

    def _open_loop(self, frame: _Sequence, lines: List[str]):
        self._flush_comment(frame, lines)

        if self.config.loop_on_newline:
            self._flush_line(frame, lines)
            self._emit(lines, frame.depth, "[")
            return

        # The bracket trails whatever is already on the line
        self._flush_group(frame)
        if frame.line and self.config.space_between_groups:
            frame.line += " "
        frame.line += "["
        self._flush_line(frame, lines)

    def _flush_group(self, frame: _Sequence):
        if not frame.group:
            return
        if frame.line and self.config.space_between_groups:
            frame.line += " "
        frame.line += self.render_group(frame.group)
        frame.group = ""

    def _flush_line(self, frame: _Sequence, lines: List[str]):
        self._flush_group(frame)
        if frame.line:
            self._emit(lines, frame.depth, frame.line)
        frame.line = ""

    def _flush_comment(self, frame: _Sequence, lines: List[str]):
        if not frame.pending_comments:
            return

        text = self.prefix_comment(" ".join(frame.pending_comments))
        frame.pending_comments = []

        self._flush_group(frame)
        if not frame.line:
            self._emit(lines, frame.depth, text)
        elif self.config.comment_on_newline:
            self._flush_line(frame, lines)
            self._emit(lines, frame.depth, text)
        else:
            frame.line += " " + text
            self._flush_line(frame, lines)

    def _emit(self, lines: List[str], depth: int, text: str):
        lines.append(self.config.indent_unit() * depth + text)

    def render_group(self, group: str) -> str:
        """Render a command group, inserting tally spaces when enabled."""
        if not self.config.tally_commands or len(group) <= TALLY_SIZE:
            return group
        return " ".join(group[i:i + TALLY_SIZE] for i in range(0, len(group), TALLY_SIZE))

    def prefix_comment(self, text: str) -> str:
        """Prepend the comment prefix unless the text already starts with it."""
        prefix = self.config.comment_prefix
        if text.startswith(prefix):
            return text
        return prefix + text


def format_tree(program: Program, config: Optional[FormatterConfig] = None) -> str:
    """Format a program tree with the given configuration."""
    return BrainfuckFormatter(config).format(program)


def format_source(source: str, config: Optional[FormatterConfig] = None) -> str:
    """Tokenize, parse and format source text."""
    return format_tree(parse_source(source), config)
