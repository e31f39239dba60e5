"""
AST Node Module

This module defines the full-fidelity syntax tree produced by the parser.
The tree keeps whitespace and comment runs next to the instructions so it can
be re-serialized, and it records malformed bracket structure as data.

The node set is closed: Program, Command, Loop, Whitespace, Comment and
UnmatchedClose. Consumers dispatch with isinstance over these classes.
"""

from typing import Iterator, List, Optional, Tuple, Union
from dataclasses import dataclass
from enum import Enum

from .lexer import Token, TokenKind


class CommandKind(Enum):
    """The six non-bracket instructions."""
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_movement(self) -> bool:
        return self in (CommandKind.MOVE_LEFT, CommandKind.MOVE_RIGHT)

    @property
    def is_arithmetic(self) -> bool:
        return self in (CommandKind.INCREMENT, CommandKind.DECREMENT)

    @property
    def is_io(self) -> bool:
        return self in (CommandKind.INPUT, CommandKind.OUTPUT)

    @classmethod
    def from_token_kind(cls, kind: TokenKind) -> 'CommandKind':
        return cls(kind.value)


CANCELING_PAIRS = {
    (CommandKind.INCREMENT, CommandKind.DECREMENT),
    (CommandKind.DECREMENT, CommandKind.INCREMENT),
    (CommandKind.MOVE_LEFT, CommandKind.MOVE_RIGHT),
    (CommandKind.MOVE_RIGHT, CommandKind.MOVE_LEFT),
}


@dataclass(frozen=True)
class Command:
    """A single instruction."""
    command: CommandKind
    token: Token
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return (self.token,)


@dataclass(frozen=True)
class Whitespace:
    """One maximal run of spaces and newlines."""
    text: str
    tokens: Tuple[Token, ...]
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @property
    def has_newline(self) -> bool:
        return '\n' in self.text


@dataclass(frozen=True)
class Comment:
    """One maximal run of comment tokens on a single source line."""
    text: str
    tokens: Tuple[Token, ...]
    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True)
class UnmatchedClose:
    """A closing bracket with no open bracket to match."""
    token: Token
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return (self.token,)


@dataclass(frozen=True)
class Loop:
    """
    A bracketed loop.

    An unterminated loop (no matching close bracket before end of input) has
    close_token None and its end position equal to its start position.
    """
    body: Tuple['Statement', ...]
    open_token: Token
    close_token: Optional[Token]
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    is_terminated: bool
    is_empty: bool
    is_single_statement: bool

    @property
    def tokens(self) -> Tuple[Token, ...]:
        if self.close_token is None:
            return (self.open_token,)
        return (self.open_token, self.close_token)


Statement = Union[Command, Loop, Whitespace, Comment, UnmatchedClose]


@dataclass(frozen=True)
class Program:
    """Root of the tree. Positions are None when the program is empty."""
    statements: Tuple[Statement, ...]
    start_line: Optional[int] = None
    start_column: Optional[int] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return ()


Node = Union[Program, Statement]


def children(node: Node) -> Tuple[Statement, ...]:
    """Direct child statements of a node (empty for leaves)."""
    if isinstance(node, Program):
        return node.statements
    if isinstance(node, Loop):
        return node.body
    return ()


def walk(node: Node) -> Iterator[Tuple[Node, int]]:
    """
    Iterate over a tree in pre-order, yielding (node, depth) pairs.

    Uses an explicit stack so deeply nested loops do not hit the recursion
    limit.
    """
    stack: List[Tuple[Node, int]] = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        yield current, depth
        for child in reversed(children(current)):
            stack.append((child, depth + 1))


def attached_tokens(node: Node) -> List[Token]:
    """All tokens owned by a tree, in source order."""
    tokens = [token for current, _ in walk(node) for token in current.tokens]
    tokens.sort(key=lambda token: (token.start_line, token.start_column))
    return tokens


def count_commands(statements: Tuple[Statement, ...]) -> int:
    """Number of direct Command children in a statement sequence."""
    return sum(1 for statement in statements if isinstance(statement, Command))


def tree_to_string(node: Node) -> str:
    """Render a tree as an indented, human-readable dump."""
    lines = []
    for current, depth in walk(node):
        lines.append("    " * depth + _describe(current))
    return "\n".join(lines) + "\n"


def _describe(node: Node) -> str:
    if isinstance(node, Program):
        if node.end_line is None:
            return "Program"
        return f"Program [{node.start_line}:{node.start_column} - {node.end_line}:{node.end_column}]"

    if isinstance(node, Command):
        return f"Command: {node.command.name} [{node.start_line}:{node.start_column}]"

    if isinstance(node, Loop):
        span = f"{node.start_line}:{node.start_column}"
        if (node.end_line, node.end_column) != (node.start_line, node.start_column):
            span += f" - {node.end_line}:{node.end_column}"
        issues = []
        if not node.is_terminated:
            issues.append("UNTERMINATED")
        if node.is_empty:
            issues.append("EMPTY")
        if node.is_single_statement:
            issues.append("SINGLE_STATEMENT")
        if issues:
            span += " - " + ", ".join(issues)
        return f"Loop [{span}]"

    if isinstance(node, Whitespace):
        escaped = node.text.replace('\n', '\\n').replace('\t', '\\t').replace('\r', '\\r')
        return (f'Whitespace "{escaped}" '
                f'[{node.start_line}:{node.start_column} - {node.end_line}:{node.end_column}]')

    if isinstance(node, Comment):
        return (f'Comment "{node.text}" '
                f'[{node.start_line}:{node.start_column} - {node.end_line}:{node.end_column}]')

    if isinstance(node, UnmatchedClose):
        return f"UnmatchedClose ']' [{node.start_line}:{node.start_column}]"

    raise TypeError(f"Unknown node type: {type(node).__name__}")
