"""
Lexer Module

This module turns raw Brainfuck source into an ordered token stream that
covers every character of the input, including whitespace, newlines and
comment text.
"""

from typing import List
from dataclasses import dataclass
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    """Token kinds produced by the lexer."""
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    LOOP_START = "["
    LOOP_END = "]"
    WHITESPACE = "whitespace"
    NEWLINE = "newline"
    COMMENT = "comment"


INSTRUCTION_KINDS = {
    '>': TokenKind.MOVE_RIGHT,
    '<': TokenKind.MOVE_LEFT,
    '+': TokenKind.INCREMENT,
    '-': TokenKind.DECREMENT,
    '.': TokenKind.OUTPUT,
    ',': TokenKind.INPUT,
    '[': TokenKind.LOOP_START,
    ']': TokenKind.LOOP_END,
}

WHITESPACE_CHARS = frozenset(' \t\r')


@dataclass(frozen=True)
class Token:
    """A lexical unit with its inclusive source span (1-indexed)."""
    kind: TokenKind
    is_valid: bool
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    text: str

    @property
    def is_trivia(self) -> bool:
        return self.kind in (TokenKind.WHITESPACE, TokenKind.NEWLINE)


class BrainfuckLexer:
    """
    Lexer for Brainfuck source text.

    The produced stream has these guarantees:
    - every input character belongs to exactly one token
    - token positions are strictly increasing
    - a newline token resets column numbering to 1 on the following line
    """

    def tokenize(self, source: str) -> List[Token]:
        """
        Split source text into tokens.

        Args:
            source: Raw program text

        Returns:
            Ordered list of tokens covering the whole input
        """
        tokens: List[Token] = []
        index = 0
        line = 1
        column = 1
        length = len(source)

        while index < length:
            char = source[index]

            if char in INSTRUCTION_KINDS:
                tokens.append(Token(INSTRUCTION_KINDS[char], True, line, column, line, column, char))
                index += 1
                column += 1

            elif char == '\n':
                tokens.append(Token(TokenKind.NEWLINE, False, line, column, line, column, char))
                index += 1
                line += 1
                column = 1

            elif char in WHITESPACE_CHARS:
                tokens.append(Token(TokenKind.WHITESPACE, False, line, column, line, column, char))
                index += 1
                column += 1

            else:
                # Everything up to the next instruction or whitespace is comment text
                start = index
                while index < length and not _is_boundary(source[index]):
                    index += 1
                text = source[start:index]
                tokens.append(Token(
                    TokenKind.COMMENT, False,
                    line, column, line, column + len(text) - 1,
                    text
                ))
                column += len(text)

        logger.debug(f"Tokenized {length} characters into {len(tokens)} tokens")
        return tokens


def _is_boundary(char: str) -> bool:
    return char in INSTRUCTION_KINDS or char in WHITESPACE_CHARS or char == '\n'


def tokenize(source: str) -> List[Token]:
    """Tokenize source text with a fresh lexer."""
    return BrainfuckLexer().tokenize(source)
