"""
Parser Module

This module builds the layout-preserving syntax tree from a token stream.
Parsing is total: unbalanced brackets become an unterminated Loop or an
UnmatchedClose node instead of an exception.
"""

from typing import List, Optional, Sequence
import logging

from .lexer import Token, TokenKind, tokenize
from .nodes import (
    Command, CommandKind, Comment, Loop, Program, Statement,
    UnmatchedClose, Whitespace, count_commands,
)

logger = logging.getLogger(__name__)


class _ParseState:
    """Cursor over one token sequence. Created fresh for every parse call."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tokens
        self.position = 0

    def peek(self) -> Optional[Token]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.position]
        self.position += 1
        return token


class _OpenLoop:
    """A loop whose closing bracket has not been seen yet."""

    def __init__(self, open_token: Token):
        self.open_token = open_token
        self.body: List[Statement] = []

    def close(self, close_token: Optional[Token]) -> Loop:
        body = tuple(self.body)
        command_count = count_commands(body)
        start = self.open_token
        if close_token is None:
            end_line, end_column = start.start_line, start.start_column
        else:
            end_line, end_column = close_token.end_line, close_token.end_column
        return Loop(
            body=body,
            open_token=start,
            close_token=close_token,
            start_line=start.start_line,
            start_column=start.start_column,
            end_line=end_line,
            end_column=end_column,
            is_terminated=close_token is not None,
            is_empty=command_count == 0,
            is_single_statement=command_count == 1,
        )


class BrainfuckParser:
    """
    Single-pass parser producing a Program tree.

    This class provides:
    - Merging of whitespace runs and same-line comment runs into single nodes
    - Loop balance tracking with an explicit stack of open loops
    - Non-throwing recovery for unmatched '[' and ']'

    The parser keeps no state between calls, so one instance can be shared.
    """

    def parse(self, tokens: Sequence[Token]) -> Program:
        """
        Parse a token sequence into a Program.

        Args:
            tokens: Ordered tokens, normally from the lexer

        Returns:
            Program node owning every input token exactly once
        """
        state = _ParseState(tokens)
        statements: List[Statement] = []
        open_loops: List[_OpenLoop] = []

        while True:
            token = state.peek()

            if token is None:
                if not open_loops:
                    break
                # Input ended inside a loop: close it as unterminated
                loop = open_loops.pop().close(None)
                self._current_body(open_loops, statements).append(loop)
                continue

            if token.kind is TokenKind.LOOP_START:
                open_loops.append(_OpenLoop(state.advance()))
            elif token.kind is TokenKind.LOOP_END and open_loops:
                loop = open_loops.pop().close(state.advance())
                self._current_body(open_loops, statements).append(loop)
            else:
                self._current_body(open_loops, statements).append(self._parse_statement(state))

        program = _build_program(statements)
        logger.debug(f"Parsed {len(tokens)} tokens into {len(program.statements)} top-level statements")
        return program

    @staticmethod
    def _current_body(open_loops: List[_OpenLoop], statements: List[Statement]) -> List[Statement]:
        return open_loops[-1].body if open_loops else statements

    def _parse_statement(self, state: _ParseState) -> Statement:
        """Parse one non-loop statement. Always consumes at least one token."""
        token = state.peek()

        if token.kind in (TokenKind.WHITESPACE, TokenKind.NEWLINE):
            return self._parse_whitespace_run(state)

        if token.kind is TokenKind.COMMENT:
            return self._parse_comment_run(state)

        state.advance()

        if token.kind is TokenKind.LOOP_END:
            return UnmatchedClose(
                token=token,
                start_line=token.start_line,
                start_column=token.start_column,
                end_line=token.end_line,
                end_column=token.end_column,
            )

        return Command(
            command=CommandKind.from_token_kind(token.kind),
            token=token,
            start_line=token.start_line,
            start_column=token.start_column,
            end_line=token.end_line,
            end_column=token.end_column,
        )

    def _parse_whitespace_run(self, state: _ParseState) -> Whitespace:
        run = [state.advance()]
        while state.peek() is not None and state.peek().is_trivia:
            run.append(state.advance())
        return Whitespace(
            text="".join(token.text for token in run),
            tokens=tuple(run),
            start_line=run[0].start_line,
            start_column=run[0].start_column,
            end_line=run[-1].end_line,
            end_column=run[-1].end_column,
        )

    def _parse_comment_run(self, state: _ParseState) -> Comment:
        run = [state.advance()]
        line = run[0].start_line
        while True:
            token = state.peek()
            if token is None or token.kind is not TokenKind.COMMENT or token.start_line != line:
                break
            run.append(state.advance())
        return Comment(
            text="".join(token.text for token in run),
            tokens=tuple(run),
            start_line=run[0].start_line,
            start_column=run[0].start_column,
            end_line=run[-1].end_line,
            end_column=run[-1].end_column,
        )


def _build_program(statements: List[Statement]) -> Program:
    if not statements:
        return Program(statements=())
    first, last = statements[0], statements[-1]
    return Program(
        statements=tuple(statements),
        start_line=first.start_line,
        start_column=first.start_column,
        end_line=last.end_line,
        end_column=last.end_column,
    )


def parse(tokens: Sequence[Token]) -> Program:
    """Parse tokens with a fresh parser."""
    return BrainfuckParser().parse(tokens)


def parse_source(source: str) -> Program:
    """Tokenize and parse source text."""
    return parse(tokenize(source))
