"""
Linter Module

This module inspects a parsed program for suspicious patterns and structural
errors, and serializes the findings as JSON for editor integrations.
"""

import json
from typing import Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum
import logging

from .nodes import (
    CANCELING_PAIRS, Command, Comment, Loop, Program, Statement,
    UnmatchedClose, Whitespace,
)

logger = logging.getLogger(__name__)


class LintSeverity(Enum):
    """Diagnostic severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding with its source span. Line 0 marks file-level findings."""
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    message: str
    severity: LintSeverity

    def to_dict(self) -> Dict:
        return {
            'message': self.message,
            'level': self.severity.value,
            'startLine': self.start_line,
            'startColumn': self.start_column,
            'endLine': self.end_line,
            'endColumn': self.end_column,
        }


EMPTY_FILE = "Empty file"
COMMENT_BETWEEN_COMMANDS = "Comment between commands"
CANCELING_COMMANDS = "Consecutive canceling commands"
UNMATCHED_OPEN = "Unmatched '[' - missing ']'"
UNMATCHED_CLOSE = "Unmatched ']' - missing '['"
EMPTY_LOOP = "Empty loop (potential infinite loop)"
SINGLE_COMMAND_LOOP = "Loop with single command (suspicious)"


def _span(node, severity: LintSeverity, message: str, end=None) -> Diagnostic:
    end = end or node
    return Diagnostic(node.start_line, node.start_column, end.end_line, end.end_column, message, severity)


class BrainfuckLinter:
    """
    Read-only checker over a Program tree.

    Rules:
    - empty file
    - comment interposed between two commands/loops on one line
    - consecutive canceling commands (+- -+ <> ><)
    - unterminated loop and unmatched ']'
    - empty loop and loop with a single command
    """

    def lint(self, program: Program) -> List[Diagnostic]:
        """
        Collect diagnostics for a program in source order.

        Args:
            program: Parsed program

        Returns:
            Ordered list of Diagnostic objects
        """
        if not program.statements:
            return [Diagnostic(0, 0, 0, 0, EMPTY_FILE, LintSeverity.WARNING)]

        diagnostics: List[Diagnostic] = []
        stack: List[Tuple[Sequence[Statement], int]] = [(program.statements, 0)]

        while stack:
            statements, index = stack.pop()
            if index >= len(statements):
                continue
            stack.append((statements, index + 1))
            statement = statements[index]

            if isinstance(statement, Comment):
                diagnostics.extend(self._check_interposed_comment(statements, index))

            elif isinstance(statement, Command):
                diagnostics.extend(self._check_canceling(statements, index))

            elif isinstance(statement, Loop):
                diagnostics.extend(self._check_loop(statement))
                stack.append((statement.body, 0))

            elif isinstance(statement, UnmatchedClose):
                diagnostics.append(_span(statement, LintSeverity.ERROR, UNMATCHED_CLOSE))

        logger.debug(f"Lint produced {len(diagnostics)} diagnostics")
        return diagnostics

    def _check_interposed_comment(self, statements: Sequence[Statement], index: int) -> List[Diagnostic]:
        previous = _neighbour(statements, index, -1)
        following = _neighbour(statements, index, 1)
        if isinstance(previous, (Command, Loop)) and isinstance(following, (Command, Loop)):
            return [_span(statements[index], LintSeverity.WARNING, COMMENT_BETWEEN_COMMANDS)]
        return []

    def _check_canceling(self, statements: Sequence[Statement], index: int) -> List[Diagnostic]:
        current = statements[index]
        following = index + 1
        while following < len(statements) and isinstance(statements[following], Whitespace):
            following += 1
        if following >= len(statements):
            return []
        nxt = statements[following]
        if isinstance(nxt, Command) and (current.command, nxt.command) in CANCELING_PAIRS:
            return [_span(current, LintSeverity.WARNING, CANCELING_COMMANDS, end=nxt)]
        return []

    def _check_loop(self, loop: Loop) -> List[Diagnostic]:
        diagnostics = []
        if not loop.is_terminated:
            diagnostics.append(_span(loop, LintSeverity.ERROR, UNMATCHED_OPEN))
        if loop.is_empty:
            diagnostics.append(_span(loop, LintSeverity.WARNING, EMPTY_LOOP))
        if loop.is_single_statement:
            diagnostics.append(_span(loop, LintSeverity.WARNING, SINGLE_COMMAND_LOOP))
        return diagnostics


def _neighbour(statements: Sequence[Statement], index: int, step: int) -> Optional[Statement]:
    """Nearest sibling in one direction, skipping whitespace that stays on the line."""
    position = index + step
    while 0 <= position < len(statements):
        candidate = statements[position]
        if not (isinstance(candidate, Whitespace) and not candidate.has_newline):
            return candidate
        position += step
    return None


def lint_tree(program: Program) -> List[Diagnostic]:
    """Lint a program with a fresh linter."""
    return BrainfuckLinter().lint(program)


def diagnostics_to_json(diagnostics: Sequence[Diagnostic]) -> str:
    """Serialize diagnostics as a compact JSON array."""
    return json.dumps([d.to_dict() for d in diagnostics], separators=(',', ':'))


def lint_to_json(program: Program) -> str:
    """Lint a program and serialize the result."""
    return diagnostics_to_json(lint_tree(program))


def summarize_diagnostics(diagnostics: Sequence[Diagnostic]) -> Dict[str, int]:
    """Count diagnostics per severity level, including zero counts."""
    counts = {severity.value: 0 for severity in LintSeverity}
    for diagnostic in diagnostics:
        counts[diagnostic.severity.value] += 1
    counts['total'] = len(diagnostics)
    return counts
