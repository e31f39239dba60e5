"""
Property-based tests for the formatter and linter using Hypothesis.

These tests check that formatting keeps the program's instructions, that a
second formatting pass changes nothing, and that structural diagnostics
survive formatting.
"""

from hypothesis import given, settings, strategies as st

from brain_surgeon.core.config import FormatterConfig
from brain_surgeon.core.formatter import format_source
from brain_surgeon.core.linter import (
    EMPTY_LOOP, SINGLE_COMMAND_LOOP, UNMATCHED_CLOSE, UNMATCHED_OPEN, lint_tree,
)
from brain_surgeon.core.parser import parse_source


SOURCE_ALPHABET = "<>+-.,[] \n\tab#"
INSTRUCTIONS = set("<>+-.,[]")

sources = st.text(alphabet=SOURCE_ALPHABET, max_size=200)

# Strategy for generating formatter configurations
@st.composite
def formatter_config(draw):
    """Generate an arbitrary valid FormatterConfig."""
    return FormatterConfig(
        space_between_groups=draw(st.booleans()),
        comment_prefix=draw(st.sampled_from(["#", "//", "; ", ""])),
        comment_on_newline=draw(st.booleans()),
        loop_on_newline=draw(st.booleans()),
        move_on_newline=draw(st.booleans()),
        end_line_at_io=draw(st.booleans()),
        tally_commands=draw(st.booleans()),
        tab_indent=draw(st.booleans()),
        indent_spaces=draw(st.integers(min_value=0, max_value=8)),
    )


def instructions(text):
    return [char for char in text if char in INSTRUCTIONS]


def structural_messages(source):
    structural = {UNMATCHED_OPEN, UNMATCHED_CLOSE, EMPTY_LOOP, SINGLE_COMMAND_LOOP}
    return sorted(d.message for d in lint_tree(parse_source(source)) if d.message in structural)


class TestFormatterProperties:
    """Property-based tests for the BrainfuckFormatter."""

    @given(sources)
    def test_instructions_preserved(self, source):
        """Property: formatting keeps the instruction sequence."""
        assert instructions(format_source(source)) == instructions(source)

    @given(sources)
    def test_idempotent_default(self, source):
        """Property: formatting formatted text is a no-op."""
        once = format_source(source)

        assert format_source(once) == once

    @settings(max_examples=200)
    @given(sources, formatter_config())
    def test_idempotent_any_config(self, source, config):
        """Property: idempotence holds for every style option combination."""
        once = format_source(source, config)

        assert format_source(once, config) == once
        assert instructions(once) == instructions(source)

    @given(sources)
    def test_output_shape(self, source):
        """Property: output is empty or newline-terminated without blank lines."""
        output = format_source(source)

        if output:
            assert output.endswith("\n")
            assert all(line.strip() for line in output.split("\n")[:-1])

    @given(sources)
    def test_structural_diagnostics_survive(self, source):
        """Property: bracket and loop diagnostics are unchanged by formatting."""
        assert structural_messages(format_source(source)) == structural_messages(source)
