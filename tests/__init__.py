"""
Test package for brain-surgeon.

This package contains:
- Unit tests for the lexer, parser, linter, formatter and support modules
- Integration tests for the CLI and the full pipeline
- Property-based tests using Hypothesis
"""
