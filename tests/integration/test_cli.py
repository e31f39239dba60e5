"""
Integration tests for the command-line interface.

These tests drive the click commands end to end against files on disk.
"""

import json
import logging
import os

import pytest
from click.testing import CliRunner

from brain_surgeon import __version__
from brain_surgeon.cli.commands import main
from brain_surgeon.core.source import DEFAULT_BACKUP_DIR


UNFORMATTED = "++[>+<-]."
FORMATTED = "++\n[\n    > +\n    < -\n]\n.\n"


class TestCli:
    """Test the brain-surgeon commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def write(self, tmp_path, content, name="prog.bf"):
        path = tmp_path / name
        path.write_text(content)
        return path

    def test_version(self):
        """Test the version option."""
        result = self.runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_unknown_command(self):
        """Test that an unknown subcommand fails."""
        result = self.runner.invoke(main, ['frobnicate'])

        assert result.exit_code != 0

    def test_lint_json(self, tmp_path):
        """Test JSON diagnostics on stdout."""
        path = self.write(tmp_path, "]")

        result = self.runner.invoke(main, ['lint', str(path)])

        assert result.exit_code == 0
        records = json.loads(result.output)
        assert records == [{
            'message': "Unmatched ']' - missing '['",
            'level': 'error',
            'startLine': 1,
            'startColumn': 1,
            'endLine': 1,
            'endColumn': 1,
        }]

    def test_lint_json_clean(self, tmp_path):
        """Test that a clean file prints an empty array."""
        path = self.write(tmp_path, UNFORMATTED)

        result = self.runner.invoke(main, ['lint', str(path)])

        assert result.exit_code == 0
        assert result.output.strip() == "[]"

    def test_lint_table(self, tmp_path):
        """Test the table report."""
        path = self.write(tmp_path, "[]")

        result = self.runner.invoke(main, ['lint', str(path), '--format', 'table'])

        assert result.exit_code == 0
        assert "Lint Summary" in result.output
        assert "Empty loop" in result.output

    def test_lint_table_clean(self, tmp_path):
        """Test the table report for a clean file."""
        path = self.write(tmp_path, UNFORMATTED)

        result = self.runner.invoke(main, ['lint', str(path), '--format', 'table'])

        assert result.exit_code == 0
        assert "No issues found" in result.output

    def test_lint_missing_file(self, tmp_path):
        """Test the error for a file that does not exist."""
        result = self.runner.invoke(main, ['lint', str(tmp_path / "missing.bf")])

        assert result.exit_code == 1
        assert "Cannot open file" in result.output

    def test_fmt_writes_file(self, tmp_path):
        """Test in-place formatting."""
        path = self.write(tmp_path, UNFORMATTED)

        result = self.runner.invoke(main, ['fmt', str(path)])

        assert result.exit_code == 0
        assert path.read_text() == FORMATTED

    def test_fmt_stdout(self, tmp_path):
        """Test printing instead of writing."""
        path = self.write(tmp_path, UNFORMATTED)

        result = self.runner.invoke(main, ['fmt', str(path), '--stdout'])

        assert result.exit_code == 0
        assert result.output == FORMATTED
        assert path.read_text() == UNFORMATTED

    def test_fmt_check(self, tmp_path):
        """Test check mode exit codes."""
        dirty = self.write(tmp_path, UNFORMATTED, "dirty.bf")
        clean = self.write(tmp_path, FORMATTED, "clean.bf")

        dirty_result = self.runner.invoke(main, ['fmt', str(dirty), '--check'])
        clean_result = self.runner.invoke(main, ['fmt', str(clean), '--check'])

        assert dirty_result.exit_code == 1
        assert "Would reformat" in dirty_result.output
        assert dirty.read_text() == UNFORMATTED
        assert clean_result.exit_code == 0
        assert "Already formatted" in clean_result.output

    def test_fmt_config_file(self, tmp_path):
        """Test options loaded from a JSON config file."""
        path = self.write(tmp_path, "[+]")
        config = self.write(tmp_path, json.dumps({'indent_spaces': 2}), "style.json")

        result = self.runner.invoke(main, ['fmt', str(path), '--config', str(config)])

        assert result.exit_code == 0
        assert path.read_text() == "[\n  +\n]\n"

    def test_fmt_flags_override_config(self, tmp_path):
        """Test that command-line flags win over the config file."""
        path = self.write(tmp_path, "[+]")
        config = self.write(tmp_path, json.dumps({'indent_spaces': 2}), "style.json")

        result = self.runner.invoke(main, ['fmt', str(path), '--config', str(config), '--tab-indent'])

        assert result.exit_code == 0
        assert path.read_text() == "[\n\t+\n]\n"

    def test_fmt_indent_spaces(self, tmp_path):
        """Test the indent width option."""
        path = self.write(tmp_path, "[+]")

        result = self.runner.invoke(main, ['fmt', str(path), '--indent-spaces', '3', '--stdout'])

        assert result.exit_code == 0
        assert result.output == "[\n   +\n]\n"

    def test_fmt_bad_config(self, tmp_path):
        """Test that an invalid config aborts without touching the file."""
        path = self.write(tmp_path, UNFORMATTED)
        config = self.write(tmp_path, json.dumps({'indent_width': 2}), "style.json")

        result = self.runner.invoke(main, ['fmt', str(path), '--config', str(config)])

        assert result.exit_code == 1
        assert "Unknown configuration option" in result.output
        assert path.read_text() == UNFORMATTED

    def test_fmt_missing_file(self, tmp_path):
        """Test formatting a file that does not exist."""
        result = self.runner.invoke(main, ['fmt', str(tmp_path / "missing.bf")])

        assert result.exit_code == 1
        assert "Cannot open file" in result.output

    def test_fmt_backup(self):
        """Test that a backup copy is made before writing."""
        with self.runner.isolated_filesystem():
            with open("prog.bf", "w") as f:
                f.write(UNFORMATTED)

            result = self.runner.invoke(main, ['fmt', 'prog.bf', '--backup'])

            assert result.exit_code == 0
            backups = os.listdir(DEFAULT_BACKUP_DIR)
            assert len(backups) == 1
            with open(os.path.join(DEFAULT_BACKUP_DIR, backups[0])) as f:
                assert f.read() == UNFORMATTED

    def test_debug(self, tmp_path):
        """Test the tree, lint and format panels."""
        path = self.write(tmp_path, "+[a]")

        result = self.runner.invoke(main, ['debug', str(path)])

        assert result.exit_code == 0
        assert "AST" in result.output
        assert "Program [1:1 - 1:4]" in result.output
        assert "Linting" in result.output
        assert "Empty" in result.output
        assert "Formatting" in result.output

    def test_debug_shows_active_config(self, tmp_path):
        """Test that the configuration panel reflects the config file."""
        path = self.write(tmp_path, "+")
        config = self.write(tmp_path, json.dumps({'indent_spaces': 2}), "style.json")

        result = self.runner.invoke(main, ['debug', str(path), '--config', str(config)])

        assert result.exit_code == 0
        assert "Configuration" in result.output
        assert '"indent_spaces": 2' in result.output
        assert '"comment_prefix": "#"' in result.output

    def test_verbose(self, tmp_path):
        """Test that verbose mode is accepted before a subcommand."""
        path = self.write(tmp_path, "+")

        result = self.runner.invoke(main, ['--verbose', 'lint', str(path)])
        logging.getLogger().setLevel(logging.INFO)

        assert result.exit_code == 0


if __name__ == '__main__':
    pytest.main([__file__])
