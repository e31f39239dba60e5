"""
Command-line interface for brain-surgeon.

This module provides CLI commands for linting, formatting and inspecting
Brainfuck source files.
"""

import sys
import json
import click
import logging
from typing import List, Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from .. import __version__
from ..core.config import FormatterConfig, load_config
from ..core.errors import BrainSurgeonError
from ..core.formatter import format_tree
from ..core.linter import Diagnostic, LintSeverity, diagnostics_to_json, lint_tree, summarize_diagnostics
from ..core.nodes import tree_to_string
from ..core.parser import parse_source
from ..core.source import create_backup, read_source, write_source

console = Console()
error_console = Console(stderr=True)

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

LEVEL_STYLES = {
    LintSeverity.ERROR: "bold red",
    LintSeverity.WARNING: "yellow",
    LintSeverity.INFO: "blue",
}


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose):
    """brain-surgeon - lint and format Brainfuck programs."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        error_console.print("[dim]Verbose mode enabled[/dim]")


@main.command()
@click.argument('filepath', type=click.Path(dir_okay=False))
@click.option('--format', 'output_format', type=click.Choice(['json', 'table']), default='json',
              help='Print diagnostics as JSON (default) or as a table')
def lint(filepath, output_format):
    """Lint a Brainfuck file and print its diagnostics."""
    try:
        program = parse_source(read_source(filepath))
    except BrainSurgeonError as e:
        report_error(e)

    diagnostics = lint_tree(program)

    if output_format == 'json':
        click.echo(diagnostics_to_json(diagnostics))
    else:
        display_diagnostics(filepath, diagnostics)


@main.command()
@click.argument('filepath', type=click.Path(dir_okay=False))
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='JSON file with formatter options')
@click.option('--tab-indent/--space-indent', default=None, help='Indent with tabs instead of spaces')
@click.option('--indent-spaces', type=click.IntRange(min=0), default=None, help='Spaces per indent level')
@click.option('--stdout', 'to_stdout', is_flag=True, help='Print the result instead of writing the file')
@click.option('--check', is_flag=True, help='Exit with status 1 if the file is not already formatted')
@click.option('--backup/--no-backup', default=False, help='Back up the file before overwriting it')
def fmt(filepath, config_path, tab_indent, indent_spaces, to_stdout, check, backup):
    """Format a Brainfuck file in place."""
    try:
        config = build_config(config_path, tab_indent, indent_spaces)
        source = read_source(filepath)
        formatted = format_tree(parse_source(source), config)

        if to_stdout:
            click.echo(formatted, nl=False)
            return

        if check:
            if formatted != source:
                console.print(f"[yellow]Would reformat[/yellow] {escape(filepath)}")
                sys.exit(1)
            console.print(f"[green]Already formatted[/green] {escape(filepath)}")
            return

        if backup:
            create_backup(filepath)
        write_source(filepath, formatted)
    except BrainSurgeonError as e:
        report_error(e)

    console.print(f"[green]Formatted and wrote to[/green] {escape(filepath)}")


@main.command()
@click.argument('filepath', type=click.Path(dir_okay=False))
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='JSON file with formatter options')
def debug(filepath, config_path):
    """Print the syntax tree, diagnostics, formatted text and active options of a file."""
    try:
        config = build_config(config_path, None, None)
        program = parse_source(read_source(filepath))
    except BrainSurgeonError as e:
        report_error(e)

    console.print(Panel(Text(tree_to_string(program).rstrip("\n")), title="AST", border_style="blue"))
    console.print(Panel(Text(diagnostics_to_json(lint_tree(program))), title="Linting", border_style="yellow"))
    console.print(Panel(Text(format_tree(program, config).rstrip("\n")), title="Formatting", border_style="green"))
    console.print(Panel(Text(json.dumps(config.to_dict(), indent=2)), title="Configuration", border_style="magenta"))


def build_config(config_path: Optional[str], tab_indent: Optional[bool],
                 indent_spaces: Optional[int]) -> FormatterConfig:
    """Defaults, then the config file, then command-line overrides."""
    config = load_config(config_path) if config_path else FormatterConfig()
    if tab_indent is not None:
        config.tab_indent = tab_indent
    if indent_spaces is not None:
        config.indent_spaces = indent_spaces
    return config


def report_error(error: BrainSurgeonError):
    """Print a boundary failure and exit non-zero."""
    logger.debug(f"Aborting after {error!r}")
    error_console.print(f"[red]Error: {escape(error.message)}[/red]")
    sys.exit(1)


def display_diagnostics(filepath: str, diagnostics: List[Diagnostic]):
    """Display diagnostics in a table with a per-level summary."""
    summary = summarize_diagnostics(diagnostics)
    summary_text = (
        f"Errors: {summary['error']}\n"
        f"Warnings: {summary['warning']}\n"
        f"Info: {summary['info']}\n"
        f"Total: {summary['total']}"
    )
    console.print(Panel(summary_text, title=f"Lint Summary: {escape(filepath)}", border_style="blue"))

    if not diagnostics:
        console.print("[green]No issues found[/green]")
        return

    table = Table(title="Diagnostics")
    table.add_column("Location", style="cyan")
    table.add_column("Level", justify="center")
    table.add_column("Message")

    for diagnostic in diagnostics:
        style = LEVEL_STYLES[diagnostic.severity]
        location = f"{diagnostic.start_line}:{diagnostic.start_column}-{diagnostic.end_line}:{diagnostic.end_column}"
        table.add_row(
            location,
            Text(diagnostic.severity.value, style=style),
            Text(diagnostic.message),
        )

    console.print(table)


if __name__ == '__main__':
    main()
