#!/usr/bin/env python3
"""tmpl CLI - Scaffold projects from small directive templates."""

import typer
from rich.console import Console

from tmpl.cli_run_commands import register_run_commands
from tmpl.cli_template_commands import register_template_commands

app = typer.Typer(
    name="tmpl",
    help="""tmpl - Scaffold projects from small directive templates

Quick start:
  tmpl install python-cli     # Fetch a template
  tmpl list                   # See what is installed
  tmpl run python-cli         # Apply it to the current directory

More commands: tmpl --help
""",
    add_completion=False,
)

console = Console()

# Attach modular subcommands
register_template_commands(app, console)
register_run_commands(app, console)


def main():
    app()


if __name__ == "__main__":
    main()
