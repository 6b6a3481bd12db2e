"""Template execution CLI commands - run, version."""
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from tmpl import __version__
from tmpl.cli_support import (
    get_store,
    handle_cli_error,
    print_success,
    print_warning,
    setup_file_logging,
)
from tmpl.core.config import get_config
from tmpl.core.template_store import TemplateStoreError, read_template_file
from tmpl.engine import run_template
from tmpl.ui import TerminalUI

# Module-level console instance (will be set by register function)
console: Console = Console()


def run(
    name: Optional[str] = typer.Argument(None, help="Installed template to run"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Run a template file instead of an installed one"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output and tracebacks"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also log to this file"),
):
    """Run a template against the current directory.

    Examples:
        tmpl run python-cli           # Run an installed template
        tmpl run --file ./app.tmpl    # Run a template file directly
    """
    if verbose or log_file:
        setup_file_logging(log_file=log_file, verbose=verbose)

    if file is None and not name:
        console.print("[red]No template name provided.[/red] Use `tmpl run <name>` or `tmpl install <name>`.")
        raise typer.Exit(1)

    try:
        if file is not None:
            if not file.is_file():
                raise TemplateStoreError(f"Template file '{file}' does not exist")
            source = read_template_file(file, file.name)
            label = file.name
        else:
            source = get_store().read(name)
            label = name
        cwd = Path.cwd()
    except (TemplateStoreError, OSError) as e:
        handle_cli_error(e, console, verbose=verbose)
        return

    ui = TerminalUI(console, spinner=get_config().spinner)
    report = run_template(source, ui, cwd=cwd)

    if report.ok:
        print_success(console, f"Template '{label}' applied ({report.effects} change(s))")
    else:
        print_warning(
            console,
            f"Template '{label}' applied with {len(report.diagnostics)} problem(s) "
            f"({report.effects} change(s))",
        )
        for diagnostic in report.diagnostics:
            console.print(f"  [dim]{diagnostic}[/dim]")


def version():
    """Show tmpl version."""
    console.print(f"tmpl v{__version__}")


def register_run_commands(app: typer.Typer, shared_console: Console):
    """Register execution commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(run)
    app.command()(version)
