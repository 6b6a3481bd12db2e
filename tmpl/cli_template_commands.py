"""Template management CLI commands - install, remove, list."""
from pathlib import Path

import typer
from rich.console import Console

from tmpl.cli_support import get_store, handle_cli_error, print_error, print_success
from tmpl.core.template_store import (
    TemplateStoreError,
    download_progress,
    find_local_templates,
)

# Module-level console instance (will be set by register function)
console: Console = Console()


def _choose_local_template(directory: Path) -> Path:
    """Pick a ``.tmpl`` file from ``directory``, asking when there are several."""
    candidates = find_local_templates(directory)
    if not candidates:
        raise TemplateStoreError(f"No .tmpl files found in {directory}")
    if len(candidates) == 1:
        return candidates[0]

    console.print("[bold]Available templates:[/bold]")
    for i, path in enumerate(candidates, start=1):
        console.print(f"  {i}. {path.name}")

    selection = typer.prompt("Select template number", default="1")
    try:
        index = int(selection.strip()) - 1
    except ValueError:
        raise TemplateStoreError(f"Invalid selection '{selection}'")
    if not 0 <= index < len(candidates):
        raise TemplateStoreError("Invalid template selection")
    return candidates[index]


def install(
    name: str = typer.Argument(..., help="Template name, or '.' to import a .tmpl file from the current directory"),
):
    """Install a template from the registry.

    Examples:
        tmpl install python-cli      # Download from the registry
        tmpl install .               # Import a .tmpl file from this directory
    """
    store = get_store()

    try:
        if name.strip() == ".":
            source = _choose_local_template(Path.cwd())
            stored_name = typer.prompt("Enter name for this template", default=source.stem)
            store.import_file(source, stored_name)
            print_success(console, f"Template copied as '{stored_name.strip()}'")
            return

        with download_progress(console) as progress:
            path = store.install(name, progress=progress)
        print_success(console, f"Template '{name.strip()}' downloaded to {path}")
    except TemplateStoreError as e:
        handle_cli_error(e, console)


def remove(
    name: str = typer.Argument(..., help="Installed template name"),
):
    """Remove an installed template."""
    store = get_store()
    try:
        store.remove(name)
    except TemplateStoreError as e:
        print_error(console, str(e))
        raise typer.Exit(1)
    print_success(console, f"Template '{name}' removed")


def list_templates():
    """List installed templates."""
    names = get_store().list_templates()
    if not names:
        console.print("[dim]No templates installed.[/dim]")
        return

    console.print("[bold]Installed templates:[/bold]")
    for name in names:
        console.print(f"  • {name}")


def register_template_commands(app: typer.Typer, shared_console: Console):
    """Register template management commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(install)
    app.command()(remove)
    app.command("list")(list_templates)
