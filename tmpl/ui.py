"""Terminal collaborators: interactive prompts and progress spinners."""
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from tmpl.core.logger import get_logger

logger = get_logger(__name__)


class Spinner:
    """Progress indication around one blocking operation.

    ``stop()`` only has an effect the first time it is called, so the
    indication ends exactly once whether the wrapped work succeeds or raises.
    Rendering problems are logged and never reach the wrapped work.
    """

    def __init__(self, console: Console, message: str, spinner: str = "dots"):
        self.console = console
        self.message = message
        self._status = console.status(f"[cyan]{escape(message)}[/cyan]", spinner=spinner)
        self._started = False
        self._stopped = False

    def start(self) -> "Spinner":
        if self._started:
            return self
        self._started = True
        try:
            self._status.start()
        except Exception as e:
            logger.debug(f"Progress display unavailable: {e}")
        return self

    def stop(self, success: bool = True) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._started:
            try:
                self._status.stop()
            except Exception as e:
                logger.debug(f"Progress display failed to stop: {e}")
        if success:
            self.console.print(f"[green]✓[/green] {escape(self.message)} [dim]done[/dim]")

    def __enter__(self) -> "Spinner":
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop(success=exc_type is None)
        return False


class TerminalUI:
    """Prompt and progress provider backed by typer and rich."""

    def __init__(self, console: Optional[Console] = None, spinner: str = "dots"):
        self.console = console or Console()
        self.spinner = spinner

    def ask(self, question: str, default: str = "") -> str:
        """Ask ``question`` and return the answer, or ``default`` on empty input."""
        answer = typer.prompt(question, default=default, show_default=bool(default))
        return answer if answer != "" else default

    def progress(self, message: str) -> Spinner:
        return Spinner(self.console, message, spinner=self.spinner)
