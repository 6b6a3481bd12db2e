"""Exceptions raised while scanning and executing templates."""


class TmplError(Exception):
    """Base class for all tmpl errors."""
    pass


class DeclarationError(TmplError):
    """Malformed function header or unbalanced function body.

    ``definition`` holds the best-effort definition recorded despite the
    error and ``resume`` the line index the scan continues from.
    """
    kind = "declaration"

    def __init__(self, message: str, definition=None, resume: int = None):
        super().__init__(message)
        self.definition = definition
        self.resume = resume


class DirectiveError(TmplError):
    """A line that cannot be dispatched (unknown directive, bad syntax, bad call)."""
    kind = "directive"


class EffectError(TmplError):
    """A directive whose filesystem or process effect failed."""
    kind = "effect"

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class CommandFailedError(EffectError):
    """A command ran but exited with a non-zero status."""

    def __init__(self, command: str, returncode: int):
        super().__init__(f"Command '{command}' failed with exit code {returncode}")
        self.command = command
        self.returncode = returncode
