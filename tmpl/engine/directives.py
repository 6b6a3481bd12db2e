"""Side-effect directives: filesystem changes, commands and prompts.

Each effect runs inside a progress indication from the UI collaborator and
raises :class:`EffectError` (with the underlying cause) when it fails.
"""
import os
import subprocess
from typing import List, Optional, Sequence, Tuple

from tmpl.core.logger import get_logger
from tmpl.engine.errors import CommandFailedError, DirectiveError, EffectError
from tmpl.engine.models import Workspace
from tmpl.engine.substitution import substitute, unescape

logger = get_logger(__name__)

HEREDOC_START = "<<EOF"
HEREDOC_END = "EOF>>"
WRITE_FILE_PREFIX = "write_file("
INPUT_PREFIX = "input("


def _strip_quotes(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def parse_input_call(value: str) -> Optional[Tuple[str, str]]:
    """Split ``input(question, default)`` into its question and default.

    Returns ``None`` when ``value`` is not an input call. Only the first
    comma separates the two, so the default may itself contain commas.
    """
    value = value.strip()
    if not value.startswith(INPUT_PREFIX):
        return None

    inner = value[len(INPUT_PREFIX):]
    if inner.endswith(")"):
        inner = inner[:-1]
    question, _, default = inner.partition(",")
    return _strip_quotes(question), _strip_quotes(default)


def parse_write_file(line: str) -> Tuple[str, str]:
    """Split ``write_file(path): content`` into raw path and raw content."""
    head, sep, content = line.partition("):")
    if not sep or not head.startswith(WRITE_FILE_PREFIX):
        raise DirectiveError(f"Invalid write_file syntax: {line}")
    path = head[len(WRITE_FILE_PREFIX):].strip()
    if not path:
        raise DirectiveError(f"write_file needs a file name: {line}")
    return path, content.strip()


def collect_heredoc(lines: Sequence[str], start: int, stop: int) -> Tuple[str, int, bool]:
    """Collect raw lines from ``start`` up to the ``EOF>>`` terminator.

    Returns the newline-terminated text, how many lines were consumed
    (terminator included) and whether the terminator was found.
    """
    collected: List[str] = []
    index = start
    while index < stop:
        if lines[index].strip() == HEREDOC_END:
            return "".join(collected), index - start + 1, True
        collected.append(lines[index] + "\n")
        index += 1
    return "".join(collected), index - start, False


def split_command(command: str) -> List[str]:
    """Argument vector for a command-entry line."""
    if os.name == "nt":
        return ["cmd", "/C", command]
    return command.split()


class Effects:
    """Performs the observable side effects of a template run."""

    def __init__(self, workspace: Workspace, ui):
        self.workspace = workspace
        self.ui = ui
        self.count = 0

    def ask(self, question: str, default: str) -> str:
        return self.ui.ask(question, default)

    def mkdir(self, path: str) -> None:
        target = self.workspace.resolve(path)
        with self.ui.progress(f"Creating directory {path}"):
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise EffectError(f"Failed to create directory '{path}': {e}", cause=e) from e
        self.count += 1
        logger.debug(f"Created directory {target}")

    def create_file(self, path: str) -> None:
        target = self.workspace.resolve(path)
        with self.ui.progress(f"Creating file {path}"):
            try:
                target.write_bytes(b"")
            except OSError as e:
                raise EffectError(f"Failed to create file '{path}': {e}", cause=e) from e
        self.count += 1
        logger.debug(f"Created file {target}")

    def write_file(self, path: str, content: str) -> None:
        target = self.workspace.resolve(path)
        with self.ui.progress(f"Writing file {path}"):
            try:
                with open(target, "w", encoding="utf-8", newline="") as f:
                    f.write(content)
            except OSError as e:
                raise EffectError(f"Failed to write to file '{path}': {e}", cause=e) from e
        self.count += 1
        logger.debug(f"Wrote {len(content)} characters to {target}")

    def run_command(self, command: str) -> None:
        """Run ``command`` in the workspace directory with output discarded.

        Raises ``CommandFailedError`` for a non-zero exit status and
        ``EffectError`` when the process cannot be started.
        """
        args = split_command(command)
        if not args:
            raise DirectiveError("Empty command")

        with self.ui.progress(f"Running command {command}"):
            try:
                result = subprocess.run(
                    args,
                    cwd=str(self.workspace.cwd),
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    check=False,
                )
            except OSError as e:
                raise EffectError(f"Failed to execute command '{command}': {e}", cause=e) from e

            if result.returncode != 0:
                raise CommandFailedError(command, result.returncode)
        self.count += 1

    def change_directory(self, path: str) -> None:
        with self.ui.progress(f"Changing directory to '{path}'"):
            try:
                self.workspace.change(path)
            except OSError as e:
                raise EffectError(f"Failed to change directory to '{path}': {e}", cause=e) from e
        self.count += 1


def expand_write_content(raw_content: str, variables) -> str:
    """Substitute and unescape inline ``write_file`` content."""
    return unescape(substitute(raw_content, variables))
