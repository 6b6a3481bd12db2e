"""Second pass: dispatch template lines to directive handlers.

The interpreter walks a half-open range of lines with a :class:`Scope`
passed explicitly to every step. Function bodies are stepped over during
the walk and only run when a call line names them, in a scope forked from
the caller's.
"""
import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

from tmpl.core.logger import get_logger
from tmpl.engine.blocks import CLOSE, OPEN, find_block_end
from tmpl.engine.directives import (
    HEREDOC_START,
    Effects,
    collect_heredoc,
    expand_write_content,
    parse_input_call,
    parse_write_file,
)
from tmpl.engine.errors import CommandFailedError, DirectiveError, EffectError, TmplError
from tmpl.engine.models import ExecutionReport, Scope, Workspace
from tmpl.engine.registry import (
    FUNCTION_PREFIX,
    FunctionTable,
    build_function_table,
    declaration_extent,
    split_arguments,
)
from tmpl.engine.substitution import substitute

logger = get_logger(__name__)

CALL_PATTERN = re.compile(r"^([^\W\d]\w*)\((.*)\)$")
COMMAND_MARKER = "-"
MAX_CALL_DEPTH = 64


def split_lines(text: str) -> List[str]:
    """Split template text into lines on line feeds only.

    One trailing carriage return is dropped from each line and a final newline does
    not start an empty line. Other control characters stay in the line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class Interpreter:
    """Executes one template against a working directory.

    Args:
        source: Template text or its lines
        ui: Object providing ``ask(question, default)`` and ``progress(message)``
        cwd: Directory relative paths resolve against (defaults to the process cwd)
    """

    def __init__(self, source: Union[str, Sequence[str]], ui, cwd: Optional[Union[str, Path]] = None):
        if isinstance(source, str):
            source = split_lines(source)
        self.lines = tuple(source)
        self.ui = ui
        self.workspace = Workspace(cwd if cwd is not None else Path.cwd())
        self.effects = Effects(self.workspace, ui)
        self.report = ExecutionReport()
        self.functions: Optional[FunctionTable] = None
        self._depth = 0

    def run(self, variables: Optional[dict] = None) -> ExecutionReport:
        """Build the function table, then execute the whole template."""
        self.functions = build_function_table(self.lines)
        self.report.diagnostics.extend(self.functions.errors)

        scope = Scope(variables=dict(variables or {}))
        self.execute(0, len(self.lines), scope)

        self.report.effects = self.effects.count
        self.report.variables = dict(scope.variables)
        return self.report

    def execute(self, start: int, stop: int, scope: Scope) -> None:
        """Run lines ``[start, stop)`` in ``scope``."""
        index = start
        while index < stop:
            index += max(1, self.step(index, stop, scope))

    def step(self, index: int, stop: int, scope: Scope) -> int:
        """Execute the line at ``index`` and return how many lines it used."""
        try:
            return self.dispatch(index, stop, scope)
        except TmplError as e:
            self._report(index, e)
            return 1

    def dispatch(self, index: int, stop: int, scope: Scope) -> int:
        line = self.lines[index].strip()

        if line.startswith(FUNCTION_PREFIX):
            return declaration_extent(self.lines, index, stop)
        if line.startswith("var:"):
            self._assign(line[len("var:"):], scope)
        elif line.startswith("mkdir:"):
            self.effects.mkdir(self._path_argument(line, "mkdir:", scope))
        elif line.startswith("create_file:"):
            self.effects.create_file(self._path_argument(line, "create_file:", scope))
        elif line.startswith("write_file("):
            return self._write_file(line, index, stop, scope)
        elif line == "command":
            scope.in_command = True
        elif line == "end_command":
            scope.in_command = False
        elif line.startswith(COMMAND_MARKER):
            self._command_entry(line, scope)
        elif line.startswith("cd:"):
            self.effects.change_directory(self._path_argument(line, "cd:", scope))
        elif line.startswith("if:"):
            return self._conditional(line, index, stop, scope)
        elif not line or line.startswith("#") or line in (OPEN, CLOSE):
            pass
        elif CALL_PATTERN.match(line):
            self.call(line, scope)
        else:
            raise DirectiveError(f"Unknown directive: {line}")
        return 1

    def call(self, line: str, scope: Scope) -> None:
        """Invoke ``name(args...)`` with arguments substituted in the caller's scope."""
        match = CALL_PATTERN.match(line.strip())
        if not match:
            raise DirectiveError(f"Invalid function call: {line}")

        name, args_text = match.groups()
        definition = self.functions.get(name) if self.functions else None
        if definition is None:
            raise DirectiveError(f"Function '{name}' not found")

        args = [substitute(arg, scope.variables) for arg in split_arguments(args_text)]
        if len(args) != definition.arity:
            raise DirectiveError(
                f"Function '{name}' expects {definition.arity} parameter(s), "
                f"but {len(args)} were provided"
            )
        if self._depth >= MAX_CALL_DEPTH:
            raise DirectiveError(f"Maximum call depth of {MAX_CALL_DEPTH} exceeded calling '{name}'")

        local = scope.fork(dict(zip(definition.params, args)))
        logger.debug(f"Calling {name}({', '.join(args)})")

        self._depth += 1
        try:
            self.execute(definition.start_line, definition.end_line, local)
        finally:
            self._depth -= 1

    def _assign(self, body: str, scope: Scope) -> None:
        name, sep, raw_value = body.partition("=")
        name = name.strip()
        if not name:
            raise DirectiveError(f"Variable assignment without a name: var:{body}")

        value = ""
        if sep:
            prompt = parse_input_call(raw_value)
            if prompt is not None:
                question, default = (substitute(part, scope.variables) for part in prompt)
                value = self.effects.ask(question, default)
            else:
                value = substitute(raw_value.strip(), scope.variables)

        scope.variables[name] = value

    def _path_argument(self, line: str, prefix: str, scope: Scope) -> str:
        path = substitute(line[len(prefix):], scope.variables).strip()
        if not path:
            raise DirectiveError(f"'{prefix}' needs a path: {line}")
        return path

    def _write_file(self, line: str, index: int, stop: int, scope: Scope) -> int:
        raw_path, raw_content = parse_write_file(line)
        path = substitute(raw_path, scope.variables).strip()
        content = expand_write_content(raw_content, scope.variables)

        used = 1
        if content.startswith(HEREDOC_START):
            content, consumed, terminated = collect_heredoc(self.lines, index + 1, stop)
            used += consumed
            if not terminated:
                self._report(index, DirectiveError(f"Missing 'EOF>>' terminator for write_file({raw_path})"))

        try:
            self.effects.write_file(path, content)
        except EffectError as e:
            self._report(index, e)
        return used

    def _command_entry(self, line: str, scope: Scope) -> None:
        if not scope.in_command:
            raise DirectiveError(f"Command line outside of command block: {line}")

        command = substitute(line[len(COMMAND_MARKER):].strip(), scope.variables).strip()
        if not command:
            raise DirectiveError("Empty command")
        self.effects.run_command(command)

    def _conditional(self, line: str, index: int, stop: int, scope: Scope) -> int:
        """Evaluate ``if: left == right`` and return the lines to advance.

        A false condition skips the next line, or the whole ``{ }`` block
        when the next line opens one.
        """
        left, sep, right = line[len("if:"):].partition("==")
        if not sep:
            raise DirectiveError(f"Invalid if condition: {line}")

        left = substitute(left, scope.variables).strip()
        right = substitute(right, scope.variables).strip()
        if left == right:
            return 1

        guarded = index + 1
        if guarded >= stop:
            return 1
        if self.lines[guarded].strip() == OPEN:
            end = find_block_end(self.lines, guarded, stop)
            if end is None:
                self._report(index, DirectiveError("Missing closing '}' for if block"))
                return stop - index
            return end - index + 1
        return 1 + self._extent(guarded, stop)

    def _extent(self, index: int, stop: int) -> int:
        """Lines occupied by the single directive starting at ``index``."""
        line = self.lines[index].strip()
        if line.startswith(FUNCTION_PREFIX):
            return declaration_extent(self.lines, index, stop)
        if line.startswith("write_file("):
            try:
                _, raw_content = parse_write_file(line)
            except DirectiveError:
                return 1
            if raw_content.startswith(HEREDOC_START):
                return 1 + collect_heredoc(self.lines, index + 1, stop)[1]
        return 1

    def _report(self, index: int, error: TmplError) -> None:
        message = f"line {index + 1}: {error}"
        if isinstance(error, CommandFailedError):
            logger.warning(message)
        else:
            logger.error(message)
        self.report.add(index, error.kind, str(error))


def run_template(source: Union[str, Sequence[str]], ui, cwd: Optional[Union[str, Path]] = None,
                 variables: Optional[dict] = None) -> ExecutionReport:
    """Execute ``source`` and return its report."""
    return Interpreter(source, ui, cwd=cwd).run(variables=variables)
