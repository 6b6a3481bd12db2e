"""Data models shared by the registry and the interpreter."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union


@dataclass(frozen=True)
class FunctionDefinition:
    """A declared function.

    ``start_line`` and ``end_line`` form a half-open range over the
    template lines strictly between the opening and closing brace.
    """
    name: str
    params: tuple
    start_line: int
    end_line: int
    header_line: int = 0

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass
class Scope:
    """Variables and command-block flag owned by one call frame."""
    variables: Dict[str, str] = field(default_factory=dict)
    in_command: bool = False

    def fork(self, bindings: Dict[str, str]) -> "Scope":
        """Copy the variables for a function call and bind its parameters.

        The copy is a snapshot: assignments made inside the call never
        reach this scope.
        """
        variables = dict(self.variables)
        variables.update(bindings)
        return Scope(variables=variables)


class Workspace:
    """Current directory that relative paths and child processes resolve against."""

    def __init__(self, cwd: Union[str, Path]):
        self.cwd = Path(cwd).resolve()

    def resolve(self, path: str) -> Path:
        """Resolve a template path against the current directory."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.cwd / candidate

    def change(self, path: str) -> Path:
        """Move to ``path``; raises ``NotADirectoryError``/``FileNotFoundError``."""
        target = self.resolve(path)
        if not target.exists():
            raise FileNotFoundError(f"No such directory: '{target}'")
        if not target.is_dir():
            raise NotADirectoryError(f"Not a directory: '{target}'")
        self.cwd = target.resolve()
        return self.cwd


@dataclass(frozen=True)
class Diagnostic:
    """A reported, non-fatal problem tied to a template line (1-based)."""
    line_number: int
    kind: str
    message: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.message}"


@dataclass
class ExecutionReport:
    """Outcome of one template run."""
    diagnostics: List[Diagnostic] = field(default_factory=list)
    effects: int = 0
    variables: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def add(self, line_index: int, kind: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(line_index + 1, kind, message)
        self.diagnostics.append(diagnostic)
        return diagnostic

    def by_kind(self, kind: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]
