"""First pass: collect ``function:`` declarations into an immutable table."""
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from tmpl.core.logger import get_logger
from tmpl.engine.blocks import find_block_end, find_opening_brace, skip_block
from tmpl.engine.errors import DeclarationError
from tmpl.engine.models import Diagnostic, FunctionDefinition

logger = get_logger(__name__)

FUNCTION_PREFIX = "function:"


@dataclass(frozen=True)
class FunctionTable:
    """Functions declared in a template, keyed by name."""
    functions: Mapping[str, FunctionDefinition]
    errors: Tuple[Diagnostic, ...] = ()

    def get(self, name: str) -> Optional[FunctionDefinition]:
        return self.functions.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def __len__(self) -> int:
        return len(self.functions)


def split_arguments(text: str) -> List[str]:
    """Comma-split a parameter or argument list, trimming each entry."""
    if not text.strip():
        return []
    return [part.strip() for part in text.split(",")]


def parse_signature(declaration: str) -> Tuple[str, List[str]]:
    """Parse ``name(a, b)`` or a bare ``name`` into its name and parameters.

    Empty parameter tokens are dropped.
    """
    declaration = declaration.strip()
    if declaration.endswith("{"):
        declaration = declaration[:-1].rstrip()

    if "(" not in declaration:
        return declaration, []

    name, _, rest = declaration.partition("(")
    close = rest.rfind(")")
    params_text = rest if close == -1 else rest[:close]
    params = [p for p in split_arguments(params_text) if p]
    return name.strip(), params


def _parse_declaration(
    lines: Sequence[str], header_index: int
) -> Tuple[Optional[FunctionDefinition], int]:
    """Parse the declaration at ``header_index``.

    Returns the definition and the index the scan should resume from.
    Raises ``DeclarationError`` for problems that leave no usable body; the
    error carries the best-effort definition in ``definition``.
    """
    header = lines[header_index].strip()
    name, params = parse_signature(header[len(FUNCTION_PREFIX):])
    if not name:
        raise DeclarationError(f"Function declaration without a name: {header}")

    empty = FunctionDefinition(
        name=name,
        params=tuple(params),
        start_line=header_index + 1,
        end_line=header_index + 1,
        header_line=header_index,
    )

    open_index = find_opening_brace(lines, header_index)
    if open_index is None:
        raise DeclarationError(
            f"Expected '{{' after function declaration for '{name}'",
            definition=empty,
        )

    end_index = find_block_end(lines, open_index)
    if end_index is None:
        raise DeclarationError(
            f"Missing closing '}}' for function '{name}'",
            definition=replace(empty, start_line=open_index + 1, end_line=len(lines)),
            resume=len(lines),
        )

    definition = replace(empty, start_line=open_index + 1, end_line=end_index)
    return definition, end_index + 1


def build_function_table(lines: Sequence[str]) -> FunctionTable:
    """Scan every line once and record each ``function:`` declaration.

    Function bodies are jumped over, so declarations nested inside a body
    are not registered. A later declaration with the same name replaces the
    earlier one.
    """
    functions = {}
    errors = []

    index = 0
    while index < len(lines):
        if not lines[index].strip().startswith(FUNCTION_PREFIX):
            index += 1
            continue

        try:
            definition, index = _parse_declaration(lines, index)
        except DeclarationError as e:
            logger.error(str(e))
            errors.append(Diagnostic(index + 1, e.kind, str(e)))
            definition = e.definition
            index = e.resume if e.resume is not None else index + 1

        if definition is not None:
            if definition.name in functions:
                logger.debug(f"Function '{definition.name}' redeclared on line {definition.header_line + 1}")
            functions[definition.name] = definition

    return FunctionTable(functions=MappingProxyType(functions), errors=tuple(errors))


def declaration_extent(lines: Sequence[str], header_index: int, stop: Optional[int] = None) -> int:
    """Number of lines a declaration occupies, header and body included.

    Used during execution to step over a function without running it. A
    header with no opening brace occupies only itself.
    """
    stop = len(lines) if stop is None else stop
    open_index = find_opening_brace(lines, header_index, stop)
    if open_index is None:
        return 1
    return (open_index - header_index) + skip_block(lines, open_index, stop)
