"""Directive language engine.

Two stages: :func:`build_function_table` scans a template once for
``function:`` declarations, then :class:`Interpreter` walks the lines,
dispatching one directive per line and re-entering function bodies on
explicit calls.
"""

from .errors import DeclarationError, DirectiveError, EffectError, TmplError
from .interpreter import Interpreter, run_template
from .models import Diagnostic, ExecutionReport, FunctionDefinition, Scope, Workspace
from .registry import FunctionTable, build_function_table
from .substitution import substitute

__all__ = [
    "DeclarationError",
    "Diagnostic",
    "DirectiveError",
    "EffectError",
    "ExecutionReport",
    "FunctionDefinition",
    "FunctionTable",
    "Interpreter",
    "Scope",
    "TmplError",
    "Workspace",
    "build_function_table",
    "run_template",
    "substitute",
]
