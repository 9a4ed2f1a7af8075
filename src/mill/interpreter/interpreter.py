"""Interpreter assembly: combines all evaluation mixins into the final Interpreter class."""

from .core import InterpreterBase
from .expressions import ExpressionsMixin
from .operators import OperatorsMixin
from .statements import StatementsMixin
from ..errors import InterpreterError


class Interpreter(
    OperatorsMixin,
    ExpressionsMixin,
    StatementsMixin,
    InterpreterBase,
):
    """Tree-walking evaluator over a stack of scope frames."""
    pass


__all__ = ["Interpreter", "InterpreterError"]
