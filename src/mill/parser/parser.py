"""Parser assembly: combines all parsing mixins into the final Parser class."""

from .core import ParserBase
from .statements import StatementsMixin
from .control_flow import ControlFlowMixin
from .expressions import ExpressionsMixin
from .primary import PrimaryMixin
from ..errors import ParseError


class Parser(
    PrimaryMixin,
    ExpressionsMixin,
    ControlFlowMixin,
    StatementsMixin,
    ParserBase,
):
    """Precedence-climbing expression parser over a recursive-descent
    statement parser for the mill language."""
    pass


__all__ = ["Parser", "ParseError"]
