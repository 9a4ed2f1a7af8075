"""Expression evaluation: literals, lookups, composites, calls, member access."""

import logging

from ..ast_nodes import (
    ArrayLiteral, BinaryExpr, BinaryOp, BoolLiteral, CallExpr, FloatLiteral,
    FunctionLiteral, Identifier, IntLiteral, MapLiteral, MemberExpr,
    NullLiteral, StringLiteral, UnaryExpr,
)
from ..errors import ErrorKind, InterpreterError
from .core import Signal
from .values import (
    NULL, ArrayValue, BoolValue, FloatValue, FunctionValue, IntegerValue,
    MapValue, StringValue, Value, as_hashable,
)

logger = logging.getLogger(__name__)


class ExpressionsMixin:

    def evaluate(self, expr) -> Value:
        if isinstance(expr, BoolLiteral):
            return BoolValue(expr.value)
        if isinstance(expr, NullLiteral):
            return NULL
        if isinstance(expr, IntLiteral):
            return IntegerValue(expr.value)
        if isinstance(expr, FloatLiteral):
            return FloatValue(expr.value)
        if isinstance(expr, StringLiteral):
            return StringValue(expr.value)
        if isinstance(expr, Identifier):
            return self.state.lookup(expr.name, expr.line, expr.col).clone()
        if isinstance(expr, ArrayLiteral):
            return ArrayValue([self.evaluate(e) for e in expr.elements])
        if isinstance(expr, MapLiteral):
            return self._evaluate_map(expr)
        if isinstance(expr, FunctionLiteral):
            return FunctionValue(tuple(expr.params), tuple(expr.body))
        if isinstance(expr, CallExpr):
            return self._evaluate_call(expr)
        if isinstance(expr, MemberExpr):
            return self._resolve_place(expr).clone()
        if isinstance(expr, UnaryExpr):
            return self._unary_operation(self.evaluate(expr.operand), expr)
        if isinstance(expr, BinaryExpr):
            if expr.op == BinaryOp.INDEX:
                return self._resolve_place(expr).clone()
            lhs = self.evaluate(expr.left)
            rhs = self.evaluate(expr.right)
            return self._binary_operation(lhs, rhs, expr)
        raise TypeError(f"unknown expression node {type(expr).__name__}")

    def _resolve_place(self, expr) -> Value:
        """Evaluate expr to the stored value itself when it names storage
        (variable, member, element), so that assignment can mutate it.

        Anything else evaluates to a fresh temporary.
        """
        if isinstance(expr, Identifier):
            return self.state.lookup(expr.name, expr.line, expr.col)
        if isinstance(expr, MemberExpr):
            container = self._resolve_place(expr.obj)
            return self._load_member(container, expr.field, expr.line, expr.col)
        if isinstance(expr, BinaryExpr) and expr.op == BinaryOp.INDEX:
            container = self._resolve_place(expr.left)
            key = self.evaluate(expr.right)
            return self._load_index(container, key, expr.line, expr.col)
        return self.evaluate(expr)

    # ---- Composites ----

    def _evaluate_map(self, expr: MapLiteral) -> MapValue:
        entries = {}
        for entry in expr.entries:
            key = self.evaluate(entry.key)
            value = self.evaluate(entry.value)
            hashable = as_hashable(key)
            if hashable is None:
                raise InterpreterError(ErrorKind.MAP_KEY_NOT_HASHABLE,
                                       self._type_name(key),
                                       entry.key.line, entry.key.col)
            entries[hashable] = value
        return MapValue(entries)

    def _load_member(self, container: Value, name: str, line: int, col: int) -> Value:
        if not isinstance(container, MapValue):
            raise InterpreterError(ErrorKind.UNSUPPORTED_OPERATION,
                                   f"member access '.{name}' on {self._type_name(container)}",
                                   line, col)
        try:
            return container.entries[StringValue(name)]
        except KeyError:
            raise InterpreterError(ErrorKind.KEY_NOT_FOUND, f'"{name}"', line, col) from None

    # ---- Calls ----

    def _evaluate_call(self, expr: CallExpr) -> Value:
        function = self.evaluate(expr.callee)
        if not isinstance(function, FunctionValue):
            raise InterpreterError(ErrorKind.EXPECTED_FUNCTION,
                                   f"got {self._type_name(function)}",
                                   expr.line, expr.col)
        if len(expr.args) != len(function.params):
            raise InterpreterError(
                ErrorKind.WRONG_ARGUMENT_COUNT,
                f"expected {len(function.params)}, got {len(expr.args)}",
                expr.line, expr.col)

        args = [self.evaluate(arg) for arg in expr.args]
        logger.debug("call %s at %d:%d", function.display(), expr.line, expr.col)

        with self.state.frame():
            for name, value in zip(function.params, args):
                self.state.declare(name, value, expr.line, expr.col)
            flow = self._execute_body(function.body)

        if flow.signal is Signal.RETURN:
            return flow.value
        if flow.signal in (Signal.BREAK, Signal.CONTINUE):
            raise InterpreterError(ErrorKind.LOOP_CONTROL_FLOW_REACHED_FUNCTION,
                                   flow.signal.name.lower(), expr.line, expr.col)
        return NULL
