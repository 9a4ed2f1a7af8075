"""Operator semantics: strictly typed per operand pair, plus indexing."""

import math

from ..ast_nodes import BinaryOp, UnaryOp
from ..errors import ErrorKind, InterpreterError
from .values import (
    ArrayValue, BoolValue, FloatValue, IntegerValue, MapValue, StringValue,
    Value, as_hashable, type_name, wrap_i32,
)

_COMPARISONS = {
    BinaryOp.LT: lambda a, b: a < b,
    BinaryOp.LT_EQ: lambda a, b: a <= b,
    BinaryOp.GT: lambda a, b: a > b,
    BinaryOp.GT_EQ: lambda a, b: a >= b,
}

_EQUALITY = {
    BinaryOp.EQ: lambda a, b: a == b,
    BinaryOp.NO_EQ: lambda a, b: a != b,
}


class OperatorsMixin:

    @staticmethod
    def _type_name(value: Value) -> str:
        return type_name(value)

    def _unsupported(self, description: str, node) -> InterpreterError:
        return InterpreterError(ErrorKind.UNSUPPORTED_OPERATION, description,
                                node.line, node.col)

    # ---- Unary ----

    def _unary_operation(self, operand: Value, node) -> Value:
        if node.op == UnaryOp.NOT and isinstance(operand, BoolValue):
            return BoolValue(not operand.value)
        if node.op == UnaryOp.NEG and isinstance(operand, IntegerValue):
            return IntegerValue(wrap_i32(-operand.value))
        if node.op == UnaryOp.NEG and isinstance(operand, FloatValue):
            return FloatValue(-operand.value)
        raise self._unsupported(f"{node.op.value}{self._type_name(operand)}", node)

    # ---- Binary ----

    def _binary_operation(self, lhs: Value, rhs: Value, node) -> Value:
        op = node.op

        if isinstance(lhs, IntegerValue) and isinstance(rhs, IntegerValue):
            result = self._integer_operation(lhs.value, rhs.value, node)
            if result is not None:
                return result

        elif isinstance(lhs, FloatValue) and isinstance(rhs, FloatValue):
            result = self._float_operation(lhs.value, rhs.value, op)
            if result is not None:
                return result

        elif isinstance(lhs, BoolValue) and isinstance(rhs, BoolValue):
            if op == BinaryOp.AND:
                return BoolValue(lhs.value and rhs.value)
            if op == BinaryOp.OR:
                return BoolValue(lhs.value or rhs.value)

        raise self._unsupported(
            f"{self._type_name(lhs)} {op.value} {self._type_name(rhs)}", node)

    def _integer_operation(self, a: int, b: int, node):
        op = node.op
        if op == BinaryOp.ADD:
            return IntegerValue(wrap_i32(a + b))
        if op == BinaryOp.SUB:
            return IntegerValue(wrap_i32(a - b))
        if op == BinaryOp.MUL:
            return IntegerValue(wrap_i32(a * b))
        if op in (BinaryOp.DIV, BinaryOp.MOD):
            if b == 0:
                raise InterpreterError(ErrorKind.DIVISION_BY_ZERO, "",
                                       node.line, node.col)
            # Truncating division; remainder takes the sign of the dividend
            quotient = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                quotient = -quotient
            if op == BinaryOp.DIV:
                return IntegerValue(wrap_i32(quotient))
            return IntegerValue(wrap_i32(a - quotient * b))
        if op in _COMPARISONS:
            return BoolValue(_COMPARISONS[op](a, b))
        if op in _EQUALITY:
            return BoolValue(_EQUALITY[op](a, b))
        return None

    @staticmethod
    def _float_operation(a: float, b: float, op: BinaryOp):
        if op == BinaryOp.ADD:
            return FloatValue(a + b)
        if op == BinaryOp.SUB:
            return FloatValue(a - b)
        if op == BinaryOp.MUL:
            return FloatValue(a * b)
        if op == BinaryOp.DIV:
            return FloatValue(_ieee_divide(a, b))
        if op in _COMPARISONS:
            return BoolValue(_COMPARISONS[op](a, b))
        return None

    # ---- Indexing ----

    def _load_index(self, container: Value, key: Value, line: int, col: int) -> Value:
        if isinstance(container, ArrayValue) and isinstance(key, IntegerValue):
            return container.elements[self._position(container.elements, key, line, col)]
        if isinstance(container, StringValue) and isinstance(key, IntegerValue):
            return StringValue(container.value[self._position(container.value, key, line, col)])
        if isinstance(container, MapValue):
            hashable = self._map_key(key, line, col)
            try:
                return container.entries[hashable]
            except KeyError:
                raise InterpreterError(ErrorKind.KEY_NOT_FOUND, hashable.display(),
                                       line, col) from None
        raise InterpreterError(
            ErrorKind.UNSUPPORTED_OPERATION,
            f"{self._type_name(container)}[{self._type_name(key)}]", line, col)

    def _store_index(self, container: Value, key: Value, value: Value, line: int, col: int):
        if isinstance(container, ArrayValue) and isinstance(key, IntegerValue):
            container.elements[self._position(container.elements, key, line, col)] = value
        elif isinstance(container, MapValue):
            container.entries[self._map_key(key, line, col)] = value
        else:
            raise InterpreterError(
                ErrorKind.UNSUPPORTED_OPERATION,
                f"{self._type_name(container)}[{self._type_name(key)}] = ...", line, col)

    @staticmethod
    def _position(sequence, key: IntegerValue, line: int, col: int) -> int:
        if not 0 <= key.value < len(sequence):
            raise InterpreterError(ErrorKind.INDEX_OUT_OF_BOUNDS,
                                   f"index {key.value}, length {len(sequence)}",
                                   line, col)
        return key.value

    def _map_key(self, key: Value, line: int, col: int):
        hashable = as_hashable(key)
        if hashable is None:
            raise InterpreterError(ErrorKind.MAP_KEY_NOT_HASHABLE,
                                   self._type_name(key), line, col)
        return hashable


def _ieee_divide(a: float, b: float) -> float:
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)
