"""Interpreter core: scope stack, control-flow signals, and orchestration."""

from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from ..ast_nodes import Program
from ..errors import ErrorKind, InterpreterError
from .values import NULL, Value

logger = logging.getLogger(__name__)


class Signal(Enum):
    NORMAL = auto()
    BREAK = auto()
    CONTINUE = auto()
    RETURN = auto()


@dataclass(frozen=True)
class ControlFlow:
    """Outcome of executing a statement, consumed by the nearest enclosing
    loop, function call, or the top level."""
    signal: Signal
    value: Optional[Value] = None

    @property
    def is_normal(self) -> bool:
        return self.signal is Signal.NORMAL


NORMAL = ControlFlow(Signal.NORMAL)
BREAK = ControlFlow(Signal.BREAK)
CONTINUE = ControlFlow(Signal.CONTINUE)


@dataclass
class Scope:
    variables: dict[str, Value] = field(default_factory=dict)


class State:
    """Ordered stack of scope frames; lookups walk innermost to outermost."""

    def __init__(self):
        self.frames: list[Scope] = []

    @property
    def depth(self) -> int:
        return len(self.frames)

    @property
    def current(self) -> Scope:
        return self.frames[-1]

    def push(self) -> Scope:
        scope = Scope()
        self.frames.append(scope)
        return scope

    def pop(self) -> Scope:
        return self.frames.pop()

    @contextmanager
    def frame(self):
        """Push a frame for the duration of the block, popping it on any exit."""
        depth = self.depth
        self.push()
        try:
            yield self.current
        finally:
            self.pop()
            if self.depth != depth:
                raise RuntimeError(
                    f"scope stack unbalanced: expected depth {depth}, got {self.depth}")

    def ensure_undeclared(self, name: str, line: int = 0, col: int = 0):
        if name in self.current.variables:
            raise InterpreterError(ErrorKind.REDECLARATION, f"'{name}'", line, col)

    def declare(self, name: str, value: Value, line: int = 0, col: int = 0):
        self.ensure_undeclared(name, line, col)
        self.current.variables[name] = value

    def owner(self, name: str, line: int = 0, col: int = 0) -> Scope:
        for scope in reversed(self.frames):
            if name in scope.variables:
                return scope
        raise InterpreterError(ErrorKind.UNKNOWN_IDENTIFIER, f"'{name}'", line, col)

    def lookup(self, name: str, line: int = 0, col: int = 0) -> Value:
        """Return the stored value itself (callers clone before handing it out)."""
        return self.owner(name, line, col).variables[name]

    def assign(self, name: str, value: Value, line: int = 0, col: int = 0):
        self.owner(name, line, col).variables[name] = value


class InterpreterBase:
    def __init__(self, state: Optional[State] = None):
        self.state = state if state is not None else State()

    @property
    def globals(self) -> dict[str, Value]:
        return self.state.frames[0].variables if self.state.frames else {}

    def run(self, program: Program) -> Value:
        """Execute a program and return the value of its result expression.

        The global frame is pushed on first use and kept afterwards so that
        bindings stay inspectable.
        """
        if not self.state.frames:
            self.state.push()
        logger.debug("running %d statements from %s", len(program.statements),
                     program.source_file or "<source>")
        for stmt in program.statements:
            flow = self._execute(stmt)
            if not flow.is_normal:
                raise InterpreterError(
                    ErrorKind.UPWARD_CONTROL_FLOW_REACHED_TOP_LEVEL,
                    flow.signal.name.lower(), stmt.line, stmt.col)
        if program.result is None:
            return NULL
        return self.evaluate(program.result)
