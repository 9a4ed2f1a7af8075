"""Statement execution: declarations, assignments, blocks, branches, loops."""

from ..ast_nodes import (
    AssignStmt, Block, BreakStmt, ContinueStmt, ExprStmt, ForInStmt,
    IdentifierTarget, IfStmt, IndexTarget, LetStmt, LoopStmt, MemberTarget,
    ReturnStmt, WhileStmt,
)
from ..errors import ErrorKind, InterpreterError
from .core import BREAK, CONTINUE, NORMAL, ControlFlow, Signal
from .values import ArrayValue, BoolValue, MapValue, StringValue


class StatementsMixin:

    def _execute(self, stmt) -> ControlFlow:
        if isinstance(stmt, LetStmt):
            self.state.ensure_undeclared(stmt.name, stmt.line, stmt.col)
            value = self.evaluate(stmt.initializer)
            self.state.declare(stmt.name, value, stmt.line, stmt.col)
            return NORMAL
        if isinstance(stmt, AssignStmt):
            self._execute_assign(stmt)
            return NORMAL
        if isinstance(stmt, ExprStmt):
            self.evaluate(stmt.expr)
            return NORMAL
        if isinstance(stmt, ReturnStmt):
            return ControlFlow(Signal.RETURN, self.evaluate(stmt.value))
        if isinstance(stmt, BreakStmt):
            return BREAK
        if isinstance(stmt, ContinueStmt):
            return CONTINUE
        if isinstance(stmt, Block):
            with self.state.frame():
                return self._execute_body(stmt.statements)
        if isinstance(stmt, IfStmt):
            return self._execute_if(stmt)
        if isinstance(stmt, LoopStmt):
            return self._execute_loop(stmt)
        if isinstance(stmt, WhileStmt):
            return self._execute_while(stmt)
        if isinstance(stmt, ForInStmt):
            return self._execute_for(stmt)
        raise TypeError(f"unknown statement node {type(stmt).__name__}")

    def _execute_body(self, statements) -> ControlFlow:
        """Run statements in order, stopping at the first non-normal signal."""
        for stmt in statements:
            flow = self._execute(stmt)
            if not flow.is_normal:
                return flow
        return NORMAL

    # ---- Assignment ----

    def _execute_assign(self, stmt: AssignStmt):
        value = self.evaluate(stmt.value)
        target = stmt.target

        if isinstance(target, IdentifierTarget):
            self.state.assign(target.name, value, target.line, target.col)
        elif isinstance(target, MemberTarget):
            container = self._resolve_place(target.obj)
            if not isinstance(container, MapValue):
                raise InterpreterError(ErrorKind.UNSUPPORTED_OPERATION,
                                       f"member assignment on {self._type_name(container)}",
                                       target.line, target.col)
            container.entries[StringValue(target.field)] = value
        elif isinstance(target, IndexTarget):
            container = self._resolve_place(target.obj)
            key = self.evaluate(target.index)
            self._store_index(container, key, value, target.line, target.col)
        else:
            raise TypeError(f"unknown assignment target {type(target).__name__}")

    # ---- Branches ----

    def _execute_if(self, stmt: IfStmt) -> ControlFlow:
        for branch in stmt.branches:
            if self._truth(branch.condition):
                with self.state.frame():
                    return self._execute_body(branch.body)
        return NORMAL

    def _truth(self, condition) -> bool:
        value = self.evaluate(condition)
        if not isinstance(value, BoolValue):
            raise InterpreterError(ErrorKind.EXPECTED_BOOL,
                                   f"got {self._type_name(value)}",
                                   condition.line, condition.col)
        return value.value

    # ---- Loops ----

    def _run_iteration(self, body, bind=None) -> ControlFlow:
        """Run one loop iteration in a fresh frame, optionally binding the loop variable."""
        with self.state.frame() as scope:
            if bind is not None:
                name, value = bind
                scope.variables[name] = value
            return self._execute_body(body)

    def _execute_loop(self, stmt: LoopStmt) -> ControlFlow:
        start_depth = self.state.depth
        while True:
            flow = self._run_iteration(stmt.body)
            if flow.signal is Signal.BREAK:
                break
            if flow.signal is Signal.RETURN:
                return flow
        self._check_depth(start_depth)
        return NORMAL

    def _execute_while(self, stmt: WhileStmt) -> ControlFlow:
        start_depth = self.state.depth
        while self._truth(stmt.condition):
            flow = self._run_iteration(stmt.body)
            if flow.signal is Signal.BREAK:
                break
            if flow.signal is Signal.RETURN:
                return flow
        self._check_depth(start_depth)
        return NORMAL

    def _execute_for(self, stmt: ForInStmt) -> ControlFlow:
        start_depth = self.state.depth
        iterable = self.evaluate(stmt.iterable)

        if isinstance(iterable, ArrayValue):
            items = iterable.elements
        elif isinstance(iterable, MapValue):
            items = list(iterable.entries)
        elif isinstance(iterable, StringValue):
            items = [StringValue(ch) for ch in iterable.value]
        else:
            raise InterpreterError(ErrorKind.UNSUPPORTED_OPERATION,
                                   f"cannot iterate over {self._type_name(iterable)}",
                                   stmt.iterable.line, stmt.iterable.col)

        for item in items:
            flow = self._run_iteration(stmt.body, bind=(stmt.var_name, item.clone()))
            if flow.signal is Signal.BREAK:
                break
            if flow.signal is Signal.RETURN:
                return flow
        self._check_depth(start_depth)
        return NORMAL

    def _check_depth(self, expected: int):
        if self.state.depth != expected:
            raise RuntimeError(
                f"scope stack unbalanced after loop: expected depth {expected}, "
                f"got {self.state.depth}")
