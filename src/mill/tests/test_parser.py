"""Tests for the mill parser."""

import pytest
from mill.lexer import Lexer
from mill.parser import Parser, ParseError
from mill.errors import ParseErrorKind
from mill.ast_nodes import (
    ArrayLiteral,
    AssignStmt,
    BinaryExpr,
    BinaryOp,
    Block,
    BoolLiteral,
    BreakStmt,
    CallExpr,
    ContinueStmt,
    ExprStmt,
    FloatLiteral,
    ForInStmt,
    FunctionLiteral,
    Identifier,
    IdentifierTarget,
    IfStmt,
    IndexTarget,
    IntLiteral,
    LetStmt,
    LoopStmt,
    MapLiteral,
    MemberExpr,
    MemberTarget,
    NullLiteral,
    Program,
    ReturnStmt,
    StringLiteral,
    UnaryExpr,
    UnaryOp,
    WhileStmt,
)


def parse(source: str) -> Program:
    return Parser(Lexer(source)).parse()


def parse_expr(source: str):
    return Parser(Lexer(source)).parse_expression()


def parse_stmt(source: str):
    prog = parse(source)
    assert len(prog.statements) == 1
    return prog.statements[0]


# --- Literals ---

class TestLiterals:
    def test_int(self):
        assert parse_expr("42") == IntLiteral(value=42, line=1, col=1)

    def test_float(self):
        e = parse_expr("2.5")
        assert isinstance(e, FloatLiteral)
        assert e.value == 2.5

    def test_min_int_after_block(self):
        prog = parse("if true { } -2147483648")
        assert prog.result == IntLiteral(value=-2147483648, line=1, col=13)

    def test_min_int_magnitude_with_space(self):
        assert parse_expr("- 2147483648") == IntLiteral(value=-2147483648, line=1, col=1)

    def test_string(self):
        assert parse_expr('"hi"').value == "hi"

    def test_bool_and_null(self):
        assert parse_expr("true").value is True
        assert parse_expr("false").value is False
        assert isinstance(parse_expr("null"), NullLiteral)

    def test_array(self):
        e = parse_expr("[1, x, [2]]")
        assert isinstance(e, ArrayLiteral)
        assert len(e.elements) == 3
        assert isinstance(e.elements[1], Identifier)
        assert isinstance(e.elements[2], ArrayLiteral)

    def test_empty_array_and_trailing_comma(self):
        assert parse_expr("[]").elements == []
        assert len(parse_expr("[1, 2,]").elements) == 2

    def test_map(self):
        e = parse_expr('{1: "a", "k": [2]}')
        assert isinstance(e, MapLiteral)
        assert len(e.entries) == 2
        assert e.entries[0].key.value == 1
        assert isinstance(e.entries[1].value, ArrayLiteral)

    def test_empty_map(self):
        assert parse_expr("{}").entries == []

    def test_map_keys_are_expressions(self):
        e = parse_expr("{1 + 1: 2}")
        assert isinstance(e.entries[0].key, BinaryExpr)

    def test_function_literal(self):
        e = parse_expr("fn(a, b) { return a + b; }")
        assert isinstance(e, FunctionLiteral)
        assert e.params == ["a", "b"]
        assert isinstance(e.body[0], ReturnStmt)

    def test_function_no_params(self):
        e = parse_expr("fn() { }")
        assert e.params == []
        assert e.body == []


# --- Operators and precedence ---

class TestPrecedence:
    def test_mul_binds_tighter_than_add(self):
        e = parse_expr("1 + 2 * 3")
        assert e.op == BinaryOp.ADD
        assert e.right.op == BinaryOp.MUL

    def test_parentheses(self):
        e = parse_expr("(1 + 2) * 3")
        assert e.op == BinaryOp.MUL
        assert e.left.op == BinaryOp.ADD

    def test_left_associative(self):
        e = parse_expr("10 - 4 - 3")
        assert e.op == BinaryOp.SUB
        assert e.left.op == BinaryOp.SUB
        assert e.right.value == 3

    def test_comparison_below_arithmetic(self):
        e = parse_expr("a + 1 < b * 2")
        assert e.op == BinaryOp.LT
        assert e.left.op == BinaryOp.ADD
        assert e.right.op == BinaryOp.MUL

    def test_logic_lowest(self):
        e = parse_expr("a == 1 && b != 2 || c")
        assert e.op == BinaryOp.OR
        assert e.left.op == BinaryOp.AND
        assert e.left.left.op == BinaryOp.EQ

    def test_prefix_not(self):
        e = parse_expr("!true && false")
        assert e.op == BinaryOp.AND
        assert isinstance(e.left, UnaryExpr)
        assert e.left.op == UnaryOp.NOT

    def test_prefix_neg_binds_over_mul(self):
        e = parse_expr("-x * 2")
        assert e.op == BinaryOp.MUL
        assert e.left.op == UnaryOp.NEG

    def test_postfix_binds_over_prefix(self):
        e = parse_expr("-f(1)")
        assert isinstance(e, UnaryExpr)
        assert isinstance(e.operand, CallExpr)

    def test_member_binds_over_prefix(self):
        e = parse_expr("!m.flag")
        assert isinstance(e.operand, MemberExpr)
        assert e.operand.field == "flag"

    def test_minus_between_operands_is_binary(self):
        e = parse_expr("a-1")
        assert e.op == BinaryOp.SUB


# --- Postfix ---

class TestPostfix:
    def test_call(self):
        e = parse_expr("f(1, 2)")
        assert isinstance(e, CallExpr)
        assert e.callee == Identifier(name="f", line=1, col=1)
        assert len(e.args) == 2

    def test_chained_calls(self):
        e = parse_expr("f(1)(2)")
        assert isinstance(e, CallExpr)
        assert isinstance(e.callee, CallExpr)

    def test_index(self):
        e = parse_expr("xs[0]")
        assert e.op == BinaryOp.INDEX
        assert e.left.name == "xs"

    def test_member_chain(self):
        e = parse_expr("a.b.c")
        assert e.field == "c"
        assert e.obj.field == "b"
        assert e.obj.obj.name == "a"

    def test_mixed_chain(self):
        e = parse_expr("a.b[0](x).c")
        assert isinstance(e, MemberExpr)
        assert isinstance(e.obj, CallExpr)
        assert e.obj.callee.op == BinaryOp.INDEX

    def test_immediately_called_function(self):
        e = parse_expr("fn(a) { return a; }(1)")
        assert isinstance(e.callee, FunctionLiteral)


# --- Statements ---

class TestStatements:
    def test_let_with_initializer(self):
        s = parse_stmt("let x = 5;")
        assert isinstance(s, LetStmt)
        assert s.name == "x"
        assert s.initializer.value == 5

    def test_let_without_initializer(self):
        s = parse_stmt("let x;")
        assert isinstance(s.initializer, NullLiteral)

    def test_assign_identifier(self):
        s = parse_stmt("x = 1;")
        assert isinstance(s, AssignStmt)
        assert s.target == IdentifierTarget(name="x", line=1, col=1)

    def test_assign_index(self):
        s = parse_stmt("xs[i + 1] = 2;")
        assert isinstance(s.target, IndexTarget)
        assert s.target.obj.name == "xs"
        assert s.target.index.op == BinaryOp.ADD

    def test_assign_member(self):
        s = parse_stmt("m.k = 1;")
        assert isinstance(s.target, MemberTarget)
        assert s.target.field == "k"

    def test_assign_nested_place(self):
        s = parse_stmt("m.xs[1] = 5;")
        assert isinstance(s.target, IndexTarget)
        assert isinstance(s.target.obj, MemberExpr)

    def test_expression_statement(self):
        s = parse_stmt("f(1);")
        assert isinstance(s, ExprStmt)
        assert isinstance(s.expr, CallExpr)

    def test_block(self):
        s = parse_stmt("{ let x = 1; { x; } }")
        assert isinstance(s, Block)
        assert isinstance(s.statements[1], Block)

    def test_return_without_value(self):
        s = parse_stmt("return;")
        assert isinstance(s.value, NullLiteral)

    def test_break_continue(self):
        s = parse_stmt("loop { break; continue; }")
        assert isinstance(s, LoopStmt)
        assert isinstance(s.body[0], BreakStmt)
        assert isinstance(s.body[1], ContinueStmt)

    def test_while(self):
        s = parse_stmt("while i < 3 { i = i + 1; }")
        assert isinstance(s, WhileStmt)
        assert s.condition.op == BinaryOp.LT

    def test_for(self):
        s = parse_stmt("for x in [1, 2] { f(x); }")
        assert isinstance(s, ForInStmt)
        assert s.var_name == "x"
        assert isinstance(s.iterable, ArrayLiteral)

    def test_if_chain(self):
        s = parse_stmt("if a { } else if b { x; } else { y; }")
        assert isinstance(s, IfStmt)
        assert len(s.branches) == 3
        assert s.branches[1].condition.name == "b"
        assert isinstance(s.branches[2].condition, BoolLiteral)
        assert s.branches[2].condition.value is True

    def test_if_without_else(self):
        s = parse_stmt("if a { }")
        assert len(s.branches) == 1

    def test_positions_recorded(self):
        prog = parse("let x = 1;\n  x = 2;")
        assert (prog.statements[1].line, prog.statements[1].col) == (2, 3)


# --- Program result ---

class TestProgramResult:
    def test_trailing_expression_is_result(self):
        prog = parse("let x = 1; x + 1")
        assert len(prog.statements) == 1
        assert prog.result.op == BinaryOp.ADD

    def test_terminated_expression_is_not_result(self):
        prog = parse("1;")
        assert prog.result is None
        assert isinstance(prog.statements[0], ExprStmt)

    def test_empty_program(self):
        prog = parse("")
        assert prog.statements == []
        assert prog.result is None

    def test_filename_recorded(self):
        prog = Parser(Lexer("1", "main.mill")).parse()
        assert prog.source_file == "main.mill"


# --- Errors ---

class TestErrors:
    def test_let_missing_identifier(self):
        with pytest.raises(ParseError) as exc:
            parse("let = 5;")
        err = exc.value
        assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
        assert err.line == 1
        assert err.message == "Expected identifier, found symbol '='"
        assert err.expected == "identifier"
        assert err.found == "symbol '='"

    def test_error_cites_line_and_stops(self):
        with pytest.raises(ParseError) as exc:
            parse("let x = 1;\nlet = 5;\nlet 7;")
        assert exc.value.line == 2

    def test_let_missing_semicolon(self):
        with pytest.raises(ParseError, match="Expected semicolon or initializer, found end of file"):
            parse("let x")

    def test_missing_semicolon_in_block(self):
        with pytest.raises(ParseError, match=r"Expected ';' or '=', found symbol '}'"):
            parse("{ 1 }")

    def test_operand_after_operand(self):
        with pytest.raises(ParseError, match="Expected operator or end of expression, found integer '2'"):
            parse("1 2")

    def test_unary_plus_rejected(self):
        with pytest.raises(ParseError, match="Expected start of expression, found symbol '\\+'"):
            parse_expr("+1")

    def test_unterminated_block(self):
        with pytest.raises(ParseError) as exc:
            parse("{ let x = 1;")
        assert exc.value.kind == ParseErrorKind.UNTERMINATED_BLOCK

    def test_unterminated_map(self):
        with pytest.raises(ParseError, match="Expected closing curly bracket, found end of file"):
            parse_expr("{")
        with pytest.raises(ParseError, match="Expected comma or closing curly bracket"):
            parse_expr("{1: 2")

    def test_map_missing_colon(self):
        with pytest.raises(ParseError, match="Expected colon, found symbol ';'"):
            parse_expr("{1; 2}")

    def test_unclosed_call(self):
        with pytest.raises(ParseError, match="Expected closing parenthesis, found end of file"):
            parse_expr("f(1")

    def test_unclosed_index(self):
        with pytest.raises(ParseError, match="Expected closing square bracket"):
            parse_expr("a[1")

    @pytest.mark.parametrize("source", ["1 + 2 = 3;", "f() = 3;", "(a) + b = 1;"])
    def test_not_assignable(self, source):
        with pytest.raises(ParseError) as exc:
            parse(source)
        assert exc.value.kind == ParseErrorKind.EXPRESSION_NOT_ASSIGNABLE

    def test_function_param_must_be_identifier(self):
        with pytest.raises(ParseError, match="Expected identifier, found integer '1'"):
            parse_expr("fn(1) { }")

    def test_function_requires_block(self):
        with pytest.raises(ParseError, match="Expected block"):
            parse_expr("fn(a) a")

    def test_for_requires_in(self):
        with pytest.raises(ParseError, match="Expected keyword 'in'"):
            parse("for x of xs { }")

    def test_parse_expression_rejects_trailing_tokens(self):
        with pytest.raises(ParseError, match="found symbol ';'"):
            parse_expr("1;")

    def test_min_int_magnitude_as_operand_too_large(self):
        with pytest.raises(ParseError) as exc:
            parse_expr("x - 2147483648")
        assert exc.value.kind == ParseErrorKind.INVALID_INTEGER_LITERAL
        assert exc.value.message == "Integer literal too large (2147483648)"
        assert exc.value.col == 5

    def test_lexer_errors_surface(self):
        with pytest.raises(ParseError) as exc:
            parse("let x = 1 @ 2;")
        assert exc.value.kind == ParseErrorKind.UNEXPECTED_CHARACTER


class TestEntryPoints:
    def test_parse_statement_consumes_one(self):
        parser = Parser(Lexer("let a = 1; let b = 2;"))
        first = parser.parse_statement()
        second = parser.parse_statement()
        assert (first.name, second.name) == ("a", "b")

    def test_parse_block(self):
        block = Parser(Lexer("{ let a = 1; a; }")).parse_block()
        assert isinstance(block, Block)
        assert len(block.statements) == 2

    def test_statement_needs_semicolon(self):
        with pytest.raises(ParseError, match="Expected ';' or '=', found end of file"):
            Parser(Lexer("a")).parse_statement()
