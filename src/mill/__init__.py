"""mill: a small dynamically typed scripting language."""

from typing import Optional

from .lexer import Lexer as Lexer, LexerError as LexerError
from .parser import Parser as Parser, ParseError as ParseError
from .interpreter import Interpreter as Interpreter, InterpreterError as InterpreterError


def parse(source: str, filename: Optional[str] = None):
    return Parser(Lexer(source, filename)).parse()


def run_source(source: str, filename: Optional[str] = None):
    """Parse and execute a whole program, returning its result value."""
    return Interpreter().run(parse(source, filename))


def evaluate_source(source: str):
    """Parse a single expression and evaluate it in a fresh global frame."""
    expr = Parser(Lexer(source)).parse_expression()
    interpreter = Interpreter()
    interpreter.state.push()
    return interpreter.evaluate(expr)
