#!/usr/bin/env python3
"""mill: a small dynamically typed scripting language.

Usage: mill [input.mill] [--emit-tokens] [--emit-ast] [--verbose]
"""

import argparse
import logging
import os
import sys

from .lexer import Lexer, LexerError
from .parser import Parser, ParseError
from .interpreter import Interpreter, InterpreterError

logger = logging.getLogger(__name__)


def _format_error(source: str, filename: str, message: str,
                  line: int, col: int) -> str:
    """Format an error with source context and caret."""
    lines = source.split('\n')
    if line < 1 or line > len(lines):
        return f"error: {message}\n --> {filename}:{line}:{col}"
    # Undecodable bytes show as \xNN escapes
    source_line = lines[line - 1].encode("utf-8", "surrogateescape").decode(
        "utf-8", "backslashreplace")
    width = len(str(line))
    pad = " " * width
    caret_offset = max(col - 1, 0)
    caret = " " * caret_offset + "^"
    return (
        f"error: {message}\n"
        f" {pad}--> {filename}:{line}:{col}\n"
        f" {pad} |\n"
        f" {line} | {source_line}\n"
        f" {pad} | {caret}"
    )


def _exit_recursion_limit(stage: str, filename: str):
    print(f"error: recursion limit exceeded while {stage} {filename}", file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    argparser = argparse.ArgumentParser(description="mill interpreter")
    argparser.add_argument("input", nargs="?", default="test.mill",
                           help="Input .mill file (default: test.mill)")
    argparser.add_argument("--emit-tokens", action="store_true", help="Print token stream")
    argparser.add_argument("--emit-ast", action="store_true", help="Print AST")
    argparser.add_argument("--verbose", action="store_true",
                           help="Log interpreter activity to stderr")

    args = argparser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        stream=sys.stderr)

    # Read input
    try:
        with open(args.input, "rb") as f:
            # Stray bytes survive decoding so the lexer can report them
            source = f.read().decode("utf-8", errors="surrogateescape")
    except FileNotFoundError:
        print(f"Error: File '{args.input}' not found", file=sys.stderr)
        sys.exit(1)

    filename = os.path.basename(args.input)

    if args.emit_tokens:
        try:
            tokens = Lexer(source, filename).tokenize()
        except LexerError as e:
            print(_format_error(source, filename, e.message, e.line, e.col),
                  file=sys.stderr)
            sys.exit(1)
        for tok in tokens:
            print(tok)
        return

    # Lexing happens on demand inside the parser
    try:
        program = Parser(Lexer(source, filename)).parse()
    except ParseError as e:
        print(_format_error(source, filename, e.message, e.line, e.col),
              file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        _exit_recursion_limit("parsing", filename)

    if args.emit_ast:
        import pprint
        pprint.pprint(program)
        return

    logger.debug("parsed %d statements from %s", len(program.statements), filename)

    try:
        result = Interpreter().run(program)
    except InterpreterError as e:
        print(_format_error(source, filename, e.message, e.line, e.col),
              file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        _exit_recursion_limit("running", filename)

    print(result.display())


if __name__ == "__main__":
    main()
