"""mill parser package."""

from .parser import Parser as Parser, ParseError as ParseError
