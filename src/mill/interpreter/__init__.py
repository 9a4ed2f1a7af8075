"""mill interpreter package."""

from .interpreter import Interpreter as Interpreter, InterpreterError as InterpreterError
from .core import State as State
