"""Runtime values of the lox language.

A lox value is one of: nil (None), boolean (bool), number (float), string (str) or a callable (LoxCallable). No other
Python type ever reaches a lox program, and nothing is coerced between them.

This module also holds the two control signals statement execution can produce besides plain completion, BreakSignal
and ReturnSignal. They are returned, not raised, and are consumed by the enclosing loop and call respectively.
"""

import time
from abc import ABC, abstractmethod

from lox.grammar.tokens import numeral
from lox.lang.environment import Environment


class LoxCallable(ABC):
    """Superclass of everything a lox program can call."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable expects."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Calls this callable with arguments (a list of exactly arity() values). Returns a lox value."""


class LoxFunction(LoxCallable):
    """User function. closure is the Environment active where the function was defined (None at top level)."""

    def __init__(self, declaration, closure, name=None):
        self.declaration = declaration
        self.closure = closure
        self.name = name

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        # chained to the closure, not to the caller: scoping is lexical
        environment = Environment(self.closure)
        for argument in arguments:
            environment.define(argument)

        signal = interpreter.execute_block(self.declaration.body, environment)
        if isinstance(signal, ReturnSignal):
            return signal.value
        return None

    def __str__(self):
        return f"<fn {self.name}>" if self.name else "<fn>"

    def __repr__(self):
        return f"LoxFunction(name={self.name!r}, arity={self.arity()})"


class NativeFunction(LoxCallable):
    """Callable implemented in Python."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return "<native fn>"

    def __repr__(self):
        return f"NativeFunction(name={self.name!r}, arity={self._arity})"


def clock():
    """Milliseconds since the epoch."""
    return float(time.time_ns() // 1_000_000)


NATIVES = [NativeFunction("clock", 0, clock)]


class BreakSignal:
    """Execution of a `break`. Stops the innermost enclosing loop."""

    def __repr__(self):
        return "BreakSignal()"


BREAK = BreakSignal()


class ReturnSignal:
    """Execution of a `return`, carrying the returned value up to the call."""

    def __init__(self, value=None):
        self.value = value

    def __repr__(self):
        return f"ReturnSignal({self.value!r})"


def is_equal(left, right):
    """Value equality: nil equals only nil, and values of different types are never equal (so 1 != true)."""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    return type(left) is type(right) and left == right


def stringify(value):
    """Text shown by `print` for value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return numeral(value)
    return str(value)
