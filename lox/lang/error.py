"""Error handling for the lox language.

Language errors come in four tiers: lexical (ScanError), syntax (ParseError), resolution (ResolveError) and runtime
(LoxRuntimeError). None of them escape the pipeline on their own: every stage reports them to an ErrorHandler, which
records them, prints them and keeps the flags the driver uses to pick an exit code. If another type of error makes it
all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from lox.grammar.tokens import TokenKind


class LoxError(Exception):
    """Templates a lox error message. token is the offending token, if there is one; line is taken from it unless
    given explicitly (lexical errors have a line but no token).
    """

    def __init__(self, msg, token=None, line=None):
        super().__init__(msg)
        self.msg = msg
        self.token = token
        self.line = line if line is not None else (token.line if token is not None else 0)

    @property
    def where(self):
        """Human-readable location of the offending token."""
        if self.token is None:
            return ""
        if self.token.kind is TokenKind.EOF:
            return " at end"
        return f" at '{self.token.lexeme}'"

    def __str__(self):
        return f"[line {self.line}] error{self.where}: {self.msg}"


class StaticError(LoxError):
    """Any error found before the program runs. Presence of one means exit code 65."""


class ScanError(StaticError):
    """Lexical error: unexpected character, unterminated string, bad numeral."""

    def __init__(self, msg, line, lexeme=""):
        super().__init__(msg, line=line)
        self.lexeme = lexeme  # used to highlight the offending text


class ParseError(StaticError):
    """Syntax error. Raised inside the parser to unwind to the nearest declaration, which synchronizes."""


class ResolveError(StaticError):
    """Static resolution error, e.g. reading a local variable in its own initializer."""


class LoxRuntimeError(LoxError):
    """Error raised while executing a program. Presence of one means exit code 70."""


class ErrorHandler:
    """Sink for lox errors. Can also be used as a context manager that reports custom lox errors and turns stray
    Python errors into internal error messages.
    """
    ERROR = "red"
    RUNTIME = "magenta"

    EXIT_STATIC = 65
    EXIT_RUNTIME = 70
    EXIT_INTERNAL = 1

    def __init__(self, fatal=True, stream=None, color=True):
        self.fatal = fatal
        self.stream = stream  # defaults to sys.stderr at print time
        self.color = color

        self.path = None
        self.lines = []

        self.errors = []
        self.had_error = False
        self.had_runtime_error = False

    def register_source(self, path, source):
        """Registers source text so diagnostics can quote the offending line."""
        self.path = path
        self.lines = source.splitlines()

    def reset(self):
        """Clears flags and recorded errors. Called between shell entries."""
        self.errors = []
        self.had_error = False
        self.had_runtime_error = False

    def error(self, error):
        """Records and prints a static (lexical, syntax or resolution) error."""
        self.errors.append(error)
        self.had_error = True
        self._print(self.format(error))

    def runtime_error(self, error):
        """Records and prints a runtime error."""
        self.errors.append(error)
        self.had_runtime_error = True
        self._print(self.format(error, runtime=True))

    def _colored(self, text, color=None, attrs=None):
        if not self.color:
            return text
        return colored(text, color, attrs=attrs)

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def format(self, error, runtime=False):
        """Returns error's message, with location and (if the source line is known) a diagnosis."""
        color = ErrorHandler.RUNTIME if runtime else ErrorHandler.ERROR
        label = "runtime error" if runtime else "error"

        location = f"{self.path}:{error.line}" if self.path else f"[line {error.line}]"
        msg = self._colored(f"{location} ", attrs=["bold"])
        msg += self._colored(f"{label}{error.where}: ", color, attrs=["bold"]) + error.msg

        diagnosis = self.diagnose(error, color)
        if diagnosis:
            msg += "\n" + diagnosis
        return msg

    def diagnose(self, error, color=ERROR):
        """Returns the source line of error with the offending lexeme highlighted and underlined, or None if the line
        or the lexeme cannot be found.
        """
        if not 0 < error.line <= len(self.lines):
            return None

        if error.token is not None:
            expr = error.token.lexeme
        else:
            expr = getattr(error, "lexeme", "")
        line = self.lines[error.line - 1]

        start = line.find(expr) if expr else -1
        if start == -1:
            return None
        end = start + len(expr)

        diagnosis = "  " + line[:start]
        diagnosis += self._colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += self._colored("^" + "~" * (end - start - 1), color, attrs=["bold"])
        return diagnosis

    def throw(self, msg, internal=False, code=EXIT_INTERNAL):
        """Prints a fatal message outside of the normal error tiers, exiting if this handler is fatal."""
        error_msg = ""
        if internal:
            error_msg += self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + msg
        self._print(error_msg)

        if self.fatal:
            sys.exit(code)

    @property
    def exit_code(self):
        """Exit code implied by the errors reported so far."""
        if self.had_error:
            return ErrorHandler.EXIT_STATIC
        if self.had_runtime_error:
            return ErrorHandler.EXIT_RUNTIME
        return 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw("keyboard interrupt")
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.had_runtime_error = True
            self.throw("maximum recursion depth exceeded", code=ErrorHandler.EXIT_RUNTIME)
        elif exc_type is not None and issubclass(exc_type, LoxRuntimeError):
            self.runtime_error(exc_val)
            if self.fatal:
                sys.exit(ErrorHandler.EXIT_RUNTIME)
        elif exc_type is not None and issubclass(exc_type, StaticError):
            self.error(exc_val)
            if self.fatal:
                sys.exit(ErrorHandler.EXIT_STATIC)
        elif exc_type is not None:
            self.throw(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True)
            do_exit = True

        return not do_exit
