"""Session control for the lox language. Runs source text through the whole pipeline (scan, parse, resolve,
interpret), either once for a file or entry by entry in command-line mode.
"""

import sys

from lox.grammar.printer import print_ast
from lox.lang.error import ErrorHandler
from lox.lang.evaluator import Interpreter
from lox.lang.lexical import scan
from lox.lang.parser import parse
from lox.lang.resolver import resolve


class Session:
    """Governs a lox session. One Interpreter lives as long as the session, so in command-line mode each entry sees
    the globals defined by the entries before it.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    OK = 0
    STATIC_ERROR = ErrorHandler.EXIT_STATIC
    RUNTIME_ERROR = ErrorHandler.EXIT_RUNTIME
    IO_ERROR = ErrorHandler.EXIT_INTERNAL

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, out=None, show_tokens=False, show_ast=False):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.out = out

        self.show_tokens = show_tokens  # debug dumps, written before execution
        self.show_ast = show_ast

        self.interpreter = Interpreter(error_handler, out)

        if self.cmd_line:
            self.error_handler.fatal = False

    @staticmethod
    def preprocess_line(line, tmp_line=""):
        """Joins line onto tmp_line, the unfinished entry so far. Returns the joined text and whether the entry
        continues on the next line, which it does while opening braces outnumber closing ones.
        """
        if tmp_line:
            line = tmp_line + "\n" + line
        return line, line.count("{") > line.count("}")

    def run_file(self):
        """Reads and runs the file at self.path. Returns a status, as run does."""
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                source = file.read()
        except OSError:
            self.error_handler.throw(f"'{self.path}' could not be opened")
            return Session.IO_ERROR

        return self.run(source)

    def run(self, source):
        """Runs source through every stage. Stops after the first stage that reports a static error, in which case
        nothing is executed. Returns OK, STATIC_ERROR or RUNTIME_ERROR.
        """
        self.error_handler.reset()
        self.error_handler.register_source(None if self.cmd_line else self.path, source)

        tokens, had_error = scan(source, self.error_handler)
        if self.show_tokens:
            for token in tokens:
                self._debug(token)
        if had_error:
            return Session.STATIC_ERROR

        statements, had_error = parse(tokens, self.error_handler)
        if self.show_ast:
            for stmt in statements:
                self._debug(print_ast(stmt))
        if had_error:
            return Session.STATIC_ERROR

        if resolve(statements, self.interpreter, self.error_handler):
            return Session.STATIC_ERROR

        if not self.interpreter.interpret(statements):
            return Session.RUNTIME_ERROR
        return Session.OK

    def _debug(self, item):
        print(item, file=self.out if self.out is not None else sys.stdout)
