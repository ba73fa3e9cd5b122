import io
import unittest

from lox.grammar import ast
from lox.lang.error import ErrorHandler, ResolveError
from lox.lang.lexical import scan
from lox.lang.parser import parse
from lox.lang.resolver import resolve


class RecordingInterpreter:
    """Stands in for the interpreter, keeping what the resolver tells it."""

    def __init__(self):
        self.locals = {}

    def resolve(self, expr, distance, slot):
        self.locals[expr.uid] = (distance, slot)


def resolve_source(source):
    error_handler = ErrorHandler(fatal=False, stream=io.StringIO(), color=False)
    tokens, __ = scan(source, error_handler)
    statements, had_error = parse(tokens, error_handler)
    assert not had_error, source

    interpreter = RecordingInterpreter()
    had_error = resolve(statements, interpreter, error_handler)
    return statements, interpreter.locals, had_error, error_handler


class ResolverTestCase(unittest.TestCase):

    def test_errors(self):
        cases = {
            "{ var a = a; }": "Can't read local variable in its own initializer.",
            "{ var a = 1; { var a = a; } }": "Can't read local variable in its own initializer.",
            "{ var a = 1; var a = 2; }": "Already a variable with this name in this scope.",
            "fun f(a, a) {}": "Already a variable with this name in this scope.",
            "return 1;": "Can't return from top-level code.",
            "{ return; }": "Can't return from top-level code.",
            "break;": "Can't break outside of a loop.",
            "while (true) { fun f() { break; } }": "Can't break outside of a loop.",
        }
        for case, msg in cases.items():
            __, __, had_error, error_handler = resolve_source(case)
            self.assertTrue(had_error, case)
            self.assertIsInstance(error_handler.errors[0], ResolveError, case)
            self.assertEqual(msg, error_handler.errors[0].msg, case)

    def test_allowed(self):
        should_pass = [
            "var a = 1; var a = 2;",  # globals may be redeclared
            "var a = a;",
            "fun f() { return 1; }",
            "var g = fun () { return; };",
            "while (true) { if (true) break; }",
            "for (;;) { { break; } }",
            "fun f() { while (true) { break; } }",
        ]
        for case in should_pass:
            self.assertFalse(resolve_source(case)[2], case)

    def test_globals_are_not_resolved(self):
        __, locals_, __, __ = resolve_source("var a = 1; print a; a = 2;")
        self.assertEqual({}, locals_)

    def test_addresses(self):
        statements, locals_, __, __ = resolve_source("{ var a = 1; var b = 2; { print b; a = 3; } }")
        inner = statements[0].statements[2].statements
        read_b = inner[0].expression
        assign_a = inner[1].expression
        self.assertEqual((1, 1), locals_[read_b.uid])
        self.assertEqual((1, 0), locals_[assign_a.uid])

    def test_function_addresses(self):
        source = "fun outer(x) { var y = x; fun inner() { return x + y; } return inner; }"
        statements, locals_, __, __ = resolve_source(source)
        body = statements[0].function.body

        read_x = body[0].initializer
        self.assertEqual((0, 0), locals_[read_x.uid])

        inner_return = body[1].function.body[0].value
        self.assertEqual((1, 0), locals_[inner_return.left.uid])
        self.assertEqual((1, 1), locals_[inner_return.right.uid])

        # inner itself took slot 2 of outer's scope
        self.assertEqual((0, 2), locals_[body[2].value.uid])

    def test_same_name_twice(self):
        statements, locals_, __, __ = resolve_source("{ var a = 1; print a + a; }")
        binary = statements[0].statements[1].expression
        self.assertIsInstance(binary, ast.Binary)
        self.assertNotEqual(binary.left.uid, binary.right.uid)
        self.assertEqual((0, 0), locals_[binary.left.uid])
        self.assertEqual((0, 0), locals_[binary.right.uid])


if __name__ == '__main__':
    unittest.main()
