import io
import unittest

from lox.grammar import ast
from lox.grammar.printer import print_ast
from lox.grammar.tokens import TokenKind
from lox.lang.error import ErrorHandler, ParseError
from lox.lang.lexical import scan
from lox.lang.parser import Parser, parse


def parse_source(source):
    error_handler = ErrorHandler(fatal=False, stream=io.StringIO(), color=False)
    tokens, __ = scan(source, error_handler)
    statements, had_error = parse(tokens, error_handler)
    return statements, had_error, error_handler


def render(source):
    statements, had_error, __ = parse_source(source)
    assert not had_error, source
    return " ".join(print_ast(stmt) for stmt in statements)


class ParserTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "1 + 2 * 3;": "(; (+ 1 (* 2 3)))",
            "(1 + 2) * 3;": "(; (* (group (+ 1 2)) 3))",
            "1 - 2 - 3;": "(; (- (- 1 2) 3))",
            "-1 < 2 == !false;": "(; (== (< (- 1) 2) (! false)))",
            "a or b and c;": "(; (or a (and b c)))",
            "a = b = 3;": "(; (= a (= b 3)))",
            "f(1)(2, x);": "(; (call (call f 1) 2 x))",
            "f();": "(; (call f))",
            "!!true;": "(; (! (! true)))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_statements(self):
        cases = {
            "print 1;": "(print 1)",
            "var x;": "(var x)",
            "var x = nil;": "(var x nil)",
            '{ var s = "hi"; print s; }': '(block (var s "hi") (print s))',
            "if (a) print 1; else print 2;": "(if a (print 1) (print 2))",
            "if (a) if (b) print 1; else print 2;": "(if a (if b (print 1) (print 2)))",
            "while (true) break;": "(while true (break))",
            "fun add(a, b) { return a + b; }": "(fun add (a b) (return (+ a b)))",
            "fun f() { return; }": "(fun f () (return))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_for_desugars_to_while(self):
        cases = {
            "for (var i = 0; i < 3; i = i + 1) print i;":
                "(block (var i 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))",
            "for (;;) break;": "(while true (break))",
            "for (x = 0; x < 1;) print x;": "(block (; (= x 0)) (while (< x 1) (print x)))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_anonymous_functions(self):
        self.assertEqual("(var f (fun (x) (return x)))", render("var f = fun (x) { return x; };"))
        self.assertEqual("(; (call (fun () (print 1))))", render("fun () { print 1; }();"))

        statements, __, __ = parse_source("fun (a) {};")
        self.assertIsInstance(statements[0], ast.ExprStmt)
        self.assertIsInstance(statements[0].expression, ast.FunctionExpr)

    def test_node_shapes(self):
        statements, __, __ = parse_source("if (x) print 1;\nwhile (y) {}")
        self.assertIsInstance(statements[0], ast.If)
        self.assertIs(TokenKind.IF, statements[0].keyword.kind)
        self.assertIsInstance(statements[1], ast.While)
        self.assertEqual(2, statements[1].keyword.line)

        statements, __, __ = parse_source("f(a);")
        self.assertIs(TokenKind.RIGHT_PAREN, statements[0].expression.paren.kind)

    def test_errors(self):
        cases = {
            "print 1": "Expect ';' after value.",
            "1 +;": "Expect expression.",
            "var 3 = 1;": "Expect variable name.",
            "(1 + 2;": "Expect ')' after expression.",
            "if 1) print 1;": "Expect '(' after 'if'.",
            "{ print 1;": "Expect '}' after block.",
            "fun f(1) {}": "Expect parameter name.",
            "1 = 2;": "Invalid assignment target.",
            "break": "Expect ';' after 'break'.",
        }
        for case, msg in cases.items():
            __, had_error, error_handler = parse_source(case)
            self.assertTrue(had_error, case)
            self.assertIsInstance(error_handler.errors[0], ParseError, case)
            self.assertEqual(msg, error_handler.errors[0].msg, case)

    def test_error_at_end(self):
        __, __, error_handler = parse_source("print 1")
        self.assertEqual("[line 1] error at end: Expect ';' after value.", str(error_handler.errors[0]))

    def test_synchronize(self):
        statements, had_error, error_handler = parse_source("var = 1;\nprint 2;\nvar x = ;\nprint 3;")
        self.assertTrue(had_error)
        self.assertEqual(2, len(error_handler.errors))
        self.assertEqual(["(print 2)", "(print 3)"], [print_ast(stmt) for stmt in statements])

    def test_invalid_assignment_is_not_fatal(self):
        statements, had_error, __ = parse_source("a + b = c; print 1;")
        self.assertTrue(had_error)
        self.assertEqual(2, len(statements))

    def test_argument_limit(self):
        args = ", ".join(["1"] * Parser.MAX_ARGS)
        self.assertFalse(parse_source(f"f({args});")[1])

        args = ", ".join(["1"] * (Parser.MAX_ARGS + 1))
        statements, had_error, error_handler = parse_source(f"f({args});")
        self.assertTrue(had_error)
        self.assertEqual("Can't have more than 127 arguments.", error_handler.errors[0].msg)
        self.assertEqual(1, len(statements))

        params = ", ".join(f"p{i}" for i in range(Parser.MAX_ARGS + 1))
        __, had_error, error_handler = parse_source(f"fun f({params}) {{}}")
        self.assertTrue(had_error)
        self.assertEqual("Can't have more than 127 parameters.", error_handler.errors[0].msg)


if __name__ == '__main__':
    unittest.main()
