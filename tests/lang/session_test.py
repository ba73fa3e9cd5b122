import io
import os
import tempfile
import unittest

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


def session(cmd_line=False, path="prog.lox", **kwargs):
    error_handler = ErrorHandler(fatal=False, stream=io.StringIO(), color=False)
    return Session(error_handler, path, cmd_line=cmd_line, out=io.StringIO(), **kwargs)


class SessionTestCase(unittest.TestCase):

    def test_status(self):
        cases = {
            "print 1;": Session.OK,
            "": Session.OK,
            "print @;": Session.STATIC_ERROR,
            "print ;": Session.STATIC_ERROR,
            "return 1;": Session.STATIC_ERROR,
            "print 1 / 0;": Session.RUNTIME_ERROR,
        }
        for case, status in cases.items():
            self.assertEqual(status, session().run(case), case)

    def test_static_error_runs_nothing(self):
        sess = session()
        self.assertEqual(Session.STATIC_ERROR, sess.run("print 1;\n{ var a = a; }"))
        self.assertEqual("", sess.out.getvalue())

    def test_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "prog.lox")
            with open(path, "w", encoding="utf-8") as file:
                file.write('var s = "hello";\nprint s + " world";\n')

            sess = session(path=path)
            self.assertEqual(Session.OK, sess.run_file())
            self.assertEqual("hello world\n", sess.out.getvalue())

    def test_missing_file(self):
        sess = session(path="no/such/file.lox")
        self.assertEqual(Session.IO_ERROR, sess.run_file())
        self.assertIn("'no/such/file.lox' could not be opened", sess.error_handler.stream.getvalue())

    def test_diagnostics_name_file(self):
        sess = session(path="prog.lox")
        sess.run("print nil + 1;")
        self.assertIn("prog.lox:1 runtime error at '+': Invalid values in + operator.",
                      sess.error_handler.stream.getvalue())

    def test_command_line_keeps_state(self):
        sess = session(cmd_line=True, path=Session.SH_FILE)
        self.assertFalse(sess.error_handler.fatal)

        statuses = [sess.run(line) for line in ["var a = 1;", "print a + ;", "fun f() { return a * 2; }",
                                                "print f();", "print b;", "print a;"]]
        self.assertEqual([Session.OK, Session.STATIC_ERROR, Session.OK, Session.OK, Session.RUNTIME_ERROR,
                          Session.OK], statuses)
        self.assertEqual("2\n1\n", sess.out.getvalue())
        # flags are reset between entries
        self.assertFalse(sess.error_handler.had_error)
        self.assertFalse(sess.error_handler.had_runtime_error)

    def test_command_line_diagnostics_have_no_path(self):
        sess = session(cmd_line=True, path=Session.SH_FILE)
        sess.run("print nil + 1;")
        self.assertIn("[line 1] runtime error", sess.error_handler.stream.getvalue())

    def test_debug_dumps(self):
        sess = session(show_tokens=True, show_ast=True)
        sess.run("print 1;")
        lines = sess.out.getvalue().splitlines()
        self.assertEqual(["PRINT 'print' None (line 1)", "NUMBER '1' 1.0 (line 1)", "SEMICOLON ';' None (line 1)",
                          "EOF '' None (line 1)", "(print 1)", "1"], lines)

    def test_preprocess_line(self):
        cases = [
            (("print 1;", ""), ("print 1;", False)),
            (("fun f() {", ""), ("fun f() {", True)),
            (("print 1;", "fun f() {"), ("fun f() {\nprint 1;", True)),
            (("}", "fun f() {\nprint 1;"), ("fun f() {\nprint 1;\n}", False)),
            (("{ {", ""), ("{ {", True)),
        ]
        for args, result in cases:
            self.assertEqual(result, Session.preprocess_line(*args), args)


class ShellTestCase(unittest.TestCase):

    def run_shell(self, lines):
        sess = session(cmd_line=True, path=Session.SH_FILE)
        stdout = io.StringIO()
        shell = Shell(sess, stdin=io.StringIO("\n".join(lines) + "\n"), stdout=stdout)
        shell.use_rawinput = False
        shell.cmdloop()
        return sess, stdout.getvalue()

    def test_entries(self):
        sess, __ = self.run_shell(["var a = 2;", "print a * 3;", "exit", "print 1;"])
        self.assertEqual("6\n", sess.out.getvalue())

    def test_continuation(self):
        sess, stdout = self.run_shell(["fun f(x) {", "  return x + 1;", "}", "print f(1);"])
        self.assertEqual("2\n", sess.out.getvalue())
        self.assertIn(Shell.secondary_prompt, stdout)

    def test_errors_do_not_stop_shell(self):
        sess, __ = self.run_shell(["print 1 / 0;", "print @;", "", "print 3;"])
        self.assertEqual("3\n", sess.out.getvalue())
        self.assertIn("Can't divide by zero.", sess.error_handler.stream.getvalue())

    def test_help(self):
        __, stdout = self.run_shell(["help"])
        self.assertIn("Welcome to the lox interpreter!", stdout)

    def test_exit_is_a_command_only_alone(self):
        sess, __ = self.run_shell(["var exit = 1;", "print exit;"])
        self.assertEqual("1\n", sess.out.getvalue())


if __name__ == '__main__':
    unittest.main()
