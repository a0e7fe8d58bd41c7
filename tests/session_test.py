import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from monkey.lang.error import ErrorHandler, GenericException, ParseError
from monkey.lang.session import Session
from monkey.lang.shell import Shell
from monkey.main import main
from monkey.runtime.object import Error, Integer


def interactive_session():
    return Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)


class SessionTestCase(unittest.TestCase):

    def test_preprocess_line(self):
        cases = {
            ("let x = 5;   ", ""): ("let x = 5;", False),
            ("let f = fn(x) {", ""): ("let f = fn(x) {", True),
            ("x }", "let f = fn(x) {"): ("let f = fn(x) {\nx }", False),
            ("add(1,", ""): ("add(1,", True),
            ("", ""): ("", False),
        }
        for (line, prev), expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(line, prev), line)

    def test_bindings_persist(self):
        sess = interactive_session()
        self.assertFalse(sess.error_handler.fatal)

        sess.add("let add = fn(a, b) { a + b };", 1)
        sess.run()
        self.assertIsNone(sess.pop())

        sess.add("let broken = 1 + true;", 2)
        sess.run()
        self.assertEqual(Error("type mismatch: INTEGER + BOOLEAN"), sess.pop())

        sess.add("let three = add(1, 2)", 3)
        sess.add("three * 2", 4)
        sess.run()
        self.assertEqual(Integer(6), sess.pop())
        self.assertEqual({}, sess.to_exec)

    def test_evaluation_error_is_a_value(self):
        sess = interactive_session()
        sess.add("5 + true", 1)
        sess.run()
        self.assertEqual(Error("type mismatch: INTEGER + BOOLEAN"), sess.pop())

    def test_parse_error(self):
        sess = interactive_session()
        with self.assertRaises(ParseError) as context:
            sess.add("let = 1; let y 2", 1)
        self.assertEqual(["expected next token to be IDENT, got = instead",
                          "no prefix parse function found for =",
                          "expected next token to be =, got INT instead"], context.exception.errors)
        self.assertEqual({}, sess.to_exec)

    def test_empty_source(self):
        self.assertRaises(ValueError, interactive_session().add, "   ", 1)

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE, False)

    def test_missing_file(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), "/nonexistent/file.mk", False)

    def test_file_session(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "program.mk")
            with open(path, "w") as file:
                file.write("let fact = fn(n) {\n  if (n < 2) { return 1; }\n  n * fact(n - 1)\n};\nfact(5)\n")

            sess = Session(ErrorHandler(), path, cmd_line=False)
            sess.run()
            self.assertEqual(Integer(120), sess.pop())

    def test_file_session_error_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "broken.mk")
            with open(path, "w") as file:
                file.write("let x = 1;\nx + y\n")

            sess = Session(ErrorHandler(), path, cmd_line=False)
            with self.assertRaises(GenericException) as context:
                sess.run()
            self.assertIn("identifier not found: y", context.exception.msg)
            self.assertEqual("identifier not found: y", context.exception.expr)

    def test_tokens_warns_on_illegal(self):
        sess = interactive_session()
        out = io.StringIO()
        with redirect_stdout(out):
            tokens = sess.tokens("a @ b")
        self.assertEqual(["a", "@", "b"], [token.literal for token in tokens])
        self.assertIn("illegal character", out.getvalue())


class ErrorHandlerTestCase(unittest.TestCase):

    def test_nonfatal_throw(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False):
                raise ParseError(["no prefix parse function found for )"], ")")
        self.assertIn("no prefix parse function found for )", out.getvalue())

    def test_fatal_throw_exits(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as context:
            with ErrorHandler(fatal=True):
                raise GenericException("'{}' could not be opened", "missing.mk", diagnosis=False)
        self.assertEqual(1, context.exception.code)
        self.assertIn("could not be opened", out.getvalue())

    def test_message_is_not_a_template(self):
        exception = GenericException("{}", "bad {0} and {}", diagnosis=False)
        self.assertEqual("bad {0} and {}", exception.expr)
        self.assertIn("bad {0} and {}", exception.msg)

    def test_recursion_error(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False):
                raise RecursionError()
        self.assertIn("maximum recursion depth exceeded", out.getvalue())

    def test_debug(self):
        out = io.StringIO()
        with redirect_stdout(out):
            ErrorHandler(debug=False).debug("program", "hidden")
            ErrorHandler(debug=True).debug("program", "(1 + 2)")
        self.assertNotIn("hidden", out.getvalue())
        self.assertIn("(1 + 2)", out.getvalue())


class ShellTestCase(unittest.TestCase):

    def run_lines(self, *lines):
        shell = Shell(interactive_session())
        out = io.StringIO()
        with redirect_stdout(out):
            for line in lines:
                shell.onecmd(line)
        return out.getvalue()

    def test_let_then_use(self):
        output = self.run_lines("let x = 5;", "x * 2")
        self.assertEqual("10\n", output)

    def test_failed_let_prints_its_error(self):
        output = self.run_lines("let a = nope;", "let b = 1;", "b")
        self.assertIn("ERROR: identifier not found: nope", output)
        self.assertTrue(output.endswith("\n1\n"))

    def test_display_forms(self):
        output = self.run_lines("true", "if (false) { 1 }", "fn(x) { x + 1 }")
        self.assertEqual("true\nnull\nfn(x) { (x + 1) }\n", output)

    def test_errors_do_not_stop_the_shell(self):
        output = self.run_lines("foobar", "let = 3", "1 + 1")
        self.assertIn("ERROR: identifier not found: foobar", output)
        self.assertIn("expected next token to be IDENT, got = instead", output)
        self.assertTrue(output.endswith("2\n"))

    def test_line_continuation(self):
        shell = Shell(interactive_session())
        out = io.StringIO()
        with redirect_stdout(out):
            shell.onecmd("let add = fn(a, b) {")
            self.assertEqual(Shell.secondary_prompt, shell.prompt)
            shell.onecmd("a + b };")
            self.assertEqual(Shell._tmp_prompt, shell.prompt)
            shell.onecmd("add(2, 3)")
        self.assertEqual("5\n", out.getvalue())

    def test_exit(self):
        self.assertTrue(Shell(interactive_session()).onecmd("exit"))


class MainTestCase(unittest.TestCase):

    def test_run_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "closure.mk")
            with open(path, "w") as file:
                file.write("let newAdder = fn(x) { fn(y) { x + y } };\nlet addTwo = newAdder(2);\naddTwo(40)\n")

            out = io.StringIO()
            with redirect_stdout(out):
                main([path])
            self.assertEqual("42\n", out.getvalue())

    def test_deep_recursion(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "countdown.mk")
            with open(path, "w") as file:
                file.write("let c = fn(n) { if (n < 1) { 0 } else { c(n - 1) } };\nc(500)\n")

            out = io.StringIO()
            with redirect_stdout(out):
                main([path])
            self.assertEqual("0\n", out.getvalue())

    def test_tokens_flag(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "tokens.mk")
            with open(path, "w") as file:
                file.write("x != 1")

            out = io.StringIO()
            with redirect_stdout(out):
                main([path, "--tokens"])
            lines = [line.split() for line in out.getvalue().splitlines()]
            self.assertEqual([["IDENT", "x"], ["NOT_EQ", "!="], ["INT", "1"]], lines)


if __name__ == '__main__':
    unittest.main()
