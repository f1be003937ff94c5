import contextlib
import io
import re
import sys
import unittest

from pseudocode.lang.error import (ErrorHandler, GenericException, IncompatibleTypeError, LexicalError, ParseError,
                                   UndefinedVariableError)
from pseudocode.runtime.scope import ValueType
from pseudocode.syntax.lexical import Token, TokenKind

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def plain(text):
    """text without terminal color codes."""
    return ANSI.sub("", text)


class GenericExceptionTestCase(unittest.TestCase):

    def test_message(self):
        cases = [
            (GenericException("keyboard interrupt"), "keyboard interrupt"),
            (GenericException("'{}' could not be opened", "a.pseudo"), "'a.pseudo' could not be opened"),
            (GenericException("{} and {}", ["a", 1]), "a and 1"),
            (UndefinedVariableError("total", 1, 1), "undefined variable 'total'"),
            (IncompatibleTypeError("y", ValueType.INTEGER, ValueType.STRING),
             "incompatible types: cannot assign string to 'y' of type integer"),
        ]
        for error, result in cases:
            self.assertEqual(result, str(error))
            self.assertEqual(result, error.plain)
            self.assertEqual(result, plain(error.msg))

    def test_parse_errors(self):
        error = ParseError("expected an expression", Token(TokenKind.EOF, "", 3, 4))
        self.assertEqual("expected an expression near 'end of input'", str(error))
        self.assertEqual((3, 4, 1), (error.line, error.column, error.width))

        error = LexicalError(Token(TokenKind.ERROR, '"abc', 1, 10))
        self.assertEqual("unterminated string literal near '\"abc'", str(error))
        self.assertEqual(4, error.width)

        error = LexicalError(Token(TokenKind.ERROR, "@", 1, 5))
        self.assertTrue(str(error).startswith("unexpected character"))

        # only the first line of a multi-line lexeme is quoted
        error = LexicalError(Token(TokenKind.ERROR, '"abc\nx = 1\nescribir x\n', 2, 10))
        self.assertEqual("unterminated string literal near '\"abc'", str(error))
        self.assertEqual(4, error.width)
        self.assertIn('\nx = 1', error.token.text)


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.stderr = io.StringIO()
        self.redirect = contextlib.redirect_stderr(self.stderr)
        self.redirect.__enter__()

    def tearDown(self):
        self.redirect.__exit__(None, None, None)

    def output(self):
        return plain(self.stderr.getvalue())

    def test_fatal(self):
        with self.assertRaises(SystemExit) as context:
            with ErrorHandler():
                raise UndefinedVariableError("x", 1, 1)
        self.assertEqual(1, context.exception.code)
        self.assertIn("error: undefined variable 'x'", self.output())

    def test_not_fatal(self):
        with ErrorHandler(fatal=False):
            raise UndefinedVariableError("x", 1, 1)
        self.assertIn("pseudo:1:1: error: undefined variable 'x'", self.output())

    def test_exit_passes_through(self):
        with self.assertRaises(SystemExit):
            with ErrorHandler(fatal=False):
                sys.exit(3)
        self.assertEqual("", self.output())

    def test_recursion(self):
        with ErrorHandler(fatal=False):
            raise RecursionError()
        self.assertIn("expression nested too deeply", self.output())

    def test_internal(self):
        # unknown errors are reported, then re-raised
        with self.assertRaises(KeyError):
            with ErrorHandler(fatal=False):
                raise KeyError("{}")
        self.assertIn("[internal] error: unknown error", self.output())

    def test_locate(self):
        error_handler = ErrorHandler()
        self.assertEqual("pseudo: ", error_handler.locate(GenericException("x")))

        error_handler.register_file("a.pseudo", "x = 1")
        self.assertEqual("a.pseudo:1:5: ", error_handler.locate(GenericException("x", line=1, column=5)))

        error_handler.remove_file("a.pseudo")
        self.assertIsNone(error_handler.current)
        self.assertEqual({}, error_handler.sources)

    def test_diagnose(self):
        error_handler = ErrorHandler()
        error_handler.register_file("a.pseudo", "x = 1\nescribir total + 1")

        diagnosis = error_handler.diagnose(UndefinedVariableError("total", 2, 10))
        self.assertEqual("  escribir total + 1\n" + " " * 11 + "^~~~~", plain(diagnosis))

        should_fail = [
            GenericException("no position"),
            UndefinedVariableError("x", 3, 1),
            UndefinedVariableError("x", 0, 1),
        ]
        for case in should_fail:
            self.assertIsNone(error_handler.diagnose(case))

        # a position at end of line is still marked
        diagnosis = error_handler.diagnose(ParseError("expected '='", Token(TokenKind.EOF, "", 1, 6)))
        self.assertEqual("  x = 1\n" + " " * 7 + "^", plain(diagnosis))

    def test_throw_with_diagnosis(self):
        error_handler = ErrorHandler(fatal=False)
        error_handler.register_file("b.pseudo", "escribir y")
        error_handler.throw(UndefinedVariableError("y", 1, 10))

        lines = self.output().splitlines()
        self.assertEqual(["b.pseudo:1:10: error: undefined variable 'y'", "  escribir y", " " * 11 + "^"], lines)

    def test_warn(self):
        error_handler = ErrorHandler()
        error_handler.warn("'{}' has no statements", "c.pseudo")
        self.assertEqual("pseudo: warning: 'c.pseudo' has no statements\n", self.output())


if __name__ == '__main__':
    unittest.main()
