"""Error handling for the pseudocode language. Only GenericExceptions should be encountered while compiling or running a
program: if another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal
issue.

Taxonomy:
    GenericException
    ├── ParseError            ; grammar violation, carries the offending token
    │   └── LexicalError      ; parser reached an error token (bad character, unterminated string)
    ├── InterpreterError      ; runtime fault
    │   ├── UndefinedVariableError
    │   ├── IncompatibleTypeError
    │   ├── OperandTypeError
    │   └── DivisionByZeroError
    └── TranslationError      ; node that cannot be rendered to Python
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a pseudocode error/warning. Each '{}' in msg
    is filled with the corresponding entry of exprs, highlighted when printed to a terminal.
    """

    def __init__(self, msg, exprs=None, line=None, column=None, width=1, internal=False):
        """Parses args for GenericException or warning. line and column are 1-based source positions (if known)."""
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.exprs = [str(expr) for expr in exprs]
        self.plain = msg.format(*self.exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))  # color expr snippets

        self.line = line
        self.column = column
        self.width = max(width, 1)  # needed for error display
        self.internal = internal

        super().__init__(self.plain)


class ParseError(GenericException):
    """Raised when the token sequence does not follow the grammar. The offending token is kept in self.token."""

    def __init__(self, msg, token):
        self.token = token
        text = token.text.partition("\n")[0]  # unterminated strings run to the end of input
        near = text if text else "end of input"
        super().__init__(msg + " near '{}'", near, token.line, token.column, len(text))


class LexicalError(ParseError):
    """Raised by the parser when it meets an error token produced by the lexer."""

    def __init__(self, token):
        if token.text.startswith('"'):
            msg = "unterminated string literal"
        else:
            msg = "unexpected character"
        super().__init__(msg, token)


class InterpreterError(GenericException):
    """Superclass of all runtime faults."""


class UndefinedVariableError(InterpreterError):
    """Variable read or assigned before being defined in any active scope."""

    def __init__(self, name, line=None, column=None):
        self.name = name
        super().__init__("undefined variable '{}'", name, line, column, len(name))


class IncompatibleTypeError(InterpreterError):
    """Assignment of a value whose type does not fit the variable's declared type."""

    def __init__(self, name, declared, given, line=None, column=None):
        self.name = name
        self.declared = declared
        self.given = given
        msg = "incompatible types: cannot assign {} to '{}' of type {}"
        super().__init__(msg, (given.value, name, declared.value), line, column, len(name))


class OperandTypeError(InterpreterError):
    """Operator applied to operands it does not support."""


class DivisionByZeroError(InterpreterError):
    """Division or modulo by zero."""


class TranslationError(GenericException):
    """Raised by the renderer when a node has no Python equivalent."""


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom pseudocode errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    NO_FILE = "pseudo"  # reported name when no file has been registered

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.sources = {}
        self.current = None

    def register_file(self, path, source):
        """Registers path and its source text. Errors are reported against the last registered path."""
        self.sources[path] = source.splitlines()
        self.current = path

    def remove_file(self, path):
        """Removes path from the registered sources. Should be called once a file is done with."""
        self.sources.pop(path, None)
        if self.current == path:
            self.current = None

    def locate(self, error):
        """Returns 'path:line:col: ' prefix for error."""
        path = self.current if self.current else ErrorHandler.NO_FILE
        if error.line is None:
            return f"{path}: "
        return f"{path}:{error.line}:{error.column}: "

    def diagnose(self, error, warning=False):
        """Returns offending source line with the erroneous part highlighted and underlined, or None if the line is
        not known.
        """
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        lines = self.sources.get(self.current, [])
        if error.line is None or error.column is None or not 0 < error.line <= len(lines):
            return None

        text = lines[error.line - 1]
        start = min(error.column - 1, len(text))
        end = max(min(start + error.width, len(text)), start + 1)

        diagnosis = "  " + text[:start]
        diagnosis += colored(text[start:end], color, attrs=["bold"])
        diagnosis += text[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = colored(self.locate(error), attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg, file=sys.stderr)

        diagnosis = self.diagnose(error, warning=True)
        if diagnosis:
            print(diagnosis, file=sys.stderr)

    def throw(self, error):
        """Prints error, a GenericException, against the current file. Exits if self.fatal."""
        error_msg = colored(self.locate(error), attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg, file=sys.stderr)

        diagnosis = None if error.internal else self.diagnose(error)
        if diagnosis:
            print(diagnosis, file=sys.stderr)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("expression nested too deeply"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
