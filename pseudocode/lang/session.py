"""Session control for the pseudocode language. Ties lexing, parsing, interpretation and translation together for
either a source file or the lines typed in command-line mode.
"""

import os

from pseudocode.lang.error import GenericException
from pseudocode.render.python import render
from pseudocode.runtime.interpreter import Interpreter
from pseudocode.runtime.scope import ScopeTable
from pseudocode.syntax.grammar import parse
from pseudocode.syntax.lexical import TokenKind, tokenize


class Session:
    """Governs a pseudocode session. In command-line mode, variables persist between runs."""
    SH_FILE = "<in>"  # command-line interpreter filename
    EXTENSION = ".py"

    OPENERS = (TokenKind.SI, TokenKind.REPITE)
    CLOSERS = (TokenKind.FIN_SI, TokenKind.FIN_REPITE)

    def __init__(self, error_handler, path, cmd_line=False):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.scope = ScopeTable()
        self.source = ""

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path)
            except UnicodeDecodeError:
                raise GenericException("'{}' is not valid UTF-8 text", path)

            self.error_handler.register_file(path, self.source)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, previous=""):
        """Appends line to the previous unfinished lines (if any). Returns the joined source and whether a si/repite
        block is still open, in which case more lines are needed before running it.
        """
        source = previous + "\n" + line if previous else line

        depth = 0
        for token in tokenize(source):
            if token.kind in Session.OPENERS:
                depth += 1
            elif token.kind in Session.CLOSERS:
                depth -= 1

        return source, depth > 0

    @staticmethod
    def output_path(path):
        """Sibling of path with the Python extension."""
        return os.path.splitext(path)[0] + Session.EXTENSION

    def add(self, source):
        """Sets the source to run next. Used in command-line mode."""
        self.source = source
        self.error_handler.register_file(self.path, source)

    def compile(self):
        """Lexes and parses this session's source into a Program."""
        return parse(tokenize(self.source))

    def run(self, output=None):
        """Interprets this session's source. Only command-line sessions keep their variables from one run to the
        next.
        """
        program = self.compile()
        Interpreter(output).run(program, self.scope if self.cmd_line else None)

    def translate(self, output_path=None):
        """Renders this session's source to Python and writes it to output_path (by default, a sibling .py file).
        Returns (output_path, code).
        """
        if output_path is None:
            if self.path == Session.SH_FILE:
                raise GenericException("translation of '{}' needs an output path", self.path)
            output_path = Session.output_path(self.path)

        if os.path.abspath(output_path) == os.path.abspath(self.path):
            raise GenericException("refusing to overwrite source file '{}'", self.path)

        program = self.compile()
        if not program.statements:
            self.error_handler.warn("'{}' has no statements, only the header was generated", self.path)
        code = render(program)

        try:
            with open(output_path, "w", encoding="utf-8") as file:
                file.write(code)
        except OSError:
            raise GenericException("'{}' could not be written", output_path)

        return output_path, code
