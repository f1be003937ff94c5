"""Handles interactive/command-line mode for the pseudocode interpreter. Uses cmd as backend."""

import cmd
import re

from pseudocode.lang.error import GenericException
from pseudocode.lang.session import Session


class Shell(cmd.Cmd):
    """Pseudocode interpreter shell."""
    intro = "Pseudocode interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for unfinished si/repite blocks
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    ASSIGNMENT = re.compile(r"\s*[A-Za-z_]\w*\s*=(?!=)")  # so that 'run = 1' is not taken for a command

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def onecmd(self, line):
        """Lines inside an open block and assignments are always pseudocode, even if they start like a command."""
        if self._tmp_line or Shell.ASSIGNMENT.match(line):
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary pseudocode."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source, add_to_prev = Session.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = source
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                if source.strip():
                    self.sess.add(source)
                    self.sess.run()

    def do_run(self, arg):
        """run FILE: interprets a pseudocode file."""
        try:
            with self.sess.error_handler:
                if not arg:
                    raise GenericException("'run' expects a FILENAME")
                Session(self.sess.error_handler, arg).run()
        finally:
            self.sess.error_handler.remove_file(arg)  # after any error has been reported against it

    def do_translate(self, arg):
        """translate FILE: writes the Python translation of FILE next to it."""
        try:
            with self.sess.error_handler:
                if not arg:
                    raise GenericException("'translate' expects a FILENAME")
                path, code = Session(self.sess.error_handler, arg).translate()

                print(code)
                print(f"Translation saved to: {path}")
        finally:
            self.sess.error_handler.remove_file(arg)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the pseudocode interpreter!\n\n"
              "Commands:\n"
              "  run FILE        interprets FILE\n"
              "  translate FILE  translates FILE to Python (saved next to it with a .py extension)\n"
              "  exit            leaves the shell\n"
              "Anything else is run as pseudocode; variables are kept between lines.\n\n"
              "Syntax:\n"
              "  Variables:    x = 5\n"
              "  Conditional:  si (x > 0) entonces ... sino ... fin_si\n"
              "  Loop:         repite (x > 0) ... fin_repite\n"
              "  Output:       escribir \"Hola mundo\"\n"
              "  Operators:    +, -, *, /, %, ==, !=, <, >, <=, >=, y, o, no")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            self.sess.error_handler.throw(GenericException("unrecognized token: '{}'", arg))
            return False
        return True
