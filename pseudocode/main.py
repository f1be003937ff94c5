"""Uses the pseudocode implementation to interpret source files, translate them to Python, or run in command-line mode.
Also uses error handling context manager. Called from the pseudo console script.
"""

import argparse

from pseudocode.lang.error import ErrorHandler
from pseudocode.lang.session import Session
from pseudocode.lang.shell import Shell


def main():
    """Runs pseudocode interpreter. Called from pseudo console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="pseudo", description="Pseudocode interpreter and Python translator.")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("-t", "--translate", action="store_true",
                            help="translate file to Python instead of running it")
        parser.add_argument("-o", "--output", help="translation destination (default: file with a .py extension)")
        parser.add_argument("--print", action="store_true", dest="echo", help="also print the translation")
        args = parser.parse_args()

        if args.file is None:
            if args.translate or args.output:
                parser.error("translation needs a file")
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()

        elif args.translate:
            path, code = Session(error_handler, args.file).translate(args.output)
            if args.echo:
                print(code, end="")
            print(f"Translation saved to: {path}")

        else:
            Session(error_handler, args.file).run()


if __name__ == "__main__":
    main()
