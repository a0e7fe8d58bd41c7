"""Runs Monkey source files or the interactive shell. Also uses the error handling context manager. Installed as the
`monkey` console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered.

Every Monkey call costs several Python frames in the evaluator, so main raises the interpreter's recursion limit to
RECURSION_LIMIT before running anything. Past that, a RecursionError is reported by the error handler.
"""

import argparse
import sys

from monkey.lang.error import ErrorHandler, GenericException
from monkey.lang.session import Session
from monkey.lang.shell import Shell

RECURSION_LIMIT = 10000  # enough for Monkey recursion roughly a thousand calls deep


def build_parser():
    parser = argparse.ArgumentParser(prog="monkey", description="Monkey language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--debug", action="store_true", help="echo each parsed program and its syntax tree")
    parser.add_argument("--tokens", action="store_true", help="print the token stream of file instead of running it")
    return parser


def main(argv=None):
    """Runs the Monkey interpreter. Called from the monkey console script."""
    assert sys.version_info >= (3, 7), "monkey cannot be run with python < 3.7"
    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        error_handler.debug_mode = args.debug

        if args.file is not None and args.tokens:
            try:
                with open(args.file, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", args.file, diagnosis=False)

            sess = Session(error_handler, Session.SH_FILE, cmd_line=True)
            for token in sess.tokens(source):
                print(f"{token.kind.name:<10} {token.literal}")

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            sess.run()

            value = sess.pop() if sess.results else None
            if value is not None:
                print(value.inspect())

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
