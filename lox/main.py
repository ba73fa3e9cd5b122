"""Uses the lox language implementation to interpret .lox files or run in command-line mode. Also uses the error
handling context manager. Called from the lox executable script.

Exit codes: 0 on success, 65 if the program had a static (lexical, syntax or resolution) error, 70 if it had a runtime
error, 1 if the file could not be read or the interpreter failed internally.
"""

import argparse
import sys

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


RECURSION_LIMIT = 10_000  # a lox call takes several Python frames


def get_parser():
    parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the lox language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", help="print scanned tokens before running", action="store_true")
    parser.add_argument("--ast", help="print parsed syntax trees before running", action="store_true")
    parser.add_argument("--no-color", help="disable colored diagnostics", action="store_true")
    return parser


def main(argv=None):
    """Runs lox interpreter. Called from lox executable script."""
    assert sys.version_info >= (3, 7), "lox cannot be run with python < 3.7"

    args = get_parser().parse_args(argv)
    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    with ErrorHandler(color=not args.no_color) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_tokens=args.tokens, show_ast=args.ast)
            sess.run_file()
            if error_handler.exit_code:
                sys.exit(error_handler.exit_code)

        else:
            sess = Session(error_handler, cmd_line=True, show_tokens=args.tokens, show_ast=args.ast)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
