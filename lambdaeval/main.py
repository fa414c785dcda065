"""Runs lambdaeval on a file of λ-terms/bindings, or in command-line mode. Also uses error handling context manager.
Installed as the `lambdaeval` console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import logging
import os
import sys

from lambdaeval.lang.error import ErrorHandler
from lambdaeval.lang.session import Session
from lambdaeval.lang.shell import Shell


def print_trace(step):
    print(step)


def build_parser():
    parser = argparse.ArgumentParser(prog="lambdaeval", description="Untyped lambda calculus evaluator")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--max-steps", type=int, default=None, metavar="N",
                        help="give up on a λ-term after N reduction steps (default: unbounded)")
    parser.add_argument("--timeout", type=float, default=None, metavar="SECONDS",
                        help="give up on a λ-term after SECONDS of reduction (default: unbounded)")
    parser.add_argument("-q", "--quiet", action="store_true", help="do not print β-reduction steps")
    parser.add_argument("--no-color", action="store_true", help="disable colored error messages")
    parser.add_argument("--no-bindings-lookup", action="store_true",
                        help="record bindings without substituting them into later λ-terms")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv=None):
    """Runs lambdaeval interpreter. Called from lambdaeval executable script."""
    assert sys.version_info >= (3, 7), "lambdaeval cannot be run with python < 3.7"

    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                            format="%(name)s: %(levelname)s: %(message)s")
        if args.no_color:
            os.environ["NO_COLOR"] = "1"

        config = {
            "trace": None if args.quiet else print_trace,
            "max_steps": args.max_steps,
            "timeout": args.timeout,
            "resolve_bindings": not args.no_bindings_lookup,
        }

        if args.file is not None:
            Session(error_handler, args.file, cmd_line=False, **config).run()
        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **config)).cmdloop()


if __name__ == "__main__":
    main()
