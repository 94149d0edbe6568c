"""Runs lox scripts, or the interactive shell when no script is given. Called from the lox console script."""

import argparse
import sys

from lox.lang.config import Config, ConfigError
from lox.lang.error import ErrorHandler
from lox.lang.session import EX_NOINPUT, Session
from lox.lang.shell import Shell


def get_parser():
    parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the lox language.")
    parser.add_argument("script", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--config", help="TOML config file (default: ./lox.toml if present)")
    parser.add_argument("--tokens", action="store_true", help="print scanned tokens before running")
    parser.add_argument("--tree", action="store_true", help="print parsed statements before running")
    parser.add_argument("--no-color", action="store_true", help="do not colour diagnostics")
    parser.add_argument("--log-level", help="logging level, e.g. DEBUG")
    return parser


def load_config(args):
    """Returns the Config for args, command-line flags taking precedence over the config file."""
    config = Config(args.config)

    if args.tokens:
        config.set("behaviour.print_tokens", True)
    if args.tree:
        config.set("behaviour.print_tree", True)
    if args.no_color:
        config.set("behaviour.color", False)
    if args.log_level:
        config.set("logging.level", args.log_level)

    return config


def main(argv=None):
    """Runs the lox interpreter. Returns the process exit status."""
    args = get_parser().parse_args(argv)

    with ErrorHandler() as error_handler:
        try:
            config = load_config(args)
        except ConfigError as error:
            error_handler.throw(str(error))

        config.setup_logging()
        error_handler.color = config.getbool("behaviour.color")

        sess = Session(
            error_handler,
            args.script if args.script is not None else Session.SH_FILE,
            print_tokens=config.getbool("behaviour.print_tokens"),
            print_tree=config.getbool("behaviour.print_tree"),
        )

        if args.script is None:
            Shell(sess).cmdloop()
            return 0

        try:
            sess.run_file()
        except OSError as error:
            error_handler.throw(f"'{args.script}' could not be opened: {error.strerror}", code=EX_NOINPUT)

        return sess.exit_code


if __name__ == "__main__":
    sys.exit(main())
