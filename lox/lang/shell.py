"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from lox.core.interpreter import stringify


class Shell(cmd.Cmd):
    """lox interpreter shell. Every line is run as its own batch, so an error only loses that line."""
    intro = "lox interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self.sess.error_handler.fatal = False

    def default(self, line):
        """Executes arbitrary lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.run(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(f"help {arg}")
        self.stdout.write(
            "Welcome to the lox interpreter!\n\n"
            "Type statements to run them, e.g. 'var x = 1 + 2;' then 'print x;'. Variables\n"
            "declared here stay defined until you exit. Type 'env' to list them and 'exit'\n"
            "or Ctrl-D to quit.\n"
        )

    def do_env(self, arg):
        """Lists global bindings."""
        if arg:
            return self.default(f"env {arg}")  # e.g. "env = 1;" is lox, not a command
        for name, value in self.sess.bindings.items():
            self.stdout.write(f"{name} = {stringify(value)}\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(f"exit {arg}")
        return True
