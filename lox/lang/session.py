"""Session control for lox. A Session owns one Interpreter (and so one global scope) and feeds it batches of source:
a whole file in file mode, or one line at a time from the shell.
"""

import logging

from lox.core.interpreter import Interpreter
from lox.core.parser import parse
from lox.core.printer import AstPrinter
from lox.core.scanner import scan
from lox.lang.error import Diagnostics


logger = logging.getLogger(__name__)

EX_OK = 0
EX_DATAERR = 65   # lexical or syntax error
EX_NOINPUT = 66   # script could not be read
EX_SOFTWARE = 70  # runtime error


class Session:
    """Governs a lox session. Diagnostics are shown through error_handler; print statements write to output."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, output=print, print_tokens=False, print_tree=False):
        self.error_handler = error_handler
        self.path = path
        self.output = output
        self.print_tokens = print_tokens
        self.print_tree = print_tree

        self.diagnostics = Diagnostics(sink=error_handler.display)
        self.interpreter = Interpreter(self.diagnostics, output)

    def run(self, source):
        """Scans, parses and executes source as one batch. Statements that parsed are executed even if others had
        syntax errors; a runtime error abandons the rest of the batch. Returns this batch's Diagnostics.
        """
        self.diagnostics.reset()
        self.error_handler.register_source(self.path, source)

        tokens = scan(source, self.diagnostics)
        if self.print_tokens:
            for token in tokens:
                self.output(str(token))

        statements = parse(tokens, self.diagnostics)
        if self.print_tree:
            printer = AstPrinter()
            for stmt in statements:
                self.output(printer.print(stmt))

        logger.debug("running %d statements from %s", len(statements), self.path)
        self.interpreter.interpret(statements)
        return self.diagnostics

    def run_file(self):
        """Runs the file at self.path as a single batch. Raises OSError if it cannot be read."""
        with open(self.path, "r", encoding="utf-8") as file:
            source = file.read()
        return self.run(source)

    @property
    def exit_code(self):
        """Process exit status for the last batch."""
        if self.diagnostics.had_error:
            return EX_DATAERR
        if self.diagnostics.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK

    @property
    def bindings(self):
        """Global bindings, name: value."""
        return dict(self.interpreter.globals.values)
