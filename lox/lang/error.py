"""Error handling for the lox language. The core stages (scanner, parser, interpreter) never print or exit: lexical and
syntax errors are recorded in a Diagnostics accumulator and recovered from, runtime errors are raised as
LoxRuntimeErrors and abort the current batch. Only ErrorHandler, used by the command-line harness, talks to the user.

Every error is rendered the same way:

```
[line <n>] Error <location>: <message>
```
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional

from termcolor import colored

from lox.core.tokens import TokenType


logger = logging.getLogger(__name__)


class LoxError(Exception):
    """Positioned lox error. where is the location part of the message ("at 'x'", "at end" or empty)."""
    kind = "error"

    def __init__(self, line, where, message):
        super().__init__(message)
        self.line = line
        self.where = where
        self.message = message

    @property
    def lexeme(self):
        """Offending source text, if known. Used to highlight the error in its source line."""
        return None

    @property
    def column(self):
        """0-based column of lexeme in its line, if known."""
        return None

    def __str__(self):
        return render(self.line, self.where, self.message)


class ScanError(LoxError):
    """Unterminated string or unexpected character."""
    kind = "lexical"

    def __init__(self, line, message, lexeme=None, column=None):
        super().__init__(line, "", message)
        self._lexeme = lexeme
        self._column = column

    @property
    def lexeme(self):
        return self._lexeme

    @property
    def column(self):
        return self._column


class TokenError(LoxError):
    """Error positioned at a token: at end for EOF, otherwise at the token's lexeme."""

    def __init__(self, token, message):
        where = "at end" if token.type is TokenType.EOF else f"at '{token.lexeme}'"
        super().__init__(token.line, where, message)
        self.token = token

    @property
    def lexeme(self):
        return self.token.lexeme or None

    @property
    def column(self):
        return self.token.column


class ParseError(TokenError):
    """Grammar violation. Raised inside the parser and unwound to the nearest statement boundary."""
    kind = "syntax"


class LoxRuntimeError(TokenError):
    """Type mismatch or undefined variable. Aborts the rest of the batch."""
    kind = "runtime"


def render(line, where, message):
    """Returns the uniform one-line rendering of a diagnostic."""
    location = f" {where}" if where else ""
    return f"[line {line}] Error{location}: {message}"


@dataclass(frozen=True)
class Diagnostic:
    """Record handed to diagnostic sinks."""
    kind: str
    line: int
    location: str
    message: str
    lexeme: Optional[str] = None
    column: Optional[int] = None

    @classmethod
    def from_error(cls, error):
        return cls(error.kind, error.line, error.where, error.message, error.lexeme, error.column)

    def __str__(self):
        return render(self.line, self.location, self.message)


class Diagnostics:
    """Error accumulator for one batch, owned by whoever runs the pipeline. sink, if given, is called with every
    Diagnostic as it is reported.
    """

    def __init__(self, sink=None):
        self.sink = sink
        self.records = []

    def report(self, error):
        """Records error (a LoxError) and forwards it to the sink. Returns the recorded Diagnostic."""
        diagnostic = Diagnostic.from_error(error)
        self.records.append(diagnostic)
        logger.debug("reported %s error: %s", diagnostic.kind, diagnostic)

        if self.sink is not None:
            self.sink(diagnostic)
        return diagnostic

    @property
    def had_error(self):
        """Whether a lexical or syntax error occurred."""
        return any(record.kind in ("lexical", "syntax") for record in self.records)

    @property
    def had_runtime_error(self):
        return any(record.kind == "runtime" for record in self.records)

    def reset(self):
        """Forgets every record. Called at the start of each batch."""
        self.records = []

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


class ErrorHandler:
    """Context manager that displays lox diagnostics and turns stray Python errors into internal lox errors, so that the
    shell keeps running. If fatal, any error caught on exit terminates the process.
    """
    ERROR = "red"

    def __init__(self, fatal=True, color=True, stream=None):
        self.fatal = fatal
        self.color = color
        self.stream = stream
        self.sources = {}  # path: source lines, insertion-ordered
        self.current = None

    def register_source(self, path, source):
        """Registers source text under path, so that diagnostics can echo the offending line."""
        self.sources[path] = source.split("\n")
        self.current = path

    def _colored(self, text, color=None, attrs=None):
        if not self.color:
            return text
        return colored(text, color, attrs=attrs)

    def _print(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def diagnose(self, diagnostic):
        """Returns the offending source line with diagnostic.lexeme highlighted at its column (or its first occurrence
        when the column is unknown), or None if the line is unknown.
        """
        lines = self.sources.get(self.current)
        if not lines or not 0 < diagnostic.line <= len(lines):
            return None

        line = lines[diagnostic.line - 1]
        if not diagnostic.lexeme:
            start = -1
        elif diagnostic.column is not None and line.startswith(diagnostic.lexeme, diagnostic.column):
            start = diagnostic.column
        else:
            start = line.find(diagnostic.lexeme)
        if start == -1:
            return "  " + line

        end = start + len(diagnostic.lexeme)
        result = "  " + line[:start] + self._colored(line[start:end], ErrorHandler.ERROR, ["bold"]) + line[end:] + "\n"
        result += "  " + " " * start + self._colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, ["bold"])
        return result

    def display(self, diagnostic):
        """Prints a Diagnostic. Used as the sink of a Diagnostics accumulator."""
        prefix = f"{self.current}: " if self.current else ""
        message = render(diagnostic.line, diagnostic.location, diagnostic.message)
        self._print(self._colored(prefix, attrs=["bold"]) + self._colored(message, ErrorHandler.ERROR, ["bold"]))

        diagnosis = self.diagnose(diagnostic)
        if diagnosis:
            self._print(diagnosis)

    def throw(self, message, internal=False, code=None):
        """Prints an error that is not tied to a source position and exits with code (1 by default) if fatal."""
        text = ""
        if internal:
            text += self._colored("[internal] ", ErrorHandler.ERROR, ["bold"])
        text += self._colored("error: ", ErrorHandler.ERROR, ["bold"]) + message
        self._print(text)

        if self.fatal:
            sys.exit(code if code is not None else 70 if internal else 1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw("keyboard interrupt")
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw("maximum nesting depth exceeded")
        elif exc_type is not None and issubclass(exc_type, LoxError):
            self.display(Diagnostic.from_error(exc_val))
            if self.fatal:
                sys.exit(70 if exc_val.kind == "runtime" else 65)
        elif exc_type is not None:
            logger.exception("unexpected error")
            self.throw(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True)
            do_exit = True

        return not do_exit
