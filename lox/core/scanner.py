"""Lexical analysis for lox. Turns source text into a list of Tokens terminated by a single EOF token.

Lexical grammar, roughly:

```
NUMBER     ::= DIGIT+ ( "." DIGIT+ )?        ; a trailing "." is not part of the number
STRING     ::= '"' <any char except '"'>* '"'  ; may span lines, no escape sequences
IDENTIFIER ::= ALPHA ( ALPHA | DIGIT )*       ; keywords are identifiers found in KEYWORDS
ALPHA      ::= "a" ... "z" | "A" ... "Z" | "_"
DIGIT      ::= "0" ... "9"
comment    ::= "//" <any char except newline>*
```

The scanner never raises on malformed input: errors are reported to a Diagnostics object and scanning carries on.
"""

import logging

from lox.core.tokens import KEYWORDS, Token, TokenType
from lox.lang.error import ScanError


logger = logging.getLogger(__name__)

SINGLE = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# char: (type alone, type when followed by "=")
DOUBLE = {
    "!": (TokenType.BANG, TokenType.BANG_EQUAL),
    "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

WHITESPACE = " \r\t"


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Scanner:
    """Single left-to-right pass over source. start is the first char of the lexeme being scanned, current the char
    about to be consumed, line the 1-based line of current and line_start the offset where that line begins.
    """

    def __init__(self, source, diagnostics):
        self.source = source
        self.diagnostics = diagnostics
        self.tokens = []

        self.start = 0
        self.current = 0
        self.line = 1
        self.line_start = 0

    def scan_tokens(self):
        """Scans the whole source and returns the token list, EOF included."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.current - self.line_start))
        logger.debug("scanned %d tokens over %d lines", len(self.tokens), self.line)
        return self.tokens

    def is_at_end(self):
        return self.current >= len(self.source)

    def scan_token(self):
        char = self.advance()

        if char in SINGLE:
            self.add_token(SINGLE[char])

        elif char in DOUBLE:
            alone, with_equal = DOUBLE[char]
            self.add_token(with_equal if self.match("=") else alone)

        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)

        elif char in WHITESPACE:
            pass

        elif char == "\n":
            self.newline()

        elif char == '"':
            self.string()

        elif is_digit(char):
            self.number()

        elif is_alpha(char):
            self.identifier()

        else:
            self.error("Unexpected character.", char)

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.advance() == "\n":
                self.newline()

        if self.is_at_end():
            self.error("Unterminated string.", self.source[self.start:self.current].split("\n")[-1] or None)
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the current char if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def newline(self):
        """Called just after consuming a newline."""
        self.line += 1
        self.line_start = self.current

    def column(self):
        """0-based column of the current lexeme, or None if it started on an earlier line."""
        if self.start < self.line_start:
            return None
        return self.start - self.line_start

    def add_token(self, token_type, literal=None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.line, self.column()))

    def error(self, message, lexeme=None):
        self.diagnostics.report(ScanError(self.line, message, lexeme, self.column()))


def scan(source, diagnostics):
    """Returns the tokens of source. Errors go to diagnostics."""
    return Scanner(source, diagnostics).scan_tokens()
