"""Recursive descent parser for lox. Each grammar rule is one method, rules are ordered from loosest to tightest
binding, and binary operators are built with loops so that they associate to the left.

```
<program>     ::= <declaration>* EOF
<declaration> ::= "var" IDENTIFIER ( "=" <expression> )? ";" | <statement>
<statement>   ::= "print" <expression> ";" | "{" <declaration>* "}" | <expression> ";"
<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <equality>   ; right-associative
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <primary>
<primary>     ::= NUMBER | STRING | "true" | "false" | "nil" | "(" <expression> ")" | IDENTIFIER
```

A ParseError unwinds to the enclosing declaration, which reports it, drops the statement, and synchronizes on the
next statement boundary so that the rest of the source is still parsed. Input nested deeper than the Python stack
allows is handled the same way.
"""

import logging

from lox.core import syntax
from lox.core.tokens import TokenType
from lox.lang.error import ParseError


logger = logging.getLogger(__name__)

# tokens that begin a statement, used as recovery points
STATEMENT_STARTS = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


class Parser:
    """Owns a cursor into tokens, which must end with an EOF token."""

    def __init__(self, tokens, diagnostics):
        self.tokens = tokens
        self.diagnostics = diagnostics
        self.current = 0

    def parse(self):
        """Returns the list of statements that parsed successfully."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        logger.debug("parsed %d statements", len(statements))
        return statements

    # grammar

    def declaration(self):
        """Returns a statement, or None if it had a syntax error."""
        try:
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError as error:
            self.diagnostics.report(error)
            self.synchronize()
            return None
        except RecursionError:
            self.diagnostics.report(ParseError(self.peek(), "Too much nesting."))
            self.synchronize()
            return None

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return syntax.Var(name, initializer)

    def statement(self):
        if self.match(TokenType.PRINT):
            value = self.expression()
            self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
            return syntax.Print(value)

        if self.match(TokenType.LEFT_BRACE):
            return syntax.Block(tuple(self.block()))

        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return syntax.Expression(expr)

    def block(self):
        """Parses declarations up to the closing brace. Statements with errors are left out."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.equality()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, syntax.Variable):
                return syntax.Assign(expr.name, value)

            # the right-hand side has been consumed, so recovery resumes right after it
            raise ParseError(equals, "Invalid assignment target.")

        return expr

    def equality(self):
        return self.binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self.binary(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL
        )

    def term(self):
        return self.binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self.binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def binary(self, operand, *operators):
        """Left-associative chain of operand separated by any of operators."""
        expr = operand()

        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = syntax.Binary(expr, operator, right)

        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return syntax.Unary(operator, self.unary())

        return self.primary()

    def primary(self):
        if self.match(TokenType.FALSE):
            return syntax.Literal(False)
        if self.match(TokenType.TRUE):
            return syntax.Literal(True)
        if self.match(TokenType.NIL):
            return syntax.Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return syntax.Literal(self.previous().literal)

        if self.match(TokenType.IDENTIFIER):
            return syntax.Variable(self.previous())

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return syntax.Grouping(expr)

        raise ParseError(self.peek(), "Expect expression.")

    # cursor utilities

    def match(self, *types):
        """Consumes the current token if it has any of types."""
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def check(self, token_type):
        if self.is_at_end():
            return False
        return self.peek().type is token_type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def consume(self, token_type, message):
        if self.check(token_type):
            return self.advance()
        raise ParseError(self.peek(), message)

    def synchronize(self):
        """Discards tokens until just after a ";" or just before a token that starts a statement."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()


def parse(tokens, diagnostics):
    """Returns the statements in tokens. Syntax errors go to diagnostics."""
    return Parser(tokens, diagnostics).parse()
