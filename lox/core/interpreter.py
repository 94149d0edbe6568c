"""Tree-walking evaluator for lox.

Runtime values are plain Python objects from a closed set:

| lox     | Python  |
|---------|---------|
| number  | float   |
| string  | str     |
| boolean | bool    |
| nil     | None    |

Every expression evaluates to one of those. Statements are executed for their side effects against the current
Environment; the global Environment lives as long as the Interpreter, so successive calls to interpret share state.
"""

import logging
import math
import operator

from lox.core import syntax
from lox.core.environment import Environment
from lox.core.tokens import TokenType
from lox.lang.error import LoxRuntimeError


logger = logging.getLogger(__name__)


def divide(left, right):
    """IEEE-754 division: x/0 is a signed infinity and 0/0 is nan instead of a ZeroDivisionError."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


ARITHMETIC = {
    TokenType.PLUS: operator.add,
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
    TokenType.SLASH: divide,
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
}


def is_number(value):
    return isinstance(value, float)


def is_truthy(value):
    """nil and false are falsy, everything else (0 and "" included) is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Values of different kinds are never equal, so unlike Python, true != 1."""
    return type(left) is type(right) and left == right


def stringify(value):
    """Textual rendering of a runtime value, as written by print."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if value.is_integer() and abs(value) < 1e16:
            return f"{value:.0f}"
        return repr(value)
    return value


def locate(node):
    """Outermost operator or name token under the statement node, or None if it has none."""
    while node is not None:
        token = getattr(node, "operator", None) or getattr(node, "name", None)
        if token is not None:
            return token
        if isinstance(node, syntax.Block):
            node = node.statements[0] if node.statements else None
        else:
            node = getattr(node, "expression", None)
    return None


class Interpreter:
    """Executes statements. output receives the text of every print statement; runtime errors go to diagnostics."""

    def __init__(self, diagnostics, output=print):
        self.diagnostics = diagnostics
        self.output = output
        self.globals = Environment()
        self.environment = self.globals

    def interpret(self, statements):
        """Executes statements in order. The first runtime error is reported and the remaining statements are skipped.
        Returns whether every statement ran.
        """
        stmt = None
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as error:
            self.diagnostics.report(error)
            return False
        except RecursionError:
            token = locate(stmt)
            if token is None:
                raise
            self.diagnostics.report(LoxRuntimeError(token, "Too much nesting."))
            return False
        return True

    # statements

    def execute(self, stmt):
        if isinstance(stmt, syntax.Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, syntax.Print):
            self.output(stringify(self.evaluate(stmt.expression)))

        elif isinstance(stmt, syntax.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, syntax.Block):
            self.execute_block(stmt.statements, Environment(self.environment))

        else:
            raise TypeError(f"unknown statement {type(stmt).__name__}")

    def execute_block(self, statements, environment):
        """Runs statements in environment, then restores the current one even if a statement failed."""
        previous = self.environment
        self.environment = environment
        logger.debug("entered scope at depth %d", environment.depth)

        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    # expressions

    def evaluate(self, expr):
        if isinstance(expr, syntax.Literal):
            return expr.value

        elif isinstance(expr, syntax.Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, syntax.Unary):
            return self._unary(expr)

        elif isinstance(expr, syntax.Binary):
            return self._binary(expr)

        elif isinstance(expr, syntax.Variable):
            return self.environment.get(expr.name)

        elif isinstance(expr, syntax.Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value

        raise TypeError(f"unknown expression {type(expr).__name__}")

    def _unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.MINUS:
            if not is_number(right):
                raise LoxRuntimeError(expr.operator, "Operand must be a number.")
            return -right

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        raise LoxRuntimeError(expr.operator, f"Unknown unary operator '{expr.operator.lexeme}'.")

    def _binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.operator.type

        if op is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op not in ARITHMETIC:
            raise LoxRuntimeError(expr.operator, f"Unknown binary operator '{expr.operator.lexeme}'.")
        if not is_number(left) or not is_number(right):
            raise LoxRuntimeError(expr.operator, "Operands must be numbers.")
        return ARITHMETIC[op](left, right)
