"""Abstract syntax tree for lox. Nodes only hold their children; evaluation and printing dispatch on node type from
outside (see interpreter.py and printer.py). Each family is closed: a consumer handles every subclass listed in
EXPRESSIONS/STATEMENTS.

```
<expr> ::= Literal(value) | Unary(operator, right) | Grouping(expression)
         | Binary(left, operator, right) | Variable(name) | Assign(name, value)
<stmt> ::= Expression(expression) | Print(expression) | Var(name, initializer?) | Block(statements)
```
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from lox.core.tokens import Token


class Expr:
    """Superclass of every expression node."""


class Stmt:
    """Superclass of every statement node."""


@dataclass(frozen=True)
class Literal(Expr):
    value: object


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


EXPRESSIONS = (Literal, Unary, Grouping, Binary, Variable, Assign)
STATEMENTS = (Expression, Print, Var, Block)
