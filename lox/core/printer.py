"""Renders syntax trees in parenthesised prefix form, e.g. `(print (+ 1 (* 2 3)))`. Used by `lox --tree`."""

from lox.core import syntax
from lox.core.interpreter import stringify


class AstPrinter:

    def print(self, node):
        if isinstance(node, syntax.Stmt):
            return self.statement(node)
        return self.expression(node)

    def statement(self, stmt):
        if isinstance(stmt, syntax.Expression):
            return self.parenthesize(";", stmt.expression)
        elif isinstance(stmt, syntax.Print):
            return self.parenthesize("print", stmt.expression)
        elif isinstance(stmt, syntax.Var):
            if stmt.initializer is None:
                return f"(var {stmt.name.lexeme})"
            return self.parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)
        elif isinstance(stmt, syntax.Block):
            return "(block" + "".join(" " + self.statement(inner) for inner in stmt.statements) + ")"

        raise TypeError(f"unknown statement {type(stmt).__name__}")

    def expression(self, expr):
        if isinstance(expr, syntax.Literal):
            if isinstance(expr.value, str):
                return f'"{expr.value}"'
            return stringify(expr.value)
        elif isinstance(expr, syntax.Grouping):
            return self.parenthesize("group", expr.expression)
        elif isinstance(expr, syntax.Unary):
            return self.parenthesize(expr.operator.lexeme, expr.right)
        elif isinstance(expr, syntax.Binary):
            return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)
        elif isinstance(expr, syntax.Variable):
            return expr.name.lexeme
        elif isinstance(expr, syntax.Assign):
            return self.parenthesize(f"= {expr.name.lexeme}", expr.value)

        raise TypeError(f"unknown expression {type(expr).__name__}")

    def parenthesize(self, name, *exprs):
        return f"({name}" + "".join(" " + self.expression(expr) for expr in exprs) + ")"
