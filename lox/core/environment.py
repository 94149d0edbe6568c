"""Lexical scopes. An Environment maps names to runtime values and delegates misses to its enclosing scope, so inner
scopes shadow outer bindings without touching them.
"""

from lox.lang.error import LoxRuntimeError


class Environment:

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        """Binds name in this scope, replacing any previous binding of the same name here."""
        self.values[name] = value

    def resolve(self, name):
        """Returns the nearest scope that binds name, or None."""
        environment = self
        while environment is not None:
            if name in environment.values:
                return environment
            environment = environment.enclosing
        return None

    def get(self, name):
        """Returns the value bound to token name, searching outward."""
        environment = self.resolve(name.lexeme)
        if environment is None:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        return environment.values[name.lexeme]

    def assign(self, name, value):
        """Rebinds token name in the nearest scope that defines it. Never creates a binding."""
        environment = self.resolve(name.lexeme)
        if environment is None:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        environment.values[name.lexeme] = value

    @property
    def depth(self):
        """Number of enclosing scopes; 0 for the global scope."""
        depth = 0
        environment = self.enclosing
        while environment is not None:
            depth += 1
            environment = environment.enclosing
        return depth

    def __contains__(self, name):
        return self.resolve(name) is not None

    def __repr__(self):
        return f"Environment(depth={self.depth}, values={self.values!r})"
