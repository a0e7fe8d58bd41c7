"""Lexical scopes. An Environment maps names to runtime values and links to the scope it was created in; lookups
fall back along that chain. Function values hold on to the Environment they were defined in, so a scope lives as
long as the longest-lived function that captured it (or any scope nested in it).
"""


class Environment:
    """One scope in a chain of scopes."""

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    def get(self, name):
        """Returns the value bound to name in this scope or the nearest enclosing one, or None if it is unbound."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name, value):
        """Binds name in this scope only (shadowing any outer binding) and returns value."""
        self.store[name] = value
        return value

    def enclosed(self):
        """Returns a new, empty scope whose outer scope is this one."""
        return Environment(self)

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"Environment({self.store}, outer={self.outer!r})"
