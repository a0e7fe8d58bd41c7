"""Runtime values produced by the evaluator.

NULL, TRUE and FALSE are process-wide singletons: the evaluator never allocates other Null/Boolean instances, so
booleans and null compare by identity. ReturnValue and Error are control-flow signals, not values a program can
compute with; they only propagate upward until a function call (ReturnValue) or the top level absorbs them.
"""

from dataclasses import dataclass
from typing import List

from monkey.syntax import ast


class ObjectType:
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"
    FUNCTION = "FUNCTION"


class Object:
    """Superclass of every runtime value."""
    type = None

    def inspect(self):
        """Display form of this value."""
        raise NotImplementedError()

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class Integer(Object):
    """64-bit signed integer. Out of range values wrap around (two's complement)."""
    value: int
    type = ObjectType.INTEGER

    def __post_init__(self):
        object.__setattr__(self, "value", wrap_int64(self.value))

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True, eq=False)
class Boolean(Object):
    value: bool
    type = ObjectType.BOOLEAN

    def inspect(self):
        return "true" if self.value else "false"


class Null(Object):
    type = ObjectType.NULL

    def inspect(self):
        return "null"

    def __repr__(self):
        return "Null()"


@dataclass(frozen=True)
class ReturnValue(Object):
    value: Object
    type = ObjectType.RETURN_VALUE

    def inspect(self):
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    message: str
    type = ObjectType.ERROR

    def inspect(self):
        return f"ERROR: {self.message}"


@dataclass(eq=False)
class Function(Object):
    """Function value. env is the environment the literal was evaluated in, kept alive for as long as the function
    is, which is what makes closures work.
    """
    parameters: List[ast.Identifier]
    body: ast.BlockStatement
    env: "Environment"
    type = ObjectType.FUNCTION

    def inspect(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"fn({params}) {{ {self.body} }}"

    def __repr__(self):
        return f"Function({self.inspect()!r})"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    """Maps a Python bool to the TRUE/FALSE singletons."""
    return TRUE if value else FALSE


def wrap_int64(value):
    """Wraps an arbitrary Python int into the signed 64-bit range."""
    return (value + 2 ** 63) % 2 ** 64 - 2 ** 63


def is_error(obj):
    return obj is not None and obj.type == ObjectType.ERROR
