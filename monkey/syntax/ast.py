"""Abstract syntax tree for the Monkey language.

Nodes are passive: the parser builds them and the evaluator reads them. Each node keeps the token it started at so
diagnostics can point back at the source, and str(node) rebuilds a fully parenthesized version of the source:

```
-a * b              ->  ((-a) * b)
1 + (2 + 3) + 4     ->  ((1 + (2 + 3)) + 4)
let x = f(1, 2);    ->  let x = f(1, 2);
```
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import List, Optional

from monkey.syntax.token import Token


class Node(ABC):
    """Superclass of every AST node."""

    def token_literal(self):
        """Literal of the token this node was parsed from."""
        return self.token.literal

    @abstractmethod
    def __str__(self):
        """Source reconstruction of this node."""

    @property
    def nodes(self):
        """Child nodes, in field order."""
        children = []
        for node_field in fields(self):
            value = getattr(self, node_field.name)
            if isinstance(value, Node):
                children.append(value)
            elif isinstance(value, list):
                children.extend(child for child in value if isinstance(child, Node))
        return children

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(expr='<str>', nodes=[
            <Node>(expr='<str>', nodes=[
                ...
                <Node>(expr='<str>')  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}(expr='{self}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


class Statement(Node):
    """A node that does not produce a value by itself."""


class Expression(Node):
    """A node that produces a value."""


@dataclass
class Program(Node):
    """Root of every parsed source: the well-formed top-level statements, in order."""
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self):
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self):
        return "".join(str(stmt) for stmt in self.statements)


# Expressions

@dataclass
class Identifier(Expression):
    token: Token
    value: str

    def __str__(self):
        return self.value


@dataclass
class IntegerLiteral(Expression):
    token: Token
    value: int

    def __str__(self):
        return self.token.literal


@dataclass
class Boolean(Expression):
    token: Token
    value: bool

    def __str__(self):
        return self.token.literal


@dataclass
class PrefixExpression(Expression):
    """<operator><right>, where operator is "!" or "-"."""
    token: Token
    operator: str
    right: Expression

    def __str__(self):
        return f"({self.operator}{self.right})"


@dataclass
class InfixExpression(Expression):
    token: Token
    left: Expression
    operator: str
    right: Expression

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class BlockStatement(Statement):
    """Statements between "{" and "}". Bodies of functions and if/else branches."""
    token: Token
    statements: List[Statement] = field(default_factory=list)

    def __str__(self):
        return "".join(str(stmt) for stmt in self.statements)


@dataclass
class IfExpression(Expression):
    token: Token
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self):
        result = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            result += f"else {self.alternative}"
        return result


@dataclass
class FunctionLiteral(Expression):
    token: Token
    parameters: List[Identifier]
    body: BlockStatement

    def __str__(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass
class CallExpression(Expression):
    """<function>(<arguments>). token is the "(" that made this a call."""
    token: Token
    function: Expression
    arguments: List[Expression] = field(default_factory=list)

    def __str__(self):
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.function}({args})"


# Statements

@dataclass
class LetStatement(Statement):
    token: Token
    name: Identifier
    value: Expression

    def __str__(self):
        return f"{self.token_literal()} {self.name} = {self.value};"


@dataclass
class ReturnStatement(Statement):
    token: Token
    return_value: Expression

    def __str__(self):
        return f"{self.token_literal()} {self.return_value};"


@dataclass
class ExpressionStatement(Statement):
    """Bare expression used as a statement. token is the first token of the expression."""
    token: Token
    expression: Expression

    def __str__(self):
        return str(self.expression)
