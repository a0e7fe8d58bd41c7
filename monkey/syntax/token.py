"""Token kinds and keyword lookup for the Monkey language.

```
<ident>   ::= (<letter> | "_")+                  ; keywords are reclassified, see KEYWORDS
<int>     ::= <digit>+                           ; range is checked by the parser, not here
<op>      ::= "=" | "+" | "-" | "!" | "*" | "/" | "<" | ">" | "==" | "!="
<delim>   ::= "," | ";" | "(" | ")" | "{" | "}"
```
"""

from enum import Enum
from typing import NamedTuple


class TokenType(Enum):
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self):
        return self.value


class Token(NamedTuple):
    kind: TokenType
    literal: str

    def __repr__(self):
        return f"Token({self.kind.name}, '{self.literal}')"


KEYWORDS = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}


def lookup_ident(literal):
    """Returns the keyword kind of literal, or IDENT if literal is not a keyword (exact, case-sensitive match)."""
    return KEYWORDS.get(literal, TokenType.IDENT)
