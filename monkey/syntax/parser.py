"""Pratt (precedence-climbing) parser for the Monkey language.

Grammar, loosely:

```
<program>    ::= <statement>*
<statement>  ::= "let" <ident> "=" <expr> [";"]
               | "return" <expr> [";"]
               | <expr> [";"]                       ; semicolons are optional (REPL leniency)
<block>      ::= "{" <statement>* "}"
<expr>       ::= <prefix> (<infix-op> <expr> | "(" <args> ")")*
<prefix>     ::= <ident> | <int> | "true" | "false" | ("!" | "-") <expr>
               | "(" <expr> ")"
               | "if" "(" <expr> ")" <block> ["else" <block>]
               | "fn" "(" [<ident> ("," <ident>)*] ")" <block>
```

Syntax errors never abort parsing: they are collected in Parser.errors, the offending statement is dropped from the
Program and parsing resumes at the next token.
"""

from enum import IntEnum

from monkey.syntax import ast
from monkey.syntax.token import TokenType

INT64_MAX = 2 ** 63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==, !=
    LESSGREATER = 3  # <, >
    SUM = 4          # +, -
    PRODUCT = 5      # *, /
    PREFIX = 6       # -x, !x
    CALL = 7         # f(x)


PRECEDENCES = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}


class Parser:
    """Builds an ast.Program from the tokens of a Lexer."""

    def __init__(self, lexer):
        self.lexer = lexer
        self.errors = []

        self.cur_token = None
        self.peek_token = None

        # prime cur_token and peek_token
        self.next_token()
        self.next_token()

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind):
        return self.cur_token.kind is kind

    def peek_token_is(self, kind):
        return self.peek_token.kind is kind

    def expect_peek(self, kind):
        """Advances if the next token is of the given kind. Otherwise records an error and stays put."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_error(self, kind):
        self.errors.append(f"expected next token to be {kind}, got {self.peek_token.kind} instead")

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self):
        return PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    def parse_program(self):
        """Parses tokens until EOF. Check self.errors before using the result: it is only complete if there are none.
        """
        program = ast.Program()
        while not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.next_token()
        return program

    # Statements

    def parse_statement(self):
        if self.cur_token_is(TokenType.LET):
            return self.parse_let_statement()
        elif self.cur_token_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        token = self.cur_token
        if not self.expect_peek(TokenType.IDENT):
            return None
        name = ast.Identifier(self.cur_token, self.cur_token.literal)

        if not self.expect_peek(TokenType.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return ast.LetStatement(token, name, value)

    def parse_return_statement(self):
        token = self.cur_token
        self.next_token()

        return_value = self.parse_expression(Precedence.LOWEST)
        if return_value is None:
            return None

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return ast.ReturnStatement(token, return_value)

    def parse_expression_statement(self):
        token = self.cur_token

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return ast.ExpressionStatement(token, expression)

    def parse_block_statement(self):
        """Parses statements up to the closing "}". Assumes cur_token is "{". Returns None if any statement inside
        the block was malformed or the block is never closed.
        """
        block = ast.BlockStatement(self.cur_token)
        self.next_token()

        malformed = False
        while not self.cur_token_is(TokenType.RBRACE):
            if self.cur_token_is(TokenType.EOF):
                self.errors.append(f"expected next token to be {TokenType.RBRACE}, got {TokenType.EOF} instead")
                return None

            stmt = self.parse_statement()
            if stmt is None:
                malformed = True
            else:
                block.statements.append(stmt)
            self.next_token()

        return None if malformed else block

    # Expressions

    def parse_expression(self, precedence):
        """Precedence climbing: absorbs infix operators while they bind tighter than precedence."""
        prefix = self._prefix_rule(self.cur_token.kind)
        if prefix is None:
            self.errors.append(f"no prefix parse function found for {self.cur_token.kind}")
            return None

        left = prefix()
        while left is not None and not self.peek_token_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self._infix_rule(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def _prefix_rule(self, kind):
        """Parsing method for a token that starts an expression, or None if kind cannot start one."""
        if kind is TokenType.IDENT:
            return self.parse_identifier
        elif kind is TokenType.INT:
            return self.parse_integer_literal
        elif kind in (TokenType.TRUE, TokenType.FALSE):
            return self.parse_boolean
        elif kind in (TokenType.BANG, TokenType.MINUS):
            return self.parse_prefix_expression
        elif kind is TokenType.LPAREN:
            return self.parse_grouped_expression
        elif kind is TokenType.IF:
            return self.parse_if_expression
        elif kind is TokenType.FUNCTION:
            return self.parse_function_literal
        return None

    def _infix_rule(self, kind):
        """Parsing method for a token that extends an already parsed expression, or None."""
        if kind is TokenType.LPAREN:
            return self.parse_call_expression
        elif kind in PRECEDENCES:
            return self.parse_infix_expression
        return None

    def parse_identifier(self):
        return ast.Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self):
        literal = self.cur_token.literal
        try:
            value = int(literal, 10)
            if value > INT64_MAX:
                raise ValueError(literal)
        except ValueError:
            self.errors.append(f"could not parse {literal} as integer")
            return None
        return ast.IntegerLiteral(self.cur_token, value)

    def parse_boolean(self):
        return ast.Boolean(self.cur_token, self.cur_token_is(TokenType.TRUE))

    def parse_prefix_expression(self):
        token = self.cur_token
        self.next_token()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return ast.PrefixExpression(token, token.literal, right)

    def parse_infix_expression(self, left):
        token = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return ast.InfixExpression(token, left, token.literal, right)

    def parse_grouped_expression(self):
        self.next_token()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None or not self.expect_peek(TokenType.RPAREN):
            return None
        return expression

    def parse_if_expression(self):
        token = self.cur_token
        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None or not self.expect_peek(TokenType.RPAREN):
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None

        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return ast.IfExpression(token, condition, consequence, alternative)

    def parse_function_literal(self):
        token = self.cur_token
        if not self.expect_peek(TokenType.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None or not self.expect_peek(TokenType.LBRACE):
            return None

        body = self.parse_block_statement()
        if body is None:
            return None
        return ast.FunctionLiteral(token, parameters, body)

    def parse_function_parameters(self):
        """Comma-separated identifiers up to ")". Assumes cur_token is "("."""
        parameters = []
        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return parameters

        if not self.expect_peek(TokenType.IDENT):
            return None
        parameters.append(ast.Identifier(self.cur_token, self.cur_token.literal))

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            parameters.append(ast.Identifier(self.cur_token, self.cur_token.literal))

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return parameters

    def parse_call_expression(self, function):
        token = self.cur_token
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return ast.CallExpression(token, function, arguments)

    def parse_call_arguments(self):
        """Comma-separated expressions up to ")". Assumes cur_token is "("."""
        arguments = []
        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return arguments

        self.next_token()
        argument = self.parse_expression(Precedence.LOWEST)
        if argument is None:
            return None
        arguments.append(argument)

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            argument = self.parse_expression(Precedence.LOWEST)
            if argument is None:
                return None
            arguments.append(argument)

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return arguments
