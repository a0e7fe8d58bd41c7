"""Lexical analysis for Monkey source text. Tokens are produced lazily, one per call to next_token: the lexer never
aborts, and characters it does not recognize come back as ILLEGAL tokens for the parser to report.
"""

from monkey.syntax.token import Token, TokenType, lookup_ident


class Lexer:
    """Scans source text into Tokens on demand."""
    WHITESPACE = " \t\n\r"
    SINGLE = {
        ";": TokenType.SEMICOLON,
        ",": TokenType.COMMA,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.ASTERISK,
        "/": TokenType.SLASH,
        "<": TokenType.LT,
        ">": TokenType.GT,
    }
    DOUBLE = {  # first char: (kind alone, kind when followed by "=")
        "=": (TokenType.ASSIGN, TokenType.EQ),
        "!": (TokenType.BANG, TokenType.NOT_EQ),
    }

    def __init__(self, source):
        self.source = source
        self.position = 0

    @property
    def char(self):
        """Character under the scan position, or "" at end of input."""
        return self.source[self.position] if self.position < len(self.source) else ""

    def peek(self):
        """Character after the scan position, or "" at end of input."""
        return self.source[self.position + 1] if self.position + 1 < len(self.source) else ""

    def next_token(self):
        """Returns the next Token. Once the input is exhausted, every call returns an EOF token."""
        self._skip_whitespace()

        char = self.char
        if not char:
            return Token(TokenType.EOF, "")

        if char in Lexer.DOUBLE:
            alone, with_eq = Lexer.DOUBLE[char]
            if self.peek() == "=":
                self.position += 2
                return Token(with_eq, char + "=")
            self.position += 1
            return Token(alone, char)

        if char in Lexer.SINGLE:
            self.position += 1
            return Token(Lexer.SINGLE[char], char)

        if is_letter(char):
            literal = self._read_while(is_letter)
            return Token(lookup_ident(literal), literal)

        if is_digit(char):
            return Token(TokenType.INT, self._read_while(is_digit))

        self.position += 1
        return Token(TokenType.ILLEGAL, char)

    def _skip_whitespace(self):
        while self.char and self.char in Lexer.WHITESPACE:
            self.position += 1

    def _read_while(self, predicate):
        start = self.position
        while self.char and predicate(self.char):
            self.position += 1
        return self.source[start:self.position]

    def __iter__(self):
        """Yields remaining tokens up to (not including) EOF."""
        token = self.next_token()
        while token.kind is not TokenType.EOF:
            yield token
            token = self.next_token()


def is_letter(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_digit(char):
    return "0" <= char <= "9"
