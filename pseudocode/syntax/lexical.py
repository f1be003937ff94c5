"""Lexical analysis for the pseudocode language: turns raw source text into a flat list of Tokens in a single pass.

Tokens can be loosely defined as follows:

```
<keyword>    ::= "si" | "entonces" | "sino" | "fin_si" | "repite" | "fin_repite" | "escribir" | "y" | "o" | "no"
<identifier> ::= (<letter> | "_") (<letter> | <digit> | "_")*     ; anything that is not a keyword
<number>     ::= <digit>+ ("." <digit>+)?                          ; "1." is a number followed by an error token
<string>     ::= '"' <char>* '"'                                   ; may span lines, no escapes
<operator>   ::= "+" | "-" | "*" | "/" | "%" | "=" | "==" | "!=" | "<" | "<=" | ">" | ">="
<delimiter>  ::= "(" | ")" | ";"

<comment>    ::= "//" <char>*                                      ; up to end of line
```

The lexer never fails: characters it does not understand become ERROR tokens, which the parser reports.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    # keywords
    SI = auto()
    ENTONCES = auto()
    SINO = auto()
    FIN_SI = auto()
    REPITE = auto()
    FIN_REPITE = auto()
    ESCRIBIR = auto()
    Y = auto()
    O = auto()
    NO = auto()

    # identifiers & literals
    IDENT = auto()
    NUMBER = auto()
    STRING = auto()

    # operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    ASSIGN = auto()
    EQ = auto()
    NEQ = auto()
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()

    # delimiters
    LPAREN = auto()
    RPAREN = auto()
    SEMICOLON = auto()

    # special
    EOF = auto()
    ERROR = auto()


KEYWORDS = {
    "si": TokenKind.SI,
    "entonces": TokenKind.ENTONCES,
    "sino": TokenKind.SINO,
    "fin_si": TokenKind.FIN_SI,
    "repite": TokenKind.REPITE,
    "fin_repite": TokenKind.FIN_REPITE,
    "escribir": TokenKind.ESCRIBIR,
    "y": TokenKind.Y,
    "o": TokenKind.O,
    "no": TokenKind.NO,
}

SINGLE_CHAR = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ";": TokenKind.SEMICOLON,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
}

# first char: (kind alone, kind when followed by "=")
WITH_EQUALS = {
    "=": (TokenKind.ASSIGN, TokenKind.EQ),
    "!": (TokenKind.ERROR, TokenKind.NEQ),
    "<": (TokenKind.LT, TokenKind.LTE),
    ">": (TokenKind.GT, TokenKind.GTE),
}


@dataclass(frozen=True)
class Token:
    """Smallest lexical unit. For STRING tokens, text is the string's value without quotes."""
    kind: TokenKind
    text: str
    line: int
    column: int

    def __repr__(self):
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"


def is_digit(char):
    return "0" <= char <= "9"


def is_letter(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


class Lexer:
    """Single-pass scanner over a source string."""

    def __init__(self, source):
        self.source = source
        self.tokens = []

        self.pos = 0
        self.line = 1
        self.column = 1

    def at_end(self):
        return self.pos >= len(self.source)

    def peek(self, offset=0):
        """Look ahead without consuming. Returns '' past the end of the source."""
        idx = self.pos + offset
        return self.source[idx] if idx < len(self.source) else ""

    def advance(self):
        """Consumes and returns the current character, keeping line/column up to date."""
        char = self.source[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def add(self, kind, text, line, column):
        self.tokens.append(Token(kind, text, line, column))

    def scan(self):
        """Scans the whole source. The returned list always ends with exactly one EOF token."""
        while not self.at_end():
            self.scan_token()

        self.add(TokenKind.EOF, "", self.line, self.column)
        return self.tokens

    def scan_token(self):
        line, column = self.line, self.column
        start = self.pos
        char = self.advance()

        if char in " \t\r\n":
            return

        if char == "/" and self.peek() == "/":
            while not self.at_end() and self.peek() != "\n":
                self.advance()

        elif char in SINGLE_CHAR:
            self.add(SINGLE_CHAR[char], char, line, column)

        elif char in WITH_EQUALS:
            alone, with_equals = WITH_EQUALS[char]
            if self.peek() == "=":
                self.advance()
                self.add(with_equals, char + "=", line, column)
            else:
                self.add(alone, char, line, column)

        elif char == '"':
            self.scan_string(line, column)

        elif is_digit(char):
            self.scan_number(start, line, column)

        elif is_letter(char):
            self.scan_identifier(start, line, column)

        else:
            self.add(TokenKind.ERROR, char, line, column)

    def scan_string(self, line, column):
        """Scans up to the closing quote. An unterminated string becomes an ERROR token holding the raw lexeme."""
        start = self.pos
        while not self.at_end() and self.peek() != '"':
            self.advance()

        if self.at_end():
            self.add(TokenKind.ERROR, '"' + self.source[start:], line, column)
            return

        value = self.source[start:self.pos]
        self.advance()  # closing quote
        self.add(TokenKind.STRING, value, line, column)

    def scan_number(self, start, line, column):
        while is_digit(self.peek()):
            self.advance()

        # a dot is only part of the number if a digit follows it
        if self.peek() == "." and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add(TokenKind.NUMBER, self.source[start:self.pos], line, column)

    def scan_identifier(self, start, line, column):
        while is_letter(self.peek()) or is_digit(self.peek()):
            self.advance()

        text = self.source[start:self.pos]
        self.add(KEYWORDS.get(text, TokenKind.IDENT), text, line, column)


def tokenize(source):
    """Convenience function to scan source code into a list of Tokens."""
    return Lexer(source).scan()
