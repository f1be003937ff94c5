"""Recursive descent parser for the pseudocode language. Consumes the Token list produced by lexical.py and builds the
tree defined in tree.py.

```
program    ::= statement* EOF
statement  ::= assignment | if | loop | write             ; chosen by the leading token only
assignment ::= IDENT "=" expr
if         ::= "si" "(" expr ")" "entonces" statement* ("sino" statement*)? "fin_si"
loop       ::= "repite" "(" expr ")" statement* "fin_repite"
write      ::= "escribir" expr

expr       ::= logic
logic      ::= equality (("y" | "o") equality)*
equality   ::= comparison (("==" | "!=") comparison)*
comparison ::= term ((">" | ">=" | "<" | "<=") term)*
term       ::= factor (("+" | "-") factor)*
factor     ::= unary (("*" | "/" | "%") unary)*
unary      ::= ("no" | "-") unary | primary
primary    ::= NUMBER | STRING | IDENT | "(" expr ")"
```

All binary operators are left-associative. Parsing is strict: the first token that does not fit raises a ParseError
(or a LexicalError if that token is an error token) and no partial tree is returned.
"""

from pseudocode.lang.error import LexicalError, ParseError
from pseudocode.syntax.lexical import TokenKind, tokenize
from pseudocode.syntax.tree import Assignment, BinaryExpr, Identifier, If, Literal, Loop, Program, UnaryExpr, Write


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

# binary precedence levels, lowest first
LOGIC = (TokenKind.Y, TokenKind.O)
EQUALITY = (TokenKind.EQ, TokenKind.NEQ)
COMPARISON = (TokenKind.GT, TokenKind.GTE, TokenKind.LT, TokenKind.LTE)
TERM = (TokenKind.PLUS, TokenKind.MINUS)
FACTOR = (TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT)
UNARY = (TokenKind.NO, TokenKind.MINUS)


class Parser:
    """Recursive descent parser over a token list ending in EOF."""

    def __init__(self, tokens):
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            raise ValueError("token list must end with an EOF token")

        self.tokens = tokens
        self.pos = 0

    # === Helpers ===

    def current(self):
        return self.tokens[self.pos]

    def previous(self):
        return self.tokens[self.pos - 1]

    def at_end(self):
        return self.current().kind is TokenKind.EOF

    def check(self, *kinds):
        return not self.at_end() and self.current().kind in kinds

    def advance(self):
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def match(self, *kinds):
        """Consumes and returns the current token if it is one of kinds, else None."""
        if self.check(*kinds):
            return self.advance()
        return None

    def error(self, msg):
        """Returns the error to raise at the current token: lexical if the lexer flagged it, else syntactic."""
        token = self.current()
        if token.kind is TokenKind.ERROR:
            return LexicalError(token)
        return ParseError(msg, token)

    def expect(self, kind, msg):
        if self.check(kind):
            return self.advance()
        raise self.error(msg)

    # === Statements ===

    def parse_program(self):
        statements = []
        while not self.at_end():
            statements.append(self.parse_statement())
        return Program(tuple(statements))

    def parse_statement(self):
        if self.match(TokenKind.IDENT):
            return self.parse_assignment()
        if self.match(TokenKind.SI):
            return self.parse_if()
        if self.match(TokenKind.REPITE):
            return self.parse_loop()
        if self.match(TokenKind.ESCRIBIR):
            return Write(self.parse_expr())

        raise self.error("expected a statement")

    def parse_block(self, *terminators):
        """Parses statements until one of terminators (or EOF) is the current token."""
        statements = []
        while not self.at_end() and not self.check(*terminators):
            statements.append(self.parse_statement())
        return tuple(statements)

    def parse_assignment(self):
        name = self.previous()
        self.expect(TokenKind.ASSIGN, "expected '=' after identifier")
        return Assignment(name.text, self.parse_expr(), name.line, name.column)

    def parse_if(self):
        self.expect(TokenKind.LPAREN, "expected '(' after 'si'")
        condition = self.parse_expr()
        self.expect(TokenKind.RPAREN, "expected ')' after condition")
        self.expect(TokenKind.ENTONCES, "expected 'entonces' after condition")

        then_branch = self.parse_block(TokenKind.SINO, TokenKind.FIN_SI)

        else_branch = None
        if self.match(TokenKind.SINO):
            else_branch = self.parse_block(TokenKind.FIN_SI)

        self.expect(TokenKind.FIN_SI, "expected 'fin_si'")
        return If(condition, then_branch, else_branch)

    def parse_loop(self):
        self.expect(TokenKind.LPAREN, "expected '(' after 'repite'")
        condition = self.parse_expr()
        self.expect(TokenKind.RPAREN, "expected ')' after condition")

        body = self.parse_block(TokenKind.FIN_REPITE)

        self.expect(TokenKind.FIN_REPITE, "expected 'fin_repite'")
        return Loop(condition, body)

    # === Expressions ===

    def parse_expr(self):
        return self.parse_binary(0)

    def parse_binary(self, level):
        """Parses one left-associative precedence level; levels below FACTOR recurse into the next one."""
        levels = (LOGIC, EQUALITY, COMPARISON, TERM, FACTOR)
        if level == len(levels):
            return self.parse_unary()

        expr = self.parse_binary(level + 1)
        while True:
            operator = self.match(*levels[level])
            if operator is None:
                return expr
            expr = BinaryExpr(expr, operator, self.parse_binary(level + 1))

    def parse_unary(self):
        operator = self.match(*UNARY)
        if operator:
            return UnaryExpr(operator, self.parse_unary())
        return self.parse_primary()

    def parse_primary(self):
        if self.match(TokenKind.NUMBER):
            return Literal(self.parse_number(self.previous()))

        if self.match(TokenKind.STRING):
            return Literal(self.previous().text)

        if self.match(TokenKind.IDENT):
            token = self.previous()
            return Identifier(token.text, token.line, token.column)

        if self.match(TokenKind.LPAREN):
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN, "expected ')' after expression")
            return expr

        raise self.error("expected an expression")

    @staticmethod
    def parse_number(token):
        """Numerals with a '.' are floats, others 64-bit integers. The lexer should never produce a malformed numeral,
        but it is checked here anyway.
        """
        text = token.text
        try:
            if "." in text:
                return float(text)
            value = int(text)
        except ValueError:
            raise ParseError("malformed number", token)

        if not INT64_MIN <= value <= INT64_MAX:
            raise ParseError("integer literal out of range", token)
        return value


def parse(tokens):
    """Parses a token list into a Program."""
    return Parser(tokens).parse_program()


def parse_source(source):
    """Convenience function to lex and parse source code."""
    return parse(tokenize(source))
