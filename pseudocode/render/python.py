"""Transliterates a pseudocode tree into an equivalent, self-executing Python 3 script.

Each node maps to one Python construct:
    Assignment  ->  name = value
    If          ->  if/else block ("pass" stands in for an empty branch)
    Loop        ->  while loop on the same condition
    Write       ->  print(...)

Operators map one to one (y -> and, o -> or, no -> not). Any operand that is not a bare literal or identifier is put
in parentheses, so the Python precedence rules never come into play. This can add redundant parentheses, never miss
needed ones.
"""

import keyword
import math

from pseudocode.lang.error import TranslationError
from pseudocode.syntax.lexical import TokenKind
from pseudocode.syntax.tree import Identifier, Literal, Visitor


BINARY = {
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.STAR: "*",
    TokenKind.SLASH: "/",
    TokenKind.PERCENT: "%",
    TokenKind.EQ: "==",
    TokenKind.NEQ: "!=",
    TokenKind.GT: ">",
    TokenKind.GTE: ">=",
    TokenKind.LT: "<",
    TokenKind.LTE: "<=",
    TokenKind.Y: "and",
    TokenKind.O: "or",
}

UNARY = {
    TokenKind.MINUS: "-",
    TokenKind.NO: "not ",
}

ESCAPES = [("\\", "\\\\"), ('"', '\\"'), ("\n", "\\n"), ("\r", "\\r"), ("\t", "\\t")]  # backslash first


class NameCollector(Visitor):
    """Gathers every variable name used in a program, assigned or read."""

    def __init__(self):
        self.names = set()

    def collect(self, program):
        self.names = set()
        program.accept(self)
        return self.names

    def visit_program(self, node):
        for statement in node.statements:
            statement.accept(self)

    def visit_assignment(self, node):
        self.names.add(node.name)
        node.value.accept(self)

    def visit_if(self, node):
        node.condition.accept(self)
        for statement in node.then_branch:
            statement.accept(self)
        for statement in node.else_branch or ():
            statement.accept(self)

    def visit_loop(self, node):
        node.condition.accept(self)
        for statement in node.body:
            statement.accept(self)

    def visit_write(self, node):
        node.expr.accept(self)

    def visit_binary(self, node):
        node.left.accept(self)
        node.right.accept(self)

    def visit_unary(self, node):
        node.operand.accept(self)

    def visit_literal(self, node):
        pass

    def visit_identifier(self, node):
        self.names.add(node.name)


class PythonRenderer(Visitor):
    """Renders a Program to Python source. Statement visits return their lines (newline-terminated) indented to
    self.depth; expression visits return an expression string.
    """
    INDENT = "    "
    HEADER = ("#!/usr/bin/env python3\n"
              "# -*- coding: utf-8 -*-\n"
              "# Generated automatically from pseudocode\n")
    TRAILER = ("\n\n"
               "if __name__ == '__main__':\n"
               "    main()\n")
    RESERVED = {"print", "main"}  # names the generated script relies on

    def __init__(self):
        self.depth = 0
        self.names = set()  # names used by the program being rendered

    def render(self, program):
        """Returns the whole script for program. The body is wrapped in main() only if there is one."""
        self.depth = 1
        self.names = NameCollector().collect(program)
        try:
            body = program.accept(self)
        finally:
            self.depth = 0
            self.names = set()

        if not body:
            return PythonRenderer.HEADER
        return PythonRenderer.HEADER + "\ndef main():\n" + body + PythonRenderer.TRAILER

    def indent(self):
        return PythonRenderer.INDENT * self.depth

    def block(self, statements):
        """Renders statements one level deeper than the current one."""
        self.depth += 1
        try:
            if not statements:
                return self.indent() + "pass\n"
            return "".join(statement.accept(self) for statement in statements)
        finally:
            self.depth -= 1

    def name(self, name):
        """Python-safe spelling of a variable name. Keywords and reserved names get underscores appended until the
        result is not used by the program itself, so 'print' becomes 'print__' when 'print_' is also a variable.
        """
        if not keyword.iskeyword(name) and name not in PythonRenderer.RESERVED:
            return name

        name += "_"
        while name in self.names:
            name += "_"
        return name

    def operand(self, node):
        text = node.accept(self)
        if isinstance(node, (Literal, Identifier)):
            return text
        return f"({text})"

    # === Statements ===

    def visit_program(self, node):
        return "".join(statement.accept(self) for statement in node.statements)

    def visit_assignment(self, node):
        return f"{self.indent()}{self.name(node.name)} = {node.value.accept(self)}\n"

    def visit_if(self, node):
        result = f"{self.indent()}if {node.condition.accept(self)}:\n"
        result += self.block(node.then_branch)

        if node.else_branch is not None:
            result += f"{self.indent()}else:\n"
            result += self.block(node.else_branch)

        return result

    def visit_loop(self, node):
        return f"{self.indent()}while {node.condition.accept(self)}:\n" + self.block(node.body)

    def visit_write(self, node):
        return f"{self.indent()}print({node.expr.accept(self)})\n"

    # === Expressions ===

    def visit_binary(self, node):
        operator = BINARY.get(node.operator.kind)
        if operator is None:
            raise TranslationError("unsupported binary operator '{}'", node.operator.text,
                                   node.operator.line, node.operator.column, len(node.operator.text))
        return f"{self.operand(node.left)} {operator} {self.operand(node.right)}"

    def visit_unary(self, node):
        operator = UNARY.get(node.operator.kind)
        if operator is None:
            raise TranslationError("unsupported unary operator '{}'", node.operator.text,
                                   node.operator.line, node.operator.column, len(node.operator.text))
        return operator + self.operand(node.operand)

    def visit_literal(self, node):
        value = node.value

        if isinstance(value, str):
            for char, escaped in ESCAPES:
                value = value.replace(char, escaped)
            return f'"{value}"'

        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float) and math.isfinite(value):
            return repr(value)

        raise TranslationError("literal {} has no Python equivalent", repr(value))

    def visit_identifier(self, node):
        return self.name(node.name)


def render(program):
    """Convenience function to render program with a fresh renderer."""
    return PythonRenderer().render(program)
