"""Tree-walking interpreter for the pseudocode language.

Statements are executed for their effect; expressions evaluate to one of four runtime values: int, float, str or
bool. Both operands of a binary operator are always evaluated, left to right.

Operator semantics:
    + - *       int op int is an int, any float makes a float; + with a string operand concatenates display texts
    /           always float division
    %           int operands only
    < <= > >=   numbers compare as floats, strings lexicographically, anything else is an error
    == !=       numbers compare as floats, other values by type and value
    y o no      operate on truthiness (None, False, 0, 0.0 and "" are false)
"""

import sys

from pseudocode.lang.error import DivisionByZeroError, InterpreterError, OperandTypeError
from pseudocode.runtime.scope import ScopeTable, ValueType
from pseudocode.syntax.lexical import TokenKind
from pseudocode.syntax.tree import Visitor


def is_integer(value):
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value):
    return is_integer(value) or isinstance(value, float)


def truthy(value):
    """Truthiness coercion used by conditions and logical operators."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def display(value):
    """Natural text representation of a runtime value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def type_name(value):
    return "null" if value is None else ValueType.of(value).value


class Interpreter(Visitor):
    """Executes a Program. Output of escribir statements goes to self.output (a text stream)."""

    def __init__(self, output=None):
        self.output = output if output is not None else sys.stdout
        self.scope = None

    def run(self, program, scope=None):
        """Executes program. A fresh ScopeTable is used unless scope is given (the shell keeps one across runs)."""
        self.scope = scope if scope is not None else ScopeTable()
        program.accept(self)

    # === Statements ===

    def execute_block(self, statements):
        """Runs statements inside their own frame."""
        self.scope.enter_scope()
        try:
            for statement in statements:
                statement.accept(self)
        finally:
            self.scope.exit_scope()

    def visit_program(self, node):
        for statement in node.statements:
            statement.accept(self)

    def visit_assignment(self, node):
        value = node.value.accept(self)

        if self.scope.exists(node.name):
            self.scope.assign(node.name, value, node.line, node.column)
        else:
            self.scope.define(node.name, value)

    def visit_if(self, node):
        if truthy(node.condition.accept(self)):
            self.execute_block(node.then_branch)
        elif node.else_branch is not None:
            self.execute_block(node.else_branch)

    def visit_loop(self, node):
        while truthy(node.condition.accept(self)):
            self.execute_block(node.body)

    def visit_write(self, node):
        self.output.write(display(node.expr.accept(self)) + "\n")

    # === Expressions ===

    def visit_binary(self, node):
        left = node.left.accept(self)
        right = node.right.accept(self)

        operation = BINARY.get(node.operator.kind)
        if operation is None:
            raise InterpreterError("unsupported binary operator '{}'", node.operator.text, internal=True)
        return operation(left, right, node.operator)

    def visit_unary(self, node):
        operand = node.operand.accept(self)
        operator = node.operator

        if operator.kind is TokenKind.MINUS:
            if not is_number(operand):
                raise operand_error("cannot negate a {}", operator, type_name(operand))
            return -operand

        if operator.kind is TokenKind.NO:
            return not truthy(operand)

        raise InterpreterError("unsupported unary operator '{}'", operator.text, internal=True)

    def visit_literal(self, node):
        return node.value

    def visit_identifier(self, node):
        return self.scope.lookup(node.name, node.line, node.column)


def operand_error(msg, operator, *exprs):
    return OperandTypeError(msg, [*exprs], operator.line, operator.column, len(operator.text))


def to_float(value, operator):
    if not is_number(value):
        raise operand_error("operator '{}' expects numbers, got {}", operator, operator.text, type_name(value))
    return float(value)


def arithmetic(function):
    """Wraps function so that it runs on two ints, or on two floats if either operand is a float."""

    def operation(left, right, operator):
        if is_integer(left) and is_integer(right):
            return function(left, right)
        return function(to_float(left, operator), to_float(right, operator))

    return operation


numeric_add = arithmetic(lambda a, b: a + b)


def add(left, right, operator):
    if isinstance(left, str) or isinstance(right, str):
        return display(left) + display(right)
    return numeric_add(left, right, operator)


def divide(left, right, operator):
    dividend, divisor = to_float(left, operator), to_float(right, operator)
    if divisor == 0:
        raise DivisionByZeroError("division by zero", line=operator.line, column=operator.column)
    return dividend / divisor


def modulo(left, right, operator):
    if not (is_integer(left) and is_integer(right)):
        raise operand_error("operator '{}' expects integers, got {} and {}", operator, operator.text,
                            type_name(left), type_name(right))
    if right == 0:
        raise DivisionByZeroError("modulo by zero", line=operator.line, column=operator.column)
    return left % right


def compare(left, right, operator):
    """Returns -1, 0 or 1 like a three-way comparison."""
    if is_number(left) and is_number(right):
        left, right = float(left), float(right)
    elif not (isinstance(left, str) and isinstance(right, str)):
        raise operand_error("cannot compare {} with {}", operator, type_name(left), type_name(right))
    return (left > right) - (left < right)


def equals(left, right):
    if left is None or right is None:
        return left is None and right is None
    if is_number(left) and is_number(right):
        return float(left) == float(right)
    return type(left) is type(right) and left == right


BINARY = {
    TokenKind.PLUS: add,
    TokenKind.MINUS: arithmetic(lambda a, b: a - b),
    TokenKind.STAR: arithmetic(lambda a, b: a * b),
    TokenKind.SLASH: divide,
    TokenKind.PERCENT: modulo,
    TokenKind.EQ: lambda left, right, operator: equals(left, right),
    TokenKind.NEQ: lambda left, right, operator: not equals(left, right),
    TokenKind.GT: lambda left, right, operator: compare(left, right, operator) > 0,
    TokenKind.GTE: lambda left, right, operator: compare(left, right, operator) >= 0,
    TokenKind.LT: lambda left, right, operator: compare(left, right, operator) < 0,
    TokenKind.LTE: lambda left, right, operator: compare(left, right, operator) <= 0,
    TokenKind.Y: lambda left, right, operator: truthy(left) and truthy(right),
    TokenKind.O: lambda left, right, operator: truthy(left) or truthy(right),
}


def interpret(program, output=None):
    """Convenience function to run program with a fresh interpreter."""
    Interpreter(output).run(program)
