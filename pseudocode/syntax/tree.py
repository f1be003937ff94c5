"""Abstract syntax tree for the pseudocode language.

The node set is closed:

```
Program     ::= Statement*
Statement   ::= Assignment | If | Loop | Write
Expression  ::= BinaryExpr | UnaryExpr | Literal | Identifier
```

Nodes are frozen dataclasses and own their children (statement sequences are tuples). Traversals are written as
Visitor subclasses: every node's accept calls the matching visit_* method and returns whatever it returns, so a new
traversal never needs to touch the node definitions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from pseudocode.syntax.lexical import Token


class Node(ABC):
    """Superclass of every AST node."""

    @abstractmethod
    def accept(self, visitor):
        """Dispatches to the visitor method for this node type and returns its result."""


@dataclass(frozen=True)
class Literal(Node):
    value: Union[int, float, str]

    def accept(self, visitor):
        return visitor.visit_literal(self)


@dataclass(frozen=True)
class Identifier(Node):
    name: str
    line: int = field(default=0, compare=False, repr=False)
    column: int = field(default=0, compare=False, repr=False)

    def accept(self, visitor):
        return visitor.visit_identifier(self)


@dataclass(frozen=True)
class BinaryExpr(Node):
    left: Node
    operator: Token
    right: Node

    def accept(self, visitor):
        return visitor.visit_binary(self)


@dataclass(frozen=True)
class UnaryExpr(Node):
    operator: Token
    operand: Node

    def accept(self, visitor):
        return visitor.visit_unary(self)


@dataclass(frozen=True)
class Assignment(Node):
    name: str
    value: Node
    line: int = field(default=0, compare=False, repr=False)
    column: int = field(default=0, compare=False, repr=False)

    def accept(self, visitor):
        return visitor.visit_assignment(self)


@dataclass(frozen=True)
class If(Node):
    """si (condition) entonces then_branch [sino else_branch] fin_si. else_branch is None when there is no sino."""
    condition: Node
    then_branch: Tuple[Node, ...]
    else_branch: Optional[Tuple[Node, ...]] = None

    def accept(self, visitor):
        return visitor.visit_if(self)


@dataclass(frozen=True)
class Loop(Node):
    """repite (condition) body fin_repite: a while loop."""
    condition: Node
    body: Tuple[Node, ...]

    def accept(self, visitor):
        return visitor.visit_loop(self)


@dataclass(frozen=True)
class Write(Node):
    expr: Node

    def accept(self, visitor):
        return visitor.visit_write(self)


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Node, ...]

    def accept(self, visitor):
        return visitor.visit_program(self)


class Visitor(ABC):
    """A traversal over the AST. Subclasses implement one method per node type."""

    def visit(self, node):
        return node.accept(self)

    @abstractmethod
    def visit_program(self, node):
        ...

    @abstractmethod
    def visit_assignment(self, node):
        ...

    @abstractmethod
    def visit_if(self, node):
        ...

    @abstractmethod
    def visit_loop(self, node):
        ...

    @abstractmethod
    def visit_write(self, node):
        ...

    @abstractmethod
    def visit_binary(self, node):
        ...

    @abstractmethod
    def visit_unary(self, node):
        ...

    @abstractmethod
    def visit_literal(self, node):
        ...

    @abstractmethod
    def visit_identifier(self, node):
        ...
