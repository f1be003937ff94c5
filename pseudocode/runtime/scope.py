"""Nested variable scopes for the pseudocode interpreter.

A ScopeTable is a stack of frames (dicts of name: Symbol). Frame 0 is the global frame and is never popped. Lookups
walk the stack from the innermost frame outwards, so no frame needs to know its parent.

A variable's type is fixed by the first value it is defined with. The only conversion allowed on later assignments is
widening: an integer may be stored in a float variable.
"""

from dataclasses import dataclass
from enum import Enum

from pseudocode.lang.error import IncompatibleTypeError, UndefinedVariableError


class ValueType(Enum):
    """The four kinds of runtime values."""
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"

    @staticmethod
    def of(value):
        """Infers the ValueType of a runtime value."""
        # bool before int: bool is a subclass of int
        if isinstance(value, bool):
            return ValueType.BOOLEAN
        if isinstance(value, int):
            return ValueType.INTEGER
        if isinstance(value, float):
            return ValueType.FLOAT
        if isinstance(value, str):
            return ValueType.STRING
        raise TypeError(f"unsupported runtime value: {value!r}")

    def accepts(self, other):
        """Whether a value of type other may be assigned to a variable of this type."""
        return self is other or (self is ValueType.FLOAT and other is ValueType.INTEGER)


@dataclass
class Symbol:
    name: str
    value: object
    type: ValueType


class ScopeTable:
    """Stack of variable frames with type-checked assignment."""

    def __init__(self):
        self.frames = [{}]  # global frame

    @property
    def depth(self):
        """Number of active frames, global included."""
        return len(self.frames)

    def enter_scope(self):
        self.frames.append({})

    def exit_scope(self):
        """Pops the innermost frame. The global frame is kept."""
        if len(self.frames) > 1:
            self.frames.pop()

    def define(self, name, value):
        """Creates (or replaces) name in the innermost frame, typed after value."""
        self.frames[-1][name] = Symbol(name, value, ValueType.of(value))

    def symbol(self, name):
        """Returns the Symbol bound to name in the innermost frame that has it, or None."""
        for frame in reversed(self.frames):
            if name in frame:
                return frame[name]
        return None

    def exists(self, name):
        return self.symbol(name) is not None

    def lookup(self, name, line=None, column=None):
        """Returns the value of name. line and column are only used for error reporting."""
        symbol = self.symbol(name)
        if symbol is None:
            raise UndefinedVariableError(name, line, column)
        return symbol.value

    def assign(self, name, value, line=None, column=None):
        """Overwrites an existing variable where it was found, checking type compatibility first."""
        symbol = self.symbol(name)
        if symbol is None:
            raise UndefinedVariableError(name, line, column)

        given = ValueType.of(value)
        if not symbol.type.accepts(given):
            raise IncompatibleTypeError(name, symbol.type, given, line, column)

        symbol.value = value

    def clear_current(self):
        """Removes every variable of the innermost frame."""
        self.frames[-1].clear()

    def __repr__(self):
        lines = ["ScopeTable{"]
        for idx in range(len(self.frames) - 1, -1, -1):
            symbols = ", ".join(f"{sym.name}={sym.value!r}:{sym.type.value}" for sym in self.frames[idx].values())
            lines.append(f"  frame {idx}: {{{symbols}}}")
        lines.append("}")
        return "\n".join(lines)
