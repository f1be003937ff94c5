import unittest

from pseudocode.lang.error import IncompatibleTypeError, InterpreterError, UndefinedVariableError
from pseudocode.runtime.scope import ScopeTable, Symbol, ValueType


class ValueTypeTestCase(unittest.TestCase):

    def test_of(self):
        cases = [
            (1, ValueType.INTEGER),
            (-7, ValueType.INTEGER),
            (1.0, ValueType.FLOAT),
            ("", ValueType.STRING),
            ("uno", ValueType.STRING),
            (True, ValueType.BOOLEAN),
            (False, ValueType.BOOLEAN),
        ]
        for case, result in cases:
            self.assertIs(result, ValueType.of(case), repr(case))

        should_fail = [None, [], {}, object()]
        for case in should_fail:
            self.assertRaises(TypeError, ValueType.of, case)

    def test_accepts(self):
        should_pass = [(declared, declared) for declared in ValueType] + [(ValueType.FLOAT, ValueType.INTEGER)]
        for declared, given in should_pass:
            self.assertTrue(declared.accepts(given), (declared, given))

        should_fail = [
            (ValueType.INTEGER, ValueType.FLOAT),
            (ValueType.INTEGER, ValueType.STRING),
            (ValueType.INTEGER, ValueType.BOOLEAN),
            (ValueType.STRING, ValueType.INTEGER),
            (ValueType.BOOLEAN, ValueType.INTEGER),
            (ValueType.FLOAT, ValueType.BOOLEAN),
        ]
        for declared, given in should_fail:
            self.assertFalse(declared.accepts(given), (declared, given))


class ScopeTableTestCase(unittest.TestCase):

    def setUp(self):
        self.table = ScopeTable()

    def test_define_and_lookup(self):
        self.table.define("x", 5)
        self.assertEqual(5, self.table.lookup("x"))
        self.assertEqual(Symbol("x", 5, ValueType.INTEGER), self.table.symbol("x"))
        self.assertTrue(self.table.exists("x"))
        self.assertFalse(self.table.exists("y"))
        self.assertIsNone(self.table.symbol("y"))

    def test_undefined(self):
        self.assertRaises(UndefinedVariableError, self.table.lookup, "x")
        self.assertRaises(UndefinedVariableError, self.table.assign, "x", 1)

        try:
            self.table.lookup("total", 3, 7)
        except UndefinedVariableError as error:
            self.assertEqual("total", error.name)
            self.assertEqual((3, 7), (error.line, error.column))
            self.assertIsInstance(error, InterpreterError)
        else:
            self.fail("UndefinedVariableError not raised")

    def test_global_frame_is_kept(self):
        self.assertEqual(1, self.table.depth)
        self.table.exit_scope()
        self.table.exit_scope()
        self.assertEqual(1, self.table.depth)

        self.table.define("x", 1)
        self.table.exit_scope()
        self.assertEqual(1, self.table.lookup("x"))

    def test_nested_frames(self):
        self.table.define("x", 1)
        self.table.enter_scope()
        self.assertEqual(2, self.table.depth)

        self.table.define("y", 2)
        self.assertEqual(1, self.table.lookup("x"))
        self.assertEqual(2, self.table.lookup("y"))

        self.table.exit_scope()
        self.assertFalse(self.table.exists("y"))
        self.assertEqual(1, self.table.lookup("x"))

    def test_shadowing(self):
        self.table.define("x", 1)
        self.table.enter_scope()
        self.table.define("x", "inner")
        self.assertEqual("inner", self.table.lookup("x"))

        # assign updates the innermost binding only
        self.table.assign("x", "changed")
        self.table.exit_scope()
        self.assertEqual(1, self.table.lookup("x"))

    def test_assign_outer(self):
        self.table.define("x", 1)
        self.table.enter_scope()
        self.table.enter_scope()
        self.table.assign("x", 2)
        self.table.exit_scope()
        self.table.exit_scope()
        self.assertEqual(2, self.table.lookup("x"))

    def test_widening(self):
        self.table.define("x", 3.0)
        self.table.assign("x", 1)
        self.assertEqual(1, self.table.lookup("x"))
        self.assertIs(ValueType.FLOAT, self.table.symbol("x").type)

        # the declared type stays float, so floats are still accepted
        self.table.assign("x", 2.5)
        self.assertEqual(2.5, self.table.lookup("x"))

    def test_incompatible(self):
        should_fail = [
            (1, [1.0, "1", True]),
            (1.0, ["1.0", False]),
            ("uno", [1, 1.0, True]),
            (True, [1, 1.0, "true"]),
        ]
        for initial, values in should_fail:
            for value in values:
                table = ScopeTable()
                table.define("v", initial)
                self.assertRaises(IncompatibleTypeError, table.assign, "v", value)
                self.assertEqual(initial, table.lookup("v"), (initial, value))

    def test_incompatible_error(self):
        self.table.define("y", 1)
        try:
            self.table.assign("y", 1.0)
        except IncompatibleTypeError as error:
            self.assertIs(ValueType.INTEGER, error.declared)
            self.assertIs(ValueType.FLOAT, error.given)
            self.assertIn("cannot assign float to 'y' of type integer", str(error))
        else:
            self.fail("IncompatibleTypeError not raised")

    def test_define_replaces_in_current_frame(self):
        self.table.define("x", 1)
        self.table.define("x", "text")
        self.assertIs(ValueType.STRING, self.table.symbol("x").type)

    def test_clear_current(self):
        self.table.define("x", 1)
        self.table.enter_scope()
        self.table.define("y", 2)
        self.table.clear_current()
        self.assertFalse(self.table.exists("y"))
        self.assertTrue(self.table.exists("x"))

    def test_repr(self):
        self.table.define("x", 1)
        self.table.enter_scope()
        self.table.define("s", "a")
        text = repr(self.table)
        self.assertLess(text.index("frame 1"), text.index("frame 0"))
        self.assertIn("x=1:integer", text)
        self.assertIn("s='a':string", text)


if __name__ == '__main__':
    unittest.main()
