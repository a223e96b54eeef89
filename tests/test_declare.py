"""Unit tests for the Declare computation type."""

import unittest

from openapi_ops.declare import (
    Declare,
    declare,
    eval_declare,
    exec_declare,
    look,
    run_declare,
    sequence_declare,
)


class TestDeclare(unittest.TestCase):
    """Tests for building and running declarations."""

    def test_pure(self):
        """Test that pure declares nothing."""
        self.assertEqual(run_declare(Declare.pure(42)), ({}, 42))

    def test_declare(self):
        """Test registering a batch of definitions."""
        definitions, result = run_declare(declare({"A": {"type": "string"}}))
        self.assertEqual(definitions, {"A": {"type": "string"}})
        self.assertIsNone(result)

    def test_initial_definitions(self):
        """Test running from a non-empty table."""
        definitions = exec_declare(
            declare({"B": {"type": "integer"}}), {"A": {"type": "string"}}
        )
        self.assertEqual(list(definitions), ["A", "B"])

    def test_later_declarations_win(self):
        """Test that a later declaration replaces an earlier one."""
        computation = declare({"A": {"type": "string"}, "B": {}}).then(
            declare({"A": {"type": "integer"}})
        )
        definitions = exec_declare(computation)
        self.assertEqual(definitions["A"], {"type": "integer"})
        self.assertEqual(list(definitions), ["A", "B"])

    def test_bind_threads_definitions(self):
        """Test that bound computations see earlier declarations."""
        computation = declare({"A": {}}).then(look()).bind(
            lambda seen: declare({"Count": {"const": len(seen)}}).then(
                Declare.pure(sorted(seen))
            )
        )
        definitions, result = run_declare(computation)
        self.assertEqual(result, ["A"])
        self.assertEqual(definitions["Count"], {"const": 1})

    def test_map(self):
        """Test transforming the result."""
        computation = declare({"A": {}}).then(Declare.pure(2)).map(lambda x: x * 10)
        self.assertEqual(run_declare(computation), ({"A": {}}, 20))

    def test_sequence(self):
        """Test running computations in order."""
        computation = sequence_declare(
            [
                declare({"A": {}}).then(Declare.pure("a")),
                look().map(lambda seen: list(seen)),
                Declare.pure("c"),
            ]
        )
        definitions, results = run_declare(computation)
        self.assertEqual(results, ["a", ["A"], "c"])
        self.assertEqual(definitions, {"A": {}})

    def test_eval_declare(self):
        """Test keeping only the result."""
        self.assertEqual(eval_declare(declare({"A": {}}).then(Declare.pure("x"))), "x")

    def test_run_does_not_touch_initial_table(self):
        """Test that the caller's table is not modified."""
        initial = {"A": {}}
        exec_declare(declare({"B": {}}), initial)
        self.assertEqual(initial, {"A": {}})

    def test_look_returns_snapshot(self):
        """Test that look returns a copy of the table."""
        definitions, seen = run_declare(declare({"A": {}}).then(look()))
        seen["B"] = {}
        self.assertNotIn("B", definitions)


if __name__ == "__main__":
    unittest.main()
