"""
Utils module behavioral tests (sentinel and helpers).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from cliparse.utils import Unset, UnsetType, coalesce, rename, mirror, pluralize


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testSurvivesCopies(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testSubclassingRejected(self):
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})

    def testUnionsWithTypes(self):
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce((), "fallback"), ())
        self.assertIsNone(coalesce(Unset))


class TestHelpers(TestCase):
    """Behavioral tests for rename, mirror and pluralize."""

    def testRenameFunctionForm(self):
        def f():
            pass

        rename(f, "do_work")
        self.assertEqual(f.__name__, "do_work")
        self.assertEqual(f.__qualname__, "do_work")

    def testRenameDecoratorForm(self):
        @rename("do_work")
        def f():
            pass

        self.assertEqual(f.__name__, "do_work")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(42, "name")

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            tags = mirror("tags")
            name = mirror("name")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._tags = {"x"}
                self._name = "holder"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.tags, frozenset)
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(TypeError):
            holder.table["b"] = 2

    def testPluralize(self):
        self.assertEqual(pluralize("option", 1), "option")
        self.assertEqual(pluralize("option", 2), "options")
        self.assertEqual(pluralize("option", 0), "options")
        self.assertEqual(pluralize("match"), "matches")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("key"), "keys")


if __name__ == "__main__":
    unittest.main()
