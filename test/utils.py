"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel (singleton identity, falsy, repr, copy/pickle, finality).
- coalesce() only replacing Unset.
- mirror() read-only snapshots and the rename() decorator.
- ordinal() labels used in position-first messages.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from flagstone.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsely(self) -> None:
        """
        The sentinel is falsy but distinct from other falsy values.
        """
        self.assertFalse(bool(Unset))
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, False)
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPicklePreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-841
                pass

    def testUnion(self) -> None:
        self.assertIsInstance(Unset, str | UnsetType)
        self.assertNotIsInstance("", int | UnsetType)


class CoalesceTest(TestCase):
    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalsyValues(self) -> None:
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class MirrorTest(TestCase):
    """
    mirror() exposes private fields read-only, copying containers.
    """

    class Holder:
        items = mirror("items")
        name = mirror("name")

        def __init__(self):
            self._items = [1, [2]]
            self._name = "holder"

    def testReadsBackingField(self) -> None:
        self.assertEqual(self.Holder().name, "holder")

    def testReturnsSnapshot(self) -> None:
        holder = self.Holder()
        items = holder.items
        items.append(3)
        items[1].append(4)
        self.assertEqual(holder.items, [1, [2]])

    def testReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.Holder().name = "other"

    def testGetterName(self) -> None:
        self.assertEqual(self.Holder.items.fget.__name__, "items")

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class RenameTest(TestCase):
    def testDecorator(self) -> None:
        @rename("decorated")
        def function():
            pass

        self.assertEqual((function.__name__, function.__qualname__), ("decorated", "decorated"))

    def testMisuse(self) -> None:
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("name")(1)


class OrdinalTest(TestCase):
    def testWords(self) -> None:
        self.assertEqual([ordinal(number) for number in (1, 2, 3, 10)], ["first", "second", "third", "tenth"])

    def testSuffixes(self) -> None:
        cases = {11: "11th", 12: "12th", 13: "13th", 21: "21st", 22: "22nd", 23: "23rd", 24: "24th", 111: "111th", 101: "101st"}
        for number, expected in cases.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), expected)


if __name__ == "__main__":
    unittest.main()
