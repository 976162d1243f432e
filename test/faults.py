"""
Faults module behavioral tests (taxonomy, options, surfacing, rendering).

Scope
- Stable fault codes and host remapping through __main__.__codes__.
- Message and read-only options carried by every fault.
- copy.replace() merging options; trigger() raising or rendering + exiting.
- Rich rendering (plain and fancy) with colour disabled.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
from types import SimpleNamespace
from unittest import TestCase, mock

from rich.console import Console

from flagstone import (
    DuplicateFlagError,
    FaultCode,
    FlagException,
    InvalidFlagNameError,
    MissingValueError,
    ParseError,
    RegistrationError,
    TypeMismatchError,
    UnknownFlagError,
    UnsupportedTargetError,
    getdoc,
    trigger,
)


def render(fault, width=100):
    console = Console(color_system=None, force_terminal=False, width=width)
    with console.capture() as capture:
        console.print(fault)
    return capture.get()


class TestTaxonomy(TestCase):
    """Fault classes and codes."""

    def testPhases(self):
        for fault in (InvalidFlagNameError, DuplicateFlagError, UnsupportedTargetError):
            with self.subTest(fault=fault):
                self.assertTrue(issubclass(fault, RegistrationError))
        for fault in (UnknownFlagError, MissingValueError, TypeMismatchError):
            with self.subTest(fault=fault):
                self.assertTrue(issubclass(fault, ParseError))
        self.assertTrue(issubclass(RegistrationError, FlagException))
        self.assertTrue(issubclass(ParseError, FlagException))
        self.assertFalse(issubclass(ParseError, RegistrationError))

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.INVALID_FLAG_NAME, 21101)
        self.assertEqual(FaultCode.DUPLICATE_FLAG, 21102)
        self.assertEqual(FaultCode.UNSUPPORTED_TARGET, 21103)
        self.assertEqual(FaultCode.UNKNOWN_FLAG, 21111)
        self.assertEqual(FaultCode.MISSING_VALUE, 21112)
        self.assertEqual(FaultCode.TYPE_MISMATCH, 21113)

    def testNormalize(self):
        self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "21111")
        main = SimpleNamespace(__codes__={FaultCode.UNKNOWN_FLAG: "E-UNKNOWN"})
        with mock.patch.dict("sys.modules", {"__main__": main}):
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "E-UNKNOWN")
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "21112")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.TYPE_MISMATCH))
        main = SimpleNamespace(__docs__={FaultCode.TYPE_MISMATCH: "the value has the wrong shape"})
        with mock.patch.dict("sys.modules", {"__main__": main}):
            self.assertEqual(getdoc(FaultCode.TYPE_MISMATCH), "the value has the wrong shape")
        with self.assertRaises(TypeError):
            getdoc(21113)


class TestFault(TestCase):
    """Message, options and copy.replace()."""

    def setUp(self):
        self.fault = UnknownFlagError("unknown flag '-x' at first position", code=FaultCode.UNKNOWN_FLAG, flag="-x")

    def testMessage(self):
        self.assertEqual(str(self.fault), "unknown flag '-x' at first position")
        self.assertEqual(self.fault.args, ("unknown flag '-x' at first position",))
        self.assertEqual(str(FlagException()), "")

    def testOptionsAreReadOnly(self):
        self.assertEqual(self.fault.options["flag"], "-x")
        with self.assertRaises(TypeError):
            self.fault.options["flag"] = "-y"

    def testReplaceMergesOptions(self):
        replaced = copy.replace(self.fault, prog="tool", flag="-z")
        self.assertIsInstance(replaced, UnknownFlagError)
        self.assertIsNot(replaced, self.fault)
        self.assertEqual(replaced.message, self.fault.message)
        self.assertEqual(dict(replaced.options), {"code": FaultCode.UNKNOWN_FLAG, "flag": "-z", "prog": "tool"})
        self.assertEqual(self.fault.options["flag"], "-x")


class TestTrigger(TestCase):
    """trigger() surfacing."""

    def testRaisesByDefault(self):
        fault = MissingValueError("missing value after flag '-n' at first position")
        with self.assertRaises(MissingValueError) as caught:
            trigger(fault, prog="tool")
        self.assertEqual(caught.exception.options["prog"], "tool")

    def testShellRendersAndExits(self):
        buffer = io.StringIO()
        console = Console(file=buffer, color_system=None, width=100)
        fault = MissingValueError("missing value after flag '-n' at first position", code=FaultCode.MISSING_VALUE, title="missing value")
        with mock.patch("flagstone.faults.console", console):
            with self.assertRaises(SystemExit) as caught:
                trigger(fault, shell=True, colorful=False, prog="tool")
        self.assertEqual(caught.exception.code, 1)
        self.assertIn("[ tool — 21112 | Missing Value ]", buffer.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestRendering(TestCase):
    """__rich__ output with colour disabled."""

    def setUp(self):
        self.fault = TypeMismatchError(
            "cannot parse 'x' as int for flag '-n' at second position",
            code=FaultCode.TYPE_MISMATCH,
            title="type mismatch",
            hint="pass a value that reads entirely as int",
            prog="tool",
            colorful=False,
        )

    def testPlainLayout(self):
        lines = render(self.fault).splitlines()
        self.assertEqual(lines[0], "[ tool — 21113 | Type Mismatch ]")
        self.assertEqual(lines[1], "cannot parse 'x' as int for flag '-n' at second position")
        self.assertEqual(lines[2], " → pass a value that reads entirely as int")

    def testFancyPanel(self):
        output = render(copy.replace(self.fault, fancy=True))
        self.assertIn("Type Mismatch", output)
        self.assertIn("cannot parse 'x' as int", output)
        self.assertIn("╭", output)

    def testDefaults(self):
        lines = render(FlagException("something went wrong", colorful=False)).splitlines()
        self.assertEqual(lines[0], "[ flagstone —  | Error ]")
        self.assertEqual(lines[1], "something went wrong")


if __name__ == "__main__":
    unittest.main()
