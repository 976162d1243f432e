"""
Flagstone faults.

Every error a user can cause carries a stable FaultCode and a lowercased,
position-first message ("unknown flag '-x' at second position"), a short
title and one hint. Faults know how to render themselves with rich:

    [ prog — 21111 | Unknown Flag ]
    unknown flag '-x' at second position
     → did you mean '-n'?

Phases
- RegistrationError: raised by the build phase (invalid name, duplicate,
  unsupported target). A clean build phase means none of them during a parse.
- ParseError: raised by a parse (unknown flag, missing value, type mismatch).
  Exactly one is produced per failed parse.

Surfacing
- trigger(fault, **options) copies the fault with the options merged in and
  either raises it, or (shell=True) prints it to stderr and exits with 1.

Host hooks (looked up in __main__ at render time)
- __codes__: FaultCode -> label shown instead of the number.
- __styles__: palette overrides (fault-prog, fault-code, fault-title,
  fault-message, fault-arrow, fault-hint).
- __docs__: FaultCode -> longer description returned by getdoc().
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


def _host(name, /):
    return getattr(sys.modules.get("__main__"), name, {})


class FaultCode(IntEnum):
    # build phase
    INVALID_FLAG_NAME  = 21101
    DUPLICATE_FLAG     = 21102
    UNSUPPORTED_TARGET = 21103

    # parse phase
    UNKNOWN_FLAG       = 21111
    MISSING_VALUE      = 21112
    TYPE_MISMATCH      = 21113

    def normalize(self):
        """
        Label shown for this code: the host's __codes__ entry, or the number.
        """
        return str(_host("__codes__").get(self, self.value))


class FlagException(Exception):
    """
    Base of all flagstone faults.

    'message' is the one-line description; every keyword becomes a read-only
    option. Options read by the renderer: code, title, hint, prog, shell,
    fancy, colorful, ratio. Raisers attach their own context as well (flag,
    index, token, typename, suggestions, ...).
    """

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | UnsetType):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        palette = defaultdict(str, {
            "fault-prog": "bold #F2F2F7",
            "fault-code": "bold #38BDF8",
            "fault-title": "bold #F472B6",
            "fault-message": "#D4D4D8",
            "fault-arrow": "dim #86EFAC",
            "fault-hint": "italic #86EFAC",
        } | _host("__styles__"))

        def paint(fragment, key):
            return Text(str(fragment or ""), palette[key] if colorful else "")

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            paint(self.options.get("prog") or _host("__prog__") or "flagstone", "fault-prog"),
            " — ",
            paint(code.normalize() if code is not None else "", "fault-code"),
            " | ",
            paint(self.options.get("title", "error").title(), "fault-title"),
            " ]",
        )
        body = paint(self.message if self.message is not Unset else "", "fault-message")
        hint = Text.assemble(paint(" → ", "fault-arrow"), paint(self.options.get("hint"), "fault-hint"))

        if not self.options.get("fancy", False):
            return Group(header, body, hint)

        width = None
        if "ratio" in self.options:
            width = int((console.width - 4) * self.options["ratio"])
        return Panel(Group(body, hint), title=header, title_align="left", width=width)

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
            sys.exit(1)
        raise self from None

    def __replace__(self, /, **changes):
        return type(self)(self.message, **(dict(self.options) | changes))


class RegistrationError(FlagException): ...
class InvalidFlagNameError(RegistrationError): ...
class DuplicateFlagError(RegistrationError): ...
class UnsupportedTargetError(RegistrationError): ...


class ParseError(FlagException): ...
class UnknownFlagError(ParseError): ...
class MissingValueError(ParseError): ...
class TypeMismatchError(ParseError): ...


def trigger(fault, /, **options):
    """
    Surface 'fault' with 'options' merged into a copy of it.

    Raises the copy, or in shell mode renders it to stderr and exits with
    status 1. 'fault' only needs __replace__ and __trigger__.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must define __trigger__ and __replace__")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    The host's __docs__ entry for a fault code, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault code")
    return _host("__docs__").get(code)


__all__ = (
    # Enumerations
    "FaultCode",

    # Faults
    "FlagException",
    "RegistrationError",
    "InvalidFlagNameError",
    "DuplicateFlagError",
    "UnsupportedTargetError",
    "ParseError",
    "UnknownFlagError",
    "MissingValueError",
    "TypeMismatchError",

    # Functions
    "trigger",
    "getdoc",
)
