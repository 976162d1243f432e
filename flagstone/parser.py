"""
Flagstone parser: build a flag set, then parse argument lists against it.

What this module provides
- Parser: owns a Registry and the parse-time configuration, and exposes
  • register(name, help, target) / flag(name, help, target) for the build phase,
  • parse(arguments) and parse_argv(argv) for the parse phase,
  • usage() / print_usage() for a rich usage listing,
  • trigger(fault) to surface faults (raise, or render and exit in shell mode).

Quick start
    from flagstone import Parser

    parser = Parser("tool")
    count = parser.flag("-n", "how many", int)
    name = parser.flag("--name", "who to greet", str)
    values = parser.flag("-v", "extra values", list[int])
    verbose = parser.flag("-x", "say more")

    remaining = parser.parse(["-n", "3", "--name=ada", "-v", "1", "2", "-x", "rest"])
    # count.value == 3, name.value == "ada", values.value == [1, 2], verbose.value is True
    # remaining == ["rest"]

Contract
- parse() returns the remaining literals, or raises exactly one ParseError.
  Targets already written before a fault keep their values.
- Registration faults are raised directly, always before parsing.
- A parser refuses to be re-entered while a parse is running, and its registry
  is sealed for that duration.
"""
import logging
import sys
from collections.abc import Iterable

from rich.console import Console

from . import usage
from .engine import Matcher, UnknownFlags
from .faults import ParseError, trigger
from .registry import Registry
from .tokens import classify
from .utils import *

logger = logging.getLogger(__name__)


class Parser:
    """
    Flag set plus the matching configuration.

    Parameters
    - prog: Unset | str (positional-only)
      Program name shown in usage and fault headers. When Unset, parse_argv()
      records argv[0].
    - unknown: UnknownFlags | "reject" | "pass"
      Policy for flags the registry does not know.
    - shell: bool
      When True, parse faults are rendered to stderr and the process exits
      with status 1; otherwise they are raised.
    - fancy: bool
      Render faults inside a panel.
    - colorful: bool
      Style rendered output.
    """

    prog = mirror("prog")
    unknown = mirror("unknown")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    registry = mirror("registry")

    def __init__(self, prog=Unset, /, *, unknown=UnknownFlags.REJECT, shell=False, fancy=False, colorful=True):
        if not isinstance(prog, str | UnsetType):
            raise TypeError("parser 'prog' must be a string")
        self._prog = coalesce(prog)
        self._unknown = UnknownFlags(unknown)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._registry = Registry()
        self._parsing = False

    def register(self, name, help, target, /):
        """
        Register a flag and return its FlagEntry.

        Raises
        - InvalidFlagNameError, DuplicateFlagError, UnsupportedTargetError.
        """
        return self._registry.register(name, help, target)

    def flag(self, name, help="", target=bool, /):
        """
        Register a flag and return its target, so the caller keeps a handle
        on the typed value (target.value).

        'target' may be a flagstone target or one of bool, int, float, str,
        list[bool], list[int], list[float], list[str].
        """
        return self.register(name, help, target).target

    def parse(self, arguments, /):
        """
        Parse an argument list (program name excluded).

        Returns
        - list[str]: every token not consumed as a flag name or value, in
          order, including everything after "--".

        Raises
        - UnknownFlagError, MissingValueError, TypeMismatchError (non-shell mode).
        - TypeError: arguments is a string or holds non-strings.
        - RuntimeError: the parser is already parsing.
        """
        if isinstance(arguments, str) or not isinstance(arguments, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        if self._parsing:
            raise RuntimeError("parse() cannot be re-entered while parsing")

        self._parsing = True
        try:
            with self._registry.sealed():
                tokens = classify(arguments)
                logger.debug("classified %d tokens", len(tokens))
                return Matcher(self._registry, self._unknown).run(tokens)
        except ParseError as fault:
            self.trigger(fault)
        finally:
            self._parsing = False

    def parse_argv(self, argv=Unset, /):
        """
        Parse a full argv: argv[0] is the program name, the rest is parsed.

        - argv defaults to sys.argv.
        - argv[0] becomes the program name unless one was configured.
        """
        argv = list(sys.argv if argv is Unset else argv)
        if not argv:
            return self.parse([])
        if self._prog is None:
            if not isinstance(argv[0], str):
                raise TypeError("parse_argv() argument must hold strings")
            self._prog = argv[0]
        return self.parse(argv[1:])

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's context (program name, rendering
        switches). Raises in non-shell mode; renders and exits in shell mode.
        """
        trigger(fault, **{
            "prog": self._prog,
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
        } | options)

    def usage(self, *, width=80):
        """
        Return the usage listing as plain text.
        """
        console = Console(color_system=None, force_terminal=False, width=width)
        with console.capture() as capture:
            console.print(usage.render(self, colorful=False))
        return capture.get()

    def print_usage(self):
        """
        Print the usage listing to stderr.
        """
        Console(stderr=True).print(usage.render(self, colorful=self._colorful))

    def __repr__(self):
        return "parser(prog=%r, unknown=%r, flags=%d)" % (self._prog, self._unknown.value, len(self._registry))


__all__ = (
    "Parser",
)
