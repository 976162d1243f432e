"""
Flagstone flag registry.

Maps canonical flag names (leading dashes stripped) to FlagEntry records.
The registry is populated during the build phase and sealed while a parse
runs; the usage renderer reads it in registration order.

Name rules
- one or two leading dashes, never bare "-" or "--";
- a single-dash name is exactly one character ("-v"), since single-dash
  arguments are read as clusters of one-character flags;
- no "=" and no whitespace anywhere.

Collision policy
- "-n" and "--n" strip to the same key "n" and are therefore the same flag:
  registering the second spelling is a DuplicateFlagError, and at parse time
  either spelling reaches the registered entry.
"""
import logging
import re
from contextlib import contextmanager

from .faults import FaultCode, DuplicateFlagError, InvalidFlagNameError
from .targets import build
from .utils import mirror

logger = logging.getLogger(__name__)


def valid(name, /):
    """
    Return True when 'name' is an acceptable flag spelling ("-v", "--verbose").
    """
    if not isinstance(name, str) or not name.startswith("-"):
        return False
    if name in ("-", "--"):
        return False
    if not name.startswith("--") and len(name) != 2:
        return False
    return not re.search(r"[=\s]", name)


def strip(name, /):
    """
    Return the lookup key for a flag spelling: the name without its one- or
    two-dash prefix ("--str" -> "str", "---x" -> "-x").
    """
    return name[2:] if name.startswith("--") else name[1:]


class FlagEntry:
    """
    One registered flag: canonical name, spelling, help text, arity and target.

    All fields are read-only; entries never change after registration.
    """
    __slots__ = ("_name", "_spelling", "_help", "_target")

    name = mirror("name")
    spelling = mirror("spelling")
    help = mirror("help")
    target = mirror("target")

    def __init__(self, spelling, help, target):
        self._name = strip(spelling)
        self._spelling = spelling
        self._help = help
        self._target = target

    @property
    def arity(self):
        return self._target.arity

    def __repr__(self):
        return "flag-entry(spelling=%r, arity=%s, target=%r)" % (self._spelling, self._target.arity.value, self._target)


class Registry:
    """
    Name → FlagEntry mapping with registration-ordered iteration.
    """

    def __init__(self):
        self._entries = {}
        self._sealed = False

    def register(self, name, help, target, /):
        """
        Validate and record a flag.

        Raises (the registry is left unchanged on any error)
        - InvalidFlagNameError: the spelling breaks the name rules.
        - DuplicateFlagError: the stripped name is already registered.
        - UnsupportedTargetError: the target cannot be coerced into.
        - TypeError: help is not a string.
        - RuntimeError: called while a parse is running.
        """
        if self._sealed:
            raise RuntimeError("flags cannot be registered while parsing")
        if not isinstance(help, str):
            raise TypeError("flag 'help' must be a string")
        if not valid(name):
            raise InvalidFlagNameError(
                "invalid flag name %r" % (name,),
                title="invalid flag name",
                code=FaultCode.INVALID_FLAG_NAME,
                flag=name,
                hint="use '-x' for a one-letter flag or '--name' for a long one (no '=' or spaces)",
            )
        if (key := strip(name)) in self._entries:
            raise DuplicateFlagError(
                "flag %r is already registered as %r" % (name, self._entries[key].spelling),
                title="duplicate flag",
                code=FaultCode.DUPLICATE_FLAG,
                flag=name,
                hint="register each flag once; '-%s' and '--%s' name the same flag" % (key, key),
            )
        entry = FlagEntry(name, help, build(target))
        self._entries[key] = entry
        logger.debug("registered %s as %s %s", name, entry.arity.value, entry.target.typename)
        return entry

    def lookup(self, key, /):
        """
        Return the entry for a stripped name, or None when unknown.
        """
        return self._entries.get(key)

    @contextmanager
    def sealed(self):
        """
        Refuse registrations for the duration of the block.
        """
        previous, self._sealed = self._sealed, True
        try:
            yield self
        finally:
            self._sealed = previous

    def __contains__(self, name):
        return isinstance(name, str) and name in self._entries

    def __iter__(self):
        return iter(tuple(self._entries.values()))

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return "registry(%s)" % ", ".join(entry.spelling for entry in self._entries.values())


__all__ = (
    "valid",
    "strip",
    "FlagEntry",
    "Registry",
)
