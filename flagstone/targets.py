r"""
Flagstone coercion targets.

Overview
- Arity: how many tokens a flag consumes.
  • BOOLEAN: zero, set by presence (or by an inline "=true"/"=false").
  • SINGLE: exactly one.
  • VARIADIC: zero or more, until the next flag-shaped token.

- Targets (caller-owned holders the parser writes through)
  • Boolean: bool, default False.
  • Integer: int, optionally sized (bits=8/16/...) and unsigned.
  • Floating: float.
  • Text: str, accepted verbatim.
  • Collection(element): list of one scalar kind, arity VARIADIC.
  • Callback(function, arity=...): a caller function deciding what a token means.

- coerce(token, target) -> bool
  The single dispatcher used by the matching engine. It converts one token (or
  the Unset "absent" sentinel) into the target and answers whether the flag
  wants another token.

- build(kind)
  Turns bool/int/float/str/list[T] (or an existing target) into a target;
  anything else is an UnsupportedTargetError.

Strictness
- Conversion is whole-token: "12abc", " 12", "+12", "1_2" and "0x1f" are all
  rejected as int; "1e999" overflows float and is rejected.

Quick example:
    >>> numbers = Collection(int)
    >>> coerce("1", numbers), coerce("2", numbers), coerce(Unset, numbers)
    (True, True, False)
    >>> numbers.value
    [1, 2]
"""
import math
import re
import typing
from enum import Enum

from .faults import FaultCode, TypeMismatchError, UnsupportedTargetError
from .utils import *

_INTEGER = re.compile(r"-?[0-9]+")
_FLOATING = re.compile(r"-?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE)


class Arity(Enum):
    BOOLEAN = "boolean"
    SINGLE = "single"
    VARIADIC = "variadic"


def _mismatch(token, typename, /):
    return TypeMismatchError(
        "cannot parse %r as %s" % (token, typename),
        title="type mismatch",
        code=FaultCode.TYPE_MISMATCH,
        token=token,
        typename=typename,
        hint="pass a value that reads entirely as %s" % typename,
    )


class TargetType(type):
    """
    Metaclass of the targets.

    - __typename__: the class name in lowercase ("Integer" -> "integer"),
      used in reprs and programmer-facing TypeError messages.
    - each name listed in the class's own __introspectable__ becomes a
      read-only mirror of "_{name}".
    """

    def __new__(cls, name, bases, namespace, **options):
        namespace.setdefault("__typename__", name.lower())
        for field in namespace.get("__introspectable__", ()):
            namespace[field] = mirror(field)
        return super().__new__(cls, name, bases, namespace, **options)


class Target(metaclass=TargetType):
    """
    Base of all coercion targets.

    Subclasses implement __coerce__(token) -> bool, where token is a str or the
    Unset sentinel and the result says whether more tokens are wanted.
    """
    __introspectable__ = ()
    arity = Arity.SINGLE
    typename = "value"

    def __coerce__(self, token):
        raise NotImplementedError

    def __rich_repr__(self):
        for field in type(self).__introspectable__:
            yield field, getattr(self, field)

    def __repr__(self):
        return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


class Scalar(Target):
    """
    A target holding exactly one value; subclasses provide convert(token).
    """
    __introspectable__ = ("value",)

    def convert(self, token):
        raise NotImplementedError

    def __coerce__(self, token):
        if token is Unset:
            raise TypeError(f"{type(self).__typename__} target requires a token")
        self._value = self.convert(token)
        return False


class Boolean(Scalar):
    arity = Arity.BOOLEAN
    typename = "bool"

    def __init__(self, default=False, /):
        if not isinstance(default, bool):
            raise TypeError("boolean 'default' must be a bool")
        self._value = default

    def convert(self, token):
        if token is Unset or token == "true":
            return True
        if token == "false":
            return False
        raise _mismatch(token, self.typename)

    def __coerce__(self, token):
        self._value = self.convert(token)
        return False


class Integer(Scalar):
    """
    Integer target. Without 'bits' the range is unbounded; with it, values
    outside the representable range of the (un)signed width are an overflow.
    """
    __introspectable__ = ("value", "bits", "signed")

    def __init__(self, default=0, /, *, bits=None, signed=True):
        if bits is not None and (not isinstance(bits, int) or isinstance(bits, bool)):
            raise TypeError("integer 'bits' must be an integer")
        if bits is not None and bits < 1:
            raise ValueError("integer 'bits' must be a positive integer")
        if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError("integer 'default' must be an integer")
        self._bits = bits
        self._signed = bool(signed)
        if not self._fits(default):
            raise ValueError("integer 'default' is out of range for %s" % self.typename)
        self._value = default

    @property
    def typename(self):
        return ("int" if self._signed else "uint") + (str(self._bits) if self._bits else "")

    def _fits(self, number):
        if not self._signed and number < 0:
            return False
        if self._bits is None:
            return True
        if self._signed:
            return -(1 << (self._bits - 1)) <= number < (1 << (self._bits - 1))
        return number < (1 << self._bits)

    def convert(self, token):
        if not _INTEGER.fullmatch(token) or (not self._signed and token.startswith("-")):
            raise _mismatch(token, self.typename)
        try:
            number = int(token)
        except ValueError:
            # longer than the interpreter's integer string limit
            raise _mismatch(token, self.typename) from None
        if not self._fits(number):
            raise _mismatch(token, self.typename)
        return number


class Floating(Scalar):
    typename = "float"

    def __init__(self, default=0.0, /):
        if not isinstance(default, int | float) or isinstance(default, bool):
            raise TypeError("floating 'default' must be a number")
        self._value = float(default)

    def convert(self, token):
        if not _FLOATING.fullmatch(token):
            raise _mismatch(token, self.typename)
        number = float(token)
        # a finite literal that rounds to infinity is an overflow
        if math.isinf(number) and "inf" not in token.lower():
            raise _mismatch(token, self.typename)
        # a non-zero literal that rounds to zero is an underflow
        mantissa = token.lower().partition("e")[0]
        if number == 0.0 and mantissa.strip("-.0"):
            raise _mismatch(token, self.typename)
        return number


class Text(Scalar):
    typename = "str"

    def __init__(self, default="", /):
        if not isinstance(default, str):
            raise TypeError("text 'default' must be a string")
        self._value = default

    def convert(self, token):
        return token


class Collection(Target):
    """
    Variadic target appending one scalar kind per token.

    'element' may be a scalar target class, a scalar target instance (used as a
    prototype, e.g. Integer(bits=8)), or one of bool/int/float/str. Nested
    collections and callbacks are not valid elements.

    Values accumulate across parses; the parser never clears a collection.
    """
    __introspectable__ = ("value", "element")
    arity = Arity.VARIADIC

    def __init__(self, element, /, default=()):
        if isinstance(element, type) and issubclass(element, Target):
            if not issubclass(element, Scalar) or element is Scalar:
                raise UnsupportedTargetError(
                    "unsupported collection element %r" % element.__name__,
                    title="unsupported target",
                    code=FaultCode.UNSUPPORTED_TARGET,
                    target=element,
                    hint="collect one of bool, int, float or str",
                )
            element = element()
        else:
            element = build(element)
        if not isinstance(element, Scalar):
            raise UnsupportedTargetError(
                "unsupported collection element %r" % element,
                title="unsupported target",
                code=FaultCode.UNSUPPORTED_TARGET,
                target=element,
                hint="collections cannot be nested; collect one of bool, int, float or str",
            )
        self._element = element
        self._value = list(default)

    @property
    def typename(self):
        return "list[%s]" % self._element.typename

    def __coerce__(self, token):
        if token is Unset:
            return False
        self._value.append(self._element.convert(token))
        return True


class Callback(Target):
    """
    Target backed by a caller function: function(token) -> wants-more.

    The function receives the token text, or Unset when the flag is resolved
    without a value (booleans by presence, variadics when closed). Only
    VARIADIC callbacks may ask for more tokens; for the other arities the
    answer is always "no more". ValueError/TypeError raised by the function
    are reported as a type mismatch naming the function.
    """
    __introspectable__ = ("function", "arity")

    def __init__(self, function, /, arity=Arity.SINGLE):
        if not callable(function):
            raise TypeError("callback 'function' must be callable")
        self._function = function
        self._arity = Arity(arity)

    @property
    def typename(self):
        return getattr(self._function, "__name__", "callback")

    def __coerce__(self, token):
        try:
            more = self._function(token)
        except (TypeError, ValueError) as exception:
            raise _mismatch(token, self.typename) from exception
        return self._arity is Arity.VARIADIC and token is not Unset and bool(more)


def coerce(token, target, /):
    """
    Feed one token (or Unset) to a target.

    Returns
    - bool: True when the target wants another token (variadic consumption
      continues), False when the flag is done.

    Raises
    - TypeMismatchError: the token does not read entirely as the target type.
    - TypeError: misuse (not a target, not a token).
    """
    if not isinstance(target, Target):
        raise TypeError("coerce() second argument must be a target")
    if not isinstance(token, str | UnsetType):
        raise TypeError("coerce() first argument must be a string or Unset")
    return bool(target.__coerce__(token))


_SCALARS = {
    bool: Boolean,
    int: Integer,
    float: Floating,
    str: Text,
}


def build(kind, /):
    """
    Resolve a target from a target instance/class or a Python type.

    Accepted
    - a Target instance (returned as-is)
    - a concrete target class with a no-argument constructor (Boolean, Integer, ...)
    - bool, int, float, str
    - list[bool], list[int], list[float], list[str]

    Raises
    - UnsupportedTargetError for anything else.
    """
    if isinstance(kind, Target):
        return kind
    if isinstance(kind, type) and issubclass(kind, Scalar) and kind is not Scalar:
        return kind()
    try:
        if scalar := _SCALARS.get(kind):
            return scalar()
    except TypeError:  # unhashable
        pass
    if typing.get_origin(kind) is list and len(arguments := typing.get_args(kind)) == 1:
        try:
            if scalar := _SCALARS.get(arguments[0]):
                return Collection(scalar)
        except TypeError:
            pass
    raise UnsupportedTargetError(
        "unsupported target %r" % (kind,),
        title="unsupported target",
        code=FaultCode.UNSUPPORTED_TARGET,
        target=kind,
        hint="use bool, int, float, str, a list of one of them, or a flagstone target",
    )


__all__ = (
    # Enumerations
    "Arity",

    # Targets
    "Target",
    "Scalar",
    "Boolean",
    "Integer",
    "Floating",
    "Text",
    "Collection",
    "Callback",

    # Functions
    "coerce",
    "build",
)

# Not part of the public API.
del TargetType
