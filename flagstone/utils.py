"""
Flagstone helpers shared by the classifier, the targets, the registry and the
matching engine.

Contents
- Unset: the "absent token". The engine feeds it to a target when a flag
  resolves without a value: a boolean set by presence, or a variadic flag
  closed because nothing more can reach it.
- coalesce(value, default): swap Unset for a default, leave everything else.
- rename(name): decorator fixing __name__/__qualname__ of generated functions.
- mirror(name): read-only property over "_{name}" handing out snapshots of
  lists, dicts and sets, so a caller cannot edit parser state through it.
- ordinal(number): "first", "second", ..., "11th", "22nd" for argument positions.

    >>> coalesce(Unset, 8), coalesce(0, 8)
    (8, 0)
    >>> ordinal(3), ordinal(42)
    ('third', '42nd')
"""
import functools
from typing import final

_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@final
class UnsetType:
    """
    Type of the Unset singleton.

    Unset is falsy, prints as "Unset", survives copy and pickle as itself,
    and cannot be subclassed. Only identity checks ("is Unset") are
    meaningful; it never compares equal to None, False or "".
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        # resolved by name in this module on unpickling and copying
        return "Unset"


def coalesce(value, default=None, /):
    """
    Return 'default' when 'value' is Unset, else 'value' unchanged (None, 0
    and "" included).
    """
    return default if value is Unset else value


def rename(name, /):
    """
    Decorator giving a generated function a stable __name__ and __qualname__,
    so tracebacks and reprs show 'name' instead of a closure's local name.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("rename() must decorate a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _snapshot(value):
    match value:
        case list() | tuple():
            return [_snapshot(item) for item in value]
        case dict():
            return {key: _snapshot(item) for key, item in value.items()}
        case set() | frozenset():
            return set(value)
        case _:
            return value


def mirror(name, /):
    """
    Build a read-only property returning a snapshot of self._{name}.

        class Entry:
            help = mirror("help")   # reads self._help
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _snapshot(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Ordinal label of a 1-based argument position, used in fault messages.
    """
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if number % 100 in (11, 12, 13):
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
