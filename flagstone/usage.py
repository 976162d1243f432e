"""
Flagstone usage rendering.

Builds a rich renderable listing every registered flag in registration order:

    Usage of prog:
         -n  <int>        how many
      --str  <str>        some text
         -v  [<int> ...]  values
         -h               show this help

Colours follow the parser's 'colorful' setting and can be overridden through a
__styles__ mapping in __main__ (keys: usage-label, program-name, flag-name,
metavar, help).
"""
from collections import defaultdict

from rich.console import Group
from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from .faults import _host
from .targets import Arity, Collection


def metavar(entry, /):
    """
    Return the value placeholder shown for a flag ("" for booleans).
    """
    match entry.arity:
        case Arity.BOOLEAN:
            return ""
        case Arity.SINGLE:
            return "<%s>" % entry.target.typename
        case _:
            target = entry.target
            typename = target.element.typename if isinstance(target, Collection) else target.typename
            return "[<%s> ...]" % typename


def render(parser, /, *, colorful=True):
    """
    Return a rich renderable with the usage header and one row per flag.
    """
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # cyan header
        "program-name": "bold #FF4D94",  # magenta-pink program name
        "flag-name": "bold #22C55E",  # green flag names
        "metavar": "bold #FFD600",  # amber placeholders
        "help": "#9CA3AF",  # muted gray help text
    } | _host("__styles__"))

    def text(fragment, style):
        return Text(fragment, styles[style] if colorful else "")

    if parser.prog:
        header = Text.assemble(text("Usage of ", "usage-label"), text(parser.prog, "program-name"), text(":", "usage-label"))
    else:
        header = text("Usage:", "usage-label")

    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", no_wrap=True)
    table.add_column(no_wrap=True)
    table.add_column()

    for entry in parser.registry:
        table.add_row(
            text(entry.spelling, "flag-name"),
            text(metavar(entry), "metavar"),
            text(entry.help, "help"),
        )

    return Group(header, Padding(table, (0, 0, 0, 4)))


__all__ = (
    "metavar",
    "render",
)
