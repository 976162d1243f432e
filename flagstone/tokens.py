"""
Flagstone token classifier.

Splits raw argument strings into a flat, ordered stream of semantic tokens
tagged LITERAL, FLAG or VALUE:

- "-" alone, the empty string, and anything not starting with "-" are LITERAL.
- "--" terminates classification: it is consumed, and every following raw
  argument becomes LITERAL without being examined.
- "--name[=value]" yields FLAG("name") and, when "=" is present, VALUE("value").
- "-xyz[=value]" yields FLAG("x"), FLAG("y"), FLAG("z") and, when "=" is
  present, a trailing VALUE("value").

A trailing "=" with nothing after it still yields an empty VALUE token.

    >>> [token.text for token in classify(["-ab=1", "--", "-c"])]
    ['a', 'b', '1', '-c']
"""
from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple


class TokenKind(Enum):
    LITERAL = "literal"
    FLAG = "flag"
    VALUE = "value"


class Token(NamedTuple):
    """
    One classified token.

    - text: the literal text, the flag name without dashes, or the inline value.
    - kind: TokenKind.
    - index: 1-based position of the raw argument this token came from.
    - prefix: "-" or "--" for FLAG tokens, "" otherwise.
    - escaped: True for literals that followed the "--" terminator.
    """
    text: str
    kind: TokenKind
    index: int
    prefix: str = ""
    escaped: bool = False

    @property
    def spelling(self):
        """The token as the user would write it ("-n", "--str", "value")."""
        return self.prefix + self.text


def classify(arguments: Iterable[str], /) -> list[Token]:
    """
    Classify raw arguments (program name already stripped) into tokens.

    Raises
    - TypeError: when an argument is not a string.
    """
    tokens = []
    arguments = list(arguments)

    for index, argument in enumerate(arguments, 1):
        if not isinstance(argument, str):
            raise TypeError("classify() arguments must be strings")

        if argument == "--":
            # one-shot terminator: the rest is never examined for flag shape
            tokens.extend(
                Token(rest, TokenKind.LITERAL, position, escaped=True)
                for position, rest in enumerate(arguments[index:], index + 1)
            )
            break

        if argument == "-" or not argument.startswith("-"):
            tokens.append(Token(argument, TokenKind.LITERAL, index))
            continue

        if argument.startswith("--"):
            name, separator, value = argument[2:].partition("=")
            tokens.append(Token(name, TokenKind.FLAG, index, "--"))
        else:
            cluster, separator, value = argument[1:].partition("=")
            # "-=value" still names a (nameless) flag so the engine can reject it
            tokens.extend(Token(name, TokenKind.FLAG, index, "-") for name in cluster or [""])

        if separator:
            tokens.append(Token(value, TokenKind.VALUE, index))

    return tokens


__all__ = (
    "TokenKind",
    "Token",
    "classify",
)
