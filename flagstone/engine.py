"""
Flagstone matching engine.

The Matcher walks a classified token stream against a Registry, feeding values
to targets through coerce() and collecting every token that was not consumed
as a flag name or a flag value.

State
- active: the flag currently accepting values (or None), plus the token that
  named it (for messages).
- remaining: unmatched literals, in their original relative order.

Transitions
- LITERAL, no active flag           → remaining.
- LITERAL, active boolean           → boolean resolved by presence; literal → remaining.
- LITERAL/VALUE, active single/variadic → fed to the target; released once it
                                      wants no more.
- LITERAL, active variadic, rejected → variadic closed; literal → remaining.
- FLAG                              → the active flag is closed first (single: missing
                                      value; variadic: closed with Unset), then the new
                                      name is resolved. A boolean resolves at once unless
                                      its inline value follows ("-v=false").
- LITERAL after "--"                → the active flag is closed the same way; literal → remaining.
- end of input                      → the active flag is closed the same way.

Failure
- the first fault aborts the run. Values already written into targets stay
  written: the engine is not transactional.
"""
import difflib
import logging
from enum import StrEnum

from .faults import FaultCode, MissingValueError, TypeMismatchError, UnknownFlagError
from .targets import Arity, coerce
from .tokens import TokenKind
from .utils import Unset, ordinal

logger = logging.getLogger(__name__)


class UnknownFlags(StrEnum):
    """
    What to do with a flag name the registry does not know.

    - REJECT: raise UnknownFlagError (default).
    - PASS: append the flag as typed ("-x", "--name=value") to the remaining list.
    """
    REJECT = "reject"
    PASS = "pass"


class Matcher:
    """
    Single-use state machine over one token stream.
    """

    def __init__(self, registry, /, unknown=UnknownFlags.REJECT):
        self._registry = registry
        self._unknown = UnknownFlags(unknown)
        self._active = None
        self._remaining = []
        self._passed = False  # the previous token was an unknown flag passed through

    def run(self, tokens, /):
        """
        Match every token and return the remaining literals.

        Raises
        - UnknownFlagError, MissingValueError, TypeMismatchError.
        """
        tokens = list(tokens)
        for position, token in enumerate(tokens):
            match token.kind:
                case TokenKind.LITERAL:
                    self._literal(token)
                case TokenKind.VALUE:
                    self._value(token)
                case TokenKind.FLAG:
                    inline = position + 1 < len(tokens) and tokens[position + 1].kind is TokenKind.VALUE
                    self._flag(token, inline=inline)
                case _:
                    raise RuntimeError("unexpected token kind")
        self._close()
        return self._remaining

    def _literal(self, token):
        self._passed = False
        if token.escaped:
            # "--" is flag-shaped, so it released whatever flag was active
            self._close()
        if self._active is None:
            self._remaining.append(token.text)
            return

        entry, _ = self._active
        if entry.arity is Arity.BOOLEAN:
            # booleans are set by presence; the literal was never their value
            self._feed(Unset, token)
            self._remaining.append(token.text)
            return

        if entry.arity is Arity.VARIADIC:
            try:
                self._feed(token.text, token)
            except TypeMismatchError:
                # a bare token the collected kind rejects ends the run of values
                logger.debug("%r ends the values of %s", token.text, entry.spelling)
                self._close()
                self._remaining.append(token.text)
            return

        self._feed(token.text, token)

    def _value(self, token):
        if self._active is None:
            if self._passed:
                # keep an unknown flag's inline value attached to it
                self._remaining[-1] += "=" + token.text
                self._passed = False
                return
            raise RuntimeError("value token without a flag")

        self._passed = False
        self._feed(token.text, token)

    def _flag(self, token, *, inline):
        self._passed = False
        self._close()

        if (entry := self._registry.lookup(token.text)) is None:
            if self._unknown is UnknownFlags.PASS:
                logger.debug("passing unknown flag %s through", token.spelling)
                self._remaining.append(token.spelling)
                self._passed = True
                return

            suggestions = difflib.get_close_matches(token.spelling, [known.spelling for known in self._registry], 3)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "check the usage for the list of known flags"
            raise UnknownFlagError(
                "unknown flag %r at %s position" % (token.spelling, ordinal(token.index)),
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                flag=token.spelling,
                index=token.index,
                suggestions=suggestions,
                hint=hint,
            )

        logger.debug("matched %s (%s)", token.spelling, entry.arity.value)
        self._active = (entry, token)

        if entry.arity is Arity.BOOLEAN and not inline:
            self._feed(Unset, token)

    def _close(self):
        """
        Release the active flag because no further value can reach it.
        """
        if self._active is None:
            return

        entry, flag = self._active
        match entry.arity:
            case Arity.SINGLE:
                raise MissingValueError(
                    "missing value after flag %r at %s position" % (flag.spelling, ordinal(flag.index)),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    flag=flag.spelling,
                    index=flag.index,
                    hint="pass a value after %s, or write it inline as %s=<value>" % (flag.spelling, flag.spelling),
                )
            case Arity.VARIADIC:
                self._feed(Unset, flag)
            case _:
                raise RuntimeError("unexpected boolean close-out")

    def _feed(self, text, token):
        entry, flag = self._active
        try:
            more = coerce(text, entry.target)
        except TypeMismatchError as fault:
            raise TypeMismatchError(
                "%s for flag %r at %s position" % (fault.message, flag.spelling, ordinal(token.index)),
                **{**fault.options, "flag": flag.spelling, "index": token.index}
            ) from fault

        logger.debug("fed %r to %s (more=%s)", text, flag.spelling, more)
        if not more:
            self._active = None


__all__ = (
    "UnknownFlags",
    "Matcher",
)
