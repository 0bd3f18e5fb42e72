r"""
Typeflag tokenizer: classify argv tokens in a single pass with one token of lookahead.

Token grammar
- "--"                      → end of flags; everything after it is taken verbatim.
- "--name", "--name=value"  → long flag; ".", ":" and "=" are value delimiters and
  "--name:value", "--name.value"  the first one found splits name from inline value.
- "-a", "-a=value", "-abc"  → alias group; every character is a single-character flag
                              and only the last one may carry the inline value.
- anything else             → plain argument ("-", "---x", "-=x", "value", ...).

A token is flag-like when one or two hyphens are followed by an ASCII word
character (digits included, so "-123" is the alias group "1", "2", "3").

Scanner
- Iterating a Scanner yields one event per classified token:
  • FlagToken(name, value, index, alias)
  • Argument(token, index)
  • EndOfFlags(rest, index)          (last event of the scan)
  • BoundValue(target, value, index) (resolution of a pending binding)
- After receiving a FlagToken the consumer may call scanner.expect(target) to
  request the following token as that flag's value. The scanner is then in the
  awaiting state: the next plain argument is consumed and yielded as
  BoundValue(target, token, index); a flag, "--" or the end of input resolves
  it first as BoundValue(target, None, None).
- Inside an alias group a binding requested for a non-final character is
  resolved with no value before the next character is yielded.

Removal bookkeeping
- Index(position) addresses a whole token; Index(position, offset, last)
  addresses one character of an alias group (offset is its place in the token
  string). splice() applies a batch of removals and returns a new list.
"""
import sys
from typing import NamedTuple

from .utils import Unset

DOUBLE_DASH = "--"

_DELIMITERS = frozenset(".:=")
_WORD = frozenset("0123456789_ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")


class Index(NamedTuple):
    """
    Location of a consumed token (or of one character of an alias group).

    - position: index of the token in argv.
    - offset: 0 for the whole token; otherwise the 1-based place of the alias
      character inside the token string ("-axc": a=1, x=2, c=3).
    - last: whether the character is the final alias of its group, in which case
      removing it also drops the inline value that follows it.
    """
    position: int
    offset: int = 0
    last: bool = False


class FlagToken(NamedTuple):
    name: str
    value: str | None
    index: Index
    alias: bool


class Argument(NamedTuple):
    token: str
    index: Index


class EndOfFlags(NamedTuple):
    rest: tuple[str, ...]
    index: Index


class BoundValue(NamedTuple):
    target: object
    value: str | None
    index: Index | None


def isflag(token, /):
    """
    Whether a token is flag-like: one or two leading hyphens and a word character.
    """
    if not token.startswith("-"):
        return False
    char = token[2:3] if token.startswith(DOUBLE_DASH) else token[1:2]
    return char in _WORD


def parse(token, /):
    """
    split a flag-like token into (name, value, alias); None for anything else.

    - alias is True when the token starts with a single hyphen.
    - value is None when no delimiter is present and "" when one ends the token.

    examples
    - "--name=value" → ("name", "value", False)
    - "--name:"      → ("name", "", False)
    - "-abc.x=y"     → ("abc", "x=y", True)
    - "value"        → None
    """
    if not isinstance(token, str):
        raise TypeError("parse() argument must be a string")
    if not isflag(token):
        return None

    alias = not token.startswith(DOUBLE_DASH)
    name = token[1:] if alias else token[2:]

    for position, char in enumerate(name):
        if char in _DELIMITERS:
            return name[:position], name[position + 1:], alias
    return name, None, alias


class Scanner:
    """
    One-pass argv classifier with an explicit value-binding state.

    The state is either idle (Unset) or awaiting a value for one target. It is
    inspected once per token, so at most one binding is ever pending.
    """

    def __init__(self, argv, /):
        self._argv = argv
        self._awaiting = Unset

    @property
    def awaiting(self):
        """Whether a flag is currently waiting for the following token."""
        return self._awaiting is not Unset

    def expect(self, target, /):
        """
        request the following token as the value of the flag just yielded.
        """
        if self._awaiting is not Unset:
            raise RuntimeError("a value binding is already pending")
        self._awaiting = target

    def _release(self):
        # resolve a pending binding with no value
        if self._awaiting is not Unset:
            target, self._awaiting = self._awaiting, Unset
            yield BoundValue(target, None, None)

    def __iter__(self):
        argv = self._argv
        for position, token in enumerate(argv):
            if token == DOUBLE_DASH:
                yield from self._release()
                yield EndOfFlags(tuple(argv[position + 1:]), Index(position))
                return

            if (parsed := parse(token)) is None:
                if self._awaiting is not Unset:
                    target, self._awaiting = self._awaiting, Unset
                    yield BoundValue(target, token, Index(position))
                else:
                    yield Argument(token, Index(position))
                continue

            yield from self._release()
            name, value, alias = parsed

            if not alias:
                yield FlagToken(name, value, Index(position), False)
                continue

            for offset, char in enumerate(name, 1):
                yield from self._release()
                last = offset == len(name)
                yield FlagToken(char, value if last else None, Index(position, offset, last), True)

        yield from self._release()


def snapshot(argv=Unset, /):
    """
    return a private list copy of argv (sys.argv[1:] when omitted), checking every token is a string.
    """
    if argv is Unset:
        argv = sys.argv[1:]
    if isinstance(argv, str | bytes):
        raise TypeError("argv must be a sequence of strings, not %r" % type(argv).__name__)
    tokens = list(argv)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("argv must contain only strings (got %r)" % type(token).__name__)
    return tokens


def splice(argv, removals, /):
    """
    return a copy of argv without the tokens (or alias characters) in removals.

    behavior
    - alias removals are applied right-to-left so earlier offsets stay valid.
    - removing the last alias of a group also drops its inline value
      ("-us=d" minus "s" → "-u").
    - an alias group left with only its hyphen is removed entirely.
    - whole-token removals are applied last, in a single pass.
    """
    tokens = list(argv)
    if not removals:
        return tokens

    positions = set()
    aliases = []
    for index in removals:
        if index.offset:
            aliases.append(index)
        else:
            positions.add(index.position)

    for position, offset, last in sorted(aliases, reverse=True):
        token = tokens[position]
        token = token[:offset] if last else token[:offset] + token[offset + 1:]
        if token == "-":
            positions.add(position)
        else:
            tokens[position] = token

    return [token for position, token in enumerate(tokens) if position not in positions]


__all__ = (
    "DOUBLE_DASH",
    "Index",
    "FlagToken",
    "Argument",
    "EndOfFlags",
    "BoundValue",
    "isflag",
    "parse",
    "Scanner",
    "snapshot",
    "splice",
)
