r"""
Typeflag argv parsing: typed flags, unknown flags and positionals in one pass.

Entry point
- type_flag(schemas, argv=sys.argv[1:], /, *, ignore=...) → ParsedFlags

Result
- flags: read-only mapping of every declared flag (declaration order) to its value.
- unknown_flags: read-only mapping of undeclared flag names to a tuple of their
  occurrences (inline value, or True when none was given).
- positionals: Positionals (a tuple) of plain arguments; positionals["--"] is the
  tuple of arguments found after the end-of-flags marker, which are also included
  in the positionals themselves.
- remaining: new list with the tokens the parse left untouched (ignored tokens,
  and everything after a stop). The caller's argv is never mutated.

Ignore hook
- Called once per offered token:
  • ignore("known-flag", name, value) / ignore("unknown-flag", name, value)
    name is the spelling observed in argv; value is the inline value or None.
  • ignore("argument", token) for plain arguments and for "--".
- A truthy result skips the token: it is not recorded and stays in remaining.
  An ignored "--" stops the parse; every following token stays in remaining.
- Tokens consumed as a flag's value are never offered.
"""
from types import MappingProxyType
from typing import NamedTuple

from .schema import Registry
from .tokens import *
from .utils import *


class Positionals(tuple):
    """
    tuple of positional arguments that also answers ["--"] with the escaped tail.
    """

    def __new__(cls, arguments=(), escaped=(), /):
        self = super().__new__(cls, arguments)
        self._escaped = tuple(escaped)
        return self

    def __getitem__(self, key, /):
        if isinstance(key, str):
            if key != DOUBLE_DASH:
                raise KeyError(key)
            return self._escaped
        return super().__getitem__(key)

    @property
    def escaped(self):
        """Arguments found after "--"."""
        return self._escaped

    def __repr__(self):
        return "positionals(%s, escaped=%r)" % (super().__repr__(), self._escaped)


class ParsedFlags(NamedTuple):
    """
    result of type_flag(); remaining is a fresh list owned by the caller.
    """
    flags: MappingProxyType
    unknown_flags: MappingProxyType
    positionals: Positionals
    remaining: list


def type_flag(schemas, argv=Unset, /, *, ignore=Unset):
    """
    parse argv against a mapping of flag names to schemas.

    schemas
    - keys are flag names ("someFlag" also matches "--some-flag").
    - values are any accepted schema shape: str, [int], {"type": bool, "alias": "b"},
      Flag(float, default=1.5), ...

    behavior
    - a flag expecting a value without an inline one takes the following token
      when it is a plain argument; otherwise it resolves with no value.
    - boolean and unknown flags never take the following token.
    - schema faults are raised before any token is inspected; errors raised by
      coercion callables, default factories or the ignore hook propagate.

    examples
    - type_flag({"name": str, "count": int}, ["--name=x", "--count", "2", "file"])
      → flags {"name": "x", "count": 2}, positionals ("file",)
    """
    registry = Registry(schemas)
    tokens = snapshot(argv)

    ignore = coalesce(ignore)
    if ignore is not None and not callable(ignore):
        raise TypeError("ignore must be callable")

    def skip(*event):
        return ignore is not None and bool(ignore(*event))

    unknown = {}
    arguments = []
    escaped = ()
    removals = []

    scanner = Scanner(tokens)
    for event in scanner:
        match event:
            case FlagToken(name=name, value=value, index=index, alias=alias):
                slot = registry.lookup(name, alias=alias)
                if skip("unknown-flag" if slot is None else "known-flag", name, value):
                    continue
                removals.append(index)
                if slot is None:
                    unknown.setdefault(name, []).append(True if value is None else value)
                elif registry.flag(slot).awaits(value):
                    scanner.expect(slot)
                else:
                    registry.record(slot, value)

            case BoundValue(target=slot, value=value, index=index):
                registry.record(slot, value)
                if index is not None:
                    removals.append(index)

            case Argument(token=token, index=index):
                if skip("argument", token):
                    continue
                arguments.append(token)
                removals.append(index)

            case EndOfFlags(rest=rest, index=index):
                if skip("argument", DOUBLE_DASH):
                    break
                escaped = rest
                arguments.extend(rest)
                removals.extend(Index(position) for position in range(index.position, len(tokens)))

    return ParsedFlags(
        flags=MappingProxyType(registry.finalize()),
        unknown_flags=MappingProxyType({name: tuple(values) for name, values in unknown.items()}),
        positionals=Positionals(arguments, escaped),
        remaining=splice(tokens, removals),
    )


__all__ = (
    "Positionals",
    "ParsedFlags",
    "type_flag",
)
