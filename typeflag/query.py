"""
Typeflag single-flag extraction.

get_flag() pulls one flag (under any of several spellings) out of argv without
declaring a full schema, leaving everything else for a later parse.
"""
from typing import NamedTuple

from .faults import *
from .schema import Flag
from .tokens import *
from .utils import *


class Extraction(NamedTuple):
    value: object
    argv: list


def _spellings(names, /):
    if not isinstance(names, str):
        raise TypeError("get_flag() names must be a comma-separated string")

    spellings = set()
    for name in names.split(","):
        if (parsed := parse(name.strip())) is None:
            raise InvalidFlagNameError(
                "%r is not a flag spelling" % name,
                code=FaultCode.INVALID_FLAG_NAME,
                title="invalid flag name",
                hint="spell names as they appear in argv, for example '--size,-s'",
            )
        name, _, alias = parsed
        spellings.add((name, alias))
    return spellings


def get_flag(names, type, argv=Unset, /):
    """
    extract a flag from argv and return Extraction(value, argv).

    - names: comma-separated spellings as typed on the command line ("--size,-s").
      A spelling matches only in the same form: "-s" matches the alias s, never "--s".
    - type: a coercion callable, or a one-element list/tuple of one to collect
      every occurrence into a tuple.
    - argv: defaults to sys.argv[1:]; the given list is not modified. The returned
      argv is a new list without the extracted tokens (assign it back with
      argv[:] = extraction.argv to consume in place).

    A single-value extraction stops at the first occurrence; later ones stay in
    argv. Without any occurrence the value is None (or () when collecting).
    """
    spellings = _spellings(names)
    flag = Flag(type)
    tokens = snapshot(argv)

    results = []
    removals = []

    scanner = Scanner(tokens)
    for event in scanner:
        match event:
            case FlagToken(name=name, value=value, index=index, alias=alias):
                if (name, alias) not in spellings:
                    continue
                removals.append(index)
                if flag.awaits(value):
                    scanner.expect(flag)
                else:
                    results.append(flag.coerce(value))

            case BoundValue(value=value, index=index):
                results.append(flag.coerce(value))
                if index is not None:
                    removals.append(index)

            case EndOfFlags():
                break

        if results and not flag.multiple and not scanner.awaiting:
            break

    return Extraction(
        value=flag.finalize(results),
        argv=splice(tokens, removals),
    )


__all__ = (
    "Extraction",
    "get_flag",
)
