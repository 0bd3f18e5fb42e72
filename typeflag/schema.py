r"""
Typeflag flag specifications, type registry and value coercion.

Overview
- Flag: normalized declaration of one flag (coercion callable, alias, default,
  extra metadata). Built from any accepted schema shape:
  • a callable:                 str, int, float, bool, or any unary callable
  • a one-element list/tuple:   [str]  (multi-value: collects every occurrence)
  • a mapping:                  {"type": ..., "alias": "s", "default": ..., **extras}
  • a Flag instance:            Flag(str, alias="s", default="x")
- Kind: closed tag of the coercion, resolved once at construction.
  • BOOLEAN (bool), NUMBER (int, float), CUSTOM (anything else, str included)
- Registry: per-call arena of entries plus two spelling layers (long names and
  single-character aliases) pointing at arena slots.

Coercion
- BOOLEAN: no value → True; a string → False only for "false" (any casing).
  Boolean flags never take the following token as their value.
- NUMBER: no value or "" → nan; otherwise the callable is applied.
- CUSTOM: no value → callable(""); otherwise callable(value).
- Anything raised by a user callable propagates unmodified.

Validation highlights (raised while building the registry)
- Names are non-empty strings of at least two characters without whitespace,
  ".", ":" or "=", and must not collide with another flag's camel/kebab spelling.
- Aliases are single characters claimed by one flag only; whitespace, "-", ".",
  ":" and "=" are rejected since the tokenizer never yields them as aliases.
- Every schema carries exactly one coercion callable, found recursively through
  nested mappings; one list/tuple wrapper of exactly one element marks multi-value.
"""
import functools
import operator
import re
from collections.abc import Mapping
from enum import IntEnum

from .faults import *
from .utils import *

_RESERVED = re.compile(r"[\s.:=]")
_RESERVED_ALIAS = re.compile(r"[\s.:=-]")


class Kind(IntEnum):
    """
    closed set of coercion behaviors.

    - BOOLEAN: presence flag; "false" (any casing) is the only falsy spelling.
    - NUMBER: int/float; an empty value yields nan instead of raising.
    - CUSTOM: the declared callable applied to the raw string.
    """
    BOOLEAN = 1
    NUMBER = 2
    CUSTOM = 3

    @classmethod
    def of(cls, parser, /):
        if parser is bool:
            return cls.BOOLEAN
        if parser is int or parser is float:
            return cls.NUMBER
        return cls.CUSTOM


class SpecType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printers.
    - Derive __typename__ from the class name (camel-case split with hyphens).
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _unwrap(type, /):
    """
    Internal: find the single coercion callable of a schema and whether it is multi-valued.

    Resolution (recursive)
    - Flag instance  → its already-resolved parser/multiple.
    - callable       → (callable, False)
    - list/tuple     → exactly one element, which must itself be callable → (element, True)
    - mapping        → recurse into its "type" key

    Raises
    - MissingFlagTypeError: no type at all (absent key, None, Unset).
    - InvalidFlagTypeError: a non-callable type or a wrapper of the wrong size.
    """
    if isinstance(type, Flag):
        return type.parser, type.multiple
    if callable(type):
        return type, False
    if isinstance(type, list | tuple):
        if len(type) != 1:
            raise InvalidFlagTypeError(
                "multi-value types wrap exactly one callable (got %d)" % len(type),
                code=FaultCode.INVALID_FLAG_TYPE,
                title="invalid flag type",
                hint="declare a multi-value flag as [type], for example [str]",
            )
        element, = type
        if not callable(element):
            raise InvalidFlagTypeError(
                "multi-value type %r is not callable" % (element,),
                code=FaultCode.INVALID_FLAG_TYPE,
                title="invalid flag type",
                hint="wrap a single callable, for example [int]",
            )
        return element, True
    if isinstance(type, Mapping):
        return _unwrap(type.get("type", Unset))
    if type is None or type is Unset:
        raise MissingFlagTypeError(
            "flag type is missing",
            code=FaultCode.MISSING_FLAG_TYPE,
            title="missing flag type",
            hint="declare a coercion callable such as str, int, float or bool",
        )
    raise InvalidFlagTypeError(
        "flag type %r is not callable" % (type,),
        code=FaultCode.INVALID_FLAG_TYPE,
        title="invalid flag type",
        hint="declare a coercion callable such as str, int, float or bool",
    )


def _sanitize_alias(alias, /):
    """
    Internal: validate the optional single-character alias.

    - Unset or None mean "no alias".
    - Anything else must be a string of exactly one character that the
      tokenizer can reach (no whitespace, "-", ".", ":" or "=").
    """
    if alias is Unset or alias is None:
        return None
    if not isinstance(alias, str):
        raise InvalidAliasError(
            "flag alias must be a string",
            code=FaultCode.INVALID_ALIAS,
            title="invalid alias",
            hint="use a single character, for example alias='s'",
        )
    if not alias:
        raise InvalidAliasError(
            "flag alias cannot be empty",
            code=FaultCode.INVALID_ALIAS,
            title="invalid alias",
            hint="use a single character or drop the alias",
        )
    if len(alias) > 1:
        raise InvalidAliasError(
            "flag aliases can only be a single-character (got %r)" % alias,
            code=FaultCode.INVALID_ALIAS,
            title="invalid alias",
            hint="use a single character, for example alias=%r" % alias[0],
        )
    if _RESERVED_ALIAS.match(alias):
        raise InvalidAliasError(
            "flag alias cannot be the character %r" % alias,
            code=FaultCode.INVALID_ALIAS,
            title="invalid alias",
            hint="whitespace, '-', '.', ':' and '=' never reach an alias group",
        )
    return alias


class Flag(metaclass=SpecType):
    """
    Normalized flag declaration.

    Properties (read-only)
    - type: the declared type as given (callable, wrapper or nested mapping).
    - parser: the single coercion callable extracted from type.
    - kind: Kind of parser (BOOLEAN / NUMBER / CUSTOM).
    - multiple: whether every occurrence is collected (list/tuple wrapper).
    - alias: single-character alias or None.
    - default: Unset when not declared; otherwise a literal or a zero-argument factory.
    - extras: any other metadata given with the declaration (e.g. description).
    """

    __introspectable__ = (
        "parser",
        "kind",
        "multiple",
        "alias",
        "default",
        "extras",
    )

    def __new__(cls, type=Unset, *, alias=Unset, default=Unset, **extras):
        parser, multiple = _unwrap(type)

        self = super().__new__(cls)
        self._type = type
        self._parser = parser
        self._kind = Kind.of(parser)
        self._multiple = multiple
        self._alias = _sanitize_alias(alias)
        self._default = default
        self._extras = extras
        return self

    type = mirror("type")

    @classmethod
    def from_schema(cls, schema, /):
        """
        Build a Flag from any accepted schema shape (see module docstring).
        """
        if isinstance(schema, Flag):
            return schema
        if isinstance(schema, Mapping):
            if not all(isinstance(key, str) for key in schema):
                raise TypeError("flag schema keys must be strings")
            return cls(**schema)
        return cls(schema)

    def awaits(self, value, /):
        """
        Whether an occurrence with this inline value needs the following token.
        """
        return value is None and self._kind is not Kind.BOOLEAN

    def coerce(self, value, /):
        """
        Convert one occurrence; value is the raw string or None for "no value".
        """
        match self._kind:
            case Kind.BOOLEAN:
                return True if value is None else value.lower() != "false"
            case Kind.NUMBER:
                return float("nan") if not value else self._parser(value)
            case _:
                return self._parser("" if value is None else value)

    def finalize(self, values, /):
        """
        Resolve the final value from the collected occurrences.

        - occurrences present: a tuple of them (multi-value) or the last one.
        - no occurrence: the default (a callable default is invoked now, never
          earlier); without a default, () for multi-value flags and None otherwise.
        """
        if values:
            return tuple(values) if self._multiple else values[-1]
        if self._default is not Unset:
            return self._default() if callable(self._default) else self._default
        return () if self._multiple else None


class Entry:
    """
    Arena slot of the registry: one declared flag and its accumulator.
    """
    __slots__ = ("name", "flag", "values")

    def __init__(self, name, flag, /):
        self.name = name
        self.flag = flag
        self.values = []

    def __repr__(self):
        return "entry(name=%r, flag=%r, values=%r)" % (self.name, self.flag, self.values)


def _sanitize_name(name, /):
    """
    Internal: validate a declared flag name (shape only; collisions are checked on registration).
    """
    if not isinstance(name, str):
        raise TypeError("flag names must be strings")
    if not name:
        raise InvalidFlagNameError(
            "flag name cannot be empty",
            code=FaultCode.INVALID_FLAG_NAME,
            title="invalid flag name",
            hint="use at least two characters, for example 'verbose'",
        )
    if len(name) == 1:
        raise InvalidFlagNameError(
            "single characters are reserved for aliases",
            code=FaultCode.INVALID_FLAG_NAME,
            title="invalid flag name",
            hint="declare a longer name with alias=%r instead" % name,
            flag=name,
        )
    if match := _RESERVED.search(name):
        raise InvalidFlagNameError(
            "flag name cannot contain the character %r" % match[0],
            code=FaultCode.INVALID_FLAG_NAME,
            title="invalid flag name",
            hint="whitespace, '.', ':' and '=' are reserved as value delimiters",
            flag=name,
        )


class Registry:
    """
    Per-call lookup structure built from a flag schema mapping.

    Layout
    - entries: arena of Entry objects, addressed by integer slot.
    - names: long spelling → slot (declared name and its kebab-case form).
    - aliases: single character → slot.

    Every spelling of one flag resolves to the same slot, so occurrences under
    any spelling accumulate together.
    """

    def __init__(self, schemas, /):
        if not isinstance(schemas, Mapping):
            raise TypeError("flag schemas must be a mapping")

        self._entries = []
        self._names = {}
        self._aliases = {}

        for name, schema in schemas.items():
            _sanitize_name(name)
            try:
                flag = Flag.from_schema(schema)
            except SchemaException as fault:
                raise attach(fault, name) from None
            self._register(name, flag)

    def _register(self, name, flag, /):
        slot = len(self._entries)

        for spelling in dict.fromkeys((name, kebabize(name))):
            if (owner := self._names.get(spelling)) is not None:
                raise FlagCollisionError(
                    "collides with flag %r" % self._entries[owner].name,
                    code=FaultCode.FLAG_COLLISION,
                    title="flag collision",
                    hint="camelCase and kebab-case spellings of a name are the same flag; keep only one",
                    flag=name,
                )
            self._names[spelling] = slot

        if (alias := flag.alias) is not None:
            if (owner := self._aliases.get(alias)) is not None:
                raise AliasCollisionError(
                    "alias %r is already used by flag %r" % (alias, self._entries[owner].name),
                    code=FaultCode.ALIAS_COLLISION,
                    title="alias collision",
                    hint="pick another character for one of the flags",
                    flag=name,
                )
            self._aliases[alias] = slot

        self._entries.append(Entry(name, flag))

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def lookup(self, name, /, *, alias=False):
        """
        Return the slot of a spelling, or None for an unknown flag.

        Long spellings are tried as observed, then in their camelCase form; alias
        characters are looked up only among aliases ("--a" never matches alias "a").
        """
        if alias:
            return self._aliases.get(name)
        if (slot := self._names.get(name)) is None:
            slot = self._names.get(camelize(name))
        return slot

    def flag(self, slot, /):
        return self._entries[slot].flag

    def record(self, slot, value, /):
        """
        Coerce one occurrence and accumulate it (multi-value) or overwrite (scalar).
        """
        entry = self._entries[slot]
        coerced = entry.flag.coerce(value)
        if entry.flag.multiple:
            entry.values.append(coerced)
        else:
            entry.values[:] = [coerced]

    def finalize(self):
        """
        Resolve every declared flag into a name → value dict (declaration order).
        """
        return {entry.name: entry.flag.finalize(entry.values) for entry in self._entries}


__all__ = (
    "Kind",
    "Flag",
    "Entry",
    "Registry",
)
