"""
Typeflag faults (schema errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every schema fault.
  Codes are grouped by domain to keep copy consistent and make searches predictable.
- SchemaException: base type that carries a message plus read-only options and
  knows how to render itself for rich in a friendly, lowercased, actionable way.
- Concrete faults, one per construction-time problem of a flag schema.

What is NOT a fault
- Exceptions raised by user coercion callables, default factories or the ignore
  hook propagate unmodified; they are never wrapped here.
- Soft anomalies (NaN for an empty number, unknown flags, implicit values) are
  represented as data in the parse result.

Integration
- The registry raises faults synchronously, before any token is scanned.
- Host CLIs may print a fault with a rich Console; the rendering honours the
  __prog__, __styles__ and __codes__ attributes of the host __main__ module.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the schema layer (stable identifiers).

    grouping (by high-level domain)
    - flag names (2110x)
      • INVALID_FLAG_NAME, FLAG_COLLISION
    - aliases (2111x)
      • INVALID_ALIAS, ALIAS_COLLISION
    - types (2112x)
      • MISSING_FLAG_TYPE, INVALID_FLAG_TYPE

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- flag name errors ---
    INVALID_FLAG_NAME   = 21101
    FLAG_COLLISION      = 21102

    # --- alias errors ---
    INVALID_ALIAS       = 21111
    ALIAS_COLLISION     = 21112

    # --- type errors ---
    MISSING_FLAG_TYPE   = 21121
    INVALID_FLAG_TYPE   = 21122

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class SchemaException(Exception):
    """
    base class of every schema construction fault.

    contract
    - message: short, lowercased, one-sentence description.
    - options: read-only mapping; recognized keys are
      • code: FaultCode of the fault.
      • title: short header shown by the renderer.
      • hint: a single actionable suggestion.
      • flag: the declared flag name the fault belongs to (when known).
      • colorful / fancy: rendering switches (default colorful, not fancy).
    - copy.replace(fault, **options) returns an equivalent fault with merged options.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        if (flag := self.options.get("flag", Unset)) is Unset:
            return str(self.message)
        return "invalid flag %r: %s" % (flag, self.message)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "typeflag"), "prog-name"),
            " — ",
            text(self.options["code"].normalize(), "code"),
            " | ",
            text(self.options.get("title", "schema error").title(), "error-title"),
            " ]"
        )
        message = text(str(self), "error-message")

        if hint := self.options.get("hint"):
            body = Group(message, Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        else:
            body = Group(message)

        if self.options.get("fancy", False):
            return Panel(body, title=header, title_align="left")

        return Group(header, body)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidFlagNameError(SchemaException, ValueError): ...
class FlagCollisionError(SchemaException, ValueError): ...
class InvalidAliasError(SchemaException, ValueError): ...
class AliasCollisionError(SchemaException, ValueError): ...
class MissingFlagTypeError(SchemaException, TypeError): ...
class InvalidFlagTypeError(SchemaException, TypeError): ...


def attach(fault, /, flag):
    """
    bind a fault to the declared flag name it was raised for.

    faults raised while normalizing a single schema entry do not know the key
    the entry was declared under; the registry re-raises them through here.
    """
    if not isinstance(fault, SchemaException):
        raise TypeError("attach() argument must be a schema exception")
    return copy.replace(fault, flag=flag)


__all__ = (
    "FaultCode",
    "SchemaException",
    "InvalidFlagNameError",
    "FlagCollisionError",
    "InvalidAliasError",
    "AliasCollisionError",
    "MissingFlagTypeError",
    "InvalidFlagTypeError",
    "attach",
)
