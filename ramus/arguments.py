r"""
Ramus argument specifications and flag values.

Overview
- Types
  • FlagType: the closed set of flag payload kinds (BOOL, INT, STRING). The builtins
    bool/int/str are accepted wherever a FlagType is expected.
  • FlagValue: tagged union over FlagType; a payload always matches its tag.

- Specs
  • Flag: named switch with an optional one-character shortcut, a typed default and
    help metadata (e.g., --verbose/-v, --count=3).
  • Positional: ordered, name-addressable positional slot (required, optional or variadic).

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes selected
    fields via read-only properties declared in __introspectable__/__displayable__.

Metadata (sanitized on construction)
- Shared (all specs)
  • name: str, validated as a shell-style identifier ("dry-run", "v2", unicode allowed).
  • descr: Unset | str | Text (short help), non-empty when provided.
- Flag only
  • shortcut: Unset | str of exactly one letter or digit.
  • type: FlagType | bool | int | str.
  • default: payload matching type (or a FlagValue with the same tag); zero value when Unset.
  • hidden: bool (suppresses from help, still parses).
- Positional only
  • required: bool (default True).
  • variadic: bool (default False).

Conversion rules (FlagValue.parse)
- BOOL: the literal strings "true"/"false" only.
- INT: base-10 signed 32-bit, r"[+-]?[0-9]+" and range checked.
- STRING: verbatim, including the empty string.

Quick example:
    >>> from ramus.arguments import Flag, Positional
    >>> Flag("verbose", "v", descr="print more")
    flag(name='verbose', shortcut='v', type=<FlagType.BOOL: 'bool'>, default=FlagValue(BOOL, False), ...)
    >>> Positional("files", required=False, variadic=True)
    positional(name='files', descr=None, required=False, variadic=True)
"""
import builtins
import enum
import functools
import operator
import re

from rich.text import Text

from .faults import InvalidBooleanValueError, InvalidIntegerValueError
from .utils import *

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


class FlagType(enum.Enum):
    """
    kinds of payload a flag can carry.
    """
    BOOL = "bool"
    INT = "int"
    STRING = "string"

    @classmethod
    def coerce(cls, object, /):
        """
        Normalize a FlagType, a builtin alias (bool, int, str) or a member value.

        Raises
        - TypeError: when object does not name a flag type.
        """
        if isinstance(object, cls):
            return object
        try:
            return {builtins.bool: cls.BOOL, builtins.int: cls.INT, builtins.str: cls.STRING}[object]
        except (KeyError, TypeError):
            pass
        try:
            return cls(object)
        except ValueError:
            raise TypeError(f"flag type must be one of bool, int, str or a FlagType, not {object!r}") from None

    @property
    def zero(self):
        """
        Payload used when nothing else is known (False, 0 or "").
        """
        return {FlagType.BOOL: False, FlagType.INT: 0, FlagType.STRING: ""}[self]

    @property
    def metavar(self):
        """
        Placeholder shown in help for value-bearing flags.
        """
        return {FlagType.BOOL: "", FlagType.INT: "<int>", FlagType.STRING: "<string>"}[self]


class FlagValue:
    """
    Tagged flag payload.

    Invariants
    - BOOL carries a bool, INT an int within the signed 32-bit range, STRING a str.
    - Instances are immutable and compare by (type, payload).
    """
    __slots__ = ("_type", "_payload")

    def __init__(self, type, payload, /):
        type = FlagType.coerce(type)
        match type:
            case FlagType.BOOL if not isinstance(payload, bool):
                raise TypeError(f"bool flag value must be a bool, not {builtins.type(payload).__name__}")
            case FlagType.INT if not isinstance(payload, int) or isinstance(payload, bool):
                raise TypeError(f"int flag value must be an int, not {builtins.type(payload).__name__}")
            case FlagType.INT if not INT_MIN <= payload <= INT_MAX:
                raise ValueError(f"int flag value must fit in 32 bits, got {payload}")
            case FlagType.STRING if not isinstance(payload, str):
                raise TypeError(f"string flag value must be a str, not {builtins.type(payload).__name__}")
        object.__setattr__(self, "_type", type)
        object.__setattr__(self, "_payload", payload)

    @property
    def type(self):
        return self._type

    @property
    def payload(self):
        return self._payload

    @classmethod
    def zero(cls, type, /):
        return cls(type := FlagType.coerce(type), type.zero)

    @classmethod
    def parse(cls, type, raw, /, *, flag=Unset):
        """
        Convert a raw token into a FlagValue of the given type.

        Parameters
        - type: FlagType | bool | int | str
        - raw: str, the token exactly as typed.
        - flag: Unset | str, flag name used to phrase the fault message.

        Raises
        - InvalidBooleanValueError: BOOL and raw is neither "true" nor "false".
        - InvalidIntegerValueError: INT and raw is not a base-10 32-bit integer.
        """
        type = FlagType.coerce(type)
        where = f" for flag {flag!r}" if flag is not Unset else ""

        if type is FlagType.BOOL:
            if raw == "true":
                return cls(type, True)
            if raw == "false":
                return cls(type, False)
            raise InvalidBooleanValueError(
                "invalid boolean value %r%s, expected 'true' or 'false'" % (raw, where),
                flag=flag,
                value=raw,
            )

        if type is FlagType.INT:
            # more than ten significant digits can never fit, skip int() on huge inputs
            if (
                not (match := re.fullmatch(r"([+-]?)0*([0-9]+)", raw)) or
                len(match[2]) > 10 or
                not INT_MIN <= (number := int(match[1] + match[2])) <= INT_MAX
            ):
                raise InvalidIntegerValueError(
                    "invalid integer value %r%s, expected a whole number between %d and %d" % (raw, where, INT_MIN, INT_MAX),
                    flag=flag,
                    value=raw,
                )
            return cls(type, number)

        return cls(type, raw)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __eq__(self, other):
        if not isinstance(other, FlagValue):
            return NotImplemented
        return (self._type, self._payload) == (other._type, other._payload)

    def __hash__(self):
        return hash((self._type, self._payload))

    def __repr__(self):
        return f"FlagValue({self._type.name}, {self._payload!r})"


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and help output.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(name='verbose', shortcut='v', ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    r"""
    Internal: normalize and validate metadata shared by Flag and Positional.

    - name: required, stripped, must match r"[^\W\d_](-?[^\W_]+)*" (no leading
      hyphens, digits or underscores; single inner hyphens allowed).
    - descr: optional short description. Unset becomes None; a provided string
      must be non-empty after trimming.

    Raises
    - TypeError: wrong types.
    - ValueError: empty or malformed values.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid shell-style name (unicodes are allowed)")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_flag_metadata(cls, metadata, /):
    """
    Internal: validate shortcut, type and default of a Flag.

    The default is materialized as a FlagValue of the declared type so that
    a registry can seed its values without further checks.
    """
    if not isinstance(shortcut := metadata["shortcut"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'shortcut' must be a string")
    elif isinstance(shortcut, str) and not re.fullmatch(r"[^\W_]", shortcut):
        raise ValueError(f"{cls.__typename__} 'shortcut' must be exactly one letter or digit")
    metadata["shortcut"] = coalesce(shortcut)

    try:
        metadata["type"] = type = FlagType.coerce(metadata["type"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'type' must be one of bool, int, str or a FlagType") from None

    default = metadata["default"]
    if default is Unset:
        metadata["default"] = FlagValue.zero(type)
    elif isinstance(default, FlagValue):
        if default.type is not type:
            raise TypeError(f"{cls.__typename__} 'default' must be a {type.value} value")
    else:
        try:
            metadata["default"] = FlagValue(type, default)
        except TypeError:
            raise TypeError(f"{cls.__typename__} 'default' must be a {type.value} value") from None
        except ValueError:
            raise ValueError(f"{cls.__typename__} 'default' must fit in a signed 32-bit integer") from None


class Flag(metaclass=ArgumentType):
    """
    Named, typed switch specification.

    A Flag is spelled --name on the command line, or -x when it has a shortcut.
    BOOL flags need no value (presence means True); INT and STRING flags take the
    next token or an inline '=value'.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "type",
        "default",
        "descr",
        "hidden",
    )

    def __new__(cls, name, shortcut=Unset, /, *, type=FlagType.BOOL, default=Unset, descr=Unset, hidden=False):
        """
        Construct a Flag spec with the provided metadata.

        Parameters
        - name: str, long spelling without the leading '--'.
        - shortcut: Unset | str, one character spelled '-x'.
        - type: FlagType | bool | int | str (default BOOL).
        - default: payload matching type, or a FlagValue; the zero value when Unset.
        - descr: Unset | str, short description for help.
        - hidden: bool, suppress from help (parsing is unaffected).
        """
        metadata = {
            "name": name,
            "shortcut": shortcut,
            "type": type,
            "default": default,
            "descr": descr,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_flag_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def spellings(self):
        """
        Every accepted spelling, long form first (e.g., ('--verbose', '-v')).
        """
        return ("--" + self.name,) + (("-" + self.shortcut,) if self.shortcut else ())


class Positional(metaclass=ArgumentType):
    """
    Positional argument slot.

    Positionals are filled in declaration order. A variadic slot takes every
    remaining value and must be declared last; those ordering rules are enforced
    by the owning command when the slot is added.
    """

    __introspectable__ = (
        "name",
        "descr",
        "required",
        "variadic",
    )

    def __new__(cls, name, /, *, descr=Unset, required=True, variadic=False):
        metadata = {
            "name": name,
            "descr": descr,
            "required": bool(required),
            "variadic": bool(variadic),
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def metavar(self):
        """
        Help label: <name>, [name], <name>... or [name]...
        """
        label = f"<{self.name}>" if self.required else f"[{self.name}]"
        return label + "..." if self.variadic else label


__all__ = (
    "FlagType",
    "FlagValue",
    "Flag",
    "Positional",
)

# Not part of the public API.
del ArgumentType
