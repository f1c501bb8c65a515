"""
Ramus faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing faults.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- CommandException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).

UX goals
- Short titles, one-sentence bodies, a single clear hint.
- Every hint names the full command route followed by '--help'.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The engine builds faults while resolving and calls Command.trigger(fault, **ctx).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via
  rich on stderr and the process exits with status 1.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND
    - flags (1111x)
      • UNKNOWN_FLAG, MISSING_VALUE_FOR_FLAG, INVALID_FLAG_VALUE,
        INVALID_BOOLEAN_VALUE, INVALID_INTEGER_VALUE, INVALID_FLAG_COMBINATION
    - positionals (1112x)
      • MISSING_ARGS, TOO_MANY_ARGS
    - commands (1113x)
      • COMMAND_DEPRECATED

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (1110x) ---
    UNKNOWN_COMMAND             = 11101

    # --- flag errors (1111x) ---
    UNKNOWN_FLAG                = 11111
    MISSING_VALUE_FOR_FLAG      = 11112
    INVALID_FLAG_VALUE          = 11113
    INVALID_BOOLEAN_VALUE       = 11114
    INVALID_INTEGER_VALUE       = 11115
    INVALID_FLAG_COMBINATION    = 11116

    # --- positional errors (1112x) ---
    MISSING_ARGS                = 11121
    TOO_MANY_ARGS               = 11122

    # --- command errors (1113x) ---
    COMMAND_DEPRECATED          = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base of every parse fault.

    a fault is created with a message and grows contextual options as it travels
    up to Command.trigger() (tool, shell, fancy, colorful, hint, ...). options are
    immutable; __replace__ returns a copy with merged overrides.

    class attributes
    - __code__: default FaultCode when no 'code' option is given.
    - __title__: default short title when no 'title' option is given.
    """
    __code__ = Unset
    __title__ = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message) if self.message is not Unset else self.title

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

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

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        try:
            name = self.options["tool"].root.name
        except KeyError:
            name = "ramus"
        prog = text(getattr(main, "__prog__", name), styler("prog-name"))

        header = [prog]
        if isinstance(self.code, FaultCode):
            header += [" - ", text(self.code.normalize(), styler("code"))]
        header += [" | ", text(self.title.title(), styler("error-title"))]
        header = Text.assemble("[ ", *header, " ]")

        message = text(str(self), styler("error-message"))
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class UnknownFlagError(CommandException):
    __code__ = FaultCode.UNKNOWN_FLAG
    __title__ = "unknown flag"


class MissingValueForFlagError(CommandException):
    __code__ = FaultCode.MISSING_VALUE_FOR_FLAG
    __title__ = "missing flag value"


class InvalidFlagValueError(CommandException):
    """
    umbrella for every value conversion failure.

    callers catch this single kind; the concrete subclass (boolean, integer)
    remains available to shape the message.
    """
    __code__ = FaultCode.INVALID_FLAG_VALUE
    __title__ = "invalid flag value"


class InvalidBooleanValueError(InvalidFlagValueError):
    __code__ = FaultCode.INVALID_BOOLEAN_VALUE
    __title__ = "invalid boolean value"


class InvalidIntegerValueError(InvalidFlagValueError):
    __code__ = FaultCode.INVALID_INTEGER_VALUE
    __title__ = "invalid integer value"


class InvalidFlagCombinationError(CommandException):
    __code__ = FaultCode.INVALID_FLAG_COMBINATION
    __title__ = "invalid flag combination"


class MissingArgsError(CommandException):
    __code__ = FaultCode.MISSING_ARGS
    __title__ = "missing arguments"

    @property
    def missing(self):
        """
        names of the required positionals that received no value.
        """
        return tuple(self.options.get("missing", ()))


class TooManyArgsError(CommandException):
    __code__ = FaultCode.TOO_MANY_ARGS
    __title__ = "too many arguments"


class CommandDeprecatedError(CommandException):
    __code__ = FaultCode.COMMAND_DEPRECATED
    __title__ = "deprecated command"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console and the process exits with 1;
      otherwise, the fault is raised.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, and any other context the
      reporter may want to keep (e.g., input, value, missing).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownCommandError",
    "UnknownFlagError",
    "MissingValueForFlagError",
    "InvalidFlagValueError",
    "InvalidBooleanValueError",
    "InvalidIntegerValueError",
    "InvalidFlagCombinationError",
    "MissingArgsError",
    "TooManyArgsError",
    "CommandDeprecatedError",
    "trigger",
)
