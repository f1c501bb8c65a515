"""
Ramus execution context: the read-only view handed to a leaf handler.

A Context is built once per resolution pass and exposes
- tree pointers: root, parent (None for the root) and command (the leaf);
- flag(name, type): the resolved payload of a flag on the leaf;
- arg(name) / args(name): positional values bound to a named slot;
- data: the opaque object passed to execute()/invoke();
- console, print_help() and a lazily created spinner.

Binding rule for positionals: slot i receives value i; a variadic slot receives
every value from its index on.
"""
from .arguments import FlagType
from .spinner import Spinner
from .utils import mirror


class Context:
    """
    Resolved invocation state for one handler call.

    Example
        def handler(ctx):
            if ctx.flag("verbose", bool):
                ctx.console.print("building", ctx.arg("target"))
    """

    root = mirror("root")
    command = mirror("command")
    positionals = mirror("positionals")

    def __init__(self, command, positionals=(), /, *, data=None):
        self._command = command
        self._root = command.root
        self._positionals = tuple(positionals)
        self._data = data
        self._spinner = None

        self._bound = {}
        for index, slot in enumerate(command.positionals):
            if slot.variadic:
                self._bound[slot.name] = self._positionals[index:]
            else:
                self._bound[slot.name] = self._positionals[index:index + 1]

    def __repr__(self):
        return f"context(command={self._command.route!r}, positionals={self._positionals!r})"

    @property
    def parent(self):
        """
        Immediate parent of the leaf, None when the leaf is the root.
        """
        return self._command.parent

    @property
    def data(self):
        return self._data

    @property
    def console(self):
        return self._command.console

    @property
    def spinner(self):
        """
        Spinner bound to the command console, created on first access.
        """
        if self._spinner is None:
            self._spinner = Spinner(console=self.console)
        return self._spinner

    def flag(self, name, type, /):
        """
        Return the payload of flag name on the leaf.

        - type is a FlagType or one of bool, int, str.
        - An unknown name yields the zero value of type (False, 0 or "").
        - Asking for a type other than the declared one raises TypeError.
        """
        type = FlagType.coerce(type)
        if (flag := self._command.flags.get(name)) is None:
            return type.zero
        if flag.type is not type:
            raise TypeError(f"flag {name!r} holds a {flag.type.value} value, not a {type.value} value")

        value = self._command.values.get(name, flag.default)
        return value.payload if value.type is type else flag.default.payload

    def args(self, name, /):
        """
        Every value bound to positional name, as a tuple (empty when none were given).

        Raises
        - KeyError: the leaf declares no positional called name.
        """
        try:
            return self._bound[name]
        except KeyError:
            raise KeyError(f"command {self._command.route!r} has no positional named {name!r}") from None

    def arg(self, name, default=None, /):
        """
        First value bound to positional name, or default when it received nothing.
        """
        values = self.args(name)
        return values[0] if values else default

    def print_help(self):
        self._command.print_help()

    def close(self):
        """
        Stop the spinner if the handler left it running.
        """
        if self._spinner is not None:
            self._spinner.stop()


__all__ = (
    "Context",
)
