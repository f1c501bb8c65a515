"""
Ramus command layer: build, compose, and run tree-structured CLIs.

What this module provides
- Command: a node of the command tree with:
  • Child commands indexed by name, shortcut and alias (one mutation path: add_command).
  • A flag registry indexed by name and shortcut, with current values (add_flag/set_value).
  • An ordered list of positional slots (add_positional).
  • Polished help rendering (rich-based, color-aware, optional panel chrome).
  • Runtime options (shell/colorful/fancy/console) inherited from the parent.

- Factories and helpers:
  • command(...): create a Command or a decorator that produces one.
  • invoke(obj, prompt): convenience runner for Commands or plain callables.

Quick start
    from ramus import command, Flag, Positional, invoke

    @command(flags=[Flag("verbose", "v")], shell=True)
    def tool(ctx):
        '''a tiny tool'''

    @tool.command(positionals=[Positional("target")])
    def run(ctx):
        '''run a target'''
        print(ctx.arg("target"), ctx.flag("verbose", bool))

    if __name__ == "__main__":
        invoke(tool, "run -v build.txt")

Design notes
- Parents are held through weakref.ref; a parent owns its children, never the reverse.
- Flags are not inherited: each command has its own registry, including its own
  implicit --help/-h flag added at construction.
- Name, shortcut and alias collisions under one parent are construction-time errors.

See also
- ramus.engine for the resolution algorithm.
- ramus.faults for fault codes and rendering behavior.
"""
import inspect
import logging
import os.path
import re
import shlex
import sys
import weakref
from collections import defaultdict
from collections.abc import Iterable

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import engine
from .arguments import Flag, FlagType, FlagValue, Positional
from .faults import trigger
from .utils import *

logger = logging.getLogger(__name__)

console = Console()


class CommandType(type):
    """
    Metaclass that turns Command into an introspectable type.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics and rich UI.
    - Expose selected fields as read-only properties using mirror() for all names
      listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      for consistent, human-friendly labels in messages.
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
            - command(name='build', shortcut='b', ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
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


def _process_identity(cls, metadata):
    """
    Validate name, shortcut and aliases; reject a command whose own tokens repeat.
    """
    pattern = r"[^\W\d_](-?[^\W_]+)*"

    if (name := metadata["name"]) is Unset:
        # handler names get hyphens; anything untypeable ('<lambda>') falls back to the program name
        name = re.sub(r"_+", "-", getattr(metadata["handler"], "__name__", "").strip("_"))
        if not re.fullmatch(pattern, name):
            name = os.path.basename(sys.argv[0]) or "ramus"
    elif not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(pattern, name):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid shell-style name (unicodes are allowed)")
    metadata["name"] = name

    if not isinstance(shortcut := metadata["shortcut"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'shortcut' must be a string")
    elif isinstance(shortcut, str) and not re.fullmatch(pattern, shortcut := shortcut.strip()):
        raise ValueError(f"{cls.__typename__} 'shortcut' must be a valid shell-style name")
    metadata["shortcut"] = coalesce(shortcut)

    if isinstance(aliases := metadata["aliases"], str) or not isinstance(aliases, Iterable):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
    sanitized = []
    for alias in aliases:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
        elif not re.fullmatch(pattern, alias := alias.strip()):
            raise ValueError(f"{cls.__typename__} 'aliases' must be valid shell-style names")
        sanitized.append(alias)
    metadata["aliases"] = tuple(sanitized)

    tokens = [name, *([shortcut] if metadata["shortcut"] else []), *sanitized]
    if len(set(tokens)) != len(tokens):
        raise ValueError(f"{cls.__typename__} name, shortcut and aliases cannot contain duplicates")


def _process_strings(cls, metadata):
    """
    Validate optional help strings (descr, usage, version, replacement).

    Unset becomes None; provided strings are stripped and must not be empty.
    """
    for field in ("descr", "usage", "version", "replacement"):
        if not isinstance(value := metadata[field], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        metadata[field] = coalesce(value)


def _process_runtime(cls, metadata):
    """
    Validate runtime options. Unset is kept so that lookups fall through to the parent.
    """
    for field in ("shell", "colorful", "fancy"):
        if metadata[field] is not Unset:
            metadata[field] = bool(metadata[field])
    if not isinstance(metadata["console"], Console | Unset):
        raise TypeError(f"{cls.__typename__} 'console' must be a rich console")


class Command(metaclass=CommandType):
    """
    A node of the command tree.

    Responsibilities
    - Introspection: exposes metadata (name, shortcut, aliases, descr, ...) as read-only properties.
    - Composition: add_command()/command() attach children; parent is a weak back-reference.
    - Registries: flags (by name and shortcut) with current values, and ordered positionals.
    - Rendering: print_help() draws usage, description, children, flags and positionals.
    - Execution: execute(argv) and __invoke__(prompt) run the resolution engine.

    Invariants
    - A child is inserted in the name, shortcut and alias indices in one step.
    - At most one variadic positional, and it is the last one.
    - A required positional never follows an optional one.
    - Flag names and shortcuts are unique within one command.
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "aliases",
        "descr",
        "usage",
        "version",
        "handler",
        "deprecated",
        "replacement",
        "flags",
        "positionals",
        "children",
        "values",
    )

    # parent/children are left out to keep representations finite
    __displayable__ = (
        "name",
        "shortcut",
        "aliases",
        "descr",
        "version",
        "deprecated",
    )

    def __new__(
            cls,
            handler=Unset,
            /,
            parent=Unset,
            *,
            # ── Identity ────────────────────────────────────────────────────────────
            name=Unset,
            shortcut=Unset,
            aliases=(),
            # ── Help ────────────────────────────────────────────────────────────────
            descr=Unset,
            usage=Unset,
            version=Unset,
            # ── Registries ──────────────────────────────────────────────────────────
            flags=(),
            positionals=(),
            # ── Lifecycle ───────────────────────────────────────────────────────────
            deprecated=False,
            replacement=Unset,
            # ── Runtime (inherited from the parent when Unset) ──────────────────────
            shell=Unset,
            colorful=Unset,
            fancy=Unset,
            console=Unset
    ):
        """
        Construct a Command, optionally attaching it under parent.

        Parameters
        - handler: Unset | Callable[[Context], Any]
          Invoked when this command is the resolved leaf. A command without a
          handler renders its own help instead.
        - parent: Unset | Command
        - name: Unset | str, defaults to handler.__name__ or the program basename.
        - shortcut: Unset | str, one extra token resolving to this command.
        - aliases: Iterable[str], further tokens resolving to this command.
        - descr: Unset | str, defaults to the handler docstring.
        - usage: Unset | str, explicit usage tail shown after the command route.
        - version: Unset | str, shown in the help header.
        - flags: Iterable[Flag], registered in order.
        - positionals: Iterable[Positional], registered in order.
        - deprecated: bool, resolving to this command is a fault.
        - replacement: Unset | str, successor suggested by the deprecation fault.
        - shell, colorful, fancy: bool | Unset; console: rich Console | Unset.

        Raises
        - TypeError/ValueError on invalid metadata, duplicate registrations or
          name conflicts upon attachment.
        """
        if handler is not Unset and not callable(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must be callable")
        if not isinstance(parent, Command | Unset):
            raise TypeError(f"{cls.__typename__} 'parent' must be a command")

        metadata = {
            "handler": handler,
            "name": name,
            "shortcut": shortcut,
            "aliases": aliases,
            "descr": descr if descr is not Unset or handler is Unset else inspect.getdoc(handler) or Unset,
            "usage": usage,
            "version": version,
            "deprecated": bool(deprecated),
            "replacement": replacement,
            "shell": shell,
            "colorful": colorful,
            "fancy": fancy,
            "console": console,
        }
        _process_identity(cls, metadata)
        _process_strings(cls, metadata)
        _process_runtime(cls, metadata)

        self = super().__new__(cls)
        self._parent = None
        # child indices
        self._children = {}
        self._shortcuts = {}
        self._aliases = {}
        # flag registry
        self._flags = {}
        self._switches = {}
        self._values = {}
        self._positionals = []
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object) if name == "handler" else object)

        self.add_flag(Flag("help", "h", descr="show this help message and exit"))
        self.add_flags(flags)
        self.add_positionals(positionals)

        if parent is not Unset:
            parent.add_command(self)
        return self

    def __call__(self, context, /):
        """
        Run the handler with a resolved Context, or render help when there is none.
        """
        if self.handler is None:
            return self.print_help()
        return self.handler(context)

    # ── Tree ────────────────────────────────────────────────────────────────────

    @property
    def parent(self):
        """
        The command this one is attached to, or None for a root.
        """
        return self._parent() if self._parent is not None else None

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.

        The first element is the root command, the last is the current node.
        Used to build routes such as 'tool remote add' in hints and usage.
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def parents(self):
        """
        Chain from the root down to, excluding, this command.
        """
        return self.path[:-1]

    @property
    def route(self):
        return " ".join(step.name for step in self.path)

    def add_command(self, child, /):
        """
        Attach child under this command.

        The child's name, shortcut and aliases are checked against every token
        already indexed here before anything is inserted, so a failed attachment
        leaves all three indices untouched.

        Raises
        - TypeError: child is not a Command.
        - ValueError: child already has a parent, would create a cycle, or one of
          its tokens is already in use under this command.
        """
        if not isinstance(child, Command):
            raise TypeError(f"{type(self).__typename__} child must be a command")
        if child.parent is not None:
            raise ValueError(f"{type(self).__typename__} {child.name!r} is already attached to {child.parent.name!r}")
        if any(step is child for step in self.path):
            raise ValueError(f"{type(self).__typename__} {child.name!r} cannot be attached under itself")

        typeof = "subcommand" if self.parent else "command"
        for token in (child.name, *([child.shortcut] if child.shortcut else []), *child.aliases):
            if self.find_command(token) is not None:
                raise ValueError(f"{type(self).__typename__} {typeof} token {token!r} is already in use under {self.name!r}")

        self._children[child.name] = child
        if child.shortcut:
            self._shortcuts[child.shortcut] = child
        for alias in child.aliases:
            self._aliases[alias] = child
        child._parent = weakref.ref(self)
        logger.debug("attached %r under %r", child.name, self.name)
        return child

    def command(self, handler=Unset, /, **options):
        """
        Create a child command under this one.

        Works directly (self.command(func, name="x")) or as a decorator
        (@self.command(name="x")), injecting parent=self.
        """
        return command(handler, self, **options)

    def find_command(self, token, /):
        """
        Look a token up by name, then alias, then shortcut; None when unknown.
        """
        for index in (self._children, self._aliases, self._shortcuts):
            if (child := index.get(token)) is not None:
                return child
        return None

    # ── Flags ───────────────────────────────────────────────────────────────────

    def add_flag(self, flag, /):
        """
        Register flag and seed its current value from the default.

        Raises
        - TypeError: flag is not a Flag.
        - ValueError: its name or shortcut is already registered here.
        """
        if not isinstance(flag, Flag):
            raise TypeError(f"{type(self).__typename__} flags must be flag specs")
        if flag.name in self._flags:
            raise ValueError(f"{type(self).__typename__} {self.name!r} already has a flag named {flag.name!r}")
        if flag.shortcut and flag.shortcut in self._switches:
            raise ValueError(f"{type(self).__typename__} {self.name!r} already has a flag with shortcut {flag.shortcut!r}")

        self._flags[flag.name] = flag
        if flag.shortcut:
            self._switches[flag.shortcut] = flag
        self._values[flag.name] = flag.default
        return flag

    def add_flags(self, flags, /):
        if not isinstance(flags, Iterable):
            raise TypeError(f"{type(self).__typename__} 'flags' must be an iterable of flag specs")
        for flag in flags:
            self.add_flag(flag)

    def find_flag(self, token, /):
        """
        Look a token up by flag name, then by shortcut; None when unknown.
        """
        if (flag := self._flags.get(token)) is not None:
            return flag
        return self._switches.get(token)

    def set_value(self, name, raw, /):
        """
        Convert raw according to the flag's type and store it.

        Raises
        - KeyError: no flag named name.
        - InvalidBooleanValueError / InvalidIntegerValueError (both InvalidFlagValueError).
        """
        if not isinstance(raw, str):
            raise TypeError("set_value() raw value must be a string")
        try:
            flag = self._flags[name]
        except KeyError:
            raise KeyError(f"{type(self).__typename__} {self.name!r} has no flag named {name!r}") from None
        self._values[name] = value = FlagValue.parse(flag.type, raw, flag=name)
        logger.debug("%s: %s = %r", self.name, name, value.payload)
        return value

    def reset(self):
        """
        Restore every flag value to its declared default.
        """
        self._values = {name: flag.default for name, flag in self._flags.items()}

    # ── Positionals ─────────────────────────────────────────────────────────────

    def add_positional(self, positional, /):
        """
        Append a positional slot.

        Raises
        - TypeError: positional is not a Positional.
        - ValueError: duplicate name, anything after a variadic slot, or a
          required slot after an optional one.
        """
        if not isinstance(positional, Positional):
            raise TypeError(f"{type(self).__typename__} positionals must be positional specs")
        if any(other.name == positional.name for other in self._positionals):
            raise ValueError(f"{type(self).__typename__} {self.name!r} already has a positional named {positional.name!r}")
        if self._positionals and self._positionals[-1].variadic:
            raise ValueError(f"{type(self).__typename__} variadic positional {self._positionals[-1].name!r} must be the last one")
        if positional.required and any(not other.required for other in self._positionals):
            raise ValueError(f"{type(self).__typename__} required positional {positional.name!r} cannot follow an optional one")

        self._positionals.append(positional)
        return positional

    def add_positionals(self, positionals, /):
        if not isinstance(positionals, Iterable):
            raise TypeError(f"{type(self).__typename__} 'positionals' must be an iterable of positional specs")
        for positional in positionals:
            self.add_positional(positional)

    # ── Runtime options ─────────────────────────────────────────────────────────

    def _inherit(self, name, default):
        command = self
        while command is not None:
            if (value := getattr(command, "_" + name)) is not Unset:
                return value
            command = command.parent
        return default

    @property
    def shell(self):
        return self._inherit("shell", False)

    @property
    def colorful(self):
        return self._inherit("colorful", True)

    @property
    def fancy(self):
        return self._inherit("fancy", False)

    @property
    def console(self):
        return self._inherit("console", console)

    # ── Faults ──────────────────────────────────────────────────────────────────

    def trigger(self, fault, /, **options):
        """
        Surface fault with this command's runtime options attached.

        In shell mode the fault is rendered on stderr and the process exits with
        status 1; otherwise it is raised.
        """
        trigger(fault, **(options | {
            "tool": self,
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
        }))

    # ── Help ────────────────────────────────────────────────────────────────────

    def print_help(self):
        """
        Render help to the command console.

        Palette keys
        - header, version, usage-label, program-name, usage-section, description-section
        - section-label, flag-name, metavar, default, argument-description
        - children-title, children-table, children, children-description, deprecated-name
        - panel-title

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed; deprecated-name still applies strike.
        """
        styles = defaultdict(str, {
            # === Head sections ===
            "header": "bold #FFFFFF",
            "version": "#9CA3AF",
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
            "description-section": "italic #A3A3A3",  # Neutral gray

            # === Flags / positionals ===
            "section-label": "bold #FFFFFF",
            "flag-name": "bold #22C55E",
            "metavar": "bold #FFD600",
            "default": "#737373",
            "argument-description": "#9CA3AF",

            # === Children table ===
            "children-title": "bold #FFFFFF",
            "children-table": "#4B5563",  # Slate border
            "children": "bold #36C5F0",  # Sky-blue subcommands
            "children-description": "#9CA3AF",
            "deprecated-name": "bold #F97316 strike",

            # === Fancy panel ===
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            if "deprecated" in style and not self.colorful:
                return "strike"
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment), style)
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        renders = []

        if (root := self.root).version:
            renders.append(Text.assemble(
                text(root.name, styler("header")), " ", text(root.version, styler("version")), "\n",
            ))

        # Usage line: route + explicit tail, or synthesized from the registries
        usage = Text()
        usage.append("usage", styler("usage-label")).append(": ")
        usage.append(text(self.route, styler("program-name")))
        if self.usage:
            usage.append(" ").append(text(self.usage, styler("usage-section")))
        else:
            usage.append(" ").append(text("[flags]", styler("usage-section")))
            if self.children:
                usage.append(" ").append(text("<command>", styler("usage-section")))
            for positional in self.positionals:
                usage.append(" ").append(text(positional.metavar, styler("metavar")))
        renders.append(usage.append("\n"))

        if self.descr:
            renders.append(text(self.descr, styler("description-section")).append("\n"))

        if self.children:
            typeof = "subcommands" if self.parent else "commands"
            table = Table(
                "name", "help",
                title=text(typeof, styler("children-title")),
                box=ROUNDED,
                style=styler("children-table"),
                header_style=styler("children-title"),
                title_justify="left",
            )
            for child in self.children.values():
                style = "deprecated-name" if child.deprecated else "children"
                names = Text(", ").join(
                    text(token, styler(style)) for token in (child.name, *filter(None, [child.shortcut]), *child.aliases)
                )
                if child.descr:
                    help = text(child.descr, styler("children-description"))
                else:
                    help = text(f"run '{child.route} --help' for details", styler("children-description"))
                if child.deprecated:
                    help = Text.assemble(help, " ", text("(deprecated)", styler("deprecated-name")))
                table.add_row(names, help)
            renders.append(table)

        # Flags and positionals share the same two-column layout
        sections = []

        flags = Table.grid(padding=(0, 2), pad_edge=True)
        flags.add_column(no_wrap=True)
        flags.add_column()
        for flag in filter(lambda x: not x.hidden, self.flags.values()):
            spelling = Text(", ").join(text(spelling, styler("flag-name")) for spelling in reversed(flag.spellings))
            if flag.type is not FlagType.BOOL:
                spelling.append(" ").append(text(flag.type.metavar, styler("metavar")))
            help = text(flag.descr, styler("argument-description"))
            if flag.default.payload != flag.type.zero:
                help.append(" ").append(text("(default: %r)" % flag.default.payload, styler("default")))
            flags.add_row(spelling, help)
        sections.append(Group(text("flags", styler("section-label")).append(":"), flags))

        if self.positionals:
            arguments = Table.grid(padding=(0, 2), pad_edge=True)
            arguments.add_column(no_wrap=True)
            arguments.add_column()
            for positional in self.positionals:
                arguments.add_row(
                    text(positional.metavar, styler("metavar")),
                    text(positional.descr, styler("argument-description")),
                )
            sections.append(Group(text("arguments", styler("section-label")).append(":"), arguments))

        renders.extend(sections)

        renderable = Group(*renders)
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self.name} HELP".upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
            )

        self.console.print(renderable)

    # ── Execution ───────────────────────────────────────────────────────────────

    def execute(self, argv=None, /, *, data=None):
        """
        Resolve argv (program name first, sys.argv by default) and run the leaf handler.

        Returns the handler's result. Parse faults follow trigger(): raised, or
        rendered with exit status 1 in shell mode. Help exits with status 0.
        """
        argv = sys.argv if argv is None else argv
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("execute() argument must be an iterable of strings")
        tokens = list(argv)[1:]
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("execute() argument must be an iterable of strings")
        return engine.execute(self, tokens, data=data)

    def __invoke__(self, prompt=Unset, /, *, data=None):
        """
        Execute this command with a token stream (no program name).

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used as is.

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str].
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        return engine.execute(self, tokens, data=data)


def command(handler=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct:     cmd = command(func, name="x")
    - Decorator:  @command(name="x") / @parent.command()

    Commands without a handler (pure groups) are built with Command(name="x") instead.

    Parameters
    - handler: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command.__new__ (parent, metadata, runtime options).
    """
    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return Command(handler, *args, **kwargs)

    return wrapper(handler) if handler is not Unset else wrapper


def invoke(object, prompt=Unset, /, *, data=None):
    """
    Convenience runner for commands or callables.

    Parameters
    - object: an instance providing __invoke__(prompt) or a plain callable.
    - prompt: Unset (sys.argv[1:]), a str split with shlex, or an iterable of str.
    - data: opaque value exposed to the handler as ctx.data.

    Returns the handler's result.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt, data=data)

    # a plain callable is wrapped as a single-command tool
    if callable(object):
        return invoke(command(object), prompt, data=data)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Command",
    "command",
    "invoke",
)

# Not part of the public API.
del CommandType
