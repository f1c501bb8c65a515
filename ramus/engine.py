"""
Ramus resolution engine: from raw tokens to one leaf handler call.

Pipeline (one pass per invocation)
1. descend(): walk the tree while the head token names a child.
2. deprecation check on the leaf (fatal).
3. parse(): classify the remaining tokens as flags or positionals, left to right.
4. validate(): positional arity against the leaf's slots.
5. execute(): build a Context and call the leaf once.

Grammar (parse)
- '--help' / '-h' exactly: render help for the leaf and exit 0.
- '--name=value': one token, value converted per flag type.
- '--name': BOOL takes a following literal 'true'/'false' if present, else True;
  other types take the next token, which must not start with '-'.
- '-abc': cluster of one-character flags; only the last may take a value, and
  that value is the next whole token.
- anything else, including '-' alone: positional value.

The grammar is greedy and order dependent: 'run --now extra.txt' stores now=True
and keeps 'extra.txt' as a positional.

Faults are surfaced through Command.trigger(), so shell mode renders and exits 1
while library use gets exceptions.
"""
import logging
import sys
from collections import deque, namedtuple

from .arguments import FlagType
from .context import Context
from .faults import *
from .utils import suggest

logger = logging.getLogger(__name__)

Resolution = namedtuple("Resolution", ("command", "positionals"))
Resolution.__doc__ = """
Outcome of a resolution pass: the leaf command and its raw positional values.
"""


def _help(command):
    logger.debug("help requested for %r", command.route)
    command.print_help()
    sys.exit(0)


def _unknown_flag(command, spelling):
    candidates = [spelling for flag in command.flags.values() if not flag.hidden for spelling in flag.spellings]
    if suggestion := suggest(spelling, candidates):
        hint = "did you mean %r? you can also run '%s --help' to see all flags" % (suggestion, command.route)
    else:
        hint = "try '%s --help' to see all available flags" % command.route
    command.trigger(UnknownFlagError(
        "unknown flag %r for %r" % (spelling, command.route),
        input=spelling,
        suggestion=suggestion,
        hint=hint,
    ))


def _value(command, flag, spelling, tokens):
    """
    Pop the value token for a non-boolean flag.
    """
    if not tokens or tokens[0].startswith("-"):
        command.trigger(MissingValueForFlagError(
            "flag %r expects a %s value" % (spelling, flag.type.value),
            flag=flag.name,
            hint="pass it as '%s %s' or '--%s=%s'; run '%s --help' for details" % (
                spelling, flag.type.metavar, flag.name, flag.type.metavar, command.route
            ),
        ))
    return tokens.popleft()


def _assign(command, flag, raw):
    try:
        command.set_value(flag.name, raw)
    except InvalidFlagValueError as fault:
        command.trigger(fault, hint="run '%s --help' to see what each flag expects" % command.route)


def descend(command, tokens, /):
    """
    Walk from command down the tree while the head token names a child.

    Stops at the first flag-like token, or at an unmatched token when the current
    command declares positionals. An unmatched token anywhere else is an unknown command.
    """
    while tokens and not tokens[0].startswith("-"):
        if (child := command.find_command(tokens[0])) is not None:
            logger.debug("descend %r -> %r via %r", command.name, child.name, tokens[0])
            tokens.popleft()
            command = child
            continue

        if command.positionals:
            break

        token = tokens[0]
        typeof = "subcommand" if command.parent else "command"
        if suggestion := suggest(token, command.children):
            hint = "did you mean %r? you can also run '%s --help' to see all %ss" % (suggestion, command.route, typeof)
        else:
            hint = "try '%s --help' to see all available %ss" % (command.route, typeof)
        command.trigger(UnknownCommandError(
            "unknown %s %r for %r" % (typeof, token, command.route),
            input=token,
            suggestion=suggestion,
            hint=hint,
        ))

    return command


def parse(command, tokens, /):
    """
    Consume every remaining token into flag values on command and a positional list.

    Returns the positional values in order. Exits with status 0 when help is asked for.
    """
    positionals = []

    while tokens:
        token = tokens.popleft()

        if token in ("--help", "-h"):
            _help(command)

        elif token.startswith("--"):
            name, separator, value = token[2:].partition("=")
            if (flag := command.find_flag(name)) is None:
                _unknown_flag(command, "--" + name)
            if separator:
                _assign(command, flag, value)
            elif flag.type is FlagType.BOOL:
                # boolean elision: only a literal true/false is taken as the value
                _assign(command, flag, tokens.popleft() if tokens and tokens[0] in ("true", "false") else "true")
            else:
                _assign(command, flag, _value(command, flag, token, tokens))

        elif token.startswith("-") and len(token) > 1:
            cluster = token[1:]
            for index, shortcut in enumerate(cluster):
                if (flag := command.find_flag(shortcut)) is None:
                    _unknown_flag(command, "-" + shortcut)
                if flag.type is FlagType.BOOL:
                    _assign(command, flag, "true")
                elif index < len(cluster) - 1:
                    command.trigger(InvalidFlagCombinationError(
                        "flag '-%s' takes a %s value and must come last in %r" % (shortcut, flag.type.value, token),
                        flag=flag.name,
                        input=token,
                        hint="move '-%s' to the end of the cluster or pass it on its own; run '%s --help' for details" % (
                            shortcut, command.route
                        ),
                    ))
                else:
                    _assign(command, flag, _value(command, flag, "-" + shortcut, tokens))

        else:
            logger.debug("%s: positional %r", command.name, token)
            positionals.append(token)

    # help can also arrive inside a cluster (-vh) or inline (--help=true)
    if command.values["help"].payload:
        _help(command)

    return positionals


def validate(command, positionals, /):
    """
    Check positional arity: every required slot filled, no excess without a variadic tail.
    """
    slots = command.positionals
    required = [slot for slot in slots if slot.required]

    if len(positionals) < len(required):
        missing = [slot.name for slot in required[len(positionals):]]
        command.trigger(MissingArgsError(
            "missing required argument%s %s for %r" % (
                "s" * (len(missing) > 1), ", ".join(map(repr, missing)), command.route
            ),
            missing=missing,
            hint="run '%s --help' to see the expected arguments" % command.route,
        ))

    if not (slots and slots[-1].variadic) and len(positionals) > len(slots):
        extra = positionals[len(slots):]
        command.trigger(TooManyArgsError(
            "%r takes %d argument%s but %d %s given" % (
                command.route, len(slots), "s" * (len(slots) != 1), len(positionals), "was" if len(positionals) == 1 else "were"
            ),
            extra=extra,
            hint="remove %s; run '%s --help' to see the expected arguments" % (", ".join(map(repr, extra)), command.route),
        ))


def resolve(root, tokens, /):
    """
    Run descent, the deprecation check, parsing and arity validation.

    Nothing is invoked. The leaf's flag values are re-seeded from their defaults
    first, so a tree can be resolved more than once.
    """
    tokens = deque(tokens)
    command = descend(root, tokens)

    if command.deprecated:
        route = command.parents[-1].route if command.parents else command.route
        if command.replacement:
            hint = "use %r instead; run '%s --help' for details" % (command.replacement, route)
        else:
            hint = "run '%s --help' to see the available commands" % route
        command.trigger(CommandDeprecatedError(
            "command %r is deprecated" % command.route,
            replacement=command.replacement,
            hint=hint,
        ))

    command.reset()
    positionals = parse(command, tokens)
    validate(command, positionals)

    logger.debug("resolved %r with positionals %r", command.route, positionals)
    return Resolution(command, tuple(positionals))


def execute(root, tokens, /, *, data=None):
    """
    Resolve tokens from root and call the leaf once with a fresh Context.

    Returns the handler's result; handler exceptions propagate unchanged. A spinner
    the handler left running is stopped afterwards.
    """
    command, positionals = resolve(root, tokens)
    context = Context(command, positionals, data=data)
    try:
        return command(context)
    finally:
        context.close()


__all__ = (
    "Resolution",
    "descend",
    "parse",
    "validate",
    "resolve",
    "execute",
)
