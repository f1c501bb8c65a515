# python
"""
Engine behavioral tests (descent, flag grammar, arity, help, deprecation, execution).

Scope
- Validate the five reference scenarios end to end.
- Validate grammar properties: boolean elision, '=' form, clusters, value rules.
- Validate positional arity faults and variadic tails.
- Validate help short-circuits (exit 0) and shell-mode faults (exit 1).
- Validate execution plumbing: program-name stripping, handler result, propagation.

Conventions
- Test method names follow CamelCase per project convention.
- resolve() is used where no handler needs to run; invoke()/execute() otherwise.
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr
from unittest import TestCase

from rich.console import Console

from ramus import Command, Flag, Positional, invoke
from ramus import (
    UnknownCommandError,
    UnknownFlagError,
    MissingValueForFlagError,
    InvalidFlagValueError,
    InvalidBooleanValueError,
    InvalidIntegerValueError,
    InvalidFlagCombinationError,
    MissingArgsError,
    TooManyArgsError,
    CommandDeprecatedError,
)
from ramus.engine import resolve


def _console():
    return Console(file=io.StringIO(), width=100, color_system=None)


def _payloads(command):
    return {name: value.payload for name, value in command.values.items() if name != "help"}


class TestScenarios(TestCase):
    """Reference scenarios."""

    def testShortBooleanThenRequiredPositional(self):
        root = Command(name="tool")
        run = Command(parent=root, name="run", flags=[Flag("verbose", "v")], positionals=[Positional("target")])

        command, positionals = resolve(root, ["run", "-v", "build.txt"])
        self.assertIs(command, run)
        self.assertIs(run.values["verbose"].payload, True)
        self.assertEqual(positionals, ("build.txt",))

    def testUnknownLongFlag(self):
        root = Command(name="tool")
        Command(parent=root, name="run", flags=[Flag("now")])

        with self.assertRaises(UnknownFlagError) as context:
            resolve(root, ["run", "--count=5"])
        self.assertIn("count", str(context.exception))
        self.assertEqual(context.exception.options["input"], "--count")

    def testUnknownLongFlagExitsOneInShellMode(self):
        root = Command(name="tool", shell=True)
        Command(parent=root, name="run", flags=[Flag("now")])

        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            resolve(root, ["run", "--count=5"])
        self.assertEqual(context.exception.code, 1)
        output = stderr.getvalue()
        self.assertIn("unknown flag '--count'", output)
        self.assertIn("11111", output)
        self.assertIn("tool run --help", output)

    def testBooleanElisionLeavesNextTokenPositional(self):
        root = Command(name="tool")
        run = Command(parent=root, name="run", flags=[Flag("now")], positionals=[Positional("file", required=False)])

        command, positionals = resolve(root, ["run", "--now", "extra.txt"])
        self.assertIs(command, run)
        self.assertIs(run.values["now"].payload, True)
        self.assertEqual(positionals, ("extra.txt",))

    def testClusterWithTrailingValueFlag(self):
        tool = Command(name="tool", flags=[Flag("all", "a"), Flag("brief", "b"), Flag("number", "n", type=int)])

        resolve(tool, ["-abn", "42"])
        self.assertEqual(_payloads(tool), {"all": True, "brief": True, "number": 42})

    def testVariadicTailBinding(self):
        seen = {}

        def handler(ctx):
            seen.update(input=ctx.arg("input"), first=ctx.arg("files"), files=ctx.args("files"))

        tool = Command(handler, name="tool", positionals=[
            Positional("input"),
            Positional("files", required=False, variadic=True),
        ])
        invoke(tool, ["a.txt", "b.txt", "c.txt"])
        self.assertEqual(seen, {"input": "a.txt", "first": "b.txt", "files": ("b.txt", "c.txt")})


class TestFlagGrammar(TestCase):
    """Long flags, '=' form, clusters and value rules."""

    def setUp(self):
        self.tool = Command(name="tool", flags=[
            Flag("force", "f"),
            Flag("quiet", "q"),
            Flag("count", "n", type=int, default=1),
            Flag("label", "l", type=str),
        ], positionals=[Positional("rest", required=False, variadic=True)])

    def _resolve(self, *tokens):
        return resolve(self.tool, list(tokens))

    def testBooleanSpellingsSetTrue(self):
        for tokens in (["--force"], ["--force=true"], ["-f"], ["--force", "true"], ["--f"]):
            with self.subTest(tokens=tokens):
                _, positionals = self._resolve(*tokens)
                self.assertIs(self.tool.values["force"].payload, True)
                self.assertEqual(positionals, ())

    def testBooleanFalseSpellings(self):
        for tokens in (["--force=false"], ["--force", "false"]):
            with self.subTest(tokens=tokens):
                _, positionals = self._resolve(*tokens)
                self.assertIs(self.tool.values["force"].payload, False)
                self.assertEqual(positionals, ())

    def testNonBooleanFormsAgree(self):
        for tokens in (["--count=5"], ["--count", "5"], ["-n", "5"], ["-qn", "5"]):
            with self.subTest(tokens=tokens):
                self._resolve(*tokens)
                self.assertEqual(self.tool.values["count"].payload, 5)

    def testInlineValueMayBeEmptyOrContainEquals(self):
        self._resolve("--label=")
        self.assertEqual(self.tool.values["label"].payload, "")
        self._resolve("--label=a=b")
        self.assertEqual(self.tool.values["label"].payload, "a=b")

    def testInlineNegativeNumber(self):
        self._resolve("--count=-3")
        self.assertEqual(self.tool.values["count"].payload, -3)

    def testClusterOrderIndependent(self):
        self._resolve("-fq")
        first = _payloads(self.tool)
        self._resolve("-qf")
        self.assertEqual(_payloads(self.tool), first)
        self.assertTrue(first["force"] and first["quiet"])

    def testValueFlagMustBeLastInCluster(self):
        with self.assertRaises(InvalidFlagCombinationError) as context:
            self._resolve("-nf", "5")
        self.assertIn("tool --help", context.exception.hint)

    def testUnknownShortcutInCluster(self):
        with self.assertRaises(UnknownFlagError):
            self._resolve("-fz")

    def testUnknownFlagSuggestsCloseMatch(self):
        with self.assertRaises(UnknownFlagError) as context:
            self._resolve("--forse")
        self.assertIn("'--force'", context.exception.hint)

    def testMissingValue(self):
        for tokens in (["--count"], ["--count", "-f"], ["-n"], ["-fn"], ["--label", "-"]):
            with self.subTest(tokens=tokens):
                with self.assertRaises(MissingValueForFlagError):
                    self._resolve(*tokens)

    def testInvalidValuesKeepSubKind(self):
        with self.assertRaises(InvalidIntegerValueError) as context:
            self._resolve("--count=many")
        self.assertIsInstance(context.exception, InvalidFlagValueError)
        self.assertIn("tool --help", context.exception.hint)

        with self.assertRaises(InvalidBooleanValueError):
            self._resolve("--force=yes")

    def testSingleDashIsPositional(self):
        _, positionals = self._resolve("-", "-f")
        self.assertEqual(positionals, ("-",))
        self.assertIs(self.tool.values["force"].payload, True)

    def testHiddenFlagsStillParse(self):
        tool = Command(name="tool", flags=[
            Flag("debug", "d", hidden=True),
            Flag("secret-token", type=str, hidden=True),
        ])
        for tokens in (["--debug"], ["--debug=true"], ["-d"], ["--debug", "true"]):
            with self.subTest(tokens=tokens):
                resolve(tool, tokens)
                self.assertIs(tool.values["debug"].payload, True)
        resolve(tool, ["--secret-token=abc"])
        self.assertEqual(tool.values["secret-token"].payload, "abc")
        resolve(tool, ["--secret-token", "xyz"])
        self.assertEqual(tool.values["secret-token"].payload, "xyz")

    def testHiddenFlagsAreNeverSuggested(self):
        tool = Command(name="tool", flags=[Flag("force", "f"), Flag("secret-token", type=str, hidden=True)])
        with self.assertRaises(UnknownFlagError) as context:
            resolve(tool, ["--secret-tokn=x"])
        self.assertNotIn("secret", context.exception.hint)
        self.assertNotEqual(context.exception.options["suggestion"], "--secret-token")

    def testValuesReseededOnEveryPass(self):
        self._resolve("--count=9", "-f")
        self._resolve()
        self.assertEqual(_payloads(self.tool), {"force": False, "quiet": False, "count": 1, "label": ""})


class TestDescent(TestCase):
    """Leaf descent through the tree."""

    def setUp(self):
        self.root = Command(name="tool")
        self.remote = Command(parent=self.root, name="remote", shortcut="r")
        self.add = Command(parent=self.remote, name="add", aliases=["new"], positionals=[Positional("url")])
        self.build = Command(parent=self.root, name="build")

    def testDescendsByNameAliasAndShortcut(self):
        for tokens in (["remote", "add", "x"], ["r", "new", "x"]):
            with self.subTest(tokens=tokens):
                command, positionals = resolve(self.root, tokens)
                self.assertIs(command, self.add)
                self.assertEqual(positionals, ("x",))

    def testStopsAtFlag(self):
        command, _ = resolve(self.root, ["--help=false"])
        self.assertIs(command, self.root)

    def testUnknownCommandSuggestsCloseMatch(self):
        with self.assertRaises(UnknownCommandError) as context:
            resolve(self.root, ["biuld"])
        self.assertIn("did you mean 'build'", context.exception.hint)
        self.assertIn("tool --help", context.exception.hint)

    def testUnknownTokenOnLeafWithoutPositionals(self):
        with self.assertRaises(UnknownCommandError):
            resolve(self.root, ["build", "extra"])

    def testCommandWithPositionalsSwallowsUnmatchedTokens(self):
        host = Command(name="host", positionals=[Positional("item", variadic=True)])
        child = Command(parent=host, name="child")
        self.assertIs(resolve(host, ["child"]).command, child)
        self.assertEqual(resolve(host, ["other", "child"]).positionals, ("other", "child"))


class TestArity(TestCase):
    """Positional count validation."""

    def testMissingNamesExactlyTheMissingSlots(self):
        tool = Command(name="tool", positionals=[Positional("a"), Positional("b"), Positional("c", required=False)])
        with self.assertRaises(MissingArgsError) as context:
            resolve(tool, [])
        self.assertEqual(context.exception.missing, ("a", "b"))

        with self.assertRaises(MissingArgsError) as context:
            resolve(tool, ["1"])
        self.assertEqual(context.exception.missing, ("b",))

    def testTooManyWithoutVariadic(self):
        tool = Command(name="tool", positionals=[Positional("a"), Positional("b", required=False)])
        self.assertEqual(resolve(tool, ["1", "2"]).positionals, ("1", "2"))
        with self.assertRaises(TooManyArgsError) as context:
            resolve(tool, ["1", "2", "3"])
        self.assertIn("'3'", context.exception.hint)

    def testVariadicAcceptsAnyCount(self):
        tool = Command(name="tool", positionals=[Positional("a"), Positional("rest", required=False, variadic=True)])
        for count in (1, 2, 10):
            with self.subTest(count=count):
                tokens = [str(index) for index in range(count)]
                self.assertEqual(resolve(tool, tokens).positionals, tuple(tokens))

    def testRequiredVariadicNeedsOne(self):
        tool = Command(name="tool", positionals=[Positional("files", variadic=True)])
        with self.assertRaises(MissingArgsError):
            resolve(tool, [])


class TestHelpExit(TestCase):
    """Help short-circuits with status 0."""

    def setUp(self):
        self.root = Command(name="tool", console=_console(), colorful=False)
        self.run = Command(parent=self.root, name="run", flags=[Flag("verbose", "v")], positionals=[Positional("target")])

    def _exits(self, *tokens):
        with self.assertRaises(SystemExit) as context:
            resolve(self.root, list(tokens))
        self.assertEqual(context.exception.code, 0)
        return self.root.console.file.getvalue()

    def testLongAndShortHelp(self):
        self.assertIn("usage: tool run", self._exits("run", "--help"))
        self.assertIn("usage: tool [flags] <command>", self._exits("-h"))

    def testHelpWinsOverLaterFaults(self):
        # missing 'target' and an unknown flag are never reached
        self.assertIn("usage: tool run", self._exits("run", "-h", "--bogus"))

    def testHelpInsideClusterOrInline(self):
        self.assertIn("usage: tool run", self._exits("run", "-vh"))
        self.assertIn("usage: tool run", self._exits("run", "--help=true"))


class TestDeprecation(TestCase):
    """Deprecated leaves are fatal before flags are parsed."""

    def testDeprecatedBeforeFlagParsing(self):
        root = Command(name="tool")
        Command(parent=root, name="make", deprecated=True, replacement="build")
        with self.assertRaises(CommandDeprecatedError) as context:
            resolve(root, ["make", "--bogus"])
        self.assertIn("'build'", context.exception.hint)
        self.assertIn("tool --help", context.exception.hint)
        self.assertEqual(context.exception.options["replacement"], "build")

    def testDeprecatedExitsOneInShellMode(self):
        root = Command(name="tool", shell=True)
        Command(parent=root, name="make", deprecated=True)
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as context:
            resolve(root, ["make"])
        self.assertEqual(context.exception.code, 1)


class TestExecution(TestCase):
    """execute()/invoke() plumbing."""

    def testExecuteStripsProgramNameAndReturnsResult(self):
        root = Command(name="tool")
        Command(lambda ctx: ("ran", ctx.arg("target")), root, name="run", positionals=[Positional("target")])
        self.assertEqual(root.execute(["/usr/bin/tool", "run", "x"]), ("ran", "x"))

    def testInvokeSplitsStringPrompt(self):
        tool = Command(lambda ctx: ctx.positionals, name="tool", positionals=[Positional("words", variadic=True)])
        self.assertEqual(invoke(tool, "one 'two three'"), ("one", "two three"))

    def testInvokeWrapsPlainCallable(self):
        def echo(ctx):
            return ctx.command.name

        self.assertEqual(invoke(echo, []), "echo")

    def testInvokeRejectsBadPrompt(self):
        tool = Command(lambda ctx: None, name="tool")
        with self.assertRaises(TypeError):
            invoke(tool, 42)
        with self.assertRaises(TypeError):
            invoke(tool, ["ok", 3])
        with self.assertRaises(TypeError):
            invoke(object(), [])

    def testHandlerExceptionsPropagate(self):
        def boom(ctx):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            invoke(Command(boom, name="tool", shell=True), [])

    def testHandlerlessLeafRendersHelp(self):
        root = Command(name="tool", console=_console(), colorful=False)
        Command(lambda ctx: None, root, name="run")
        self.assertIsNone(root.execute(["tool"]))
        self.assertIn("usage: tool [flags] <command>", root.console.file.getvalue())

    def testDataIsHandedThrough(self):
        payload = ["shared"]
        tool = Command(lambda ctx: ctx.data, name="tool")
        self.assertIs(invoke(tool, [], data=payload), payload)

    def testResolutionIsLogged(self):
        tool = Command(name="tool", flags=[Flag("now")])
        with self.assertLogs("ramus.engine", "DEBUG") as logs:
            resolve(tool, ["--now"])
        self.assertTrue(any("resolved 'tool'" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
