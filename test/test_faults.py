# python
"""
Faults module behavioral tests (codes, options, rendering, triggering).

Scope
- Validate the stable numeric codes and host remapping through __main__.__codes__.
- Validate option handling (code/title/hint overrides, __replace__ merging).
- Validate the rich rendering (header, message, hint arrow, fancy panel).
- Validate trigger(): raise outside shell mode, print and exit(1) inside it.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a rich Console bound to io.StringIO.
"""

from __future__ import annotations

import contextlib
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from ramus import Command, FaultCode, CommandException, trigger
from ramus import UnknownCommandError, MissingArgsError, InvalidFlagValueError, InvalidIntegerValueError


def _render(fault):
    console = Console(file=io.StringIO(), width=100, color_system=None)
    console.print(fault)
    return console.file.getvalue()


class TestFaultCodes(TestCase):
    """Stable identifiers and host labels."""

    def testKnownValues(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND, 11101)
        self.assertEqual(FaultCode.UNKNOWN_FLAG, 11111)
        self.assertEqual(FaultCode.INVALID_FLAG_COMBINATION, 11116)
        self.assertEqual(FaultCode.MISSING_ARGS, 11121)
        self.assertEqual(FaultCode.COMMAND_DEPRECATED, 11131)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.TOO_MANY_ARGS.normalize(), "11122")

    def testNormalizeUsesHostMapping(self):
        codes = {FaultCode.UNKNOWN_COMMAND: "route-404"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "route-404")
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "11111")

    def testEachFaultCarriesItsCode(self):
        self.assertEqual(UnknownCommandError("x").code, FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(InvalidIntegerValueError("x").code, FaultCode.INVALID_INTEGER_VALUE)
        self.assertIsInstance(InvalidIntegerValueError("x"), InvalidFlagValueError)


class TestFaultOptions(TestCase):
    """Message, title, hint and option merging."""

    def testStrFallsBackToTitle(self):
        self.assertEqual(str(UnknownCommandError("unknown command 'x'")), "unknown command 'x'")
        self.assertEqual(str(UnknownCommandError()), "unknown command")

    def testOverridesThroughOptions(self):
        fault = CommandException("boom", code=FaultCode.UNKNOWN_FLAG, title="custom", hint="try again")
        self.assertEqual(fault.code, FaultCode.UNKNOWN_FLAG)
        self.assertEqual(fault.title, "custom")
        self.assertEqual(fault.hint, "try again")

    def testOptionsAreReadOnly(self):
        fault = UnknownCommandError("x", input="x")
        with self.assertRaises(TypeError):
            fault.options["input"] = "y"  # type: ignore[index]

    def testReplaceMergesIntoNewFault(self):
        fault = MissingArgsError("missing", missing=["a"])
        replaced = fault.__replace__(hint="pass it", missing=["a", "b"])
        self.assertIsInstance(replaced, MissingArgsError)
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced.message, "missing")
        self.assertEqual(replaced.hint, "pass it")
        self.assertEqual(replaced.missing, ("a", "b"))
        self.assertIsNone(fault.hint)


class TestFaultRendering(TestCase):
    """Rich output."""

    def testPlainRendering(self):
        fault = UnknownCommandError("unknown command 'biuld'", hint="try 'tool --help'", colorful=False)
        output = _render(fault)
        self.assertIn("[ ramus - 11101 | Unknown Command ]", output)
        self.assertIn("unknown command 'biuld'", output)
        self.assertIn(" → try 'tool --help'", output)

    def testProgramNameFromTool(self):
        tool = Command(name="forge")
        output = _render(UnknownCommandError("x", tool=tool, colorful=False))
        self.assertIn("[ forge - 11101 |", output)

    def testHintIsOptional(self):
        output = _render(UnknownCommandError("x", colorful=False))
        self.assertNotIn("→", output)

    def testFancyWrapsInPanel(self):
        output = _render(UnknownCommandError("unknown command 'x'", fancy=True, colorful=False))
        self.assertIn("Unknown Command", output)
        self.assertIn("╭", output)


class TestTrigger(TestCase):
    """Raising versus shell rendering."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownCommandError) as context:
            trigger(UnknownCommandError("x"), hint="look elsewhere")
        self.assertEqual(context.exception.hint, "look elsewhere")

    def testShellModePrintsAndExits(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as context:
                trigger(UnknownCommandError("unknown command 'x'"), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("unknown command 'x'", stderr.getvalue())

    def testNonFaultRejected(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("not a fault"))


if __name__ == "__main__":
    unittest.main()
