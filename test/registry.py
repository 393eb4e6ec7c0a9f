"""
Registry module behavioral tests (declaration, lookup, reset, entry points).

Scope
- Validate declaration through declare()/flag()/option() and duplicate-name faults.
- Validate lookups by short and long name and handle identity.
- Validate reset() isolation between independent runs.
- Validate getopts() over sys.argv in raising and shell modes.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Registry, Flag, Option, faults).
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from getopts import (
    Registry,
    Flag,
    Option,
    Rest,
    DuplicateNameError,
    ParseError,
    UnrecognizedShortOptionError,
    DanglingOptionWarning,
)
from getopts import faults


class TestDeclaration(TestCase):
    """Behavioral tests for declaring flags and options."""

    def setUp(self):
        self.registry = Registry("prog")

    def testDeclareReturnsHandleOfKind(self):
        flag = self.registry.declare(Flag, "v", "verbose", "increase verbosity")
        option = self.registry.declare(Option, "f", "file", "input file")
        self.assertIsInstance(flag, Flag)
        self.assertIsInstance(option, Option)
        self.assertEqual(flag.help, "increase verbosity")

    def testDeclareRejectsUnknownKinds(self):
        with self.assertRaises(TypeError):
            self.registry.declare(str, "v")

    def testDeclareForwardsCallbacks(self):
        received = []
        option = self.registry.declare(Option, "f", action=received.append)
        option.deliver("x")
        self.assertEqual(received, ["x"])

    def testDuplicateShortNameRaises(self):
        self.registry.flag("v", "verbose")
        with self.assertRaises(DuplicateNameError) as context:
            self.registry.option("v", "value")
        self.assertEqual(context.exception.kind, "short")
        self.assertEqual(context.exception.name, "v")

    def testDuplicateLongNameRaises(self):
        self.registry.option("f", "file")
        with self.assertRaises(DuplicateNameError) as context:
            self.registry.flag("F", "file")
        self.assertEqual(context.exception.kind, "long")
        self.assertEqual(context.exception.name, "file")

    def testDuplicateNameIsNotAParseError(self):
        self.registry.flag("v")
        with self.assertRaises(ValueError) as context:
            self.registry.flag("v")
        self.assertNotIsInstance(context.exception, ParseError)

    def testFailedDeclarationLeavesTablesUntouched(self):
        self.registry.flag(long="verbose")
        with self.assertRaises(DuplicateNameError):
            self.registry.flag("x", "verbose")
        self.assertIsNone(self.registry.lookup_short("x"))
        self.assertEqual(len(self.registry.flags), 1)

    def testShortAndLongNamespacesAreSeparate(self):
        short = self.registry.flag("v")
        long = self.registry.flag(long="v")
        self.assertIs(self.registry.lookup_short("v"), short)
        self.assertIs(self.registry.lookup_long("v"), long)

    def testFlagsAndOptionsKeepDeclarationOrder(self):
        b = self.registry.flag("b")
        x = self.registry.option("x")
        a = self.registry.flag("a")
        self.assertEqual(self.registry.flags, [b, a])
        self.assertEqual(self.registry.options, [x])

    def testInvalidProgRejected(self):
        with self.assertRaises(ValueError):
            Registry("   ")
        with self.assertRaises(TypeError):
            Registry(42)


class TestLookup(TestCase):
    """Behavioral tests for lookups."""

    def setUp(self):
        self.registry = Registry("prog")
        self.verbose = self.registry.flag("v", "verbose")
        self.file = self.registry.option("f", "file")

    def testLookupShort(self):
        self.assertIs(self.registry.lookup_short("v"), self.verbose)
        self.assertIs(self.registry.lookup_short("f"), self.file)

    def testLookupLong(self):
        self.assertIs(self.registry.lookup_long("verbose"), self.verbose)
        self.assertIs(self.registry.lookup_long("file"), self.file)

    def testLookupMissing(self):
        self.assertIsNone(self.registry.lookup_short("z"))
        self.assertIsNone(self.registry.lookup_long("zed"))

    def testLookupIdentityIsStable(self):
        first = self.registry.lookup_long("file")
        self.registry.parse(["prog", "--file=a"])
        self.assertIs(self.registry.lookup_long("file"), first)
        self.assertIs(self.registry.lookup_short("f"), first)

    def testHandlesReportCapability(self):
        self.assertFalse(self.registry.lookup_short("v").takes_argument)
        self.assertTrue(self.registry.lookup_short("f").takes_argument)


class TestReset(TestCase):
    """Behavioral tests for reset()."""

    def testResetClearsEverything(self):
        registry = Registry("prog")
        registry.flag("v", "verbose")
        registry.option("f", "file")
        registry.onrest(lambda argument, after_terminator: False)

        registry.reset()

        self.assertEqual(registry.flags, [])
        self.assertEqual(registry.options, [])
        self.assertIsNone(registry.lookup_short("v"))
        self.assertIsNone(registry.lookup_long("file"))
        self.assertEqual(registry.parse(["prog", "a"]), [Rest("a", False)])

    def testResetAllowsRedeclaration(self):
        registry = Registry("prog")
        first = registry.flag("v")
        registry.reset()
        second = registry.flag("v")
        registry.parse(["prog", "-v"])
        self.assertEqual(first.count, 0)
        self.assertEqual(second.count, 1)

    def testResetRunsAreIndependent(self):
        registry = Registry("prog")
        registry.flag("v")
        registry.reset()
        with self.assertRaises(UnrecognizedShortOptionError):
            registry.parse(["prog", "-v"])

    def testIndependentRegistries(self):
        one, two = Registry("one"), Registry("two")
        a = one.flag("v")
        b = two.flag("v")
        one.parse(["one", "-v"])
        self.assertEqual((a.count, b.count), (1, 0))


class TestGetopts(TestCase):
    """Behavioral tests for getopts() over sys.argv."""

    def testGetoptsParsesSysArgv(self):
        registry = Registry("prog")
        verbose = registry.flag("v")
        with mock.patch.object(sys, "argv", ["prog", "-v", "file.txt"]):
            rest = registry.getopts()
        self.assertEqual(rest, [Rest("file.txt", False)])
        self.assertIs(verbose.value, True)

    def testGetoptsRaisesOutsideShell(self):
        registry = Registry("prog")
        with mock.patch.object(sys, "argv", ["prog", "-z"]):
            with self.assertRaises(UnrecognizedShortOptionError):
                registry.getopts()

    def testGetoptsPrintsAndExitsInShell(self):
        registry = Registry("prog", shell=True, colorful=False)
        buffer = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=buffer, width=200)):
            with mock.patch.object(sys, "argv", ["prog", "-z"]):
                with self.assertRaises(SystemExit) as context:
                    registry.getopts()
        self.assertEqual(context.exception.code, 1)
        output = buffer.getvalue()
        self.assertIn("prog", output)
        self.assertIn("Unrecognized Short Option", output)
        self.assertIn("unrecognized short option 'z'", output)

    def testShellWarningsArePrinted(self):
        registry = Registry("prog", shell=True, colorful=False)
        registry.option("f")
        buffer = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=buffer, width=200)):
            registry.parse(["prog", "-f"])
        self.assertIn("Dangling Option", buffer.getvalue())

    def testNonShellWarningsAreWarnings(self):
        registry = Registry("prog")
        registry.option("f")
        with self.assertWarns(DanglingOptionWarning):
            registry.parse(["prog", "-f"])


if __name__ == "__main__":
    unittest.main()
