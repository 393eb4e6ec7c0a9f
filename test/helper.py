"""
Helper module behavioral tests (help screen composition).

Scope
- Validate the usage line, description and one row per declared entity.
- Validate spellings: negated short flags, long names and the option value label.
- Validate fancy (panel) mode and printing through Registry.help().

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a file-backed rich Console (no colour system).
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from getopts import Registry
from getopts.helper import compose


def _render(registry):
    buffer = io.StringIO()
    Console(file=buffer, width=120, color_system=None).print(compose(registry))
    return buffer.getvalue()


class TestCompose(TestCase):
    """Behavioral tests for compose()."""

    def setUp(self):
        self.registry = Registry("tool", "copies files around", colorful=False)
        self.registry.flag("v", "verbose", "increase verbosity")
        self.registry.flag(long="dry-run", help="do nothing")
        self.registry.option("o", "output", "write to file")
        self.registry.option("j")

    def testUsageLine(self):
        self.assertIn("usage: tool [options] [--] [arguments ...]", _render(self.registry))

    def testDescription(self):
        self.assertIn("copies files around", _render(self.registry))

    def testFlagSpellings(self):
        output = _render(self.registry)
        self.assertIn("-v, +v, --verbose", output)
        self.assertIn("--dry-run", output)
        self.assertIn("increase verbosity", output)

    def testOptionSpellings(self):
        output = _render(self.registry)
        self.assertIn("-o, --output <value>", output)
        self.assertIn("-j <value>", output)
        self.assertNotIn("+o", output)

    def testFlagsComeBeforeOptions(self):
        output = _render(self.registry)
        self.assertLess(output.index("--dry-run"), output.index("--output"))

    def testEmptyRegistry(self):
        output = _render(Registry("bare", colorful=False))
        self.assertEqual(output.strip(), "usage: bare [options] [--] [arguments ...]")

    def testFancyUsesPanel(self):
        registry = Registry("tool", fancy=True, colorful=False)
        registry.flag("v")
        output = _render(registry)
        self.assertIn("╭", output)
        self.assertIn("tool", output)

    def testColorfulKeepsText(self):
        registry = Registry("tool")
        registry.flag("v", "verbose")
        self.assertIn("--verbose", _render(registry))


class TestRegistryHelp(TestCase):
    """Behavioral tests for Registry.help()."""

    def testHelpPrintsToFile(self):
        registry = Registry("tool", colorful=False)
        registry.option("f", "file", "input file")
        buffer = io.StringIO()
        registry.help(file=buffer)
        output = buffer.getvalue()
        self.assertIn("usage: tool", output)
        self.assertIn("-f, --file <value>", output)
        self.assertIn("input file", output)


if __name__ == "__main__":
    unittest.main()
