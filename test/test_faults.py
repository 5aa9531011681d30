"""
Faults module behavioral tests (codes, trigger, rendering).

Scope
- Validate FaultCode normalization and getdoc lookups.
- Validate trigger(): contract checks, option merging, raise vs render.
- Validate rich rendering in plain, colorless and fancy forms.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from cliparse import (
    FaultCode,
    ParseException,
    UnrecognizedOptionError,
    MissingArgumentError,
    MissingOptionError,
    AlreadySelectedError,
    trigger,
    getdoc,
)


class TestFaultCode(TestCase):
    """Behavioral tests for fault codes."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.UNRECOGNIZED_OPTION, 11112)
        self.assertEqual(FaultCode.MISSING_ARGUMENT, 11117)
        self.assertEqual(FaultCode.MISSING_OPTION, 11125)
        self.assertEqual(FaultCode.ALREADY_SELECTED, 11126)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MISSING_OPTION.normalize(), "11125")

    def testNormalizeUsesHostCodes(self):
        main = __import__("__main__")
        with patch.object(main, "__codes__", {FaultCode.MISSING_OPTION: "E-MISSING"}, create=True):
            self.assertEqual(FaultCode.MISSING_OPTION.normalize(), "E-MISSING")
            self.assertEqual(FaultCode.MISSING_ARGUMENT.normalize(), "11117")

    def testGetdocDefaultsToNone(self):
        self.assertIsNone(getdoc(FaultCode.UNRECOGNIZED_OPTION))

    def testGetdocUsesHostDocs(self):
        main = __import__("__main__")
        with patch.object(main, "__docs__", {FaultCode.UNRECOGNIZED_OPTION: "see manual"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNRECOGNIZED_OPTION), "see manual")

    def testGetdocRejectsOtherTypes(self):
        with self.assertRaises(TypeError):
            getdoc(11112)


class TestTrigger(TestCase):
    """Behavioral tests for fault surfacing."""

    def setUp(self):
        self.stream = io.StringIO()
        self.patcher = patch("cliparse.faults.console", Console(file=self.stream, width=100, color_system=None))
        self.patcher.start()
        self.addCleanup(self.patcher.stop)

    def testHierarchy(self):
        for cls in (UnrecognizedOptionError, MissingArgumentError, MissingOptionError, AlreadySelectedError):
            self.assertTrue(issubclass(cls, ParseException))
            self.assertTrue(issubclass(cls, Exception))

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testTriggerRaisesMergedFault(self):
        fault = MissingArgumentError("no argument for option '-n'", code=FaultCode.MISSING_ARGUMENT, input="-n")
        with self.assertRaises(MissingArgumentError) as context:
            trigger(fault, shell=False, extra="context")
        raised = context.exception
        self.assertIsNot(raised, fault)
        self.assertEqual(raised.options["input"], "-n")
        self.assertEqual(raised.options["extra"], "context")
        self.assertNotIn("extra", fault.options)
        self.assertEqual(str(raised), "no argument for option '-n'")
        self.assertEqual(raised.code, FaultCode.MISSING_ARGUMENT)

    def testReplaceKeepsType(self):
        fault = AlreadySelectedError("conflict", input="-b")
        replaced = fault.__replace__(hint="keep one")
        self.assertIsInstance(replaced, AlreadySelectedError)
        self.assertEqual(replaced.options["hint"], "keep one")
        self.assertEqual(replaced.options["input"], "-b")

    def testReplaceRejectsPositionals(self):
        with self.assertRaises(AssertionError):
            ParseException("x").__replace__("y")

    def testOptionsAreReadOnly(self):
        fault = ParseException("x", input="-a")
        with self.assertRaises(TypeError):
            fault.options["input"] = "-b"

    def testShellModePrintsAndExits(self):
        fault = UnrecognizedOptionError(
            "unrecognized option '-z'",
            title="unrecognized option",
            code=FaultCode.UNRECOGNIZED_OPTION,
            hint="check the spelling",
        )
        with self.assertRaises(SystemExit) as context:
            trigger(fault, shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        output = self.stream.getvalue()
        self.assertIn("Unrecognized Option", output)
        self.assertIn("11112", output)
        self.assertIn("→ check the spelling", output)

    def testHostProgramName(self):
        main = __import__("__main__")
        fault = MissingOptionError("missing required option: -r", code=FaultCode.MISSING_OPTION)
        with patch.object(main, "__prog__", "mytool", create=True):
            with self.assertRaises(SystemExit):
                trigger(fault, shell=True, colorful=False)
        self.assertIn("[ mytool — 11125 | Parse Error ]", self.stream.getvalue())

    def testFancyRendering(self):
        fault = MissingOptionError(
            "missing required option: -r",
            title="missing required option",
            code=FaultCode.MISSING_OPTION,
            hint="provide -r",
        )
        with self.assertRaises(SystemExit):
            trigger(fault, shell=True, fancy=True, colorful=False)
        output = self.stream.getvalue()
        self.assertIn("Missing Required Option", output)
        self.assertIn("missing required option: -r", output)
        self.assertIn("╭", output)

    def testColorfulRenderingUsesHostStyles(self):
        main = __import__("__main__")
        fault = UnrecognizedOptionError("unrecognized option '-z'", code=FaultCode.UNRECOGNIZED_OPTION, colorful=True)
        with patch.object(main, "__styles__", {"code": "bold red"}, create=True):
            console = Console(file=io.StringIO(), width=100, color_system=None)
            console.print(fault)
        self.assertIn("unrecognized option '-z'", console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
