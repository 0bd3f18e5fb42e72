"""
Tests for schema faults and their rich rendering.
"""
import copy
import sys
import types
import unittest
from unittest import TestCase, mock

from rich.console import Console

from typeflag import *


def render(renderable):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


class TestFaults(TestCase):

    def setUp(self):
        self.fault = InvalidAliasError(
            "flag alias cannot be empty",
            code=FaultCode.INVALID_ALIAS,
            title="invalid alias",
            hint="use a single character or drop the alias",
        )

    def testHierarchy(self):
        self.assertTrue(issubclass(InvalidFlagNameError, ValueError))
        self.assertTrue(issubclass(FlagCollisionError, ValueError))
        self.assertTrue(issubclass(AliasCollisionError, ValueError))
        self.assertTrue(issubclass(MissingFlagTypeError, TypeError))
        self.assertTrue(issubclass(InvalidFlagTypeError, TypeError))
        self.assertIsInstance(self.fault, SchemaException)

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.fault.options["code"] = 0  # type: ignore[index]

    def testStr(self):
        self.assertEqual(str(self.fault), "flag alias cannot be empty")

    def testAttach(self):
        fault = attach(self.fault, "flagName")
        self.assertIsInstance(fault, InvalidAliasError)
        self.assertIsNot(fault, self.fault)
        self.assertEqual(fault.options["flag"], "flagName")
        self.assertEqual(fault.options["code"], FaultCode.INVALID_ALIAS)
        self.assertEqual(str(fault), "invalid flag 'flagName': flag alias cannot be empty")
        self.assertNotIn("flag", self.fault.options)

    def testAttachRejectsOtherExceptions(self):
        with self.assertRaises(TypeError):
            attach(ValueError("x"), "flagName")

    def testReplace(self):
        fault = copy.replace(self.fault, hint="other")
        self.assertEqual(fault.options["hint"], "other")
        self.assertEqual(fault.message, self.fault.message)

    def testNormalize(self):
        self.assertEqual(FaultCode.INVALID_ALIAS.normalize(), "21111")
        host = types.SimpleNamespace(__codes__={FaultCode.INVALID_ALIAS: "E-ALIAS"})
        with mock.patch.dict(sys.modules, {"__main__": host}):
            self.assertEqual(FaultCode.INVALID_ALIAS.normalize(), "E-ALIAS")

    def testRich(self):
        output = render(self.fault)
        self.assertIn("typeflag", output)
        self.assertIn("21111", output)
        self.assertIn("Invalid Alias", output)
        self.assertIn("flag alias cannot be empty", output)
        self.assertIn("use a single character or drop the alias", output)

    def testRichHostProgram(self):
        host = types.SimpleNamespace(__prog__="mytool")
        with mock.patch.dict(sys.modules, {"__main__": host}):
            output = render(copy.replace(self.fault, colorful=False, fancy=True))
        self.assertIn("mytool", output)

    def testRaisedFaultsRender(self):
        with self.assertRaises(FlagCollisionError) as context:
            type_flag({"flagA": str, "flag-a": str}, [])
        output = render(context.exception)
        self.assertIn(str(int(FaultCode.FLAG_COLLISION)), output)
        self.assertIn("invalid flag 'flag-a'", output)


if __name__ == '__main__':
    unittest.main()
