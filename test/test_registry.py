# python
"""
Registry module behavioral tests.

Scope
- Validate registration (fluent chaining, both name indices, required entries).
- Validate group registration (member required flag cleared, group membership).
- Validate lookups (stripped names, key index, long index, prefix matching).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from optionaut import Option, OptionGroup, Registry


class TestRegistration(TestCase):
    """Behavioral tests for Registry.register and Registry.register_group."""

    def testRegisterIsFluent(self):
        registry = Registry()
        self.assertIs(registry.register(Option("-v")), registry)

    def testRegisterRejectsNonOptions(self):
        with self.assertRaises(TypeError):
            Registry().register("-v")

    def testRegisterKeepsInsertionOrder(self):
        registry = Registry().register(Option("-b"), Option("--alpha"), Option("-c"))
        self.assertEqual(list(registry), ["b", "alpha", "c"])
        self.assertEqual(len(registry), 3)
        self.assertEqual([option.key for option in registry.options], ["b", "alpha", "c"])

    def testRequiredEntriesCollapseToLastRegistration(self):
        registry = Registry().register(
            Option("-a", required=True),
            Option("-b", required=True),
            Option("-a", required=True),
        )
        self.assertEqual(registry.required, ("b", "a"))

    def testRequiredSnapshotIsImmutable(self):
        registry = Registry().register(Option("-a", required=True))
        self.assertIsInstance(registry.required, tuple)

    def testRegisterGroupClearsMemberRequiredFlag(self):
        fast = Option("-f", required=True)
        registry = Registry().register_group(OptionGroup(fast, Option("-m")))
        self.assertFalse(fast.required)
        self.assertEqual(registry.required, ())

    def testRegisterGroupDropsEarlierRequiredEntry(self):
        fast = Option("-f", required=True)
        registry = Registry().register(fast).register_group(OptionGroup(fast))
        self.assertNotIn("f", registry.required)

    def testRequiredGroupIsARequiredEntry(self):
        group = OptionGroup(Option("-f"), Option("-m"), required=True)
        registry = Registry().register(Option("-o", required=True)).register_group(group)
        self.assertEqual(registry.required, ("o", group))

    def testRegisterGroupRecordsMembership(self):
        group = OptionGroup(Option("-f", "--fast"), Option("--memory"))
        registry = Registry().register(Option("-v")).register_group(group)
        self.assertIs(registry.group_of("f"), group)
        self.assertIs(registry.group_of("--memory"), group)
        self.assertIs(registry.group_of(registry["f"]), group)
        self.assertIsNone(registry.group_of("v"))

    def testGroupsAreDistinct(self):
        first = OptionGroup(Option("-a"), Option("-b"))
        second = OptionGroup(Option("-c"))
        registry = Registry().register_group(first).register_group(second)
        self.assertEqual(registry.groups, (first, second))

    def testRegisterGroupRejectsNonGroups(self):
        with self.assertRaises(TypeError):
            Registry().register_group(Option("-a"))


class TestLookup(TestCase):
    """Behavioral tests for Registry lookups."""

    def setUp(self):
        self.verbose = Option("-v", "--verbose")
        self.output = Option("--output", nargs=1)
        self.debug = Option("--debug")
        self.debugAll = Option("--debug-all")
        self.registry = Registry().register(self.verbose, self.output, self.debug, self.debugAll)

    def testGetItemAcceptsEverySpelling(self):
        for name in ("-v", "v", "--verbose", "verbose"):
            with self.subTest(name=name):
                self.assertIs(self.registry[name], self.verbose)
        self.assertIs(self.registry["--output"], self.output)

    def testGetItemMissing(self):
        with self.assertRaises(KeyError):
            self.registry["--missing"]
        self.assertIsNone(self.registry.get("x"))
        self.assertNotIn("x", self.registry)
        self.assertIn("--verbose", self.registry)

    def testHasShortUsesKeyIndex(self):
        self.assertTrue(self.registry.has_short("-v"))
        self.assertTrue(self.registry.has_short("output"))
        self.assertFalse(self.registry.has_short("verbose"))

    def testHasLong(self):
        self.assertTrue(self.registry.has_long("--verbose"))
        self.assertTrue(self.registry.has_long("output"))
        self.assertFalse(self.registry.has_long("v"))

    def testMatchingPrefix(self):
        self.assertEqual(self.registry.matching("--ver"), ("verbose",))
        self.assertEqual(self.registry.matching("--deb"), ("debug", "debug-all"))
        self.assertEqual(self.registry.matching("--nothing"), ())

    def testMatchingExactWinsAlone(self):
        self.assertEqual(self.registry.matching("--debug"), ("debug",))

    def testMatchingEmptyNameMatchesNothing(self):
        self.assertEqual(self.registry.matching("--"), ())
        self.assertEqual(self.registry.matching(""), ())

    def testLongLookupBypassesKeyIndex(self):
        short = Option("-x", "--y")
        clash = Option("-y")
        registry = Registry().register(short, clash)
        self.assertIs(registry.long("--y"), short)
        self.assertIs(registry["y"], clash)
        with self.assertRaises(KeyError):
            registry.long("x")

    def testRepr(self):
        self.assertTrue(repr(self.registry).startswith("registry("))


if __name__ == "__main__":
    unittest.main()
