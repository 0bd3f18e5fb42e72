"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel: singleton identity, falsy semantics, copying, pickling
  and finality.
- coalesce() preserving legitimate falsy values.
- rename() in both its function and decorator forms.
- mirror() exposing frozen views of private containers.
- camelize()/kebabize() flag-name transliteration.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from typeflag.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), UnsetType())
        self.assertIs(Unset, UnsetType())

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testFalsely(self) -> None:
        """
        The sentinel is falsy but not equal to other falsy values.
        """
        self.assertFalse(bool(Unset))
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, Unset)

    def testUnion(self) -> None:
        self.assertEqual(str | UnsetType, UnsetType | str)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self) -> None:
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def function(): ...
        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self) -> None:
        @rename("renamed")
        def function(): ...
        self.assertEqual(function.__name__, "renamed")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "renamed")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename(len, "renamed")
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):

    def testFrozenViews(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")
            names = mirror("names")
            value = mirror("value")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._names = {"x"}
                self._value = "text"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertEqual(holder.names, frozenset({"x"}))
        self.assertEqual(holder.value, "text")
        with self.assertRaises(TypeError):
            holder.table["b"] = 2  # type: ignore[index]
        with self.assertRaises(AttributeError):
            holder.items = ()  # type: ignore[misc]

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class SpellingTest(TestCase):

    def testCamelize(self) -> None:
        self.assertEqual(camelize("some-string"), "someString")
        self.assertEqual(camelize("a-b-c"), "aBC")
        self.assertEqual(camelize("plain"), "plain")

    def testKebabize(self) -> None:
        self.assertEqual(kebabize("someString"), "some-string")
        self.assertEqual(kebabize("flagA"), "flag-a")
        self.assertEqual(kebabize("plain"), "plain")

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            camelize(1)
        with self.assertRaises(TypeError):
            kebabize(None)


if __name__ == '__main__':
    unittest.main()
