r"""@package testutils

Utilities to add more features to `unittest` classes.

This module provides a custom subclass of `unittest.TestCase`, namely
DpkTestCase, which obeys the global configuration settings in TestSettings
and adds assertions for comparing expressions and sampled values. The
settings can be configured by the script invoking the test run (see
`tests.py`).

The decorator slowtest leads to the test being skipped on normal runs. The
script starting the test must set `TestSettings.skipslow` to `False` for the
slow tests (e.g. long training runs) to be run.
"""

import sys
import functools
import logging
import unittest
import time

import numpy as np


__all__ = [
    "DpkTestCase",
    "TestSettings",
    "slowtest",
]


def slowtest(func):
    """Decorator for skipping a test if TestSettings.skipslow is true."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if TestSettings.skipslow:
            raise unittest.SkipTest("skipping slow tests")
        return func(*args, **kwargs)
    return wrapper


class DpkTestCase(unittest.TestCase):
    """Tweaked baseclass for unit tests.

    By deriving from this class, you:
        * Get timed individual tests (needs `verbosity=2`) if
          TestSettings.timing is true.
        * Can implement a hook (failureHook()) that is called after a test has
          failed (or errored), before tearDown() is called.
        * Get assertions for expressions, e.g. assertExprEqual() printing
          both trees on failure.
    """
    @classmethod
    def setUpClass(cls):
        if cls is not DpkTestCase:
            if cls.setUp is not DpkTestCase.setUp:
                setUp = cls.setUp
                @functools.wraps(setUp)
                def setUpWrapper(self, *args, **kwargs):
                    DpkTestCase.setUp(self)
                    return setUp(self, *args, **kwargs)
                cls.setUp = setUpWrapper
            if cls.tearDown is not DpkTestCase.tearDown:
                tearDown = cls.tearDown
                @functools.wraps(tearDown)
                def tearDownWrapper(self, *args, **kwargs):
                    DpkTestCase.tearDown(self)
                    return tearDown(self, *args, **kwargs)
                cls.tearDown = tearDownWrapper

    def run(self, result=None):
        self.__result = result
        self.__counts = self.__resultCounts()
        unittest.TestCase.run(self, result)

    def __resultCounts(self):
        r"""Numbers of errors, failures and skips recorded so far."""
        r = self.__result
        if r is None:
            return (0, 0, 0)
        return tuple(len(getattr(r, attr, ()))
                     for attr in ("errors", "failures", "skipped"))

    def __lastTestOK(self):
        r"""Return whether the current test neither failed nor errored."""
        errors, failures, _ = self.__resultCounts()
        return (errors, failures) == self.__counts[:2]

    def __shouldPrintTiming(self):
        r"""Return whether timing information should be printed."""
        if not TestSettings.timing or not self.__lastTestOK():
            return False
        if self.__resultCounts()[2] > self.__counts[2]:
            return False
        if self.__result is None:
            return True
        return (not getattr(self.__result, "dots", False)
                and getattr(self.__result, "showAll", False))

    def setUp(self):
        self.startTime = time.time()
        self.__tornDown = False

    def tearDown(self):
        if self.__tornDown: return
        self.__tornDown = True
        if not self.__lastTestOK():
            self.failureHook(self.__result)
        if self.__shouldPrintTiming():
            duration = time.time() - self.startTime
            print("(%.4f seconds) ... " % (duration), file=sys.stderr, end='')

    def failureHook(self, result):
        r"""Custom function called just after a fail/error occurred."""
        pass

    def assertIsType(self, obj, cls):
        r"""Assert that an object is exactly of a certain type."""
        self.assertIs(type(obj), cls)

    def assertExprEqual(self, expr, expected):
        r"""Assert structural equality of two expressions.

        On failure, both trees are shown in infix notation.
        """
        if expr != expected:
            raise self.failureException(
                "Expressions differ:\n  got:      %s\n  expected: %s"
                % (expr, expected)
            )

    def assertSameValues(self, expr1, expr2, points, var=0, bindings=None,
                         places=None, delta=None):
        r"""Assert that two expressions agree (numerically) at `points`."""
        from graffing.exprs.evaluators import Evaluator
        f1 = Evaluator(expr1, var=var, bindings=bindings)
        f2 = Evaluator(expr2, var=var, bindings=bindings)
        self.assertListAlmostEqual(
            [f1(x) for x in points], [f2(x) for x in points],
            places=places, delta=delta,
        )

    def assertListAlmostEqual(self, a, b, places=None, delta=None):
        r"""Assert that two iterables contain (almost) the same values."""
        if places is not None and delta is not None:
            raise TypeError("Cannot use delta and places at the same time")
        if places is None and delta is None:
            places = 7
        a, b = list(a), list(b)
        if len(a) != len(b):
            raise self.failureException("Lists have different lengths (%d != %d)" % (len(a), len(b)))
        diffs = np.abs(np.asarray(a, dtype=float) - np.asarray(b, dtype=float))
        if delta is not None:
            fails = np.flatnonzero(diffs > delta)
        else:
            fails = np.flatnonzero(np.round(diffs, places) != 0)
        if len(fails):
            msg = "%d elements differ.\n" % len(fails)
            maxN = 9
            if len(fails) <= maxN:
                msg += "Differing elements:\n"
            else:
                msg += "First few differing elements:\n"
            msg += "\n".join(["  [{i}] {a} != {b}    (difference: {d})".format(i=i, a=a[i], b=b[i], d=(b[i]-a[i]))
                              for i in fails[:maxN]])
            raise self.failureException(msg)


class TestSettings(object):
    """Global settings for tests."""
    ## Stop test run on first fail/error.
    failfast = False
    ## Whether output is buffered.\ Just information, cannot be used to toggle output buffering.
    buffering = False
    ## Whether the timing for each test case should be printed.
    timing = False
    ## Control whether tests marked as slowtest should be skipped.
    skipslow = True
    ## Level for the `graffing` loggers during test runs.
    loglevel = logging.WARNING
