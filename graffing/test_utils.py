#!/usr/bin/env python3

import unittest
import sys
import logging

from testutils import DpkTestCase
from .utils import lmap, isiterable, timethis


class TestUtils(DpkTestCase):
    def test_lmap(self):
        self.assertEqual(lmap(abs, [-1, 2]), [1, 2])
        self.assertEqual(lmap(lambda a, b: a+b, [1, 2], [3, 4]), [4, 6])

    def test_isiterable(self):
        self.assertTrue(isiterable([]))
        self.assertTrue(isiterable("abc"))
        self.assertFalse(isiterable(1))

    def test_timethis(self):
        logger = logging.getLogger("graffing.test")
        with self.assertLogs(logger, level="INFO") as cm:
            with timethis("start", "done in {}", logger=logger,
                          level=logging.INFO):
                pass
        self.assertEqual(len(cm.output), 2)
        self.assertIn("start", cm.output[0])
        self.assertIn("done in 0:00:00", cm.output[1])


class _MinimalResult(object):
    r"""Result object without the lists kept by `unittest.TestResult`."""
    def __init__(self):
        self.outcomes = []

    def startTest(self, test):
        pass

    def stopTest(self, test):
        pass

    def addDuration(self, test, elapsed):
        pass

    def addSuccess(self, test):
        self.outcomes.append("success")

    def addError(self, test, err):
        self.outcomes.append("error")

    def addFailure(self, test, err):
        self.outcomes.append("failure")


class TestDpkTestCase(DpkTestCase):
    def test_result_without_counters(self):
        class Inner(DpkTestCase):
            def test_pass(self):
                self.assertListAlmostEqual([1.0, 2.0], [1.0, 2.0])
            def test_fail(self):
                self.assertEqual(1, 2)
        result = _MinimalResult()
        Inner("test_pass").run(result)
        Inner("test_fail").run(result)
        self.assertEqual(result.outcomes, ["success", "failure"])


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
