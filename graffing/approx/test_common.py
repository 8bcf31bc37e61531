#!/usr/bin/env python3

import unittest
import sys
import math

import numpy as np

from testutils import DpkTestCase
from ..exprs.basics import Variable, Constant, Polynomial, Sin, Pow, X, Y
from ..exprs.errors import InvalidDomain, NonConvergence, ApproxError
from ..exprs.evaluators import evaluate
from .common import FitResult, DomainMap, compose_affine, polynomial_expr
from .common import grid_loss, check_fit_params, approximation_error


class TestDomainMap(DpkTestCase):
    def test_identity(self):
        dmap = DomainMap((-1, 1))
        self.assertTrue(dmap.is_identity)
        f = Sin(X)
        self.assertIs(dmap.pull_back(f), f)
        self.assertExprEqual(dmap.reference_expr(2), Variable(2))

    def test_pull_back(self):
        dmap = DomainMap((0, 2))
        self.assertFalse(dmap.is_identity)
        f = dmap.pull_back(Pow(X, 2))
        for t in (-1., 0., .5, 1.):
            self.assertAlmostEqual(evaluate(f, {0: t}), (t+1)**2)
        g = dmap.pull_back(lambda x: x**2)
        self.assertAlmostEqual(g(.5), 2.25)
        f = DomainMap((2, 6)).pull_back(Sin(Y), var=1)
        self.assertEqual(f.free_variables(), {1})
        self.assertAlmostEqual(evaluate(f, {1: 0.}), math.sin(4.))

    def test_reference_expr(self):
        dmap = DomainMap((0, 2))
        self.assertEqual(dmap.inverse_coeffs(), (-1., 1.))
        t = dmap.reference_expr()
        self.assertAlmostEqual(evaluate(t, {0: 0.}), -1.)
        self.assertAlmostEqual(evaluate(t, {0: 2.}), 1.)

    def test_invalid(self):
        for domain in [(1, 1), (2, 1), (0, np.inf), (np.nan, 1)]:
            with self.subTest(domain=domain):
                with self.assertRaises(InvalidDomain):
                    DomainMap(domain)
        self.assertTrue(issubclass(InvalidDomain, ValueError))


class TestPolynomials(DpkTestCase):
    def test_compose_affine(self):
        # (2x+1)^2 = 1 + 4x + 4x^2
        self.assertListAlmostEqual(compose_affine([0, 0, 1], 2., 1.), [1, 4, 4])
        self.assertListAlmostEqual(compose_affine([3, 1], .5, -1.), [2, .5])

    def test_polynomial_expr(self):
        expr = polynomial_expr([1., 2.], domain_map=DomainMap((0, 2)))
        self.assertExprEqual(expr, Polynomial(0, [-1., 2.]))
        self.assertExprEqual(polynomial_expr([3., 0.]), Constant(3.))
        self.assertExprEqual(polynomial_expr([0., 1.], var=1), Polynomial(1, [0., 1.]))


class TestFitResult(DpkTestCase):
    def test_converged(self):
        res = FitResult(Constant(1), 0.5, 10)
        self.assertIsNone(res.error)
        self.assertEqual(res.history, [])
        expr, error = res
        self.assertIs(expr, res.expr)
        self.assertIsNone(error)

    def test_not_converged(self):
        res = FitResult(Constant(1), 0.5, 10, converged=False, history=[1., .5])
        self.assertIsInstance(res.error, NonConvergence)
        self.assertIsInstance(res.error, ApproxError)
        self.assertIs(res.error.result, res)
        self.assertIs(res.error.expr, res.expr)
        self.assertIn("10 iterations", str(res.error))
        self.assertIn("converged=False", repr(res))


class TestHelpers(DpkTestCase):
    def test_grid_loss(self):
        ys = np.array([1., 2.])
        self.assertAlmostEqual(grid_loss(lambda a: a, ys, np.array([1., 4.])), 2.)
        self.assertEqual(grid_loss(lambda a: a, ys, np.array([1e300, 0.])), np.inf)

    def test_check_fit_params(self):
        check_fit_params(.1, 10, 0., 5)
        with self.assertRaises(InvalidDomain):
            check_fit_params(.1, 10, 0., 0)
        with self.assertRaises(ValueError):
            check_fit_params(0., 10, 0., 5)
        with self.assertRaises(ValueError):
            check_fit_params(.1, 0, 0., 5)
        with self.assertRaises(ValueError):
            check_fit_params(.1, 10, -1., 5)

    def test_approximation_error(self):
        delta = approximation_error(Sin(X), X, domain=(-.5, .5))
        self.assertAlmostEqual(delta, .5 - math.sin(.5))
        delta = approximation_error(math.sin, Polynomial(0, [0., 1.]), domain=(0, 1))
        self.assertAlmostEqual(delta, 1 - math.sin(1))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
