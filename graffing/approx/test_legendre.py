#!/usr/bin/env python3

import unittest
import sys
import math

import numpy as np
from numpy.polynomial import legendre as np_legendre

from testutils import DpkTestCase
from ..exprs.basics import Constant, Polynomial, Exp, Log, Sin, X, Y
from ..exprs.errors import DomainError, InvalidDomain
from ..exprs.evaluators import evaluate
from ..quadrature import inner_product
from .common import approximation_error
from .legendre import legendre_coeffs, legendre_basis, evaluate_Pn
from .legendre import fit_legendre


class TestLegendrePolynomials(DpkTestCase):
    def test_coeffs(self):
        self.assertListAlmostEqual(legendre_coeffs(0), [1.])
        self.assertListAlmostEqual(legendre_coeffs(2), [-.5, 0., 1.5])
        for n in range(12):
            with self.subTest(n=n):
                expected = np_legendre.leg2poly([0]*n + [1])
                self.assertListAlmostEqual(legendre_coeffs(n), expected,
                                           places=10)
        with self.assertRaises(ValueError):
            legendre_coeffs(-1)

    def test_cache_not_modified(self):
        c = legendre_coeffs(3)
        c[:] = 0.
        self.assertNotEqual(legendre_coeffs(3)[3], 0.)

    def test_evaluate_Pn(self):
        t = np.linspace(-1, 1, 7)
        Pn = evaluate_Pn(t, 6)
        self.assertEqual(Pn.shape, (6, 7))
        for k in range(6):
            with self.subTest(k=k):
                self.assertListAlmostEqual(
                    Pn[k], np_legendre.legval(t, [0]*k + [1]), places=12
                )
        self.assertEqual(evaluate_Pn(.5, 3).shape, (3,))

    def test_orthogonality(self):
        for j in range(4):
            for k in range(4):
                with self.subTest(j=j, k=k):
                    value = inner_product(legendre_basis(j), legendre_basis(k),
                                          -1, 1, n=2000)
                    expected = 2./(2*k+1) if j == k else 0.
                    self.assertAlmostEqual(value, expected, delta=1e-5)

    def test_basis(self):
        p = legendre_basis(3, var=1)
        self.assertIsInstance(p, Polynomial)
        self.assertEqual(p.var, 1)
        self.assertAlmostEqual(evaluate(p, {1: 1.0}), 1.0)


class TestFitLegendre(DpkTestCase):
    def test_constant(self):
        res = fit_legendre(Constant(5), 0)
        self.assertTrue(res.converged)
        self.assertIsNone(res.error)
        self.assertEqual(res.iterations, 1)
        self.assertIsInstance(res.expr, Constant)
        self.assertAlmostEqual(evaluate(res.expr, {0: 0.3}), 5.0)

    def test_reproduces_polynomials(self):
        target = Polynomial(0, [1, -2, 3])
        expr, error = fit_legendre(target, 2)
        self.assertIsNone(error)
        for t in (-1., -.2, .6, 1.):
            self.assertAlmostEqual(evaluate(expr, {0: t}),
                                   evaluate(target, {0: t}), delta=1e-4)

    def test_domain(self):
        res = fit_legendre(Exp(X), 5, domain=(0, 1))
        self.assertLess(approximation_error(Exp(X), res.expr, domain=(0, 1)), 5e-4)
        self.assertLess(res.loss, 1e-6)

    def test_other_variable(self):
        res = fit_legendre(Sin(Y), 7, domain=(-2, 2), var=1)
        self.assertEqual(res.expr.free_variables(), {1})
        self.assertAlmostEqual(evaluate(res.expr, {1: 1.5}), math.sin(1.5),
                               delta=1e-3)

    def test_callable(self):
        res = fit_legendre(math.exp, 6)
        self.assertAlmostEqual(evaluate(res.expr, {0: .5}), math.exp(.5),
                               delta=1e-3)

    def test_increasing_degree(self):
        errors = [approximation_error(Exp(X), fit_legendre(Exp(X), d).expr)
                  for d in (1, 2, 3)]
        self.assertLess(errors[1], errors[0])
        self.assertLess(errors[2], errors[1])

    def test_invalid(self):
        with self.assertRaises(InvalidDomain):
            fit_legendre(X, -1)
        with self.assertRaises(InvalidDomain):
            fit_legendre(X, 1.5)
        with self.assertRaises(InvalidDomain):
            fit_legendre(X, 2, domain=(1, 0))
        with self.assertRaises(InvalidDomain):
            fit_legendre(X, 2, domain=(1, 1))

    def test_target_errors_propagate(self):
        with self.assertRaises(DomainError):
            fit_legendre(Log(X), 2)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
