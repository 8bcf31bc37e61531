#!/usr/bin/env python3

import unittest
import sys
import math

import numpy as np
from scipy import integrate as sp_integrate

from testutils import DpkTestCase
from .config import Settings
from .exprs.basics import Constant, Add, Mul, Div, Sin, Cos, Exp, Log, Pow
from .exprs.basics import Polynomial
from .exprs.basics import X, Y
from .exprs.errors import DomainError, DivisionByZero, InvalidDomain
from .quadrature import Midpoint, Trapezoidal, CompositeMidpoint
from .quadrature import CompositeTrapezoidal, get_rule, integrate
from .quadrature import inner_product


class TestRules(DpkTestCase):
    def test_nodes_weights(self):
        xs, ws = Midpoint().nodes_weights(0., 2.)
        self.assertListAlmostEqual(xs, [1.])
        self.assertListAlmostEqual(ws, [2.])
        xs, ws = Trapezoidal().nodes_weights(0., 2.)
        self.assertListAlmostEqual(xs, [0., 2.])
        self.assertListAlmostEqual(ws, [1., 1.])
        xs, ws = CompositeMidpoint(4).nodes_weights(0., 1.)
        self.assertListAlmostEqual(xs, [.125, .375, .625, .875])
        self.assertAlmostEqual(sum(ws), 1.0)
        xs, ws = CompositeTrapezoidal(4).nodes_weights(0., 1.)
        self.assertEqual(len(xs), 5)
        self.assertListAlmostEqual(ws, [.125, .25, .25, .25, .125])

    def test_invalid_subintervals(self):
        for n in (0, -3, 2.5):
            with self.subTest(n=n):
                with self.assertRaises(InvalidDomain):
                    CompositeTrapezoidal(n)

    def test_get_rule(self):
        self.assertEqual(get_rule("midpoint"), Midpoint())
        self.assertEqual(get_rule("composite_trapezoidal", 10),
                         CompositeTrapezoidal(10))
        self.assertEqual(get_rule("composite_midpoint").n,
                         Settings.quadrature_subintervals)
        rule = CompositeMidpoint(7)
        self.assertIs(get_rule(rule, 3), rule)
        with self.assertRaises(ValueError):
            get_rule("simpson")
        with self.assertRaises(ValueError):
            get_rule(None)

    def test_equality(self):
        self.assertEqual(CompositeMidpoint(3), CompositeMidpoint(3))
        self.assertNotEqual(CompositeMidpoint(3), CompositeTrapezoidal(3))
        self.assertNotEqual(CompositeMidpoint(3), CompositeMidpoint(4))
        self.assertEqual(len({Midpoint(), Midpoint(), Trapezoidal()}), 2)
        self.assertEqual(repr(CompositeTrapezoidal(10)), "CompositeTrapezoidal(10)")


class TestIntegrate(DpkTestCase):
    def test_square(self):
        value = integrate(Pow(X, 2), CompositeTrapezoidal(1000), 0, 1)
        self.assertAlmostEqual(value, 1/3., delta=1e-4)
        value = integrate(Pow(X, 2), "composite_midpoint", 0, 1, n=1000)
        self.assertAlmostEqual(value, 1/3., delta=1e-4)
        value = integrate(Polynomial(0, [0, 0, 1]), CompositeTrapezoidal(1000), 0, 1)
        self.assertAlmostEqual(value, 1/3., delta=1e-4)

    def test_exact_for_linear(self):
        f = Add([Mul([Constant(2), X]), Constant(1)])
        for rule in (Midpoint(), Trapezoidal(), CompositeMidpoint(3),
                     CompositeTrapezoidal(3)):
            with self.subTest(rule=rule):
                self.assertAlmostEqual(integrate(f, rule, 0, 2), 6.0)

    def test_convergence_order(self):
        # error of the composite trapezoidal rule for x^2 on [0,1] is 1/(6n^2)
        f = Polynomial(0, [0, 0, 1])
        for n in (10, 20, 40):
            with self.subTest(n=n):
                error = integrate(f, CompositeTrapezoidal(n), 0, 1) - 1/3.
                self.assertAlmostEqual(error, 1/(6.*n**2), places=12)
        f = Exp(X)
        exact = math.e - 1
        errors = [abs(integrate(f, CompositeTrapezoidal(n), 0, 1) - exact)
                  for n in (10, 20, 40)]
        self.assertAlmostEqual(errors[0]/errors[1], 4.0, delta=0.05)
        self.assertAlmostEqual(errors[1]/errors[2], 4.0, delta=0.05)
        errors = [abs(integrate(f, CompositeMidpoint(n), 0, 1) - exact)
                  for n in (10, 20)]
        self.assertAlmostEqual(errors[0]/errors[1], 4.0, delta=0.05)

    def test_against_scipy(self):
        f = Exp(Sin(X))
        expected, _ = sp_integrate.quad(lambda x: math.exp(math.sin(x)), 0, 2)
        value = integrate(f, CompositeTrapezoidal(2000), 0, 2)
        self.assertAlmostEqual(value, expected, delta=1e-5)

    def test_callable(self):
        value = integrate(math.sin, CompositeTrapezoidal(500), 0, math.pi)
        self.assertAlmostEqual(value, 2.0, delta=1e-4)

    def test_other_variables(self):
        f = Mul([X, Y])
        self.assertAlmostEqual(
            integrate(f, CompositeTrapezoidal(10), 0, 1, bindings={1: 2.0}), 1.0
        )
        self.assertAlmostEqual(
            integrate(f, Trapezoidal(), 0, 1, var=1, bindings={0: 3.0}), 1.5
        )

    def test_empty_interval(self):
        # integrand is not evaluated at all
        self.assertEqual(integrate(Log(X), "trapezoidal", -1, -1), 0.0)

    def test_invalid_domain(self):
        with self.assertRaises(InvalidDomain):
            integrate(X, Midpoint(), 1, 0)
        with self.assertRaises(InvalidDomain):
            integrate(X, Midpoint(), 0, np.inf)
        with self.assertRaises(InvalidDomain):
            integrate(X, "composite_trapezoidal", 0, 1, n=0)

    def test_errors_propagate(self):
        with self.assertRaises(DomainError):
            integrate(Log(X), CompositeMidpoint(10), -1, 1)
        with self.assertRaises(DivisionByZero):
            integrate(Div(Constant(1), X), Trapezoidal(), 0, 1)


class TestInnerProduct(DpkTestCase):
    def test_values(self):
        self.assertAlmostEqual(inner_product(X, X, 0, 1, n=1000), 1/3., delta=1e-4)
        self.assertAlmostEqual(inner_product(Sin(X), Cos(X), -math.pi, math.pi),
                               0.0)
        self.assertAlmostEqual(
            inner_product(Sin(X), math.sin, -math.pi, math.pi, n=1000),
            math.pi, delta=1e-6
        )
        self.assertEqual(inner_product(Log(X), X, 0, 0), 0.0)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
