#!/usr/bin/env python3

import unittest
import sys
import math

import sympy as sp

from testutils import DpkTestCase
from .basics import Variable, Constant, Add, Neg, Mul, Div
from .basics import Sin, Cos, Tan, Exp, Log, Pow, Polynomial, Sum, Prod
from .basics import X, Y, Z
from .errors import InvalidIndex
from .evaluators import evaluate
from .simplify import simplify
from .symbolic import to_sympy
from .diff import differentiate, derivative, gradient


class TestRules(DpkTestCase):
    def test_basic(self):
        self.assertExprEqual(differentiate(X, 0), Constant(1))
        self.assertExprEqual(differentiate(X, 1), Constant(0))
        self.assertExprEqual(differentiate(Constant(3), 0), Constant(0))
        self.assertExprEqual(derivative(Sin(Y), 0), Constant(0))
        self.assertExprEqual(derivative(Mul([Constant(3), X])), Constant(3))

    def test_invalid_variable(self):
        with self.assertRaises(InvalidIndex):
            differentiate(X, -1)
        with self.assertRaises(InvalidIndex):
            differentiate(X, 0.5)
        with self.assertRaises(ValueError):
            derivative(X, 0, -1)

    def test_functions(self):
        t = 0.7
        cases = [
            (Sin(X), math.cos(t)),
            (Cos(X), -math.sin(t)),
            (Tan(X), 1/math.cos(t)**2),
            (Exp(X), math.exp(t)),
            (Log(X), 1/t),
            (Pow(X, 3), 3*t**2),
            (Pow(X, -2), -2/t**3),
            (Div(Constant(1), X), -1/t**2),
            (Sin(Mul([Constant(2), X])), 2*math.cos(2*t)),
            (Log(Pow(X, 2)), 2/t),
            (Exp(Sin(X)), math.cos(t)*math.exp(math.sin(t))),
        ]
        for expr, value in cases:
            with self.subTest(expr=str(expr)):
                self.assertAlmostEqual(
                    evaluate(differentiate(expr, 0), {0: t}), value, places=12
                )

    def test_quotient_rule(self):
        expr = Div(Sin(X), Add([X, Constant(2)]))
        t = 0.3
        expected = (math.cos(t)*(t+2) - math.sin(t)) / (t+2)**2
        self.assertAlmostEqual(evaluate(differentiate(expr, 0), {0: t}), expected)
        self.assertAlmostEqual(evaluate(derivative(expr, 0), {0: t}), expected)

    def test_product_rule(self):
        self.assertExprEqual(
            derivative(Mul([Sin(X), X]), 0),
            Add([Mul([Cos(X), X]), Sin(X)])
        )

    def test_partial(self):
        expr = Mul([X, Pow(Y, 2), Sin(Z)])
        point = {0: 1.5, 1: 2.0, 2: 0.5}
        self.assertAlmostEqual(evaluate(derivative(expr, 1), point),
                               2*1.5*2.0*math.sin(0.5))
        self.assertAlmostEqual(evaluate(derivative(expr, 2), point),
                               1.5*4.0*math.cos(0.5))
        self.assertExprEqual(derivative(expr, 3), Constant(0))

    def test_higher_order(self):
        self.assertExprEqual(derivative(Pow(X, 3), 0, 0), Pow(X, 3))
        self.assertExprEqual(derivative(Sin(X), 0, 4), Sin(X))
        self.assertExprEqual(derivative(Pow(X, 3), 0, 4), Constant(0))
        self.assertExprEqual(derivative(Pow(X, 3), 0, 3), Constant(6))

    def test_gradient(self):
        grad = gradient(Mul([X, Y]))
        self.assertEqual(grad, [Y, X])
        self.assertEqual(gradient(Sin(Y), num_vars=3),
                         [Constant(0), Cos(Y), Constant(0)])
        self.assertEqual(gradient(Constant(1)), [])


class TestFolds(DpkTestCase):
    def test_sum(self):
        expr = Sum(1, 0, 2, Mul([X, Y]))
        self.assertAlmostEqual(evaluate(differentiate(expr, 0), {0: 5.0}), 3.0)
        self.assertExprEqual(differentiate(expr, 1), Constant(0))

    def test_prod(self):
        expr = Prod(1, 1, 3, Add([X, Y]))
        # d/dx (x+1)(x+2)(x+3) at x=0
        self.assertAlmostEqual(evaluate(differentiate(expr, 0), {0: 0.0}), 11.0)
        self.assertExprEqual(differentiate(Prod(1, 3, 2, X), 0), Constant(0))
        self.assertAlmostEqual(
            evaluate(differentiate(Prod(1, 2, 2, Mul([X, Y])), 0), {0: 1.0}),
            2.0
        )


class TestPolynomial(DpkTestCase):
    def test_matches_generic_rules(self):
        for degree in range(6):
            coeffs = [(-1)**k * (k+1.5) for k in range(degree+1)]
            poly = Polynomial(0, coeffs)
            generic = (Add([Mul([Constant(c), Pow(X, k)]) for k, c in enumerate(coeffs)])
                       if degree > 0 else Constant(coeffs[0]))
            dpoly = differentiate(poly, 0)
            dgeneric = differentiate(generic, 0)
            for t in (-1.3, 0.0, 0.4, 2.0):
                with self.subTest(degree=degree, t=t):
                    self.assertAlmostEqual(evaluate(dpoly, {0: t}),
                                           evaluate(dgeneric, {0: t}))

    def test_structure(self):
        self.assertExprEqual(differentiate(Polynomial(0, [1, 2, 3]), 0),
                             Polynomial(0, [2, 6]))
        self.assertExprEqual(derivative(Polynomial(0, [1, 2, 3]), 0, 2),
                             Constant(6))

    def test_parametric_coefficients(self):
        poly = Polynomial(0, [Y, Pow(Y, 2)])
        self.assertAlmostEqual(evaluate(derivative(poly, 1), {0: 2.0, 1: 3.0}),
                               1 + 2*3.0*2.0)
        self.assertAlmostEqual(evaluate(derivative(poly, 0), {0: 2.0, 1: 3.0}),
                               9.0)

    def test_coefficients_in_own_variable(self):
        poly = Polynomial(0, [X, X])
        self.assertAlmostEqual(evaluate(differentiate(poly, 0), {0: 2.0}), 5.0)


class TestLinearity(DpkTestCase):
    def test_linear_combination(self):
        f = Mul([Sin(X), Exp(Y)])
        g = Div(Pow(X, 2), Add([Y, Constant(3)]))
        a, b = 2.5, -0.75
        combined = Add([Mul([Constant(a), f]), Mul([Constant(b), g])])
        point = {0: 0.4, 1: 0.9}
        for var in (0, 1):
            with self.subTest(var=var):
                self.assertAlmostEqual(
                    evaluate(derivative(combined, var), point),
                    a*evaluate(derivative(f, var), point)
                    + b*evaluate(derivative(g, var), point)
                )


class TestAgainstSympy(DpkTestCase):
    def test_derivatives(self):
        exprs = [
            Mul([Sin(X), Cos(Mul([X, Y]))]),
            Div(Exp(X), Add([Pow(X, 2), Constant(1)])),
            Log(Add([Pow(Y, 2), Mul([X, Y]), Constant(2)])),
            Tan(Polynomial(0, [0.5, Y, -1])),
        ]
        point = {0: 0.3, 1: 0.8}
        subs = dict((sp.Symbol("x_%d" % i, real=True), v) for i, v in point.items())
        for expr in exprs:
            for var in (0, 1):
                with self.subTest(expr=str(expr), var=var):
                    ours = evaluate(derivative(expr, var), point)
                    sym = sp.Symbol("x_%d" % var, real=True)
                    theirs = float(sp.diff(to_sympy(expr), sym).subs(subs))
                    self.assertAlmostEqual(ours, theirs, places=10)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
