#!/usr/bin/env python3

import unittest
import sys
import math

import sympy as sp

from testutils import DpkTestCase
from .basics import Variable, Constant, Add, Neg, Mul, Div
from .basics import Sin, Cos, Tan, Exp, Log, Pow, Polynomial, Sum, Prod
from .basics import X, Y, Z
from .errors import ConstructionError, NonIntegerExponent
from .evaluators import evaluate
from .symbolic import to_sympy, from_sympy, parse, latex


class TestToSympy(DpkTestCase):
    def test_symbols(self):
        self.assertEqual(to_sympy(Variable(4)), sp.Symbol("x_4", real=True))
        self.assertEqual(to_sympy(Constant(3)), sp.Integer(3))
        self.assertEqual(to_sympy(Constant(.5)), sp.Float(.5))

    def test_values(self):
        point = {0: 0.4, 1: -1.2, 2: 2.0}
        subs = dict((to_sympy(Variable(i)), v) for i, v in point.items())
        exprs = [
            Add([Mul([Sin(X), Y]), Neg(Div(Z, Exp(X)))]),
            Pow(Add([X, Cos(Y)]), -3),
            Log(Polynomial(2, [1, X, Pow(Y, 2)])),
            Tan(Mul([X, Z])),
        ]
        for expr in exprs:
            with self.subTest(expr=str(expr)):
                self.assertAlmostEqual(float(to_sympy(expr).subs(subs)),
                                       evaluate(expr, point))

    def test_folds(self):
        s = to_sympy(Sum(1, 1, 4, Pow(Y, 2)))
        self.assertIsInstance(s, sp.Sum)
        self.assertEqual(s.doit(), 30)
        p = to_sympy(Prod(1, 1, 4, Y))
        self.assertIsInstance(p, sp.Product)
        self.assertEqual(p.doit(), 24)


class TestFromSympy(DpkTestCase):
    def test_round_trip(self):
        exprs = [
            Mul([Sin(X), Add([Y, Constant(2)])]),
            Div(Exp(X), Pow(Y, 2)),
            Log(Add([X, Pow(Cos(Z), 2), Constant(3)])),
            Sum(1, 0, 3, Mul([X, Y])),
        ]
        point = {0: 0.3, 1: 1.7, 2: -0.4}
        for expr in exprs:
            with self.subTest(expr=str(expr)):
                back = from_sympy(to_sympy(expr))
                self.assertAlmostEqual(evaluate(back, point),
                                       evaluate(expr, point))

    def test_unsupported(self):
        x = sp.Symbol("x_0")
        with self.assertRaises(NonIntegerExponent):
            from_sympy(sp.sqrt(x))
        with self.assertRaises(ConstructionError):
            from_sympy(sp.gamma(x))
        with self.assertRaises(ConstructionError):
            from_sympy(sp.I)
        with self.assertRaises(ConstructionError):
            from_sympy(sp.Symbol("w"))
        with self.assertRaises(ConstructionError):
            from_sympy(sp.oo)


class TestParse(DpkTestCase):
    def test_formulas(self):
        expr = parse("x^2 + 2*x*y")
        self.assertAlmostEqual(evaluate(expr, {0: 3, 1: 0.5}), 12.0)
        expr = parse("sin(x_0) * exp(-x_1)")
        self.assertAlmostEqual(evaluate(expr, {0: 0.5, 1: 1.0}),
                               math.sin(0.5)*math.exp(-1.0))
        self.assertEqual(parse("z").free_variables(), {2})
        self.assertExprEqual(parse("x"), X)
        self.assertExprEqual(parse("2.5"), Constant(2.5))

    def test_division(self):
        expr = parse("1/(x - 1)")
        self.assertAlmostEqual(evaluate(expr, {0: 3.0}), 0.5)

    def test_errors(self):
        for text in ("sin(", "x**0.5", "sqrt(x)", "gamma(x)", "x + w"):
            with self.subTest(text=text):
                with self.assertRaises(ConstructionError):
                    parse(text)


class TestLatex(DpkTestCase):
    def test_latex(self):
        self.assertIn(r"\sin", latex(Sin(X)))
        self.assertIn("x_{0}", latex(Pow(X, 2)))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
