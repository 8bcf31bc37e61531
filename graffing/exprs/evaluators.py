r"""@package graffing.exprs.evaluators

Numerical evaluation of expressions.

The functions evaluate() and evaluate_array() compute the value of an
expression for a *binding* of variable indices to numbers (or NumPy arrays).
Failures are reported via the errors.EvalError subclasses; no result is ever
silently replaced by `nan` or `inf`.

The Evaluator class offers a callable view of an expression along one axis,
which is what plotting code usually wants:

~~~.py
f = (Sin(X) * Y).evaluator(var=0, bindings={1: 2.0})
f(0.5)                       # 2 sin(0.5)
f.diff(0.5)                  # 2 cos(0.5)
xs, ys = f.sample(0, 1, 100)
~~~
"""

from collections.abc import Mapping

import numpy as np

from .numexpr import Expression
from .errors import InvalidIndex, DomainError


__all__ = [
    "evaluate",
    "evaluate_array",
    "Evaluator",
    "vectorized",
]


def _as_values(bindings, converter=float):
    r"""Normalize bindings to a dictionary mapping indices to values.

    `bindings` may be a mapping or a sequence, in which case the element at
    position `i` is bound to \f$ x_i \f$.
    """
    if bindings is None:
        return dict()
    if not isinstance(bindings, Mapping):
        bindings = dict(enumerate(bindings))
    values = dict()
    for k, v in bindings.items():
        if not isinstance(k, (int, np.integer)) or k < 0:
            raise InvalidIndex("Invalid variable index in bindings: %r" % (k,))
        values[int(k)] = converter(v)
    return values


def evaluate(expr, bindings):
    r"""Evaluate an expression at a point.

    Args:
        expr: The expression to evaluate.
        bindings: Mapping from variable index to value for every variable
            referenced in `expr`, or a sequence of values for
            \f$ x_0, x_1, \ldots \f$.

    Returns:
        The (finite) value as `float`.

    Raises:
        errors.UndefinedVariable: if a referenced variable is not bound.
        errors.DivisionByZero: if a denominator evaluates to zero.
        errors.DomainError: for a logarithm of a non-positive value or a
            non-finite (overflowing) intermediate result.
    """
    values = _as_values(bindings)
    with np.errstate(all='ignore'):
        return float(expr._evaluate(values))


def evaluate_array(expr, bindings):
    r"""Evaluate an expression for arrays of values at once.

    The bound values are broadcast against each other (as usual in NumPy) and
    the result has the broadcast shape, even if the expression is constant.
    If evaluation fails for any of the elements, the respective
    errors.EvalError is raised for the whole call.
    """
    values = _as_values(bindings, converter=lambda v: np.asarray(v, dtype=float))
    shape = np.broadcast_shapes(*[v.shape for v in values.values()])
    with np.errstate(all='ignore'):
        result = expr._evaluate(values)
    return np.array(np.broadcast_to(result, shape), dtype=float)


class Evaluator(object):
    r"""Callable evaluating an expression as function of one variable.

    All variables other than the chosen axis `var` are fixed to the values
    given in `bindings`. The evaluator keeps no state besides the expression
    and these fixed values, so it can be shared freely.
    """
    def __init__(self, expr, var=0, bindings=None):
        r"""Create an evaluator.

        @param expr
            The expression to evaluate.
        @param var
            Index of the variable used as argument of the evaluator.
        @param bindings
            Optional fixed values of the remaining variables.
        """
        ## The expression this evaluator evaluates.
        self.expr = expr
        ## Index of the variable acting as argument.
        self.var = var
        self._bindings = _as_values(bindings)

    @property
    def bindings(self):
        r"""Copy of the fixed variable values."""
        return dict(self._bindings)

    def __call__(self, x):
        r"""Evaluate the expression at a point x."""
        values = dict(self._bindings)
        values[self.var] = x
        return evaluate(self.expr, values)

    def array(self, xs):
        r"""Evaluate the expression at all points in `xs` (vectorized)."""
        values = dict(self._bindings)
        values[self.var] = xs
        return evaluate_array(self.expr, values)

    def function(self, n=0):
        r"""Return an evaluator for the n'th derivative along `var`."""
        if n == 0:
            return self
        from .diff import derivative
        return Evaluator(derivative(self.expr, self.var, n), var=self.var,
                         bindings=self._bindings)

    def diff(self, x, n=1):
        r"""Evaluate the n'th derivative of the expression at a point x."""
        return self.function(n)(x)

    def sample(self, a, b, steps):
        r"""Sample the function on `steps+1` equidistant points in `[a,b]`.

        Returns:
            A pair of arrays `(xs, ys)`.
        """
        xs = np.linspace(a, b, steps+1)
        return xs, self.array(xs)


def vectorized(f, var=0, bindings=None):
    r"""Return a function evaluating `f` at an array of points.

    `f` may be an expression (evaluated along `var` with the remaining
    variables fixed to `bindings`) or a plain callable taking a single float,
    which is then called once per point. In both cases, non-finite results
    raise errors.DomainError.
    """
    if isinstance(f, Expression):
        return Evaluator(f, var=var, bindings=bindings).array
    if not callable(f):
        raise TypeError("Expected an expression or a callable, got %s."
                        % type(f).__name__)
    def _sample(xs):
        ys = np.array([float(f(x)) for x in np.asarray(xs, dtype=float)])
        if not np.all(np.isfinite(ys)):
            raise DomainError("Function evaluated to a non-finite value.")
        return ys
    return _sample
