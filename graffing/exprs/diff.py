r"""@package graffing.exprs.diff

Symbolic differentiation of expressions.

differentiate() applies the usual rules (sum, product, quotient and chain
rule) node by node and returns the raw result. Use derivative() to get
higher and simplified derivatives.
"""

import numbers

from .errors import InvalidIndex
from .simplify import simplify


__all__ = [
    "differentiate",
    "derivative",
    "gradient",
]


def differentiate(expr, var):
    r"""Return the partial derivative of `expr` w.r.t. \f$ x_{var} \f$.

    The result is not simplified and will in general contain many trivial
    sub-expressions like `0*x` or `1*x`. Variables not occurring in `expr`
    have a derivative of `0`.
    """
    if not isinstance(var, numbers.Integral) or var < 0:
        raise InvalidIndex("Invalid variable index: %r" % (var,))
    return expr._diff(var)


def derivative(expr, var=0, n=1):
    r"""Return the simplified n'th partial derivative w.r.t. \f$ x_{var} \f$.

    Args:
        expr: Expression to differentiate.
        var: Index of the variable. Default is `0`.
        n: Order of the derivative. `n=0` returns the simplified `expr`.
    """
    if n < 0:
        raise ValueError("Derivative order must be non-negative: %r" % n)
    expr = simplify(expr)
    for _ in range(n):
        expr = simplify(differentiate(expr, var))
    return expr


def gradient(expr, num_vars=None):
    r"""Return the list of simplified partial derivatives.

    Args:
        expr: Expression to differentiate.
        num_vars: Number of variables \f$ x_0, \ldots, x_{n-1} \f$ to
            differentiate by. By default, this is one more than the largest
            index of any free variable of `expr`.
    """
    if num_vars is None:
        num_vars = max(expr.free_variables(), default=-1) + 1
    return [derivative(expr, i) for i in range(num_vars)]

