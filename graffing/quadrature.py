r"""@package graffing.quadrature

Numerical integration of expressions over finite intervals.

The quadrature rules defined here all sample the integrand at a fixed set of
nodes and compute a weighted sum of the results:

| Rule                    | Nodes                         | Error        |
|-------------------------|-------------------------------|--------------|
| Midpoint()              | \f$ (a+b)/2 \f$               | \f$ O(h^3) \f$ |
| Trapezoidal()           | \f$ a, b \f$                  | \f$ O(h^3) \f$ |
| CompositeMidpoint(n)    | centers of `n` subintervals   | \f$ O(n^{-2}) \f$ |
| CompositeTrapezoidal(n) | `n+1` equidistant points      | \f$ O(n^{-2}) \f$ |

Errors raised while sampling the integrand (e.g. errors.DomainError for a
logarithm of a negative number) are never skipped but propagate to the
caller.

@b Examples

```
    integrate(X**2, CompositeTrapezoidal(1000), 0, 1)  # ~ 1/3
    integrate(Sin(X), "composite_midpoint", 0, math.pi, n=100)
```
"""

import math

import numpy as np

from .config import Settings
from .exprs.evaluators import vectorized
from .exprs.errors import InvalidDomain
from .numutils import check_interval


__all__ = [
    "QuadratureRule",
    "Midpoint",
    "Trapezoidal",
    "CompositeMidpoint",
    "CompositeTrapezoidal",
    "get_rule",
    "integrate",
    "inner_product",
]


class QuadratureRule(object):
    r"""Base class for the quadrature rules.

    Child classes implement nodes_weights() returning the sample points and
    weights for a given interval.
    """

    ## Name under which the rule can be selected in integrate().
    name = None

    def __init__(self, n=1):
        if int(n) != n or n < 1:
            raise InvalidDomain("Number of subintervals must be a positive "
                                "integer, got %r." % (n,))
        ## Number of subintervals.
        self.n = int(n)

    def __repr__(self):
        return "%s(%d)" % (type(self).__name__, self.n)

    def __eq__(self, other):
        return type(self) is type(other) and self.n == other.n

    def __hash__(self):
        return hash((type(self).__name__, self.n))

    def nodes_weights(self, a, b):
        r"""Return the arrays of sample points and weights for `[a,b]`."""
        raise NotImplementedError

    def apply(self, values, weights):
        r"""Weighted sum of sampled values."""
        return math.fsum(np.asarray(weights) * np.asarray(values))


class Midpoint(QuadratureRule):
    r"""Midpoint rule \f$ (b-a) f\big(\frac{a+b}{2}\big) \f$."""
    name = "midpoint"

    def __init__(self):
        super(Midpoint, self).__init__(1)

    def __repr__(self):
        return "Midpoint()"

    def nodes_weights(self, a, b):
        return np.array([(a+b)/2.]), np.array([b-a])


class Trapezoidal(QuadratureRule):
    r"""Trapezoidal rule \f$ (b-a) \frac{f(a)+f(b)}{2} \f$."""
    name = "trapezoidal"

    def __init__(self):
        super(Trapezoidal, self).__init__(1)

    def __repr__(self):
        return "Trapezoidal()"

    def nodes_weights(self, a, b):
        return np.array([a, b], dtype=float), np.array([b-a, b-a]) / 2.


class CompositeMidpoint(QuadratureRule):
    r"""Midpoint rule applied on `n` equal subintervals."""
    name = "composite_midpoint"

    def nodes_weights(self, a, b):
        h = (b-a) / self.n
        xs = a + h * (np.arange(self.n) + 0.5)
        return xs, np.full(self.n, h)


class CompositeTrapezoidal(QuadratureRule):
    r"""Trapezoidal rule applied on `n` equal subintervals.

    The error is \f$ -\frac{(b-a) h^2}{12} f''(\xi) \f$ for some
    \f$ \xi \in [a,b] \f$ and \f$ h = (b-a)/n \f$, i.e. it decreases by a
    factor of four whenever `n` is doubled.
    """
    name = "composite_trapezoidal"

    def nodes_weights(self, a, b):
        h = (b-a) / self.n
        xs = np.linspace(a, b, self.n+1)
        ws = np.full(self.n+1, h)
        ws[0] = ws[-1] = h/2.
        return xs, ws


_RULES = dict((cls.name, cls) for cls in
              (Midpoint, Trapezoidal, CompositeMidpoint, CompositeTrapezoidal))


def get_rule(rule, n=None):
    r"""Return a quadrature rule object.

    @param rule
        A QuadratureRule instance or the name of a rule (``"midpoint"``,
        ``"trapezoidal"``, ``"composite_midpoint"`` or
        ``"composite_trapezoidal"``).
    @param n
        Number of subintervals for the composite rules given by name. Default
        is config.Settings.quadrature_subintervals. Ignored for rule objects.
    """
    if isinstance(rule, QuadratureRule):
        return rule
    try:
        cls = _RULES[rule]
    except (KeyError, TypeError):
        raise ValueError("Unknown quadrature rule: %r" % (rule,))
    if cls in (Midpoint, Trapezoidal):
        return cls()
    if n is None:
        n = Settings.quadrature_subintervals
    return cls(n)


def integrate(expr, rule, a, b, n=None, var=0, bindings=None):
    r"""Numerically integrate a function over `[a,b]`.

    @param expr
        Expression or callable to integrate.
    @param rule
        The QuadratureRule to use or its name (see get_rule()).
    @param a,b
        Finite interval boundaries, `a <= b`. For ``a == b``, the result is
        zero without evaluating `expr`.
    @param n
        Number of subintervals when `rule` is the name of a composite rule.
    @param var
        Index of the variable to integrate over (if `expr` is an expression).
        Default is `0`.
    @param bindings
        Values for all other variables of `expr`.

    @b Raises
        errors.InvalidDomain for `a > b`, non-finite boundaries or `n < 1`,
        and any errors.EvalError raised while sampling.
    """
    a, b = check_interval(a, b, error=InvalidDomain)
    rule = get_rule(rule, n)
    if a == b:
        return 0.0
    xs, ws = rule.nodes_weights(a, b)
    return rule.apply(vectorized(expr, var, bindings)(xs), ws)


def inner_product(f, g, a, b, n=None, var=0, bindings=None):
    r"""Compute the \f$ L^2 \f$ inner product \f$ \int_a^b f(x) g(x)\,dx \f$.

    The integral is computed with the composite trapezoidal rule on `n`
    subintervals (default is config.Settings.quadrature_subintervals). Both
    `f` and `g` may be expressions or callables. The remaining arguments have
    the same meaning as for integrate().
    """
    a, b = check_interval(a, b, error=InvalidDomain)
    rule = get_rule(CompositeTrapezoidal.name, n)
    if a == b:
        return 0.0
    xs, ws = rule.nodes_weights(a, b)
    fx = vectorized(f, var, bindings)(xs)
    gx = vectorized(g, var, bindings)(xs)
    return rule.apply(fx * gx, ws)
