r"""@package graffing.approx.common

Helpers shared by the different approximation methods.

All methods work on the reference interval \f$ [-1,1] \f$ internally. A
target defined on a general domain \f$ [a,b] \f$ is pulled back using the
affine map
\f[
    x(t) = \frac{b-a}{2} t + \frac{a+b}{2},
\f]
and the resulting approximant is expressed in \f$ x \f$ again by composing it
with the inverse map.
"""

import logging

import numpy as np

from ..exprs.numexpr import Expression
from ..exprs.basics import Variable, Polynomial, substitute
from ..exprs.errors import InvalidDomain, NonConvergence
from ..exprs.evaluators import vectorized
from ..exprs.simplify import simplify
from ..numutils import binomial_coeffs, check_interval, inf_norm1d


__all__ = [
    "FitResult",
    "DomainMap",
    "compose_affine",
    "polynomial_expr",
    "grid_loss",
    "check_fit_params",
    "approximation_error",
]


logger = logging.getLogger(__name__)


class FitResult(object):
    r"""Outcome of a fit, i.e. the approximation and its status.

    A fit that did not converge within its iteration budget still carries
    the best iterate found in `expr`, while `converged` is `False` and
    `error` holds the corresponding errors.NonConvergence.
    """

    def __init__(self, expr, loss, iterations, converged=True, history=None):
        ## The approximating expression.
        self.expr = expr
        ## Mean squared error of `expr` on the evaluation grid.
        self.loss = loss
        ## Number of iterations performed.
        self.iterations = iterations
        ## Whether the convergence criterion was met.
        self.converged = converged
        ## Loss on the evaluation grid after each iteration (starting with the
        ## initial guess). Empty for non-iterative methods.
        self.history = list(history or [])
        ## errors.NonConvergence for unconverged fits, `None` otherwise.
        self.error = None
        if not converged:
            self.error = NonConvergence(
                "No convergence after %d iterations (best loss %g)."
                % (iterations, loss),
                result=self,
            )

    def __repr__(self):
        return ("<FitResult(loss=%g, iterations=%d, converged=%s, expr=%s)>"
                % (self.loss, self.iterations, self.converged, self.expr))

    def __iter__(self):
        r"""Allow unpacking as ``expr, error = fit(...)``."""
        return iter((self.expr, self.error))


class DomainMap(object):
    r"""Affine map between a domain \f$ [a,b] \f$ and \f$ [-1,1] \f$."""

    def __init__(self, domain):
        r"""Create the map for a finite, non-empty `domain`.

        @b Raises
            errors.InvalidDomain if ``a >= b`` or a boundary is not finite.
        """
        a, b = check_interval(*domain, strict=True, error=InvalidDomain)
        ## The domain ``(a, b)`` as floats.
        self.domain = (a, b)
        self._scale = (b-a) / 2.
        self._shift = (a+b) / 2.

    @property
    def is_identity(self):
        return self.domain == (-1.0, 1.0)

    def pull_back(self, target, var=0):
        r"""Return `target` as function of the reference variable `t`.

        An expression (in `x_var`) is returned as expression in `t = x_var`
        by substituting \f$ x(t) \f$. A callable is wrapped accordingly.
        """
        if self.is_identity:
            return target
        if isinstance(target, Expression):
            x_of_t = Polynomial(var, (self._shift, self._scale))
            return substitute(target, {var: x_of_t})
        return lambda t: target(self._shift + self._scale * t)

    def inverse_coeffs(self):
        r"""Coefficients `(beta, alpha)` of \f$ t(x) = \alpha x + \beta \f$."""
        return (-self._shift / self._scale, 1. / self._scale)

    def reference_expr(self, var=0):
        r"""Expression of \f$ t(x) \f$ in the variable `x = x_var`."""
        if self.is_identity:
            return Variable(var)
        return Polynomial(var, self.inverse_coeffs())


def compose_affine(coeffs, alpha, beta):
    r"""Coefficients of \f$ p(\alpha x + \beta) \f$ given those of \f$ p \f$.

    Uses the binomial expansion
    \f[
        (\alpha x + \beta)^k
            = \sum_{j=0}^k {k \choose j} \alpha^j \beta^{k-j} x^j.
    \f]
    """
    coeffs = np.asarray(coeffs, dtype=float)
    result = np.zeros(len(coeffs))
    for k, c in enumerate(coeffs):
        if c == 0.0:
            continue
        for j, binom in enumerate(binomial_coeffs(k)):
            result[j] += c * binom * alpha**j * beta**(k-j)
    return result


def polynomial_expr(coeffs, var=0, domain_map=None):
    r"""Build the simplified polynomial expression for monomial coefficients.

    If `domain_map` is given, the coefficients are taken to belong to the
    reference variable \f$ t \in [-1,1] \f$ and are transformed to the
    domain's variable first.
    """
    coeffs = np.asarray(coeffs, dtype=float)
    if domain_map is not None and not domain_map.is_identity:
        beta, alpha = domain_map.inverse_coeffs()
        coeffs = compose_affine(coeffs, alpha, beta)
    return simplify(Polynomial(var, [float(c) for c in coeffs]))


def check_fit_params(lr, iters, tol, samples):
    r"""Validate the common parameters of the iterative fits."""
    if samples < 1:
        raise InvalidDomain("Need at least one sample point per iteration.")
    if not lr > 0:
        raise ValueError("Learning rate must be positive, got %r." % (lr,))
    if iters < 1:
        raise ValueError("Need at least one iteration, got %r." % (iters,))
    if tol < 0:
        raise ValueError("Tolerance must not be negative, got %r." % (tol,))


def grid_loss(model, ys, arg):
    r"""Mean squared error of `model(arg)` w.r.t. `ys`.

    Overflowing models result in an infinite loss.
    """
    with np.errstate(over='ignore', invalid='ignore'):
        loss = float(np.mean((model(arg) - ys)**2))
    return loss if np.isfinite(loss) else np.inf


def approximation_error(target, approx, domain=(-1, 1), var=0, Ns=50):
    r"""Estimate the maximum error \f$ \|f - p\|_\infty \f$ on a domain.

    @param target
        The approximated function (expression or callable).
    @param approx
        The approximation (expression or callable).
    @param domain
        Interval to consider. Default is ``(-1, 1)``.
    @param var
        Variable of the expressions. Default is `0`.
    @param Ns
        Number of initial samples (see numutils.inf_norm1d()).
    """
    a, b = DomainMap(domain).domain
    f1, f2 = [vectorized(f, var=var) for f in (target, approx)]
    _, delta = inf_norm1d(lambda x: f1([x])[0], lambda x: f2([x])[0],
                          domain=(a, b), Ns=Ns)
    return delta
