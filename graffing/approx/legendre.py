r"""@package graffing.approx.legendre

Approximation by projection onto Legendre polynomials.

The Legendre polynomials \f$ P_k \f$ are orthogonal on \f$ [-1,1] \f$ with
\f[
    \langle P_j, P_k \rangle = \int_{-1}^1 P_j(t) P_k(t)\,dt
        = \frac{2}{2k+1} \delta_{jk}.
\f]
The best approximation of degree `N` in the \f$ L^2 \f$ sense is hence
\f[
    p(t) = \sum_{k=0}^N c_k P_k(t),
    \qquad c_k = \frac{2k+1}{2} \langle f, P_k \rangle,
\f]
where the inner products are computed numerically using
quadrature.inner_product().
"""

import logging

import numpy as np

from ..config import Settings
from ..exprs.basics import Polynomial
from ..exprs.errors import InvalidDomain
from ..exprs.evaluators import vectorized
from ..quadrature import inner_product
from .common import FitResult, DomainMap, polynomial_expr, grid_loss


__all__ = [
    "legendre_coeffs",
    "legendre_basis",
    "evaluate_Pn",
    "fit_legendre",
]


logger = logging.getLogger(__name__)


def legendre_coeffs(n):
    r"""Monomial coefficients of the n'th Legendre polynomial.

    The coefficients are computed using Bonnet's recursion
    \f[
        (k+1) P_{k+1}(t) = (2k+1)\, t P_k(t) - k P_{k-1}(t)
    \f]
    and returned in ascending order as NumPy array of length `n+1`.
    """
    return _LegendreCoeffs.coeffs(n).copy()


class _LegendreCoeffs():
    r"""Helper class caching the already computed coefficient arrays."""

    __coeffs = [np.array([1.0]), np.array([0.0, 1.0])]

    @classmethod
    def coeffs(cls, n):
        r"""Generate and cache the results for legendre_coeffs()."""
        if n < 0:
            raise ValueError("Legendre polynomials need a degree n >= 0.")
        while len(cls.__coeffs) <= n:
            k = len(cls.__coeffs) - 1
            Pk, Pkm1 = cls.__coeffs[k], cls.__coeffs[k-1]
            tPk = np.concatenate(([0.0], Pk))
            Pkp1 = (2*k+1) * tPk
            Pkp1[:k] -= k * Pkm1
            cls.__coeffs.append(Pkp1 / (k+1))
        return cls.__coeffs[n]


def legendre_basis(n, var=0):
    r"""The n'th Legendre polynomial as expression in `x_var`."""
    return Polynomial(var, [float(c) for c in legendre_coeffs(n)])


def evaluate_Pn(t, num):
    r"""Evaluate the first `num` Legendre polynomials at (all) points `t`.

    @return Array of shape ``(num,) + shape(t)``, where the k'th element
        contains \f$ P_k(t) \f$.
    """
    t = np.asarray(t, dtype=float)
    Pn = np.empty((num,) + t.shape)
    if num > 0:
        Pn[0] = 1.0
    if num > 1:
        Pn[1] = t
    for k in range(1, num-1):
        Pn[k+1] = ((2*k+1) * t * Pn[k] - k * Pn[k-1]) / (k+1)
    return Pn


def fit_legendre(target, degree, domain=(-1, 1), var=0, n=None):
    r"""Project a function onto the polynomials of a given degree.

    @param target
        Expression (in `x_var`) or callable to approximate.
    @param degree
        Maximum degree `N` of the Legendre polynomials, i.e. `N+1` basis
        functions are used.
    @param domain
        Interval ``(a, b)`` on which to approximate. Default is ``(-1, 1)``.
    @param var
        Index of the variable of `target` and of the result.
    @param n
        Number of subintervals for computing the inner products. Default is
        config.Settings.legendre_subintervals.

    @return FitResult with the simplified polynomial.

    @b Raises
        errors.InvalidDomain for an invalid domain or ``degree < 0``. Errors
        raised while sampling the target propagate.
    """
    if int(degree) != degree or degree < 0:
        raise InvalidDomain("Degree must be a non-negative integer, got %r."
                            % (degree,))
    degree = int(degree)
    if n is None:
        n = Settings.legendre_subintervals
    dmap = DomainMap(domain)
    f = dmap.pull_back(target, var=var)
    coeffs = np.zeros(degree+1)
    cs = np.zeros(degree+1)
    for k in range(degree+1):
        c_k = (2*k+1) / 2. * inner_product(
            f, legendre_basis(k, var), -1, 1, n=n, var=var
        )
        cs[k] = c_k
        coeffs[:k+1] += c_k * legendre_coeffs(k)
        logger.debug("Legendre coefficient c_%d = %g", k, c_k)
    expr = polynomial_expr(coeffs, var=var, domain_map=dmap)
    grid = np.linspace(-1, 1, Settings.fit_grid_size)
    loss = grid_loss(lambda t: cs.dot(evaluate_Pn(t, degree+1)),
                     vectorized(f, var=var)(grid), grid)
    return FitResult(expr, loss, iterations=degree+1, converged=True)
