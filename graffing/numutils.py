r"""@package graffing.numutils

Miscellaneous numerical utilities and helpers.


@b Examples

```
    >>> binomial(5, 3)
    10
    >>> binomial_coeffs(4)
    [1, 4, 6, 4, 1]
```
"""

from scipy import optimize
import numpy as np
import sympy as sp


__all__ = [
    "binomial",
    "binomial_coeffs",
    "inf_norm1d",
    "check_interval",
]


def binomial(n, k):
    r"""Compute the binomial coefficient n choose k."""
    return int(sp.binomial(n, k))


def binomial_coeffs(n):
    r"""Compute all binomial coefficients n choose k for 0 <= k <= n.

    The result is a list of integers
    \f[
        {n \choose 0}, {n \choose 1}, \ldots, {n \choose n}.
    \f]
    """
    return _BinomialCoeffs.all_coeffs(n)


class _BinomialCoeffs():
    r"""Helper class to simply cache the coefficient lists.

    This is used by binomial_coeffs() to re-use once computed lists.
    """

    __binomial_coeffs = []

    @classmethod
    def all_coeffs(cls, n):
        r"""Generate and cache the results for binomial_coeffs()."""
        while len(cls.__binomial_coeffs) <= n:
            nn = len(cls.__binomial_coeffs)
            coeffs = [binomial(nn, k) for k in range(nn+1)]
            cls.__binomial_coeffs.append(coeffs)
        return cls.__binomial_coeffs[n]


def check_interval(a, b, strict=False, error=ValueError):
    r"""Validate a finite interval `[a,b]` and return it as floats.

    @param a,b
        Interval boundaries.
    @param strict
        If `True`, also reject empty intervals with ``a == b``.
    @param error
        Exception class to raise for invalid intervals.
    """
    a, b = float(a), float(b)
    if not (np.isfinite(a) and np.isfinite(b)):
        raise error("Interval boundaries must be finite: [%s, %s]" % (a, b))
    if a > b or (strict and a == b):
        raise error("Invalid interval: [%s, %s]" % (a, b))
    return a, b


def inf_norm1d(f1, f2=None, domain=(-1, 1), Ns=50, xatol=1e-12):
    r"""Compute the L^inf norm of f1-f2.

    The `scipy.optimize.brute` method is used to find a candidate close to the
    global maximum difference. This is then taken as starting point for a
    search for the local maximum difference. Setting the number of samples
    `Ns` high enough should lead to the global maximum difference being found.

    @param f1
        First function. May also be an expression of one variable.
    @param f2
        Second function. May also be an expression. If not given, simply
        finds the maximum absolute value of `f1`.
    @param domain
        Domain ``[a, b]`` inside which to search for the maximum difference.
        Default is ``(-1, 1)``.
    @param Ns
        Number of initial samples for the `scipy.optimize.brute` call. In case
        ``Ns <= 2``, the `brute()` step is skipped an a local extremum is
        found inside the given `domain`. Default is `50`.

    @return A pair ``(x, delta)``, where `x` is the point at which the maximum
        difference was found and `delta` is the difference at that point.
    """
    if not callable(f1):
        f1 = f1.evaluator()
    if f2 is None:
        f2 = lambda x: 0.0
    if not callable(f2):
        f2 = f2.evaluator()
    a, b = domain
    def func(x):
        x = float(np.ravel(x)[0])
        if not a <= x <= b:
            return 0.
        return -float(abs(f1(x)-f2(x)))
    if Ns <= 2:
        bounds = [a, b]
    else:
        x0 = optimize.brute(func, [tuple(domain)], Ns=Ns, finish=None)
        x0 = float(np.ravel(x0)[0])
        step = (b-a)/(Ns-1)
        bounds = [max(a, x0-step), min(b, x0+step)]
    res = optimize.minimize_scalar(
        func, bounds=bounds, method='bounded',
        options=dict(xatol=xatol),
    )
    # The bounded search never evaluates the boundaries themselves.
    candidates = [(float(res.x), -float(res.fun)), (a, -func(a)), (b, -func(b))]
    return max(candidates, key=lambda c: c[1])
