r"""@package graffing.approx.gradient

Polynomial fit by stochastic gradient descent.

The model \f$ p_c(t) = \sum_{k=0}^N c_k t^k \f$ is linear in its coefficients,
so the gradient of the mean squared error over a batch of sample points
\f$ t_1, \ldots, t_m \f$ is available in closed form:
\f[
    \nabla_c L = \frac{2}{m} V^T (V c - y),
\f]
where \f$ V_{ik} = t_i^k \f$ is the Vandermonde matrix and
\f$ y_i = f(t_i) \f$. In each iteration, a fresh batch is drawn uniformly from
\f$ [-1,1] \f$. Convergence is judged on a fixed evaluation grid: the fit
stops once the grid loss changes by less than the tolerance.
"""

import logging

import numpy as np

from ..config import Settings
from ..exprs.errors import InvalidDomain
from ..exprs.evaluators import vectorized
from ..utils import timethis
from .common import FitResult, DomainMap, polynomial_expr, grid_loss
from .common import check_fit_params


__all__ = [
    "fit_polynomial",
]


logger = logging.getLogger(__name__)


def fit_polynomial(target, degree, lr, iters, tol, domain=(-1, 1), var=0,
                   samples=None, seed=0):
    r"""Fit polynomial coefficients using gradient descent.

    @param target
        Expression (in `x_var`) or callable to approximate.
    @param degree
        Degree of the polynomial.
    @param lr
        Learning rate (step size) of the gradient descent.
    @param iters
        Maximum number of iterations.
    @param tol
        Convergence threshold for the change of the grid loss between two
        iterations.
    @param domain
        Interval ``(a, b)`` on which to approximate. Default is ``(-1, 1)``.
    @param var
        Index of the variable of `target` and of the result.
    @param samples
        Number of random points per iteration. Default is
        config.Settings.fit_samples.
    @param seed
        Seed for the random number generator. Results are reproducible for
        equal seeds.

    @return FitResult with the polynomial of the best iterate. If the loss did
        not settle within `iters` iterations, its `converged` flag is `False`.
    """
    if samples is None:
        samples = Settings.fit_samples
    if int(degree) != degree or degree < 0:
        raise InvalidDomain("Degree must be a non-negative integer, got %r."
                            % (degree,))
    check_fit_params(lr, iters, tol, samples)
    degree = int(degree)
    dmap = DomainMap(domain)
    f = vectorized(dmap.pull_back(target, var=var), var=var)
    rng = np.random.default_rng(seed)
    c = rng.uniform(-1.0, 1.0, degree+1)
    grid = np.linspace(-1, 1, Settings.fit_grid_size)
    V_grid = np.vander(grid, degree+1, increasing=True)
    y_grid = f(grid)
    loss = grid_loss(V_grid.dot, y_grid, c)
    best_c, best_loss = c.copy(), loss
    history = [loss]
    converged = False
    it = 0
    with timethis(None, "Polynomial fit finished in {}", logger=logger):
        for it in range(1, iters+1):
            ts = rng.uniform(-1.0, 1.0, samples)
            V = np.vander(ts, degree+1, increasing=True)
            residual = V.dot(c) - f(ts)
            c = c - lr * 2.0 / samples * V.T.dot(residual)
            new_loss = grid_loss(V_grid.dot, y_grid, c)
            history.append(new_loss)
            if new_loss < best_loss:
                best_c, best_loss = c.copy(), new_loss
            if it % Settings.log_interval == 0:
                logger.debug("Iteration %d: loss = %g", it, new_loss)
            if not np.isfinite(new_loss):
                logger.warning("Gradient descent diverged in iteration %d "
                               "(learning rate %g too large?).", it, lr)
                break
            if abs(loss - new_loss) < tol:
                converged = True
                break
            loss = new_loss
    if converged:
        logger.info("Polynomial fit converged after %d iterations "
                    "(loss %g).", it, best_loss)
    else:
        logger.warning("Polynomial fit did not converge within %d "
                       "iterations (best loss %g).", it, best_loss)
    expr = polynomial_expr(best_c, var=var, domain_map=dmap)
    return FitResult(expr, best_loss, it, converged=converged, history=history)
