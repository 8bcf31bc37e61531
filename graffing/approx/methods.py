r"""@package graffing.approx.methods

Approximation methods and the approximate() entry point.

A method object collects the parameters of one approximation scheme:

~~~.py
approximate(Exp(X), Legendre(4))
approximate(Exp(X), GradientDescentPoly(3, lr=.3, iters=5000, tol=1e-12))
approximate(Exp(X), NeuralNet([4], lr=.05, iters=2000, tol=1e-9, seed=1))
~~~

approximate() returns the resulting expression. Iterative methods that
exhaust their iteration budget raise errors.NonConvergence, which carries the
best approximation found so far as its `expr` attribute. Use the `fit()`
method (or the `fit_*()` functions) directly to obtain the result and status
without raising.
"""

from .legendre import fit_legendre
from .gradient import fit_polynomial
from .neuralnet import fit_neural_net


__all__ = [
    "ApproximationMethod",
    "Legendre",
    "GradientDescentPoly",
    "NeuralNet",
    "approximate",
]


class ApproximationMethod(object):
    r"""Base class for the approximation methods."""

    def fit(self, target, domain=(-1, 1), var=0):
        r"""Approximate `target` on `domain` and return an approx.common.FitResult."""
        raise NotImplementedError

    def _params(self):
        return dict((k, v) for k, v in vars(self).items()
                    if not k.startswith('_'))

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__,
            ", ".join("%s=%r" % kv for kv in sorted(self._params().items()))
        )

    def __eq__(self, other):
        return type(self) is type(other) and self._params() == other._params()

    def __hash__(self):
        return hash((type(self).__name__, repr(self)))


class Legendre(ApproximationMethod):
    r"""Projection onto the Legendre polynomials up to degree `degree`."""

    def __init__(self, degree, n=None):
        ## Maximum degree of the basis polynomials.
        self.degree = degree
        ## Number of subintervals for the inner products (`None` for default).
        self.n = n

    def fit(self, target, domain=(-1, 1), var=0):
        return fit_legendre(target, self.degree, domain=domain, var=var,
                            n=self.n)


class GradientDescentPoly(ApproximationMethod):
    r"""Polynomial of degree `degree` fitted via gradient descent."""

    def __init__(self, degree, lr, iters, tol, samples=None, seed=0):
        self.degree = degree
        self.lr = lr
        self.iters = iters
        self.tol = tol
        self.samples = samples
        self.seed = seed

    def fit(self, target, domain=(-1, 1), var=0):
        return fit_polynomial(
            target, self.degree, lr=self.lr, iters=self.iters, tol=self.tol,
            domain=domain, var=var, samples=self.samples, seed=self.seed,
        )


class NeuralNet(ApproximationMethod):
    r"""Dense neural network with hidden layer sizes `layers`."""

    def __init__(self, layers, lr, iters, tol, seed=0, activation="tanh",
                 samples=None):
        self.layers = layers
        self.lr = lr
        self.iters = iters
        self.tol = tol
        self.seed = seed
        self.activation = activation
        self.samples = samples

    def fit(self, target, domain=(-1, 1), var=0):
        return fit_neural_net(
            target, self.layers, lr=self.lr, iters=self.iters, tol=self.tol,
            domain=domain, var=var, seed=self.seed,
            activation=self.activation, samples=self.samples,
        )


def approximate(target, method, domain=(-1, 1), var=0):
    r"""Approximate a function using the given method.

    @param target
        Expression (in `x_var`) or callable to approximate.
    @param method
        An ApproximationMethod instance, e.g. Legendre(4).
    @param domain
        Finite interval ``(a, b)`` with ``a < b``. Default is ``(-1, 1)``.
    @param var
        Index of the variable of `target` and of the result.

    @return The simplified approximating expression.

    @b Raises
        errors.InvalidDomain for invalid domains or degrees,
        errors.NonConvergence if an iterative method did not converge (the
        best iterate is available as its `expr` attribute), and any
        errors.EvalError raised while sampling the target.
    """
    result = method.fit(target, domain=domain, var=var)
    if result.error is not None:
        raise result.error
    return result.expr
