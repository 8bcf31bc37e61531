r"""@package graffing.approx.neuralnet

Approximation by small dense neural networks.

The network is built directly as an expression. Its weights and biases are
represented by additional variables, such that the partial derivatives of the
network w.r.t. its parameters (i.e. what backpropagation computes) are
obtained from diff.differentiate(). Training uses the same stochastic
gradient descent scheme as gradient.fit_polynomial(), only the gradient of the
mean squared error
\f[
    \partial_{w} L = \frac{2}{m} \sum_{i=1}^m
        \big(N(t_i; w) - f(t_i)\big)\, \partial_{w} N(t_i; w)
\f]
is evaluated from these derivative expressions.

Internally, the network's input is the variable `x_0` ranging over
\f$ [-1,1] \f$, while the parameters are `x_1, x_2, ...`. The trained
network is returned with all parameters substituted and the input expressed
in terms of the requested variable and domain.

The available activations are built from Exp, Log and the arithmetic nodes:

| Name       | Definition                              |
|------------|-----------------------------------------|
| `tanh`     | \f$ 1 - 2/(e^{2z}+1) \f$                |
| `sigmoid`  | \f$ 1/(1+e^{-z}) \f$                    |
| `softplus` | \f$ \log(1+e^z) \f$                     |
"""

import itertools
import logging
import numbers

import numpy as np

from ..config import Settings
from ..exprs.basics import Variable, Constant, Add, Neg, Mul, Div, Exp, Log
from ..exprs.basics import substitute
from ..exprs.diff import differentiate
from ..exprs.errors import DomainError
from ..exprs.evaluators import evaluate_array, vectorized
from ..exprs.simplify import simplify
from ..utils import lmap, isiterable, timethis
from .common import FitResult, DomainMap, grid_loss, check_fit_params


__all__ = [
    "build_network",
    "fit_neural_net",
    "ACTIVATIONS",
]


logger = logging.getLogger(__name__)


def _tanh(z):
    return Add([
        Constant(1.0),
        Neg(Div(Constant(2.0), Add([Exp(Mul([Constant(2.0), z])), Constant(1.0)]))),
    ])


def _sigmoid(z):
    return Div(Constant(1.0), Add([Constant(1.0), Exp(Neg(z))]))


def _softplus(z):
    return Log(Add([Constant(1.0), Exp(z)]))


## Activation functions by name.
ACTIVATIONS = {
    "tanh": _tanh,
    "sigmoid": _sigmoid,
    "softplus": _softplus,
}


def _layer_sizes(layers):
    if isinstance(layers, numbers.Integral):
        layers = [layers]
    if not isiterable(layers):
        raise TypeError("Layers must be an integer or a list of integers.")
    layers = list(layers)
    if any(not isinstance(n, numbers.Integral) or n < 1 for n in layers):
        raise ValueError("Layer sizes must be positive integers: %r" % (layers,))
    return layers


def build_network(layers, activation="tanh", first_param=1):
    r"""Build a dense network with one input `x_0` and one linear output.

    @param layers
        Number of neurons of the hidden layer or list of sizes of multiple
        hidden layers.
    @param activation
        Name of the activation function (see `ACTIVATIONS`) or a callable
        taking and returning an expression.
    @param first_param
        Index of the variable representing the first parameter.

    @return A pair ``(expr, params)`` of the network and the list of the
        parameter variable indices.
    """
    act = ACTIVATIONS.get(activation) if isinstance(activation, str) else activation
    if act is None:
        raise ValueError("Unknown activation: %r (known: %s)"
                         % (activation, ", ".join(sorted(ACTIVATIONS))))
    counter = itertools.count(first_param)
    params = []
    def _param():
        idx = next(counter)
        params.append(idx)
        return Variable(idx)
    def _neuron(inputs):
        # bias first, then one weight per input
        return Add([_param()] + [Mul([_param(), a]) for a in inputs])
    values = [Variable(0)]
    for size in _layer_sizes(layers):
        values = [act(_neuron(values)) for _ in range(size)]
    return _neuron(values), params


def _bind(params, w, ts):
    bindings = dict(zip(params, w))
    bindings[0] = ts
    return bindings


def fit_neural_net(target, layers, lr, iters, tol, domain=(-1, 1), var=0,
                   seed=0, activation="tanh", samples=None):
    r"""Train a neural network to approximate a function.

    @param target
        Expression (in `x_var`) or callable to approximate.
    @param layers
        Size of the hidden layer or list of sizes of the hidden layers.
    @param lr
        Learning rate of the gradient descent.
    @param iters
        Maximum number of training iterations.
    @param tol
        Convergence threshold for the change of the grid loss.
    @param domain
        Interval ``(a, b)`` on which to approximate. Default is ``(-1, 1)``.
    @param var
        Index of the variable of `target` and of the result.
    @param seed
        Seed for the weight initialization (uniform in `[-1,1]`) and the
        sample points.
    @param activation
        Activation function of the hidden layers. Default is ``"tanh"``.
    @param samples
        Number of random points per iteration. Default is
        config.Settings.fit_samples.

    @return FitResult with the trained network expression of the best
        iterate.
    """
    if samples is None:
        samples = Settings.fit_samples
    check_fit_params(lr, iters, tol, samples)
    dmap = DomainMap(domain)
    f = vectorized(dmap.pull_back(target, var=var), var=var)
    network, params = build_network(layers, activation=activation)
    network = simplify(network)
    grads = [simplify(differentiate(network, p)) for p in params]
    logger.debug("Built network with %d parameters.", len(params))
    rng = np.random.default_rng(seed)
    w = rng.uniform(-1.0, 1.0, len(params))
    grid = np.linspace(-1, 1, Settings.fit_grid_size)
    y_grid = f(grid)
    def _model(w):
        return evaluate_array(network, _bind(params, w, grid))
    loss = grid_loss(_model, y_grid, w)
    best_w, best_loss = w.copy(), loss
    history = [loss]
    converged = False
    it = 0
    with timethis(None, "Network training finished in {}", logger=logger):
        for it in range(1, iters+1):
            ts = rng.uniform(-1.0, 1.0, samples)
            ys = f(ts)
            try:
                bindings = _bind(params, w, ts)
                residual = evaluate_array(network, bindings) - ys
                grad = lmap(lambda g: residual.dot(evaluate_array(g, bindings)),
                            grads)
                w = w - lr * 2.0 / samples * np.array(grad)
                new_loss = grid_loss(_model, y_grid, w)
            except DomainError:
                new_loss = np.inf
            history.append(new_loss)
            if new_loss < best_loss:
                best_w, best_loss = w.copy(), new_loss
            if it % Settings.log_interval == 0:
                logger.debug("Iteration %d: loss = %g", it, new_loss)
            if not np.isfinite(new_loss):
                logger.warning("Network training diverged in iteration %d "
                               "(learning rate %g too large?).", it, lr)
                break
            if abs(loss - new_loss) < tol:
                converged = True
                break
            loss = new_loss
    if converged:
        logger.info("Network training converged after %d iterations "
                    "(loss %g).", it, best_loss)
    else:
        logger.warning("Network training did not converge within %d "
                       "iterations (best loss %g).", it, best_loss)
    mapping = dict(zip(params, [float(wi) for wi in best_w]))
    mapping[0] = dmap.reference_expr(var)
    expr = simplify(substitute(network, mapping))
    return FitResult(expr, best_loss, it, converged=converged, history=history)
