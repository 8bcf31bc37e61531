r"""@package graffing.approx

Approximation of functions by expressions.

Three methods are available, all of which work on a finite domain (by default
\f$ [-1,1] \f$) and produce a simplified expression:

    * legendre: \f$ L^2 \f$ projection onto Legendre polynomials
    * gradient: polynomial coefficients fitted via stochastic gradient descent
    * neuralnet: dense neural network trained via gradient descent, with
      gradients obtained by symbolic differentiation of the network

See methods.approximate() for the common entry point.
"""

from .common import FitResult, approximation_error
from .legendre import fit_legendre
from .gradient import fit_polynomial
from .neuralnet import fit_neural_net
from .methods import Legendre, GradientDescentPoly, NeuralNet, approximate
