r"""@package graffing

Computational backend of a function plotting and analysis tool.

The graffing.exprs package contains the expression engine: an immutable tree
representation of functions \f$ \mathbb{R}^n \to \mathbb{R} \f$ with
evaluation, simplification and symbolic differentiation.

The numerical layer consumes and produces expressions: graffing.quadrature
integrates them and graffing.approx approximates arbitrary functions by
polynomials (Legendre projection or gradient descent) or small neural
networks.

@b Examples

```
    from graffing import *
    f = make_mul([make_sin(X), X])
    df = simplify(differentiate(f, 0))      # ((cos(x_0)*x_0) + sin(x_0))
    integrate(df, CompositeTrapezoidal(1000), 0, 1)
    p = approximate(f, Legendre(6), domain=(0, 3))
```
"""

from .exprs import *
from .quadrature import integrate, inner_product
from .quadrature import Midpoint, Trapezoidal, CompositeTrapezoidal
from .quadrature import CompositeMidpoint
from .approx import approximate, Legendre, GradientDescentPoly, NeuralNet
from .approx import FitResult, fit_legendre, fit_polynomial, fit_neural_net
from .approx import approximation_error
from .config import Settings, load_settings
