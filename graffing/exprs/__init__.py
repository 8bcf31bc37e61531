r"""@package graffing.exprs

Expression system for representing, transforming and evaluating functions.

Each expression is an immutable tree representing a function
\f$ f: \mathbb{R}^n \to \mathbb{R} \f$ of the variables
\f$ x_0, x_1, \ldots \f$, e.g. \f$ \sin(x_0) x_1 \f$ or a polynomial
\f$ \sum_k c_k x_0^k \f$ with coefficients that are themselves expressions.

Expressions are built from the node types in the basics module (or using the
`make_*()` functions and the Python operators) and are then transformed by
plain functions:

    * evaluators.evaluate() computes values at a point
    * simplify.simplify() rewrites an expression into a canonical form
    * diff.differentiate() builds partial derivatives
    * symbolic.to_sympy() and symbolic.parse() connect to SymPy

NOTE: Construction never simplifies. The tree for `X + 0` really contains an
      addition of a zero constant until simplify() is called.

Since expressions are immutable and compare structurally, they can be used as
dictionary keys, shared between different trees and pickled freely.
"""

from .numexpr import Expression
from .basics import *
from .errors import *
from .evaluators import evaluate, evaluate_array, Evaluator
from .simplify import simplify
from .diff import differentiate, derivative, gradient
from .symbolic import to_sympy, from_sympy, parse, latex
