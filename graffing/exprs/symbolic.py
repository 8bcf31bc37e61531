r"""@package graffing.exprs.symbolic

Conversion between expressions and SymPy objects.

This allows entering functions as text and displaying them as LaTeX:

~~~.py
expr = parse("sin(x)*x^2 + 1")
print(latex(simplify(differentiate(expr, 0))))
~~~

Variables are represented by SymPy symbols named `x_0, x_1, ...`. When
parsing, the names `x`, `y` and `z` are accepted as shortcuts for the first
three variables.
"""

import re

import sympy as sp

from .basics import Variable, Constant, Add, Neg, Mul, Div, Sin, Cos, Tan
from .basics import Exp, Log, Pow, Polynomial, Sum, Prod
from .errors import ConstructionError, NonIntegerExponent


__all__ = [
    "to_sympy",
    "from_sympy",
    "parse",
    "latex",
]


_VAR_NAME = re.compile(r"^x_(\d+)$")
_SHORTCUTS = {"x": 0, "y": 1, "z": 2}


def _symbol(index):
    return sp.Symbol("x_%d" % index, real=True)


def to_sympy(expr):
    r"""Convert an expression to an (unevaluated-equivalent) SymPy object."""
    return _TO_SYMPY[type(expr)](expr)


def _constant_to_sympy(expr):
    value = expr.value
    if value.is_integer():
        return sp.Integer(int(value))
    return sp.Float(value)


def _polynomial_to_sympy(expr):
    x = _symbol(expr.var)
    return sp.Add(*[to_sympy(c) * x**k for k, c in enumerate(expr.coeffs)])


def _fold_to_sympy(cls):
    def _convert(expr):
        limits = (_symbol(expr.var), expr.start, expr.end)
        return cls(to_sympy(expr.body), limits)
    return _convert


_TO_SYMPY = {
    Variable: lambda e: _symbol(e.index),
    Constant: _constant_to_sympy,
    Add: lambda e: sp.Add(*[to_sympy(op) for op in e.operands]),
    Mul: lambda e: sp.Mul(*[to_sympy(op) for op in e.operands]),
    Neg: lambda e: -to_sympy(e.operand),
    Div: lambda e: to_sympy(e.numerator) / to_sympy(e.denominator),
    Sin: lambda e: sp.sin(to_sympy(e.arg)),
    Cos: lambda e: sp.cos(to_sympy(e.arg)),
    Tan: lambda e: sp.tan(to_sympy(e.arg)),
    Exp: lambda e: sp.exp(to_sympy(e.arg)),
    Log: lambda e: sp.log(to_sympy(e.arg)),
    Pow: lambda e: to_sympy(e.base)**e.exponent,
    Polynomial: _polynomial_to_sympy,
    Sum: _fold_to_sympy(sp.Sum),
    Prod: _fold_to_sympy(sp.Product),
}


_FUNCTIONS = (
    (sp.sin, Sin),
    (sp.cos, Cos),
    (sp.tan, Tan),
    (sp.exp, Exp),
    (sp.log, Log),
)


def _var_index(symbol):
    name = symbol.name
    if name in _SHORTCUTS:
        return _SHORTCUTS[name]
    m = _VAR_NAME.match(name)
    if not m:
        raise ConstructionError("Unknown symbol: %s" % name)
    return int(m.group(1))


def from_sympy(sexpr):
    r"""Convert a SymPy object to an expression.

    Supported are sums, products, integer powers, the functions sin, cos, tan,
    exp and log, finite sums/products with literal integer bounds, real
    numbers and symbols named `x_i` (or `x`, `y`, `z`).

    @b Raises
        errors.ConstructionError for anything not representable, e.g. other
        functions, non-integer powers or complex numbers.
    """
    if isinstance(sexpr, sp.Symbol):
        return Variable(_var_index(sexpr))
    if sexpr.is_number and not sexpr.free_symbols:
        try:
            return Constant(float(sexpr))
        except TypeError:
            raise ConstructionError("Not a real number: %s" % sexpr)
    if isinstance(sexpr, sp.Add):
        return Add([from_sympy(a) for a in sexpr.args])
    if isinstance(sexpr, sp.Mul):
        return Mul([from_sympy(a) for a in sexpr.args])
    if isinstance(sexpr, sp.Pow):
        base, exponent = sexpr.args
        if not exponent.is_Integer:
            raise NonIntegerExponent("Exponent must be an integer, got %s."
                                     % exponent)
        return Pow(from_sympy(base), int(exponent))
    for sfunc, cls in _FUNCTIONS:
        if isinstance(sexpr, sfunc):
            if len(sexpr.args) != 1:
                break
            return cls(from_sympy(sexpr.args[0]))
    if isinstance(sexpr, (sp.Sum, sp.Product)):
        return _fold_from_sympy(sexpr)
    raise ConstructionError("Unsupported SymPy expression: %s" % (sexpr,))


def _fold_from_sympy(sexpr):
    if len(sexpr.limits) != 1:
        raise ConstructionError("Only single sums/products are supported.")
    symbol, start, end = sexpr.limits[0]
    if not (start.is_Integer and end.is_Integer):
        raise ConstructionError("Bounds must be literal integers: %s" % (sexpr,))
    cls = Sum if isinstance(sexpr, sp.Sum) else Prod
    return cls(_var_index(symbol), int(start), int(end),
               from_sympy(sexpr.function))


def parse(text):
    r"""Parse a mathematical formula into an expression.

    The text is interpreted by SymPy (`^` may be used for powers). Note that
    SymPy performs some automatic simplifications while parsing.

    The text is evaluated by `sympy.sympify()`, which uses `eval`, so only
    pass trusted input.

    @b Examples
    \code
        parse("x^2 + 2*x*y")
        parse("sin(x_0) * exp(-x_1)")
    \endcode
    """
    names = dict((name, _symbol(i)) for name, i in _SHORTCUTS.items())
    try:
        sexpr = sp.sympify(text, locals=names)
    except (sp.SympifyError, SyntaxError, TypeError) as e:
        raise ConstructionError("Could not parse %r: %s" % (text, e))
    return from_sympy(sexpr)


def latex(expr):
    r"""Return a LaTeX representation of an expression."""
    return sp.latex(to_sympy(expr))
