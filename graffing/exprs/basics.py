r"""@package graffing.exprs.basics

Collection of the basic expression node types.

These are the only node types of the expression system:

| Node       | Payload                                  |
|------------|------------------------------------------|
| Variable   | index `i` of the variable \f$ x_i \f$     |
| Constant   | finite float                             |
| Add, Mul   | tuple of at least two operands           |
| Neg        | one operand                              |
| Div        | numerator, denominator                   |
| Sin, Cos, Tan, Exp, Log | one argument                |
| Pow        | base, integer exponent                   |
| Polynomial | variable index, coefficients (ascending) |
| Sum, Prod  | bound index, integer start/end, body     |

Construction validates the payload and raises errors.ConstructionError
subclasses for invalid input. Plain numbers are accepted wherever an operand
is expected and converted to Constant nodes. The `make_*()` functions are
thin aliases of the constructors.
"""

from functools import reduce
import math
import numbers
import operator

import numpy as np

from .numexpr import Expression
from .errors import ArityMismatch, NonIntegerExponent, InvalidConstant
from .errors import InvalidIndex, UndefinedVariable, DivisionByZero
from .errors import DomainError


__all__ = [
    "Variable",
    "Constant",
    "Add",
    "Neg",
    "Mul",
    "Div",
    "Sin",
    "Cos",
    "Tan",
    "Exp",
    "Log",
    "Pow",
    "Polynomial",
    "Sum",
    "Prod",
    "X",
    "Y",
    "Z",
    "as_expression",
    "substitute",
    "make_variable",
    "make_constant",
    "make_add",
    "make_sub",
    "make_neg",
    "make_mul",
    "make_div",
    "make_sin",
    "make_cos",
    "make_tan",
    "make_exp",
    "make_log",
    "make_pow",
    "make_polynomial",
    "make_sum",
    "make_prod",
]


def as_expression(obj):
    r"""Return `obj` if it is an expression, else convert a number to a Constant."""
    if isinstance(obj, Expression):
        return obj
    if isinstance(obj, numbers.Real):
        return Constant(obj)
    raise ArityMismatch("Expected an expression or a real number, got %r."
                        % (obj,))


def _check_index(index, what="variable index"):
    r"""Validate a non-negative integer index and return it as `int`."""
    if not isinstance(index, numbers.Integral) or index < 0:
        raise InvalidIndex("Invalid %s: %r" % (what, index))
    return int(index)


def _check_bound(value):
    r"""Validate a literal (possibly negative) integer summation bound."""
    if not isinstance(value, numbers.Integral):
        raise InvalidIndex("Summation bounds must be integers, got %r."
                           % (value,))
    return int(value)


def _operand_tuple(operands, cls):
    r"""Convert an iterable of operands and check it has at least two items."""
    try:
        operands = tuple(as_expression(op) for op in operands)
    except TypeError:
        raise ArityMismatch("%s expects a sequence of operands, got %r."
                            % (cls.__name__, operands))
    if len(operands) < 2:
        raise ArityMismatch("%s needs at least two operands, got %d."
                            % (cls.__name__, len(operands)))
    return operands


def _int_pow(x, k):
    r"""Compute `x**k` for an integer `k` by repeated squaring.

    Works for floats and NumPy arrays alike. A negative exponent computes the
    reciprocal and raises errors.DivisionByZero for a zero base, or
    errors.DomainError if the power underflows so the reciprocal overflows.
    """
    if k < 0:
        if np.any(x == 0):
            raise DivisionByZero("Zero raised to negative power %d." % k)
        p = _int_pow(x, -k)
        if np.any(p == 0):
            raise DomainError("Reciprocal of power %d overflows." % k)
        return 1.0 / p
    result = 1.0
    while k:
        if k & 1:
            result = result * x
        k >>= 1
        if k:
            x = x * x
    return result


def _lookup(values, index):
    try:
        return values[index]
    except KeyError:
        raise UndefinedVariable(index)


class Variable(Expression):
    r"""The variable \f$ x_i \f$ picking out the i'th component of the input."""
    __slots__ = ()
    rank = 14

    def __init__(self, index):
        super(Variable, self).__init__(_check_index(index))

    @property
    def index(self):
        r"""Index `i` of the variable."""
        return self._args[0]

    @property
    def nice_name(self):
        return "x_%d" % self.index

    def free_variables(self):
        return frozenset([self.index])

    def _expr_str(self):
        return "x_%d" % self.index

    def _eval(self, values):
        return _lookup(values, self.index)

    def _diff(self, var):
        return Constant(1.0 if var == self.index else 0.0)

    def _rebuild(self, children):
        return self

    def _substitute(self, mapping):
        return mapping.get(self.index, self)


class Constant(Expression):
    r"""A finite constant \f$ f(x) = c \f$."""
    __slots__ = ()
    rank = 0

    def __init__(self, value):
        if isinstance(value, numbers.Real):
            value = float(value)
        if not isinstance(value, float) or not math.isfinite(value):
            raise InvalidConstant("Constants must be finite real numbers, "
                                  "got %r." % (value,))
        # The addition turns -0.0 into 0.0.
        super(Constant, self).__init__(value + 0.0)

    @property
    def value(self):
        r"""The constant value."""
        return self._args[0]

    @property
    def nice_name(self):
        return "const (%r)" % self.value

    def is_constant(self, value=None):
        return value is None or self.value == value

    def _expr_str(self):
        return "%r" % self.value

    def _eval(self, values):
        return self.value

    def _diff(self, var):
        return Constant(0.0)

    def _rebuild(self, children):
        return self


class Add(Expression):
    r"""Sum of two or more operands."""
    __slots__ = ()
    rank = 4

    def __init__(self, operands):
        super(Add, self).__init__(_operand_tuple(operands, Add))

    @property
    def operands(self):
        return self._args[0]

    def _expr_str(self):
        return "(%s)" % " + ".join(op._expr_str() for op in self.operands)

    def _eval(self, values):
        return reduce(operator.add, (op._evaluate(values) for op in self.operands))

    def _diff(self, var):
        return Add([op._diff(var) for op in self.operands])

    def _rebuild(self, children):
        return Add(children)


class Neg(Expression):
    r"""Additive inverse \f$ -f \f$."""
    __slots__ = ()
    rank = 7

    def __init__(self, operand):
        super(Neg, self).__init__(as_expression(operand))

    @property
    def operand(self):
        return self._args[0]

    def _expr_str(self):
        return "(-%s)" % self.operand._expr_str()

    def _eval(self, values):
        return -self.operand._evaluate(values)

    def _diff(self, var):
        return Neg(self.operand._diff(var))

    def _rebuild(self, children):
        return Neg(children[0])


class Mul(Expression):
    r"""Product of two or more operands."""
    __slots__ = ()
    rank = 5

    def __init__(self, operands):
        super(Mul, self).__init__(_operand_tuple(operands, Mul))

    @property
    def operands(self):
        return self._args[0]

    def _expr_str(self):
        return "(%s)" % "*".join(op._expr_str() for op in self.operands)

    def _eval(self, values):
        return reduce(operator.mul, (op._evaluate(values) for op in self.operands))

    def _diff(self, var):
        # Generalized product rule: replace one factor at a time by its
        # derivative.
        ops = self.operands
        return Add([Mul(ops[:i] + (op._diff(var),) + ops[i+1:])
                    for i, op in enumerate(ops)])

    def _rebuild(self, children):
        return Mul(children)


class Div(Expression):
    r"""Quotient \f$ f/g \f$."""
    __slots__ = ()
    rank = 6

    def __init__(self, numerator, denominator):
        super(Div, self).__init__(as_expression(numerator),
                                  as_expression(denominator))

    @property
    def numerator(self):
        return self._args[0]

    @property
    def denominator(self):
        return self._args[1]

    def _expr_str(self):
        return "(%s/%s)" % (self.numerator._expr_str(),
                            self.denominator._expr_str())

    def _eval(self, values):
        num = self.numerator._evaluate(values)
        den = self.denominator._evaluate(values)
        if np.any(den == 0):
            raise DivisionByZero("Denominator %s evaluated to zero."
                                 % self.denominator._expr_str())
        return num / den

    def _diff(self, var):
        f, g = self.numerator, self.denominator
        return Div(
            Add([Mul([f._diff(var), g]), Neg(Mul([f, g._diff(var)]))]),
            Pow(g, 2)
        )

    def _rebuild(self, children):
        return Div(*children)


class _UnaryFunction(Expression):
    r"""Base for the elementary functions of one argument.

    Child classes define `fname`, the NumPy implementation `_func()` and the
    outer derivative \f$ h'(g) \f$ used in the chain rule
    \f$ (h \circ g)' = h'(g)\, g' \f$.
    """
    __slots__ = ()
    fname = None

    def __init__(self, arg):
        super(_UnaryFunction, self).__init__(as_expression(arg))

    @property
    def arg(self):
        return self._args[0]

    def _expr_str(self):
        return "%s(%s)" % (self.fname, self.arg._expr_str())

    def _eval(self, values):
        return self._func(self.arg._evaluate(values))

    def _diff(self, var):
        return Mul([self._outer_derivative(), self.arg._diff(var)])

    def _rebuild(self, children):
        return type(self)(children[0])

    def _func(self, x):
        raise NotImplementedError

    def _outer_derivative(self):
        raise NotImplementedError


class Sin(_UnaryFunction):
    __slots__ = ()
    rank = 9
    fname = "sin"

    def _func(self, x):
        return np.sin(x)

    def _outer_derivative(self):
        return Cos(self.arg)


class Cos(_UnaryFunction):
    __slots__ = ()
    rank = 10
    fname = "cos"

    def _func(self, x):
        return np.cos(x)

    def _outer_derivative(self):
        return Neg(Sin(self.arg))


class Tan(_UnaryFunction):
    __slots__ = ()
    rank = 11
    fname = "tan"

    def _func(self, x):
        return np.tan(x)

    def _outer_derivative(self):
        # sec^2 expressed via the existing node types
        return Div(Constant(1.0), Pow(Cos(self.arg), 2))


class Exp(_UnaryFunction):
    __slots__ = ()
    rank = 12
    fname = "exp"

    def _func(self, x):
        return np.exp(x)

    def _outer_derivative(self):
        return self


class Log(_UnaryFunction):
    r"""Natural logarithm, defined for positive arguments only."""
    __slots__ = ()
    rank = 13
    fname = "log"

    def _func(self, x):
        if np.any(x <= 0):
            raise DomainError("Logarithm of non-positive value.")
        return np.log(x)

    def _outer_derivative(self):
        return Div(Constant(1.0), self.arg)

    def _diff(self, var):
        return Div(self.arg._diff(var), self.arg)


class Pow(Expression):
    r"""Integer power \f$ g^k \f$.

    Negative exponents denote the reciprocal, an exponent of zero is the
    constant `1` (also for a zero base).
    """
    __slots__ = ()
    rank = 8

    def __init__(self, base, exponent):
        if isinstance(exponent, numbers.Integral):
            exponent = int(exponent)
        elif (isinstance(exponent, numbers.Real) and math.isfinite(exponent)
              and float(exponent).is_integer()):
            exponent = int(exponent)
        else:
            raise NonIntegerExponent("Exponent must be an integer, got %r."
                                     % (exponent,))
        super(Pow, self).__init__(as_expression(base), exponent)

    @property
    def base(self):
        return self._args[0]

    @property
    def exponent(self):
        return self._args[1]

    @property
    def nice_name(self):
        return "Pow (%d)" % self.exponent

    def _expr_str(self):
        return "(%s^%d)" % (self.base._expr_str(), self.exponent)

    def _eval(self, values):
        return _int_pow(self.base._evaluate(values), self.exponent)

    def _diff(self, var):
        g, k = self.base, self.exponent
        if k == 0:
            return Constant(0.0)
        if isinstance(g, Variable) and g.index == var:
            return Mul([Constant(k), Pow(g, k-1)])
        return Mul([Constant(k), Pow(g, k-1), g._diff(var)])

    def _rebuild(self, children):
        return Pow(children[0], self.exponent)


class Polynomial(Expression):
    r"""Polynomial \f$ \sum_k c_k x_i^k \f$ in one variable.

    The coefficients are expressions themselves and may depend on other
    variables (acting as parameters), which allows building e.g. functions of
    several variables as polynomials in one of them.
    """
    __slots__ = ()
    rank = 3

    def __init__(self, var, coeffs):
        r"""Create a polynomial.

        Args:
            var: Index of the polynomial's variable.
            coeffs: Iterable of coefficients (expressions or numbers), the
                element at position `k` multiplies \f$ x_i^k \f$. Must not be
                empty.
        """
        var = _check_index(var)
        try:
            coeffs = tuple(as_expression(c) for c in coeffs)
        except TypeError:
            raise ArityMismatch("Polynomial coefficients must be a sequence, "
                                "got %r." % (coeffs,))
        if not coeffs:
            raise ArityMismatch("Polynomial needs at least one coefficient.")
        super(Polynomial, self).__init__(var, coeffs)

    @property
    def var(self):
        r"""Index of the variable of this polynomial."""
        return self._args[0]

    @property
    def coeffs(self):
        r"""Tuple of coefficient expressions in ascending degree."""
        return self._args[1]

    @property
    def degree(self):
        r"""Formal degree, i.e. number of coefficients minus one."""
        return len(self.coeffs) - 1

    @property
    def nice_name(self):
        return "Polynomial (x_%d, degree %d)" % (self.var, self.degree)

    def free_variables(self):
        return super(Polynomial, self).free_variables() | {self.var}

    def _expr_str(self):
        x = "x_%d" % self.var
        terms = []
        for k, c in enumerate(self.coeffs):
            if k == 0:
                terms.append(c._expr_str())
            elif k == 1:
                terms.append("%s*%s" % (c._expr_str(), x))
            else:
                terms.append("%s*%s^%d" % (c._expr_str(), x, k))
        return "(%s)" % " + ".join(terms)

    def _eval(self, values):
        x = _lookup(values, self.var)
        coeffs = [c._evaluate(values) for c in self.coeffs]
        result = coeffs[-1]
        for c in reversed(coeffs[:-1]):
            result = result * x + c
        return result

    def _diff(self, var):
        coeffs = self.coeffs
        if var != self.var:
            return Polynomial(self.var, [c._diff(var) for c in coeffs])
        shifted = [_scaled(k, c) for k, c in enumerate(coeffs) if k > 0]
        result = Polynomial(self.var, shifted or [Constant(0.0)])
        if any(c.depends_on(var) for c in coeffs):
            # Coefficients depending on the polynomial's own variable need
            # the product rule for each term.
            result = Add([result, Polynomial(self.var, [c._diff(var) for c in coeffs])])
        return result

    def _rebuild(self, children):
        return Polynomial(self.var, children)

    def _substitute(self, mapping):
        result = self.map_children(lambda c: _substitute(c, mapping))
        if self.var not in mapping:
            return result
        x = mapping[self.var]
        if isinstance(x, Variable):
            return Polynomial(x.index, result.coeffs)
        terms = [Mul([c, Pow(x, k)]) for k, c in enumerate(result.coeffs)]
        return terms[0] if len(terms) == 1 else Add(terms)


def _scaled(k, c):
    r"""Return `k*c`, folding the factor into `c` if it is a Constant."""
    if isinstance(c, Constant):
        return Constant(k * c.value)
    return Mul([Constant(k), c])


class _IndexedFold(Expression):
    r"""Base for Sum and Prod over a literal integer range.

    The bound variable \f$ x_k \f$ runs through `start, start+1, ..., end`
    (inclusive) and shadows any value bound to the same index outside.
    """
    __slots__ = ()
    symbol = None

    def __init__(self, var, start, end, body):
        super(_IndexedFold, self).__init__(
            _check_index(var, "bound variable index"),
            _check_bound(start), _check_bound(end), as_expression(body),
        )

    @property
    def var(self):
        r"""Index of the bound variable."""
        return self._args[0]

    @property
    def start(self):
        return self._args[1]

    @property
    def end(self):
        return self._args[2]

    @property
    def body(self):
        return self._args[3]

    @property
    def count(self):
        r"""Number of terms/factors."""
        return max(0, self.end - self.start + 1)

    @property
    def nice_name(self):
        return "%s (x_%d = %d..%d)" % (type(self).__name__, self.var,
                                       self.start, self.end)

    def free_variables(self):
        return self.body.free_variables() - {self.var}

    def unrolled(self):
        r"""List of the body instances for each value of the bound variable."""
        return [substitute(self.body, {self.var: k})
                for k in range(self.start, self.end+1)]

    def _expr_str(self):
        return "%s(x_%d=%d..%d, %s)" % (self.symbol, self.var, self.start,
                                        self.end, self.body._expr_str())

    def _rebuild(self, children):
        return type(self)(self.var, self.start, self.end, children[0])

    def _substitute(self, mapping):
        if self.var in mapping:
            mapping = dict((k, v) for k, v in mapping.items() if k != self.var)
        return self.map_children(lambda c: _substitute(c, mapping))

    def _fold(self, values, op, initial):
        local = dict(values)
        result = initial
        for k in range(self.start, self.end+1):
            local[self.var] = float(k)
            result = op(result, self.body._evaluate(local))
        return result


class Sum(_IndexedFold):
    r"""Finite sum \f$ \sum_{x_k=s}^{e} f \f$."""
    __slots__ = ()
    rank = 1
    symbol = "sum"

    def _eval(self, values):
        return self._fold(values, operator.add, 0.0)

    def _diff(self, var):
        if var == self.var:
            return Constant(0.0)
        return Sum(self.var, self.start, self.end, self.body._diff(var))


class Prod(_IndexedFold):
    r"""Finite product \f$ \prod_{x_k=s}^{e} f \f$."""
    __slots__ = ()
    rank = 2
    symbol = "prod"

    def _eval(self, values):
        return self._fold(values, operator.mul, 1.0)

    def _diff(self, var):
        if var == self.var:
            return Constant(0.0)
        factors = self.unrolled()
        if not factors:
            return Constant(0.0)
        if len(factors) == 1:
            return factors[0]._diff(var)
        return Mul(factors)._diff(var)


def _substitute(expr, mapping):
    r"""Recursive part of substitute() with an already normalized mapping."""
    if not mapping:
        return expr
    custom = getattr(expr, "_substitute", None)
    if custom is not None:
        return custom(mapping)
    return expr.map_children(lambda c: _substitute(c, mapping))


def substitute(expr, mapping):
    r"""Replace free variables by expressions or numbers.

    This can be used to fix some of the variables of a function of several
    variables, e.g. to obtain \f$ x \mapsto f(x, 2) \f$ from \f$ f(x, y) \f$:

        g = substitute(f, {1: 2.0})

    Variables bound by a Sum or Prod are not replaced inside their body.

    Args:
        expr: Expression to substitute into.
        mapping: Dictionary mapping variable indices to expressions or
            numbers.
    """
    mapping = dict((_check_index(k), as_expression(v)) for k, v in mapping.items())
    if not mapping.keys() & expr.free_variables():
        return expr
    return _substitute(expr, mapping)


## Shortcuts for the first three variables.
X = Variable(0)
Y = Variable(1)
Z = Variable(2)


def make_variable(index):
    return Variable(index)

def make_constant(value):
    return Constant(value)

def make_add(operands):
    return Add(operands)

def make_sub(a, b):
    r"""Build \f$ a - b \f$ as `Add([a, Neg(b)])`."""
    return Add([a, Neg(b)])

def make_neg(operand):
    return Neg(operand)

def make_mul(operands):
    return Mul(operands)

def make_div(numerator, denominator):
    return Div(numerator, denominator)

def make_sin(arg):
    return Sin(arg)

def make_cos(arg):
    return Cos(arg)

def make_tan(arg):
    return Tan(arg)

def make_exp(arg):
    return Exp(arg)

def make_log(arg):
    return Log(arg)

def make_pow(base, exponent):
    return Pow(base, exponent)

def make_polynomial(var, coeffs):
    return Polynomial(var, coeffs)

def make_sum(var, start, end, body):
    return Sum(var, start, end, body)

def make_prod(var, start, end, body):
    return Prod(var, start, end, body)
