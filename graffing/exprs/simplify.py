r"""@package graffing.exprs.simplify

Algebraic simplification of expressions.

simplify() rewrites an expression into a canonical, reduced form by applying
a fixed set of rules bottom-up until nothing changes anymore:

    * constant folding (including elementary functions of constants)
    * identities: x+0, x*1, x*0, x/1, x^0, x^1
    * canonical forms: -a -> (-1)*a, a/b -> a*b^(-1)
    * flattening of nested sums and products
    * like terms: 2x + 3x -> 5x and x^2 * x -> x^3
    * polynomial arithmetic: sums, products (convolution of the
      coefficients), scaling and multiplication with powers of the
      polynomial's variable
    * sums/products whose body does not depend on the bound variable

Operands of sums and products are sorted by Expression.sort_key(), so that
structurally equal expressions always end up in the same form. The result
evaluates to the same values as the input wherever both are defined (e.g.
`x/x` becomes `1`, which is defined at `x=0` too).

Simplification never fails. Folding that would lead to non-finite or
undefined constants (like `1/0`) is skipped and the respective node is kept.
"""

import logging
import math
import operator

from ..config import Settings
from .basics import Variable, Constant, Add, Neg, Mul, Div, Sin, Cos, Tan
from .basics import Exp, Log, Pow, Polynomial, Sum, Prod


__all__ = [
    "simplify",
]


logger = logging.getLogger(__name__)


def simplify(expr, max_passes=None):
    r"""Return a simplified expression equivalent to `expr`.

    The rules are applied in bottom-up passes until a fixed point is reached,
    which makes simplify() idempotent.

    Args:
        expr: Expression to simplify.
        max_passes: Maximum number of passes. Default is
            config.Settings.simplify_max_passes.
    """
    if max_passes is None:
        max_passes = Settings.simplify_max_passes
    for _ in range(max_passes):
        result = _simplify_pass(expr, dict())
        if result == expr:
            return expr
        expr = result
    logger.debug("Simplification stopped after %d passes.", max_passes)
    return expr


def _simplify_pass(expr, memo):
    r"""Simplify children first, then apply the rule for the node itself.

    The memo ensures shared subtrees are processed only once per pass.
    """
    try:
        return memo[expr]
    except KeyError:
        pass
    node = expr.map_children(lambda c: _simplify_pass(c, memo))
    result = _RULES[type(node)](node)
    memo[expr] = result
    return result


def _const(value):
    r"""Create a Constant or return `None` if `value` is not finite."""
    if value is None or not math.isfinite(value):
        return None
    return Constant(value)


def _is_zero(expr):
    return isinstance(expr, Constant) and expr.value == 0


def _keep(node):
    return node


def _sorted(ops):
    return sorted(ops, key=lambda e: e.sort_key())


# Neg and Div -----------------------------------------------------------------

def _simplify_neg(node):
    return _mul_ops([Constant(-1.0), node.operand])


def _simplify_div(node):
    if _is_zero(node.denominator):
        return node
    return _mul_ops([node.numerator, _pow(node.denominator, -1)])


# Pow -------------------------------------------------------------------------

def _simplify_pow(node):
    return _pow(node.base, node.exponent, node)


def _pow(base, k, node=None):
    r"""Simplified version of `Pow(base, k)` for a simplified `base`."""
    if k == 0:
        return Constant(1.0)
    if k == 1:
        return base
    if isinstance(base, Constant):
        if base.value == 0 and k < 0:
            return node or Pow(base, k)
        try:
            folded = _const(base.value ** k)
        except OverflowError:
            folded = None
        return folded or node or Pow(base, k)
    if isinstance(base, Pow):
        return _pow(base.base, base.exponent * k)
    if isinstance(base, Mul):
        return _mul_ops([_pow(f, k) for f in base.operands])
    if (isinstance(base, Polynomial) and k > 0
            and all(isinstance(c, Constant) for c in base.coeffs)):
        coeffs = base.coeffs
        for _ in range(k-1):
            coeffs = _poly_mul(coeffs, base.coeffs)
        return _polynomial(base.var, coeffs)
    return node or Pow(base, k)


# Mul -------------------------------------------------------------------------

def _simplify_mul(node):
    return _mul_ops(node.operands)


def _flatten(ops, cls):
    result = []
    for op in ops:
        if isinstance(op, cls):
            result.extend(op.operands)
        else:
            result.append(op)
    return result


def _fold_constants(ops, fold, neutral):
    r"""Separate the constants from the other operands and fold them.

    Returns:
        A triple `(value, consts, rest)`. If folding leads to a non-finite
        result, `value` is `None` and the unfolded constants are returned in
        `consts` (which is empty otherwise).
    """
    consts = [op for op in ops if isinstance(op, Constant)]
    rest = [op for op in ops if not isinstance(op, Constant)]
    value = neutral
    for c in consts:
        value = fold(value, c.value)
    if not math.isfinite(value):
        return None, consts, rest
    return value, [], rest


def _monomial_degree(expr, var):
    r"""Degree `k > 0` if `expr` is \f$ x_{var}^k \f$, else `None`."""
    if isinstance(expr, Variable) and expr.index == var:
        return 1
    if (isinstance(expr, Pow) and expr.exponent > 0
            and isinstance(expr.base, Variable) and expr.base.index == var):
        return expr.exponent
    return None


def _base_exp(expr):
    if isinstance(expr, Pow) and not isinstance(expr.base, Constant):
        return expr.base, expr.exponent
    return expr, 1


def _group_powers(ops):
    r"""Combine factors with equal bases by adding their exponents.

    Returns the new factors and whether any two factors were combined.
    """
    groups = dict()
    for op in ops:
        base, k = _base_exp(op)
        groups.setdefault(base, []).append((op, k))
    factors = []
    regrouped = False
    for base, items in groups.items():
        if len(items) == 1:
            factors.append(items[0][0])
        else:
            regrouped = True
            factors.append(_pow(base, sum(k for _, k in items)))
    return factors, regrouped


def _mul_ops(ops):
    r"""Simplified product of already simplified operands."""
    ops = _flatten(ops, Mul)
    coeff, consts, ops = _fold_constants(ops, operator.mul, 1.0)
    if coeff == 0:
        return Constant(0.0)
    if coeff is not None:
        merged = _merge_poly_factors(coeff, ops)
        if merged is not None:
            return _mul_ops(merged)
        consts = [Constant(coeff)] if coeff != 1 else []
    factors, regrouped = _group_powers(ops)
    if regrouped:
        return _mul_ops(consts + factors)
    factors = consts + factors
    if not factors:
        return Constant(1.0)
    if len(factors) == 1:
        return factors[0]
    return Mul(_sorted(factors))


def _merge_poly_factors(coeff, ops):
    r"""Combine factors with polynomials.

    Polynomials in the same variable are multiplied, powers of a
    polynomial's variable shift its coefficients and a numerical factor
    `coeff` scales the first polynomial. Returns the new list of factors or
    `None` if nothing could be merged.
    """
    if not any(isinstance(op, Polynomial) for op in ops):
        return None
    changed = False
    merged = dict()
    rest = []
    for op in ops:
        if isinstance(op, Polynomial):
            if op.var in merged:
                merged[op.var] = _poly_mul(merged[op.var], op.coeffs)
                changed = True
            else:
                merged[op.var] = op.coeffs
        else:
            rest.append(op)
    remaining = []
    for op in rest:
        for var in merged:
            k = _monomial_degree(op, var)
            if k is not None:
                merged[var] = (Constant(0.0),) * k + tuple(merged[var])
                changed = True
                break
        else:
            remaining.append(op)
    if coeff != 1:
        var = min(merged)
        merged[var] = [_mul_ops([Constant(coeff), c]) for c in merged[var]]
        changed = True
    if not changed:
        return None
    return remaining + [_polynomial(var, coeffs) for var, coeffs in merged.items()]


# Add -------------------------------------------------------------------------

def _simplify_add(node):
    return _add_ops(node.operands)


def _split_coeff(term):
    r"""Split a term into numerical coefficient and remaining factor(s)."""
    if isinstance(term, Mul) and isinstance(term.operands[0], Constant):
        rest = term.operands[1:]
        body = rest[0] if len(rest) == 1 else Mul(rest)
        return term.operands[0].value, body
    return 1.0, term


def _collect_like_terms(ops):
    r"""Combine terms differing only in their numerical coefficient."""
    groups = dict()
    for op in ops:
        c, body = _split_coeff(op)
        groups.setdefault(body, []).append((op, c))
    terms = []
    for body, items in groups.items():
        if len(items) == 1:
            terms.append(items[0][0])
            continue
        c = math.fsum(c for _, c in items)
        if not math.isfinite(c):
            terms.extend(op for op, _ in items)
        elif c == 1:
            terms.append(body)
        elif c != 0:
            terms.append(_mul_ops([Constant(c), body]))
    return terms


def _add_ops(ops):
    r"""Simplified sum of already simplified operands."""
    ops = _flatten(ops, Add)
    total, consts, ops = _fold_constants(ops, operator.add, 0.0)
    if total is not None:
        merged = _merge_poly_terms(total, ops)
        if merged is not None:
            return _add_ops(merged)
        consts = [Constant(total)] if total != 0 else []
    terms = consts + _collect_like_terms(ops)
    if not terms:
        return Constant(0.0)
    if len(terms) == 1:
        return terms[0]
    return Add(_sorted(terms))


def _merge_poly_terms(total, ops):
    r"""Combine terms with polynomials.

    Polynomials in the same variable are added, terms
    \f$ c x_i^k \f$ are added to the polynomial in \f$ x_i \f$ and the
    constant `total` is absorbed by the first polynomial. Returns the new list
    of terms or `None` if nothing could be merged.
    """
    if not any(isinstance(op, Polynomial) for op in ops):
        return None
    changed = False
    merged = dict()
    rest = []
    for op in ops:
        if isinstance(op, Polynomial):
            if op.var in merged:
                merged[op.var] = _poly_add(merged[op.var], op.coeffs)
                changed = True
            else:
                merged[op.var] = op.coeffs
        else:
            rest.append(op)
    remaining = []
    for op in rest:
        c, body = _split_coeff(op)
        for var in merged:
            k = _monomial_degree(body, var)
            if k is not None:
                monomial = (Constant(0.0),) * k + (Constant(c),)
                merged[var] = _poly_add(merged[var], monomial)
                changed = True
                break
        else:
            remaining.append(op)
    if total != 0:
        var = min(merged)
        merged[var] = _poly_add(merged[var], [Constant(total)])
        changed = True
    if not changed:
        return None
    return remaining + [_polynomial(var, coeffs) for var, coeffs in merged.items()]


# Polynomials -----------------------------------------------------------------

def _poly_add(a, b):
    r"""Coefficient-wise sum of two coefficient sequences."""
    n = max(len(a), len(b))
    result = []
    for k in range(n):
        if k >= len(a):
            result.append(b[k])
        elif k >= len(b):
            result.append(a[k])
        else:
            result.append(_add_ops([a[k], b[k]]))
    return result


def _poly_mul(a, b):
    r"""Product of two coefficient sequences (discrete convolution)."""
    result = []
    for k in range(len(a) + len(b) - 1):
        terms = [_mul_ops([a[i], b[k-i]])
                 for i in range(max(0, k-len(b)+1), min(k, len(a)-1)+1)]
        result.append(terms[0] if len(terms) == 1 else _add_ops(terms))
    return result


def _polynomial(var, coeffs):
    r"""Canonical polynomial: trailing zeros trimmed, degree 0 collapsed."""
    coeffs = list(coeffs)
    while coeffs and _is_zero(coeffs[-1]):
        coeffs.pop()
    if not coeffs:
        return Constant(0.0)
    if len(coeffs) == 1:
        return coeffs[0]
    return Polynomial(var, coeffs)


def _simplify_polynomial(node):
    result = _polynomial(node.var, node.coeffs)
    if result == node:
        return node
    return result


# Sum and Prod ----------------------------------------------------------------

def _simplify_sum(node):
    if node.count == 0:
        return Constant(0.0)
    if not node.body.depends_on(node.var):
        return _mul_ops([Constant(node.count), node.body])
    return node


def _simplify_prod(node):
    if node.count == 0:
        return Constant(1.0)
    if not node.body.depends_on(node.var):
        return _pow(node.body, node.count)
    return node


# Elementary functions --------------------------------------------------------

def _fold_function(func, value):
    try:
        return _const(func(value))
    except (OverflowError, ValueError):
        return None


def _simplify_sin(node):
    if isinstance(node.arg, Constant):
        return _fold_function(math.sin, node.arg.value) or node
    return node


def _simplify_cos(node):
    if isinstance(node.arg, Constant):
        return _fold_function(math.cos, node.arg.value) or node
    return node


def _simplify_tan(node):
    if isinstance(node.arg, Constant):
        return _fold_function(math.tan, node.arg.value) or node
    return node


def _simplify_exp(node):
    if isinstance(node.arg, Constant):
        return _fold_function(math.exp, node.arg.value) or node
    return node


def _simplify_log(node):
    arg = node.arg
    if isinstance(arg, Exp):
        return arg.arg
    if isinstance(arg, Constant) and arg.value > 0:
        return _fold_function(math.log, arg.value) or node
    return node


_RULES = {
    Variable: _keep,
    Constant: _keep,
    Add: _simplify_add,
    Neg: _simplify_neg,
    Mul: _simplify_mul,
    Div: _simplify_div,
    Sin: _simplify_sin,
    Cos: _simplify_cos,
    Tan: _simplify_tan,
    Exp: _simplify_exp,
    Log: _simplify_log,
    Pow: _simplify_pow,
    Polynomial: _simplify_polynomial,
    Sum: _simplify_sum,
    Prod: _simplify_prod,
}
