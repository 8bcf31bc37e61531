r"""@package graffing.exprs.errors

Exceptions raised by the expression system and the numerical layer.

The hierarchy follows the three stages an expression goes through:

    GraffingError
     +-- ConstructionError   building a tree with invalid arity or payload
     +-- EvalError           evaluating a tree at a given binding
     +-- ApproxError         fitting/projecting a target function

Each concrete error also derives from the closest builtin exception, so that
e.g. a DivisionByZero can be caught as `ZeroDivisionError` by callers that do
not know about this package.
"""


__all__ = [
    "GraffingError",
    "ConstructionError",
    "ArityMismatch",
    "NonIntegerExponent",
    "InvalidConstant",
    "InvalidIndex",
    "EvalError",
    "UndefinedVariable",
    "DivisionByZero",
    "DomainError",
    "ApproxError",
    "NonConvergence",
    "InvalidDomain",
]


class GraffingError(Exception):
    r"""Base class of all errors raised by this package."""
    pass


class ConstructionError(GraffingError, ValueError):
    r"""An expression could not be built from the given operands."""
    pass


class ArityMismatch(ConstructionError):
    r"""Wrong number (or kind) of operands for a node type."""
    pass


class NonIntegerExponent(ConstructionError):
    r"""A power was requested with a non-integral exponent."""
    pass


class InvalidConstant(ConstructionError):
    r"""A constant is not a finite real number."""
    pass


class InvalidIndex(ConstructionError):
    r"""A variable index or a summation bound is not a valid integer."""
    pass


class EvalError(GraffingError, ArithmeticError):
    r"""Evaluation of an expression failed."""
    pass


class UndefinedVariable(EvalError, LookupError):
    r"""A variable referenced by the expression has no binding.

    The index of the missing variable is available as `index`.
    """
    def __init__(self, index):
        super(UndefinedVariable, self).__init__(
            "No value bound to variable x_%d." % index
        )
        ## Index of the variable that could not be resolved.
        self.index = index

    def __reduce__(self):
        return (type(self), (self.index,))


class DivisionByZero(EvalError, ZeroDivisionError):
    r"""A denominator (or the base of a negative power) evaluated to zero."""
    pass


class DomainError(EvalError, ValueError):
    r"""A function was evaluated outside its domain or overflowed."""
    pass


class ApproxError(GraffingError):
    r"""Approximating a function failed."""
    pass


class NonConvergence(ApproxError):
    r"""An iterative fit exhausted its budget before reaching the tolerance.

    This is a soft failure: the best iterate found so far is attached to the
    exception as `expr` (and the complete fit record as `result`), such that
    callers may still display a degraded approximation.
    """
    def __init__(self, msg, result=None):
        super(NonConvergence, self).__init__(msg)
        ## The approx.common.FitResult of the aborted fit (may be `None`).
        self.result = result

    @property
    def expr(self):
        r"""Best expression found before the budget was exhausted."""
        return None if self.result is None else self.result.expr

    def __reduce__(self):
        return (type(self), (self.args[0], self.result))


class InvalidDomain(ApproxError, ValueError):
    r"""Invalid interval (e.g. `a > b`), degree or sample count."""
    pass
