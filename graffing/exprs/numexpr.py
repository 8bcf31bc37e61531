r"""@package graffing.exprs.numexpr

Base of the expression system.

An expression is an immutable tree representing a function
\f$ f: \mathbb{R}^n \to \mathbb{R} \f$ built from variables \f$ x_i \f$,
constants and operators. All node types derive from the abstract
Expression class defined here and live in the basics module.

Each node type has to implement the following methods:
    * _expr_str() returning an infix representation of the node
    * _eval() computing the value of the node from already bound variables
    * _diff() building the (unsimplified) partial derivative
    * _rebuild() creating the same kind of node with different children

Since these are abstract methods, a node type that misses one of them cannot
be instantiated. This way, every transform (evaluation, differentiation,
simplification via _rebuild()) is guaranteed to know about every node type.

Expressions compare and hash *structurally*, i.e. two separately built trees
are equal if they have the same shape and payload. Subtrees may be shared
between different parents freely, as no node can ever be modified after
construction.

A short example:

~~~.py
x = Variable(0)
expr = Sin(x) * x
print(expr)                     # (sin(x_0)*x_0)
print(evaluate(expr, {0: .5}))  # 0.2397...
dexpr = simplify(differentiate(expr, 0))
print(dexpr)                    # ((cos(x_0)*x_0) + sin(x_0))
~~~
"""

from abc import ABCMeta, abstractmethod

import numpy as np

from .errors import DomainError


__all__ = [
    "Expression",
]


def _key(item):
    r"""Sort key of an expression, a tuple of expressions or a plain value."""
    if isinstance(item, Expression):
        return item._key
    if isinstance(item, tuple):
        return tuple(_key(i) for i in item)
    return item


class Expression(metaclass=ABCMeta):
    r"""Parent class for all expression nodes.

    The constructor arguments of a node (its *payload*) are stored as a tuple
    and define equality, hashing, ordering and pickling of the node. Child
    classes should therefore pass exactly their (validated) constructor
    arguments on to this init.

    Child classes need to set the `rank` class attribute, which determines
    the position of the node type in the canonical operand order used by the
    simplifier.
    """
    __slots__ = ("_args", "_hash", "_key")

    ## Position of this node type in the canonical operand order.
    rank = None

    def __init__(self, *args):
        r"""Base class init storing the payload of the node.

        Args:
            *args: The constructor arguments of the concrete node type.
        """
        object.__setattr__(self, "_args", args)
        object.__setattr__(self, "_hash", hash((type(self).__name__, args)))
        object.__setattr__(self, "_key", (self.rank,) + _key(args))

    def __setattr__(self, name, value):
        raise AttributeError("Expressions are immutable.")

    def __delattr__(self, name):
        raise AttributeError("Expressions are immutable.")

    def __reduce__(self):
        return (type(self), self._args)

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented if not isinstance(other, Expression) else False
        return self._hash == other._hash and self._args == other._args

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return self._hash

    def __repr__(self):
        r"""Return the node type and the infix representation of the tree."""
        return "<%s(%s)>" % (type(self).__name__, self._expr_str())

    def __str__(self):
        return self._expr_str()

    def sort_key(self):
        r"""Key defining the canonical total order of expressions.

        The key consists of the node type's rank followed by the payload, with
        child expressions replaced by their keys. Two expressions have equal
        keys exactly if they are structurally equal.
        """
        return self._key

    @property
    def nice_name(self):
        r"""Short description of this node (without its children)."""
        return type(self).__name__

    @property
    def children(self):
        r"""Tuple of all direct sub-expressions in payload order."""
        result = []
        for arg in self._args:
            if isinstance(arg, Expression):
                result.append(arg)
            elif isinstance(arg, tuple):
                result.extend(arg)
        return tuple(result)

    def map_children(self, func):
        r"""Return a node of the same type with `func` applied to each child.

        If `func` returns every child unchanged (identical objects), this node
        itself is returned, which preserves any sharing of subtrees.
        """
        children = self.children
        new_children = [func(c) for c in children]
        if all(a is b for a, b in zip(children, new_children)):
            return self
        return self._rebuild(new_children)

    def free_variables(self):
        r"""Return the set of variable indices this expression depends on."""
        result = set()
        for child in self.children:
            result.update(child.free_variables())
        return frozenset(result)

    def depends_on(self, index):
        r"""Return whether variable `index` occurs freely in the expression."""
        return index in self.free_variables()

    def is_constant(self, value=None):
        r"""Whether this is a Constant node (with the given value if specified)."""
        return False

    def size(self):
        r"""Number of nodes in the tree (shared subtrees counted repeatedly)."""
        return 1 + sum(c.size() for c in self.children)

    def traverse_tree(self, include_root=False, parents=None):
        r"""Generator that walks through a complete expression tree.

        In each iteration, the returned values represent the current node's
        parents (as a list from root to immediate parent), its position in
        its parent's children, and the node itself.

        Args:
            include_root: Whether to include the root as first item. Default
                is `False`.
            parents: Optional list of parents of the root. Normally only used
                internally for the recursion.

        @b Examples
        \code
            for parents, pos, expr in root_expr.traverse_tree():
                print("-"*len(parents), pos)
        \endcode
        """
        if parents is None:
            parents = []
        if include_root:
            yield parents, "", self
        parents = parents + [self]
        for pos, expr in enumerate(self.children):
            yield parents, pos, expr
            for node in expr.traverse_tree(include_root=False, parents=parents):
                yield node

    def print_tree(self, root_name='root'):
        r"""Print the whole expression tree, one node per line."""
        def _p(expr, name, parents=()):
            print("%s%s [%s] <%s>" % (
                ". " * len(parents), name, expr.nice_name, type(expr).__name__
            ))
        _p(self, root_name)
        for parents, pos, expr in self.traverse_tree():
            _p(expr, pos, parents)

    def evaluator(self, var=0, bindings=None):
        r"""Create a callable evaluating this expression along one axis.

        See evaluators.Evaluator for details.

        Args:
            var: Index of the variable the evaluator takes as argument.
                Default is `0`.
            bindings: Fixed values for any other variables.
        """
        from .evaluators import Evaluator
        return Evaluator(self, var=var, bindings=bindings)

    def _evaluate(self, values):
        r"""Evaluate the node and make sure the result is finite.

        `values` must be a dictionary mapping variable indices to floats or
        NumPy arrays. Overflows anywhere in the tree are reported as
        errors.DomainError instead of silently propagating `inf` or `nan`.
        """
        value = self._eval(values)
        if not np.all(np.isfinite(value)):
            raise DomainError("%s evaluated to a non-finite value."
                              % type(self).__name__)
        return value

    @abstractmethod
    def _expr_str(self):
        r"""Infix string of the expression, using ``x_i`` for variables."""
        pass

    @abstractmethod
    def _eval(self, values):
        r"""Compute the value of this node.

        Child classes must evaluate their children via `_evaluate()` (not
        `_eval()`) to benefit from the finiteness check.
        """
        pass

    @abstractmethod
    def _diff(self, var):
        r"""Return the unsimplified partial derivative w.r.t. `x_var`."""
        pass

    @abstractmethod
    def _rebuild(self, children):
        r"""Create a node of this type with the given children.

        The children are given in the order of the `children` property. Any
        non-expression payload (indices, exponents, bounds) is taken from
        this node.
        """
        pass

    # Operator overloads build raw (unsimplified) trees.

    def __add__(self, other):
        from .basics import Add
        return Add((self, other))

    def __radd__(self, other):
        from .basics import Add
        return Add((other, self))

    def __sub__(self, other):
        from .basics import Add, Neg
        return Add((self, Neg(other)))

    def __rsub__(self, other):
        from .basics import Add, Neg
        return Add((other, Neg(self)))

    def __mul__(self, other):
        from .basics import Mul
        return Mul((self, other))

    def __rmul__(self, other):
        from .basics import Mul
        return Mul((other, self))

    def __truediv__(self, other):
        from .basics import Div
        return Div(self, other)

    def __rtruediv__(self, other):
        from .basics import Div
        return Div(other, self)

    def __neg__(self):
        from .basics import Neg
        return Neg(self)

    def __pow__(self, exponent):
        from .basics import Pow
        return Pow(self, exponent)
