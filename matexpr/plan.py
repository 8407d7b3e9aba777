# --- Purpose: The immutable expression tree that the optimizer and evaluator walk. ---

import logging
from typing import Tuple

from .core import as_matrix, rows, cols
from .errors import DimensionMismatch

logger = logging.getLogger(__name__)


class MatrixExpr:
    """
    Base class of every node in a matrix expression tree.

    The set of node kinds is closed: LeafNode, ProductNode and SumNode.
    Nodes cache their shape at construction and cannot be modified
    afterwards; rewriting a tree always builds new nodes.
    """
    __slots__ = ('_rows', '_cols')

    # Make numpy defer to our operators instead of broadcasting over the node
    __array_ufunc__ = None

    def _freeze(self, **fields):
        for name, value in fields.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable; build a new expression instead.")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable; build a new expression instead.")

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    def __matmul__(self, other):
        if not isinstance(other, MatrixExpr):
            return NotImplemented
        return multiply(self, other)

    def __add__(self, other):
        if not isinstance(other, MatrixExpr):
            return NotImplemented
        return add(self, other)

    def __str__(self):
        return render(self)


class LeafNode(MatrixExpr):
    """A concrete matrix operand. This is the leaf of every expression tree."""
    __slots__ = ('_matrix', '_label')

    def __init__(self, matrix, label: str = None):
        matrix = as_matrix(matrix)
        if label is None:
            label = f"{rows(matrix)}x{cols(matrix)}"
        self._freeze(_matrix=matrix, _label=str(label), _rows=rows(matrix), _cols=cols(matrix))

    @property
    def matrix(self):
        return self._matrix

    @property
    def label(self) -> str:
        return self._label

    def __repr__(self):
        return f"LeafNode(label='{self._label}', shape={self.shape})"


class ProductNode(MatrixExpr):
    """A matrix multiplication of two sub-expressions."""
    __slots__ = ('_left', '_right')

    def __init__(self, left: MatrixExpr, right: MatrixExpr):
        _require_expr(left, right)
        if left.cols != right.rows:
            raise DimensionMismatch("multiply", left.shape, right.shape)
        self._freeze(_left=left, _right=right, _rows=left.rows, _cols=right.cols)

    @classmethod
    def _from_trusted(cls, left: MatrixExpr, right: MatrixExpr) -> 'ProductNode':
        """Builds a product from operands whose adjacency is already known to hold."""
        node = cls.__new__(cls)
        node._freeze(_left=left, _right=right, _rows=left.rows, _cols=right.cols)
        return node

    @property
    def left(self) -> MatrixExpr:
        return self._left

    @property
    def right(self) -> MatrixExpr:
        return self._right

    def __repr__(self):
        # !r calls the repr() of the children, creating a nested view
        return f"ProductNode(left={self._left!r}, right={self._right!r})"


class SumNode(MatrixExpr):
    """An elementwise addition of two sub-expressions of equal shape."""
    __slots__ = ('_left', '_right')

    def __init__(self, left: MatrixExpr, right: MatrixExpr):
        _require_expr(left, right)
        if left.shape != right.shape:
            raise DimensionMismatch("add", left.shape, right.shape)
        self._freeze(_left=left, _right=right, _rows=left.rows, _cols=left.cols)

    @classmethod
    def _from_trusted(cls, left: MatrixExpr, right: MatrixExpr) -> 'SumNode':
        """Builds a sum from operands whose shapes are already known to agree."""
        node = cls.__new__(cls)
        node._freeze(_left=left, _right=right, _rows=left.rows, _cols=left.cols)
        return node

    @property
    def left(self) -> MatrixExpr:
        return self._left

    @property
    def right(self) -> MatrixExpr:
        return self._right

    def __repr__(self):
        return f"SumNode(left={self._left!r}, right={self._right!r})"


def _require_expr(*operands):
    for operand in operands:
        if not isinstance(operand, MatrixExpr):
            raise TypeError(f"Expected a MatrixExpr operand, got {type(operand).__name__}.")


def make_leaf(matrix, label: str = None) -> LeafNode:
    """Wraps a concrete matrix (any 2-D array-like) as an expression leaf."""
    return LeafNode(matrix, label)


def multiply(a: MatrixExpr, b: MatrixExpr) -> ProductNode:
    """Builds the product ``a * b``; raises DimensionMismatch if a.cols != b.rows."""
    node = ProductNode(a, b)
    logger.debug("Built product %dx%d", node.rows, node.cols)
    return node


def add(a: MatrixExpr, b: MatrixExpr) -> SumNode:
    """Builds the sum ``a + b``; raises DimensionMismatch unless the shapes agree."""
    node = SumNode(a, b)
    logger.debug("Built sum %dx%d", node.rows, node.cols)
    return node


def dimensions(expr: MatrixExpr) -> Tuple[int, int]:
    """Returns the cached (rows, cols) of an expression."""
    _require_expr(expr)
    return expr.shape


def render(expr: MatrixExpr) -> str:
    """
    Produces a fully parenthesized textual form of the tree.

    Leaves render as ``[label]``, products as ``(L * R)`` and sums as
    ``(L + R)``, e.g. ``"([A] * [B])"``. Purely diagnostic.
    """
    if isinstance(expr, LeafNode):
        return f"[{expr.label}]"
    if isinstance(expr, ProductNode):
        return f"({render(expr.left)} * {render(expr.right)})"
    if isinstance(expr, SumNode):
        return f"({render(expr.left)} + {render(expr.right)})"
    raise TypeError(f"Cannot render object of type {type(expr).__name__}.")


def count_chain_operands(expr: MatrixExpr) -> int:
    """
    Counts the operands of the multiplication chain rooted at ``expr``.

    Only ProductNodes are descended into, so a sum or a leaf counts as a
    single operand.
    """
    if isinstance(expr, ProductNode):
        return count_chain_operands(expr.left) + count_chain_operands(expr.right)
    _require_expr(expr)
    return 1
