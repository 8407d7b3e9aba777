# --- Purpose: To inspect an expression tree and choose the cheapest multiplication order. ---

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .plan import MatrixExpr, LeafNode, ProductNode, SumNode, multiply, render

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class ChainTable:
    """
    Dynamic-programming tables for a single multiplication chain.

    ``costs[i, j]`` is the minimum number of scalar multiplications needed to
    compute the product of operands i..j (inclusive, 0-indexed), and
    ``splits[i, j]`` is the k at which that product is split into
    (i..k) * (k+1..j). Only the upper triangle (i <= j) is meaningful.
    """
    shapes: List[Tuple[int, int]]
    costs: np.ndarray
    splits: np.ndarray

    @property
    def size(self) -> int:
        return len(self.shapes)

    @property
    def optimal_cost(self) -> int:
        """Minimum cost of multiplying the whole chain."""
        return int(self.costs[0, self.size - 1])

    def __repr__(self):
        return f"ChainTable(n={self.size}, optimal_cost={self.optimal_cost})"


@dataclass
class ChainReport:
    """
    Analysis of one maximal multiplication chain found in a tree.
    Contains only metadata; nothing is multiplied to produce it.
    """
    operand_count: int
    shapes: List[Tuple[int, int]]
    naive_cost: int
    optimal_cost: int
    optimal_form: str

    @property
    def savings(self) -> int:
        """Scalar multiplications saved against left-to-right evaluation."""
        return self.naive_cost - self.optimal_cost

    def __repr__(self):
        return (f"ChainReport(n={self.operand_count}, naive={self.naive_cost}, "
                f"optimal={self.optimal_cost}, form={self.optimal_form})")


def flatten_chain(expr: MatrixExpr) -> List[MatrixExpr]:
    """
    Collects the operands of the multiplication chain rooted at ``expr``.

    Descends into ProductNodes only; sums and leaves are returned as
    operands, in left-to-right order. A non-product returns ``[expr]``.
    """
    operands = []
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, ProductNode):
            # right first so the left operand is visited first
            stack.append(node.right)
            stack.append(node.left)
        else:
            operands.append(node)
    return operands


def chain_cost_table(shapes: List[Tuple[int, int]]) -> ChainTable:
    """
    Fills the matrix-chain cost table for operands with the given shapes.

    N[i][i] = 0 and
    N[i][j] = min over k in [i, j) of N[i][k] + N[k+1][j] + rows(i)*cols(k)*cols(j),
    computed in order of increasing interval length. When several splits
    reach the minimum the leftmost one is recorded.
    """
    n = len(shapes)
    if n == 0:
        raise ValueError("A multiplication chain needs at least one operand.")

    row_dims = [int(shape[0]) for shape in shapes]
    col_dims = [int(shape[1]) for shape in shapes]

    # Python ints in an object array: costs can exceed the int64 range
    costs = np.zeros((n, n), dtype=object)
    splits = np.zeros((n, n), dtype=np.int64)

    for length in range(2, n + 1):
        for i in range(n - length + 1):
            j = i + length - 1
            best_cost = None
            best_split = i
            for k in range(i, j):
                cost = costs[i, k] + costs[k + 1, j] + row_dims[i] * col_dims[k] * col_dims[j]
                # strict comparison keeps the leftmost split on ties
                if best_cost is None or cost < best_cost:
                    best_cost = cost
                    best_split = k
            costs[i, j] = best_cost
            splits[i, j] = best_split

    return ChainTable(shapes=list(shapes), costs=costs, splits=splits)


def _backtrack(table: ChainTable, operands: List[MatrixExpr]) -> MatrixExpr:
    """Rebuilds the optimal tree from the split table using an explicit stack."""
    built = []
    stack = [(0, table.size - 1, False)]
    while stack:
        i, j, children_built = stack.pop()
        if i == j:
            built.append(operands[i])
        elif children_built:
            right = built.pop()
            left = built.pop()
            built.append(ProductNode._from_trusted(left, right))
        else:
            k = int(table.splits[i, j])
            stack.append((i, j, True))
            stack.append((k + 1, j, False))
            stack.append((i, k, False))
    return built.pop()


def arrange_optimal_chain(operands: List[MatrixExpr]) -> MatrixExpr:
    """
    Multiplies ``operands`` (left to right) in the parenthesization with the
    fewest scalar multiplications. The operands must already be adjacent-
    compatible, which holds for any list produced by flatten_chain().
    """
    operands = list(operands)
    if len(operands) == 1:
        return operands[0]

    table = chain_cost_table([operand.shape for operand in operands])
    logger.debug(f"Chain of {table.size} operands: optimal cost {table.optimal_cost}")
    return _backtrack(table, operands)


def optimize(expr: MatrixExpr) -> MatrixExpr:
    """
    Rewrites every maximal multiplication chain in ``expr`` into its cheapest
    parenthesization.

    Chains never cross a sum: each operand of a SumNode is optimized on its
    own. Subtrees that need no rewrite are reused as-is, and the input tree
    is never modified.
    """
    if isinstance(expr, LeafNode):
        return expr

    if isinstance(expr, SumNode):
        left = optimize(expr.left)
        right = optimize(expr.right)
        if left is expr.left and right is expr.right:
            return expr
        return SumNode._from_trusted(left, right)

    if isinstance(expr, ProductNode):
        operands = [optimize(operand) for operand in flatten_chain(expr)]
        return arrange_optimal_chain(operands)

    raise TypeError(f"Cannot optimize object of type {type(expr).__name__}.")


def multiplication_cost(expr: MatrixExpr) -> int:
    """
    Counts the scalar multiplications needed to evaluate ``expr`` exactly as
    it is parenthesized. Sums contribute no multiplications of their own.
    """
    if isinstance(expr, LeafNode):
        return 0
    if isinstance(expr, ProductNode):
        own = expr.left.rows * expr.left.cols * expr.right.cols
        return multiplication_cost(expr.left) + multiplication_cost(expr.right) + own
    if isinstance(expr, SumNode):
        return multiplication_cost(expr.left) + multiplication_cost(expr.right)
    raise TypeError(f"Cannot cost object of type {type(expr).__name__}.")


def naive_chain(operands: List[MatrixExpr]) -> MatrixExpr:
    """Multiplies ``operands`` strictly left to right: ((A * B) * C) * ..."""
    operands = list(operands)
    if not operands:
        raise ValueError("A multiplication chain needs at least one operand.")
    result = operands[0]
    for operand in operands[1:]:
        result = multiply(result, operand)
    return result


def _naive_chain_cost(shapes: List[Tuple[int, int]]) -> int:
    rows_0 = shapes[0][0]
    cost = 0
    for left, right in zip(shapes, shapes[1:]):
        cost += rows_0 * left[1] * right[1]
    return cost


def analyze(expr: MatrixExpr) -> List[ChainReport]:
    """
    Reports every maximal multiplication chain of ``expr``, outermost first,
    with its naive (left-to-right) and optimal costs. Costs cover the chain's
    own multiplications only, not those inside its operands.
    """
    logger.info("Analyzing multiplication chains...")
    reports = []
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, LeafNode):
            continue
        if isinstance(node, SumNode):
            stack.append(node.right)
            stack.append(node.left)
            continue
        if not isinstance(node, ProductNode):
            raise TypeError(f"Cannot analyze object of type {type(node).__name__}.")

        operands = flatten_chain(node)
        shapes = [operand.shape for operand in operands]
        table = chain_cost_table(shapes)
        report = ChainReport(
            operand_count=len(operands),
            shapes=shapes,
            naive_cost=_naive_chain_cost(shapes),
            optimal_cost=table.optimal_cost,
            optimal_form=render(_backtrack(table, operands)),
        )
        logger.info(f"Found chain: {report}")
        reports.append(report)
        stack.extend(reversed(operands))

    logger.info(f"Analysis complete: {len(reports)} chain(s)")
    return reports
