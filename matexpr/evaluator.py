# --- Purpose: Turns an expression tree into a concrete matrix. ---

import logging
from typing import Optional

import numpy as np

from . import backend
from . import config
from .optimizer import optimize as optimize_tree
from .observability import ExecutionProfiler, get_profiler
from .plan import MatrixExpr, LeafNode, ProductNode, SumNode

logger = logging.getLogger(__name__)


def evaluate(expr: MatrixExpr, optimize: Optional[bool] = None,
             profiler: Optional[ExecutionProfiler] = None) -> np.ndarray:
    """
    Evaluates ``expr`` bottom-up and returns the resulting matrix.

    Args:
        expr: The expression tree to evaluate
        optimize: Rewrite every multiplication chain into its cheapest
            parenthesization first. Defaults to config.OPTIMIZE_ON_EVALUATE.
        profiler: Receives one entry per kernel call. Defaults to the
            global profiler.

    Returns:
        The result as a numpy array. Evaluating a bare leaf returns its
        (read-only) stored matrix.
    """
    if optimize is None:
        optimize = config.OPTIMIZE_ON_EVALUATE
    if profiler is None:
        profiler = get_profiler()

    if optimize:
        # Whole chains are rewritten as a unit before anything is multiplied
        expr = optimize_tree(expr)
    logger.debug(f"Evaluating {expr!r}")
    return _evaluate(expr, profiler)


def _evaluate(expr: MatrixExpr, profiler: ExecutionProfiler) -> np.ndarray:
    if isinstance(expr, LeafNode):
        return expr.matrix

    if isinstance(expr, ProductNode):
        A = _evaluate(expr.left, profiler)
        B = _evaluate(expr.right, profiler)
        work = A.shape[0] * A.shape[1] * B.shape[1]
        with profiler.profile("matmul", left_shape=A.shape, right_shape=B.shape,
                              scalar_multiplications=work):
            return backend.matmul(A, B)

    if isinstance(expr, SumNode):
        A = _evaluate(expr.left, profiler)
        B = _evaluate(expr.right, profiler)
        with profiler.profile("add", left_shape=A.shape, right_shape=B.shape,
                              scalar_multiplications=0):
            return backend.add(A, B)

    raise TypeError(f"Cannot evaluate object of type {type(expr).__name__}.")
